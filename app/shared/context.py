"""Request context management using contextvars.

Provides async-safe storage for the authenticated actor of the current
request. Populated by the authentication dependency after the bearer token
has been decoded; read by services that log who performed a change.
Also carries the request id set by RequestIDMiddleware for log lines.

Usage:
    set_current_actor(ActorContext(user_id="u-1", email="a@example.com"))
    actor_id = get_current_actor_id()
"""

from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass(frozen=True)
class ActorContext:
    """Immutable snapshot of the authenticated caller (identity owned upstream)."""

    user_id: str
    email: str | None = None
    name: str | None = None


_current_actor: ContextVar[ActorContext | None] = ContextVar(
    "current_actor", default=None
)


def set_current_actor(actor: ActorContext | None) -> None:
    """Set the current actor for this request (None clears it).

    Context is scoped to the current async task.
    """
    _current_actor.set(actor)


def get_current_actor_id() -> str | None:
    """Return the current actor's user id, or None if not authenticated."""
    actor = _current_actor.get()
    return actor.user_id if actor else None


_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> Token[str | None]:
    """Set the request id for log correlation; returns the token for reset."""
    return _request_id.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    _request_id.reset(token)


def get_request_id() -> str | None:
    return _request_id.get()
