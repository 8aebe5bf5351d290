"""Shared utilities: request actor context and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.context import (
    ActorContext,
    get_current_actor_id,
    get_request_id,
    set_current_actor,
)
from app.shared.utils import ensure_utc, generate_uuid, utc_now

__all__ = [
    "set_current_actor",
    "get_current_actor_id",
    "get_request_id",
    "ActorContext",
    "generate_uuid",
    "utc_now",
    "ensure_utc",
]
