"""Bearer token encoding and verification.

Tokens are issued by the identity service; this core only verifies them and
turns the claims (sub, email, name) into an ActorContext. create_access_token
exists for scripts and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.shared.context import ActorContext


def create_access_token(
    subject: str,
    *,
    email: str | None = None,
    name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for subject (user id).

    Args:
        subject: User id placed in the sub claim.
        email: Optional email claim.
        name: Optional display name claim.
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    claims: dict[str, Any] = {"sub": subject, "exp": datetime.now(UTC) + expires_delta}
    if email is not None:
        claims["email"] = email
    if name is not None:
        claims["name"] = name
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Raises:
        ValueError: If token is invalid, expired, or missing exp / sub.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload


def actor_from_token(token: str) -> ActorContext:
    """Verify token and build the request actor. Raises ValueError when invalid."""
    payload = verify_token(token)
    return ActorContext(
        user_id=str(payload["sub"]),
        email=payload.get("email"),
        name=payload.get("name"),
    )
