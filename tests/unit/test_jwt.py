"""Bearer token verification tests (signed with the test SECRET_KEY)."""

from datetime import timedelta

import pytest
from jose import jwt

from app.infrastructure.security.jwt import actor_from_token, create_access_token, verify_token


def test_actor_from_token_carries_claims() -> None:
    token = create_access_token("user-1", email="a@example.com", name="A")
    actor = actor_from_token(token)
    assert actor.user_id == "user-1"
    assert actor.email == "a@example.com"
    assert actor.name == "A"


def test_expired_token_is_rejected() -> None:
    token = create_access_token("user-1", expires_delta=timedelta(seconds=-5))
    with pytest.raises(ValueError, match="Invalid token"):
        verify_token(token)


def test_token_signed_with_other_key_is_rejected() -> None:
    forged = jwt.encode({"sub": "user-1", "exp": 4102444800}, "some-other-key", algorithm="HS256")
    with pytest.raises(ValueError):
        verify_token(forged)


def test_garbage_token_is_rejected() -> None:
    with pytest.raises(ValueError):
        actor_from_token("not-a-jwt")
