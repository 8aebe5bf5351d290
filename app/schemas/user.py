"""User API schemas (identity summary, never credentials)."""

from pydantic import BaseModel

from app.application.dtos.user import UserResult


class UserSummary(BaseModel):
    """User summary embedded in assignment responses."""

    id: str
    email: str
    name: str | None = None
    is_active: bool = True

    @classmethod
    def from_result(cls, user: UserResult) -> "UserSummary":
        return cls(id=user.id, email=user.email, name=user.name, is_active=user.is_active)
