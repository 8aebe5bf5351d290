"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.mixins import TimestampMixin, UuidMixin
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.models.user_role import UserRole

__all__ = [
    "Role",
    "TimestampMixin",
    "User",
    "UserRole",
    "UuidMixin",
]
