"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.role_repo import RoleRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository
from app.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
    effective_assignment_clause,
)

__all__ = [
    "BaseRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
    "effective_assignment_clause",
]
