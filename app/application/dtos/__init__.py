"""Application DTOs (no ORM dependency)."""

from app.application.dtos.role import RoleChanges, RoleResult
from app.application.dtos.user import UserResult
from app.application.dtos.user_role import (
    AssignmentWithRole,
    AssignmentWithUserAndRole,
    UserRoleResult,
    UserWithRoles,
)

__all__ = [
    "AssignmentWithRole",
    "AssignmentWithUserAndRole",
    "RoleChanges",
    "RoleResult",
    "UserResult",
    "UserRoleResult",
    "UserWithRoles",
]
