"""Pydantic request/response schemas for the API."""

from app.schemas.common import ApiResponse, ok
from app.schemas.health import HealthResponse
from app.schemas.role import RoleCreate, RoleResponse, RoleUpdate
from app.schemas.user import UserSummary
from app.schemas.user_role import (
    RoleAssignRequest,
    UserRoleCreate,
    UserRoleResponse,
    UserRoleUpdate,
    UserWithRolesResponse,
)

__all__ = [
    "ApiResponse",
    "HealthResponse",
    "RoleAssignRequest",
    "RoleCreate",
    "RoleResponse",
    "RoleUpdate",
    "UserRoleCreate",
    "UserRoleResponse",
    "UserRoleUpdate",
    "UserSummary",
    "UserWithRolesResponse",
    "ok",
]
