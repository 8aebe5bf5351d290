"""User-role assignment API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.application.dtos.user import UserResult
from app.application.dtos.user_role import (
    AssignmentWithRole,
    AssignmentWithUserAndRole,
    UserRoleResult,
    UserWithRoles,
)
from app.schemas.role import RoleResponse
from app.schemas.user import UserSummary


class RoleAssignRequest(BaseModel):
    """Request body for POST /users/{user_id}/roles. assigned_by defaults to the caller."""

    role_id: str = Field(..., min_length=1)
    assigned_by: str | None = None
    expires_at: datetime | None = None


class UserRoleCreate(BaseModel):
    """Request body for POST /user-roles."""

    user_id: str = Field(..., min_length=1)
    role_id: str = Field(..., min_length=1)
    assigned_by: str | None = None
    expires_at: datetime | None = None


class UserRoleUpdate(BaseModel):
    """Request body for PUT /user-roles/{id}. Explicit expires_at: null clears the expiry."""

    is_active: bool | None = None
    expires_at: datetime | None = None

    @property
    def clear_expires_at(self) -> bool:
        return "expires_at" in self.model_fields_set and self.expires_at is None


class UserRoleResponse(BaseModel):
    """Assignment response, optionally with its role, user and assigner."""

    id: str
    user_id: str
    role_id: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    role: RoleResponse | None = None
    user: UserSummary | None = None
    assigner: UserSummary | None = None

    @classmethod
    def from_result(cls, assignment: UserRoleResult) -> "UserRoleResponse":
        return cls(
            id=assignment.id,
            user_id=assignment.user_id,
            role_id=assignment.role_id,
            assigned_by=assignment.assigned_by,
            assigned_at=assignment.assigned_at,
            expires_at=assignment.expires_at,
            is_active=assignment.is_active,
            created_at=assignment.created_at,
            updated_at=assignment.updated_at,
        )

    @classmethod
    def from_joined(
        cls, joined: AssignmentWithRole | AssignmentWithUserAndRole
    ) -> "UserRoleResponse":
        """Build from a joined listing row (role always, user / assigner when present)."""
        response = cls.from_result(joined.assignment)
        response.role = RoleResponse.from_result(joined.role)
        if isinstance(joined, AssignmentWithUserAndRole):
            response.user = UserSummary.from_result(joined.user)
            if joined.assigner is not None:
                response.assigner = UserSummary.from_result(joined.assigner)
        return response


class UserWithRolesResponse(UserSummary):
    """User summary plus role assignments."""

    roles: list[UserRoleResponse] = Field(default_factory=list)

    @classmethod
    def from_user_with_roles(cls, value: UserWithRoles) -> "UserWithRolesResponse":
        user: UserResult = value.user
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            is_active=user.is_active,
            roles=[UserRoleResponse.from_joined(a) for a in value.roles],
        )
