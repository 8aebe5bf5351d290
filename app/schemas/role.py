"""Role API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.application.dtos.role import RoleResult


class RoleCreate(BaseModel):
    """Request body for creating a role.

    permissions maps resource -> list of actions, e.g. {"documents": ["read"]}.
    Its structure is validated by the role service.
    """

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    permissions: dict[str, Any]


class RoleUpdate(BaseModel):
    """Request body for updating a role (partial). System roles keep their name."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    permissions: dict[str, Any] | None = None


class RoleResponse(BaseModel):
    """Role list/detail response."""

    id: str
    name: str
    description: str | None
    permissions: dict[str, list[str]]
    is_system_role: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_result(cls, role: RoleResult) -> "RoleResponse":
        return cls(
            id=role.id,
            name=role.name,
            description=role.description,
            permissions=role.permissions.to_dict(),
            is_system_role=role.is_system_role,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )
