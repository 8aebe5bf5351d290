"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain value objects only; no
infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.role import RoleChanges, RoleResult
    from app.application.dtos.user import UserResult
    from app.application.dtos.user_role import (
        AssignmentWithRole,
        AssignmentWithUserAndRole,
        UserRoleResult,
    )
    from app.domain.value_objects import PermissionSet


# Role store interface
class IRoleRepository(Protocol):
    """Protocol for the role store (DIP)."""

    async def create_role(
        self,
        name: str,
        description: str | None,
        permissions: PermissionSet,
        *,
        is_system_role: bool = False,
    ) -> RoleResult:
        """Create a role. Raises DuplicateNameError if the name is taken."""

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        """Return role by id."""

    async def get_by_name(self, name: str) -> RoleResult | None:
        """Return role by exact (case-sensitive) name."""

    async def list_all(self) -> list[RoleResult]:
        """Return all roles ordered by name."""

    async def update_role(self, role_id: str, changes: RoleChanges) -> RoleResult | None:
        """Apply changes; return updated role or None if not found."""

    async def delete_role(self, role_id: str) -> bool:
        """Hard delete role. Return True if a row was deleted.

        RoleInUseError when an effective assignment still references it.
        """


# Assignment store interface
class IUserRoleRepository(Protocol):
    """Protocol for the user-role assignment store (DIP).

    include_inactive=False keeps only effective rows: is_active and
    (expires_at is null or expires_at > now).
    """

    async def create(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult:
        """Insert an assignment. Raises DuplicateAssignmentError on (user, role) conflict."""

    async def get_by_id(self, assignment_id: str) -> AssignmentWithUserAndRole | None:
        """Return assignment with role, user and assigner."""

    async def find_by_user_and_role(
        self, user_id: str, role_id: str
    ) -> UserRoleResult | None:
        """Return the (user, role) row regardless of active state."""

    async def list_by_user(
        self, user_id: str, *, include_inactive: bool = False
    ) -> list[AssignmentWithRole]:
        """Return the user's assignments joined with roles."""

    async def list_by_role(
        self, role_id: str, *, include_inactive: bool = False
    ) -> list[AssignmentWithUserAndRole]:
        """Return the role's assignments joined with users."""

    async def list_all(self) -> list[AssignmentWithUserAndRole]:
        """Return every assignment (newest first)."""

    async def update(
        self,
        assignment_id: str,
        *,
        is_active: bool | None = None,
        expires_at: datetime | None = None,
        clear_expires_at: bool = False,
    ) -> UserRoleResult | None:
        """Update is_active / expires_at; touch updated_at. None if not found."""

    async def soft_delete(self, assignment_id: str) -> bool:
        """Set is_active = False. Return True if the row exists."""

    async def delete(self, assignment_id: str) -> bool:
        """Hard delete by id."""

    async def delete_by_user_and_role(self, user_id: str, role_id: str) -> bool:
        """Hard delete the (user, role) row."""

    async def count_active_by_role(self, role_id: str) -> int:
        """Count effective assignments referencing role."""


# Identity lookup (external collaborator)
class IUserRepository(Protocol):
    """Protocol for identity lookups used to validate user_id / assigned_by."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by id, or None."""
