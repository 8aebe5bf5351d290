"""Role application service: role lifecycle and user-role assignment rules.

Enforces the business rules the stores do not: system-role protection,
deletion blocked while assignments are in effect, unique names, and the
assignment state machine (absent -> active -> inactive -> active -> deleted).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.application.dtos.role import RoleChanges, RoleResult
from app.application.dtos.user_role import (
    AssignmentWithUserAndRole,
    UserRoleResult,
    UserWithRoles,
)
from app.application.interfaces.repositories import (
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from app.application.services.system_roles import DEFAULT_SYSTEM_ROLES
from app.domain.exceptions import (
    AlreadyAssignedError,
    DuplicateAssignmentError,
    DuplicateNameError,
    ImmutableSystemRoleError,
    NotFoundError,
    RoleInUseError,
    SystemRoleProtectedError,
    ValidationError,
)
from app.domain.value_objects import PermissionSet
from app.shared.context import get_current_actor_id
from app.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

_MSG_NO_UPDATE_DATA = "No update data provided"


def _require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("Role name is required", field="name")
    return name


class RoleService:
    """Role lifecycle manager. Built per request from repositories sharing one session."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        user_role_repo: IUserRoleRepository,
        user_repo: IUserRepository,
    ) -> None:
        self._role_repo = role_repo
        self._user_role_repo = user_role_repo
        self._user_repo = user_repo

    # ---- Roles ----

    async def list_roles(self) -> list[RoleResult]:
        return await self._role_repo.list_all()

    async def get_role(self, role_id: str) -> RoleResult | None:
        return await self._role_repo.get_by_id(role_id)

    async def get_role_by_name(self, name: str) -> RoleResult | None:
        return await self._role_repo.get_by_name(name)

    async def create_role(
        self,
        name: str,
        permissions: Any,
        description: str | None = None,
        *,
        is_system_role: bool = False,
    ) -> RoleResult:
        """Create a role after validating name and permission structure.

        Raises:
            ValidationError: Empty name or malformed permissions.
            DuplicateNameError: A role with the same (case-sensitive) name exists.
        """
        name = _require_name(name)
        permission_set = PermissionSet.from_raw(permissions)
        # Pre-check for a clean error; the unique constraint on role.name is the authority.
        if await self._role_repo.get_by_name(name):
            raise DuplicateNameError(name)
        created = await self._role_repo.create_role(
            name,
            description,
            permission_set,
            is_system_role=is_system_role,
        )
        logger.info(
            "Role created: id=%s name=%r system=%s actor=%s",
            created.id,
            created.name,
            created.is_system_role,
            get_current_actor_id(),
        )
        return created

    async def update_role(
        self,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        permissions: Any = None,
    ) -> RoleResult:
        """Apply a partial update.

        Sending a system role's current name is not a rename and is accepted.

        Raises:
            NotFoundError: Role does not exist.
            ImmutableSystemRoleError: Renaming a system role.
            DuplicateNameError: New name belongs to another role.
            ValidationError: No fields, empty name, or malformed permissions.
        """
        if name is None and description is None and permissions is None:
            raise ValidationError(_MSG_NO_UPDATE_DATA)
        role = await self._role_repo.get_by_id(role_id)
        if role is None:
            raise NotFoundError("role", role_id)

        new_name: str | None = None
        if name is not None and name != role.name:
            if role.is_system_role:
                raise ImmutableSystemRoleError(role.name)
            new_name = _require_name(name)
            existing = await self._role_repo.get_by_name(new_name)
            if existing and existing.id != role_id:
                raise DuplicateNameError(new_name)

        changes = RoleChanges(
            name=new_name,
            description=description,
            permissions=PermissionSet.from_raw(permissions) if permissions is not None else None,
        )
        if changes.is_empty():
            return role
        updated = await self._role_repo.update_role(role_id, changes)
        if updated is None:
            raise NotFoundError("role", role_id)
        logger.info("Role updated: id=%s actor=%s", role_id, get_current_actor_id())
        return updated

    async def delete_role(self, role_id: str) -> None:
        """Hard delete a role that is not a system role and has no effective assignments.

        Inactive or expired assignments do not block deletion and are removed with the role.

        Raises:
            NotFoundError: Role does not exist.
            SystemRoleProtectedError: Role is a system role.
            RoleInUseError: At least one effective assignment references the role.
        """
        role = await self._role_repo.get_by_id(role_id)
        if role is None:
            raise NotFoundError("role", role_id)
        if role.is_system_role:
            raise SystemRoleProtectedError(role.name)
        active = await self._user_role_repo.count_active_by_role(role_id)
        if active > 0:
            raise RoleInUseError(role_id, active)
        if not await self._role_repo.delete_role(role_id):
            raise NotFoundError("role", role_id)
        logger.info("Role deleted: id=%s name=%r actor=%s", role_id, role.name, get_current_actor_id())

    async def ensure_system_roles(self) -> list[RoleResult]:
        """Create missing system roles with default permissions. Returns the ones created."""
        created: list[RoleResult] = []
        for role_name, data in DEFAULT_SYSTEM_ROLES.items():
            if await self._role_repo.get_by_name(role_name.value):
                continue
            created.append(
                await self.create_role(
                    role_name.value,
                    data["permissions"],
                    data["description"],
                    is_system_role=True,
                )
            )
        return created

    # ---- Assignments ----

    async def assign_role_to_user(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult:
        """Grant role to user.

        An existing inactive or expired row for (user, role) is reactivated in
        place (same id, expires_at replaced). An assignment already in effect is
        rejected.

        Raises:
            NotFoundError: user, role or assigner does not exist.
            ValidationError: expires_at is not in the future.
            AlreadyAssignedError: the user already has this role in effect.
        """
        if await self._user_repo.get_by_id(user_id) is None:
            raise NotFoundError("user", user_id)
        if await self._role_repo.get_by_id(role_id) is None:
            raise NotFoundError("role", role_id)
        if assigned_by is not None and await self._user_repo.get_by_id(assigned_by) is None:
            raise NotFoundError("assigner", assigned_by)
        expires_at = ensure_utc(expires_at)
        if expires_at is not None and expires_at <= utc_now():
            raise ValidationError("expires_at must be in the future", field="expires_at")

        existing = await self._user_role_repo.find_by_user_and_role(user_id, role_id)
        if existing is None:
            try:
                created = await self._user_role_repo.create(
                    user_id, role_id, assigned_by=assigned_by, expires_at=expires_at
                )
            except DuplicateAssignmentError:
                # Lost a race with a concurrent assign for the same pair.
                existing = await self._user_role_repo.find_by_user_and_role(user_id, role_id)
                if existing is None:
                    raise
            else:
                logger.info(
                    "Role assigned: user=%s role=%s assignment=%s actor=%s",
                    user_id,
                    role_id,
                    created.id,
                    get_current_actor_id(),
                )
                return created
        return await self._reactivate(existing, expires_at)

    async def _reactivate(
        self, existing: UserRoleResult, expires_at: datetime | None
    ) -> UserRoleResult:
        if existing.is_effective(utc_now()):
            raise AlreadyAssignedError(existing.user_id, existing.role_id)
        updated = await self._user_role_repo.update(
            existing.id,
            is_active=True,
            expires_at=expires_at,
            clear_expires_at=expires_at is None,
        )
        if updated is None:
            raise NotFoundError("assignment", existing.id)
        logger.info(
            "Role reactivated: user=%s role=%s assignment=%s actor=%s",
            existing.user_id,
            existing.role_id,
            existing.id,
            get_current_actor_id(),
        )
        return updated

    async def remove_role_from_user(
        self, user_id: str, role_id: str, *, hard: bool = False
    ) -> None:
        """Soft delete (default) or hard delete the (user, role) assignment.

        Raises:
            NotFoundError: No assignment exists for the pair.
        """
        existing = await self._user_role_repo.find_by_user_and_role(user_id, role_id)
        if existing is None:
            raise NotFoundError("assignment", f"{user_id}/{role_id}")
        if hard:
            removed = await self._user_role_repo.delete_by_user_and_role(user_id, role_id)
        else:
            removed = await self._user_role_repo.soft_delete(existing.id)
        if not removed:
            raise NotFoundError("assignment", f"{user_id}/{role_id}")
        logger.info(
            "Role removed: user=%s role=%s hard=%s actor=%s",
            user_id,
            role_id,
            hard,
            get_current_actor_id(),
        )

    async def get_assignment(self, assignment_id: str) -> AssignmentWithUserAndRole | None:
        return await self._user_role_repo.get_by_id(assignment_id)

    async def list_assignments(self) -> list[AssignmentWithUserAndRole]:
        return await self._user_role_repo.list_all()

    async def update_assignment(
        self,
        assignment_id: str,
        *,
        is_active: bool | None = None,
        expires_at: datetime | None = None,
        clear_expires_at: bool = False,
    ) -> UserRoleResult:
        """Update activation / expiry of an assignment.

        Raises:
            ValidationError: Nothing to update.
            NotFoundError: Assignment does not exist.
        """
        if is_active is None and expires_at is None and not clear_expires_at:
            raise ValidationError(_MSG_NO_UPDATE_DATA)
        updated = await self._user_role_repo.update(
            assignment_id,
            is_active=is_active,
            expires_at=ensure_utc(expires_at),
            clear_expires_at=clear_expires_at,
        )
        if updated is None:
            raise NotFoundError("assignment", assignment_id)
        return updated

    async def delete_assignment(self, assignment_id: str, *, hard: bool = False) -> None:
        if hard:
            removed = await self._user_role_repo.delete(assignment_id)
        else:
            removed = await self._user_role_repo.soft_delete(assignment_id)
        if not removed:
            raise NotFoundError("assignment", assignment_id)
        logger.info(
            "Assignment removed: id=%s hard=%s actor=%s",
            assignment_id,
            hard,
            get_current_actor_id(),
        )

    async def get_users_by_role(self, role_id: str) -> list[AssignmentWithUserAndRole]:
        """Return effective assignments for role joined with users.

        Raises:
            NotFoundError: Role does not exist.
        """
        if await self._role_repo.get_by_id(role_id) is None:
            raise NotFoundError("role", role_id)
        return await self._user_role_repo.list_by_role(role_id, include_inactive=False)

    async def get_user_with_roles(
        self, user_id: str, *, include_inactive: bool = False
    ) -> UserWithRoles | None:
        """Return user summary with assignments, or None if the user does not exist."""
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            return None
        roles = await self._user_role_repo.list_by_user(
            user_id, include_inactive=include_inactive
        )
        return UserWithRoles(user=user, roles=roles)
