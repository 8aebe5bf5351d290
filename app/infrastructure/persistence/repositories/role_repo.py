"""Role repository (role store). Read methods return RoleResult DTOs.

Permission structures are validated into PermissionSet on the way in and on
the way out; the unique constraint uq_role_name is the authority on names.
"""

from __future__ import annotations

from sqlalchemy import delete, not_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import RoleChanges, RoleResult
from app.domain.exceptions import DuplicateNameError, RoleInUseError
from app.domain.value_objects import PermissionSet
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user_role import UserRole
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.mappers import role_to_result
from app.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
    effective_assignment_clause,
)
from app.shared.utils.datetime import utc_now


class RoleRepository(BaseRepository[Role]):
    """Role repository. Names are globally unique and case-sensitive."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def create_role(
        self,
        name: str,
        description: str | None,
        permissions: PermissionSet,
        *,
        is_system_role: bool = False,
    ) -> RoleResult:
        """Create a role; return read-model DTO. DuplicateNameError on name conflict."""
        permission_set = PermissionSet.from_raw(permissions)
        role = Role(
            name=name,
            description=description,
            permissions=permission_set.to_dict(),
            is_system_role=is_system_role,
        )
        try:
            async with self.db.begin_nested():
                created = await self.add(role)
        except IntegrityError:
            raise DuplicateNameError(name) from None
        return role_to_result(created)

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        orm = await self.get_entity_by_id(role_id)
        return role_to_result(orm) if orm else None

    async def get_by_name(self, name: str) -> RoleResult | None:
        result = await self.db.execute(select(Role).where(Role.name == name))
        row = result.scalar_one_or_none()
        return role_to_result(row) if row else None

    async def list_all(self) -> list[RoleResult]:
        result = await self.db.execute(select(Role).order_by(Role.name.asc()))
        return [role_to_result(r) for r in result.scalars().all()]

    async def update_role(self, role_id: str, changes: RoleChanges) -> RoleResult | None:
        """Apply changes; return updated DTO or None if not found."""
        role = await self.get_entity_by_id(role_id)
        if role is None:
            return None
        if changes.name is not None:
            role.name = changes.name
        if changes.description is not None:
            role.description = changes.description
        if changes.permissions is not None:
            role.permissions = PermissionSet.from_raw(changes.permissions).to_dict()
        role.updated_at = utc_now()
        try:
            async with self.db.begin_nested():
                updated = await self.save(role)
        except IntegrityError:
            raise DuplicateNameError(changes.name or role_id) from None
        return role_to_result(updated)

    async def delete_role(self, role_id: str) -> bool:
        """Hard delete role together with its non-effective assignments.

        Callers check UserRoleRepository.count_active_by_role first.

        Raises:
            RoleInUseError: An effective assignment committed concurrently
                made the RESTRICT foreign key fail the delete.
        """
        try:
            async with self.db.begin_nested():
                await self.db.execute(
                    delete(UserRole).where(
                        UserRole.role_id == role_id,
                        not_(effective_assignment_clause(utc_now())),
                    )
                )
                result = await self.db.execute(delete(Role).where(Role.id == role_id))
                await self.db.flush()
        except IntegrityError:
            active = await UserRoleRepository(self.db).count_active_by_role(role_id)
            raise RoleInUseError(role_id, active) from None
        return result.rowcount > 0
