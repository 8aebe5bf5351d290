"""UserRole repository (assignment store): user-role links, effective filtering, joins."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.application.dtos.user_role import (
    AssignmentWithRole,
    AssignmentWithUserAndRole,
    UserRoleResult,
)
from app.domain.exceptions import DuplicateAssignmentError, NotFoundError
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.models.user_role import UserRole
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.mappers import (
    role_to_result,
    user_role_to_result,
    user_to_result,
)
from app.shared.utils.datetime import utc_now

Assigner = aliased(User, name="assigner")


def effective_assignment_clause(now: datetime) -> ColumnElement[bool]:
    """is_active AND (expires_at IS NULL OR expires_at > now)."""
    return and_(
        UserRole.is_active.is_(True),
        or_(UserRole.expires_at.is_(None), UserRole.expires_at > now),
    )


def _with_user_and_role(row: Any) -> AssignmentWithUserAndRole:
    ur, role, user, assigner = row
    return AssignmentWithUserAndRole(
        assignment=user_role_to_result(ur),
        role=role_to_result(role),
        user=user_to_result(user),
        assigner=user_to_result(assigner) if assigner is not None else None,
    )


class UserRoleRepository(BaseRepository[UserRole]):
    """Assignment store. At most one row per (user_id, role_id) (uq_user_role)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, UserRole)

    def _joined_select(self):
        return (
            select(UserRole, Role, User, Assigner)
            .join(Role, Role.id == UserRole.role_id)
            .join(User, User.id == UserRole.user_id)
            .outerjoin(Assigner, Assigner.id == UserRole.assigned_by)
        )

    async def create(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult:
        """Insert an assignment inside a SAVEPOINT.

        Raises:
            DuplicateAssignmentError: (user_id, role_id) row already exists.
            NotFoundError: A foreign key (user, role or assigner) does not resolve.
        """
        ur = UserRole(
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
            expires_at=expires_at,
            is_active=True,
        )
        try:
            async with self.db.begin_nested():
                created = await self.add(ur)
        except IntegrityError:
            if await self.find_by_user_and_role(user_id, role_id) is not None:
                raise DuplicateAssignmentError(user_id, role_id) from None
            raise await self._missing_reference(user_id, role_id, assigned_by) from None
        return user_role_to_result(created)

    async def _missing_reference(
        self, user_id: str, role_id: str, assigned_by: str | None
    ) -> NotFoundError:
        if await self.db.get(Role, role_id, populate_existing=True) is None:
            return NotFoundError("role", role_id)
        if (
            assigned_by is not None
            and await self.db.get(User, assigned_by, populate_existing=True) is None
        ):
            return NotFoundError("assigner", assigned_by)
        return NotFoundError("user", user_id)

    async def get_by_id(self, assignment_id: str) -> AssignmentWithUserAndRole | None:
        result = await self.db.execute(
            self._joined_select().where(UserRole.id == assignment_id)
        )
        row = result.one_or_none()
        return _with_user_and_role(row) if row else None

    async def find_by_user_and_role(
        self, user_id: str, role_id: str
    ) -> UserRoleResult | None:
        result = await self.db.execute(
            select(UserRole).where(
                UserRole.user_id == user_id, UserRole.role_id == role_id
            )
        )
        row = result.scalar_one_or_none()
        return user_role_to_result(row) if row else None

    async def list_by_user(
        self, user_id: str, *, include_inactive: bool = False
    ) -> list[AssignmentWithRole]:
        q = (
            select(UserRole, Role)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id)
        )
        if not include_inactive:
            q = q.where(effective_assignment_clause(utc_now()))
        q = q.order_by(Role.name.asc())
        result = await self.db.execute(q)
        return [
            AssignmentWithRole(assignment=user_role_to_result(ur), role=role_to_result(role))
            for ur, role in result.all()
        ]

    async def list_by_role(
        self, role_id: str, *, include_inactive: bool = False
    ) -> list[AssignmentWithUserAndRole]:
        q = self._joined_select().where(UserRole.role_id == role_id)
        if not include_inactive:
            q = q.where(effective_assignment_clause(utc_now()))
        q = q.order_by(UserRole.assigned_at.desc())
        result = await self.db.execute(q)
        return [_with_user_and_role(row) for row in result.all()]

    async def list_all(self) -> list[AssignmentWithUserAndRole]:
        result = await self.db.execute(
            self._joined_select().order_by(UserRole.assigned_at.desc())
        )
        return [_with_user_and_role(row) for row in result.all()]

    async def update(
        self,
        assignment_id: str,
        *,
        is_active: bool | None = None,
        expires_at: datetime | None = None,
        clear_expires_at: bool = False,
    ) -> UserRoleResult | None:
        """Update is_active / expires_at and touch updated_at. None if not found."""
        ur = await self.get_entity_by_id(assignment_id)
        if ur is None:
            return None
        if is_active is not None:
            ur.is_active = is_active
        if clear_expires_at:
            ur.expires_at = None
        elif expires_at is not None:
            ur.expires_at = expires_at
        ur.updated_at = utc_now()
        return user_role_to_result(await self.save(ur))

    async def soft_delete(self, assignment_id: str) -> bool:
        return await self.update(assignment_id, is_active=False) is not None

    async def delete(self, assignment_id: str) -> bool:
        result = await self.db.execute(delete(UserRole).where(UserRole.id == assignment_id))
        await self.db.flush()
        return result.rowcount > 0

    async def delete_by_user_and_role(self, user_id: str, role_id: str) -> bool:
        result = await self.db.execute(
            delete(UserRole).where(
                UserRole.user_id == user_id, UserRole.role_id == role_id
            )
        )
        await self.db.flush()
        return result.rowcount > 0

    async def count_active_by_role(self, role_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(UserRole)
            .where(UserRole.role_id == role_id, effective_assignment_clause(utc_now()))
        )
        return int(result.scalar_one())
