"""User repository: read-only identity lookups. Interface methods return UserResult."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.mappers import user_to_result


class UserRepository(BaseRepository[User]):
    """Identity lookups used to validate user_id and assigned_by."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: str) -> UserResult | None:
        orm = await self.get_entity_by_id(user_id)
        return user_to_result(orm) if orm else None

    async def get_by_email(self, email: str) -> UserResult | None:
        result = await self.db.execute(select(User).where(User.email == email))
        row = result.scalar_one_or_none()
        return user_to_result(row) if row else None
