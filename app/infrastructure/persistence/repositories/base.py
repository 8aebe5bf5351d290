"""Base repository: generic get, create and update on one ORM model."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_entity_by_id, add and save.

    Subclasses expose DTO-returning read methods and keep ORM entities internal.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_entity_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single ORM record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record; server defaults are loaded back."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def save(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

