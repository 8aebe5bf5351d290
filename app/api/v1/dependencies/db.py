"""DB session and repository dependencies (composition root).

Read endpoints share one non-committing session per request (get_db);
write endpoints run in one transaction (get_db_transactional).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import UserRoleRepository


async def get_user_role_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRoleRepository:
    """Assignment store for reads (permission resolution, listings)."""
    return UserRoleRepository(db)


__all__ = [
    "get_db",
    "get_db_transactional",
    "get_user_role_repo",
]
