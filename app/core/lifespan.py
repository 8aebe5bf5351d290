"""Application lifespan: startup and shutdown.

Single place for startup/shutdown logic. Used by main.py; no business
logic here, only wiring (logging, optional system-role seeding, DB engine
dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.shared.logging import setup_logging

logger = logging.getLogger(__name__)


async def seed_system_roles() -> list[str]:
    """Create missing system roles in one transaction; return the names created."""
    from app.application.services.role_service import RoleService
    from app.infrastructure.persistence.database import get_session_factory
    from app.infrastructure.persistence.repositories import (
        RoleRepository,
        UserRepository,
        UserRoleRepository,
    )

    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            service = RoleService(
                RoleRepository(session),
                UserRoleRepository(session),
                UserRepository(session),
            )
            created = await service.ensure_system_roles()
    return [r.name for r in created]


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the SQL engine."""
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    if settings.seed_system_roles and settings.database_url:
        created = await seed_system_roles()
        if created:
            logger.info("Seeded system roles: %s", ", ".join(created))

    yield

    # ---- Shutdown ----
    from app.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.dispose_engine()
        logger.info("Database engine disposed")
