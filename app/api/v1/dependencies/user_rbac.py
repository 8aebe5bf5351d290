"""Services and current-actor dependencies (composition root)."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.authorization_service import AuthorizationService
from app.application.services.role_service import RoleService
from app.domain.exceptions import UnauthenticatedError
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)
from app.infrastructure.security.jwt import actor_from_token
from app.shared.context import ActorContext, set_current_actor

from .db import get_user_role_repo

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


async def get_authorization_service(
    user_role_repo: Annotated[UserRoleRepository, Depends(get_user_role_repo)],
) -> AuthorizationService:
    """Permission resolver. No cache: every check reads the assignment store."""
    return AuthorizationService(user_role_repo)


def _role_service(db: AsyncSession) -> RoleService:
    return RoleService(
        role_repo=RoleRepository(db),
        user_role_repo=UserRoleRepository(db),
        user_repo=UserRepository(db),
    )


async def get_role_service_for_read(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RoleService:
    """Role service for read endpoints."""
    return _role_service(db)


async def get_role_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleService:
    """Role service for writes; all stores share one transaction."""
    return _role_service(db)


async def get_current_actor_optional(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> ActorContext | None:
    """Return the actor from the bearer token if present and valid; else None."""
    if not credentials:
        return None
    try:
        actor = actor_from_token(credentials.credentials)
    except ValueError as e:
        logger.debug("Rejected bearer token: %s", e)
        return None
    set_current_actor(actor)
    request.state.actor = actor
    return actor


async def get_current_actor(
    actor: Annotated[ActorContext | None, Depends(get_current_actor_optional)],
) -> ActorContext:
    """Return the authenticated actor; raise 401 if missing or invalid."""
    if actor is None:
        raise UnauthenticatedError()
    return actor
