"""Authorization guards: FastAPI dependency factories run before a handler.

Each factory is parameterized once at route registration and is stateless per
request. Without an authenticated actor a guard raises 401 before anything
else is resolved; a failed check raises 403; an unexpected failure while
resolving roles or permissions raises 500 (PermissionCheckError) and never
allows or denies.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Annotated, TypeVar

from fastapi import Depends, Request

from app.application.services.authorization_service import AuthorizationService
from app.application.services.system_roles import ADMIN_ROLE_NAMES
from app.domain.enums import Action, Resource, SystemRoles
from app.domain.exceptions import (
    ForbiddenError,
    PermissionCheckError,
    UnauthenticatedError,
)
from app.domain.value_objects import PermissionSet
from app.shared.context import ActorContext

from .user_rbac import (
    get_authorization_service,
    get_current_actor,
    get_current_actor_optional,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

PermissionPair = tuple[Resource | str, Action | str]


def _value(item: object) -> str:
    return str(getattr(item, "value", item))


def _pair_label(pair: PermissionPair) -> str:
    return f"{_value(pair[0])}:{_value(pair[1])}"


async def _checked(check: Awaitable[T], what: str, actor: ActorContext) -> T:
    """Await an authorization check.

    Only allow/deny outcomes (401, 403) pass through; any other failure, domain
    errors from malformed stored roles included, becomes PermissionCheckError.
    """
    try:
        return await check
    except (ForbiddenError, UnauthenticatedError):
        raise
    except Exception as e:
        logger.exception("Authorization check failed: %s user=%s", what, actor.user_id)
        raise PermissionCheckError() from e


def require_role(*role_names: SystemRoles | str) -> Callable[..., Awaitable[ActorContext]]:
    """Dependency factory: require an effective assignment of one of role_names."""
    allowed = [_value(n) for n in role_names]

    async def _require(
        actor: Annotated[ActorContext, Depends(get_current_actor)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> ActorContext:
        await _checked(
            auth_svc.require_role(actor.user_id, allowed),
            f"role in {allowed}",
            actor,
        )
        return actor

    return _require


def require_permission(
    resource: Resource | str, action: Action | str
) -> Callable[..., Awaitable[ActorContext]]:
    """Dependency factory: require that the actor's merged permissions grant resource:action."""

    async def _require(
        actor: Annotated[ActorContext, Depends(get_current_actor)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> ActorContext:
        await _checked(
            auth_svc.require_permission(actor.user_id, resource, action),
            _pair_label((resource, action)),
            actor,
        )
        return actor

    return _require


def require_any_permission(
    pairs: Iterable[PermissionPair],
) -> Callable[..., Awaitable[ActorContext]]:
    """Dependency factory: require at least one of the (resource, action) pairs."""
    wanted = list(pairs)
    labels = [_pair_label(p) for p in wanted]

    async def _require(
        actor: Annotated[ActorContext, Depends(get_current_actor)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> ActorContext:
        permissions = await _checked(
            auth_svc.get_user_permissions(actor.user_id), f"any of {labels}", actor
        )
        if not any(permissions.allows(r, a) for r, a in wanted):
            raise ForbiddenError(
                "You need at least one of the following permissions: " + ", ".join(labels),
                permissions=labels,
            )
        return actor

    return _require


def require_all_permissions(
    pairs: Iterable[PermissionPair],
) -> Callable[..., Awaitable[ActorContext]]:
    """Dependency factory: require every one of the (resource, action) pairs."""
    wanted = list(pairs)

    async def _require(
        actor: Annotated[ActorContext, Depends(get_current_actor)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> ActorContext:
        permissions = await _checked(
            auth_svc.get_user_permissions(actor.user_id),
            f"all of {[_pair_label(p) for p in wanted]}",
            actor,
        )
        missing = [_pair_label((r, a)) for r, a in wanted if not permissions.allows(r, a)]
        if missing:
            raise ForbiddenError(
                "Missing required permissions: " + ", ".join(missing),
                permissions=missing,
            )
        return actor

    return _require


async def attach_permissions(
    request: Request,
    actor: Annotated[ActorContext | None, Depends(get_current_actor_optional)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> PermissionSet | None:
    """Non-blocking: put the actor's merged permissions on request.state.permissions.

    Nothing is attached (None) when there is no actor or resolution fails;
    failures are logged, never raised.
    """
    request.state.permissions = None
    if actor is None:
        return None
    try:
        permissions = await auth_svc.get_user_permissions(actor.user_id)
    except Exception:
        logger.exception("Could not attach permissions for user=%s", actor.user_id)
        return None
    request.state.permissions = permissions
    return permissions


# Convenience guards
require_platform_admin = require_role(SystemRoles.PLATFORM_ADMIN)
require_legal_admin = require_role(SystemRoles.PLATFORM_ADMIN, SystemRoles.LEGAL_ADMIN)
require_department_admin = require_role(*ADMIN_ROLE_NAMES)
