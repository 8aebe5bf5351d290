"""User role endpoints: the caller's roles and permissions, roles of any user, assign / remove."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    attach_permissions,
    get_authorization_service,
    get_current_actor,
    get_role_service,
    get_role_service_for_read,
    require_department_admin,
    require_permission,
)
from app.application.services.authorization_service import AuthorizationService
from app.application.services.role_service import RoleService
from app.core.limiter import limit_writes
from app.domain.enums import Action, Resource
from app.domain.exceptions import NotFoundError
from app.domain.value_objects import PermissionSet
from app.schemas.common import ApiResponse, ok
from app.schemas.user_role import (
    RoleAssignRequest,
    UserRoleResponse,
    UserWithRolesResponse,
)
from app.shared.context import ActorContext

router = APIRouter()

_can_read_users = require_permission(Resource.USERS, Action.READ)


@router.get("/me/roles", response_model=ApiResponse[list[UserRoleResponse]])
async def list_my_roles(
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Effective role assignments of the authenticated caller."""
    assignments = await auth_svc.get_user_roles(actor.user_id)
    return ok([UserRoleResponse.from_joined(a) for a in assignments])


@router.get("/me/permissions", response_model=ApiResponse[dict[str, list[str]]])
async def get_my_permissions(
    request: Request,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    _: Annotated[PermissionSet | None, Depends(attach_permissions)],
):
    """Merged permissions of the caller, as attached to the request (empty when none)."""
    permissions: PermissionSet | None = request.state.permissions
    return ok((permissions or PermissionSet.empty()).to_dict())


@router.get("/{user_id}/roles", response_model=ApiResponse[list[UserRoleResponse]])
async def list_user_roles(
    user_id: str,
    _: Annotated[object, Depends(_can_read_users)],
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    """Effective role assignments of a user. 404 if the user does not exist."""
    user_with_roles = await role_svc.get_user_with_roles(user_id)
    if user_with_roles is None:
        raise NotFoundError("user", user_id)
    return ok([UserRoleResponse.from_joined(a) for a in user_with_roles.roles])


@router.get("/{user_id}/with-roles", response_model=ApiResponse[UserWithRolesResponse])
async def get_user_with_roles(
    user_id: str,
    _: Annotated[object, Depends(_can_read_users)],
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    """User summary with effective role assignments."""
    user_with_roles = await role_svc.get_user_with_roles(user_id)
    if user_with_roles is None:
        raise NotFoundError("user", user_id)
    return ok(UserWithRolesResponse.from_user_with_roles(user_with_roles))


@router.get("/{user_id}/permissions", response_model=ApiResponse[dict[str, list[str]]])
async def get_user_permissions(
    user_id: str,
    _: Annotated[object, Depends(_can_read_users)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Merged permission structure of a user (empty when the user has no roles)."""
    permissions = await auth_svc.get_user_permissions(user_id)
    return ok(permissions.to_dict())


@router.post(
    "/{user_id}/roles",
    response_model=ApiResponse[UserRoleResponse],
    status_code=201,
)
@limit_writes
async def assign_role_to_user(
    request: Request,
    user_id: str,
    body: RoleAssignRequest,
    actor: Annotated[ActorContext, Depends(require_department_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service)],
):
    """Assign a role to a user. assigned_by defaults to the caller."""
    assignment = await role_svc.assign_role_to_user(
        user_id,
        body.role_id,
        assigned_by=body.assigned_by or actor.user_id,
        expires_at=body.expires_at,
    )
    return ok(UserRoleResponse.from_result(assignment), message="Role assigned successfully")


@router.delete("/{user_id}/roles/{role_id}", response_model=ApiResponse[None])
@limit_writes
async def remove_role_from_user(
    request: Request,
    user_id: str,
    role_id: str,
    _: Annotated[object, Depends(require_department_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    hard: bool = False,
):
    """Remove a role from a user: soft (deactivate) by default, hard delete with ?hard=true."""
    await role_svc.remove_role_from_user(user_id, role_id, hard=hard)
    return ok(message="Role removed successfully")
