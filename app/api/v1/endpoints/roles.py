"""Roles API: list, get (by id or name), create, update, delete, users holding a role."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_role_service,
    get_role_service_for_read,
    require_permission,
    require_platform_admin,
)
from app.application.services.role_service import RoleService
from app.core.limiter import limit_writes
from app.domain.enums import Action, Resource
from app.domain.exceptions import NotFoundError
from app.schemas.common import ApiResponse, ok
from app.schemas.role import RoleCreate, RoleResponse, RoleUpdate
from app.schemas.user_role import UserRoleResponse

router = APIRouter()

_can_read_roles = require_permission(Resource.ROLES, Action.READ)


@router.get("", response_model=ApiResponse[list[RoleResponse]])
async def list_roles(
    _: Annotated[object, Depends(_can_read_roles)],
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    """List all roles ordered by name."""
    roles = await role_svc.list_roles()
    return ok([RoleResponse.from_result(r) for r in roles])


@router.get("/name/{name}", response_model=ApiResponse[RoleResponse])
async def get_role_by_name(
    name: str,
    _: Annotated[object, Depends(_can_read_roles)],
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    """Get role by exact (case-sensitive) name."""
    role = await role_svc.get_role_by_name(name)
    if role is None:
        raise NotFoundError("role", name)
    return ok(RoleResponse.from_result(role))


@router.get("/{role_id}", response_model=ApiResponse[RoleResponse])
async def get_role(
    role_id: str,
    _: Annotated[object, Depends(_can_read_roles)],
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    """Get role by id."""
    role = await role_svc.get_role(role_id)
    if role is None:
        raise NotFoundError("role", role_id)
    return ok(RoleResponse.from_result(role))


@router.get("/{role_id}/users", response_model=ApiResponse[list[UserRoleResponse]])
async def list_role_users(
    role_id: str,
    _: Annotated[object, Depends(_can_read_roles)],
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    """Effective assignments of a role, joined with their users."""
    assignments = await role_svc.get_users_by_role(role_id)
    return ok([UserRoleResponse.from_joined(a) for a in assignments])


@router.post("", response_model=ApiResponse[RoleResponse], status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreate,
    _: Annotated[object, Depends(require_platform_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service)],
):
    """Create a role (never a system role through the API)."""
    created = await role_svc.create_role(
        body.name, body.permissions, body.description
    )
    return ok(RoleResponse.from_result(created), message="Role created successfully")


@router.put("/{role_id}", response_model=ApiResponse[RoleResponse])
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    _: Annotated[object, Depends(require_platform_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service)],
):
    """Partial update. System roles cannot be renamed."""
    updated = await role_svc.update_role(
        role_id,
        name=body.name,
        description=body.description,
        permissions=body.permissions,
    )
    return ok(RoleResponse.from_result(updated), message="Role updated successfully")


@router.delete("/{role_id}", response_model=ApiResponse[None])
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    _: Annotated[object, Depends(require_platform_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service)],
):
    """Delete a non-system role with no effective assignments."""
    await role_svc.delete_role(role_id)
    return ok(message="Role deleted successfully")
