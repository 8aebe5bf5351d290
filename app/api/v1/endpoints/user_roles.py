"""User-roles API: administer assignment rows directly by id."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_role_service,
    get_role_service_for_read,
    require_department_admin,
)
from app.application.services.role_service import RoleService
from app.core.limiter import limit_writes
from app.domain.exceptions import NotFoundError
from app.schemas.common import ApiResponse, ok
from app.schemas.user_role import UserRoleCreate, UserRoleResponse, UserRoleUpdate
from app.shared.context import ActorContext

router = APIRouter()


@router.get("", response_model=ApiResponse[list[UserRoleResponse]])
async def list_assignments(
    _: Annotated[object, Depends(require_department_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    """Every assignment, newest first, including inactive and expired rows."""
    assignments = await role_svc.list_assignments()
    return ok([UserRoleResponse.from_joined(a) for a in assignments])


@router.get("/{assignment_id}", response_model=ApiResponse[UserRoleResponse])
async def get_assignment(
    assignment_id: str,
    _: Annotated[object, Depends(require_department_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service_for_read)],
):
    assignment = await role_svc.get_assignment(assignment_id)
    if assignment is None:
        raise NotFoundError("assignment", assignment_id)
    return ok(UserRoleResponse.from_joined(assignment))


@router.post("", response_model=ApiResponse[UserRoleResponse], status_code=201)
@limit_writes
async def create_assignment(
    request: Request,
    body: UserRoleCreate,
    actor: Annotated[ActorContext, Depends(require_department_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service)],
):
    """Assign role to user (reactivates an inactive or expired row)."""
    assignment = await role_svc.assign_role_to_user(
        body.user_id,
        body.role_id,
        assigned_by=body.assigned_by or actor.user_id,
        expires_at=body.expires_at,
    )
    return ok(UserRoleResponse.from_result(assignment), message="Role assigned successfully")


@router.put("/{assignment_id}", response_model=ApiResponse[UserRoleResponse])
@limit_writes
async def update_assignment(
    request: Request,
    assignment_id: str,
    body: UserRoleUpdate,
    _: Annotated[object, Depends(require_department_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service)],
):
    """Update is_active and / or expires_at (null clears the expiry)."""
    updated = await role_svc.update_assignment(
        assignment_id,
        is_active=body.is_active,
        expires_at=body.expires_at,
        clear_expires_at=body.clear_expires_at,
    )
    return ok(UserRoleResponse.from_result(updated), message="Assignment updated successfully")


@router.delete("/{assignment_id}", response_model=ApiResponse[None])
@limit_writes
async def delete_assignment(
    request: Request,
    assignment_id: str,
    _: Annotated[object, Depends(require_department_admin)],
    role_svc: Annotated[RoleService, Depends(get_role_service)],
    hard: bool = False,
):
    """Soft delete by default; ?hard=true removes the row."""
    await role_svc.delete_assignment(assignment_id, hard=hard)
    return ok(message="Assignment removed successfully")
