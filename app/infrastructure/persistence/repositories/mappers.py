"""ORM -> application DTO mapping shared by the RBAC repositories."""

from app.application.dtos.role import RoleResult
from app.application.dtos.user import UserResult
from app.application.dtos.user_role import UserRoleResult
from app.domain.value_objects import PermissionSet
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.models.user_role import UserRole
from app.shared.utils.datetime import ensure_utc


def role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to RoleResult; stored permissions are re-validated."""
    return RoleResult(
        id=r.id,
        name=r.name,
        description=r.description,
        permissions=PermissionSet.from_raw(r.permissions or {}),
        is_system_role=r.is_system_role,
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def user_to_result(u: User) -> UserResult:
    return UserResult(id=u.id, email=u.email, name=u.name, is_active=u.is_active)


def user_role_to_result(ur: UserRole) -> UserRoleResult:
    return UserRoleResult(
        id=ur.id,
        user_id=ur.user_id,
        role_id=ur.role_id,
        assigned_by=ur.assigned_by,
        assigned_at=ensure_utc(ur.assigned_at),
        expires_at=ensure_utc(ur.expires_at),
        is_active=ur.is_active,
        created_at=ur.created_at,
        updated_at=ur.updated_at,
    )
