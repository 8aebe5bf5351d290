"""Authorization service: resolves a user's effective roles and merged permissions.

Every check re-reads the assignment store; nothing is cached, so a revoked or
expired assignment stops granting access on the very next request.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.application.dtos.user_role import AssignmentWithRole
from app.application.interfaces.repositories import IUserRoleRepository
from app.domain.enums import Action, Resource
from app.domain.exceptions import ForbiddenError
from app.domain.value_objects import PermissionSet


def _role_names(names: Iterable[str]) -> set[str]:
    return {str(getattr(n, "value", n)) for n in names}


class AuthorizationService:
    """Permission resolver: merge (union) of permissions across effective assignments."""

    def __init__(self, user_role_repo: IUserRoleRepository) -> None:
        self.user_role_repo = user_role_repo

    async def get_user_roles(self, user_id: str) -> list[AssignmentWithRole]:
        """Return effective (active, not expired) assignments with their roles."""
        return await self.user_role_repo.list_by_user(user_id, include_inactive=False)

    async def get_user_permissions(self, user_id: str) -> PermissionSet:
        """Return the merged permission structure; empty when the user has no roles."""
        assignments = await self.get_user_roles(user_id)
        return PermissionSet.merge(a.role.permissions for a in assignments)

    async def has_permission(
        self,
        user_id: str,
        resource: Resource | str,
        action: Action | str,
    ) -> bool:
        """Return True if any effective role grants action on resource."""
        for assignment in await self.get_user_roles(user_id):
            if assignment.role.permissions.allows(resource, action):
                return True
        return False

    async def has_role(self, user_id: str, role_names: Iterable[str]) -> bool:
        """Return True if any effective assignment's role name is in role_names."""
        wanted = _role_names(role_names)
        if not wanted:
            return False
        return any(a.role.name in wanted for a in await self.get_user_roles(user_id))

    async def require_permission(
        self,
        user_id: str,
        resource: Resource | str,
        action: Action | str,
    ) -> None:
        """Raise ForbiddenError if user lacks resource:action."""
        if not await self.has_permission(user_id, resource, action):
            r = getattr(resource, "value", resource)
            a = getattr(action, "value", action)
            raise ForbiddenError(
                f"You do not have permission to {a} {r} ({r}:{a})",
                resource=r,
                action=a,
            )

    async def require_role(self, user_id: str, role_names: Iterable[str]) -> None:
        """Raise ForbiddenError if user has none of role_names."""
        allowed = sorted(_role_names(role_names))
        if not await self.has_role(user_id, allowed):
            raise ForbiddenError(
                "This action requires one of the following roles: " + ", ".join(allowed),
                allowed_roles=allowed,
            )
