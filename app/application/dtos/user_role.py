"""DTOs for user-role assignments (no dependency on ORM).

Listing queries return composed types (assignment + role, and optionally the
user and assigner) so callers never need a second round-trip.
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.application.dtos.role import RoleResult
from app.application.dtos.user import UserResult


@dataclass(frozen=True)
class UserRoleResult:
    """Assignment read-model."""

    id: str
    user_id: str
    role_id: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_effective(self, now: datetime) -> bool:
        """Active and not expired at now (same predicate the store applies in SQL)."""
        return self.is_active and (self.expires_at is None or self.expires_at > now)


@dataclass(frozen=True)
class AssignmentWithRole:
    """Assignment joined with its role."""

    assignment: UserRoleResult
    role: RoleResult


@dataclass(frozen=True)
class AssignmentWithUserAndRole(AssignmentWithRole):
    """Assignment joined with its role, its user and (when set) the assigning user."""

    user: UserResult
    assigner: UserResult | None = None


@dataclass(frozen=True)
class UserWithRoles:
    """User summary with effective role assignments."""

    user: UserResult
    roles: list[AssignmentWithRole] = field(default_factory=list)
