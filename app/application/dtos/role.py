"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.value_objects import PermissionSet


@dataclass(frozen=True)
class RoleResult:
    """Role read-model (result of get_by_id, get_by_name, list_all, create_role, etc.)."""

    id: str
    name: str
    description: str | None
    permissions: PermissionSet
    is_system_role: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class RoleChanges:
    """Partial update for a role. None means 'leave unchanged'."""

    name: str | None = None
    description: str | None = None
    permissions: PermissionSet | None = None

    def is_empty(self) -> bool:
        return self.name is None and self.description is None and self.permissions is None
