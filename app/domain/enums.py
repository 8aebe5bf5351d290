"""Domain enumerations for RBAC.

Enums represent fixed sets of domain values: the resources that can be
protected, the actions that can be granted on them, and the names of the
seeded system roles.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for validation or error messages)."""
        return [member.value for member in cls]


class Resource(_ValuesMixin, str, Enum):
    """Protected resource. Keys of a role's permission structure."""

    USERS = "users"
    ROLES = "roles"
    DOCUMENTS = "documents"
    TEMPLATES = "templates"
    CLAUSES = "clauses"
    WORKFLOWS = "workflows"
    ANALYTICS = "analytics"
    SYSTEM = "system"
    AUDIT = "audit"


class Action(_ValuesMixin, str, Enum):
    """Action that a role may perform on a resource."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    APPROVE = "approve"
    EXECUTE = "execute"
    EXPORT = "export"
    CONFIGURE = "configure"
    BACKUP = "backup"
    RESTORE = "restore"
    USE = "use"


class SystemRoles(_ValuesMixin, str, Enum):
    """Well-known role names. Seeded as system roles (not renamable, not deletable)."""

    PLATFORM_ADMIN = "Platform Administrator"
    LEGAL_ADMIN = "Legal Admin"
    DEPARTMENT_ADMIN = "Department Admin"
    DEPARTMENT_USER = "Department User"
