"""Default system roles and their permission structures.

Seeded by RoleService.ensure_system_roles (startup or scripts/seed_rbac.py).
Once seeded, names are immutable and the roles cannot be deleted; their
permissions can still be edited by a Platform Administrator.
"""

from typing import TypedDict

from app.domain.enums import Action, Resource, SystemRoles


class RoleData(TypedDict):
    """Role configuration for default roles."""

    description: str
    permissions: dict[str, list[str]]


_ALL_ACTIONS = Action.values()
_CRUD = ["create", "read", "update", "delete"]

DEFAULT_SYSTEM_ROLES: dict[SystemRoles, RoleData] = {
    SystemRoles.PLATFORM_ADMIN: {
        "description": "Full platform access, including roles and system configuration",
        "permissions": {resource: list(_ALL_ACTIONS) for resource in Resource.values()},
    },
    SystemRoles.LEGAL_ADMIN: {
        "description": "Manages legal content, workflows and department users",
        "permissions": {
            "users": ["create", "read", "update"],
            "roles": ["read"],
            "documents": [*_CRUD, "publish", "approve", "export"],
            "templates": [*_CRUD, "publish", "approve", "use"],
            "clauses": [*_CRUD, "publish", "approve", "use"],
            "workflows": [*_CRUD, "execute"],
            "analytics": ["read", "export"],
            "audit": ["read"],
        },
    },
    SystemRoles.DEPARTMENT_ADMIN: {
        "description": "Manages a department's users and documents",
        "permissions": {
            "users": ["read", "update"],
            "roles": ["read"],
            "documents": [*_CRUD, "approve", "export"],
            "templates": ["read", "use"],
            "clauses": ["read", "use"],
            "workflows": ["read", "execute"],
            "analytics": ["read"],
        },
    },
    SystemRoles.DEPARTMENT_USER: {
        "description": "Creates and edits documents from approved templates",
        "permissions": {
            "documents": ["create", "read", "update"],
            "templates": ["read", "use"],
            "clauses": ["read", "use"],
            "workflows": ["read", "execute"],
        },
    },
}

# Role guards used by administrative endpoints.
ADMIN_ROLE_NAMES: list[str] = [
    SystemRoles.PLATFORM_ADMIN.value,
    SystemRoles.LEGAL_ADMIN.value,
    SystemRoles.DEPARTMENT_ADMIN.value,
]
