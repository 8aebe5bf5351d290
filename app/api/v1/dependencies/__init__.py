"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories, services, the
current actor and authorization guards. Routes depend only on these.
"""

from app.api.v1.dependencies.db import (
    get_db,
    get_db_transactional,
    get_user_role_repo,
)
from app.api.v1.dependencies.guards import (
    attach_permissions,
    require_all_permissions,
    require_any_permission,
    require_department_admin,
    require_legal_admin,
    require_permission,
    require_platform_admin,
    require_role,
)
from app.api.v1.dependencies.user_rbac import (
    get_authorization_service,
    get_current_actor,
    get_current_actor_optional,
    get_role_service,
    get_role_service_for_read,
)

__all__ = [
    "attach_permissions",
    "get_authorization_service",
    "get_current_actor",
    "get_current_actor_optional",
    "get_db",
    "get_db_transactional",
    "get_role_service",
    "get_role_service_for_read",
    "get_user_role_repo",
    "require_all_permissions",
    "require_any_permission",
    "require_department_admin",
    "require_legal_admin",
    "require_permission",
    "require_platform_admin",
    "require_role",
]
