"""Application services: permission resolution and role lifecycle."""

from app.application.services.authorization_service import AuthorizationService
from app.application.services.role_service import RoleService
from app.application.services.system_roles import ADMIN_ROLE_NAMES, DEFAULT_SYSTEM_ROLES

__all__ = [
    "ADMIN_ROLE_NAMES",
    "AuthorizationService",
    "DEFAULT_SYSTEM_ROLES",
    "RoleService",
]
