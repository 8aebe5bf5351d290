"""Application layer: interfaces, DTOs and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the repository interfaces.
"""

from app.application.interfaces import (
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from app.application.services import AuthorizationService, RoleService

__all__ = [
    "AuthorizationService",
    "IRoleRepository",
    "IUserRepository",
    "IUserRoleRepository",
    "RoleService",
]
