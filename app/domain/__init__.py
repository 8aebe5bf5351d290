"""Domain layer: enums, value objects, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import Action, Resource, SystemRoles
from app.domain.exceptions import (
    AlreadyAssignedError,
    DuplicateAssignmentError,
    DuplicateNameError,
    ForbiddenError,
    ImmutableSystemRoleError,
    NotFoundError,
    PermissionCheckError,
    RbacError,
    RoleInUseError,
    SystemRoleProtectedError,
    UnauthenticatedError,
    ValidationError,
)
from app.domain.value_objects import PermissionSet

__all__ = [
    # Enums
    "Action",
    "Resource",
    "SystemRoles",
    # Exceptions
    "AlreadyAssignedError",
    "DuplicateAssignmentError",
    "DuplicateNameError",
    "ForbiddenError",
    "ImmutableSystemRoleError",
    "NotFoundError",
    "PermissionCheckError",
    "RbacError",
    "RoleInUseError",
    "SystemRoleProtectedError",
    "UnauthenticatedError",
    "ValidationError",
    # Value objects
    "PermissionSet",
]
