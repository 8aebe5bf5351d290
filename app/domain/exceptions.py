"""Domain exceptions for the RBAC core.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class RbacError(Exception):
    """Base exception for all RBAC application errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging. Presentation layer maps these to HTTP
    responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(RbacError):
    """Raised when input validation fails (missing field, malformed permission structure)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class DuplicateNameError(RbacError):
    """Raised when creating or renaming a role to a name that already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Role with name '{name}' already exists",
            "DUPLICATE_NAME",
            {"name": name},
        )


class NotFoundError(RbacError):
    """Raised when a referenced role, user, assigner or assignment does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        """Initialize with entity kind and id.

        Args:
            entity: Kind of entity (e.g. 'role', 'user', 'assigner', 'assignment').
            entity_id: The id that was not found.
        """
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            "RESOURCE_NOT_FOUND",
            {"entity": entity, "entity_id": entity_id},
        )
        self.entity = entity


class ImmutableSystemRoleError(RbacError):
    """Raised when attempting to rename a system role."""

    def __init__(self, role_name: str) -> None:
        super().__init__(
            f"System role '{role_name}' cannot be renamed",
            "IMMUTABLE_SYSTEM_ROLE",
            {"role_name": role_name},
        )


class SystemRoleProtectedError(RbacError):
    """Raised when attempting to delete a system role."""

    def __init__(self, role_name: str) -> None:
        super().__init__(
            f"Cannot delete system role '{role_name}'",
            "SYSTEM_ROLE_PROTECTED",
            {"role_name": role_name},
        )


class RoleInUseError(RbacError):
    """Raised when deleting a role that still has active user assignments."""

    def __init__(self, role_id: str, active_assignments: int) -> None:
        super().__init__(
            f"Cannot delete role with {active_assignments} active user assignments",
            "ROLE_IN_USE",
            {"role_id": role_id, "active_assignments": active_assignments},
        )


class AlreadyAssignedError(RbacError):
    """Raised when assigning a role the user already has in effect."""

    def __init__(self, user_id: str, role_id: str) -> None:
        super().__init__(
            "User already has this role assigned",
            "ALREADY_ASSIGNED",
            {"user_id": user_id, "role_id": role_id},
        )


class DuplicateAssignmentError(RbacError):
    """Raised by the assignment store when the (user_id, role_id) unique constraint fires.

    The lifecycle manager converts this into reactivation or AlreadyAssignedError.
    """

    def __init__(self, user_id: str, role_id: str) -> None:
        super().__init__(
            "Role already assigned to user",
            "DUPLICATE_ASSIGNMENT",
            {"user_id": user_id, "role_id": role_id},
        )


class UnauthenticatedError(RbacError):
    """Raised when no authenticated actor is present on the request."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ForbiddenError(RbacError):
    """Raised when the actor lacks the required role or permission."""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        *,
        resource: str | None = None,
        action: str | None = None,
        allowed_roles: list[str] | None = None,
        permissions: list[str] | None = None,
    ) -> None:
        """Initialize with a message and what was required.

        Args:
            message: Human-readable message.
            resource: Optional resource that was checked (permission guard).
            action: Optional action that was checked (permission guard).
            allowed_roles: Optional role names that would have been accepted (role guard).
            permissions: Optional resource:action labels wanted or missing (multi-permission guards).
        """
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        if allowed_roles:
            details["allowed_roles"] = allowed_roles
        if permissions:
            details["permissions"] = permissions
        super().__init__(message, "PERMISSION_DENIED", details)


class PermissionCheckError(RbacError):
    """Raised when resolving a permission or role check fails unexpectedly (e.g. store down)."""

    def __init__(self, message: str = "Permission check failed") -> None:
        super().__init__(message, "PERMISSION_CHECK_FAILED")


class SqlNotConfiguredError(RbacError):
    """Raised when an operation requires the database but DATABASE_URL is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
