"""Domain value objects and shared value types."""

from app.domain.value_objects.permissions import PermissionSet

__all__ = [
    "PermissionSet",
]
