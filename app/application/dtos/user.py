"""DTOs for the external user identity (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model used for identity lookups and assignment joins. No credentials."""

    id: str
    email: str
    name: str | None
    is_active: bool = True
