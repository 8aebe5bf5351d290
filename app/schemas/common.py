"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope: {success, data?, count?, message?, error?}."""

    success: bool = Field(default=True)
    data: T | None = None
    count: int | None = Field(default=None, description="Number of items in data (lists)")
    message: str | None = None
    error: str | None = None


def ok(data: T | None = None, *, message: str | None = None) -> ApiResponse[T]:
    """Wrap data in a success envelope; lists also get count."""
    count = len(data) if isinstance(data, list) else None
    return ApiResponse(success=True, data=data, count=count, message=message)
