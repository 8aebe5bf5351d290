"""Shared utilities: datetime and generators."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_uuid

__all__ = [
    "generate_uuid",
    "utc_now",
    "ensure_utc",
]
