"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of:
        - datetime.now() - naive, uses local timezone
        - datetime.utcnow() - naive, deprecated in Python 3.12

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries and in API input to normalize
    expiry timestamps before they are compared with utc_now().

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)
