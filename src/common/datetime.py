"""Datetime utilities."""

from datetime import datetime, timezone


def ensure_utc(value: datetime) -> datetime:
    """Convert to UTC, treating naive datetimes as already UTC.

    SQLite hands back naive datetimes, so everything read from the store
    passes through here.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
