"""
Datetime helpers shared across layers.

Every timestamp in the system is a timezone-aware UTC datetime.
Naive values (from clients or from databases that drop tzinfo)
are interpreted as UTC.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
