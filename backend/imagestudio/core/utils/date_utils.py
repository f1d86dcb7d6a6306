"""
Date utility functions.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """
    Return timezone-aware UTC datetime.

    Replaces deprecated datetime.utcnow() which is scheduled for removal in Python 3.14.
    See: https://docs.python.org/3/library/datetime.html#datetime.datetime.utcnow
    """
    return datetime.now(UTC)


def utc_millis(moment: datetime | None = None) -> int:
    """Milliseconds since the epoch, used in payment references."""
    return int((moment or utcnow()).timestamp() * 1000)
