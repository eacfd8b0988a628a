"""
Time helpers for persisted timestamps and locally generated identifiers.

All timestamps are UTC. Identifiers derived from the clock use epoch
milliseconds so they sort in creation order.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_millis(ts: Optional[datetime] = None) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Args:
        ts: Datetime to convert, defaults to now. Naive values are assumed UTC.

    Returns:
        Milliseconds since the Unix epoch
    """
    if ts is None:
        ts = utc_now()
    elif ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return int(ts.timestamp() * 1000)


def format_timestamp(ts: Optional[datetime] = None) -> str:
    """Format a datetime as an ISO-8601 string with millisecond precision and a Z suffix."""
    if ts is None:
        ts = utc_now()
    elif ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
