"""
Wall-clock helpers.

The engine never reads the clock itself; callers take a timestamp here
and pass it in, so start and finish of a session share one epoch.
"""

import time
from datetime import date, datetime, tzinfo


def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def to_datetime(timestamp_ms: int, tz: tzinfo | None = None) -> datetime:
    """Convert epoch milliseconds to a datetime (local time when tz is None)."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)


def local_date(timestamp_ms: int, tz: tzinfo | None = None) -> date:
    """Calendar date of a timestamp in local time (or in tz)."""
    return to_datetime(timestamp_ms, tz).date()


def format_timestamp(timestamp_ms: int) -> str:
    """Format a timestamp as 'YYYY-MM-DD HH:MM' in local time."""
    return to_datetime(timestamp_ms).strftime("%Y-%m-%d %H:%M")


def format_duration(seconds: int) -> str:
    """Format a duration as M:SS, or H:MM:SS from one hour up."""
    hours, rem = divmod(max(0, int(seconds)), 3600)
    mins, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"
