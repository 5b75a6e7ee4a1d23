"""
utils/time_utils.py

Purpose: Time helpers

- Timezone-aware UTC timestamps for link records
- Timestamp formatting
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Current time as a timezone-aware UTC datetime.
    MongoDB keeps millisecond precision, so microseconds are truncated.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    """
    Formats a datetime as ISO-8601 with a trailing Z, or None.
    """
    if not dt:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat(timespec="milliseconds") + "Z"
