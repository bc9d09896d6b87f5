"""UTC timestamp helpers.

Providers disagree on timestamp formats (trailing 'Z', milliseconds, bare
dates, unix epochs). Everything that leaves an adapter is an ISO-8601 string
produced by to_iso_string().
"""

from datetime import datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return dt in UTC, treating naive datetimes as already UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(value: Union[str, int, float, None]) -> Optional[datetime]:
    """Parse an ISO-8601 string (or unix epoch seconds) into a UTC datetime.

    Handles:
    - "2025-11-04T10:30:00Z" and "2025-11-04T10:30:00.123Z"
    - "2025-11-04T10:30:00+02:00"
    - "2025-11-04" (midnight UTC)
    - 1730716200 (epoch seconds, RemoteOK's "epoch" field when "date" is absent)

    Returns:
        UTC-aware datetime, or None if value is empty or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = value.strip()
    if not text:
        return None

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as an ISO-8601 UTC string with a 'Z' suffix."""
    if dt is None:
        return None
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")
