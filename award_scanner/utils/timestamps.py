"""UTC timestamp helpers shared by persistence and the pipeline."""

from datetime import datetime, timezone
from typing import Optional

# Storage format for timestamps kept as text columns
STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return dt in UTC, treating naive datetimes as UTC already.

    Args:
        dt: Datetime to convert (or None)

    Returns:
        Timezone-aware UTC datetime, or None if dt is None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_for_storage(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ISO 8601 UTC text with a Z suffix."""
    dt = ensure_utc(dt)
    if dt is None:
        return None
    return dt.strftime(STORAGE_FORMAT)


def parse_from_storage(value: Optional[str]) -> Optional[datetime]:
    """Parse text written by format_for_storage.

    Values without microseconds are accepted as well.

    Raises:
        ValueError: If the text is not an ISO 8601 UTC timestamp
    """
    if not value:
        return None

    value = value.rstrip("Z")
    try:
        dt = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S")
    return dt.replace(tzinfo=timezone.utc)
