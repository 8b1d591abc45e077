"""Timestamp utilities for UTC handling and datetime parsing."""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    If the datetime is timezone-naive, it's treated as UTC.
    If the datetime has a different timezone, it's converted to UTC.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def window_start(now: datetime, window_seconds: int) -> datetime:
    """Return the earliest instant still inside a trailing time window.

    Args:
        now: Reference instant (the end of the window)
        window_seconds: Window length in seconds

    Returns:
        ``now - window_seconds`` in UTC
    """
    return ensure_utc(now) - timedelta(seconds=window_seconds)


def format_timestamp(dt: Optional[datetime], include_microseconds: bool = True) -> str:
    """Format a datetime as an ISO 8601 string with a 'Z' suffix.

    Args:
        dt: Datetime to format
        include_microseconds: Whether to keep sub-second precision

    Returns:
        ISO 8601 string (empty string for None)

    Example:
        >>> format_timestamp(datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc), False)
        '2025-11-04T12:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""

    if include_microseconds:
        return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a string produced by ``format_timestamp`` back to a UTC datetime.

    Args:
        value: ISO 8601 string with optional microseconds and 'Z' suffix

    Returns:
        Timezone-aware datetime in UTC, or None for empty input

    Raises:
        ValueError: If the string is not in a supported format
    """
    if not value:
        return None

    cleaned = value.strip().rstrip("Z")
    try:
        dt = datetime.strptime(cleaned, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(cleaned, "%Y-%m-%dT%H:%M:%S")
    return dt.replace(tzinfo=timezone.utc)
