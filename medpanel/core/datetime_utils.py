"""
UTC-first datetime utilities.

- Internal processing: always timezone-aware datetimes in UTC
- API responses: ISO 8601 strings with 'Z' suffix
- Dashboard text: short human-readable dates
"""
from datetime import date, datetime, timezone
from typing import Union


def utc_now() -> datetime:
    """Get current datetime in UTC with timezone info."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """Format a datetime as ISO 8601 in UTC with 'Z' suffix."""
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_for_display(value: Union[date, datetime]) -> str:
    """
    Format a date for dashboard text, e.g. ``"Mar 05, 2025"``.

    Datetimes are converted to UTC first.
    """
    if isinstance(value, datetime):
        value = to_utc(value).date()
    return value.strftime("%b %d, %Y")
