"""Date/time parsing helpers.

Provides tolerant ISO 8601 parsing, including support for 'Z' suffix
normalization to '+00:00', plus the UTC display and date-key helpers
used by the markdown formatter.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Union

DateLike = Union[datetime, str]


def _replace_z_suffix(value: str) -> str:
    if value.endswith("Z"):
        return value[:-1] + "+00:00"
    return value


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO 8601 string into a timezone-aware datetime.

    Accepts values ending with 'Z' by converting to '+00:00'. Naive
    values are taken as UTC.

    Raises:
        ValueError: If the timestamp cannot be parsed.
    """

    normalized = _replace_z_suffix(value.strip())
    dt = datetime.fromisoformat(normalized)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_utc(value: DateLike) -> datetime:
    """Return `value` as an aware datetime in UTC."""

    dt = parse_iso8601(value) if isinstance(value, str) else value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_date_key(value: DateLike) -> str:
    """Convert a timestamp to its UTC calendar date, `YYYY-MM-DD`.

    Example:
        >>> to_date_key("2024-12-01T23:30:00-05:00")
        '2024-12-02'
    """

    return to_utc(value).date().isoformat()


def to_iso_z(value: DateLike) -> str:
    """Render a timestamp as UTC ISO 8601 with millisecond precision and 'Z'.

    Example:
        >>> to_iso_z("2024-12-01T15:00:00+00:00")
        '2024-12-01T15:00:00.000Z'
    """

    return to_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_display_date(value: DateLike) -> str:
    """Human-readable UTC date and time.

    Example:
        >>> format_display_date("2024-12-01T15:00:00Z")
        'Sunday, December 1, 2024 at 03:00 PM UTC'
    """

    dt = to_utc(value)
    return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year} at {dt:%I:%M %p} UTC"
