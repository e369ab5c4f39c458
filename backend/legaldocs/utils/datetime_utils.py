"""Datetime conversion utilities."""

from datetime import UTC, datetime


def datetime_to_iso(value: datetime | None) -> str | None:
    """Convert a datetime to an ISO-8601 string, or None."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def datetime_from_iso(value: str | None) -> datetime | None:
    """Parse a date (YYYY-MM-DD) or ISO-8601 datetime string, or None.

    Naive values are taken as UTC so they compare against timezone-aware
    columns. Raises ValueError for malformed input.
    """
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
