"""
Datetime utilities.

Timestamps are stored as naive UTC values; these helpers keep every producer and
consumer on that convention.
"""

from datetime import date, datetime, timezone

from .validation import ValidationError


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the stored columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_day(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD query parameter, None when empty."""
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc
