"""
Query parameter parsing shared by the report endpoints.
"""

from flask import current_app, request

from orderly_shared.constants import MAX_REPORT_WINDOW_DAYS
from orderly_shared.validation import ValidationError


def window_days() -> int:
    """``days`` query param: REPORT_WINDOW_DAYS when absent, capped at MAX_REPORT_WINDOW_DAYS."""
    raw = request.args.get("days")
    if raw is None:
        return current_app.config["REPORT_WINDOW_DAYS"]
    try:
        days = int(raw)
    except ValueError as exc:
        raise ValidationError(f"days must be an integer, got: {raw}") from exc
    if not 1 <= days <= MAX_REPORT_WINDOW_DAYS:
        raise ValidationError(f"days must be between 1 and {MAX_REPORT_WINDOW_DAYS}")
    return days
