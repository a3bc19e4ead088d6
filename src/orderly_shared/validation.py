"""
Input validation utilities.
"""

import re

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


class ValidationError(Exception):
    """Raised when validation fails."""

    pass


def validate_email(email: str) -> None:
    """Validate email format."""
    if not email:
        raise ValidationError("Email is required")

    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")


def validate_quantity(quantity) -> int:
    """Quantities are whole numbers of at least one."""
    if isinstance(quantity, bool) or (
        isinstance(quantity, float) and not quantity.is_integer()
    ):
        raise ValidationError("Quantity must be a whole number")
    try:
        value = int(quantity)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a whole number")
    if value < 1:
        raise ValidationError("Quantity must be at least 1")
    return value
