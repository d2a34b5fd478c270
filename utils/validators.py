"""
Input validation helper functions.
Every check raises ValidationError before any persisted state is touched.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from utils.datetime_helpers import format_window_value, normalize_window_value, parse_window_value
from utils.errors import ValidationError

STAFF_ROLES = ('instructor', 'divemaster', 'boat_staff')
AVAILABILITY_FLAGS = ('available', 'unavailable')


def validate_quantity(quantity, field: str = 'quantity') -> int:
    """
    Validate a positive integer quantity.

    Args:
        quantity: Value from the caller (int or numeric string)
        field: Field name used in the error

    Returns:
        int: The quantity

    Raises:
        ValidationError: If not a positive integer
    """
    if isinstance(quantity, bool):
        raise ValidationError(f"{field} must be an integer", field)
    try:
        value = int(quantity)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer", field)
    if isinstance(quantity, float) and quantity != value:
        raise ValidationError(f"{field} must be an integer", field)
    if value <= 0:
        raise ValidationError(f"{field} must be greater than zero", field)
    return value


def validate_stock(quantity, field: str = 'quantity_in_stock') -> int:
    """Validate a non-negative integer stock level."""
    if isinstance(quantity, bool):
        raise ValidationError(f"{field} must be an integer", field)
    try:
        value = int(quantity)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer", field)
    if isinstance(quantity, float) and quantity != value:
        raise ValidationError(f"{field} must be an integer", field)
    if value < 0:
        raise ValidationError(f"{field} cannot be negative", field)
    return value


def validate_rate(rate, field: str = 'daily_rent_rate') -> str:
    """
    Validate a non-negative decimal rate.

    Returns:
        str: Canonical decimal text (stored as TEXT to keep it exact)
    """
    if rate is None or rate == '':
        return '0'
    if isinstance(rate, bool):
        raise ValidationError(f"{field} must be a decimal number", field)
    try:
        value = Decimal(str(rate))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a decimal number", field)
    if not value.is_finite() or value < 0:
        raise ValidationError(f"{field} must be a non-negative number", field)
    return str(value)


def validate_window(window_start, window_end, allow_empty: bool = False) -> tuple:
    """
    Validate and normalise a reservation window.

    Args:
        window_start: Start boundary (inclusive)
        window_end: End boundary (exclusive)
        allow_empty: Accept start == end (bookings may be point-in-time)

    Returns:
        tuple: (start_str, end_str) in the stored window format

    Raises:
        ValidationError: If a boundary is missing, unparseable, or inverted
    """
    if window_start in (None, ''):
        raise ValidationError("window_start is required", 'window_start')
    if window_end in (None, ''):
        raise ValidationError("window_end is required", 'window_end')

    try:
        start = parse_window_value(window_start)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Invalid window_start: {window_start!r}", 'window_start')
    try:
        end = parse_window_value(window_end)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Invalid window_end: {window_end!r}", 'window_end')

    if end < start:
        raise ValidationError("window_end must be after window_start", 'window_end')
    if end == start and not allow_empty:
        raise ValidationError("Window must not be zero-length", 'window_end')

    return format_window_value(start), format_window_value(end)


def validate_instant(value, field: str) -> str:
    """Validate a single date/time boundary and return it in stored format."""
    try:
        return normalize_window_value(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Invalid {field}: {value!r}", field)


def validate_role(role: str) -> str:
    """Validate a staff role."""
    if role not in STAFF_ROLES:
        raise ValidationError(
            f"Invalid role {role!r}; expected one of {', '.join(STAFF_ROLES)}", 'role'
        )
    return role


def validate_availability_flag(flag: str) -> str:
    """Validate a staff availability flag."""
    if flag not in AVAILABILITY_FLAGS:
        raise ValidationError(
            f"Invalid availability flag {flag!r}; expected 'available' or 'unavailable'",
            'availability_flag'
        )
    return flag


def validate_optional_date(value, field: str):
    """
    Validate an optional YYYY-MM-DD date.

    Returns:
        str or None: ISO date string
    """
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return datetime.strptime(str(value), '%Y-%m-%d').date().isoformat()
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format", field)


def validate_required_text(value, field: str) -> str:
    """Validate a required, non-blank text field."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field)
    return value.strip()


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_bool(value, field: str) -> bool:
    """
    Validate a boolean flag from JSON or a query string.

    Accepts JSON booleans and the strings true/false, 1/0, yes/no.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ('true', '1', 'yes'):
            return True
        if lowered in ('false', '0', 'no'):
            return False
    raise ValidationError(f"{field} must be true or false", field)
