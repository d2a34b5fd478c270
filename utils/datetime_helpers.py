"""Date/time helpers for reservation windows and server time."""

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from flask import current_app


def get_timezone() -> tzinfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'UTC')
    if tz_name == 'UTC':
        return timezone.utc
    return ZoneInfo(tz_name)


def get_now() -> datetime:
    """Get current datetime in the configured timezone."""
    return datetime.now(get_timezone())


def parse_window_value(value) -> datetime:
    """
    Parse a window boundary into a naive UTC datetime.

    Accepts datetime, date (midnight), or ISO 8601 strings such as
    '2024-12-26', '2024-12-26T10:00', '2024-12-26 10:00:00' or
    '2024-12-26T10:00:00+01:00'. A trailing 'Z' is read as UTC.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Invalid date/time value: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(microsecond=0)


def format_window_value(value: datetime) -> str:
    """
    Format a naive UTC datetime as YYYY-MM-DDTHH:MM:SS.

    Fixed width, years zero-padded to four digits, so SQL text comparison
    is chronological. strftime('%Y') does not pad years before 1000 on glibc.
    """
    return value.isoformat(timespec='seconds')


def normalize_window_value(value) -> str:
    """Parse and re-format a window boundary for storage or comparison."""
    return format_window_value(parse_window_value(value))
