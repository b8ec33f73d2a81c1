"""Date formatting utilities."""

from datetime import date, datetime
from typing import Optional, Union


def format_record_date(value: Union[date, datetime, str, None]) -> Optional[str]:
    """
    Format a date for the persistence record (YYYY-MM-DD).

    Args:
        value: date, datetime or ISO 8601 string

    Returns:
        "YYYY-MM-DD", or None when value is empty or not a date

    Examples:
        format_record_date(date(2025, 4, 1))
        # "2025-04-01"

        format_record_date("2025-04-01T09:30:00")
        # "2025-04-01"
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    try:
        return datetime.fromisoformat(str(value).strip()).date().isoformat()
    except ValueError:
        return None


def parse_record_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    """Parse a date-like value into a date (None when not a date)."""
    formatted = format_record_date(value)
    return date.fromisoformat(formatted) if formatted else None
