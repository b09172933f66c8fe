"""
Datetime utilities for consistent timezone handling across the application.

The clinic operates in a single fixed local timezone (Brasília, UTC-3).
Scheduling data (dates and HH:MM times) is stored naive and interpreted in
that timezone; no conversion is ever applied to it.
"""

import logging
from datetime import datetime, timezone, timedelta, date
from typing import Optional

from core.exceptions import FormatError

logger = logging.getLogger(__name__)

# Clinic timezone constant (UTC-3, no daylight saving)
CLINIC_TZ = timezone(timedelta(hours=-3))


def clinic_now() -> datetime:
    """
    Get current clinic datetime (UTC-3).

    Returns:
        Current datetime with the clinic timezone
    """
    return datetime.now(CLINIC_TZ)


def ensure_clinic_tz(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a datetime is timezone-aware with the clinic timezone.

    Naive datetimes are assumed to already be clinic time.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=CLINIC_TZ)
    return dt.astimezone(CLINIC_TZ)


def day_of_week_sunday_first(value: date) -> int:
    """
    Day of week with 0=Sunday .. 6=Saturday.

    Python's weekday() returns 0=Monday, so shift by one.
    """
    return (value.weekday() + 1) % 7


def parse_date_string(date_str: str) -> date:
    """
    Parse a date string in YYYY-MM-DD or YYYY/MM/DD format.

    Accepts both formats:
    - YYYY-MM-DD (e.g., "2025-12-25", "2025-1-1")
    - YYYY/MM/DD (e.g., "2025/12/25", "2025/1/1")

    Automatically normalizes single-digit months/days.

    Args:
        date_str: Date string in YYYY-MM-DD or YYYY/MM/DD format

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if not date_str or not date_str.strip():
        raise ValueError("Date string cannot be empty")

    date_str = date_str.strip()

    if '/' in date_str:
        parts = date_str.split('/')
    elif '-' in date_str:
        parts = date_str.split('-')
    else:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}")

    if len(parts) != 3:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}")

    year = parts[0].zfill(4)
    month = parts[1].zfill(2)
    day = parts[2].zfill(2)

    normalized = f"{year}-{month}-{day}"

    try:
        return datetime.strptime(normalized, '%Y-%m-%d').date()
    except ValueError as e:
        raise ValueError(f"Invalid date format (expected YYYY-MM-DD or YYYY/MM/DD): {date_str}") from e


def parse_request_date(date_str: str, field_name: str = "Data") -> date:
    """
    Parse a client-supplied date, raising the user-facing FormatError on failure.

    Raises:
        FormatError: If the date is missing or malformed
    """
    try:
        return parse_date_string(date_str)
    except ValueError as e:
        raise FormatError(f"{field_name} deve estar no formato YYYY-MM-DD", field=field_name) from e
