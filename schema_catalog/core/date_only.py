"""
Calendar-day values used as revision timestamps.

Revision dates are plain ``datetime.date`` objects; these helpers own the
canonical ``YYYY-MM-DD`` text form used in file names and serialized data.
"""

import re
from datetime import date
from typing import Any, Optional

from django.utils import timezone

DATE_ONLY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def is_date_only(value: Any) -> bool:
    """
    Return True when ``value`` is a valid ``YYYY-MM-DD`` string.

    Examples:
        >>> is_date_only("2024-01-15")
        True
        >>> is_date_only("2024-02-30")
        False
    """
    return parse_date_only(value) is not None


def parse_date_only(value: Any) -> Optional[date]:
    """
    Parse a ``YYYY-MM-DD`` string into a date.

    Args:
        value: String (or date) to parse.

    Returns:
        Parsed date, or None when the value is not a valid calendar day.

    Examples:
        >>> parse_date_only("2024-01-15")
        datetime.date(2024, 1, 15)
        >>> parse_date_only("2024-01-15T10:00:00") is None
        True
    """
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    match = DATE_ONLY_PATTERN.match(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def decode_date_only(value: Any) -> date:
    """Parse a ``YYYY-MM-DD`` value, raising ValueError when it is invalid."""
    parsed = parse_date_only(value)
    if parsed is None:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")
    return parsed


def encode_date_only(value: date) -> str:
    """Format a date in its canonical ``YYYY-MM-DD`` form."""
    return value.strftime("%Y-%m-%d")


def today() -> date:
    """Current calendar day in the active Django time zone."""
    now = timezone.now()
    if timezone.is_aware(now):
        return timezone.localdate(now)
    return now.date()
