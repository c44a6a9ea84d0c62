"""
Date and time utility functions for the SundAI assistant.
"""

import re
from datetime import date, datetime
from typing import Optional, Union

from ...domain.errors import InvalidDateError

CANONICAL_DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"

_DAY_FIRST_PATTERN = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$")
_ISO_PATTERN = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ].*)?\s*$")


def today() -> date:
    """Current local calendar day."""
    return date.today()


def today_iso() -> str:
    """Current local calendar day in canonical form."""
    return today().strftime(CANONICAL_DATE_FORMAT)


def normalize_date(value: Union[str, date, datetime, None]) -> str:
    """
    Normalize a calendar date to canonical YYYY-MM-DD.

    Accepts date/datetime objects, ISO dates (a time part is dropped) and
    day-first D/M/YYYY strings with "/" separators.

    Raises:
        InvalidDateError: if the value is empty or not a real calendar day
    """
    if isinstance(value, datetime):
        return value.date().strftime(CANONICAL_DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(CANONICAL_DATE_FORMAT)
    if not value or not isinstance(value, str):
        raise InvalidDateError(str(value))

    match = _DAY_FIRST_PATTERN.match(value)
    if match:
        day, month, year = (int(part) for part in match.groups())
    else:
        match = _ISO_PATTERN.match(value)
        if not match:
            raise InvalidDateError(value)
        year, month, day = (int(part) for part in match.groups())

    try:
        return date(year, month, day).strftime(CANONICAL_DATE_FORMAT)
    except ValueError:
        raise InvalidDateError(value)


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a stored date, returning None for empty or malformed values."""
    try:
        return datetime.strptime(normalize_date(value), CANONICAL_DATE_FORMAT).date()
    except InvalidDateError:
        return None


def format_display_date(value: Optional[str]) -> str:
    """Format a stored date for display (DD/MM/YYYY), '-' when missing."""
    parsed = parse_date(value)
    if parsed is None:
        return "-"
    return parsed.strftime(DISPLAY_DATE_FORMAT)


def is_upcoming(value: Optional[str], reference: Optional[date] = None) -> bool:
    """True when the date falls on or after the start of the reference day."""
    parsed = parse_date(value)
    if parsed is None:
        return False
    return parsed >= (reference or today())
