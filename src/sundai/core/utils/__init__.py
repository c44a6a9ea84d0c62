"""
Utility functions for the SundAI assistant.

This module provides common utility functions used throughout
the application for dates and loosely-typed text.
"""

from .datetime_utils import (
    format_display_date,
    is_upcoming,
    normalize_date,
    parse_date,
    today_iso,
)
from .string_utils import contains_ci, escape_html, parse_int

__all__ = [
    # Datetime utilities
    "today_iso",
    "normalize_date",
    "parse_date",
    "format_display_date",
    "is_upcoming",
    # String utilities
    "contains_ci",
    "parse_int",
    "escape_html",
]
