"""Helpers for loading entities from loosely-shaped persistence records."""

from typing import Any, Dict, Optional

from ...core.utils.datetime_utils import normalize_date
from ..errors import InvalidDateError


def first_present(record: Dict[str, Any], *keys: str) -> Any:
    """Value of the first key holding something other than None or ''."""
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def str_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def optional_int(value: Any) -> Optional[int]:
    try:
        return None if value is None or value == "" else int(value)
    except (TypeError, ValueError):
        return None


def lenient_date(value: Any) -> str:
    """Canonical date when parseable, else the raw text (never raises)."""
    if value is None or value == "":
        return ""
    try:
        return normalize_date(value)
    except InvalidDateError:
        return str(value)
