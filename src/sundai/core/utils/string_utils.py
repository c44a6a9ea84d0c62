"""
String utility functions for the SundAI assistant.
"""

import html
import re
from typing import Any, Optional


def contains_ci(haystack: Optional[str], needle: Optional[str]) -> bool:
    """Case-insensitive substring test; an empty needle matches everything."""
    return (needle or "").lower() in (haystack or "").lower()


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer from loosely-typed input, None when not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value).strip()
    match = re.match(r"^[+-]?\d+", text)
    if not match:
        return None
    return int(match.group(0))


def escape_html(text: str) -> str:
    """Escape text for safe inclusion in markup (quotes included)."""
    return html.escape(text or "", quote=True)
