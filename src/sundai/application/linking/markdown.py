"""Minimal markdown to HTML rendering for chat messages."""

import re

from ...core.utils.string_utils import escape_html

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")
_CODE = re.compile(r"`(.+?)`")
_PARAGRAPH_BREAK = re.compile(r"\n\n+")


def format_markdown(text: str) -> str:
    """Escape the text, then render bold, italic, code spans and line breaks."""
    if not text:
        return ""
    html = escape_html(text)
    html = _BOLD.sub(r"<strong>\1</strong>", html)
    html = _ITALIC.sub(r"<em>\1</em>", html)
    html = _CODE.sub(r"<code>\1</code>", html)
    html = _PARAGRAPH_BREAK.sub("<br><br>", html)
    return html.replace("\n", "<br>")
