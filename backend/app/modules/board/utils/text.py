# backend/app/modules/board/utils/text.py
"""Plain-text views of the rich-text tile content."""

import html
import re

_BLOCK_TAG_RE = re.compile(r"<\s*(br|/p|/div|/li|/h[1-6])\b[^>]*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def html_to_text(content: str | None) -> str:
    """Strip markup and decode entities; block boundaries become single spaces."""
    if not content:
        return ""
    text = _BLOCK_TAG_RE.sub(" ", content)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    return _WS_RE.sub(" ", text).strip()


def preview(content: str | None, limit: int) -> str:
    return html_to_text(content)[:limit]
