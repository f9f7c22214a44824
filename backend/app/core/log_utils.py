# backend/app/core/log_utils.py
"""Helpers for logging values that came from stored or imported board data.

Tile titles, icons and imported payloads are user-controlled. Before they reach
a line-oriented log they are escaped so a crafted value cannot forge log lines
or drive the terminal.

Always use: logger.info("%s", value) or an f-string around sanitize_for_log(value),
never logger.info(value).
"""

from __future__ import annotations

import re
from typing import Any

# CSI / OSC / single-char ESC sequences
_ANSI_RE = re.compile(
    r"""
    \x1B
    (?:
        [@-Z\\-_]
      | \[ [0-?]* [ -/]* [@-~]
      | \] (?: [^\x07\x1B]* (?:\x07|\x1B\\))
    )
    """,
    re.VERBOSE,
)

# Control characters other than \t \n \r, which are escaped separately.
_UNSAFE_CTRL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

# Bidirectional overrides and zero-width characters.
_BIDI_RE = re.compile(r"[\u202A-\u202E\u2066-\u2069\u200E\u200F]")
_INVISIBLE_RE = re.compile(r"[\u200B-\u200D\u2060\u00AD]")

TRUNCATION_SUFFIX = "...[truncated]"


def sanitize_for_log(value: Any, max_length: int | None = 200) -> str:
    """Return a single-line, printable rendering of `value` for log messages.

    Strings are quoted with repr-style quotes so empty or whitespace-only values
    stay visible. None renders as '<None>'.

    Examples:
        >>> sanitize_for_log("📷")
        "'📷'"
        >>> sanitize_for_log("a\\nb")
        "'a\\\\nb'"
    """
    if value is None:
        return "<None>"

    try:
        text = value if isinstance(value, str) else str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"

    text = _ANSI_RE.sub("", text)
    text = (
        text.replace("\\", "\\\\")
        .replace("\r", "\\r")
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )
    text = _UNSAFE_CTRL_RE.sub("", text)
    text = _BIDI_RE.sub("", text)
    text = _INVISIBLE_RE.sub("", text)

    if max_length is not None and len(text) > max_length:
        keep = max(0, max_length - len(TRUNCATION_SUFFIX))
        text = text[:keep] + TRUNCATION_SUFFIX

    return f"'{text}'" if isinstance(value, str) else text
