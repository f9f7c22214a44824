# backend/app/modules/board/core/colors.py
"""Palette normalization and contrast helpers for tile colors."""

from app.modules.board.core.constants import (
    DEFAULT_PASTEL_COLOR,
    PASTEL_COLORS,
    TEXT_COLOR_DARK,
    TEXT_COLOR_LIGHT,
    TEXT_LUMINANCE_THRESHOLD,
)

_PALETTE_LOOKUP = {c.upper(): c for c in PASTEL_COLORS}


def hex_to_rgb(color: str) -> tuple[int, int, int] | None:
    """
    Parse '#RRGGBB' or '#RGB' (leading '#' optional, case-insensitive).
    Returns None for anything else.
    """
    if not isinstance(color, str):
        return None
    clean = color.strip().lstrip("#")
    if len(clean) == 3:
        clean = "".join(ch * 2 for ch in clean)
    if len(clean) != 6:
        return None
    try:
        value = int(clean, 16)
    except ValueError:
        return None
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def is_palette_color(color: str | None) -> bool:
    return isinstance(color, str) and color.strip().upper() in _PALETTE_LOOKUP


def find_closest_palette_color(color: str) -> str:
    rgb = hex_to_rgb(color)
    if rgb is None:
        return DEFAULT_PASTEL_COLOR

    best = PASTEL_COLORS[0]
    best_dist: int | None = None
    for candidate in PASTEL_COLORS:
        cr, cg, cb = hex_to_rgb(candidate)  # type: ignore[misc]
        dist = (rgb[0] - cr) ** 2 + (rgb[1] - cg) ** 2 + (rgb[2] - cb) ** 2
        # Strict comparison keeps the lower-indexed entry on ties.
        if best_dist is None or dist < best_dist:
            best, best_dist = candidate, dist
    return best


def normalize_color(color: str | None) -> str:
    """
    Map any color onto the 8-entry pastel palette.

    Palette members come back in their canonical spelling; other hex colors snap
    to the nearest entry; empty or malformed input yields the default entry.
    Never raises.
    """
    if not color or not isinstance(color, str):
        return DEFAULT_PASTEL_COLOR
    canonical = _PALETTE_LOOKUP.get(color.strip().upper())
    if canonical:
        return canonical
    return find_closest_palette_color(color)


def text_color_for(color: str | None) -> str:
    """Black text on light backgrounds, white text on dark ones."""
    rgb = hex_to_rgb(color or "") or hex_to_rgb(DEFAULT_PASTEL_COLOR)
    r, g, b = rgb  # type: ignore[misc]
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return TEXT_COLOR_DARK if luminance >= TEXT_LUMINANCE_THRESHOLD else TEXT_COLOR_LIGHT
