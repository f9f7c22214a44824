# backend/app/modules/board/core/icons.py
"""Legacy emoji → icon-name migration and per-record schema upgrades."""

import logging
from typing import Any

from app.core.log_utils import sanitize_for_log
from app.modules.board.core.colors import normalize_color
from app.modules.board.core.constants import (
    DEFAULT_ICON,
    EMOJI_TO_ICON_MAP,
    ICON_NAME_RE,
    LARGE_NOTES_TILE_ID,
    VARIANT_LARGE,
)

logger = logging.getLogger(__name__)


def is_valid_icon_name(name: Any) -> bool:
    return isinstance(name, str) and bool(ICON_NAME_RE.fullmatch(name))


def migrate_icon(raw_icon: Any) -> str:
    """
    Return the canonical icon name for a stored icon value.

    Known emoji map to their icon; valid names pass through; anything else
    falls back to DEFAULT_ICON with a warning.
    """
    if isinstance(raw_icon, str):
        mapped = EMOJI_TO_ICON_MAP.get(raw_icon)
        if mapped:
            return mapped
        if is_valid_icon_name(raw_icon):
            return raw_icon
    logger.warning(
        f"Migrating unsupported icon {sanitize_for_log(raw_icon)} to {DEFAULT_ICON!r}"
    )
    return DEFAULT_ICON


def migrate_tile_record(record: dict[str, Any], *, normalize_colors: bool = True) -> dict[str, Any]:
    """
    Upgrade one raw tile dict from storage or an import file.

    Returns a new dict; the input is left untouched.
    """
    migrated = dict(record)
    migrated["icon"] = migrate_icon(record.get("icon"))
    if normalize_colors:
        migrated["color"] = normalize_color(record.get("color") or "")
    if record.get("id") == LARGE_NOTES_TILE_ID and not record.get("variant"):
        migrated["variant"] = VARIANT_LARGE
    return migrated
