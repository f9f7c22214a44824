# backend/app/modules/board/core/constants.py

"""
Static tables for the board core: the pastel palette, the legacy emoji map,
storage keys and the default board seeded on first load.
"""

import re

# --- Palette ---
# Order matters: ties in color distance resolve to the lower index.
PASTEL_COLORS: tuple[str, ...] = (
    "#FFB3BA",  # Pastel Pink
    "#FFCCCB",  # Light Pink
    "#FFFFBA",  # Pastel Yellow
    "#BAE1BA",  # Pastel Green
    "#BAC7FF",  # Pastel Blue
    "#E0BBE4",  # Pastel Purple
    "#FFDAB9",  # Pastel Peach
    "#B4E7FF",  # Pastel Cyan
)
DEFAULT_PASTEL_COLOR = PASTEL_COLORS[0]

TEXT_COLOR_DARK = "#000000"
TEXT_COLOR_LIGHT = "#ffffff"
TEXT_LUMINANCE_THRESHOLD = 128

# --- Icons ---
ICON_NAME_RE = re.compile(r"[a-z0-9-]+")
DEFAULT_ICON = "folder-open"

EMOJI_TO_ICON_MAP: dict[str, str] = {
    "🔬": "flask-conical",
    "📋": "file-text",
    "🚢": "ship",
    "⚙️": "settings",
    "🔧": "wrench",
    "📊": "bar-chart",
    "🎬": "film",
    "👤": "user",
    "📷": "camera",
    "📁": "folder-open",
}

# --- Variants ---
VARIANT_REGULAR = "regular"
VARIANT_LARGE = "large"
# Tile that must always render in the large partition, even in old data without a variant.
LARGE_NOTES_TILE_ID = "todo-notes"

# --- Dates ---
DUE_SOON_DAYS = 3
RECURRENCE_KINDS = ("none", "daily", "weekly", "monthly")

# --- Caps ---
MAX_BACKUPS = 10
MAX_NOTIFICATIONS = 50
CSV_CONTENT_PREVIEW_LEN = 100

# --- Snapshot format ---
SNAPSHOT_VERSION = 1

# --- Storage keys (mirrors the browser localStorage layout) ---
STORAGE_KEY_TILES = "projectos_tiles"
STORAGE_KEY_PHOTOS = "projectos_photos"
STORAGE_KEY_SETTINGS = "projectos_settings"
STORAGE_KEY_BACKUPS = "tiles_backups"
STORAGE_KEY_NOTIFICATIONS = "app_notifications"

# --- Default board ---
# Colors here are the legacy saturated ones; they are normalized into the palette on load.
DEFAULT_TILE_SEEDS: tuple[dict, ...] = (
    {"id": "research", "title": "Research", "color": "#4f46e5", "icon": "flask-conical"},
    {"id": "charters", "title": "Charters", "color": "#0891b2", "icon": "file-text"},
    {"id": "vessels", "title": "Vessels", "color": "#0284c7", "icon": "ship"},
    {"id": "equipment", "title": "Equipment", "color": "#7c3aed", "icon": "settings"},
    {"id": "operations", "title": "Operations", "color": "#ea580c", "icon": "wrench"},
    {"id": "methodology", "title": "Methodology", "color": "#16a34a", "icon": "bar-chart"},
    {"id": "storyboard", "title": "Storyboard", "color": "#dc2626", "icon": "film"},
    {"id": "personal", "title": "Personal", "color": "#db2777", "icon": "user"},
    {"id": "photos", "title": "Photos", "color": "#65a30d", "icon": "camera"},
    {
        "id": LARGE_NOTES_TILE_ID,
        "title": "To-Do & Notes",
        "color": "#FFFFBA",
        "icon": "file-text",
        "variant": VARIANT_LARGE,
    },
)
