"""
CRUD operations package for the application.
This module re-exports the CRUD operations from the underlying modules.
"""

from .crud_board_settings import board_settings
from .crud_photo import photo
from .crud_reminder import analytics_event, reminder
from .crud_sharing import shared_link, tile_version
from .crud_tile import tile

__all__ = [
    "analytics_event",
    "board_settings",
    "photo",
    "reminder",
    "shared_link",
    "tile",
    "tile_version",
]
