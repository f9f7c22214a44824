# backend/app/modules/board/core/search.py
from collections.abc import Iterable

from app.modules.board.core.models import Tile
from app.modules.board.utils.text import html_to_text


def matches_query(tile: Tile, query: str) -> bool:
    """Case-insensitive substring match on the title or the text of the content."""
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in tile.title.lower() or needle in html_to_text(tile.content).lower()


def search_tiles(tiles: Iterable[Tile], query: str) -> list[Tile]:
    """Filter tiles by query, returned in display order."""
    matching = (t for t in tiles if matches_query(t, query))
    return sorted(matching, key=lambda t: (t.is_large, t.order))
