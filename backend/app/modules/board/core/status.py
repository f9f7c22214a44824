# backend/app/modules/board/core/status.py
"""
Derived views over the tile collection: due-date buckets and dependency edges.

All functions are pure O(n) scans; the collection is small.
"""

from collections.abc import Sequence
from datetime import date

from app.modules.board.core.constants import DUE_SOON_DAYS
from app.modules.board.core.dates import evaluate_due_date
from app.modules.board.core.models import Tile


def overdue_tiles(tiles: Sequence[Tile], today: date | None = None) -> list[Tile]:
    result = []
    for tile in tiles:
        info = evaluate_due_date(tile.due_date, today)
        if info and info.is_overdue:
            result.append(tile)
    return result


def due_soon_tiles(
    tiles: Sequence[Tile], today: date | None = None, due_soon_days: int = DUE_SOON_DAYS
) -> list[Tile]:
    """Tiles due today or within `due_soon_days` days."""
    result = []
    for tile in tiles:
        info = evaluate_due_date(tile.due_date, today, due_soon_days)
        if info and (info.is_due_today or info.is_due_soon):
            result.append(tile)
    return result


def blocked_by(tiles: Sequence[Tile], tile_id: str) -> list[Tile]:
    """Tiles that `tile_id` depends on. Stale ids are skipped."""
    tile = next((t for t in tiles if t.id == tile_id), None)
    if tile is None or not tile.depends_on:
        return []
    wanted = set(tile.depends_on)
    return [t for t in tiles if t.id in wanted]


def blocking(tiles: Sequence[Tile], tile_id: str) -> list[Tile]:
    """Tiles whose dependsOn contains `tile_id`."""
    return [t for t in tiles if tile_id in t.depends_on]


def find_dependency_cycle(tiles: Sequence[Tile], start_id: str) -> list[str] | None:
    """
    Return a dependency cycle reachable from `start_id` as a list of ids
    (first id repeated at the end), or None.
    """
    edges = {t.id: t.depends_on for t in tiles}
    path: list[str] = []
    on_path: set[str] = set()
    done: set[str] = set()

    def visit(node: str) -> list[str] | None:
        if node in on_path:
            return path[path.index(node) :] + [node]
        if node in done or node not in edges:
            return None
        path.append(node)
        on_path.add(node)
        for dep in edges[node]:
            cycle = visit(dep)
            if cycle:
                return cycle
        path.pop()
        on_path.discard(node)
        done.add(node)
        return None

    return visit(start_id)
