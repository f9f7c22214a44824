# backend/app/modules/board/core/reorder.py
"""
Fold a partial reorder back into the full tile ordering.

The caller may only see a subset of tiles (search results, or the regular
partition while large tiles render separately). A drag within that subset
yields the subset's new id order, not a permutation of every tile. The walk
below keeps every tile outside the subset at its position and injects the
subset's new relative order into the slots the subset occupied.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from app.modules.board.core.constants import VARIANT_LARGE
from app.modules.board.core.models import Tile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReorderResult:
    tiles: list[Tile]
    tile_order: list[str]


def partition_by_variant(tiles: Iterable[Tile]) -> tuple[list[Tile], list[Tile]]:
    """Split tiles (sorted by current order, stable) into (regular, large)."""
    ordered = sorted(tiles, key=lambda t: t.order)
    regular = [t for t in ordered if t.variant != VARIANT_LARGE]
    large = [t for t in ordered if t.variant == VARIANT_LARGE]
    return regular, large


def _effective_subset(subset_ids: Sequence[str], regular_ids: set[str]) -> list[str]:
    seen: set[str] = set()
    effective: list[str] = []
    for tile_id in subset_ids:
        if tile_id in regular_ids and tile_id not in seen:
            seen.add(tile_id)
            effective.append(tile_id)
    return effective


def reconcile(tiles: Sequence[Tile], reordered_subset_ids: Sequence[str]) -> ReorderResult:
    """
    Apply a reordered subset of regular tile ids to the full collection.

    - Ids that are unknown, belong to large tiles, or repeat are ignored, so the
      cursor can never run past the subset.
    - Regular tiles are renumbered 0..n-1; large tiles continue from n.
    - Input tiles are not mutated; copies are returned.
    """
    regular, large = partition_by_variant(tiles)
    by_id = {t.id: t for t in regular}
    subset = _effective_subset(reordered_subset_ids, set(by_id))

    dropped = len(reordered_subset_ids) - len(subset)
    if dropped:
        logger.debug(f"Reorder: ignored {dropped} subset id(s) not among regular tiles.")

    members = set(subset)
    cursor = 0
    walked: list[Tile] = []
    for tile in regular:
        if tile.id in members:
            walked.append(by_id[subset[cursor]])
            cursor += 1
        else:
            walked.append(tile)

    result = [t.model_copy(update={"order": i}) for i, t in enumerate(walked)]
    offset = len(result)
    result.extend(t.model_copy(update={"order": offset + i}) for i, t in enumerate(large))

    return ReorderResult(tiles=result, tile_order=[t.id for t in result])


def renumber(tiles: Sequence[Tile]) -> ReorderResult:
    """Re-densify order values without moving anything."""
    return reconcile(tiles, [])
