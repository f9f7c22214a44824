# backend/app/modules/board/core/store.py
"""
Authoritative in-memory tile collection.

`TileStore` owns tiles, photos and board settings. Every mutation updates
memory synchronously, marks the affected sections dirty and re-arms a single
debounced write through the persistence adapter.
"""

import logging
import secrets
import threading
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ValidationError

from app.core.log_utils import sanitize_for_log
from app.exceptions import (
    PersistenceError,
    PhotoNotFoundError,
    TileNotFoundError,
    TileValidationError,
)
from app.modules.board.core.backup import create_snapshot, parse_board_data
from app.modules.board.core.colors import normalize_color
from app.modules.board.core.constants import DEFAULT_TILE_SEEDS
from app.modules.board.core.icons import migrate_icon, migrate_tile_record
from app.modules.board.core.models import BoardSettings, Photo, Snapshot, Tile, validation_errors
from app.modules.board.core.notifications import NotificationCenter
from app.modules.board.core.reorder import reconcile
from app.modules.board.core.scheduler import Debouncer, Scheduler, ThreadingScheduler
from app.modules.board.core.search import search_tiles
from app.modules.board.core.status import find_dependency_cycle
from app.modules.board.persistence.base import PersistenceAdapter

logger = logging.getLogger(__name__)

SECTION_TILES = "tiles"
SECTION_PHOTOS = "photos"
SECTION_SETTINGS = "settings"
ALL_SECTIONS = (SECTION_TILES, SECTION_PHOTOS, SECTION_SETTINGS)

DEFAULT_SAVE_DEBOUNCE_SECONDS = 0.5

# Fields callers may never set through create/update.
_PROTECTED_FIELDS = ("id", "order")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _alias_keys(model: type[BaseModel], data: dict[str, Any]) -> dict[str, Any]:
    """Rewrite snake_case field names to their camelCase aliases; unknown keys pass through."""
    result = {}
    for key, value in data.items():
        field = model.model_fields.get(key)
        result[field.alias if field and field.alias else key] = value
    return result


def default_tiles(now: datetime | None = None) -> list[Tile]:
    stamp = (now or _utcnow()).isoformat()
    tiles = []
    for index, seed in enumerate(DEFAULT_TILE_SEEDS):
        record = migrate_tile_record({**seed, "order": index, "content": "", "lastUpdated": stamp})
        tiles.append(Tile.model_validate(record))
    return tiles


def default_settings() -> BoardSettings:
    return BoardSettings(tile_order=[seed["id"] for seed in DEFAULT_TILE_SEEDS])


def _first_occurrences(tiles: list[Tile]) -> tuple[list[Tile], list[str]]:
    """Keep the first tile for each id; return the kept tiles and the ids that repeated."""
    seen: set[str] = set()
    kept, dropped = [], []
    for tile in tiles:
        if tile.id in seen:
            dropped.append(tile.id)
        else:
            seen.add(tile.id)
            kept.append(tile)
    return kept, dropped


class TileStore:
    def __init__(
        self,
        adapter: PersistenceAdapter,
        scheduler: Scheduler | None = None,
        debounce_seconds: float = DEFAULT_SAVE_DEBOUNCE_SECONDS,
        notifications: NotificationCenter | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.adapter = adapter
        self.notifications = notifications
        self._clock = clock
        # Timer callbacks may run on another thread.
        self._lock = threading.RLock()
        self._tiles: list[Tile] = default_tiles(clock())
        self._photos: list[Photo] = []
        self._settings: BoardSettings = default_settings()
        self._dirty: set[str] = set()
        self._debouncer = Debouncer(scheduler or ThreadingScheduler(), debounce_seconds, self._write_dirty)

    # --- Read access ---

    @property
    def tiles(self) -> list[Tile]:
        """Display order: regular tiles first, then large ones, each by `order`."""
        return sorted(self._tiles, key=lambda t: (t.is_large, t.order))

    @property
    def photos(self) -> list[Photo]:
        return list(self._photos)

    @property
    def settings(self) -> BoardSettings:
        return self._settings

    @property
    def has_pending_write(self) -> bool:
        return self._debouncer.pending

    def list_tiles(self) -> list[Tile]:
        return self.tiles

    def get(self, tile_id: str) -> Tile:
        for tile in self._tiles:
            if tile.id == tile_id:
                return tile
        raise TileNotFoundError(tile_id)

    def search(self, query: str) -> list[Tile]:
        return search_tiles(self._tiles, query)

    def photos_for(self, tile_id: str) -> list[Photo]:
        return [p for p in self._photos if p.tile_id == tile_id]

    def dependency_cycle(self, tile_id: str) -> list[str] | None:
        return find_dependency_cycle(self._tiles, tile_id)

    # --- Loading ---

    def load(self) -> None:
        """
        Populate the store from the adapter.

        Unreadable tile data falls back to the default board; any default tile
        missing from stored data is appended after the existing ones.
        """
        with self._lock:
            self._tiles, backfilled = self._load_tiles()
            self._photos = self._load_photos()
            self._settings = self._load_settings()
            if backfilled:
                self._mark_dirty(SECTION_TILES)
        logger.info(f"Board loaded: {len(self._tiles)} tile(s), {len(self._photos)} photo(s).")

    def _load_tiles(self) -> tuple[list[Tile], bool]:
        try:
            stored = self.adapter.load_tiles()
        except PersistenceError as e:
            logger.error(f"Could not load tiles, using defaults: {e}")
            return default_tiles(self._clock()), True
        if stored is None:
            return default_tiles(self._clock()), True

        try:
            tiles = [Tile.model_validate(migrate_tile_record(record)) for record in stored]
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Stored tiles are malformed, using defaults: {e}")
            return default_tiles(self._clock()), True

        tiles, dropped = _first_occurrences(tiles)
        if dropped:
            logger.warning(
                f"Dropped {len(dropped)} stored tile(s) with a repeated id: "
                f"{sanitize_for_log(', '.join(dropped))}"
            )

        existing = {t.id for t in tiles}
        missing = [t for t in default_tiles(self._clock()) if t.id not in existing]
        if not missing:
            return tiles, bool(dropped)
        max_order = max((t.order for t in tiles), default=-1)
        for index, tile in enumerate(missing):
            tiles.append(tile.model_copy(update={"order": max_order + 1 + index}))
        logger.info(f"Backfilled {len(missing)} default tile(s): {[t.id for t in missing]}")
        return tiles, True

    def _load_photos(self) -> list[Photo]:
        try:
            stored = self.adapter.load_photos()
        except PersistenceError as e:
            logger.error(f"Could not load photos: {e}")
            return []
        photos = []
        for record in stored or []:
            try:
                photos.append(Photo.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed photo record: {e.error_count()} error(s)")
        return photos

    def _load_settings(self) -> BoardSettings:
        try:
            stored = self.adapter.load_settings()
        except PersistenceError as e:
            logger.error(f"Could not load settings, using defaults: {e}")
            return default_settings()
        if stored is None:
            return default_settings()
        try:
            return BoardSettings.model_validate(stored)
        except ValidationError as e:
            logger.error(f"Stored settings are malformed, using defaults: {e}")
            return default_settings()

    # --- Tile mutations ---

    def _new_tile_id(self) -> str:
        base = f"tile_{int(self._clock().timestamp() * 1000)}"
        taken = {t.id for t in self._tiles}
        candidate, suffix = base, 1
        while candidate in taken:
            candidate = f"{base}_{suffix}"
            suffix += 1
        return candidate

    def _validate_tile(self, record: dict[str, Any]) -> Tile:
        try:
            return Tile.model_validate(record)
        except ValidationError as e:
            raise TileValidationError(validation_errors(e)) from e

    def create(self, tile_input: dict[str, Any]) -> Tile:
        with self._lock:
            data = {k: v for k, v in _alias_keys(Tile, tile_input).items() if k not in _PROTECTED_FIELDS}
            data["id"] = self._new_tile_id()
            data["order"] = len(self._tiles)
            data["color"] = normalize_color(data.get("color") or "")
            if "icon" in data:
                data["icon"] = migrate_icon(data["icon"])
            data["lastUpdated"] = self._clock().isoformat()
            tile = self._validate_tile(data)

            self._tiles.append(tile)
            self._settings = self._settings.model_copy(
                update={"tile_order": [*self._settings.tile_order, tile.id]}
            )
            self._mark_dirty(SECTION_TILES, SECTION_SETTINGS)
            self._check_cycle(tile)
        logger.info(f"Created tile {tile.id} ({sanitize_for_log(tile.title)})")
        return tile

    def update(self, tile_id: str, fields: dict[str, Any]) -> Tile:
        """Merge `fields` into the tile. `id` and `order` are never changed here."""
        with self._lock:
            current = self.get(tile_id)
            changes = {k: v for k, v in _alias_keys(Tile, fields).items() if k not in _PROTECTED_FIELDS}
            if changes.get("color"):
                changes["color"] = normalize_color(changes["color"])
            else:
                changes.pop("color", None)
            if "icon" in changes:
                changes["icon"] = migrate_icon(changes["icon"])
            merged = {**current.to_storage(), **changes, "lastUpdated": self._clock().isoformat()}
            tile = self._validate_tile(merged)

            self._tiles = [tile if t.id == tile_id else t for t in self._tiles]
            self._mark_dirty(SECTION_TILES)
            if "dependsOn" in changes:
                self._check_cycle(tile)
        return tile

    def delete(self, tile_id: str) -> None:
        """Remove a tile. Its photos are left for `prune_orphan_photos`."""
        with self._lock:
            self.get(tile_id)
            self._tiles = [t for t in self._tiles if t.id != tile_id]
            self._settings = self._settings.model_copy(
                update={"tile_order": [i for i in self._settings.tile_order if i != tile_id]}
            )
            self._mark_dirty(SECTION_TILES, SECTION_SETTINGS)
        logger.info(f"Deleted tile {tile_id}")

    def reorder(self, reordered_subset_ids: Iterable[str]) -> list[Tile]:
        with self._lock:
            result = reconcile(self._tiles, list(reordered_subset_ids))
            self._tiles = result.tiles
            self._settings = self._settings.model_copy(update={"tile_order": result.tile_order})
            self._mark_dirty(SECTION_TILES, SECTION_SETTINGS)
        return self.tiles

    def _check_cycle(self, tile: Tile) -> None:
        if not tile.depends_on:
            return
        cycle = find_dependency_cycle(self._tiles, tile.id)
        if cycle is None:
            return
        path = " -> ".join(cycle)
        logger.warning(f"Dependency cycle detected: {sanitize_for_log(path)}")
        if self.notifications is not None:
            self.notifications.add(
                "Dependency cycle",
                f"{tile.title or tile.id} is part of a dependency cycle: {path}",
                "warning",
                tile.id,
            )

    # --- Photos ---

    def add_photo(
        self,
        tile_id: str,
        base64_data: str,
        thumbnail: str,
        caption: str | None = None,
        timestamp: str | None = None,
    ) -> Photo:
        with self._lock:
            self.get(tile_id)
            now = self._clock()
            photo = Photo(
                id=f"photo_{int(now.timestamp() * 1000)}_{secrets.token_hex(5)[:9]}",
                tile_id=tile_id,
                base64_data=base64_data,
                thumbnail=thumbnail,
                timestamp=timestamp or now.isoformat(),
                caption=caption,
            )
            self._photos.append(photo)
            self._mark_dirty(SECTION_PHOTOS)
        return photo

    def delete_photo(self, photo_id: str) -> None:
        with self._lock:
            if not any(p.id == photo_id for p in self._photos):
                raise PhotoNotFoundError(photo_id)
            self._photos = [p for p in self._photos if p.id != photo_id]
            self._mark_dirty(SECTION_PHOTOS)

    def prune_orphan_photos(self) -> list[str]:
        """Drop photos whose tile no longer exists. Returns the removed photo ids."""
        with self._lock:
            tile_ids = {t.id for t in self._tiles}
            orphans = [p.id for p in self._photos if p.tile_id not in tile_ids]
            if orphans:
                self._photos = [p for p in self._photos if p.tile_id in tile_ids]
                self._mark_dirty(SECTION_PHOTOS)
                logger.info(f"Pruned {len(orphans)} orphan photo(s).")
        return orphans

    # --- Settings ---

    def toggle_dark_mode(self) -> bool:
        with self._lock:
            self._settings = self._settings.model_copy(update={"dark_mode": not self._settings.dark_mode})
            self._mark_dirty(SECTION_SETTINGS)
        return self._settings.dark_mode

    # --- Snapshots ---

    def export_snapshot(self) -> Snapshot:
        """Snapshot the whole board and stamp `settings.lastBackup`."""
        with self._lock:
            now = self._clock()
            self._settings = self._settings.model_copy(update={"last_backup": now.isoformat()})
            self._mark_dirty(SECTION_SETTINGS)
            return create_snapshot(self.tiles, self._photos, self._settings, now=now)

    def import_snapshot(self, data: str | bytes | dict[str, Any]) -> None:
        """
        Replace the board with the contents of a snapshot.

        Every tile is migrated and validated before anything is replaced;
        photos and settings are replaced only when the payload carries them.

        Raises:
            InvalidFormatError: not JSON, not an object, or no `tiles` list.
            TileValidationError: one or more records fail validation.
        """
        board = parse_board_data(data)
        with self._lock:
            self._tiles = board.tiles
            sections = [SECTION_TILES]
            if board.photos is not None:
                self._photos = board.photos
                sections.append(SECTION_PHOTOS)
            if board.settings is not None:
                self._settings = board.settings
                sections.append(SECTION_SETTINGS)
            self._mark_dirty(*sections)
        logger.info(f"Imported snapshot with {len(board.tiles)} tile(s).")

    def reset(self) -> None:
        """Back to the default board; stored data is cleared where the adapter supports it."""
        with self._lock:
            self._debouncer.cancel()
            try:
                self.adapter.clear()
            except NotImplementedError:
                logger.debug(f"{self.adapter.name} cannot clear; defaults will overwrite stored data.")
            self._tiles = default_tiles(self._clock())
            self._photos = []
            self._settings = default_settings()
            if self.notifications is not None:
                self.notifications.clear()
            self._mark_dirty(*ALL_SECTIONS)
        logger.info("Board reset to defaults.")

    # --- Persistence ---

    def _mark_dirty(self, *sections: str) -> None:
        self._dirty.update(sections)
        self._debouncer.trigger()

    def flush(self) -> None:
        """Write pending changes now instead of waiting for the debounce."""
        if not self._debouncer.flush():
            # Nothing armed, but a failed write may have left sections dirty.
            self._write_dirty()

    def _write_dirty(self) -> None:
        with self._lock:
            sections, self._dirty = self._dirty, set()
            try:
                if SECTION_TILES in sections:
                    self.adapter.save_tiles([t.to_storage() for t in self.tiles])
                if SECTION_PHOTOS in sections:
                    self.adapter.save_photos([p.to_storage() for p in self._photos])
                if SECTION_SETTINGS in sections:
                    self.adapter.save_settings(self._settings.to_storage())
            except PersistenceError:
                self._dirty |= sections
                raise
        if sections:
            logger.debug(f"Persisted sections: {sorted(sections)}")
