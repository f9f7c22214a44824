# backend/tests/unit/board/test_tile_store.py
"""Unit tests for TileStore: mutations, loading, debounced persistence."""

import json

import pytest

from app.exceptions import (
    InvalidFormatError,
    PersistenceError,
    PhotoNotFoundError,
    TileNotFoundError,
    TileValidationError,
)
from app.modules.board.core.constants import DEFAULT_TILE_SEEDS, PASTEL_COLORS, STORAGE_KEY_TILES
from app.modules.board.core.scheduler import ManualScheduler
from app.modules.board.core.store import TileStore
from app.modules.board.persistence.base import MemoryStorage
from app.modules.board.persistence.local import LocalStorageAdapter

SEED_IDS = [seed["id"] for seed in DEFAULT_TILE_SEEDS]


def stored_tiles(storage: MemoryStorage) -> list[dict]:
    raw = storage.get_item(STORAGE_KEY_TILES)
    return json.loads(raw) if raw else []


class FlakyAdapter(LocalStorageAdapter):
    """Local adapter whose tile writes fail while `broken` is set."""

    broken = False

    def save_tiles(self, tiles) -> None:
        if self.broken:
            raise PersistenceError("disk full")
        super().save_tiles(tiles)


class TestLoading:
    def test_empty_storage_yields_default_board(self, store: TileStore) -> None:
        assert [t.id for t in store.tiles] == SEED_IDS
        assert store.tiles[-1].variant == "large"
        assert all(t.color in PASTEL_COLORS for t in store.tiles)
        assert store.settings.tile_order == SEED_IDS

    def test_defaults_are_written_after_debounce(
        self, store: TileStore, scheduler: ManualScheduler, memory_storage: MemoryStorage
    ) -> None:
        assert store.has_pending_write
        assert memory_storage.get_item(STORAGE_KEY_TILES) is None

        scheduler.advance(0.5)

        assert not store.has_pending_write
        assert [t["id"] for t in stored_tiles(memory_storage)] == SEED_IDS

    def test_missing_default_tiles_are_backfilled(self, scheduler: ManualScheduler) -> None:
        storage = MemoryStorage(
            {
                STORAGE_KEY_TILES: json.dumps(
                    [{"id": "research", "title": "Mine", "order": 0, "icon": "🔬", "color": "#4f46e5"}]
                )
            }
        )
        tile_store = TileStore(LocalStorageAdapter(storage), scheduler=scheduler)
        tile_store.load()

        tiles = tile_store.tiles
        assert len(tiles) == len(SEED_IDS)
        assert tiles[0].title == "Mine"
        assert tiles[0].icon == "flask-conical"
        assert [t.order for t in tiles] == list(range(len(SEED_IDS)))
        assert tile_store.has_pending_write

    def test_complete_stored_board_is_not_rewritten(self, scheduler: ManualScheduler) -> None:
        records = [{**seed, "order": i} for i, seed in enumerate(DEFAULT_TILE_SEEDS)]
        storage = MemoryStorage({STORAGE_KEY_TILES: json.dumps(records)})
        tile_store = TileStore(LocalStorageAdapter(storage), scheduler=scheduler)
        tile_store.load()
        assert not tile_store.has_pending_write

    def test_repeated_stored_ids_keep_the_first(self, scheduler: ManualScheduler) -> None:
        records = [{**seed, "order": i} for i, seed in enumerate(DEFAULT_TILE_SEEDS)]
        records.append({**DEFAULT_TILE_SEEDS[0], "title": "Copy", "order": 99})
        storage = MemoryStorage({STORAGE_KEY_TILES: json.dumps(records)})
        tile_store = TileStore(LocalStorageAdapter(storage), scheduler=scheduler)
        tile_store.load()

        assert [t.id for t in tile_store.tiles] == SEED_IDS
        assert tile_store.get(SEED_IDS[0]).title == DEFAULT_TILE_SEEDS[0]["title"]
        assert tile_store.has_pending_write

        tile_store.flush()
        assert [t["id"] for t in stored_tiles(storage)] == SEED_IDS

    def test_corrupt_storage_falls_back_to_defaults(self, scheduler: ManualScheduler) -> None:
        storage = MemoryStorage({STORAGE_KEY_TILES: "{not json"})
        tile_store = TileStore(LocalStorageAdapter(storage), scheduler=scheduler)
        tile_store.load()
        assert [t.id for t in tile_store.tiles] == SEED_IDS

    def test_malformed_records_fall_back_to_defaults(self, scheduler: ManualScheduler) -> None:
        storage = MemoryStorage({STORAGE_KEY_TILES: json.dumps(["oops", 3])})
        tile_store = TileStore(LocalStorageAdapter(storage), scheduler=scheduler)
        tile_store.load()
        assert [t.id for t in tile_store.tiles] == SEED_IDS


class TestCreate:
    def test_create_assigns_id_order_and_normalizes(self, store: TileStore, clock) -> None:
        tile = store.create({"title": "New", "color": "#000000", "icon": "📷"})

        assert tile.id == f"tile_{int(clock().timestamp() * 1000)}"
        assert tile.order == len(SEED_IDS)
        assert tile.color in PASTEL_COLORS
        assert tile.icon == "camera"
        assert tile.last_updated == clock().isoformat()
        assert store.settings.tile_order[-1] == tile.id

    def test_create_ignores_caller_id_and_order(self, store: TileStore) -> None:
        tile = store.create({"id": "research", "order": 0, "title": "Sneaky"})
        assert tile.id != "research"
        assert tile.order == len(SEED_IDS)

    def test_ids_are_unique_within_one_millisecond(self, store: TileStore) -> None:
        first = store.create({"title": "One"})
        second = store.create({"title": "Two"})
        assert second.id == f"{first.id}_1"

    def test_snake_case_input_is_accepted(self, store: TileStore) -> None:
        tile = store.create({"title": "Due", "due_date": "2024-05-12"})
        assert tile.due_date == "2024-05-12"

    def test_invalid_input_raises_with_field_errors(self, store: TileStore) -> None:
        with pytest.raises(TileValidationError) as exc_info:
            store.create({"title": "Bad", "progress": 150})
        assert [e["field"] for e in exc_info.value.errors] == ["progress"]
        assert len(store.tiles) == len(SEED_IDS)


class TestUpdate:
    def test_update_merges_and_protects_id_and_order(self, store: TileStore, clock) -> None:
        clock.tick(minutes=5)
        tile = store.update("research", {"title": "Lab", "id": "x", "order": 99})

        assert tile.id == "research"
        assert tile.order == 0
        assert tile.title == "Lab"
        assert tile.last_updated == clock().isoformat()
        assert store.get("research").title == "Lab"

    def test_empty_color_keeps_existing(self, store: TileStore) -> None:
        before = store.get("research").color
        assert store.update("research", {"color": ""}).color == before

    def test_color_is_normalized(self, store: TileStore) -> None:
        assert store.update("research", {"color": "#fff"}).color == "#FFFFBA"

    def test_unknown_tile(self, store: TileStore) -> None:
        with pytest.raises(TileNotFoundError):
            store.update("nope", {"title": "x"})

    def test_self_dependency_is_rejected(self, store: TileStore) -> None:
        with pytest.raises(TileValidationError) as exc_info:
            store.update("research", {"dependsOn": ["research"]})
        assert exc_info.value.errors[0]["field"] == "dependsOn"

    def test_cycle_is_kept_but_reported(self, store: TileStore) -> None:
        store.update("research", {"dependsOn": ["charters"]})
        store.update("charters", {"dependsOn": ["research"]})

        assert store.get("charters").depends_on == ["research"]
        assert store.dependency_cycle("charters") == ["charters", "research", "charters"]
        latest = store.notifications.items[0]
        assert latest.title == "Dependency cycle"
        assert latest.type == "warning"
        assert latest.tile_id == "charters"


class TestDeleteReorderSearch:
    def test_delete_keeps_photos_until_pruned(self, store: TileStore) -> None:
        photo = store.add_photo("photos", "data:image/png;base64,AAA", "thumb")
        store.delete("photos")

        assert "photos" not in [t.id for t in store.tiles]
        assert "photos" not in store.settings.tile_order
        assert store.photos == [photo]
        assert store.prune_orphan_photos() == [photo.id]
        assert store.photos == []

    def test_delete_unknown(self, store: TileStore) -> None:
        with pytest.raises(TileNotFoundError):
            store.delete("nope")

    def test_new_tile_after_delete_stays_before_large_tiles(self, store: TileStore) -> None:
        store.delete("personal")
        tile = store.create({"title": "New"})
        ids = [t.id for t in store.tiles]

        assert tile.order == len(SEED_IDS) - 1
        assert store.get("todo-notes").order == tile.order
        assert ids[-2:] == [tile.id, "todo-notes"]

    def test_reorder_subset(self, store: TileStore) -> None:
        tiles = store.reorder(["personal", "research"])
        ids = [t.id for t in tiles]

        assert ids[0] == "personal"
        assert ids.index("research") == SEED_IDS.index("personal")
        assert ids[-1] == "todo-notes"
        assert store.settings.tile_order == ids

    def test_search_matches_title_and_content(self, store: TileStore) -> None:
        store.update("personal", {"content": "<p>Buy <b>milk</b></p>"})
        assert [t.id for t in store.search("vess")] == ["vessels"]
        assert [t.id for t in store.search("buy milk")] == ["personal"]
        assert len(store.search("  ")) == len(SEED_IDS)


class TestPhotosAndSettings:
    def test_add_photo_requires_tile(self, store: TileStore) -> None:
        with pytest.raises(TileNotFoundError):
            store.add_photo("nope", "data", "thumb")

    def test_add_and_delete_photo(self, store: TileStore) -> None:
        photo = store.add_photo("photos", "data", "thumb", caption="Harbour")
        assert photo.id.startswith("photo_")
        assert store.photos_for("photos") == [photo]

        store.delete_photo(photo.id)
        assert store.photos == []
        with pytest.raises(PhotoNotFoundError):
            store.delete_photo(photo.id)

    def test_toggle_dark_mode(self, store: TileStore) -> None:
        assert store.toggle_dark_mode() is True
        assert store.toggle_dark_mode() is False


class TestSnapshots:
    def test_export_stamps_last_backup(self, store: TileStore, clock) -> None:
        snapshot = store.export_snapshot()
        assert snapshot.timestamp == clock().isoformat()
        assert store.settings.last_backup == clock().isoformat()
        assert [t["id"] for t in snapshot.tiles] == SEED_IDS

    def test_import_replaces_tiles_and_migrates(self, store: TileStore) -> None:
        photo = store.add_photo("photos", "data", "thumb")
        store.import_snapshot(
            {"tiles": [{"id": "x", "title": "X", "icon": "📷", "color": "#000000"}]}
        )

        assert [t.id for t in store.tiles] == ["x"]
        assert store.get("x").icon == "camera"
        assert store.get("x").color in PASTEL_COLORS
        # No photos key: photos are left alone.
        assert store.photos == [photo]

    def test_invalid_import_changes_nothing(self, store: TileStore) -> None:
        with pytest.raises(TileValidationError) as exc_info:
            store.import_snapshot({"tiles": [{"id": "ok"}, {"title": "no id"}]})
        assert exc_info.value.errors[0]["field"] == "tiles.1.id"
        assert [t.id for t in store.tiles] == SEED_IDS

    def test_import_with_repeated_ids_changes_nothing(self, store: TileStore) -> None:
        with pytest.raises(TileValidationError) as exc_info:
            store.import_snapshot({"tiles": [{"id": "a"}, {"id": "a"}]})
        assert exc_info.value.errors == [{"field": "tiles.1.id", "message": "duplicate tile id"}]
        assert [t.id for t in store.tiles] == SEED_IDS

    def test_import_rejects_non_json(self, store: TileStore) -> None:
        with pytest.raises(InvalidFormatError):
            store.import_snapshot("not json")


class TestPersistence:
    def test_burst_of_edits_results_in_one_write(
        self, store: TileStore, scheduler: ManualScheduler, memory_storage: MemoryStorage
    ) -> None:
        store.flush()
        store.create({"title": "One"})
        scheduler.advance(0.25)
        store.create({"title": "Two"})
        scheduler.advance(0.25)
        assert len(stored_tiles(memory_storage)) == len(SEED_IDS)

        assert scheduler.advance(0.25) == 1
        assert len(stored_tiles(memory_storage)) == len(SEED_IDS) + 2

    def test_flush_writes_at_once_and_disarms_the_timer(
        self, store: TileStore, scheduler: ManualScheduler, memory_storage: MemoryStorage
    ) -> None:
        tile = store.create({"title": "Now"})
        store.flush()

        assert not store.has_pending_write
        assert stored_tiles(memory_storage)[-2]["id"] == tile.id
        assert scheduler.advance(1) == 0

    def test_failed_write_keeps_changes_dirty(
        self, memory_storage: MemoryStorage, scheduler: ManualScheduler
    ) -> None:
        adapter = FlakyAdapter(memory_storage)
        tile_store = TileStore(adapter, scheduler=scheduler)
        tile_store.load()
        adapter.broken = True

        with pytest.raises(PersistenceError):
            tile_store.flush()
        assert memory_storage.get_item(STORAGE_KEY_TILES) is None

        adapter.broken = False
        tile_store.flush()
        assert len(stored_tiles(memory_storage)) == len(SEED_IDS)

    def test_reset_restores_defaults(
        self, store: TileStore, memory_storage: MemoryStorage
    ) -> None:
        store.create({"title": "Extra"})
        store.notifications.add("Hi", "there")
        store.flush()

        store.reset()
        assert [t.id for t in store.tiles] == SEED_IDS
        assert store.notifications.items == []

        store.flush()
        assert [t["id"] for t in stored_tiles(memory_storage)] == SEED_IDS
