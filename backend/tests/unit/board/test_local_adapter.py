# backend/tests/unit/board/test_local_adapter.py
import json
from pathlib import Path

import pytest

from app.exceptions import PersistenceError
from app.modules.board.persistence.base import LayeredAdapter, MemoryStorage, PersistenceAdapter
from app.modules.board.persistence.local import JsonFileStorage, LocalStorageAdapter


class TestJsonFileStorage:
    def test_round_trip_and_missing_key(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "data")
        assert storage.get_item("projectos_tiles") is None

        storage.set_item("projectos_tiles", "[1, 2]")
        assert storage.get_item("projectos_tiles") == "[1, 2]"
        assert (tmp_path / "data" / "projectos_tiles.json").exists()
        assert not list((tmp_path / "data").glob(".*.tmp"))

    @pytest.mark.parametrize("key", ["../escape", "a/b", ".hidden", "", "tiles\n"])
    def test_unsafe_keys_are_rejected(self, tmp_path: Path, key: str) -> None:
        with pytest.raises(ValueError):
            JsonFileStorage(tmp_path).set_item(key, "x")

    def test_remove_and_clear(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.remove_item("a")
        storage.remove_item("a")
        assert storage.get_item("a") is None

        storage.clear()
        assert storage.get_item("b") is None

    def test_unwritable_directory_raises_persistence_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(PersistenceError):
            JsonFileStorage(blocker / "sub").set_item("a", "1")


class TestLocalStorageAdapter:
    def test_sections_use_browser_keys(self) -> None:
        storage = MemoryStorage()
        adapter = LocalStorageAdapter(storage)
        adapter.save_tiles([{"id": "a"}])
        adapter.save_settings({"darkMode": True})
        adapter.save_photos([])

        assert json.loads(storage.get_item("projectos_tiles")) == [{"id": "a"}]
        assert adapter.load_settings() == {"darkMode": True}
        assert adapter.load_photos() == []

    def test_nothing_stored_loads_none(self) -> None:
        assert LocalStorageAdapter(MemoryStorage()).load_tiles() is None

    @pytest.mark.parametrize("raw", ["{oops", '{"id": "a"}'])
    def test_bad_values_raise(self, raw: str) -> None:
        adapter = LocalStorageAdapter(MemoryStorage({"projectos_tiles": raw}))
        with pytest.raises(PersistenceError):
            adapter.load_tiles()

    def test_clear_wipes_everything(self) -> None:
        storage = MemoryStorage({"projectos_tiles": "[]", "tiles_backups": "[]"})
        LocalStorageAdapter(storage).clear()
        assert storage.get_item("tiles_backups") is None


class RecordingAdapter(PersistenceAdapter):
    """In-memory adapter that can be made to fail."""

    def __init__(self, tiles=None, fail: bool = False):
        self.data = {"tiles": tiles, "settings": None, "photos": None}
        self.fail = fail

    def _get(self, key):
        if self.fail:
            raise PersistenceError("unreachable")
        return self.data[key]

    def _set(self, key, value) -> None:
        if self.fail:
            raise PersistenceError("unreachable")
        self.data[key] = value

    def load_tiles(self):
        return self._get("tiles")

    def save_tiles(self, tiles) -> None:
        self._set("tiles", tiles)

    def load_settings(self):
        return self._get("settings")

    def save_settings(self, settings) -> None:
        self._set("settings", settings)

    def load_photos(self):
        return self._get("photos")

    def save_photos(self, photos) -> None:
        self._set("photos", photos)


class TestLayeredAdapter:
    def test_local_wins_when_present(self) -> None:
        layered = LayeredAdapter(RecordingAdapter([{"id": "local"}]), RecordingAdapter([{"id": "remote"}]))
        assert layered.load_tiles() == [{"id": "local"}]

    def test_falls_back_to_remote(self) -> None:
        layered = LayeredAdapter(RecordingAdapter(), RecordingAdapter([{"id": "remote"}]))
        assert layered.load_tiles() == [{"id": "remote"}]

    def test_unreadable_local_falls_back_to_remote(self) -> None:
        layered = LayeredAdapter(RecordingAdapter(fail=True), RecordingAdapter([{"id": "remote"}]))
        assert layered.load_tiles() == [{"id": "remote"}]

    def test_remote_save_failure_is_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        local = RecordingAdapter()
        layered = LayeredAdapter(local, RecordingAdapter(fail=True))

        layered.save_tiles([{"id": "a"}])

        assert local.data["tiles"] == [{"id": "a"}]
        assert "Remote save_tiles" in caplog.text

    def test_local_save_failure_is_raised(self) -> None:
        layered = LayeredAdapter(RecordingAdapter(fail=True), RecordingAdapter())
        with pytest.raises(PersistenceError):
            layered.save_settings({})

    def test_clear_without_support_raises_not_implemented(self) -> None:
        with pytest.raises(NotImplementedError):
            LayeredAdapter(RecordingAdapter()).clear()
