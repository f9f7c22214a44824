# backend/app/modules/board/persistence/local.py
"""
File-backed stand-in for browser localStorage.

Each key is one JSON-text file in `directory`; writes go through a temporary
file and an atomic rename so a crash never leaves a half-written value.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from app.exceptions import PersistenceError
from app.modules.board.core.constants import (
    STORAGE_KEY_PHOTOS,
    STORAGE_KEY_SETTINGS,
    STORAGE_KEY_TILES,
)
from app.modules.board.persistence.base import KeyValueStorage, PersistenceAdapter, Record

logger = logging.getLogger(__name__)

_SAFE_KEY_RE = re.compile(r"[A-Za-z0-9_.-]+")


class JsonFileStorage(KeyValueStorage):
    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY_RE.fullmatch(key) or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError as e:
            raise PersistenceError(f"Could not write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        if not self.directory.is_dir():
            return
        for path in self.directory.glob("*.json"):
            path.unlink(missing_ok=True)


class LocalStorageAdapter(PersistenceAdapter):
    """Stores each section as a JSON document under the browser's storage keys."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def _read(self, key: str, expected: type) -> Any:
        raw = self.storage.get_item(key)
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise PersistenceError(f"Stored value for {key!r} is not valid JSON: {e}") from e
        if not isinstance(value, expected):
            raise PersistenceError(f"Stored value for {key!r} is a {type(value).__name__}, expected {expected.__name__}")
        return value

    def _write(self, key: str, value: Any) -> None:
        self.storage.set_item(key, json.dumps(value, ensure_ascii=False))

    def load_tiles(self) -> list[Record] | None:
        return self._read(STORAGE_KEY_TILES, list)

    def save_tiles(self, tiles: list[Record]) -> None:
        self._write(STORAGE_KEY_TILES, tiles)

    def load_settings(self) -> Record | None:
        return self._read(STORAGE_KEY_SETTINGS, dict)

    def save_settings(self, settings: Record) -> None:
        self._write(STORAGE_KEY_SETTINGS, settings)

    def load_photos(self) -> list[Record] | None:
        return self._read(STORAGE_KEY_PHOTOS, list)

    def save_photos(self, photos: list[Record]) -> None:
        self._write(STORAGE_KEY_PHOTOS, photos)

    def clear(self) -> None:
        # Matches browser behaviour: wipes every key, backups and feed included.
        self.storage.clear()
