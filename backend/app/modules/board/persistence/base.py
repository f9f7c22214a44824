# backend/app/modules/board/persistence/base.py
"""
Persistence boundary of the board core.

Adapters are pass-throughs: they move plain JSON-ready dicts to and from a
medium and never hold authoritative state. `None` from a load means "nothing
stored yet"; unreadable data raises PersistenceError.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from app.exceptions import PersistenceError

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class KeyValueStorage(ABC):
    """String key/value store with browser localStorage semantics."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class MemoryStorage(KeyValueStorage):
    """Process-local storage; nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class PersistenceAdapter(ABC):
    """Contract between the Tile Store and a storage medium."""

    @abstractmethod
    def load_tiles(self) -> list[Record] | None:
        pass

    @abstractmethod
    def save_tiles(self, tiles: list[Record]) -> None:
        pass

    @abstractmethod
    def load_settings(self) -> Record | None:
        pass

    @abstractmethod
    def save_settings(self, settings: Record) -> None:
        pass

    @abstractmethod
    def load_photos(self) -> list[Record] | None:
        pass

    @abstractmethod
    def save_photos(self, photos: list[Record]) -> None:
        pass

    def clear(self) -> None:
        """Drop everything this adapter stored. Optional."""
        raise NotImplementedError(f"{self.name} does not support clear()")

    @property
    def name(self) -> str:
        return self.__class__.__name__


class LayeredAdapter(PersistenceAdapter):
    """
    Local-first persistence with a remote fallback.

    Loads come from `local` and fall back to `remote` when local has nothing
    (or is unreadable). Saves always go to `local`; the remote copy is
    best-effort and failures there are logged, not raised.
    """

    def __init__(self, local: PersistenceAdapter, remote: PersistenceAdapter | None = None):
        self.local = local
        self.remote = remote

    def _load(self, method: str) -> Any:
        try:
            value = getattr(self.local, method)()
        except PersistenceError as e:
            logger.warning(f"{self.local.name}.{method} failed, trying remote: {e}")
            value = None
        if value is not None or self.remote is None:
            return value
        logger.info(f"{method}: nothing stored locally, loading from {self.remote.name}.")
        return getattr(self.remote, method)()

    def _save(self, method: str, payload: Any) -> None:
        getattr(self.local, method)(payload)
        if self.remote is None:
            return
        try:
            getattr(self.remote, method)(payload)
        except PersistenceError as e:
            logger.warning(f"Remote {method} via {self.remote.name} failed: {e}")

    def load_tiles(self) -> list[Record] | None:
        return self._load("load_tiles")

    def save_tiles(self, tiles: list[Record]) -> None:
        self._save("save_tiles", tiles)

    def load_settings(self) -> Record | None:
        return self._load("load_settings")

    def save_settings(self, settings: Record) -> None:
        self._save("save_settings", settings)

    def load_photos(self) -> list[Record] | None:
        return self._load("load_photos")

    def save_photos(self, photos: list[Record]) -> None:
        self._save("save_photos", photos)

    def clear(self) -> None:
        self.local.clear()
