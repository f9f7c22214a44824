# backend/app/modules/board/factory.py
"""Wiring for a file-backed board outside the web app (scripts, desktop shells)."""

from dataclasses import dataclass
from pathlib import Path

from app.core.config import settings
from app.modules.board.core.backup import BackupHistory
from app.modules.board.core.notifications import NotificationCenter
from app.modules.board.core.scheduler import Scheduler
from app.modules.board.core.store import TileStore
from app.modules.board.persistence.base import KeyValueStorage
from app.modules.board.persistence.local import JsonFileStorage, LocalStorageAdapter


@dataclass
class LocalBoard:
    store: TileStore
    notifications: NotificationCenter
    backups: BackupHistory
    storage: KeyValueStorage


def build_local_board(
    data_dir: str | Path | None = None,
    *,
    scheduler: Scheduler | None = None,
    storage: KeyValueStorage | None = None,
) -> LocalBoard:
    """
    Build a loaded `TileStore` over JSON files in `DATA_DIR`.

    Debounce, notification and backup-history limits come from settings.
    """
    storage = storage or JsonFileStorage(data_dir or settings.DATA_DIR)
    notifications = NotificationCenter(storage, limit=settings.NOTIFICATION_LIMIT)
    store = TileStore(
        LocalStorageAdapter(storage),
        scheduler=scheduler,
        debounce_seconds=settings.SAVE_DEBOUNCE_SECONDS,
        notifications=notifications,
    )
    store.load()
    return LocalBoard(
        store=store,
        notifications=notifications,
        backups=BackupHistory(storage, limit=settings.BACKUP_HISTORY_LIMIT),
        storage=storage,
    )
