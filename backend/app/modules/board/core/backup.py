# backend/app/modules/board/core/backup.py
"""
Snapshot creation, (de)serialization, rolling backup history and CSV export.
"""

import csv
import io
import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from dateutil.parser import isoparse
from pydantic import ValidationError

from app.exceptions import InvalidFormatError, TileValidationError
from app.modules.board.core.constants import (
    CSV_CONTENT_PREVIEW_LEN,
    MAX_BACKUPS,
    SNAPSHOT_VERSION,
    STORAGE_KEY_BACKUPS,
)
from app.modules.board.core.icons import migrate_tile_record
from app.modules.board.core.models import BoardSettings, Photo, Snapshot, Tile, validation_errors
from app.modules.board.persistence.base import KeyValueStorage
from app.modules.board.utils.text import preview

if TYPE_CHECKING:
    from app.modules.board.core.store import TileStore

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Title", "Status", "Priority", "Due Date", f"Content (first {CSV_CONTENT_PREVIEW_LEN} chars)"]
_REQUIRED_KEYS = ("version", "timestamp", "tiles")


def _as_dict(item: Any) -> dict[str, Any]:
    return item.to_storage() if hasattr(item, "to_storage") else dict(item)


_OLDEST = datetime.min.replace(tzinfo=UTC)


def _entry_time(entry: dict[str, Any]) -> datetime:
    """Parsed entry timestamp; naive values are taken as UTC and unreadable ones sort last."""
    try:
        parsed = isoparse(str(entry.get("timestamp", "")))
    except (ValueError, OverflowError):
        return _OLDEST
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def create_snapshot(
    tiles: Iterable[Tile | dict[str, Any]],
    photos: Iterable[Photo | dict[str, Any]] = (),
    settings: BoardSettings | dict[str, Any] | None = None,
    now: datetime | None = None,
) -> Snapshot:
    now = now or datetime.now(UTC)
    return Snapshot(
        version=SNAPSHOT_VERSION,
        timestamp=now.isoformat(),
        id=f"backup-{int(now.timestamp() * 1000)}",
        tiles=[_as_dict(t) for t in tiles],
        photos=[_as_dict(p) for p in photos],
        settings=_as_dict(settings) if settings is not None else None,
    )


def serialize_snapshot(snapshot: Snapshot) -> bytes:
    return json.dumps(snapshot.to_storage(), indent=2, ensure_ascii=False).encode("utf-8")


def deserialize_snapshot(data: bytes | str | dict[str, Any]) -> Snapshot:
    """
    Parse a backup payload.

    Raises:
        InvalidFormatError: not JSON, not an object, or missing version,
            timestamp or a tiles list.
    """
    payload = _load_json_object(data)
    missing = [key for key in _REQUIRED_KEYS if key not in payload]
    if missing:
        raise InvalidFormatError(f"Backup is missing required field(s): {', '.join(missing)}")
    if not isinstance(payload["tiles"], list):
        raise InvalidFormatError("Backup field 'tiles' must be a list")

    try:
        return Snapshot.model_validate(payload)
    except ValidationError as e:
        raise InvalidFormatError(f"Backup structure is invalid: {e.error_count()} error(s)") from e


@dataclass(frozen=True)
class BoardData:
    """Validated contents of an import; `None` sections are left untouched."""

    tiles: list[Tile]
    photos: list[Photo] | None = None
    settings: BoardSettings | None = None


def _load_json_object(data: bytes | str | dict[str, Any]) -> dict[str, Any]:
    if isinstance(data, dict):
        return data
    try:
        payload = json.loads(data)
    except (ValueError, TypeError) as e:
        raise InvalidFormatError(f"Import is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise InvalidFormatError("Import must be a JSON object")
    return payload


def parse_board_data(data: bytes | str | dict[str, Any]) -> BoardData:
    """
    Migrate and validate an import payload without applying it.

    Only a `tiles` list is required, so exports from older versions without
    a timestamp still import.

    Raises:
        InvalidFormatError: not JSON, not an object, or no `tiles` list.
        TileValidationError: one `{field, message}` entry per invalid field.
    """
    payload = _load_json_object(data)
    if not isinstance(payload.get("tiles"), list):
        raise InvalidFormatError("Import must contain a 'tiles' list")

    errors: list[dict[str, str]] = []
    tiles: list[Tile] = []
    seen_ids: set[str] = set()
    for index, record in enumerate(payload["tiles"]):
        if not isinstance(record, dict):
            errors.append({"field": f"tiles.{index}", "message": "Tile must be an object"})
            continue
        try:
            tile = Tile.model_validate(migrate_tile_record(record))
        except ValidationError as e:
            errors.extend(validation_errors(e, prefix=f"tiles.{index}."))
            continue
        if tile.id in seen_ids:
            errors.append({"field": f"tiles.{index}.id", "message": "duplicate tile id"})
            continue
        seen_ids.add(tile.id)
        tiles.append(tile)

    photos: list[Photo] | None = None
    if isinstance(payload.get("photos"), list):
        photos = []
        for index, record in enumerate(payload["photos"]):
            try:
                photos.append(Photo.model_validate(record))
            except ValidationError as e:
                errors.extend(validation_errors(e, prefix=f"photos.{index}."))

    settings: BoardSettings | None = None
    if payload.get("settings") is not None:
        try:
            settings = BoardSettings.model_validate(payload["settings"])
        except ValidationError as e:
            errors.extend(validation_errors(e, prefix="settings."))

    if errors:
        raise TileValidationError(errors)
    return BoardData(tiles=tiles, photos=photos, settings=settings)


class BackupHistory:
    """Rolling list of the most recent snapshots, persisted under `tiles_backups`."""

    def __init__(self, storage: KeyValueStorage, limit: int = MAX_BACKUPS):
        self.storage = storage
        self.limit = limit

    def _read(self) -> list[dict[str, Any]]:
        raw = self.storage.get_item(STORAGE_KEY_BACKUPS)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Backup history is unreadable, starting fresh: {e}")
            return []
        return [entry for entry in entries if isinstance(entry, dict)] if isinstance(entries, list) else []

    def _write(self, entries: list[dict[str, Any]]) -> None:
        self.storage.set_item(STORAGE_KEY_BACKUPS, json.dumps(entries))

    def store(self, snapshot: Snapshot) -> list[Snapshot]:
        """
        Prepend, keep the newest `limit` entries and persist. Returns the kept history.

        A snapshot whose id is already taken is stored as `<id>-1`, `<id>-2`, ...
        """
        existing = self._read()
        taken = {e.get("id") for e in existing}
        candidate, suffix = snapshot.id, 1
        while candidate is not None and candidate in taken:
            candidate = f"{snapshot.id}-{suffix}"
            suffix += 1
        entry = snapshot.to_storage()
        if candidate is not None:
            entry["id"] = candidate
        entries = [entry, *existing]
        entries.sort(key=_entry_time, reverse=True)
        kept = entries[: self.limit]
        self._write(kept)
        if len(entries) > self.limit:
            logger.debug(f"Backup history trimmed from {len(entries)} to {self.limit} entries.")
        return [Snapshot.model_validate(e) for e in kept]

    def list(self) -> list[Snapshot]:
        history = []
        for entry in self._read():
            try:
                history.append(Snapshot.model_validate(entry))
            except ValidationError:
                logger.warning(f"Skipping malformed backup entry {entry.get('id')!r}")
        return history

    def get(self, backup_id: str) -> Snapshot | None:
        return next((s for s in self.list() if s.id == backup_id), None)

    def delete(self, backup_id: str) -> bool:
        entries = self._read()
        remaining = [e for e in entries if e.get("id") != backup_id]
        if len(remaining) == len(entries):
            return False
        self._write(remaining)
        return True


def restore(store: "TileStore", snapshot: Snapshot | bytes | str | dict[str, Any]) -> None:
    """Replace the store's data with a snapshot. Confirmation is the caller's job."""
    if isinstance(snapshot, Snapshot):
        snapshot = snapshot.to_storage()
    store.import_snapshot(snapshot)


def _csv_content(content: str | None) -> str:
    return preview(content, CSV_CONTENT_PREVIEW_LEN).replace(",", ";")


def export_tiles_csv(tiles: Sequence[Tile]) -> str:
    """Lossy spreadsheet projection of the tiles; there is no import path."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for tile in tiles:
        writer.writerow(
            [
                tile.title,
                tile.status or "N/A",
                tile.priority or "N/A",
                tile.due_date or "N/A",
                _csv_content(tile.content),
            ]
        )
    return buffer.getvalue().rstrip("\n")
