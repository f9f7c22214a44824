# backend/app/services/board_service.py
"""
Board operations for the REST backend.

Rows are converted to core `Tile`/`Photo` models so the same migration,
normalization, reorder and status logic backs both the in-memory store and
the database.
"""

import logging
import secrets
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core.config import settings
from app.core.log_utils import sanitize_for_log
from app.db.models.photo import BoardPhoto
from app.db.models.tile import BoardTile
from app.db.models.tile_version import TileVersion
from app.exceptions import TileValidationError
from app.modules.board.core.backup import BoardData, create_snapshot, parse_board_data
from app.modules.board.core.colors import normalize_color
from app.modules.board.core.icons import migrate_icon
from app.modules.board.core.models import Photo, Snapshot, Tile, validation_errors
from app.modules.board.core.reorder import reconcile
from app.modules.board.core.status import (
    blocked_by,
    blocking,
    due_soon_tiles,
    find_dependency_cycle,
    overdue_tiles,
)
from app.modules.board.core.store import default_settings, default_tiles
from app.schemas.photo import PhotoCreate
from app.schemas.tile import TileCreate, TileUpdate

logger = logging.getLogger(__name__)

DUE_KINDS = ("overdue", "due-soon")


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


# --- Conversion ---


def row_to_tile(row: BoardTile) -> Tile:
    data: dict[str, Any] = {
        "id": row.slug,
        "title": row.title,
        "content": row.content,
        "last_updated": row.last_updated,
        "color": row.color,
        "icon": row.icon,
        "progress": row.progress,
        "order": row.order_index,
        "variant": row.variant,
        "due_date": row.due_date,
        "reminder": row.reminder,
        "depends_on": row.depends_on or [],
        "subtasks": row.subtasks or [],
        "status": row.status,
        "priority": row.priority,
    }
    return Tile.model_validate({k: v for k, v in data.items() if v is not None})


def tile_to_columns(tile: Tile) -> dict[str, Any]:
    return {
        "slug": tile.id,
        "title": tile.title,
        "content": tile.content,
        "last_updated": tile.last_updated,
        "color": tile.color,
        "icon": tile.icon,
        "progress": tile.progress,
        "order_index": tile.order,
        "variant": tile.variant,
        "due_date": tile.due_date,
        "reminder": tile.reminder.to_storage() if tile.reminder else None,
        "depends_on": list(tile.depends_on),
        "subtasks": [st.to_storage() for st in tile.subtasks],
        "status": tile.status,
        "priority": tile.priority,
    }


def row_to_photo(row: BoardPhoto) -> Photo:
    return Photo(
        id=row.id,
        tile_id=row.tile_id,
        base64_data=row.base64_data,
        thumbnail=row.thumbnail,
        timestamp=row.timestamp,
        caption=row.caption,
    )


def _validate(record: dict[str, Any]) -> Tile:
    try:
        return Tile.model_validate(record)
    except ValidationError as e:
        raise TileValidationError(validation_errors(e)) from e


def _apply_columns(row: BoardTile, columns: dict[str, Any], *, keep: tuple[str, ...] = ()) -> None:
    for key, value in columns.items():
        if key not in keep:
            setattr(row, key, value)


async def _warn_on_cycle(db: AsyncSession, slug: str) -> list[str] | None:
    tiles = [row_to_tile(r) for r in await crud.tile.get_all_ordered(db)]
    cycle = find_dependency_cycle(tiles, slug)
    if cycle:
        logger.warning(f"Dependency cycle detected: {sanitize_for_log(' -> '.join(cycle))}")
    return cycle


# --- Tiles ---


async def new_slug(db: AsyncSession) -> str:
    taken = await crud.tile.get_slugs(db)
    base = f"tile_{int(datetime.now(UTC).timestamp() * 1000)}"
    candidate, suffix = base, 1
    while candidate in taken:
        candidate = f"{base}_{suffix}"
        suffix += 1
    return candidate


async def seed_defaults_if_empty(db: AsyncSession) -> bool:
    """Insert the default board into an empty database. Returns True when seeded."""
    if await crud.tile.count(db):
        return False
    for tile in default_tiles():
        db.add(BoardTile(**tile_to_columns(tile)))
    await crud.board_settings.update(
        db, obj_in={"tile_order": default_settings().tile_order}, commit=False
    )
    await db.commit()
    logger.info("Seeded the default board.")
    return True


async def create_tile(db: AsyncSession, tile_in: TileCreate) -> BoardTile:
    """Append a tile at the end of the board; the slug is generated when not given."""
    slug = tile_in.slug or await new_slug(db)
    data = tile_in.model_dump(exclude={"slug"}, exclude_none=True)
    data.update(
        id=slug,
        order=await crud.tile.count(db),
        color=normalize_color(tile_in.color or ""),
        last_updated=_now_iso(),
    )
    if tile_in.icon is not None:
        data["icon"] = migrate_icon(tile_in.icon)
    tile = _validate(data)

    row = BoardTile(**tile_to_columns(tile))
    db.add(row)
    board = await crud.board_settings.get(db)
    await crud.board_settings.update(
        db, obj_in={"tile_order": [*(board.tile_order or []), slug]}, commit=False
    )
    await db.commit()
    await db.refresh(row)
    logger.info(f"Created tile {row.id} ({sanitize_for_log(slug)})")
    if tile.depends_on:
        await _warn_on_cycle(db, slug)
    return row


async def update_tile(db: AsyncSession, row: BoardTile, tile_in: TileUpdate) -> BoardTile:
    """Merge changes into a tile, keeping a version of its previous state."""
    changes = tile_in.model_dump(exclude_unset=True)
    if changes.get("color"):
        changes["color"] = normalize_color(changes["color"])
    else:
        changes.pop("color", None)
    if changes.get("icon") is not None:
        changes["icon"] = migrate_icon(changes["icon"])
    merged = {**row_to_tile(row).model_dump(), **changes, "last_updated": _now_iso()}
    tile = _validate(merged)

    crud.tile_version.snapshot(db, tile=row)
    _apply_columns(row, tile_to_columns(tile), keep=("slug", "order_index"))
    await db.commit()
    await db.refresh(row)
    if "depends_on" in changes:
        await _warn_on_cycle(db, row.slug)
    return row


async def delete_tile(db: AsyncSession, row: BoardTile) -> None:
    """Delete a tile and drop it from the tile order. Its photos stay until pruned."""
    board = await crud.board_settings.get(db)
    await crud.board_settings.update(
        db,
        obj_in={"tile_order": [s for s in (board.tile_order or []) if s != row.slug]},
        commit=False,
    )
    await db.delete(row)
    await db.commit()
    logger.info(f"Deleted tile {sanitize_for_log(row.slug)}")


async def reorder_tiles(db: AsyncSession, subset_slugs: list[str]) -> list[BoardTile]:
    rows = await crud.tile.get_all_ordered(db)
    result = reconcile([row_to_tile(r) for r in rows], subset_slugs)
    by_slug = {r.slug: r for r in rows}
    for tile in result.tiles:
        by_slug[tile.id].order_index = tile.order
    await crud.board_settings.update(db, obj_in={"tile_order": result.tile_order}, commit=False)
    await db.commit()
    return await crud.tile.get_all_ordered(db)


async def sync_tiles(db: AsyncSession, tiles: list[Tile]) -> list[BoardTile]:
    """
    Make the tile table match `tiles` exactly, keyed by slug.

    Rows missing from the payload are deleted along with their versions and
    share links.
    """
    rows = {r.slug: r for r in await crud.tile.get_all_ordered(db)}
    wanted = set()
    for tile in tiles:
        wanted.add(tile.id)
        columns = tile_to_columns(tile)
        row = rows.get(tile.id)
        if row is None:
            db.add(BoardTile(**columns))
        else:
            _apply_columns(row, columns, keep=("slug",))
    removed = [row for slug, row in rows.items() if slug not in wanted]
    for row in removed:
        await db.delete(row)
    await db.commit()
    if removed:
        logger.info(f"Tile sync removed {len(removed)} tile(s).")
    return await crud.tile.get_all_ordered(db)


async def due_tiles(db: AsyncSession, kind: str) -> list[BoardTile]:
    rows = await crud.tile.get_all_ordered(db)
    tiles = [row_to_tile(r) for r in rows]
    if kind == "overdue":
        selected = overdue_tiles(tiles)
    else:
        selected = due_soon_tiles(tiles, due_soon_days=settings.DUE_SOON_DAYS)
    wanted = {t.id for t in selected}
    return [r for r in rows if r.slug in wanted]


async def tile_dependencies(db: AsyncSession, row: BoardTile) -> dict[str, Any]:
    rows = await crud.tile.get_all_ordered(db)
    by_slug = {r.slug: r for r in rows}
    tiles = [row_to_tile(r) for r in rows]
    return {
        "blocked_by": [by_slug[t.id] for t in blocked_by(tiles, row.slug)],
        "blocking": [by_slug[t.id] for t in blocking(tiles, row.slug)],
        "cycle": find_dependency_cycle(tiles, row.slug),
    }


async def restore_version(db: AsyncSession, row: BoardTile, version: TileVersion) -> BoardTile:
    """Roll a tile back to `version`, first saving the current state as a new version."""
    crud.tile_version.snapshot(db, tile=row)
    _apply_columns(row, crud.tile_version.restorable_fields(version))
    row.last_updated = _now_iso()
    await db.commit()
    await db.refresh(row)
    logger.info(f"Restored tile {row.id} to version {version.id}")
    return row


# --- Photos ---


async def create_photo(db: AsyncSession, photo_in: PhotoCreate) -> BoardPhoto:
    now = datetime.now(UTC)
    photo_id = photo_in.id or f"photo_{int(now.timestamp() * 1000)}_{secrets.token_hex(5)[:9]}"
    return await crud.photo.create(
        db,
        obj_in={
            "id": photo_id,
            "tile_id": photo_in.tile_id,
            "base64_data": photo_in.base64_data,
            "thumbnail": photo_in.thumbnail,
            "timestamp": photo_in.timestamp or now.isoformat(),
            "caption": photo_in.caption,
        },
    )


async def sync_photos(db: AsyncSession, photos: list[Photo]) -> list[BoardPhoto]:
    rows = {r.id: r for r in await crud.photo.get_multi(db)}
    wanted = set()
    for photo in photos:
        wanted.add(photo.id)
        columns = {
            "tile_id": photo.tile_id,
            "base64_data": photo.base64_data,
            "thumbnail": photo.thumbnail,
            "timestamp": photo.timestamp,
            "caption": photo.caption,
        }
        row = rows.get(photo.id)
        if row is None:
            db.add(BoardPhoto(id=photo.id, **columns))
        else:
            for key, value in columns.items():
                setattr(row, key, value)
    for photo_id, row in rows.items():
        if photo_id not in wanted:
            await db.delete(row)
    await db.commit()
    return await crud.photo.get_multi(db, order_by=BoardPhoto.timestamp)


# --- Backup ---


async def export_snapshot(db: AsyncSession) -> Snapshot:
    """Snapshot the whole board and stamp `lastBackup` on the settings row."""
    now = datetime.now(UTC)
    board = await crud.board_settings.update(db, obj_in={"last_backup": now.isoformat()})
    tiles = [row_to_tile(r) for r in await crud.tile.get_all_ordered(db)]
    photos = [row_to_photo(p) for p in await crud.photo.get_multi(db, order_by=BoardPhoto.timestamp)]
    board_settings = {
        "darkMode": board.dark_mode,
        "tileOrder": list(board.tile_order or []),
        "lastBackup": board.last_backup,
    }
    return create_snapshot(tiles, photos, board_settings, now=now)


async def import_snapshot(db: AsyncSession, payload: bytes | str | dict[str, Any]) -> BoardData:
    """
    Replace the board with an import payload.

    The payload is fully validated before any row changes; photos and
    settings are replaced only when present.
    """
    board = parse_board_data(payload)

    for row in await crud.tile.get_all_ordered(db):
        await db.delete(row)
    await db.flush()
    for tile in board.tiles:
        db.add(BoardTile(**tile_to_columns(tile)))

    if board.photos is not None:
        for row in await crud.photo.get_multi(db):
            await db.delete(row)
        await db.flush()
        for photo in board.photos:
            db.add(
                BoardPhoto(
                    id=photo.id,
                    tile_id=photo.tile_id,
                    base64_data=photo.base64_data,
                    thumbnail=photo.thumbnail,
                    timestamp=photo.timestamp,
                    caption=photo.caption,
                )
            )

    if board.settings is not None:
        await crud.board_settings.update(
            db, obj_in=board.settings.model_dump(), commit=False
        )
    await db.commit()
    logger.info(f"Imported board with {len(board.tiles)} tile(s).")
    return board
