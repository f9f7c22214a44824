# backend/app/api/routers/tiles.py
from collections.abc import Sequence
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.db.models.photo import BoardPhoto
from app.db.models.reminder import TileReminder
from app.db.models.shared_link import SharedLink
from app.db.models.tile import BoardTile
from app.db.models.tile_version import TileVersion
from app.db.session import get_async_session
from app.modules.board.core.models import Tile
from app.schemas.photo import PhotoRead
from app.schemas.reminder import ReminderCreate, ReminderRead
from app.schemas.sharing import SharedLinkCreate, SharedLinkRead, TileVersionRead
from app.schemas.tile import TileCreate, TileDependencies, TileRead, TileReorder, TileUpdate
from app.services import board_service, reminder_service

router = APIRouter()

DbSession = Annotated[AsyncSession, Depends(get_async_session)]


async def get_tile_or_404(db: AsyncSession, tile_id: int) -> BoardTile:
    tile = await crud.tile.get(db, tile_id)
    if not tile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tile not found")
    return tile


# --- Collection ---


@router.get("", response_model=list[TileRead], summary="List tiles in display order")
async def list_tiles(db: DbSession) -> Sequence[BoardTile]:
    return await crud.tile.get_all_ordered(db)


@router.post(
    "",
    response_model=TileRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new tile",
)
async def create_tile(tile_in: TileCreate, db: DbSession) -> BoardTile:
    """
    Create a tile at the end of the board. The color is snapped to the pastel
    palette and legacy emoji icons are migrated.
    """
    if tile_in.slug and await crud.tile.get_by_slug(db, slug=tile_in.slug):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="A tile with this slug already exists"
        )
    return await board_service.create_tile(db, tile_in)


@router.put("", response_model=list[TileRead], summary="Replace all tiles (client sync)")
async def sync_tiles(tiles: list[Tile], db: DbSession) -> Sequence[BoardTile]:
    """
    Make the server's tiles match the client's list, keyed by tile id (slug).
    Tiles absent from the list are deleted.
    """
    ids = [t.id for t in tiles]
    if len(ids) != len(set(ids)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate tile ids")
    return await board_service.sync_tiles(db, tiles)


@router.get("/slug/{slug}", response_model=TileRead, summary="Get a tile by slug")
async def get_tile_by_slug(slug: str, db: DbSession) -> BoardTile:
    tile = await crud.tile.get_by_slug(db, slug=slug)
    if not tile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tile not found")
    return tile


@router.post("/reorder", response_model=list[TileRead], summary="Reorder a subset of tiles")
async def reorder_tiles(reorder_in: TileReorder, db: DbSession) -> Sequence[BoardTile]:
    """
    Apply a new relative order for a subset of regular tiles (for example a
    filtered view). Tiles outside the subset keep their positions; large tiles
    stay after all regular ones.
    """
    return await board_service.reorder_tiles(db, reorder_in.tile_ids)


@router.get("/due", response_model=list[TileRead], summary="Overdue or due-soon tiles")
async def get_due_tiles(
    db: DbSession,
    kind: Annotated[Literal["overdue", "due-soon"], Query()] = "overdue",
) -> Sequence[BoardTile]:
    return await board_service.due_tiles(db, kind)


# --- Single tile ---


@router.get("/{tile_id}", response_model=TileRead, summary="Get a tile")
async def get_tile(tile_id: int, db: DbSession) -> BoardTile:
    return await get_tile_or_404(db, tile_id)


@router.patch("/{tile_id}", response_model=TileRead, summary="Update a tile")
async def update_tile(tile_id: int, tile_update: TileUpdate, db: DbSession) -> BoardTile:
    """
    Update a tile. The previous state is kept in the version history.
    """
    tile = await get_tile_or_404(db, tile_id)
    return await board_service.update_tile(db, tile, tile_update)


@router.delete("/{tile_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a tile")
async def delete_tile(tile_id: int, db: DbSession) -> None:
    tile = await get_tile_or_404(db, tile_id)
    await board_service.delete_tile(db, tile)
    return None


@router.get(
    "/{tile_id}/dependencies",
    response_model=TileDependencies,
    summary="Tiles this tile waits on and tiles waiting on it",
)
async def get_tile_dependencies(tile_id: int, db: DbSession) -> dict:
    tile = await get_tile_or_404(db, tile_id)
    return await board_service.tile_dependencies(db, tile)


@router.get("/{tile_id}/photos", response_model=list[PhotoRead], summary="Photos of a tile")
async def get_tile_photos(tile_id: int, db: DbSession) -> Sequence[BoardPhoto]:
    tile = await get_tile_or_404(db, tile_id)
    return await crud.photo.get_for_tile(db, tile_id=tile.slug)


# --- Version history ---


@router.get(
    "/{tile_id}/versions", response_model=list[TileVersionRead], summary="Tile version history"
)
async def get_tile_versions(tile_id: int, db: DbSession) -> Sequence[TileVersion]:
    await get_tile_or_404(db, tile_id)
    return await crud.tile_version.get_for_tile(db, tile_id=tile_id)


@router.post(
    "/{tile_id}/versions/{version_id}/restore",
    response_model=TileRead,
    summary="Restore a tile to an earlier version",
)
async def restore_tile_version(tile_id: int, version_id: int, db: DbSession) -> BoardTile:
    tile = await get_tile_or_404(db, tile_id)
    version = await crud.tile_version.get(db, version_id)
    if not version or version.tile_id != tile.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Version not found")
    return await board_service.restore_version(db, tile, version)


# --- Share links ---


@router.get("/{tile_id}/shares", response_model=list[SharedLinkRead], summary="Share links of a tile")
async def get_tile_shares(tile_id: int, db: DbSession) -> Sequence[SharedLink]:
    await get_tile_or_404(db, tile_id)
    return await crud.shared_link.get_for_tile(db, tile_id=tile_id)


@router.post(
    "/{tile_id}/shares",
    response_model=SharedLinkRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a share link",
)
async def create_tile_share(
    tile_id: int, db: DbSession, share_in: SharedLinkCreate | None = None
) -> SharedLink:
    await get_tile_or_404(db, tile_id)
    return await crud.shared_link.create_for_tile(
        db, tile_id=tile_id, obj_in=share_in or SharedLinkCreate()
    )


# --- Reminders ---


@router.get(
    "/{tile_id}/reminders", response_model=list[ReminderRead], summary="Reminders of a tile"
)
async def get_tile_reminders(tile_id: int, db: DbSession) -> Sequence[TileReminder]:
    """Soonest first."""
    await get_tile_or_404(db, tile_id)
    return await crud.reminder.get_for_tile(db, tile_id=tile_id)


@router.post(
    "/{tile_id}/reminders",
    response_model=ReminderRead,
    status_code=status.HTTP_201_CREATED,
    summary="Set a reminder on a tile",
)
async def create_tile_reminder(
    tile_id: int, reminder_in: ReminderCreate, db: DbSession
) -> TileReminder:
    tile = await get_tile_or_404(db, tile_id)
    return await reminder_service.create_reminder(db, tile, reminder_in)
