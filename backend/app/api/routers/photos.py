# backend/app/api/routers/photos.py
from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.db.models.photo import BoardPhoto
from app.db.session import get_async_session
from app.modules.board.core.models import Photo
from app.schemas.photo import PhotoCreate, PhotoRead, PruneResult
from app.services import board_service

router = APIRouter()

DbSession = Annotated[AsyncSession, Depends(get_async_session)]


@router.get("", response_model=list[PhotoRead], summary="List photos")
async def list_photos(
    db: DbSession,
    tile_id: Annotated[str | None, Query(alias="tileId")] = None,
) -> Sequence[BoardPhoto]:
    if tile_id:
        return await crud.photo.get_for_tile(db, tile_id=tile_id)
    return await crud.photo.get_multi(db, order_by=BoardPhoto.timestamp)


@router.post(
    "", response_model=PhotoRead, status_code=status.HTTP_201_CREATED, summary="Add a photo"
)
async def create_photo(photo_in: PhotoCreate, db: DbSession) -> BoardPhoto:
    if not await crud.tile.get_by_slug(db, slug=photo_in.tile_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tile not found")
    if photo_in.id and await crud.photo.get(db, photo_in.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="A photo with this id already exists"
        )
    return await board_service.create_photo(db, photo_in)


@router.put("", response_model=list[PhotoRead], summary="Replace all photos (client sync)")
async def sync_photos(photos: list[Photo], db: DbSession) -> Sequence[BoardPhoto]:
    return await board_service.sync_photos(db, photos)


@router.post("/prune", response_model=PruneResult, summary="Delete photos of deleted tiles")
async def prune_photos(db: DbSession) -> dict:
    return {"removed": await crud.photo.remove_orphans(db)}


@router.delete("/{photo_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a photo")
async def delete_photo(photo_id: str, db: DbSession) -> None:
    photo = await crud.photo.remove(db, id=photo_id)
    if not photo:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")
    return None
