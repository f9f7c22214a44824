# backend/app/api/routers/shares.py
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.db.models.shared_link import SharedLink
from app.db.models.tile import BoardTile
from app.db.session import get_async_session
from app.schemas.sharing import SharedLinkRead, SharedLinkUpdate
from app.schemas.tile import TileRead

router = APIRouter()

DbSession = Annotated[AsyncSession, Depends(get_async_session)]


@router.patch("/shares/{share_id}", response_model=SharedLinkRead, summary="Update a share link")
async def update_share(share_id: int, share_in: SharedLinkUpdate, db: DbSession) -> SharedLink:
    link = await crud.shared_link.get(db, share_id)
    if not link:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shared link not found")
    return await crud.shared_link.update(db, db_obj=link, obj_in=share_in)


@router.delete(
    "/shares/{share_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a share link"
)
async def delete_share(share_id: int, db: DbSession) -> None:
    link = await crud.shared_link.remove(db, id=share_id)
    if not link:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shared link not found")
    return None


@router.get("/shared/{share_token}", response_model=TileRead, summary="Open a shared tile")
async def get_shared_tile(share_token: str, db: DbSession) -> BoardTile:
    """
    Public read-only view of a tile. Inactive or unknown links are 404;
    expired links are 410.
    """
    link = await crud.shared_link.get_by_token(db, share_token=share_token)
    if not link or not link.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Shared link not found or inactive"
        )
    if link.is_expired():
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Shared link has expired")
    tile = await crud.tile.get(db, link.tile_id)
    if not tile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tile not found")
    return tile
