# backend/app/crud/crud_photo.py
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.db.models.photo import BoardPhoto
from app.db.models.tile import BoardTile
from app.schemas.photo import PhotoCreate, PhotoRead


class CRUDPhoto(CRUDBase[BoardPhoto, PhotoCreate, PhotoRead]):
    async def get_for_tile(self, db: AsyncSession, *, tile_id: str) -> list[BoardPhoto]:
        result = await db.execute(
            select(BoardPhoto).filter(BoardPhoto.tile_id == tile_id).order_by(BoardPhoto.timestamp)
        )
        return list(result.scalars().all())

    async def remove_orphans(self, db: AsyncSession) -> list[str]:
        """Delete photos whose tile slug no longer exists. Returns the removed ids."""
        orphan_stmt = select(BoardPhoto.id).where(BoardPhoto.tile_id.not_in(select(BoardTile.slug)))
        orphan_ids = list((await db.execute(orphan_stmt)).scalars().all())
        if orphan_ids:
            await db.execute(delete(BoardPhoto).where(BoardPhoto.id.in_(orphan_ids)))
            await db.commit()
        return orphan_ids


photo = CRUDPhoto(BoardPhoto)
