# backend/app/crud/crud_tile.py
from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.db.models.tile import BoardTile
from app.modules.board.core.constants import VARIANT_LARGE
from app.schemas.tile import TileCreate, TileUpdate


class CRUDTile(CRUDBase[BoardTile, TileCreate, TileUpdate]):
    async def get_by_slug(self, db: AsyncSession, *, slug: str) -> BoardTile | None:
        result = await db.execute(select(BoardTile).filter(BoardTile.slug == slug))
        return result.scalars().first()

    async def get_all_ordered(self, db: AsyncSession) -> list[BoardTile]:
        """Regular tiles first, then large ones, each by order."""
        large_last = case((BoardTile.variant == VARIANT_LARGE, 1), else_=0)
        return await self.get_multi(db, order_by=[large_last, BoardTile.order_index, BoardTile.id])

    async def get_slugs(self, db: AsyncSession) -> set[str]:
        result = await db.execute(select(BoardTile.slug))
        return set(result.scalars().all())


tile = CRUDTile(BoardTile)
