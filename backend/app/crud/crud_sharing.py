# backend/app/crud/crud_sharing.py
"""
CRUD for the tile version history and share links.
"""

import secrets
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.db.models.shared_link import SharedLink
from app.db.models.tile import BoardTile
from app.db.models.tile_version import TileVersion
from app.schemas.sharing import SharedLinkCreate, SharedLinkUpdate, TileVersionRead

_VERSIONED_FIELDS = (
    "slug",
    "title",
    "content",
    "color",
    "icon",
    "progress",
    "order_index",
    "due_date",
    "status",
    "priority",
)


class CRUDTileVersion(CRUDBase[TileVersion, TileVersionRead, TileVersionRead]):
    async def get_for_tile(self, db: AsyncSession, *, tile_id: int) -> list[TileVersion]:
        result = await db.execute(
            select(TileVersion)
            .filter(TileVersion.tile_id == tile_id)
            .order_by(TileVersion.created_at.desc(), TileVersion.id.desc())
        )
        return list(result.scalars().all())

    def snapshot(self, db: AsyncSession, *, tile: BoardTile) -> TileVersion:
        """Stage a copy of the tile's current fields. The caller commits."""
        version = TileVersion(tile_id=tile.id, **{f: getattr(tile, f) for f in _VERSIONED_FIELDS})
        db.add(version)
        return version

    @staticmethod
    def restorable_fields(version: TileVersion) -> dict:
        return {f: getattr(version, f) for f in _VERSIONED_FIELDS if f != "slug"}


class CRUDSharedLink(CRUDBase[SharedLink, SharedLinkCreate, SharedLinkUpdate]):
    async def get_by_token(self, db: AsyncSession, *, share_token: str) -> SharedLink | None:
        result = await db.execute(select(SharedLink).filter(SharedLink.share_token == share_token))
        return result.scalars().first()

    async def get_for_tile(self, db: AsyncSession, *, tile_id: int) -> list[SharedLink]:
        result = await db.execute(
            select(SharedLink)
            .filter(SharedLink.tile_id == tile_id)
            .order_by(SharedLink.created_at.desc(), SharedLink.id.desc())
        )
        return list(result.scalars().all())

    async def create_for_tile(
        self, db: AsyncSession, *, tile_id: int, obj_in: SharedLinkCreate
    ) -> SharedLink:
        return await self.create(
            db,
            obj_in={
                "tile_id": tile_id,
                "share_token": secrets.token_hex(16),
                "is_active": True,
                "expires_at": obj_in.expires_at,
            },
        )

    async def deactivate_expired(self, db: AsyncSession, *, now: datetime | None = None) -> int:
        stmt = (
            update(SharedLink)
            .where(SharedLink.is_active.is_(True))
            .where(SharedLink.expires_at.is_not(None))
            .where(SharedLink.expires_at < (now or datetime.now(UTC)))
            .values(is_active=False)
        )
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount or 0


tile_version = CRUDTileVersion(TileVersion)
shared_link = CRUDSharedLink(SharedLink)
