# backend/app/crud/crud_board_settings.py
"""
CRUD operations for the board settings.
Implements singleton pattern - there is only ever one row in board_settings.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.board_settings import BoardSettingsRow
from app.schemas.board_settings import BoardSettingsUpdate

logger = logging.getLogger(__name__)


class CRUDBoardSettings:
    async def get(self, db: AsyncSession) -> BoardSettingsRow:
        """
        Get the singleton settings row.
        Creates it with defaults if it doesn't exist.
        """
        result = await db.execute(select(BoardSettingsRow).where(BoardSettingsRow.id == 1))
        row = result.scalar_one_or_none()

        if row is None:
            logger.info("Board settings row not found. Creating with defaults.")
            row = BoardSettingsRow(id=1, dark_mode=False, tile_order=[])
            db.add(row)
            await db.commit()
            await db.refresh(row)

        return row

    async def update(
        self, db: AsyncSession, *, obj_in: BoardSettingsUpdate | dict, commit: bool = True
    ) -> BoardSettingsRow:
        row = await self.get(db)
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for field in ("dark_mode", "tile_order", "last_backup"):
            if field in update_data:
                value = update_data[field]
                if field == "tile_order":
                    value = list(value or [])
                setattr(row, field, value)
        db.add(row)
        if commit:
            await db.commit()
            await db.refresh(row)
        return row


board_settings = CRUDBoardSettings()
