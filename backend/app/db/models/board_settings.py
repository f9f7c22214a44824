# backend/app/db/models/board_settings.py
"""
Singleton table (one row, id=1) holding the board-wide settings.
"""

from sqlalchemy import JSON, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base


class BoardSettingsRow(Base):
    __tablename__ = "board_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    dark_mode: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    tile_order: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    last_backup: Mapped[str | None] = mapped_column(String(40), nullable=True)

    def __repr__(self) -> str:
        return f"<BoardSettingsRow(dark_mode={self.dark_mode}, tiles={len(self.tile_order or [])})>"
