# backend/app/db/models/photo.py
from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base_class import Base, utcnow


class BoardPhoto(Base):
    """
    A photo attached to a tile by slug.

    No foreign key: photos outlive their tile until the orphan sweep removes them.
    """

    __tablename__ = "photos"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tile_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    base64_data: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[str] = mapped_column(String(40), nullable=False)
    caption: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<BoardPhoto(id='{self.id}', tile_id='{self.tile_id}')>"
