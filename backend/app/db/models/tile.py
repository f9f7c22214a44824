# backend/app/db/models/tile.py
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base, utcnow


class BoardTile(Base):
    """
    A board tile. `slug` is the client-facing tile id (e.g. "research" or
    "tile_1712345678901"); `id` is the database key used in URLs.
    """

    __tablename__ = "tiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    color: Mapped[str] = mapped_column(String(16), nullable=False)
    icon: Mapped[str] = mapped_column(String(64), nullable=False)  # Lucide icon name
    progress: Mapped[int | None] = mapped_column(Integer, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    variant: Mapped[str] = mapped_column(String(16), default="regular", nullable=False)
    due_date: Mapped[str | None] = mapped_column(String(40), nullable=True)
    reminder: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    depends_on: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    subtasks: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    priority: Mapped[str | None] = mapped_column(String(32), nullable=True)
    last_updated: Mapped[str | None] = mapped_column(String(40), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now(), nullable=False
    )

    versions = relationship(
        "TileVersion", back_populates="tile", cascade="all, delete-orphan"
    )
    shared_links = relationship(
        "SharedLink", back_populates="tile", cascade="all, delete-orphan"
    )
    reminders = relationship(
        "TileReminder", back_populates="tile", cascade="all, delete-orphan"
    )
    analytics_events = relationship("AnalyticsEvent", back_populates="tile")

    @property
    def order(self) -> int:
        return self.order_index

    def __repr__(self) -> str:
        return f"<BoardTile(id={self.id}, slug='{self.slug}', order={self.order_index})>"
