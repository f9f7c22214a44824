# backend/app/db/models/analytics_event.py
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base, utcnow


class AnalyticsEvent(Base):
    """
    A usage event (tile opened, edited, time spent). Events outlive their
    tile: deleting the tile clears `tile_id` instead of the row.
    """

    __tablename__ = "analytics_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tile_id: Mapped[int | None] = mapped_column(
        ForeignKey("tiles.id", ondelete="SET NULL"), index=True, nullable=True
    )
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # seconds

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    tile = relationship("BoardTile", back_populates="analytics_events")
