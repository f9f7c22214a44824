# backend/app/db/models/reminder.py
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base, utcnow


class TileReminder(Base):
    """A dated reminder on a tile; `recurring` rolls `due_at` forward when dismissed."""

    __tablename__ = "reminders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tile_id: Mapped[int] = mapped_column(
        ForeignKey("tiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    due_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    recurring: Mapped[str | None] = mapped_column(String(16), nullable=True)
    notified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    tile = relationship("BoardTile", back_populates="reminders")

    @property
    def due_date(self) -> datetime:
        """`due_at` with its UTC tzinfo."""
        # SQLite hands back naive datetimes.
        if self.due_at.tzinfo is None:
            return self.due_at.replace(tzinfo=UTC)
        return self.due_at

    def __repr__(self) -> str:
        return f"<TileReminder(id={self.id}, tile_id={self.tile_id}, due_at={self.due_at})>"
