# backend/app/crud/crud_reminder.py
"""
CRUD for tile reminders and analytics events.
"""

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.db.models.analytics_event import AnalyticsEvent
from app.db.models.reminder import TileReminder
from app.schemas.reminder import AnalyticsEventCreate, ReminderCreate, ReminderUpdate


class CRUDReminder(CRUDBase[TileReminder, ReminderCreate, ReminderUpdate]):
    async def get_for_tile(self, db: AsyncSession, *, tile_id: int) -> list[TileReminder]:
        result = await db.execute(
            select(TileReminder)
            .filter(TileReminder.tile_id == tile_id)
            .order_by(TileReminder.due_at, TileReminder.id)
        )
        return list(result.scalars().all())

    async def get_active(
        self, db: AsyncSession, *, now: datetime | None = None
    ) -> list[TileReminder]:
        """Reminders that are due and not yet dismissed, oldest first."""
        result = await db.execute(
            select(TileReminder)
            .filter(TileReminder.due_at <= (now or datetime.now(UTC)))
            .filter(TileReminder.notified.is_(False))
            .order_by(TileReminder.due_at, TileReminder.id)
        )
        return list(result.scalars().all())

    async def create_for_tile(
        self, db: AsyncSession, *, tile_id: int, obj_in: ReminderCreate
    ) -> TileReminder:
        return await self.create(
            db,
            obj_in={
                "tile_id": tile_id,
                "due_at": obj_in.due_date,
                "recurring": obj_in.recurring,
                "notified": False,
            },
        )


class CRUDAnalyticsEvent(CRUDBase[AnalyticsEvent, AnalyticsEventCreate, AnalyticsEventCreate]):
    async def get_recent(
        self, db: AsyncSession, *, tile_id: int | None = None, limit: int = 100
    ) -> list[AnalyticsEvent]:
        stmt = select(AnalyticsEvent)
        if tile_id is not None:
            stmt = stmt.filter(AnalyticsEvent.tile_id == tile_id)
        stmt = stmt.order_by(AnalyticsEvent.created_at.desc(), AnalyticsEvent.id.desc())
        result = await db.execute(stmt.limit(limit))
        return list(result.scalars().all())


reminder = CRUDReminder(TileReminder)
analytics_event = CRUDAnalyticsEvent(AnalyticsEvent)
