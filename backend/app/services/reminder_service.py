# backend/app/services/reminder_service.py
"""
Reminder scheduling and analytics recording for the REST backend.

Recurring reminders are never marked notified: dismissing one rolls its due
time forward with `next_recurrence` until it lies in the future.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from dateutil.parser import isoparse
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.db.models.analytics_event import AnalyticsEvent
from app.db.models.reminder import TileReminder
from app.db.models.tile import BoardTile
from app.modules.board.core.dates import next_recurrence
from app.schemas.reminder import AnalyticsEventCreate, ReminderCreate, ReminderUpdate

logger = logging.getLogger(__name__)

_NON_RECURRING = (None, "none")


def as_utc(value: datetime) -> datetime:
    """Naive values are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


async def create_reminder(
    db: AsyncSession, tile: BoardTile, reminder_in: ReminderCreate
) -> TileReminder:
    reminder_in = reminder_in.model_copy(update={"due_date": as_utc(reminder_in.due_date)})
    reminder = await crud.reminder.create_for_tile(db, tile_id=tile.id, obj_in=reminder_in)
    logger.info(f"Reminder {reminder.id} set on tile {tile.id} for {reminder.due_date.isoformat()}")
    return reminder


async def update_reminder(
    db: AsyncSession, reminder: TileReminder, reminder_in: ReminderUpdate
) -> TileReminder:
    changes: dict[str, Any] = reminder_in.model_dump(exclude_unset=True)
    # Only `recurring` may be cleared.
    due = changes.pop("due_date", None)
    if due is not None:
        changes["due_at"] = as_utc(due)
    if changes.get("notified") is None:
        changes.pop("notified", None)
    return await crud.reminder.update(db, db_obj=reminder, obj_in=changes)


def next_due(reminder: TileReminder, now: datetime) -> datetime:
    """First recurrence of `reminder` after `now`."""
    due = reminder.due_date
    while due <= now:
        following = as_utc(isoparse(next_recurrence(due.isoformat(), reminder.recurring)))
        if following <= due:
            raise ValueError(f"Unknown recurrence {reminder.recurring!r} on reminder {reminder.id}")
        due = following
    return due


async def dismiss_reminder(
    db: AsyncSession, reminder: TileReminder, now: datetime | None = None
) -> TileReminder:
    now = as_utc(now or datetime.now(UTC))
    if reminder.recurring in _NON_RECURRING:
        return await crud.reminder.update(db, db_obj=reminder, obj_in={"notified": True})

    due = next_due(reminder, now)
    logger.debug(f"Reminder {reminder.id} ({reminder.recurring}) moved to {due.isoformat()}")
    changes = {"due_at": due, "notified": False}
    return await crud.reminder.update(db, db_obj=reminder, obj_in=changes)


async def record_event(db: AsyncSession, event_in: AnalyticsEventCreate) -> AnalyticsEvent:
    return await crud.analytics_event.create(db, obj_in=event_in)
