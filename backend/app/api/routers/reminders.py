# backend/app/api/routers/reminders.py
from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.db.models.reminder import TileReminder
from app.db.session import get_async_session
from app.schemas.reminder import ReminderRead, ReminderUpdate
from app.services import reminder_service

router = APIRouter()

DbSession = Annotated[AsyncSession, Depends(get_async_session)]


async def get_reminder_or_404(db: AsyncSession, reminder_id: int) -> TileReminder:
    reminder = await crud.reminder.get(db, reminder_id)
    if not reminder:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return reminder


@router.get("/active", response_model=list[ReminderRead], summary="Due reminders not yet dismissed")
async def get_active_reminders(db: DbSession) -> Sequence[TileReminder]:
    return await crud.reminder.get_active(db)


@router.patch("/{reminder_id}", response_model=ReminderRead, summary="Update a reminder")
async def update_reminder(
    reminder_id: int, reminder_in: ReminderUpdate, db: DbSession
) -> TileReminder:
    reminder = await get_reminder_or_404(db, reminder_id)
    return await reminder_service.update_reminder(db, reminder, reminder_in)


@router.post("/{reminder_id}/dismiss", response_model=ReminderRead, summary="Dismiss a reminder")
async def dismiss_reminder(reminder_id: int, db: DbSession) -> TileReminder:
    """
    One-off reminders are marked notified. Recurring ones move to their next
    occurrence after now and stay active.
    """
    reminder = await get_reminder_or_404(db, reminder_id)
    return await reminder_service.dismiss_reminder(db, reminder)


@router.delete(
    "/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a reminder"
)
async def delete_reminder(reminder_id: int, db: DbSession) -> None:
    reminder = await crud.reminder.remove(db, id=reminder_id)
    if not reminder:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return None
