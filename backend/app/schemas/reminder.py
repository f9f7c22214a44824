# backend/app/schemas/reminder.py
from datetime import datetime

from pydantic import ConfigDict, Field

from app.modules.board.core.models import Recurrence
from app.schemas.tile import CamelSchema


class ReminderCreate(CamelSchema):
    due_date: datetime
    recurring: Recurrence | None = None


class ReminderUpdate(CamelSchema):
    due_date: datetime | None = None
    recurring: Recurrence | None = None
    notified: bool | None = None


class ReminderRead(CamelSchema):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tile_id: int
    due_date: datetime
    recurring: Recurrence | None = None
    notified: bool
    created_at: datetime | None = None


class AnalyticsEventCreate(CamelSchema):
    tile_id: int | None = None
    event_type: str = Field(..., min_length=1, max_length=64)
    duration: int | None = Field(default=None, ge=0)


class AnalyticsEventRead(CamelSchema):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tile_id: int | None = None
    event_type: str
    duration: int | None = None
    created_at: datetime | None = None
