# backend/app/api/routers/analytics.py
from collections.abc import Sequence
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.db.models.analytics_event import AnalyticsEvent
from app.db.session import get_async_session
from app.schemas.reminder import AnalyticsEventCreate, AnalyticsEventRead
from app.services import reminder_service

router = APIRouter()

DbSession = Annotated[AsyncSession, Depends(get_async_session)]


@router.post(
    "",
    response_model=AnalyticsEventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a usage event",
)
async def record_event(event_in: AnalyticsEventCreate, db: DbSession) -> AnalyticsEvent:
    if event_in.tile_id is not None and not await crud.tile.get(db, event_in.tile_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tile not found")
    return await reminder_service.record_event(db, event_in)


@router.get("", response_model=list[AnalyticsEventRead], summary="Recent usage events")
async def list_events(
    db: DbSession,
    tile_id: Annotated[int | None, Query(alias="tileId")] = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> Sequence[AnalyticsEvent]:
    """Newest first, optionally for one tile."""
    return await crud.analytics_event.get_recent(db, tile_id=tile_id, limit=limit)
