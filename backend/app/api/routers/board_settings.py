# backend/app/api/routers/board_settings.py
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.db.models.board_settings import BoardSettingsRow
from app.db.session import get_async_session
from app.schemas.board_settings import BoardSettingsRead, BoardSettingsUpdate

router = APIRouter()


@router.get("", response_model=BoardSettingsRead, summary="Get board settings")
async def get_settings(
    db: Annotated[AsyncSession, Depends(get_async_session)],
) -> BoardSettingsRow:
    return await crud.board_settings.get(db)


@router.patch("", response_model=BoardSettingsRead, summary="Update board settings")
async def update_settings(
    settings_in: BoardSettingsUpdate,
    db: Annotated[AsyncSession, Depends(get_async_session)],
) -> BoardSettingsRow:
    return await crud.board_settings.update(db, obj_in=settings_in)
