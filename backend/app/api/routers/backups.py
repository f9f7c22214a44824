# backend/app/api/routers/backups.py
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.db.session import get_async_session
from app.modules.board.core.backup import export_tiles_csv, serialize_snapshot
from app.schemas.backup import ImportResult
from app.services import board_service

router = APIRouter()

DbSession = Annotated[AsyncSession, Depends(get_async_session)]


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/export", summary="Download a JSON backup of the board")
async def export_backup(db: DbSession) -> Response:
    """Full snapshot (tiles, photos, settings). Stamps `lastBackup` on the settings."""
    snapshot = await board_service.export_snapshot(db)
    filename = f"tiles-backup-{datetime.now(UTC).date().isoformat()}.json"
    return Response(
        content=serialize_snapshot(snapshot),
        media_type="application/json",
        headers=_attachment(filename),
    )


@router.post("/import", response_model=ImportResult, summary="Restore the board from a backup")
async def import_backup(
    db: DbSession,
    payload: Annotated[dict[str, Any], Body()],
) -> dict:
    """
    Replace tiles (and photos/settings when present) with the payload.
    Nothing is changed unless every record validates.
    """
    board = await board_service.import_snapshot(db, payload)
    return {
        "tiles": len(board.tiles),
        "photos": len(board.photos) if board.photos is not None else 0,
        "settings_replaced": board.settings is not None,
    }


@router.get("/export.csv", response_class=PlainTextResponse, summary="Download tiles as CSV")
async def export_csv(db: DbSession) -> PlainTextResponse:
    tiles = [board_service.row_to_tile(r) for r in await crud.tile.get_all_ordered(db)]
    filename = f"tiles-export-{datetime.now(UTC).date().isoformat()}.csv"
    return PlainTextResponse(
        export_tiles_csv(tiles), media_type="text/csv", headers=_attachment(filename)
    )
