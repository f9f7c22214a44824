# backend/app/schemas/board_settings.py
from pydantic import ConfigDict

from app.schemas.tile import CamelSchema


class BoardSettingsRead(CamelSchema):
    model_config = ConfigDict(from_attributes=True)

    dark_mode: bool = False
    tile_order: list[str] = []
    last_backup: str | None = None


class BoardSettingsUpdate(CamelSchema):
    dark_mode: bool | None = None
    tile_order: list[str] | None = None
    last_backup: str | None = None
