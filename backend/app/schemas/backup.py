# backend/app/schemas/backup.py
from app.schemas.tile import CamelSchema


class ImportResult(CamelSchema):
    tiles: int
    photos: int
    settings_replaced: bool
