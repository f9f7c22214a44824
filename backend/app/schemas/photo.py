# backend/app/schemas/photo.py
from pydantic import ConfigDict, Field

from app.schemas.tile import CamelSchema


class PhotoCreate(CamelSchema):
    id: str | None = Field(default=None, max_length=64)
    tile_id: str = Field(..., min_length=1, max_length=100)
    base64_data: str
    thumbnail: str
    timestamp: str | None = None
    caption: str | None = Field(default=None, max_length=500)


class PhotoRead(CamelSchema):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tile_id: str
    base64_data: str
    thumbnail: str
    timestamp: str
    caption: str | None = None


class PruneResult(CamelSchema):
    removed: list[str]
