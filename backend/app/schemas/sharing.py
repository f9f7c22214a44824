# backend/app/schemas/sharing.py
from datetime import datetime

from pydantic import ConfigDict

from app.schemas.tile import CamelSchema


class TileVersionRead(CamelSchema):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tile_id: int
    slug: str
    title: str
    content: str
    color: str
    icon: str
    progress: int | None = None
    order: int
    due_date: str | None = None
    status: str | None = None
    priority: str | None = None
    created_at: datetime | None = None


class SharedLinkCreate(CamelSchema):
    expires_at: datetime | None = None


class SharedLinkUpdate(CamelSchema):
    is_active: bool | None = None
    expires_at: datetime | None = None


class SharedLinkRead(CamelSchema):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tile_id: int
    share_token: str
    is_active: bool
    expires_at: datetime | None = None
    created_at: datetime | None = None
