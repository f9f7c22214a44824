# backend/app/schemas/tile.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from app.modules.board.core.models import Reminder, Subtask, Variant, subtask_completion


class CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TileBase(CamelSchema):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    color: str | None = None
    icon: str | None = None  # Lucide icon name; legacy emoji are migrated
    progress: int | None = Field(default=None, ge=0, le=100)
    variant: Variant = "regular"
    due_date: str | None = None
    reminder: Reminder | None = None
    depends_on: list[str] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
    status: str | None = None
    priority: str | None = None


class TileCreate(TileBase):
    slug: str | None = Field(default=None, min_length=1, max_length=100, pattern=r"^[A-Za-z0-9_-]+$")


class TileUpdate(CamelSchema):
    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = None
    color: str | None = None
    icon: str | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    variant: Variant | None = None
    due_date: str | None = None
    reminder: Reminder | None = None
    depends_on: list[str] | None = None
    subtasks: list[Subtask] | None = None
    status: str | None = None
    priority: str | None = None


class TileReorder(CamelSchema):
    """New relative order of a subset of regular tiles, by slug."""

    tile_ids: list[str]


class TileRead(TileBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    title: str
    color: str
    icon: str
    order: int
    last_updated: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @computed_field(alias="subtaskCompletion")
    @property
    def subtask_completion(self) -> int:
        return subtask_completion(self.subtasks)


class TileDependencies(CamelSchema):
    blocked_by: list[TileRead]
    blocking: list[TileRead]
    cycle: list[str] | None = None
