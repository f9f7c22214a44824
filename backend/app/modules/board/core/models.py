# backend/app/modules/board/core/models.py
"""
In-memory models for the board core.

Attributes are snake_case; the persisted/snapshot form is camelCase via the
alias generator, so `Tile.model_validate(stored_json)` and
`tile.model_dump(by_alias=True)` round-trip the browser storage layout.
"""

from collections.abc import Sequence
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.modules.board.core.constants import (
    DEFAULT_ICON,
    DEFAULT_PASTEL_COLOR,
    SNAPSHOT_VERSION,
    VARIANT_LARGE,
    VARIANT_REGULAR,
)

Variant = Literal["regular", "large"]
Recurrence = Literal["none", "daily", "weekly", "monthly"]
NotificationType = Literal["info", "success", "warning", "error"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Subtask(CamelModel):
    id: str
    title: str
    completed: bool = False


def subtask_completion(subtasks: Sequence[Subtask]) -> int:
    """Percentage of completed subtasks, rounded; 0 when there are none."""
    if not subtasks:
        return 0
    done = sum(1 for st in subtasks if st.completed)
    return round(done * 100 / len(subtasks))


class Reminder(CamelModel):
    date: str
    recurring: Recurrence | None = None


class Tile(CamelModel):
    # Unknown keys from older or newer clients are kept, not dropped.
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    title: str = ""
    content: str = ""
    last_updated: str | None = None
    color: str = DEFAULT_PASTEL_COLOR
    icon: str = DEFAULT_ICON
    progress: int | None = Field(default=None, ge=0, le=100)
    order: int = 0
    variant: Variant = VARIANT_REGULAR
    due_date: str | None = None
    reminder: Reminder | None = None
    depends_on: list[str] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
    status: str | None = None
    priority: str | None = None

    @field_validator("depends_on")
    @classmethod
    def _no_self_dependency(cls, value: list[str], info: ValidationInfo) -> list[str]:
        if info.data.get("id") in value:
            raise ValueError("a tile cannot depend on itself")
        return value

    @property
    def is_large(self) -> bool:
        return self.variant == VARIANT_LARGE


class Photo(CamelModel):
    model_config = ConfigDict(extra="allow")

    id: str
    tile_id: str
    base64_data: str
    thumbnail: str
    timestamp: str
    caption: str | None = None


class BoardSettings(CamelModel):
    dark_mode: bool = False
    tile_order: list[str] = Field(default_factory=list)
    last_backup: str | None = None


class Notification(CamelModel):
    id: str
    title: str
    message: str
    type: NotificationType = "info"
    timestamp: str
    read: bool = False
    tile_id: str | None = None


class Snapshot(CamelModel):
    version: int | str = SNAPSHOT_VERSION
    timestamp: str
    tiles: list[dict[str, Any]]
    photos: list[dict[str, Any]] = Field(default_factory=list)
    settings: dict[str, Any] | None = None
    id: str | None = None


def validation_errors(exc: ValidationError, prefix: str = "") -> list[dict[str, str]]:
    """Flatten a pydantic error into `{field, message}` entries."""
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "tile"
        errors.append({"field": f"{prefix}{loc}", "message": err["msg"]})
    return errors
