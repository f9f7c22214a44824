# backend/tests/unit/board/test_icons.py
import logging

import pytest

from app.modules.board.core.constants import DEFAULT_ICON
from app.modules.board.core.icons import is_valid_icon_name, migrate_icon, migrate_tile_record


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("🔬", "flask-conical"),
        ("📷", "camera"),
        ("🚢", "ship"),
        ("bar-chart", "bar-chart"),
    ],
)
def test_migrate_icon_known_values(raw: str, expected: str) -> None:
    assert migrate_icon(raw) == expected


@pytest.mark.parametrize("raw", ["🦄", "Not Valid", "", None, 42, "camera\n"])
def test_migrate_icon_falls_back_with_warning(raw, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="app.modules.board.core.icons"):
        assert migrate_icon(raw) == DEFAULT_ICON
    assert "Migrating unsupported icon" in caplog.text


def test_is_valid_icon_name() -> None:
    assert is_valid_icon_name("file-text")
    assert not is_valid_icon_name("FileText")
    assert not is_valid_icon_name(None)
    assert not is_valid_icon_name("camera\n")


def test_migrate_tile_record_returns_new_dict() -> None:
    record = {"id": "a", "title": "A", "icon": "📷", "color": "#000000"}
    migrated = migrate_tile_record(record)

    assert migrated["icon"] == "camera"
    assert migrated["color"] != "#000000"
    assert record["icon"] == "📷"


def test_migrate_tile_record_can_keep_colors() -> None:
    migrated = migrate_tile_record({"id": "a", "color": "#000000"}, normalize_colors=False)
    assert migrated["color"] == "#000000"


def test_notes_tile_is_forced_large() -> None:
    assert migrate_tile_record({"id": "todo-notes"})["variant"] == "large"
    assert "variant" not in migrate_tile_record({"id": "research"})
