# backend/tests/unit/tasks/test_maintenance.py
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.tasks import maintenance


def fake_session_factory(db):
    @asynccontextmanager
    async def _session():
        yield db

    return _session


@pytest.mark.asyncio
async def test_prune_orphan_photos_uses_crud() -> None:
    db = MagicMock()
    with (
        patch("app.tasks.maintenance.get_db_session", fake_session_factory(db)),
        patch(
            "app.tasks.maintenance.crud.photo.remove_orphans",
            AsyncMock(return_value=["photo_1", "photo_2"]),
        ) as remove_orphans,
    ):
        removed = await maintenance.prune_orphan_photos()

    assert removed == ["photo_1", "photo_2"]
    remove_orphans.assert_awaited_once_with(db)


@pytest.mark.asyncio
async def test_run_maintenance_continues_after_a_failing_step() -> None:
    with (
        patch(
            "app.tasks.maintenance.prune_orphan_photos",
            AsyncMock(side_effect=RuntimeError("db down")),
        ),
        patch("app.tasks.maintenance.deactivate_expired_shares", AsyncMock(return_value=3)),
    ):
        summary = await maintenance.run_maintenance()

    assert summary == {"orphan_photos": 0, "expired_shares": 3}
