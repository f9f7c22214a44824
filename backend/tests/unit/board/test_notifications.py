# backend/tests/unit/board/test_notifications.py
from datetime import date

from app.modules.board.core.constants import STORAGE_KEY_NOTIFICATIONS
from app.modules.board.core.models import Tile
from app.modules.board.core.notifications import (
    NotificationCenter,
    reminder_message,
    reminder_notifications,
)
from app.modules.board.persistence.base import MemoryStorage


class TestNotificationCenter:
    def test_newest_first_and_persisted(self, memory_storage: MemoryStorage, clock) -> None:
        center = NotificationCenter(memory_storage, clock=clock)
        first = center.add("One", "first")
        clock.tick(seconds=1)
        second = center.add("Two", "second", "success")

        assert [n.id for n in center.items] == [second.id, first.id]
        assert first.id == f"notif-{int((clock.now.timestamp() - 1) * 1000)}"

        reloaded = NotificationCenter(memory_storage, clock=clock)
        assert [n.title for n in reloaded.items] == ["Two", "One"]

    def test_same_millisecond_ids_get_a_suffix(self, clock) -> None:
        center = NotificationCenter(clock=clock)
        a = center.add("A", "a")
        b = center.add("B", "b")
        assert b.id == f"{a.id}-1"

    def test_feed_is_capped(self, clock) -> None:
        center = NotificationCenter(limit=3, clock=clock)
        for i in range(5):
            center.add(f"n{i}", "x")
            clock.tick(milliseconds=1)
        assert [n.title for n in center.items] == ["n4", "n3", "n2"]

    def test_mark_read_and_unread_count(self, clock) -> None:
        center = NotificationCenter(clock=clock)
        n = center.add("A", "a")
        center.add("B", "b")

        assert center.unread_count() == 2
        assert center.mark_read(n.id) is True
        assert center.mark_read("missing") is False
        assert center.unread_count() == 1

    def test_clear(self, memory_storage: MemoryStorage, clock) -> None:
        center = NotificationCenter(memory_storage, clock=clock)
        center.add("A", "a")
        center.clear()
        assert center.items == []
        assert memory_storage.get_item(STORAGE_KEY_NOTIFICATIONS) == "[]"

    def test_corrupt_feed_is_discarded(self) -> None:
        storage = MemoryStorage({STORAGE_KEY_NOTIFICATIONS: "[{\"id\": 1}]"})
        assert NotificationCenter(storage).items == []


def test_reminder_messages() -> None:
    assert reminder_message("Report", "overdue") == "Report is overdue!"
    assert reminder_message("Report", "due-today") == "Report is due today"
    assert reminder_message("Report", "due-soon") == "Report is due soon"


def test_reminder_notifications() -> None:
    tiles = [
        Tile(id="b", title="Soon", due_date="2024-05-11", order=1),
        Tile(id="a", title="Late", due_date="2024-05-01", order=0),
        Tile(id="c", title="Far", due_date="2024-07-01", order=2),
    ]
    reminders = reminder_notifications(tiles, today=date(2024, 5, 10))

    assert reminders == [
        {
            "tileId": "a",
            "status": "overdue",
            "title": "Reminder",
            "message": "Late is overdue!",
            "type": "error",
        },
        {
            "tileId": "b",
            "status": "due-soon",
            "title": "Reminder",
            "message": "Soon is due soon",
            "type": "warning",
        },
    ]
