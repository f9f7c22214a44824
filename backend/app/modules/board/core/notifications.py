# backend/app/modules/board/core/notifications.py
"""
In-app notification feed plus the reminder messages derived from due dates.
"""

import json
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime

from pydantic import ValidationError

from app.core.log_utils import sanitize_for_log
from app.modules.board.core.constants import DUE_SOON_DAYS, MAX_NOTIFICATIONS, STORAGE_KEY_NOTIFICATIONS
from app.modules.board.core.dates import evaluate_due_date
from app.modules.board.core.models import Notification, NotificationType, Tile
from app.modules.board.persistence.base import KeyValueStorage

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class NotificationCenter:
    """
    Newest-first feed capped at `limit` entries.

    When `storage` is given the feed is read from and written back to the
    `app_notifications` key on every change.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        limit: int = MAX_NOTIFICATIONS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.storage = storage
        self.limit = limit
        self._clock = clock
        self._items: list[Notification] = self._load()

    def _load(self) -> list[Notification]:
        if self.storage is None:
            return []
        raw = self.storage.get_item(STORAGE_KEY_NOTIFICATIONS)
        if not raw:
            return []
        try:
            return [Notification.model_validate(item) for item in json.loads(raw)][: self.limit]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable notification feed: {e}")
            return []

    def _persist(self) -> None:
        if self.storage is not None:
            payload = [n.to_storage() for n in self._items]
            self.storage.set_item(STORAGE_KEY_NOTIFICATIONS, json.dumps(payload))

    def _next_id(self, now: datetime) -> str:
        base = f"notif-{int(now.timestamp() * 1000)}"
        taken = {n.id for n in self._items}
        candidate, suffix = base, 1
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    def add(
        self,
        title: str,
        message: str,
        type: NotificationType = "info",
        tile_id: str | None = None,
    ) -> Notification:
        now = self._clock()
        notification = Notification(
            id=self._next_id(now),
            title=title,
            message=message,
            type=type,
            timestamp=now.isoformat(),
            tile_id=tile_id,
        )
        self._items = [notification, *self._items][: self.limit]
        self._persist()
        logger.debug(f"Notification added: {sanitize_for_log(title)} ({type})")
        return notification

    def mark_read(self, notification_id: str) -> bool:
        """Mark one entry read. Returns False if the id is unknown."""
        for i, item in enumerate(self._items):
            if item.id == notification_id:
                self._items[i] = item.model_copy(update={"read": True})
                self._persist()
                return True
        return False

    def clear(self) -> None:
        self._items = []
        self._persist()

    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)


def reminder_message(title: str, status: str) -> str:
    if status == "overdue":
        return f"{title} is overdue!"
    if status == "due-today":
        return f"{title} is due today"
    return f"{title} is due soon"


def reminder_notifications(
    tiles: Sequence[Tile], today: date | None = None, due_soon_days: int = DUE_SOON_DAYS
) -> list[dict[str, str]]:
    """
    Build reminder payloads for tiles that are overdue, due today or due soon.

    Returns dicts with `tileId`, `status`, `title`, `message` and `type`,
    ready to be fed to `NotificationCenter.add`.
    """
    reminders = []
    for tile in sorted(tiles, key=lambda t: t.order):
        info = evaluate_due_date(tile.due_date, today, due_soon_days)
        if info is None:
            continue
        if info.is_overdue:
            status, kind = "overdue", "error"
        elif info.is_due_today:
            status, kind = "due-today", "warning"
        elif info.is_due_soon:
            status, kind = "due-soon", "warning"
        else:
            continue
        reminders.append(
            {
                "tileId": tile.id,
                "status": status,
                "title": "Reminder",
                "message": reminder_message(tile.title, status),
                "type": kind,
            }
        )
    return reminders
