# backend/app/tasks/maintenance.py
"""
Maintenance tasks for board hygiene: orphan photos and stale share links.
"""

import logging
from datetime import UTC, datetime

from app import crud
from app.db.session import get_db_session

logger = logging.getLogger(__name__)


async def prune_orphan_photos() -> list[str]:
    """Delete photos whose tile no longer exists."""
    logger.info("Maintenance: Pruning photos of deleted tiles.")
    async with get_db_session() as db:
        removed = await crud.photo.remove_orphans(db)
    if removed:
        logger.info(f"Maintenance: Removed {len(removed)} orphan photo(s).")
    else:
        logger.debug("Maintenance: No orphan photos found.")
    return removed


async def deactivate_expired_shares(now: datetime | None = None) -> int:
    """Mark share links past their expiry as inactive."""
    async with get_db_session() as db:
        count = await crud.shared_link.deactivate_expired(db, now=now or datetime.now(UTC))
    if count:
        logger.info(f"Maintenance: Deactivated {count} expired share link(s).")
    return count


async def run_maintenance() -> dict[str, int]:
    """
    Run every maintenance step. A failing step is logged and does not stop
    the others.
    """
    summary = {"orphan_photos": 0, "expired_shares": 0}
    try:
        summary["orphan_photos"] = len(await prune_orphan_photos())
    except Exception as e:
        logger.error(f"Maintenance: Orphan photo sweep failed: {e}", exc_info=True)
    try:
        summary["expired_shares"] = await deactivate_expired_shares()
    except Exception as e:
        logger.error(f"Maintenance: Share link expiry failed: {e}", exc_info=True)
    return summary
