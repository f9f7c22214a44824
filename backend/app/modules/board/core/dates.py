# backend/app/modules/board/core/dates.py
"""
Due-date and reminder evaluation.

Everything here is pure: `today` may be injected so results do not depend on
the wall clock.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from app.modules.board.core.constants import DUE_SOON_DAYS

logger = logging.getLogger(__name__)

TONE_DEFAULT = "default"
TONE_WARNING = "warning"
TONE_ERROR = "error"

_RECURRENCE_STEPS = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(days=7),
    "monthly": relativedelta(months=1),
}


@dataclass(frozen=True)
class DateInfo:
    is_overdue: bool
    is_due_today: bool
    is_due_soon: bool
    days_until: int
    label: str
    tone: str


def parse_iso_date(value: str | date | None) -> date | None:
    """Return the calendar date of an ISO date/datetime string, or None if unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return isoparse(str(value).strip()).date()
    except (ValueError, OverflowError):
        logger.warning(f"Ignoring unparseable date value: {value!r}")
        return None


def _plural(n: int) -> str:
    return "" if n == 1 else "s"


def format_calendar_date(value: date, today: date | None = None) -> str:
    today = today or date.today()
    label = f"{value:%b} {value.day}"
    if value.year != today.year:
        label += f", {value.year}"
    return label


def evaluate_due_date(
    due: str | date | None, today: date | None = None, due_soon_days: int = DUE_SOON_DAYS
) -> DateInfo | None:
    """
    Classify a due date relative to `today`.

    <0 days: overdue, 0: due today, 1..due_soon_days: due soon, otherwise a
    plain calendar label.
    """
    due_date = parse_iso_date(due)
    if due_date is None:
        return None
    today = today or date.today()
    days_until = (due_date - today).days

    is_overdue = days_until < 0
    is_due_today = days_until == 0
    is_due_soon = 0 < days_until <= due_soon_days

    if is_overdue:
        overdue_by = abs(days_until)
        return DateInfo(
            True, False, False, days_until, f"Overdue by {overdue_by} day{_plural(overdue_by)}", TONE_ERROR
        )
    if is_due_today:
        return DateInfo(False, True, False, days_until, "Due today", TONE_WARNING)
    if is_due_soon:
        return DateInfo(
            False, False, True, days_until, f"Due in {days_until} day{_plural(days_until)}", TONE_WARNING
        )
    return DateInfo(
        False, False, False, days_until, format_calendar_date(due_date, today), TONE_DEFAULT
    )


def next_recurrence(base: str, kind: str | None) -> str:
    """
    Roll a reminder date forward by one recurrence step.

    Monthly steps use relativedelta, so Jan 31 rolls to the last day of February.
    Date-only input gives date-only output; unknown kinds return `base` unchanged.
    """
    step = _RECURRENCE_STEPS.get(kind or "")
    if step is None:
        return base

    raw = base.strip()
    try:
        if len(raw) == 10:
            return (date.fromisoformat(raw) + step).isoformat()
        return (isoparse(raw) + step).isoformat()
    except ValueError as e:
        raise ValueError(f"Invalid reminder base date: {base!r}") from e
