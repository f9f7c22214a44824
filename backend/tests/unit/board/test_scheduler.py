# backend/tests/unit/board/test_scheduler.py
import logging

import pytest

from app.modules.board.core.scheduler import Debouncer, ManualScheduler, TimerHandle


class RecordingScheduler(ManualScheduler):
    """Manual scheduler that remembers every callback it was handed."""

    def __init__(self) -> None:
        super().__init__()
        self.callbacks: list = []

    def call_later(self, delay, callback) -> TimerHandle:
        self.callbacks.append(callback)
        return super().call_later(delay, callback)


def test_manual_scheduler_fires_in_due_order() -> None:
    scheduler = ManualScheduler()
    fired: list[str] = []
    scheduler.call_later(2, lambda: fired.append("late"))
    scheduler.call_later(1, lambda: fired.append("early"))

    assert scheduler.advance(0.5) == 0
    assert scheduler.pending_count == 2
    assert scheduler.advance(2) == 2
    assert fired == ["early", "late"]


def test_cancelled_handle_never_fires() -> None:
    scheduler = ManualScheduler()
    fired: list[int] = []
    handle = scheduler.call_later(1, lambda: fired.append(1))
    handle.cancel()

    assert not handle.active
    assert scheduler.advance(5) == 0
    assert fired == []


class TestDebouncer:
    def test_triggers_coalesce(self) -> None:
        scheduler = ManualScheduler()
        calls: list[int] = []
        debouncer = Debouncer(scheduler, 0.5, lambda: calls.append(1))

        debouncer.trigger()
        scheduler.advance(0.25)
        debouncer.trigger()
        scheduler.advance(0.25)
        assert calls == []
        assert debouncer.pending

        scheduler.advance(0.25)
        assert calls == [1]
        assert not debouncer.pending

    def test_flush_runs_now(self) -> None:
        scheduler = ManualScheduler()
        calls: list[int] = []
        debouncer = Debouncer(scheduler, 0.5, lambda: calls.append(1))

        debouncer.flush()
        assert calls == []

        debouncer.trigger()
        debouncer.flush()
        assert calls == [1]
        assert scheduler.advance(1) == 0

    def test_callback_errors_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        scheduler = ManualScheduler()

        def boom() -> None:
            raise RuntimeError("write failed")

        debouncer = Debouncer(scheduler, 0.5, boom)
        debouncer.trigger()
        with caplog.at_level(logging.ERROR):
            scheduler.advance(0.5)
        assert "Debounced callback failed" in caplog.text

    def test_late_timer_does_not_clear_a_newer_arm(self) -> None:
        """A timer that was already running when `trigger()` re-armed must not run or disarm."""
        scheduler = RecordingScheduler()
        calls: list[int] = []
        debouncer = Debouncer(scheduler, 0.5, lambda: calls.append(1))

        debouncer.trigger()
        first_timer = scheduler.callbacks[0]
        debouncer.trigger()
        first_timer()

        assert calls == []
        assert debouncer.pending
        assert scheduler.advance(0.5) == 1
        assert calls == [1]
        assert not debouncer.pending

    def test_late_timer_after_cancel_does_nothing(self) -> None:
        scheduler = RecordingScheduler()
        calls: list[int] = []
        debouncer = Debouncer(scheduler, 0.5, lambda: calls.append(1))

        debouncer.trigger()
        assert debouncer.cancel() is True
        scheduler.callbacks[0]()

        assert calls == []
        assert not debouncer.pending
