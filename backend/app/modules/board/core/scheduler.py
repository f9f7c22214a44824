# backend/app/modules/board/core/scheduler.py
"""
Timer abstraction used to debounce persistence.

The store owns at most one pending handle; each mutation cancels it and arms a
new one, so a burst of edits results in a single write. `ManualScheduler`
runs on a virtual clock so tests can advance time deterministically.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        pass


class Scheduler(ABC):
    """Abstract scheduler: run `callback` once after `delay` seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        pass


class _ThreadTimerHandle(TimerHandle):
    def __init__(self, timer: threading.Timer):
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()

    @property
    def active(self) -> bool:
        return self._timer.is_alive()


class ThreadingScheduler(Scheduler):
    """Wall-clock scheduler backed by daemon `threading.Timer`s."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _ThreadTimerHandle(timer)


class _ManualHandle(TimerHandle):
    def __init__(self, due_at: float, callback: Callable[[], None]):
        self.due_at = due_at
        self.callback = callback
        self._cancelled = False
        self._fired = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._fired)

    def fire(self) -> None:
        self._fired = True
        self.callback()


class ManualScheduler(Scheduler):
    """Virtual-time scheduler. Nothing runs until `advance()` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._pending: list[_ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle(self.now + max(0.0, delay), callback)
        self._pending.append(handle)
        return handle

    @property
    def pending_count(self) -> int:
        return sum(1 for h in self._pending if h.active)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire every due timer in due order. Returns the number fired."""
        self.now += seconds
        fired = 0
        while True:
            due = [h for h in self._pending if h.active and h.due_at <= self.now]
            if not due:
                break
            handle = min(due, key=lambda h: h.due_at)
            handle.fire()
            fired += 1
        self._pending = [h for h in self._pending if h.active]
        return fired


class Debouncer:
    """
    Coalesces repeated `trigger()` calls into one callback after `delay` of quiet.

    Each arm gets a generation number. A timer that fires after a newer
    `trigger()` or a `cancel()` sees a stale generation and does nothing.
    """

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], None]):
        self._scheduler = scheduler
        self._delay = delay
        self._callback = callback
        self._lock = threading.Lock()
        self._handle: TimerHandle | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._handle is not None and self._handle.active

    def trigger(self) -> None:
        with self._lock:
            self._disarm()
            generation = self._generation
            self._handle = self._scheduler.call_later(self._delay, lambda: self._run(generation))

    def cancel(self) -> bool:
        """Drop the pending timer. Returns True if one was armed."""
        with self._lock:
            return self._disarm()

    def flush(self) -> bool:
        """Run the pending callback now instead of at its deadline. Returns True if it ran."""
        if not self.cancel():
            return False
        self._callback()
        return True

    def _disarm(self) -> bool:
        self._generation += 1
        handle, self._handle = self._handle, None
        if handle is None or not handle.active:
            return False
        handle.cancel()
        return True

    def _run(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
        try:
            self._callback()
        except Exception as e:
            # Timer threads have no caller to propagate to; the next mutation re-arms.
            logger.error(f"Debounced callback failed: {e}", exc_info=True)
