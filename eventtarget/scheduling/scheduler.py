"""
EventTarget Scheduling: Deferred Execution
============================================
Unhandled failures must become visible outside the call stack that
reported them, never raised synchronously and never dropped.

A Scheduler runs a callback on a later turn:
- HostScheduler: the running asyncio loop if there is one, else a
  short-lived non-daemon thread. Failures then reach the loop's
  exception handler or threading.excepthook; interpreter shutdown joins
  the thread, so a failure reported just before exit still prints.
- ManualScheduler: queues callbacks until run_pending() (tests).
"""

from __future__ import annotations

import asyncio
import threading
from typing import Callable, Optional, Protocol


# ══════════════════════════════════════════════════════════════
# SCHEDULER PROTOCOL
# ══════════════════════════════════════════════════════════════

class Scheduler(Protocol):
    """Runs a callback on a later turn of the host."""

    def defer(self, callback: Callable[[], None]) -> None:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class HostScheduler:
    """Production scheduler: asyncio loop when running, thread otherwise."""

    def defer(self, callback: Callable[[], None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            loop.call_soon(callback)
            return

        thread = threading.Thread(
            target=callback,
            name="eventtarget-unhandled",
            daemon=False,
        )
        thread.start()


class ManualScheduler:
    """
    Test scheduler: callbacks wait until run_pending().

    Usage:
        scheduler = ManualScheduler()
        target = EventTarget(TargetSettings(scheduler=scheduler))
        target.dispatch_error(ValueError("e"))   # nothing raised
        scheduler.run_pending()                  # raises ValueError("e")
    """

    def __init__(self) -> None:
        self._queue: list[Callable[[], None]] = []
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def defer(self, callback: Callable[[], None]) -> None:
        with self._lock:
            self._queue.append(callback)

    def run_pending(self) -> int:
        """
        Run every queued callback, including ones queued while running.

        All callbacks run even if some raise; the first failure is
        re-raised once the queue is empty. Returns the number run.
        """
        ran = 0
        first_failure: Optional[Exception] = None
        while True:
            with self._lock:
                if not self._queue:
                    break
                callback = self._queue.pop(0)
            ran += 1
            try:
                callback()
            except Exception as exc:
                if first_failure is None:
                    first_failure = exc
        if first_failure is not None:
            raise first_failure
        return ran


# ══════════════════════════════════════════════════════════════
# DEFAULT SCHEDULER
# ══════════════════════════════════════════════════════════════

_default_scheduler: Scheduler = HostScheduler()


def set_default_scheduler(scheduler: Scheduler) -> None:
    """Override the default scheduler (testing only)."""
    global _default_scheduler
    _default_scheduler = scheduler


def get_default_scheduler() -> Scheduler:
    """Get the current default scheduler."""
    return _default_scheduler
