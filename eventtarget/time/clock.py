"""
EventTarget Time: Event Clock
===============================
Event timestamps are milliseconds on a monotonic clock, not wall time.
Targets read time through an injectable Clock so tests can pin it.
"""

from __future__ import annotations

import time
from typing import Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now(self) -> float:
        """Return the current reading in milliseconds."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class MonotonicClock:
    """Production clock: milliseconds elapsed since the clock was created."""

    def __init__(self) -> None:
        self._origin = time.perf_counter()

    def now(self) -> float:
        return (time.perf_counter() - self._origin) * 1000.0


class FixedClock:
    """
    Test clock: returns a fixed reading.

    Usage:
        clock = FixedClock(1500.0)
        assert clock.now() == 1500.0
    """

    def __init__(self, fixed_ms: float = 0.0) -> None:
        if fixed_ms < 0:
            raise ValueError("FixedClock requires a non-negative reading.")
        self._fixed_ms = float(fixed_ms)

    def now(self) -> float:
        return self._fixed_ms

    def advance(self, ms: float) -> None:
        """Move the reading forward; clocks never run backwards."""
        if ms < 0:
            raise ValueError(f"Cannot advance clock by negative amount {ms}.")
        self._fixed_ms += ms


# ══════════════════════════════════════════════════════════════
# DEFAULT CLOCK
# ══════════════════════════════════════════════════════════════

_default_clock: Clock = MonotonicClock()


def set_default_clock(clock: Clock) -> None:
    """Override the default clock (testing only)."""
    global _default_clock
    _default_clock = clock


def get_default_clock() -> Clock:
    """Get the current default clock."""
    return _default_clock


def now() -> float:
    """Convenience: current reading of the default clock."""
    return _default_clock.now()
