"""
EventTarget Time: Public API
==============================
Monotonic clock protocol for event timestamps.
"""

from eventtarget.time.clock import (
    Clock,
    FixedClock,
    MonotonicClock,
    get_default_clock,
    now,
    set_default_clock,
)

__all__ = [
    "Clock",
    "FixedClock",
    "MonotonicClock",
    "get_default_clock",
    "set_default_clock",
    "now",
]
