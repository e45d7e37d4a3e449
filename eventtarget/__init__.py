"""
EventTarget
============
In-process publish/subscribe dispatch core.

    from eventtarget import EventTarget

    target = EventTarget()
    target.on("greet", lambda event: print(event["name"]))
    target.emit("greet", name="world")
"""

from eventtarget.config import TargetSettings, settings_from_env
from eventtarget.events import (
    ERROR_TAG,
    ArgumentError,
    ErrorEvent,
    Event,
    EventTarget,
    EventTargetError,
    PayloadEvent,
    UnhandledFailure,
)
from eventtarget.scheduling import HostScheduler, ManualScheduler
from eventtarget.time import FixedClock, MonotonicClock

__all__ = [
    "EventTarget",
    "Event",
    "ErrorEvent",
    "PayloadEvent",
    "ERROR_TAG",
    "EventTargetError",
    "ArgumentError",
    "UnhandledFailure",
    "TargetSettings",
    "settings_from_env",
    "HostScheduler",
    "ManualScheduler",
    "FixedClock",
    "MonotonicClock",
]
