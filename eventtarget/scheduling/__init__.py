"""
EventTarget Scheduling: Public API
====================================
Later-turn execution for failures nobody handled.
"""

from eventtarget.scheduling.scheduler import (
    HostScheduler,
    ManualScheduler,
    Scheduler,
    get_default_scheduler,
    set_default_scheduler,
)

__all__ = [
    "Scheduler",
    "HostScheduler",
    "ManualScheduler",
    "get_default_scheduler",
    "set_default_scheduler",
]
