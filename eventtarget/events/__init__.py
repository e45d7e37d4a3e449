"""
EventTarget Events: Public API
================================
Typed listeners keyed by string tags, delivered synchronously.
Listener failures travel the "error" tag instead of the call stack.
"""

from eventtarget.events.dispatcher import dispatch, dispatch_error, surface_later
from eventtarget.events.errors import (
    ArgumentError,
    EventTargetError,
    UnhandledFailure,
)
from eventtarget.events.registry import (
    ListenerRecord,
    ListenerRegistry,
    RecordState,
    TagView,
)
from eventtarget.events.target import EventTarget
from eventtarget.events.types import (
    ERROR_TAG,
    ErrorEvent,
    Event,
    Listener,
    PayloadEvent,
    event_tag,
)

__all__ = [
    "EventTarget",
    "Event",
    "ErrorEvent",
    "PayloadEvent",
    "Listener",
    "ERROR_TAG",
    "event_tag",
    "ListenerRecord",
    "ListenerRegistry",
    "RecordState",
    "TagView",
    "dispatch",
    "dispatch_error",
    "surface_later",
    "EventTargetError",
    "ArgumentError",
    "UnhandledFailure",
]
