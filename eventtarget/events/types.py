"""
EventTarget Events: Types
===========================
Event records, the reserved error tag, and tag extraction.

An event is anything carrying a string `type`:
- an `Event` dataclass (or subclass with payload fields)
- any object with a `type` attribute
- any Mapping with a "type" key
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

ERROR_TAG = "error"


@dataclass(frozen=True, kw_only=True)
class Event:
    """
    Base event record.

    Subclass to add payload fields:

        @dataclass(frozen=True, kw_only=True)
        class OrderPlaced(Event):
            order_id: str
            type: str = "order.placed"

        OrderPlaced(order_id="o-1", timestamp=clock.now())
    """

    type: str
    timestamp: float  # ms on a monotonic clock


@dataclass(frozen=True, kw_only=True)
class ErrorEvent(Event):
    """Delivered on the "error" tag; `error` is the original failure value."""

    type: str = ERROR_TAG
    error: Any = None


@dataclass(frozen=True, kw_only=True)
class PayloadEvent(Event):
    """
    Event with an untyped payload mapping.
    Payload keys read as items (event["name"]) or attributes (event.name);
    declared fields win over payload keys of the same name.
    """

    payload: dict = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def __getattr__(self, name: str) -> Any:
        # only reached when normal lookup fails
        payload = self.__dict__.get("payload", {})
        if name in payload:
            return payload[name]
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute {name!r}"
        )


Listener = Callable[[Any], None]


def event_tag(event: Any) -> Optional[str]:
    """Return the string tag of an event, or None if it carries none."""
    if event is None:
        return None
    if isinstance(event, Mapping):
        tag = event.get("type")
    else:
        tag = getattr(event, "type", None)
    return tag if isinstance(tag, str) else None
