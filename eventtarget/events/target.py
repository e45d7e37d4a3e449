"""
EventTarget Events: Target Facade
===================================
One listener registry plus the dispatch engine, under two naming
conventions:

  DOM style:    add_event_listener / remove_event_listener / dispatch_event
  Emitter style: on / once / off / remove_all_listeners / event_names

Both bind to the same canonical operations. Mutating methods return
the target so calls can be chained.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from eventtarget.config.settings import TargetSettings, get_default_settings
from eventtarget.events import dispatcher
from eventtarget.events.registry import ListenerRegistry, TagView
from eventtarget.events.types import Event, Listener, PayloadEvent

E = TypeVar("E", bound=Event)
L = TypeVar("L", bound=Callable[..., Any])


class EventTarget(Generic[E]):
    """
    Type-parameterized event target.

    Usage:
        @dataclass(frozen=True, kw_only=True)
        class Foo(Event):
            type: str = "foo"
            count: int = 0

        target: EventTarget[Foo] = EventTarget()
        target.on("foo", lambda event: print(event.count))
        target.dispatch(Foo(count=42, timestamp=0))

    The "error" tag is always available, whatever E declares.
    """

    def __init__(self, settings: Optional[TargetSettings] = None) -> None:
        self._settings = settings if settings is not None else get_default_settings()
        self._registry = ListenerRegistry(thread_safe=self._settings.thread_safe)

    @property
    def settings(self) -> TargetSettings:
        return self._settings

    # ── Registry ──────────────────────────────────────────────

    def register(
        self, tag: str, listener: Listener, once: bool = False
    ) -> "EventTarget[E]":
        self._registry.register(tag, listener, once)
        return self

    def unregister(self, tag: str, listener: Listener) -> "EventTarget[E]":
        self._registry.unregister(tag, listener)
        return self

    def unregister_all(self, tag: Optional[str] = None) -> "EventTarget[E]":
        self._registry.unregister_all(tag)
        return self

    def listener_count(self, tag: Optional[str] = None) -> int:
        return self._registry.listener_count(tag)

    def has_listeners(self, tag: str) -> bool:
        return self._registry.has_listeners(tag)

    def tags_with_listeners(self) -> TagView:
        return self._registry.tags_with_listeners()

    # ── Dispatch ──────────────────────────────────────────────

    def dispatch(self, event: Any) -> "EventTarget[E]":
        """
        Deliver an event to a snapshot of its tag's listeners.
        Listener exceptions go to the "error" tag, never to the caller.
        """
        dispatcher.dispatch(event, self._registry, self._settings)
        return self

    def dispatch_error(self, error: Any) -> "EventTarget[E]":
        """
        Deliver a failure value to "error" listeners, or defer it to a
        later turn when there are none.
        """
        dispatcher.dispatch_error(error, self._registry, self._settings)
        return self

    def make_event(self, tag: str, **payload: Any) -> PayloadEvent:
        """Build an event stamped by this target's clock."""
        return PayloadEvent(
            type=tag,
            timestamp=self._settings.clock.now(),
            payload=payload,
        )

    def emit(self, tag: str, **payload: Any) -> "EventTarget[E]":
        return self.dispatch(self.make_event(tag, **payload))

    def listener(
        self, tag: str, once: bool = False
    ) -> Callable[[L], L]:
        """
        Decorator form of register.

            @target.listener("foo")
            def handle(event): ...
        """
        def decorator(func: L) -> L:
            self.register(tag, func, once)
            return func
        return decorator

    # ── Aliases ───────────────────────────────────────────────

    def on(self, tag: str, listener: Listener) -> "EventTarget[E]":
        return self.register(tag, listener)

    def once(self, tag: str, listener: Listener) -> "EventTarget[E]":
        return self.register(tag, listener, once=True)

    def off(self, tag: str, listener: Listener) -> "EventTarget[E]":
        return self.unregister(tag, listener)

    def add_event_listener(
        self, tag: str, listener: Listener, once: bool = False
    ) -> "EventTarget[E]":
        return self.register(tag, listener, once)

    def remove_event_listener(
        self, tag: str, listener: Listener
    ) -> "EventTarget[E]":
        return self.unregister(tag, listener)

    def remove_all_listeners(
        self, tag: Optional[str] = None
    ) -> "EventTarget[E]":
        return self.unregister_all(tag)

    def dispatch_event(self, event: Any) -> "EventTarget[E]":
        return self.dispatch(event)

    def event_names(self) -> TagView:
        return self.tags_with_listeners()

    # ── Protocols ─────────────────────────────────────────────

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and self.has_listeners(tag)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(tags={list(self.tags_with_listeners())!r}, "
            f"listeners={self.listener_count()})"
        )
