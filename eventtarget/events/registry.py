"""
EventTarget Events: Listener Registry
=======================================
Controls which listeners receive which events.

Rules:
- Tags are plain strings; "error" is always a valid tag
- Listeners are keyed by identity, one record per (tag, listener)
- Re-registering an existing pair is a no-op
- Bucket order is registration order, which is delivery order
- Empty buckets are deleted immediately
- In-memory only, owned by exactly one target
- Thread-safe (mutations and snapshots share one lock)
"""

from __future__ import annotations

import contextlib
import inspect
import logging
from enum import Enum
from threading import Lock
from typing import ContextManager, Iterator, Optional

from eventtarget.events.errors import ArgumentError
from eventtarget.events.types import Listener

logger = logging.getLogger("eventtarget.events")


# ══════════════════════════════════════════════════════════════
# LISTENER RECORD
# ══════════════════════════════════════════════════════════════

class RecordState(Enum):
    """Lifecycle of a ListenerRecord. REMOVED is terminal."""
    REGISTERED = "REGISTERED"
    REMOVED = "REMOVED"


class ListenerRecord:
    """Binds one listener to one tag."""

    __slots__ = ("tag", "listener", "once", "state", "_claimed")

    def __init__(self, tag: str, listener: Listener, once: bool = False):
        self.tag = tag
        self.listener = listener
        self.once = once
        self.state = RecordState.REGISTERED
        self._claimed = False

    @property
    def is_registered(self) -> bool:
        return self.state is RecordState.REGISTERED

    def __repr__(self) -> str:
        return (
            f"ListenerRecord(tag={self.tag!r}, "
            f"listener={listener_name(self.listener)}, "
            f"once={self.once}, state={self.state.value})"
        )


def listener_name(listener: Listener) -> str:
    """Qualified name of a listener, for log lines."""
    return getattr(listener, "__qualname__", repr(listener))


def same_listener(a: Listener, b: Listener) -> bool:
    """
    Identity match. Bound methods are rebuilt on every attribute
    access, so they match on (instance, function) identity instead.
    """
    if a is b:
        return True
    if inspect.ismethod(a) and inspect.ismethod(b):
        return a.__self__ is b.__self__ and a.__func__ is b.__func__
    if inspect.isbuiltin(a) and inspect.isbuiltin(b):
        # e.g. items.append
        return a.__self__ is b.__self__ and a.__name__ == b.__name__
    return False


def _check_tag(tag: object) -> None:
    if not isinstance(tag, str):
        raise ArgumentError(
            f"Event type must be a string, got {type(tag).__name__}."
        )


def _check_listener(listener: object) -> None:
    if not callable(listener):
        raise ArgumentError(
            f"Event listener must be callable, got {type(listener).__name__}."
        )


# ══════════════════════════════════════════════════════════════
# LISTENER REGISTRY
# ══════════════════════════════════════════════════════════════

class ListenerRegistry:
    """
    In-memory registry of listeners.

    Each entry maps a tag to an ordered list of ListenerRecord.
    Python dicts keep insertion order, so tags iterate in the order
    their buckets were created.
    """

    def __init__(self, thread_safe: bool = True):
        self._buckets: dict[str, list[ListenerRecord]] = {}
        self._lock: ContextManager = Lock() if thread_safe else contextlib.nullcontext()

    def register(
        self,
        tag: str,
        listener: Listener,
        once: bool = False,
    ) -> ListenerRecord:
        """
        Register a listener for a tag.

        Returns the live record. For an existing (tag, listener) pair the
        existing record is returned unchanged, including its once flag.

        Raises:
            ArgumentError: tag is not a str or listener is not callable
        """
        _check_tag(tag)
        _check_listener(listener)

        with self._lock:
            bucket = self._buckets.setdefault(tag, [])
            for record in bucket:
                if same_listener(record.listener, listener):
                    return record
            record = ListenerRecord(tag, listener, bool(once))
            bucket.append(record)

        logger.debug(
            f"Listener registered: {listener_name(listener)} → {tag} "
            f"(once: {record.once})"
        )
        return record

    def unregister(self, tag: str, listener: Listener) -> bool:
        """
        Remove a listener from a tag.
        Returns False if it was not registered (not an error).

        Raises:
            ArgumentError: tag is not a str or listener is not callable
        """
        _check_tag(tag)
        _check_listener(listener)

        with self._lock:
            bucket = self._buckets.get(tag)
            if not bucket:
                return False
            for index, record in enumerate(bucket):
                if same_listener(record.listener, listener):
                    del bucket[index]
                    record.state = RecordState.REMOVED
                    if not bucket:
                        del self._buckets[tag]
                    break
            else:
                return False

        logger.debug(f"Listener removed: {listener_name(listener)} from {tag}")
        return True

    def discard(self, record: ListenerRecord) -> bool:
        """
        Remove exactly this record if it is still live.

        Used for once-removal: a listener that was removed and registered
        again during its own invocation keeps the new record.
        """
        with self._lock:
            bucket = self._buckets.get(record.tag)
            if not bucket:
                return False
            for index, candidate in enumerate(bucket):
                if candidate is record:
                    del bucket[index]
                    record.state = RecordState.REMOVED
                    if not bucket:
                        del self._buckets[record.tag]
                    return True
        return False

    def unregister_all(self, tag: Optional[str] = None) -> int:
        """
        Remove every listener of one tag, or of all tags if tag is None.
        Returns the number of records removed.
        """
        if tag is not None:
            _check_tag(tag)

        with self._lock:
            if tag is None:
                removed = [r for bucket in self._buckets.values() for r in bucket]
                self._buckets.clear()
            else:
                removed = self._buckets.pop(tag, [])
            for record in removed:
                record.state = RecordState.REMOVED

        if removed:
            logger.debug(
                f"Removed {len(removed)} listener(s) "
                f"({'all tags' if tag is None else tag})"
            )
        return len(removed)

    def claim(self, record: ListenerRecord) -> bool:
        """
        Decide whether a snapshot entry may still be invoked.

        Plain records always may. A once record may be invoked by exactly
        one dispatch, and not at all after it has been removed.
        """
        if not record.once:
            return True
        with self._lock:
            if record._claimed or not record.is_registered:
                return False
            record._claimed = True
            return True

    def snapshot(self, tag: str) -> tuple[ListenerRecord, ...]:
        """Records registered for a tag at this instant, in order."""
        with self._lock:
            return tuple(self._buckets.get(tag, ()))

    def has_listeners(self, tag: str) -> bool:
        with self._lock:
            return tag in self._buckets

    def listener_count(self, tag: Optional[str] = None) -> int:
        """Total records, or records for one tag."""
        with self._lock:
            if tag is not None:
                return len(self._buckets.get(tag, ()))
            return sum(len(bucket) for bucket in self._buckets.values())

    def tags_with_listeners(self) -> "TagView":
        """Lazy, restartable view of tags that currently have listeners."""
        return TagView(self)

    def _tags(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._buckets)


class TagView:
    """
    Iterable over a registry's tags.

    Each iteration starts fresh and reflects the registry at the moment
    iteration begins, so mutating listeners while iterating is safe.
    """

    __slots__ = ("_registry",)

    def __init__(self, registry: ListenerRegistry):
        self._registry = registry

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry._tags())

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and self._registry.has_listeners(tag)

    def __repr__(self) -> str:
        return f"TagView({list(self)!r})"
