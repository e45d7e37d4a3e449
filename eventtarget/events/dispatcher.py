"""
EventTarget Events: Dispatcher
================================
Routes events to registered listeners.

Dispatch behavior:
1. Validate the event carries a string tag
2. Snapshot the tag's listeners (no listeners is not an error)
3. Invoke each listener in registration order, synchronously
4. Catch listener exceptions per listener
5. Re-route them to the "error" tag
6. Remove once-listeners from the live registry after they run

Error-channel behavior differs in one place: a listener failure on the
"error" tag is deferred to a later turn, never re-routed, and an error
that reaches no "error" listener is deferred as well.

Neither entry point ever raises the failure it was asked to deliver.
"""

import logging
from typing import Any, Callable

from eventtarget.config.settings import TargetSettings
from eventtarget.events.errors import ArgumentError, UnhandledFailure
from eventtarget.events.registry import (
    ListenerRecord,
    ListenerRegistry,
    listener_name,
)
from eventtarget.events.types import ERROR_TAG, ErrorEvent, event_tag
from eventtarget.scheduling.scheduler import Scheduler

logger = logging.getLogger("eventtarget.events")


def surface_later(error: Any, scheduler: Scheduler) -> None:
    """
    Schedule `error` to be raised on a later turn.
    Exceptions are raised as themselves; other values inside
    UnhandledFailure.
    """
    raisable = error if isinstance(error, BaseException) else UnhandledFailure(error)

    def _raise_unhandled() -> None:
        raise raisable

    logger.error(
        f"Unhandled error event deferred: {type(error).__name__}: {error}"
    )
    scheduler.defer(_raise_unhandled)


def _empty_result(tag: str) -> dict:
    return {
        "event_type": tag,
        "listeners_notified": 0,
        "listeners_failed": 0,
        "listeners_skipped": 0,
    }


def _deliver(
    event: Any,
    tag: str,
    records: tuple[ListenerRecord, ...],
    registry: ListenerRegistry,
    on_failure: Callable[[Exception, str], None],
) -> dict:
    result = _empty_result(tag)

    for record in records:
        if not registry.claim(record):
            # once-listener already fired in a nested dispatch, or removed
            result["listeners_skipped"] += 1
            continue

        try:
            record.listener(event)
            result["listeners_notified"] += 1
        except Exception as exc:
            result["listeners_failed"] += 1
            on_failure(exc, listener_name(record.listener))
        finally:
            if record.once:
                registry.discard(record)

    return result


def dispatch(
    event: Any,
    registry: ListenerRegistry,
    settings: TargetSettings,
) -> dict:
    """
    Dispatch an event to all listeners registered for its tag.

    Args:
        event:    Event, object with a `type` attribute, or Mapping
                  with a "type" key.
        registry: ListenerRegistry owned by the calling target.
        settings: TargetSettings of the calling target.

    Returns:
        dict with dispatch results:
        {
            'event_type': str,
            'listeners_notified': int,
            'listeners_failed': int,
            'listeners_skipped': int,
        }

    Raises:
        ArgumentError: event carries no string tag.

    Listener failures are never raised from here.
    """
    tag = event_tag(event)
    if tag is None:
        raise ArgumentError(
            "Event must be an object with a string `type` property."
        )

    records = registry.snapshot(tag)
    if not records:
        logger.debug(f"No listeners for event type '{tag}'")
        return _empty_result(tag)

    def _reroute(exc: Exception, name: str) -> None:
        if settings.log_listener_failures:
            logger.warning(
                f"Listener failed: {name} for {tag}: {exc} "
                f"(redirecting to '{ERROR_TAG}')",
                exc_info=exc,
            )
        dispatch_error(exc, registry, settings)

    result = _deliver(event, tag, records, registry, _reroute)

    logger.debug(
        f"Dispatch complete: {tag}: "
        f"{result['listeners_notified']} notified, "
        f"{result['listeners_failed']} failed, "
        f"{result['listeners_skipped']} skipped"
    )
    return result


def dispatch_error(
    error: Any,
    registry: ListenerRegistry,
    settings: TargetSettings,
) -> dict:
    """
    Deliver a failure value to the "error" tag as an ErrorEvent.

    If no "error" listener receives it, the value is deferred. A failure
    raised by an error listener is deferred too, never re-routed.

    Raises:
        ArgumentError: error is None.
    """
    if error is None:
        raise ArgumentError("Error must not be None.")

    records = registry.snapshot(ERROR_TAG)
    if not records:
        surface_later(error, settings.scheduler)
        return _empty_result(ERROR_TAG)

    event = ErrorEvent(error=error, timestamp=settings.clock.now())

    def _defer(exc: Exception, name: str) -> None:
        logger.debug(f"Error listener failed: {name}; not re-routed")
        surface_later(exc, settings.scheduler)

    result = _deliver(event, ERROR_TAG, records, registry, _defer)

    if not result["listeners_notified"] and not result["listeners_failed"]:
        # every snapshot entry was a spent once-listener
        surface_later(error, settings.scheduler)
    return result
