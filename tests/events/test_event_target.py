"""
EventTarget Facade: Tests
===========================
Covers:
- Both naming conventions bind to the same registry
- Chaining
- The concrete scenarios of the dispatch contract
- make_event / emit / decorator registration
- Default settings and deferral through a real asyncio loop
"""

import asyncio
from dataclasses import dataclass

import pytest

from eventtarget import (
    ArgumentError,
    ERROR_TAG,
    ErrorEvent,
    Event,
    EventTarget,
    FixedClock,
    ManualScheduler,
    PayloadEvent,
    TargetSettings,
)
from eventtarget.config.settings import set_default_settings
from eventtarget.scheduling.scheduler import HostScheduler


@dataclass(frozen=True, kw_only=True)
class FooEvent(Event):
    type: str = "foo"
    count: int = 0


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def target(scheduler):
    return EventTarget(TargetSettings(clock=FixedClock(5.0), scheduler=scheduler))


def noop(event):
    pass


# ══════════════════════════════════════════════════════════════
# SCENARIOS
# ══════════════════════════════════════════════════════════════

class TestScenarios:
    def test_register_twice_counts_once(self, target):
        target.register("x", noop).register("x", noop)
        assert target.listener_count() == 1

    def test_once_listener_over_two_dispatches(self, target):
        calls = []
        target.register("x", calls.append, once=True)

        target.dispatch({"type": "x", "timeStamp": 0})
        assert target.listener_count() == 0
        target.dispatch({"type": "x", "timeStamp": 0})

        assert len(calls) == 1

    def test_throwing_listener_reaches_error_listener(self, target):
        seen = []

        def g(event):
            seen.append(event)

        def h(event):
            raise Exception("boom")

        target.register(ERROR_TAG, g)
        target.register("x", h)
        target.dispatch({"type": "x", "timeStamp": 0})

        assert len(seen) == 1
        assert str(seen[0].error) == "boom"

    def test_unhandled_error_surfaces_on_later_turn(self, target, scheduler):
        target.dispatch_error(Exception("e"))  # does not raise here

        with pytest.raises(Exception, match="^e$"):
            scheduler.run_pending()

    def test_count_and_names(self, target):
        def f1(event):
            pass

        def f2(event):
            pass

        def f3(event):
            pass

        target.register("x", f1).register("x", f2).register("y", f3)
        assert target.listener_count() == 3
        assert list(target.tags_with_listeners()) == ["x", "y"]


# ══════════════════════════════════════════════════════════════
# ALIASES
# ══════════════════════════════════════════════════════════════

class TestAliases:
    def test_on_off(self, target):
        assert target.on("x", noop) is target
        assert target.listener_count() == 1
        assert target.off("x", noop) is target
        assert target.listener_count() == 0

    def test_add_remove_event_listener(self, target):
        target.add_event_listener("x", noop)
        target.add_event_listener("x", noop)
        assert target.listener_count() == 1
        target.remove_event_listener("x", noop)
        assert "x" not in target

    def test_add_event_listener_once_flag(self, target):
        calls = []
        target.add_event_listener("x", calls.append, once=True)
        target.dispatch_event(FooEvent(type="x", timestamp=0))
        target.dispatch_event(FooEvent(type="x", timestamp=0))
        assert len(calls) == 1

    def test_once_alias(self, target):
        calls = []
        target.once("foo", calls.append)
        target.dispatch(FooEvent(count=1, timestamp=0))
        target.dispatch(FooEvent(count=2, timestamp=0))
        assert [e.count for e in calls] == [1]

    def test_on_then_off_before_fire_means_no_call(self, target):
        calls = []
        target.once("x", calls.append)
        target.off("x", calls.append)
        target.dispatch({"type": "x"})
        assert calls == []

    def test_remove_all_listeners(self, target):
        target.on("x", noop).on("y", noop).on(ERROR_TAG, noop)
        assert target.remove_all_listeners("y") is target
        assert list(target.event_names()) == ["x", ERROR_TAG]
        target.remove_all_listeners()
        assert target.listener_count() == 0
        assert list(target.event_names()) == []

    def test_event_names_is_lazy_view(self, target):
        names = target.event_names()
        target.on("late", noop)
        assert list(names) == ["late"]

    def test_dispatch_missing_tag_is_noop(self, target, scheduler):
        assert target.dispatch({"type": "nobody"}) is target
        assert scheduler.pending == 0

    def test_dispatch_error_returns_target(self, target):
        target.on(ERROR_TAG, noop)
        assert target.dispatch_error(ValueError("x")) is target

    def test_validation_through_facade(self, target):
        with pytest.raises(ArgumentError):
            target.on(1, noop)
        with pytest.raises(ArgumentError):
            target.dispatch(object())
        with pytest.raises(ArgumentError):
            target.dispatch_error(None)

    def test_contains_and_repr(self, target):
        target.on("x", noop)
        assert "x" in target
        assert 3 not in target
        assert repr(target) == "EventTarget(tags=['x'], listeners=1)"


# ══════════════════════════════════════════════════════════════
# CONVENIENCE
# ══════════════════════════════════════════════════════════════

class TestConvenience:
    def test_make_event_uses_target_clock(self, target):
        event = target.make_event("greet", name="world")
        assert isinstance(event, PayloadEvent)
        assert event.type == "greet"
        assert event.timestamp == 5.0
        assert event["name"] == "world"
        assert event.name == "world"

    def test_payload_event_missing_key_is_attribute_error(self, target):
        event = target.make_event("greet", name="world")
        with pytest.raises(AttributeError, match="nickname"):
            event.nickname
        with pytest.raises(KeyError):
            event["nickname"]

    def test_declared_fields_win_over_payload_keys(self, target):
        event = target.make_event("greet", type="shadow", timestamp=-1)
        assert event.type == "greet"
        assert event.timestamp == 5.0
        assert event["type"] == "shadow"

    def test_emit(self, target):
        seen = []
        target.on("greet", seen.append)
        assert target.emit("greet", name="world") is target
        assert seen[0]["name"] == "world"

    def test_listener_decorator(self, target):
        calls = []

        @target.listener("foo", once=True)
        def handle(event):
            calls.append(event.count)

        assert callable(handle)
        target.dispatch(FooEvent(count=3, timestamp=0))
        target.dispatch(FooEvent(count=4, timestamp=0))
        assert calls == [3]


# ══════════════════════════════════════════════════════════════
# DEFAULTS
# ══════════════════════════════════════════════════════════════

class TestDefaults:
    def test_default_settings_override(self, scheduler):
        custom = TargetSettings(clock=FixedClock(9.0), scheduler=scheduler)
        set_default_settings(custom)
        try:
            assert EventTarget().settings is custom
        finally:
            set_default_settings(None)

    def test_default_target_uses_host_scheduler(self):
        assert isinstance(EventTarget().settings.scheduler, HostScheduler)

    def test_unhandled_error_reaches_asyncio_exception_handler(self):
        captured = []

        async def scenario():
            loop = asyncio.get_running_loop()
            loop.set_exception_handler(
                lambda _loop, context: captured.append(context["exception"])
            )
            target = EventTarget(TargetSettings(scheduler=HostScheduler()))
            target.dispatch_error(ValueError("later"))
            assert captured == []  # not synchronous
            await asyncio.sleep(0)

        asyncio.run(scenario())

        assert len(captured) == 1
        assert str(captured[0]) == "later"


# ══════════════════════════════════════════════════════════════
# EVENT RECORDS
# ══════════════════════════════════════════════════════════════

class TestEventRecords:
    def test_timestamp_is_required(self):
        with pytest.raises(TypeError, match="timestamp"):
            Event(type="x")

    def test_subclass_timestamp_is_required(self):
        with pytest.raises(TypeError, match="timestamp"):
            FooEvent(count=1)

    def test_error_event_defaults_to_error_tag(self):
        event = ErrorEvent(error=ValueError("v"), timestamp=1.0)
        assert event.type == ERROR_TAG
