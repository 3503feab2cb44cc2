"""Tests for position broadcasting and the start-up timer."""

import logging
import pytest

from spatializer.angles import from_bearing
from spatializer.broadcaster import OneShotTimer, PositionBroadcaster
from spatializer.osc_sender import MockOscSender
from spatializer.registry import ObjectRegistry


class TimeStub:
    """Manually advanced clock."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def now(self) -> float:
        return self.value


@pytest.fixture
def clock():
    return TimeStub(100.0)


@pytest.fixture
def sender():
    sender = MockOscSender()
    sender.open()
    return sender


class TestOneShotTimer:
    """Deferred one-shot callback."""

    def test_fires_once_after_delay(self, clock):
        calls = []
        timer = OneShotTimer(0.5, lambda: calls.append(clock.value), time_source=clock.now)
        timer.start()

        clock.value = 100.4
        assert not timer.poll()
        clock.value = 100.5
        assert timer.poll()
        clock.value = 200.0
        assert not timer.poll()

        assert calls == [100.5]
        assert timer.fired
        assert not timer.pending

    def test_not_started_never_fires(self, clock):
        timer = OneShotTimer(0.5, lambda: pytest.fail("fired"), time_source=clock.now)
        clock.value = 1000.0
        assert not timer.poll()

    def test_cancel_before_deadline(self, clock):
        timer = OneShotTimer(0.5, lambda: pytest.fail("fired"), time_source=clock.now)
        timer.start()
        timer.cancel()
        clock.value = 101.0
        assert not timer.poll()
        assert not timer.fired

    def test_explicit_now(self, clock):
        calls = []
        timer = OneShotTimer(0.5, lambda: calls.append(1), time_source=clock.now)
        timer.start()
        assert timer.poll(now=100.6)
        assert calls == [1]


class TestSendPosition:
    """Single-object messages."""

    def test_drag_message_has_int_bearing(self, sender):
        registry = ObjectRegistry.from_bearings([123.4])
        PositionBroadcaster(sender).send_position(registry.get(1))

        [(address, args)] = sender.messages()
        assert address == "/objectPosition"
        assert args == [1, 123]
        assert all(type(a) is int for a in args)

    def test_snap_message_has_float_bearing(self, sender):
        registry = ObjectRegistry.from_bearings([90.0])
        PositionBroadcaster(sender).send_snapped(registry.get(1), 90)

        [(address, args)] = sender.messages()
        assert args == [1, 90.0]
        assert type(args[0]) is int
        assert type(args[1]) is float

    def test_missing_sink_warns(self, caplog):
        registry = ObjectRegistry.from_bearings([0.0])
        with caplog.at_level(logging.WARNING):
            PositionBroadcaster(None).send_position(registry.get(1))
        assert "No OSC transmitter" in caplog.text


class TestBroadcastAll:
    """Full broadcasts in registry order."""

    def test_one_message_per_object_in_order(self, sender):
        registry = ObjectRegistry.from_bearings([270, 10, 180])
        count = PositionBroadcaster(sender).broadcast_all(registry)

        assert count == 3
        assert sender.messages("/objectPosition") == [
            ("/objectPosition", [1, 270]),
            ("/objectPosition", [2, 10]),
            ("/objectPosition", [3, 180]),
        ]

    def test_empty_registry_warns(self, sender, caplog):
        with caplog.at_level(logging.WARNING):
            count = PositionBroadcaster(sender).broadcast_all(ObjectRegistry())
        assert count == 0
        assert sender.messages() == []
        assert "empty" in caplog.text

    def test_missing_registry_warns(self, sender, caplog):
        with caplog.at_level(logging.WARNING):
            assert PositionBroadcaster(sender).broadcast_all(None) == 0
        assert "No object registry" in caplog.text

    def test_missing_sink_skips(self, caplog):
        with caplog.at_level(logging.WARNING):
            count = PositionBroadcaster(None).broadcast_all(ObjectRegistry.evenly_spaced(2))
        assert count == 0
        assert "skipping broadcast" in caplog.text


class TestStartupBroadcast:
    """Full broadcast after the settle delay."""

    def test_waits_for_settle_delay(self, sender, clock):
        registry = ObjectRegistry([(0.0, 3.0), (3.0, 0.0), (0.0, -3.0), (-3.0, 0.0)])
        broadcaster = PositionBroadcaster(sender, settle_delay=0.5, time_source=clock.now)
        broadcaster.schedule_startup(registry)

        clock.value = 100.49
        broadcaster.poll()
        assert sender.messages() == []

        clock.value = 100.5
        assert broadcaster.poll()
        assert [args for _, args in sender.messages()] == [[1, 0], [2, 90], [3, 180], [4, 270]]

        clock.value = 105.0
        assert not broadcaster.poll()
        assert len(sender.messages()) == 4

    def test_bearings_match_initial_positions(self, sender, clock):
        registry = ObjectRegistry([from_bearing(b, 3.0) for b in (17, 200, 333)])
        broadcaster = PositionBroadcaster(sender, settle_delay=0.5, time_source=clock.now)
        broadcaster.schedule_startup(registry)
        broadcaster.poll(now=101.0)

        assert [args[1] for _, args in sender.messages()] == [obj.bearing for obj in registry]

    def test_empty_registry_sends_nothing(self, sender, clock, caplog):
        broadcaster = PositionBroadcaster(sender, settle_delay=0.5, time_source=clock.now)
        broadcaster.schedule_startup(ObjectRegistry())
        with caplog.at_level(logging.WARNING):
            assert broadcaster.poll(now=101.0)
        assert sender.messages() == []
        assert "empty" in caplog.text

    def test_cancel(self, sender, clock):
        broadcaster = PositionBroadcaster(sender, settle_delay=0.5, time_source=clock.now)
        broadcaster.schedule_startup(ObjectRegistry.evenly_spaced(3))
        assert broadcaster.startup_pending
        broadcaster.cancel_startup()
        assert not broadcaster.startup_pending
        assert not broadcaster.poll(now=200.0)
        assert sender.messages() == []

    def test_reschedule_replaces_pending(self, sender, clock):
        broadcaster = PositionBroadcaster(sender, settle_delay=0.5, time_source=clock.now)
        broadcaster.schedule_startup(ObjectRegistry.evenly_spaced(3))
        broadcaster.schedule_startup(ObjectRegistry.evenly_spaced(2))
        broadcaster.poll(now=200.0)
        assert len(sender.messages()) == 2
