"""End-to-end tests for the spatializer session."""

import logging
import pytest

from spatializer.angles import from_bearing, magnitude
from spatializer.layouts import Layout
from spatializer.osc_sender import MockOscSender
from spatializer.registry import InteractionState, ObjectRegistry
from spatializer.selection import Hit
from spatializer.session import SpatializerSession
from spatializer.zones import ZoneCatalog


class TimeStub:
    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def now(self) -> float:
        return self.value


@pytest.fixture
def clock():
    return TimeStub()


@pytest.fixture
def sender():
    sender = MockOscSender()
    sender.open()
    return sender


@pytest.fixture
def session(sender, clock):
    registry = ObjectRegistry.from_bearings([0, 85, 180, 270], radius=3.0)
    return SpatializerSession(
        registry,
        sender,
        zones=ZoneCatalog([0, 90, 180, 270]),
        radius=3.0,
        settle_delay=0.5,
        time_source=clock.now,
    )


class TestStartup:
    """Settle delay then one message per object."""

    def test_broadcast_after_settle(self, session, sender, clock):
        session.start()
        session.tick()
        assert sender.messages() == []

        clock.value = 0.5
        session.tick()
        assert [args for _, args in sender.messages()] == [[1, 0], [2, 85], [3, 180], [4, 270]]

    def test_close_cancels_startup(self, session, sender, clock):
        session.start()
        session.close()
        clock.value = 10.0
        session.tick()
        assert sender.messages() == []
        assert not session.running

    def test_missing_registry_warns(self, sender, caplog):
        with caplog.at_level(logging.WARNING):
            session = SpatializerSession(None, sender)
        assert len(session.registry) == 0
        assert "No object registry" in caplog.text


class TestDragging:
    """Every drag tick sends an integer bearing."""

    def test_drag_ticks_broadcast(self, session, sender):
        session.pointer_down([Hit.on_object(1)])
        session.tick(pointer=(10.0, 0.0))
        session.tick(pointer=(0.0, -0.1))

        assert sender.messages() == [
            ("/objectPosition", [1, 90]),
            ("/objectPosition", [1, 180]),
        ]
        assert magnitude(session.registry.get(1).position) == pytest.approx(3.0)

    def test_no_messages_after_release(self, session, sender):
        session.pointer_down([Hit.on_object(1)])
        session.pointer_up()
        session.tick(pointer=(10.0, 0.0))
        assert sender.messages() == []
        assert session.registry.get(1).state == InteractionState.SELECTED

    def test_label_selection_does_not_drag(self, session, sender):
        session.pointer_down([Hit.on_label(2), Hit.on_object(1)])
        session.tick(pointer=(10.0, 0.0))
        assert sender.messages() == []
        assert session.focus.object_index == 2
        assert session.registry.get(2).state == InteractionState.SELECTED


class TestSnap:
    """Snap sends one float message for the focus object."""

    def test_snap_message(self, session, sender):
        session.pointer_down([Hit.on_label(2)])
        zone = session.snap()

        assert zone == 90.0
        [(address, args)] = sender.messages()
        assert address == "/objectPosition"
        assert args == [2, 90.0]
        assert type(args[1]) is float
        assert session.registry.get(2).bearing == 90

    def test_snap_sends_configured_zone_value(self, sender):
        session = SpatializerSession(
            ObjectRegistry.evenly_spaced(2), sender, zones=ZoneCatalog([360, 90])
        )
        session.pointer_down([Hit.on_label(1)])

        assert session.snap() == 360.0
        assert sender.messages() == [("/objectPosition", [1, 360.0])]
        assert session.registry.get(1).bearing == 0

    def test_snap_without_focus(self, session, sender):
        assert session.snap() is None
        assert sender.messages() == []

    def test_snap_without_zones(self, sender, caplog):
        session = SpatializerSession(ObjectRegistry.evenly_spaced(2), sender)
        session.pointer_down([Hit.on_label(1)])
        with caplog.at_level(logging.WARNING):
            assert session.snap() is None
        assert sender.messages() == []
        assert "No snap zones" in caplog.text


class TestLayouts:
    """Applying saved layouts."""

    def test_apply_layout(self, session, sender):
        layout = Layout(
            name="stage",
            positions=[from_bearing(b, 3.0) for b in (10, 20, 30, 40)],
            texts=["Vox", "Gtr", "Bass", "Drums"],
        )
        assert session.apply_layout(layout)

        assert [obj.label for obj in session.registry] == ["Vox", "Gtr", "Bass", "Drums"]
        assert [args for _, args in sender.messages()] == [[1, 10], [2, 20], [3, 30], [4, 40]]

    def test_mismatched_layout_is_rejected(self, session, sender, caplog):
        before = [(obj.position, obj.label) for obj in session.registry]
        layout = Layout(name="small", positions=[(0.0, 3.0)], texts=["Solo"])

        with caplog.at_level(logging.WARNING):
            assert not session.apply_layout(layout)

        assert [(obj.position, obj.label) for obj in session.registry] == before
        assert sender.messages() == []
        assert "not applied" in caplog.text

    def test_capture_round_trip(self, session):
        layout = session.capture_layout("now")
        assert layout.fits(session.registry)
        assert layout.texts == ["1", "2", "3", "4"]

    def test_none_layout(self, session):
        assert not session.apply_layout(None)
