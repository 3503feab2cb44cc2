"""Spatializer session: the frame-driven core.

Wires the registry, selection controller, snap zones and position
broadcaster together. All calls are expected on one thread (the frame
loop); nothing here blocks or raises into the caller.
"""

import logging
import time
from typing import Callable, Iterable, Optional

from . import config
from .angles import Point
from .broadcaster import PositionBroadcaster
from .layouts import Layout
from .osc_sender import MessageSink
from .registry import ObjectRegistry, TrackedObject
from .selection import Focus, Hit, SelectionController
from .zones import ZoneCatalog

logger = logging.getLogger(__name__)


class SpatializerSession:
    """Tracks objects on the circle and mirrors their bearings over OSC."""

    def __init__(
        self,
        registry: Optional[ObjectRegistry],
        sink: Optional[MessageSink],
        zones: Optional[ZoneCatalog] = None,
        radius: float = config.DRAG_RADIUS,
        settle_delay: float = config.SETTLE_DELAY,
        time_source: Callable[[], float] = time.monotonic,
    ):
        """Initialize the session.

        Args:
            registry: Tracked objects (None is treated as an empty registry)
            sink: Outbound message sink (None disables broadcasting)
            zones: Snap zones (None disables snapping)
            radius: Radius dragged and snapped objects are placed on
            settle_delay: Seconds before the start-up broadcast
            time_source: Clock for the start-up timer
        """
        if registry is None:
            logger.warning("No object registry configured; starting with no objects")
            registry = ObjectRegistry()
        self.registry = registry
        self.zones = zones
        self.radius = radius
        self.controller = SelectionController(registry, radius)
        self.broadcaster = PositionBroadcaster(
            sink,
            settle_delay=settle_delay,
            time_source=time_source,
        )
        self.running = False

    @property
    def focus(self) -> Focus:
        return self.controller.focus

    @property
    def focus_object(self) -> Optional[TrackedObject]:
        return self.controller.focus_object

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Begin the session and arm the start-up broadcast."""
        self.running = True
        self.broadcaster.schedule_startup(self.registry)
        logger.info(
            "Session started with %d objects; first broadcast in %.2fs",
            len(self.registry),
            self.broadcaster.settle_delay,
        )

    def close(self) -> None:
        """End the session. A start-up broadcast that has not fired is dropped."""
        self.broadcaster.cancel_startup()
        self.running = False

    # =========================================================================
    # Frame and pointer events
    # =========================================================================

    def tick(self, pointer: Optional[Point] = None, now: Optional[float] = None) -> None:
        """Advance one frame.

        Runs the start-up broadcast when it is due and, while an object is
        being dragged, moves it to follow ``pointer`` and sends its bearing.
        """
        self.broadcaster.poll(now)
        if pointer is not None and self.registry.dragging() is not None:
            self.drag_to(pointer)

    def pointer_down(self, hits: Iterable[Hit]) -> Focus:
        return self.controller.press(hits)

    def drag_to(self, pointer: Point) -> Optional[TrackedObject]:
        """Move the dragged object (if any) and broadcast its bearing."""
        obj = self.controller.drag(pointer)
        if obj is not None:
            self.broadcaster.send_position(obj)
        return obj

    def pointer_up(self) -> Focus:
        return self.controller.release()

    def snap(self) -> Optional[float]:
        """Snap the focus object to the nearest zone and broadcast it.

        Returns:
            The zone snapped to, or None if nothing was snapped
        """
        if self.zones is None:
            logger.warning("No snap zones configured; snap ignored")
            return None
        zone = self.controller.snap(self.zones.zones)
        if zone is None:
            return None
        self.broadcaster.send_snapped(self.controller.focus_object, zone)
        return zone

    # =========================================================================
    # Layouts
    # =========================================================================

    def capture_layout(self, name: str) -> Layout:
        return Layout.capture(name, self.registry)

    def apply_layout(self, layout: Optional[Layout]) -> bool:
        """Move every object to a saved layout and broadcast the result.

        A layout saved for a different number of objects is rejected
        without touching the registry.

        Returns:
            True if the layout was applied
        """
        if layout is None:
            return False
        if not layout.fits(self.registry):
            logger.warning(
                "Layout %s has %d positions and %d texts for %d objects; not applied",
                layout.name,
                len(layout.positions),
                len(layout.texts),
                len(self.registry),
            )
            return False

        for obj, position, text in zip(self.registry, layout.positions, layout.texts):
            self.registry.set_position(obj.index, position)
            obj.label = text
            obj.snapped_bearing = None
        self.broadcaster.broadcast_all(self.registry)
        logger.info("Layout %s applied", layout.name)
        return True
