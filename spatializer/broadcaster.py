"""Position broadcasting and the start-up settle timer.

Each emission is one ``/objectPosition`` message per object. Drag ticks
and full broadcasts carry the bearing as a whole number of degrees; a
snap carries the zone value as a float so downstream consumers see the
exact zone.
"""

import logging
import time
from typing import Callable, Optional

from . import config
from .osc_sender import MessageSink
from .registry import ObjectRegistry, TrackedObject

logger = logging.getLogger(__name__)


class OneShotTimer:
    """A callback that fires once, some time after it is started.

    Nothing runs in the background: the owner calls :meth:`poll` from its
    frame loop and the callback runs inside that call once the delay has
    elapsed. A cancelled or fired timer never fires again.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        time_source: Callable[[], float] = time.monotonic,
    ):
        self.delay = delay
        self._callback = callback
        self._time = time_source
        self._deadline: Optional[float] = None
        self.fired = False

    def start(self) -> None:
        """Arm the timer. Restarting a pending timer moves its deadline."""
        if self.fired:
            return
        self._deadline = self._time() + self.delay

    def cancel(self) -> None:
        self._deadline = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def poll(self, now: Optional[float] = None) -> bool:
        """Fire the callback if the deadline has passed.

        Returns:
            True if the callback ran during this call
        """
        if self._deadline is None:
            return False
        if now is None:
            now = self._time()
        if now < self._deadline:
            return False
        self._deadline = None
        self.fired = True
        self._callback()
        return True


class PositionBroadcaster:
    """Serializes object positions into outbound OSC messages."""

    def __init__(
        self,
        sink: Optional[MessageSink],
        address: str = config.OSC_OBJECT_POSITION,
        settle_delay: float = config.SETTLE_DELAY,
        time_source: Callable[[], float] = time.monotonic,
    ):
        """Initialize the broadcaster.

        Args:
            sink: Message sink (OSC sender); None disables broadcasting
            address: OSC address for position messages
            settle_delay: Seconds to wait before the start-up broadcast
            time_source: Clock used by the start-up timer
        """
        self.sink = sink
        self.address = address
        self.settle_delay = settle_delay
        self._time = time_source
        self._startup: Optional[OneShotTimer] = None

    def _can_send(self) -> bool:
        if self.sink is None:
            logger.warning("No OSC transmitter configured; position not sent")
            return False
        return True

    def send_position(self, obj: TrackedObject) -> None:
        """Emit ``[index, bearing]`` with the bearing in whole degrees."""
        if not self._can_send():
            return
        bearing = obj.bearing
        self.sink.send(self.address, [int(obj.index), int(bearing)])
        logger.debug("Object %d position: %d degrees", obj.index, bearing)

    def send_snapped(self, obj: TrackedObject, bearing: float) -> None:
        """Emit ``[index, bearing]`` with the snapped zone as a float."""
        if not self._can_send():
            return
        self.sink.send(self.address, [int(obj.index), float(bearing)])
        logger.debug("Object %d snapped: %s degrees", obj.index, bearing)

    def broadcast_all(self, registry: Optional[ObjectRegistry]) -> int:
        """Emit one integer-bearing message per object, in registry order.

        Returns:
            Number of messages sent
        """
        if registry is None:
            logger.warning("No object registry configured; nothing to broadcast")
            return 0
        if len(registry) == 0:
            logger.warning("Object registry is empty; nothing to broadcast")
            return 0
        if self.sink is None:
            logger.warning("No OSC transmitter configured; skipping broadcast")
            return 0

        for obj in registry:
            self.send_position(obj)
        return len(registry)

    # =========================================================================
    # Start-up broadcast
    # =========================================================================

    def schedule_startup(self, registry: Optional[ObjectRegistry]) -> OneShotTimer:
        """Arm a one-shot full broadcast after the settle delay.

        Any earlier pending start-up broadcast is cancelled first.
        """
        self.cancel_startup()
        self._startup = OneShotTimer(
            self.settle_delay,
            lambda: self.broadcast_all(registry),
            time_source=self._time,
        )
        self._startup.start()
        return self._startup

    def poll(self, now: Optional[float] = None) -> bool:
        """Run the start-up broadcast once it is due."""
        if self._startup is None:
            return False
        return self._startup.poll(now)

    def cancel_startup(self) -> None:
        if self._startup is not None:
            self._startup.cancel()

    @property
    def startup_pending(self) -> bool:
        return self._startup is not None and self._startup.pending
