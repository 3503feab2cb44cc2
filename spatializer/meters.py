"""Input meter levels received over OSC.

The audio system reports each input channel's level on
``/channelIn/{n}`` as a single float.
"""

import logging
import threading
from typing import Optional

from pythonosc import dispatcher
from pythonosc import osc_server

from . import config

logger = logging.getLogger(__name__)


class MeterLevels:
    """Latest level per channel. Written by the receiver thread."""

    def __init__(self, channels: int = config.CHANNEL_COUNT):
        self.channels = channels
        self._levels = [0.0] * channels
        self._lock = threading.Lock()

    def set(self, channel: int, value: float) -> None:
        """Store a level for a 1-based channel number."""
        if not 1 <= channel <= self.channels:
            return
        with self._lock:
            self._levels[channel - 1] = value

    def get(self, channel: int) -> float:
        """Level of a 1-based channel number, 0.0 for unknown channels."""
        if not 1 <= channel <= self.channels:
            return 0.0
        with self._lock:
            return self._levels[channel - 1]

    def snapshot(self) -> list[float]:
        with self._lock:
            return list(self._levels)


class MeterReceiver:
    """Receives channel meter levels from the audio system.

    Runs in a background thread and only writes to its MeterLevels.
    """

    def __init__(
        self,
        levels: MeterLevels,
        host: str = "0.0.0.0",
        port: int = config.METER_PORT,
    ):
        """Initialize the receiver.

        Args:
            levels: Level store to update
            host: Interface to listen on
            port: UDP port to listen on
        """
        self.levels = levels
        self.host = host
        self.port = port
        self._server: Optional[osc_server.ThreadingOSCUDPServer] = None
        self._thread: Optional[threading.Thread] = None

    def build_dispatcher(self) -> dispatcher.Dispatcher:
        """Map one ``/channelIn/{n}`` address per channel."""
        disp = dispatcher.Dispatcher()
        for n in range(1, self.levels.channels + 1):
            disp.map(config.OSC_CHANNEL_IN.format(n=n), self._handle_level, n)
        return disp

    def start(self) -> None:
        """Start the OSC receiver in a background thread."""
        self._server = osc_server.ThreadingOSCUDPServer(
            (self.host, self.port),
            self.build_dispatcher(),
        )
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info("Listening for meter levels on %s:%d", self.host, self.port)

    def stop(self) -> None:
        """Stop the OSC receiver."""
        if self._server:
            self._server.shutdown()
            self._server.server_close()
        if self._thread:
            self._thread.join(timeout=1.0)
        self._server = None
        self._thread = None

    def _handle_level(self, address: str, fixed_args: list, *args) -> None:
        """Handle ``/channelIn/{n} level``."""
        channel = fixed_args[0]
        if not args:
            return
        value = args[0]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.debug("Ignoring non-numeric level on %s: %r", address, value)
            return
        self.levels.set(channel, float(value))
