"""OSC output to the audio system.

Every outbound message is an address plus an ordered list of typed
arguments, sent fire-and-forget over UDP:

- /objectPosition index bearing   - object position (bearing int or float)
- /soloOn channel                 - solo a channel
- /soloOff channel                - un-solo a channel
- /soloAll state                  - 1 when no channel is soloed
- /MasterFader db                 - master level in dB
- /ReverbFader db                 - reverb send level in dB
"""

import logging
from typing import Any, Optional, Protocol, Sequence

from pythonosc import udp_client

from . import config

logger = logging.getLogger(__name__)


class MessageSink(Protocol):
    """One-way capability to emit an OSC message."""

    def send(self, address: str, args: Sequence[Any]) -> None:
        ...


class OscSender:
    """Sends OSC messages to the audio system.

    Uses python-osc's UDP client. There is no acknowledgement: a send to
    an unreachable peer is silently lost.
    """

    def __init__(
        self,
        host: str = config.OSC_HOST,
        port: int = config.OSC_PORT,
    ):
        """Initialize the OSC sender.

        Args:
            host: Target host address
            port: Target UDP port
        """
        self.host = host
        self.port = port
        self._client: Optional[udp_client.SimpleUDPClient] = None

    def open(self) -> None:
        """Open the OSC connection."""
        self._client = udp_client.SimpleUDPClient(self.host, self.port)

    def close(self) -> None:
        """Close the OSC connection."""
        self._client = None

    def send(self, address: str, args: Sequence[Any]) -> None:
        """Send one message. Dropped (with a debug note) while closed.

        Args:
            address: OSC address pattern
            args: Ordered message arguments
        """
        if self._client is None:
            logger.debug("OSC sender closed, dropping %s %s", address, list(args))
            return
        try:
            self._client.send_message(address, list(args))
        except OSError as exc:
            # Unreachable host or full socket buffer; only this message is lost
            logger.warning("OSC send to %s:%d failed: %s", self.host, self.port, exc)

    @property
    def is_open(self) -> bool:
        """Whether the OSC connection is open."""
        return self._client is not None

    def __enter__(self) -> "OscSender":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()


class MockOscSender(OscSender):
    """Mock OSC sender for testing without an audio system.

    Records every message in a log instead of sending it.
    """

    def __init__(self, *args, **kwargs):
        """Initialize without opening a socket."""
        self.host = kwargs.get("host", config.OSC_HOST)
        self.port = kwargs.get("port", config.OSC_PORT)
        self._client = None
        self.verbose = kwargs.get("verbose", False)
        self._message_log: list[dict] = []

    def open(self) -> None:
        """Mock open."""
        self._client = "mock"  # type: ignore
        logger.info("[MockOSC] Opened connection to %s:%d", self.host, self.port)

    def close(self) -> None:
        """Mock close."""
        self._client = None
        logger.info("[MockOSC] Connection closed")

    def send(self, address: str, args: Sequence[Any]) -> None:
        """Log the message."""
        msg = {"address": address, "args": list(args)}
        self._message_log.append(msg)
        if self.verbose:
            logger.info("[MockOSC] %s %s", address, " ".join(str(a) for a in args))

    def get_log(self) -> list[dict]:
        """Get the message log."""
        return self._message_log.copy()

    def messages(self, address: Optional[str] = None) -> list[tuple[str, list]]:
        """Logged messages as (address, args), optionally filtered by address."""
        return [
            (msg["address"], msg["args"])
            for msg in self._message_log
            if address is None or msg["address"] == address
        ]

    def clear_log(self) -> None:
        """Clear the message log."""
        self._message_log.clear()
