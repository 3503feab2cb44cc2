"""Mixer controls that share the outbound OSC channel.

- SoloBank: exclusive solo buttons, one per input channel
- Fader: slider value to dB mapping for the master and reverb faders
"""

import logging
from typing import Optional

from . import config
from .osc_sender import MessageSink

logger = logging.getLogger(__name__)


# =============================================================================
# Fader
# =============================================================================

def slider_to_db(
    value: float,
    min_db: float = config.FADER_MIN_DB,
    max_db: float = config.FADER_MAX_DB,
) -> float:
    """Map a slider position (0-1) to dB with a squared taper."""
    value = max(0.0, min(1.0, value))
    return min_db + (max_db - min_db) * value * value


def db_to_linear(db: float) -> float:
    """Convert a dB level to linear gain."""
    return 10.0 ** (db / 20.0)


class Fader:
    """A level slider mirrored to one OSC address."""

    def __init__(
        self,
        sink: Optional[MessageSink],
        address: str = config.OSC_MASTER_FADER,
        value: float = 0.0,
    ):
        self.sink = sink
        self.address = address
        self.value = max(0.0, min(1.0, value))
        self.db = slider_to_db(self.value)

    def set_value(self, value: float) -> float:
        """Move the slider and send the new level.

        Returns:
            The level in dB
        """
        self.value = max(0.0, min(1.0, value))
        self.db = slider_to_db(self.value)
        self._send()
        return self.db

    def sync(self) -> float:
        """Send the current level without moving the slider."""
        self._send()
        return self.db

    def _send(self) -> None:
        if self.sink is None:
            logger.warning("No OSC transmitter configured; %s not sent", self.address)
        else:
            self.sink.send(self.address, [float(self.db)])

    @property
    def gain(self) -> float:
        """Linear gain of the current level."""
        return db_to_linear(self.db)

    @property
    def display(self) -> str:
        return f"{self.db:.1f} dB"


# =============================================================================
# Solo
# =============================================================================

class SoloBank:
    """Exclusive solo buttons for a fixed number of channels.

    Channels are numbered from 1 on the wire. Turning one channel on
    turns every other one off; ``/soloAll 1`` is sent whenever no channel
    is left soloed.
    """

    def __init__(self, sink: Optional[MessageSink], channels: int = config.CHANNEL_COUNT):
        self.sink = sink
        self._states = [False] * channels

    @property
    def states(self) -> list[bool]:
        return list(self._states)

    @property
    def soloed(self) -> Optional[int]:
        """The soloed channel number, or None."""
        for i, state in enumerate(self._states):
            if state:
                return i + 1
        return None

    def _send(self, address: str, value: int) -> None:
        if self.sink is None:
            logger.warning("No OSC transmitter configured; %s not sent", address)
            return
        self.sink.send(address, [int(value)])

    def _send_solo(self, channel: int, on: bool) -> None:
        self._send(config.OSC_SOLO_ON if on else config.OSC_SOLO_OFF, channel)

    def toggle(self, channel: int) -> bool:
        """Toggle the solo button of a channel.

        Args:
            channel: 1-based channel number

        Returns:
            The channel's new solo state
        """
        index = channel - 1
        if not 0 <= index < len(self._states):
            logger.warning("No solo button for channel %d", channel)
            return False

        if not self._states[index]:
            for i, state in enumerate(self._states):
                if i != index and state:
                    self._states[i] = False
                    self._send_solo(i + 1, False)

        self._states[index] = not self._states[index]

        if self._states[index]:
            self._send(config.OSC_SOLO_ALL, 0)
            self._send_solo(channel, True)
        else:
            self._send_solo(channel, False)

        if not any(self._states):
            self._send(config.OSC_SOLO_ALL, 1)
        return self._states[index]

    def clear(self) -> None:
        """Turn every solo button off."""
        for i in range(len(self._states)):
            self._states[i] = False
            self._send_solo(i + 1, False)
        self._send(config.OSC_SOLO_ALL, 1)
