"""Snap zones: the discrete set of allowed bearings.

Zones are loaded once per session and never change afterwards. They need
not be evenly spaced, sorted or distinct.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from . import config

logger = logging.getLogger(__name__)


class EmptyZoneSetError(ValueError):
    """Raised when a nearest-zone lookup is made against no zones."""


def delta_angle(current: float, target: float) -> float:
    """Shortest signed difference from ``current`` to ``target`` in degrees.

    Returns:
        Difference in [-180, 180]
    """
    delta = (target - current) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


def nearest(bearing: float, zones: Sequence[float]) -> float:
    """Find the zone closest to ``bearing`` on the 360 degree ring.

    Ties go to the first zone encountered.

    Args:
        bearing: Query bearing in degrees
        zones: Allowed bearings, in priority order

    Returns:
        The closest zone value, unchanged

    Raises:
        EmptyZoneSetError: If ``zones`` is empty
    """
    closest: Optional[float] = None
    min_difference = float("inf")

    for zone in zones:
        difference = abs(delta_angle(bearing, zone))
        if difference < min_difference:
            min_difference = difference
            closest = zone

    if closest is None:
        raise EmptyZoneSetError("No snap zones configured")
    return closest


class ZoneCatalog:
    """Immutable, ordered collection of snap zones."""

    def __init__(self, zones: Iterable[float] = config.DEFAULT_ZONES):
        self._zones: tuple[float, ...] = tuple(float(z) for z in zones)

    @property
    def zones(self) -> tuple[float, ...]:
        return self._zones

    def nearest(self, bearing: float) -> float:
        """Closest zone to ``bearing``. See :func:`nearest`."""
        return nearest(bearing, self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __bool__(self) -> bool:
        return bool(self._zones)

    def __repr__(self) -> str:
        return f"ZoneCatalog({list(self._zones)!r})"


def parse_zones(data: Union[list, dict]) -> ZoneCatalog:
    """Build a catalog from decoded JSON.

    Accepts either a bare list of numbers or ``{"zones": [...]}``.

    Raises:
        ValueError: If the data is not a list of numbers
    """
    if isinstance(data, dict):
        data = data.get("zones")
    if not isinstance(data, list):
        raise ValueError("Zone file must contain a list of bearings")

    zones = []
    for value in data:
        # bool is an int subclass but never a valid bearing
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Invalid zone bearing: {value!r}")
        zones.append(float(value))

    if not zones:
        logger.warning("Zone file is empty; snapping will be disabled")
    return ZoneCatalog(zones)


def load_zones(path: Union[str, Path]) -> ZoneCatalog:
    """Load a zone catalog from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or not a list of numbers
        OSError: If the file cannot be read
    """
    text = Path(path).expanduser().read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Zone file {path} is not valid JSON: {exc}") from exc
    catalog = parse_zones(data)
    logger.info("Loaded %d snap zones from %s", len(catalog), path)
    return catalog
