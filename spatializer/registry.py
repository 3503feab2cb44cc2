"""Registry of the objects tracked on the circle.

Objects are registered once at session start. Their 1-based index is the
registration order and never changes; only position, state and priority
churn during a session.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Sequence

from . import config
from .angles import Point, from_bearing, to_bearing


class InteractionState(Enum):
    """Pointer interaction state of a tracked object."""
    IDLE = 0
    SELECTED = 1
    DRAGGING = 2


@dataclass
class TrackedObject:
    """A draggable marker on the circle."""
    index: int
    position: Point
    state: InteractionState = InteractionState.IDLE
    # Last zone this object was snapped to; cleared when dragged
    snapped_bearing: Optional[float] = None
    priority: int = config.BASE_PRIORITY
    # Text of the paired proxy label
    label: str = ""

    @property
    def bearing(self) -> int:
        """Current bearing in whole degrees."""
        return to_bearing(self.position)

    @property
    def is_dragging(self) -> bool:
        return self.state == InteractionState.DRAGGING


class ObjectRegistry:
    """Fixed-size, ordered collection of tracked objects.

    Iteration always follows registration order. There is no removal.
    """

    def __init__(self, positions: Sequence[Point] = (), labels: Optional[Sequence[str]] = None):
        """Register one object per position.

        Args:
            positions: Initial (x, y) of each object, in registration order
            labels: Proxy label text per object (defaults to the index)
        """
        if labels is not None and len(labels) != len(positions):
            raise ValueError(
                f"Got {len(labels)} labels for {len(positions)} objects"
            )
        self._objects: list[TrackedObject] = []
        for i, position in enumerate(positions):
            label = labels[i] if labels is not None else str(i + 1)
            self._objects.append(
                TrackedObject(index=i + 1, position=(float(position[0]), float(position[1])), label=label)
            )

    @classmethod
    def from_bearings(
        cls,
        bearings: Sequence[float],
        radius: float = config.DRAG_RADIUS,
        labels: Optional[Sequence[str]] = None,
    ) -> "ObjectRegistry":
        """Build a registry with each object placed on the circle."""
        return cls([from_bearing(b, radius) for b in bearings], labels)

    @classmethod
    def evenly_spaced(cls, count: int = config.OBJECT_COUNT, radius: float = config.DRAG_RADIUS) -> "ObjectRegistry":
        """Build a registry of ``count`` objects spread evenly clockwise from the top."""
        if count <= 0:
            return cls()
        step = 360.0 / count
        return cls.from_bearings([i * step for i in range(count)], radius)

    def get(self, index: int) -> TrackedObject:
        """Get an object by its 1-based index.

        Raises:
            KeyError: If no object has that index
        """
        if not 1 <= index <= len(self._objects):
            raise KeyError(f"No tracked object with index {index}")
        return self._objects[index - 1]

    def all(self) -> list[TrackedObject]:
        """All objects in registration order."""
        return list(self._objects)

    def set_state(self, index: int, state: InteractionState) -> None:
        self.get(index).state = state

    def set_position(self, index: int, position: Point) -> None:
        self.get(index).position = (float(position[0]), float(position[1]))

    def dragging(self) -> Optional[TrackedObject]:
        """The object currently being dragged, if any."""
        for obj in self._objects:
            if obj.is_dragging:
                return obj
        return None

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[TrackedObject]:
        return iter(self._objects)

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and 1 <= index <= len(self._objects)
