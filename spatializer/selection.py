"""Selection and drag state machine.

Per object: Idle -> Selected -> Dragging -> Selected/Idle on release.
A direct hit on an object selects it and starts dragging in one step.
A hit on its proxy label selects it without dragging.

The transition functions are pure with respect to the focus: they take
the current :class:`Focus` and return the next one. The registry is the
only thing they mutate. :class:`SelectionController` just keeps the focus
between events.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from . import config
from .angles import Point, project_to_circle, raw_bearing, from_bearing
from .registry import InteractionState, ObjectRegistry, TrackedObject
from .zones import EmptyZoneSetError, nearest

logger = logging.getLogger(__name__)


class HitKind(Enum):
    """What a pointer hit landed on."""
    OBJECT = "object"
    LABEL = "label"


@dataclass(frozen=True)
class Hit:
    """One hit-test result under the pointer.

    Labels are paired 1:1 with objects, so both kinds are identified by
    the object's 1-based index.
    """
    kind: HitKind
    index: int

    @classmethod
    def on_object(cls, index: int) -> "Hit":
        return cls(HitKind.OBJECT, index)

    @classmethod
    def on_label(cls, index: int) -> "Hit":
        return cls(HitKind.LABEL, index)


@dataclass(frozen=True)
class Focus:
    """The last selected object and the highlighted proxy label."""
    object_index: Optional[int] = None
    label_index: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.object_index is None


# =============================================================================
# Transitions
# =============================================================================

def _demote(obj: TrackedObject) -> None:
    obj.state = InteractionState.IDLE
    obj.priority = config.BASE_PRIORITY


def _focus_on(
    registry: ObjectRegistry,
    focus: Focus,
    index: int,
    state: InteractionState,
) -> Focus:
    """Move the focus to ``index`` and give it ``state``.

    Every other object that is not idle is demoted, so at most one
    object is ever Selected or Dragging.
    """
    target = registry.get(index)
    for obj in registry:
        if obj is not target and (
            obj.state != InteractionState.IDLE or obj.index == focus.object_index
        ):
            _demote(obj)

    target.state = state
    target.priority = config.FOCUS_PRIORITY
    return Focus(object_index=index, label_index=index)


def _first_label_hit(registry: ObjectRegistry, hits: Sequence[Hit]) -> Optional[Hit]:
    for hit in hits:
        if hit.kind != HitKind.LABEL:
            continue
        if hit.index in registry:
            return hit
        logger.warning("Proxy label %d has no tracked object", hit.index)
    return None


def _topmost_object(registry: ObjectRegistry, hits: Sequence[Hit]) -> Optional[TrackedObject]:
    """Highest-priority object among the hits; first registered wins ties."""
    candidates = [
        registry.get(hit.index)
        for hit in hits
        if hit.kind == HitKind.OBJECT and hit.index in registry
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda obj: (obj.priority, -obj.index))


def press(registry: ObjectRegistry, focus: Focus, hits: Iterable[Hit]) -> Focus:
    """Resolve a pointer-down event.

    Proxy labels take priority over objects: if any hit is a label the
    paired object becomes Selected (never Dragging) and object hits are
    ignored for this event. Otherwise the topmost object hit starts
    dragging. With no usable hit nothing changes.

    Args:
        registry: Tracked objects
        focus: Focus before the event
        hits: Everything under the pointer, in any order

    Returns:
        Focus after the event
    """
    hits = list(hits)

    label_hit = _first_label_hit(registry, hits)
    if label_hit is not None:
        logger.debug("Label %d selected", label_hit.index)
        return _focus_on(registry, focus, label_hit.index, InteractionState.SELECTED)

    target = _topmost_object(registry, hits)
    if target is None:
        return focus

    logger.debug("Object %d picked for dragging", target.index)
    return _focus_on(registry, focus, target.index, InteractionState.DRAGGING)


def drag(
    registry: ObjectRegistry,
    focus: Focus,
    pointer: Point,
    radius: float = config.DRAG_RADIUS,
) -> Optional[TrackedObject]:
    """Move the dragging focus object to follow the pointer around the circle.

    The pointer is projected onto the circle, so the object always stays
    at ``radius`` from the center. A pointer on the exact center keeps
    the previous direction.

    Returns:
        The moved object, or None if nothing is being dragged
    """
    if focus.object_index is None or focus.object_index not in registry:
        return None
    obj = registry.get(focus.object_index)
    if not obj.is_dragging:
        return None

    registry.set_position(obj.index, project_to_circle(pointer, radius, fallback=obj.position))
    obj.snapped_bearing = None
    return obj


def release(registry: ObjectRegistry, focus: Focus) -> Focus:
    """Resolve a pointer-up event.

    The dragged focus object stays selected; anything else that was
    dragging drops back to idle.
    """
    for obj in registry:
        if obj.is_dragging:
            if obj.index == focus.object_index:
                obj.state = InteractionState.SELECTED
            else:
                _demote(obj)
    return focus


def snap(
    registry: ObjectRegistry,
    focus: Focus,
    zones: Sequence[float],
    radius: float = config.DRAG_RADIUS,
) -> Optional[float]:
    """Snap the focus object to the nearest allowed bearing.

    Interaction state is left alone.

    Returns:
        The zone snapped to, or None when there is no focus or no zones
    """
    if focus.object_index is None or focus.object_index not in registry:
        return None
    obj = registry.get(focus.object_index)

    current = raw_bearing(obj.position)
    try:
        zone = nearest(current, zones)
    except EmptyZoneSetError:
        logger.warning("Snap requested but no zones are configured")
        return None

    obj.snapped_bearing = zone
    registry.set_position(obj.index, from_bearing(zone, radius))
    logger.info("Object %d snapped from %.1f to %s degrees", obj.index, current, zone)
    return zone


# =============================================================================
# Controller
# =============================================================================

class SelectionController:
    """Keeps the focus between pointer events and applies transitions."""

    def __init__(self, registry: ObjectRegistry, radius: float = config.DRAG_RADIUS):
        self.registry = registry
        self.radius = radius
        self.focus = Focus()

    @property
    def focus_object(self) -> Optional[TrackedObject]:
        if self.focus.object_index is None:
            return None
        return self.registry.get(self.focus.object_index)

    def press(self, hits: Iterable[Hit]) -> Focus:
        self.focus = press(self.registry, self.focus, hits)
        return self.focus

    def drag(self, pointer: Point) -> Optional[TrackedObject]:
        return drag(self.registry, self.focus, pointer, self.radius)

    def release(self) -> Focus:
        self.focus = release(self.registry, self.focus)
        return self.focus

    def snap(self, zones: Sequence[float]) -> Optional[float]:
        return snap(self.registry, self.focus, zones, self.radius)
