"""Conversion between circle positions and clockwise bearings.

Bearings are measured in degrees, clockwise, with 0 at the top of the
circle (positive y). The conversion is the standard math angle of the
point with the vertical axis flipped and rotated a quarter turn:

    (0, r)  ->   0
    (r, 0)  ->  90
    (0, -r) -> 180
    (-r, 0) -> 270
"""

import math

Point = tuple[float, float]


def raw_bearing(position: Point) -> float:
    """Bearing of a position relative to the circle center, unrounded.

    Args:
        position: (x, y) relative to the circle center

    Returns:
        Clockwise bearing in [0, 360)
    """
    x, y = position
    degrees = math.degrees(math.atan2(-y, x))
    return (degrees + 90.0 + 360.0) % 360.0


def to_bearing(position: Point) -> int:
    """Bearing of a position rounded to the nearest whole degree.

    Halves round to even, so 0.5 -> 0 and 1.5 -> 2. A value that rounds
    up to 360 wraps to 0.
    """
    return round(raw_bearing(position)) % 360


def from_bearing(bearing: float, radius: float) -> Point:
    """Position on a circle of ``radius`` for a clockwise bearing.

    Args:
        bearing: Clockwise bearing in degrees, 0 at the top
        radius: Circle radius

    Returns:
        (x, y) relative to the circle center
    """
    theta = math.radians(bearing - 90.0)
    return (math.cos(theta) * radius, -math.sin(theta) * radius)


def magnitude(vector: Point) -> float:
    """Euclidean length of a 2D vector."""
    return math.hypot(vector[0], vector[1])


def project_to_circle(pointer: Point, radius: float, fallback: Point = (0.0, 1.0)) -> Point:
    """Project a pointer position onto the circle of ``radius``.

    The pointer direction from the center is normalized and scaled. A
    pointer sitting exactly on the center has no direction, so the
    direction of ``fallback`` is used instead (normally the object's
    previous position). If that is degenerate too the top of the circle
    is used.

    Args:
        pointer: Pointer position relative to the circle center
        radius: Circle radius
        fallback: Vector whose direction is kept for a zero pointer

    Returns:
        Point at distance ``radius`` from the center
    """
    for vector in (pointer, fallback):
        length = magnitude(vector)
        if length > 1e-9 and math.isfinite(length):
            return (vector[0] / length * radius, vector[1] / length * radius)
    return (0.0, radius)
