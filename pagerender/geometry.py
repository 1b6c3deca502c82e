"""
Bounding boxes of rotated rectangles.

Images are rotated clockwise (as seen on the page) about their bottom-left
corner. To place a rotated image inside a layout we need two things:

1. The size of the smallest axis-aligned box containing the rotated image,
   so the layout can reserve the grown footprint.
2. The offset from that box's top-left corner to the bottom-left corner of
   the image (the rotation pivot), so an absolute or aligned position can be
   re-anchored after the box grows.

Offsets use layout coordinates: origin top-left, y growing downwards.

With ``c = cos(theta)`` and ``s = sin(theta)`` the closed forms are:

    range           bbox size                   offset
    0               (w, h)                      (0, h)
    (0, 90]         (w*c + h*s, w*s + h*c)      (0, h*c)
    (90, 180]       (h*s - w*c, w*s - h*c)      (-w*c, 0)
    [-90, 0)        (w*c - h*s, h*c - w*s)      (-h*s, h*c - w*s)
    [-180, -90)     (-w*c - h*s, -h*c - w*s)    (-w*c - h*s, -w*s)

Neighbouring ranges agree at their shared boundary, so the function is
continuous in theta.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Tuple

from pagerender.models import Position, Rotation, Size

# (width, height, cos, sin) -> (offset, bbox size)
_Formula = Callable[[float, float, float, float], Tuple[Position, Size]]


def _quarter_cw(w: float, h: float, c: float, s: float) -> Tuple[Position, Size]:
    return Position(0.0, h * c), Size(w * c + h * s, w * s + h * c)


def _half_cw(w: float, h: float, c: float, s: float) -> Tuple[Position, Size]:
    return Position(-w * c, 0.0), Size(h * s - w * c, w * s - h * c)


def _quarter_ccw(w: float, h: float, c: float, s: float) -> Tuple[Position, Size]:
    return Position(-h * s, h * c - w * s), Size(w * c - h * s, h * c - w * s)


def _half_ccw(w: float, h: float, c: float, s: float) -> Tuple[Position, Size]:
    return Position(-w * c - h * s, -w * s), Size(-w * c - h * s, -h * c - w * s)


@dataclass(frozen=True)
class AngleRange:
    """A range of clockwise angles and the closed form valid on it."""
    name: str
    contains: Callable[[float], bool]
    formula: _Formula


# Every angle in [-180, 180] except 0 falls into exactly one entry.
ANGLE_RANGES: Tuple[AngleRange, ...] = (
    AngleRange("(0, 90]", lambda d: 0.0 < d <= 90.0, _quarter_cw),
    AngleRange("(90, 180]", lambda d: 90.0 < d <= 180.0, _half_cw),
    AngleRange("[-90, 0)", lambda d: -90.0 <= d < 0.0, _quarter_ccw),
    AngleRange("[-180, -90)", lambda d: -180.0 <= d < -90.0, _half_ccw),
)


# Quarter turns use exact values so that the axes of a rectangle rotated by
# +-90 or +-180 degrees swap without rounding noise.
_EXACT_COS_SIN = {
    90.0: (0.0, 1.0),
    -90.0: (0.0, -1.0),
    180.0: (-1.0, 0.0),
    -180.0: (-1.0, 0.0),
}


def _cos_sin(degrees: float) -> Tuple[float, float]:
    if degrees in _EXACT_COS_SIN:
        return _EXACT_COS_SIN[degrees]
    theta = math.radians(degrees)
    return math.cos(theta), math.sin(theta)


def angle_range(rotation: Rotation) -> AngleRange:
    """Return the table entry responsible for the given rotation.

    Raises:
        LookupError: For a zero rotation, which is handled as the identity
    """
    for entry in ANGLE_RANGES:
        if entry.contains(rotation.degrees):
            return entry
    raise LookupError(f"No angle range for {rotation.degrees} degrees")


def bounding_box(size: Size, rotation: Rotation) -> Tuple[Position, Size]:
    """Compute the placement offset and bounding box of a rotated rectangle.

    Args:
        size: Unrotated size of the rectangle (non-negative)
        rotation: Clockwise rotation about the bottom-left corner

    Returns:
        (offset, bbox_size): offset from the bounding box's top-left corner
        to the rectangle's bottom-left corner, and the bounding box size
    """
    if rotation.degrees == 0.0:
        return Position(0.0, size.height), size

    entry = angle_range(rotation)
    cos, sin = _cos_sin(rotation.degrees)
    return entry.formula(size.width, size.height, cos, sin)
