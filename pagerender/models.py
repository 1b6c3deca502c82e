"""
Core value types for pagerender.

These models describe physical lengths and drawing attributes that flow
from the layout tree down to the PDF backend.

Design Philosophy:
- Immutable: all values are frozen dataclasses, arithmetic returns new values
- Millimeters everywhere: lengths are plain floats in mm until the backend
  converts them to PDF points
- Coercible: constructors accept tuples/numbers where that reads naturally
  (``Size.coerce((210, 297))``, ``Margins.coerce(10)``)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from pagerender.config import MM_PER_INCH, PT_PER_INCH

# A length in millimeters
Mm = float


def mm_to_pt(mm: Mm) -> float:
    """Convert millimeters to PDF points (1/72 inch)."""
    return mm * PT_PER_INCH / MM_PER_INCH


def pt_to_mm(pt: float) -> Mm:
    """Convert PDF points (1/72 inch) to millimeters."""
    return pt * MM_PER_INCH / PT_PER_INCH


@dataclass(frozen=True)
class Size:
    """Width/height pair in millimeters."""
    width: Mm = 0.0
    height: Mm = 0.0

    @classmethod
    def coerce(cls, value: Union[Size, Tuple[float, float]]) -> Size:
        if isinstance(value, Size):
            return value
        width, height = value
        return cls(float(width), float(height))

    def __add__(self, other: Size) -> Size:
        return Size(self.width + other.width, self.height + other.height)

    def __sub__(self, other: Size) -> Size:
        return Size(self.width - other.width, self.height - other.height)

    def __mul__(self, factor: float) -> Size:
        return Size(self.width * factor, self.height * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Size:
        return Size(self.width / divisor, self.height / divisor)


@dataclass(frozen=True)
class Position:
    """Offset in millimeters.

    Positions are used relative to an area, a layer or the PDF user space;
    the coordinate-space wrappers in ``pagerender.render.coords`` keep
    those apart.
    """
    x: Mm = 0.0
    y: Mm = 0.0

    @classmethod
    def coerce(cls, value: Union[Position, Tuple[float, float]]) -> Position:
        if isinstance(value, Position):
            return value
        x, y = value
        return cls(float(x), float(y))

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Position) -> Position:
        return Position(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Position:
        return Position(self.x * factor, self.y * factor)

    __rmul__ = __mul__


@dataclass(frozen=True)
class Margins:
    """Margins of an area in millimeters."""
    top: Mm = 0.0
    right: Mm = 0.0
    bottom: Mm = 0.0
    left: Mm = 0.0

    @classmethod
    def all(cls, value: Mm) -> Margins:
        return cls(value, value, value, value)

    @classmethod
    def vh(cls, vertical: Mm, horizontal: Mm) -> Margins:
        return cls(vertical, horizontal, vertical, horizontal)

    @classmethod
    def trbl(cls, top: Mm, right: Mm, bottom: Mm, left: Mm) -> Margins:
        return cls(top, right, bottom, left)

    @classmethod
    def coerce(cls, value) -> Margins:
        """Build margins from a number, a (vertical, horizontal) pair or a
        (top, right, bottom, left) tuple."""
        if isinstance(value, Margins):
            return value
        if isinstance(value, (int, float)):
            return cls.all(float(value))
        values = tuple(float(v) for v in value)
        if len(values) == 2:
            return cls.vh(*values)
        if len(values) == 4:
            return cls.trbl(*values)
        raise ValueError(f"Margins need 1, 2 or 4 values, got {len(values)}")


@dataclass(frozen=True)
class Rotation:
    """A clockwise rotation in degrees, restricted to [-180, 180]."""
    degrees: float = 0.0

    def __post_init__(self):
        degrees = float(self.degrees)
        if not -180.0 <= degrees <= 180.0:
            raise ValueError(f"Rotation must be within [-180, 180] degrees, got {degrees}")
        object.__setattr__(self, "degrees", degrees)

    @classmethod
    def coerce(cls, value: Union[Rotation, float]) -> Rotation:
        if isinstance(value, Rotation):
            return value
        return cls(float(value))


@dataclass(frozen=True)
class Scale:
    """Horizontal and vertical scale factors."""
    x: float = 1.0
    y: float = 1.0

    @classmethod
    def coerce(cls, value: Union[Scale, float, Tuple[float, float]]) -> Scale:
        if isinstance(value, Scale):
            return value
        if isinstance(value, (int, float)):
            return cls(float(value), float(value))
        x, y = value
        return cls(float(x), float(y))


class Alignment(Enum):
    """Horizontal alignment of an element within its area."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class Color:
    """A color in one of the PDF color spaces.

    Components are integers in 0..255; ``space`` is "rgb", "grey" or "cmyk".
    """
    space: str
    values: Tuple[int, ...]

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> Color:
        return cls("rgb", (r, g, b))

    @classmethod
    def greyscale(cls, value: int) -> Color:
        return cls("grey", (value,))

    @classmethod
    def cmyk(cls, c: int, m: int, y: int, k: int) -> Color:
        return cls("cmyk", (c, m, y, k))

    def as_unit_tuple(self) -> Tuple[float, ...]:
        """Components scaled to 0..1, the form PyMuPDF expects."""
        return tuple(v / 255.0 for v in self.values)


BLACK = Color.rgb(0, 0, 0)


@dataclass(frozen=True)
class LineStyle:
    """Stroke settings for lines and frames."""
    thickness: Mm = 0.1
    color: Color = BLACK

    def with_thickness(self, thickness: Mm) -> LineStyle:
        return LineStyle(thickness, self.color)

    def with_color(self, color: Color) -> LineStyle:
        return LineStyle(self.thickness, color)
