"""
Coordinate spaces.

Layout code measures from the top-left corner of an area, y growing
downwards. PDF user space measures from the bottom-left corner of the page,
y growing upwards. Two wrapper types keep positions in these spaces apart:

- LayerPosition: relative to the top-left corner of a layer (= page)
- UserSpacePosition: relative to the bottom-left corner of the page

The only way to obtain a UserSpacePosition is ``to_backend_space``.
"""

from __future__ import annotations

from dataclasses import dataclass

from pagerender.models import Mm, Position


@dataclass(frozen=True)
class LayerPosition:
    """A position relative to the top-left corner of a layer."""
    position: Position

    @classmethod
    def from_area(cls, area_origin: Position, position: Position) -> LayerPosition:
        """Convert a position relative to an area's origin."""
        return cls(position + area_origin)


@dataclass(frozen=True)
class UserSpacePosition:
    """A position relative to the bottom-left corner of the page."""
    position: Position

    @property
    def x(self) -> Mm:
        return self.position.x

    @property
    def y(self) -> Mm:
        return self.position.y


def to_backend_space(layer_position: LayerPosition, page_height: Mm) -> UserSpacePosition:
    """Flip a layer position into PDF user space: ``(x, page_height - y)``."""
    p = layer_position.position
    return UserSpacePosition(Position(p.x, page_height - p.y))
