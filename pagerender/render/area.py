"""
Drawable areas and text sections.

An Area is a view on a rectangle of a layer: a layer reference, an origin
and a size. Areas are cheap to copy; margins, offsets and horizontal splits
all produce or mutate views without touching the layer. All positions
passed to an Area are relative to its top-left corner.

A TextSection is a scoped text session on an area. It is a context
manager: entering it opens a text block on the backend and leaving it
closes the block, also when an exception escapes the ``with`` body.

Example:
    >>> section = area.text_section(font_cache, Position(0, 0), style.metrics())
    >>> if section is not None:
    ...     with section:
    ...         section.print_str("Hello", style)
    ...         if section.add_newline():
    ...             section.print_str("World", style)
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from pagerender.encoding import encode_win1252
from pagerender.models import LineStyle, Margins, Mm, Position, Rotation, Scale, Size
from pagerender.render.coords import LayerPosition

if TYPE_CHECKING:
    from pagerender.fonts import FontCache, Metrics
    from pagerender.render.layers import Layer
    from pagerender.style import Style

logger = logging.getLogger(__name__)


class Area:
    """A view on an area of a PDF layer that can be drawn on."""

    def __init__(self, layer: Layer, origin: Position, size: Size):
        self.layer = layer
        self._origin = origin
        self._size = size

    def __repr__(self) -> str:
        return f"Area(layer={self.layer.name!r}, origin={self._origin}, size={self._size})"

    def copy(self) -> Area:
        return copy.copy(self)

    @property
    def origin(self) -> Position:
        return self._origin

    @property
    def size(self) -> Size:
        return self._size

    def next_layer(self) -> Area:
        """Return a copy of this area on the next layer of the page.

        If this area is not on the last layer, the existing next layer is
        used; otherwise a new layer is added to the page.
        """
        return Area(self.layer.next(), self._origin, self._size)

    def add_margins(self, margins) -> None:
        """Reduce the drawable area by the given margins."""
        margins = Margins.coerce(margins)
        self._origin = self._origin + Position(margins.left, margins.top)
        self._shrink(margins.left + margins.right, margins.top + margins.bottom)

    def add_offset(self, offset) -> None:
        """Move the origin by the given offset, reducing the drawable area."""
        offset = Position.coerce(offset)
        self._origin = self._origin + offset
        self._shrink(offset.x, offset.y)

    def _shrink(self, dx: Mm, dy: Mm) -> None:
        self._size = Size(self._size.width - dx, self._size.height - dy)
        if self._size.width < 0 or self._size.height < 0:
            logger.warning(
                "Area on %s shrunk to a negative size (%.2f x %.2f mm)",
                self.layer.name,
                self._size.width,
                self._size.height,
            )

    def set_size(self, size) -> None:
        self._size = Size.coerce(size)

    def set_width(self, width: Mm) -> None:
        self._size = Size(width, self._size.height)

    def set_height(self, height: Mm) -> None:
        self._size = Size(self._size.width, height)

    def split_horizontally(self, weights: Sequence[int]) -> List[Area]:
        """Split this area horizontally using the given weights.

        The result has one area per weight. The width of the i-th area is
        ``width * weights[i] / sum(weights)``; the areas are laid out from
        left to right.

        Raises:
            ValueError: If weights is empty or sums to zero
        """
        total_weight = sum(weights)
        if not weights or total_weight <= 0:
            raise ValueError(f"Cannot split an area with weights {list(weights)}")
        factor = self._size.width / total_weight
        offset = 0.0
        areas = []
        for weight in weights:
            width = factor * weight
            areas.append(
                Area(
                    self.layer,
                    Position(self._origin.x + offset, self._origin.y),
                    Size(width, self._size.height),
                )
            )
            offset += width
        return areas

    def position(self, position: Position) -> LayerPosition:
        """Convert a position relative to this area into a layer position."""
        return LayerPosition.from_area(self._origin, position)

    def add_image(
        self,
        image,
        position: Position,
        scale: Scale = Scale(),
        rotation: Rotation = Rotation(),
        dpi: Optional[float] = None,
    ) -> None:
        """Insert a decoded image.

        The position is the bottom-left corner of the unrotated image,
        relative to the upper-left corner of the area. No compensation for
        rotation or scale is applied here; the Image element computes it.
        """
        self.layer.add_image(image, self.position(position), scale, rotation, dpi)

    def draw_line(self, points: Iterable[Position], line_style: LineStyle) -> None:
        """Draw a line through the given points (relative to this area)."""
        self.layer.set_outline_thickness(line_style.thickness)
        self.layer.set_outline_color(line_style.color)
        self.layer.add_line_shape([self.position(Position.coerce(p)) for p in points])

    def draw_frame(self, line_style: LineStyle, size: Optional[Size] = None) -> None:
        """Draw a closed rectangle along the border of this area (or of ``size``)."""
        size = size or self._size
        w, h = size.width, size.height
        self.draw_line(
            [Position(0, 0), Position(w, 0), Position(w, h), Position(0, h), Position(0, 0)],
            line_style,
        )

    def print_str(
        self,
        font_cache: FontCache,
        position: Position,
        style: Style,
        text: str,
    ) -> bool:
        """Print a string at the given position.

        Returns:
            True if the area was large enough to print the string

        Raises:
            PageRenderError: UNSUPPORTED_ENCODING if the font cannot encode the text
        """
        section = self.text_section(font_cache, position, style.metrics())
        if section is None:
            return False
        with section:
            section.print_str(text, style)
        return True

    def text_section(
        self,
        font_cache: FontCache,
        position: Position,
        metrics: Metrics,
    ) -> Optional[TextSection]:
        """Create a text section at the given position if a line fits.

        The metrics only determine the line height of the section; every
        printed string brings its own style.
        """
        area = self.copy()
        area.add_offset(Position.coerce(position))
        if metrics.glyph_height > area.size.height:
            return None
        return TextSection(font_cache, area, metrics)


class TextSection:
    """A text section that is drawn on an area of a PDF layer."""

    def __init__(self, font_cache: FontCache, area: Area, metrics: Metrics):
        self.font_cache = font_cache
        self.area = area
        self.metrics = metrics
        self._is_first = True
        self._open = False

    def __enter__(self) -> TextSection:
        if self._open:
            raise RuntimeError("Text section is already open")
        self.area.layer.begin_text_section()
        self._open = True
        self.area.layer.set_line_height(self.metrics.line_height)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._open = False
        self.area.layer.end_text_section()

    def _check_open(self) -> None:
        if not self._open:
            raise RuntimeError("Text section used outside of its 'with' block")

    def _set_text_cursor(self, x_offset: Mm) -> None:
        cursor = self.area.position(Position(x_offset, self.metrics.ascent))
        self.area.layer.set_text_cursor(cursor)

    def add_newline(self) -> bool:
        """Start a new line; returns False if the area has no room for it."""
        self._check_open()
        if self.metrics.line_height > self.area.size.height:
            return False
        self.area.layer.add_line_break()
        self.area.add_offset(Position(0, self.metrics.line_height))
        return True

    def print_str(self, text: str, style: Style) -> None:
        """Print a string with the given style at the current cursor.

        Raises:
            PageRenderError: UNSUPPORTED_ENCODING if a built-in font cannot
                encode the text or an embedded font lacks a glyph for it
            LookupError: If the style's font is missing from the font cache
        """
        self._check_open()
        font = style.font

        # Shift the first string left by the bearing of its first glyph so
        # that the ink starts at the area's edge.
        if self._is_first:
            x_offset = -style.char_left_side_bearing(text[0]) if text else 0.0
            self._set_text_cursor(x_offset)
        self._is_first = False

        positions = [int(k * 1000.0) for k in font.kerning(text)]
        if font.is_builtin:
            codepoints = encode_win1252(text)
        else:
            codepoints = font.glyph_ids(text)

        pdf_font = self.font_cache.get_pdf_font(font)
        self.area.layer.set_fill_color(style.color)
        self.area.layer.set_font(pdf_font, style.font_size)
        self.area.layer.write_positioned_codepoints(positions, codepoints)
