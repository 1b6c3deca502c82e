"""
Renderer, pages and layers.

A Renderer owns the backend document and an append-only list of pages
(always at least one). A Page owns an append-only list of LayerState
records (always at least one). Layers are addressed by index: a Layer is a
lightweight (page, index) view, so any number of Layer and Area objects can
refer to the same LayerState and share its cache.

The LayerState cache remembers the last fill color, outline color, outline
thickness and font written to the backend for its layer and drops requests
that would not change anything. This keeps the backend call sequence small
and deterministic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Iterable, List, Optional, Sequence, Tuple

from pagerender.config import DEFAULT_OUTLINE_THICKNESS_PT, LAYER_NAME_TEMPLATE
from pagerender.errors import ErrorKind, PageRenderError
from pagerender.models import BLACK, Color, Mm, Position, Rotation, Scale, Size, pt_to_mm
from pagerender.render.backend import (
    Backend,
    DocumentInfo,
    FontHandle,
    LayerHandle,
    PageHandle,
)
from pagerender.render.coords import LayerPosition, UserSpacePosition, to_backend_space

if TYPE_CHECKING:
    from pagerender.render.area import Area

logger = logging.getLogger(__name__)


@dataclass
class LayerState:
    """Backend handle of a layer plus the drawing state last written to it."""
    name: str
    handle: LayerHandle
    fill_color: Color = BLACK
    outline_color: Color = BLACK
    outline_thickness: Mm = field(default_factory=lambda: pt_to_mm(DEFAULT_OUTLINE_THICKNESS_PT))
    font: Optional[Tuple[FontHandle, float]] = None

    def update_fill_color(self, color: Color) -> bool:
        changed = self.fill_color != color
        self.fill_color = color
        return changed

    def update_outline_color(self, color: Color) -> bool:
        changed = self.outline_color != color
        self.outline_color = color
        return changed

    def update_outline_thickness(self, thickness: Mm) -> bool:
        changed = self.outline_thickness != thickness
        self.outline_thickness = thickness
        return changed

    def update_font(self, font: FontHandle, font_size: float) -> bool:
        changed = self.font is None or self.font[0] is not font or self.font[1] != font_size
        self.font = (font, font_size)
        return changed


class Layer:
    """A view on one layer of a page.

    Drawing methods take LayerPositions and convert them to user space
    before calling the backend.
    """

    def __init__(self, page: Page, index: int):
        self.page = page
        self.index = index

    def __eq__(self, other) -> bool:
        if not isinstance(other, Layer):
            return NotImplemented
        return self.page is other.page and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self.page), self.index))

    def __repr__(self) -> str:
        return f"Layer({self.name!r})"

    @property
    def state(self) -> LayerState:
        return self.page._layers[self.index]

    @property
    def name(self) -> str:
        return self.state.name

    @property
    def _backend(self) -> Backend:
        return self.page._backend

    def next(self) -> Layer:
        """Return the next layer of the page, creating it if this is the last one."""
        return self.page.next_layer(self.index)

    def area(self) -> Area:
        """Return a drawable area covering the whole layer."""
        from pagerender.render.area import Area

        return Area(self, Position(), self.page.size)

    def transform_position(self, position: LayerPosition) -> UserSpacePosition:
        return to_backend_space(position, self.page.size.height)

    def add_image(
        self,
        image,
        position: LayerPosition,
        scale: Scale,
        rotation: Rotation,
        dpi: Optional[float],
    ) -> None:
        user_pos = self.transform_position(position)
        # Rotation is clockwise, the backend expects counter-clockwise.
        self._backend.add_image(
            self.state.handle, image, user_pos.position, -rotation.degrees, scale, dpi
        )

    def add_line_shape(self, points: Iterable[LayerPosition]) -> None:
        line_points = [self.transform_position(p).position for p in points]
        self._backend.draw_polyline(self.state.handle, line_points)

    def set_fill_color(self, color: Optional[Color]) -> None:
        color = color or BLACK
        if self.state.update_fill_color(color):
            self._backend.set_fill_color(self.state.handle, color)

    def set_outline_thickness(self, thickness: Mm) -> None:
        if self.state.update_outline_thickness(thickness):
            self._backend.set_outline_thickness(self.state.handle, thickness)

    def set_outline_color(self, color: Color) -> None:
        if self.state.update_outline_color(color):
            self._backend.set_outline_color(self.state.handle, color)

    def set_font(self, font: FontHandle, font_size: float) -> None:
        if self.state.update_font(font, font_size):
            self._backend.set_font(self.state.handle, font, font_size)

    def set_text_cursor(self, cursor: LayerPosition) -> None:
        self._backend.set_text_cursor(self.state.handle, self.transform_position(cursor).position)

    def begin_text_section(self) -> None:
        self._backend.begin_text(self.state.handle)

    def end_text_section(self) -> None:
        self._backend.end_text(self.state.handle)

    def add_line_break(self) -> None:
        self._backend.add_line_break(self.state.handle)

    def set_line_height(self, line_height: Mm) -> None:
        self._backend.set_line_height(self.state.handle, line_height)

    def write_positioned_codepoints(
        self, positions: Sequence[int], codepoints: Sequence[int]
    ) -> None:
        self._backend.write_positioned_codepoints(
            self.state.handle, list(zip(positions, codepoints))
        )


class Page:
    """A page of the document with one or more layers of the same size."""

    def __init__(self, backend: Backend, handle: PageHandle, size: Size):
        self._backend = backend
        self.handle = handle
        self.size = size
        # always holds at least one layer
        self._layers: List[LayerState] = []
        self._push_layer(LAYER_NAME_TEMPLATE.format(1))

    def _push_layer(self, name: str) -> Layer:
        handle = self._backend.add_layer(self.handle, name)
        self._layers.append(LayerState(name=name, handle=handle))
        logger.debug("Added layer %r", name)
        return Layer(self, len(self._layers) - 1)

    def add_layer(self, name: str) -> Layer:
        """Add a new layer with the given name to the page."""
        return self._push_layer(name)

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    def get_layer(self, idx: int) -> Optional[Layer]:
        if 0 <= idx < len(self._layers):
            return Layer(self, idx)
        return None

    def first_layer(self) -> Layer:
        return Layer(self, 0)

    def last_layer(self) -> Layer:
        return Layer(self, len(self._layers) - 1)

    def next_layer(self, index: int) -> Layer:
        """Return the layer after ``index``, appending "Layer {n}" if there is none."""
        if index + 1 < len(self._layers):
            return Layer(self, index + 1)
        return self._push_layer(LAYER_NAME_TEMPLATE.format(len(self._layers) + 1))


class Renderer:
    """Renders a PDF document with one or more pages.

    Example:
        >>> renderer = Renderer(Size(210, 297), "Report")
        >>> area = renderer.first_page().first_layer().area()
        >>> area.draw_line([Position(10, 10), Position(100, 10)], LineStyle())
        >>> renderer.write_file("report.pdf")
    """

    def __init__(
        self,
        size: Size | Tuple[float, float],
        title: str = "",
        backend: Optional[Backend] = None,
    ):
        if backend is None:
            from pagerender.render.pymupdf import PyMuPDFBackend

            backend = PyMuPDFBackend()
        self._backend = backend
        self._info = DocumentInfo(title=title)
        self._written = False
        # always holds at least one page
        self._pages: List[Page] = []
        self.add_page(size)

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def title(self) -> str:
        return self._info.title

    def with_creation_date(self, date: datetime) -> Renderer:
        self._info.creation_date = date
        return self

    def with_modification_date(self, date: datetime) -> Renderer:
        self._info.modification_date = date
        return self

    def add_page(self, size: Size | Tuple[float, float]) -> Page:
        """Add a new page with the given size to the document."""
        size = Size.coerce(size)
        handle = self._backend.add_page(size)
        page = Page(self._backend, handle, size)
        self._pages.append(page)
        logger.debug("Added page %d (%.1f x %.1f mm)", len(self._pages), size.width, size.height)
        return page

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def pages(self) -> Tuple[Page, ...]:
        return tuple(self._pages)

    def get_page(self, idx: int) -> Optional[Page]:
        if 0 <= idx < len(self._pages):
            return self._pages[idx]
        return None

    def first_page(self) -> Page:
        return self._pages[0]

    def last_page(self) -> Page:
        return self._pages[-1]

    def add_builtin_font(self, builtin) -> FontHandle:
        """Register a built-in font with the document and return its handle."""
        try:
            return self._backend.add_builtin_font(builtin)
        except PageRenderError:
            raise
        except Exception as e:
            raise PageRenderError("Failed to load PDF font", ErrorKind.BACKEND_FAILURE) from e

    def add_embedded_font(self, data: bytes) -> FontHandle:
        """Register font data to embed in the document and return its handle."""
        try:
            return self._backend.add_embedded_font(data)
        except PageRenderError:
            raise
        except Exception as e:
            raise PageRenderError("Failed to load PDF font", ErrorKind.BACKEND_FAILURE) from e

    def _serialize(self) -> bytes:
        if self._written:
            raise RuntimeError("The document has already been written")
        try:
            data = self._backend.save(self._info)
        except PageRenderError:
            raise
        except Exception as e:
            raise PageRenderError("Failed to save document", ErrorKind.BACKEND_FAILURE) from e
        self._written = True
        return data

    def write(self, sink: BinaryIO) -> None:
        """Serialize the document and write it to a binary sink.

        The sink is written to exactly once, after the backend has produced
        the complete document; on failure it is left untouched.
        """
        data = self._serialize()
        sink.write(data)
        logger.info("Wrote %d pages (%d bytes)", len(self._pages), len(data))

    def write_file(self, path: str | Path) -> Path:
        """Serialize the document to a file; the file is only created on success."""
        path = Path(path)
        data = self._serialize()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise PageRenderError(f"Could not write document to {path}", ErrorKind.IO) from e
        logger.info("Wrote %d pages to %s (%d bytes)", len(self._pages), path, len(data))
        return path
