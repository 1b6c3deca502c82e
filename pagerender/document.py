"""
High-level document assembly.

A Document collects elements and renders them top to bottom onto pages of
a fixed size:

1. Create a Renderer with the configured page size, title and dates
2. Register the default font with a FontCache
3. For each element, render it into the remaining space of the current
   page (inside the margins); advance by the height it consumed
4. If an element reports that content remains, start a new page and render
   it again there
5. Serialize the document once, after every element has been drawn

Example:
    >>> style = Style(Font.from_builtin(Builtin.HELVETICA))
    >>> doc = Document(style, DocumentConfig(title="Report"))
    >>> doc.push(Text("Hello"))
    >>> doc.push(Image.from_path("figure.png").with_alignment(Alignment.CENTER))
    >>> doc.render_to_file("report.pdf")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

from pagerender.config import DocumentConfig
from pagerender.elements.base import Context, Element
from pagerender.errors import ErrorKind, PageRenderError
from pagerender.fonts import FontCache
from pagerender.models import LineStyle, Position
from pagerender.render.area import Area
from pagerender.render.backend import Backend
from pagerender.render.layers import Page, Renderer
from pagerender.style import Style

logger = logging.getLogger(__name__)


class Document:
    """A sequence of elements rendered onto pages.

    Args:
        style: Default style for elements that do not bring their own
        config: Page size, margins, title and dates
        backend_factory: Creates the backend for each render; defaults to
            the PyMuPDF backend
    """

    def __init__(
        self,
        style: Style,
        config: Optional[DocumentConfig] = None,
        backend_factory: Optional[Callable[[], Backend]] = None,
    ):
        self.style = style
        self.config = config or DocumentConfig()
        self.backend_factory = backend_factory
        self.elements: List[Element] = []
        self.frame: Optional[LineStyle] = None

    def __len__(self) -> int:
        return len(self.elements)

    def push(self, element: Element) -> None:
        """Append an element to the document."""
        self.elements.append(element)

    def set_frame(self, line_style: Optional[LineStyle]) -> None:
        """Draw a frame along the margins of every page (None disables it)."""
        self.frame = line_style

    def _new_renderer(self) -> Renderer:
        backend = self.backend_factory() if self.backend_factory else None
        renderer = Renderer(self.config.page_size, self.config.title, backend=backend)
        if self.config.creation_date:
            renderer.with_creation_date(self.config.creation_date)
        if self.config.modification_date:
            renderer.with_modification_date(self.config.modification_date)
        return renderer

    def _page_area(self, page: Page) -> Area:
        area = page.first_layer().area()
        area.add_margins(self.config.margins)
        if self.frame is not None:
            area.draw_frame(self.frame)
        return area

    def render_pages(self) -> Renderer:
        """Draw every element and return the renderer, ready to be written.

        Raises:
            PageRenderError: If drawing fails, or INVALID_DATA if an element
                does not fit on an empty page
        """
        logger.debug("Rendering document: %s", self.config.to_dict())
        renderer = self._new_renderer()
        font_cache = FontCache(renderer)
        font_cache.add(self.style.font)
        context = Context(font_cache)

        area = self._page_area(renderer.first_page())
        page_is_empty = True
        for element in self.elements:
            result = element.render(context, area.copy(), self.style)
            if result.has_more:
                if page_is_empty:
                    raise PageRenderError(
                        f"{element!r} does not fit on an empty page", ErrorKind.INVALID_DATA
                    )
                page = renderer.add_page(self.config.page_size)
                area = self._page_area(page)
                result = element.render(context, area.copy(), self.style)
                if result.has_more:
                    raise PageRenderError(
                        f"{element!r} does not fit on an empty page", ErrorKind.INVALID_DATA
                    )
            area.add_offset(Position(0, result.size.height))
            page_is_empty = False

        logger.info("Rendered %d elements on %d pages", len(self.elements), renderer.page_count)
        return renderer

    def render(self, sink: BinaryIO) -> None:
        """Render the document and write it to a binary sink."""
        self.render_pages().write(sink)

    def render_to_file(self, path: str | Path) -> Path:
        """Render the document to a file; the file is only created on success."""
        return self.render_pages().write_file(path)
