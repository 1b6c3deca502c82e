"""
PDF backend built on PyMuPDF.

This module implements the Backend interface on top of ``fitz``:

- Pages are ``Document.new_page`` pages, sized in points
- Each layer is an optional content group (``Document.add_ocg``); every
  drawing call passes ``oc=<xref>`` so PDF viewers can toggle layers
- Lines use ``Page.draw_polyline``
- Images are placed on a scratch one-page document and shown with
  ``Page.show_pdf_page``, which supports arbitrary rotation angles
- Text is collected in ``fitz.TextWriter`` objects, one per fill color run,
  and written to the page when the text block ends

PyMuPDF uses a top-left origin with y growing downwards, while the Backend
interface speaks PDF user space (bottom-left origin). Conversion happens in
``_to_fitz``; everything else stays in user space points.
"""

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from pagerender.config import APP_NAME, DEFAULT_DPI, DEFAULT_OUTLINE_THICKNESS_PT, PT_PER_INCH
from pagerender.encoding import decode_win1252
from pagerender.errors import ErrorKind, PageRenderError
from pagerender.models import BLACK, Color, Mm, Position, Scale, Size, mm_to_pt
from pagerender.render.backend import Backend, DocumentInfo

logger = logging.getLogger(__name__)


def _import_fitz():
    try:
        import fitz
    except ImportError:
        raise ImportError("PyMuPDF is required. Install with: pip install PyMuPDF")
    return fitz


def _pdf_date(date: datetime) -> str:
    """Format a datetime as a PDF date string (D:YYYYMMDDHHmmSS+HH'mm')."""
    text = date.strftime("D:%Y%m%d%H%M%S")
    offset = date.utcoffset()
    if offset is None:
        return text
    minutes = int(offset.total_seconds() // 60)
    sign = "+" if minutes >= 0 else "-"
    minutes = abs(minutes)
    return f"{text}{sign}{minutes // 60:02d}'{minutes % 60:02d}'"


def _rgb(color: Color) -> Tuple[float, float, float]:
    """Color as an RGB float triple (TextWriter only accepts RGB)."""
    values = color.as_unit_tuple()
    if color.space == "grey":
        return (values[0],) * 3
    if color.space == "cmyk":
        c, m, y, k = values
        return ((1 - c) * (1 - k), (1 - m) * (1 - k), (1 - y) * (1 - k))
    return values


@dataclass(eq=False)
class FontRef:
    """A font registered with the document."""
    font: object  # fitz.Font
    builtin: bool
    _chars_by_glyph: Optional[Dict[int, str]] = None

    def char(self, code: int) -> str:
        """Map a written code back to the character it stands for.

        Built-in fonts receive Windows-1252 codes, embedded fonts glyph IDs.
        """
        if self.builtin:
            return decode_win1252(code)
        if self._chars_by_glyph is None:
            mapping = {}
            for cp in self.font.valid_codepoints():
                gid = self.font.has_glyph(cp)
                if gid and gid not in mapping:
                    mapping[gid] = chr(cp)
            self._chars_by_glyph = mapping
        try:
            return self._chars_by_glyph[code]
        except KeyError:
            raise PageRenderError(
                f"Glyph {code} is not mapped to a character in font {self.font.name}",
                ErrorKind.BACKEND_FAILURE,
            ) from None


@dataclass
class _TextBlock:
    """Cursor state of an open text block, in user space points."""
    line_x: float = 0.0
    line_y: float = 0.0
    x: float = 0.0
    y: float = 0.0
    leading: float = 0.0
    writers: List[Tuple[object, Tuple[float, ...]]] = field(default_factory=list)


@dataclass(eq=False)
class Surface:
    """A layer: page number, optional content group and drawing state."""
    page_number: int
    name: str
    ocg: int
    fill: Color = BLACK
    stroke: Color = BLACK
    width: float = DEFAULT_OUTLINE_THICKNESS_PT
    font: Optional[FontRef] = None
    font_size: float = 0.0
    text: Optional[_TextBlock] = None


class PyMuPDFBackend(Backend):
    """Backend writing a PDF document with PyMuPDF."""

    def __init__(self):
        self._fitz = _import_fitz()
        self._doc = self._fitz.open()
        self._heights: Dict[int, float] = {}

    @property
    def document(self):
        """The underlying ``fitz.Document``."""
        return self._doc

    def _page(self, surface: Surface):
        return self._doc[surface.page_number]

    def _to_fitz(self, surface: Surface, x_pt: float, y_pt: float):
        return self._fitz.Point(x_pt, self._heights[surface.page_number] - y_pt)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def add_page(self, size: Size) -> int:
        page = self._doc.new_page(width=mm_to_pt(size.width), height=mm_to_pt(size.height))
        self._heights[page.number] = page.rect.height
        return page.number

    def add_layer(self, page: int, name: str) -> Surface:
        xref = self._doc.add_ocg(name, on=True)
        return Surface(page_number=page, name=name, ocg=xref)

    def add_builtin_font(self, builtin) -> FontRef:
        return FontRef(self._fitz.Font(builtin.fitz_name), builtin=True)

    def add_embedded_font(self, data: bytes) -> FontRef:
        try:
            font = self._fitz.Font(fontbuffer=data)
        except Exception as e:
            raise PageRenderError("Failed to load PDF font", ErrorKind.BACKEND_FAILURE) from e
        return FontRef(font, builtin=False)

    # ------------------------------------------------------------------
    # Graphics state
    # ------------------------------------------------------------------

    def set_fill_color(self, layer: Surface, color: Color) -> None:
        layer.fill = color

    def set_outline_color(self, layer: Surface, color: Color) -> None:
        layer.stroke = color

    def set_outline_thickness(self, layer: Surface, thickness: Mm) -> None:
        layer.width = mm_to_pt(thickness)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw_polyline(self, layer: Surface, points: Sequence[Position]) -> None:
        if not points:
            return
        fitz_points = [self._to_fitz(layer, mm_to_pt(p.x), mm_to_pt(p.y)) for p in points]
        self._page(layer).draw_polyline(
            fitz_points,
            color=layer.stroke.as_unit_tuple(),
            width=layer.width,
            oc=layer.ocg,
        )

    def add_image(
        self,
        layer: Surface,
        image,
        position: Position,
        rotation_ccw: float,
        scale: Scale,
        dpi: Optional[float],
    ) -> None:
        dpi = dpi or DEFAULT_DPI
        width = image.width * scale.x * PT_PER_INCH / dpi
        height = image.height * scale.y * PT_PER_INCH / dpi

        # Bounding box of the image rotated about its bottom-left corner
        theta = math.radians(rotation_ccw)
        c, s = math.cos(theta), math.sin(theta)
        corners = [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]
        xs = [x * c - y * s for x, y in corners]
        ys = [x * s + y * c for x, y in corners]
        px, py = mm_to_pt(position.x), mm_to_pt(position.y)
        top_left = self._to_fitz(layer, px + min(xs), py + max(ys))
        bottom_right = self._to_fitz(layer, px + max(xs), py + min(ys))
        rect = self._fitz.Rect(top_left, bottom_right)

        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")

        src = self._fitz.open()
        try:
            src_page = src.new_page(width=width, height=height)
            src_page.insert_image(src_page.rect, stream=buffer.getvalue())
            self._page(layer).show_pdf_page(rect, src, 0, rotate=rotation_ccw, oc=layer.ocg)
        finally:
            src.close()
        logger.debug(
            "Placed %dx%d image on %s at %s (%.1f deg ccw)",
            image.width, image.height, layer.name, rect, rotation_ccw,
        )

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _text_block(self, layer: Surface) -> _TextBlock:
        if layer.text is None:
            raise RuntimeError(f"No open text block on layer {layer.name}")
        return layer.text

    def begin_text(self, layer: Surface) -> None:
        if layer.text is not None:
            raise RuntimeError(f"Text block already open on layer {layer.name}")
        layer.text = _TextBlock()

    def end_text(self, layer: Surface) -> None:
        block = self._text_block(layer)
        layer.text = None
        page = self._page(layer)
        for writer, color in block.writers:
            writer.write_text(page, color=color, oc=layer.ocg)

    def set_text_cursor(self, layer: Surface, position: Position) -> None:
        block = self._text_block(layer)
        block.line_x = block.x = mm_to_pt(position.x)
        block.line_y = block.y = mm_to_pt(position.y)

    def set_line_height(self, layer: Surface, line_height: Mm) -> None:
        self._text_block(layer).leading = mm_to_pt(line_height)

    def add_line_break(self, layer: Surface) -> None:
        block = self._text_block(layer)
        block.line_y -= block.leading
        block.x, block.y = block.line_x, block.line_y

    def set_font(self, layer: Surface, font: FontRef, font_size: float) -> None:
        layer.font = font
        layer.font_size = float(font_size)

    def _writer(self, layer: Surface, block: _TextBlock):
        color = _rgb(layer.fill)
        if not block.writers or block.writers[-1][1] != color:
            writer = self._fitz.TextWriter(self._page(layer).rect)
            block.writers.append((writer, color))
        return block.writers[-1][0]

    def write_positioned_codepoints(
        self, layer: Surface, items: Sequence[Tuple[int, int]]
    ) -> None:
        block = self._text_block(layer)
        if layer.font is None:
            raise RuntimeError(f"No font set on layer {layer.name}")
        if not items:
            return
        font, size = layer.font, layer.font_size
        writer = self._writer(layer, block)
        for adjustment, code in items:
            block.x += adjustment / 1000.0 * size
            _, last_point = writer.append(
                self._to_fitz(layer, block.x, block.y),
                font.char(code),
                font=font.font,
                fontsize=size,
            )
            block.x = last_point.x

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def save(self, info: DocumentInfo) -> bytes:
        now = datetime.now()
        metadata = {
            "title": info.title,
            "creator": APP_NAME,
            "producer": APP_NAME,
            "creationDate": _pdf_date(info.creation_date or now),
            "modDate": _pdf_date(info.modification_date or info.creation_date or now),
        }
        try:
            self._doc.set_metadata(metadata)
            data = self._doc.tobytes()
        except Exception as e:
            raise PageRenderError("Failed to save document", ErrorKind.BACKEND_FAILURE) from e
        logger.debug("Serialized %d pages, %d bytes", self._doc.page_count, len(data))
        return data
