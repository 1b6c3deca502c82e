"""
Document writer interface.

The renderer never talks to a PDF library directly. It drives a Backend,
which owns the document being written and hands out opaque handles for
pages, layers and fonts. All positions passed to a backend are already in
PDF user space (origin bottom-left, y growing upwards) and in millimeters.

Implementations:
- PyMuPDFBackend (pagerender.render.pymupdf): writes PDF via PyMuPDF
- tests provide a recording backend that logs every call
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence, Tuple

from pagerender.models import Color, Mm, Position, Scale, Size

# Opaque handles; only the backend that created them can interpret them.
PageHandle = Any
LayerHandle = Any
FontHandle = Any


@dataclass
class DocumentInfo:
    """Document metadata written when the document is saved."""
    title: str = ""
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None


class Backend(ABC):
    """Abstract base class for document writers."""

    @abstractmethod
    def add_page(self, size: Size) -> PageHandle:
        """Append a page of the given size."""

    @abstractmethod
    def add_layer(self, page: PageHandle, name: str) -> LayerHandle:
        """Append a named layer to a page."""

    @abstractmethod
    def add_builtin_font(self, builtin) -> FontHandle:
        """Register one of the standard 14 fonts (a fonts.Builtin)."""

    @abstractmethod
    def add_embedded_font(self, data: bytes) -> FontHandle:
        """Register a font program to embed."""

    @abstractmethod
    def set_fill_color(self, layer: LayerHandle, color: Color) -> None:
        pass

    @abstractmethod
    def set_outline_color(self, layer: LayerHandle, color: Color) -> None:
        pass

    @abstractmethod
    def set_outline_thickness(self, layer: LayerHandle, thickness: Mm) -> None:
        pass

    @abstractmethod
    def draw_polyline(self, layer: LayerHandle, points: Sequence[Position]) -> None:
        """Stroke an open polyline with the current outline settings."""

    @abstractmethod
    def add_image(
        self,
        layer: LayerHandle,
        image,
        position: Position,
        rotation_ccw: float,
        scale: Scale,
        dpi: Optional[float],
    ) -> None:
        """Place a PIL image.

        Args:
            layer: Target layer
            image: Decoded PIL image without alpha channel
            position: Bottom-left corner of the unrotated image
            rotation_ccw: Counter-clockwise rotation about ``position``, degrees
            scale: Scale factors applied to the image
            dpi: Image resolution, None for the default of 300
        """

    @abstractmethod
    def begin_text(self, layer: LayerHandle) -> None:
        pass

    @abstractmethod
    def end_text(self, layer: LayerHandle) -> None:
        pass

    @abstractmethod
    def set_text_cursor(self, layer: LayerHandle, position: Position) -> None:
        pass

    @abstractmethod
    def set_line_height(self, layer: LayerHandle, line_height: Mm) -> None:
        pass

    @abstractmethod
    def add_line_break(self, layer: LayerHandle) -> None:
        pass

    @abstractmethod
    def set_font(self, layer: LayerHandle, font: FontHandle, font_size: float) -> None:
        pass

    @abstractmethod
    def write_positioned_codepoints(
        self, layer: LayerHandle, items: Sequence[Tuple[int, int]]
    ) -> None:
        """Write glyph codes at the text cursor.

        Each item is ``(adjustment, code)``. The adjustment is applied before
        the glyph, in thousandths of the font size; negative values move the
        glyph closer to its predecessor.
        """

    @abstractmethod
    def save(self, info: DocumentInfo) -> bytes:
        """Finish the document and return its bytes."""
