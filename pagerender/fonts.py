"""
Fonts and font metrics.

A Font pairs a source (one of the 14 built-in PDF fonts, or font program
bytes to embed) with a GlyphMetrics provider that answers the layout
questions the renderer asks: ascent, descent, advances, left side bearing,
pair kerning and glyph IDs.

The default provider wraps ``fitz.Font`` from PyMuPDF. PyMuPDF exposes no
pair-kerning tables, so its kerning is always zero; providers backed by
other sources can override ``GlyphMetrics.kerning``.

A FontCache registers fonts with a Renderer and remembers the backend
handle of each font, which text sections need to switch fonts.

Example:
    >>> font = Font.from_builtin(Builtin.HELVETICA)
    >>> font.metrics(12).line_height  # doctest: +SKIP
    5.2...
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from pagerender.errors import ErrorKind, PageRenderError
from pagerender.models import Mm, pt_to_mm

if TYPE_CHECKING:
    from pagerender.render.layers import Renderer

logger = logging.getLogger(__name__)


def _import_fitz():
    try:
        import fitz
    except ImportError:
        raise ImportError("PyMuPDF is required. Install with: pip install PyMuPDF")
    return fitz


class Builtin(Enum):
    """The standard 14 PDF fonts, by PostScript name."""
    TIMES_ROMAN = "Times-Roman"
    TIMES_BOLD = "Times-Bold"
    TIMES_ITALIC = "Times-Italic"
    TIMES_BOLD_ITALIC = "Times-BoldItalic"
    HELVETICA = "Helvetica"
    HELVETICA_BOLD = "Helvetica-Bold"
    HELVETICA_OBLIQUE = "Helvetica-Oblique"
    HELVETICA_BOLD_OBLIQUE = "Helvetica-BoldOblique"
    COURIER = "Courier"
    COURIER_BOLD = "Courier-Bold"
    COURIER_OBLIQUE = "Courier-Oblique"
    COURIER_BOLD_OBLIQUE = "Courier-BoldOblique"
    SYMBOL = "Symbol"
    ZAPF_DINGBATS = "ZapfDingbats"

    @property
    def fitz_name(self) -> str:
        """PyMuPDF's short name for this font (e.g. "helv")."""
        return _FITZ_NAMES[self]


_FITZ_NAMES = {
    Builtin.TIMES_ROMAN: "tiro",
    Builtin.TIMES_BOLD: "tibo",
    Builtin.TIMES_ITALIC: "tiit",
    Builtin.TIMES_BOLD_ITALIC: "tibi",
    Builtin.HELVETICA: "helv",
    Builtin.HELVETICA_BOLD: "hebo",
    Builtin.HELVETICA_OBLIQUE: "heit",
    Builtin.HELVETICA_BOLD_OBLIQUE: "hebi",
    Builtin.COURIER: "cour",
    Builtin.COURIER_BOLD: "cobo",
    Builtin.COURIER_OBLIQUE: "coit",
    Builtin.COURIER_BOLD_OBLIQUE: "cobi",
    Builtin.SYMBOL: "symb",
    Builtin.ZAPF_DINGBATS: "zadb",
}


class GlyphMetrics(ABC):
    """Per-font metrics, all in em units (multiples of the font size)."""

    @property
    @abstractmethod
    def ascender(self) -> float:
        pass

    @property
    @abstractmethod
    def descender(self) -> float:
        """Distance below the baseline; negative for most fonts."""
        pass

    @abstractmethod
    def advance(self, char: str) -> float:
        pass

    @abstractmethod
    def left_side_bearing(self, char: str) -> float:
        pass

    @abstractmethod
    def glyph_id(self, char: str) -> int:
        pass

    def kerning(self, left: str, right: str) -> float:
        """Adjustment between two adjacent glyphs; negative moves them closer."""
        return 0.0


class FitzGlyphMetrics(GlyphMetrics):
    """GlyphMetrics backed by a ``fitz.Font``."""

    def __init__(self, font):
        self.font = font

    @property
    def ascender(self) -> float:
        return float(self.font.ascender)

    @property
    def descender(self) -> float:
        return float(self.font.descender)

    def advance(self, char: str) -> float:
        return float(self.font.glyph_advance(ord(char)))

    def left_side_bearing(self, char: str) -> float:
        return float(self.font.glyph_bbox(ord(char)).x0)

    def glyph_id(self, char: str) -> int:
        return int(self.font.has_glyph(ord(char)))


@dataclass(frozen=True)
class Metrics:
    """Vertical metrics of a font at a given size, in millimeters.

    Attributes:
        line_height: Distance between two baselines
        glyph_height: Height of the tallest glyph (ascent - descent)
        ascent: Distance from the top of the line to the baseline
        descent: Distance from the baseline to the bottom (negative)
    """
    line_height: Mm
    glyph_height: Mm
    ascent: Mm
    descent: Mm


class Font:
    """A font that can be used for printing text.

    Built-in fonts are restricted to the Windows-1252 repertoire and are
    written as single-byte codes; embedded fonts are written as glyph IDs.
    """

    def __init__(
        self,
        name: str,
        metrics: GlyphMetrics,
        builtin: Optional[Builtin] = None,
        data: Optional[bytes] = None,
    ):
        if builtin is None and data is None:
            raise ValueError("A font needs either a built-in font or font data")
        self.name = name
        self.glyph_metrics = metrics
        self.builtin = builtin
        self.data = data

    def __repr__(self) -> str:
        kind = "builtin" if self.is_builtin else "embedded"
        return f"Font({self.name!r}, {kind})"

    @classmethod
    def from_builtin(cls, builtin: Builtin) -> Font:
        """Create one of the 14 standard PDF fonts."""
        fitz = _import_fitz()
        return cls(builtin.value, FitzGlyphMetrics(fitz.Font(builtin.fitz_name)), builtin=builtin)

    @classmethod
    def from_bytes(cls, data: bytes, name: Optional[str] = None) -> Font:
        """Create an embedded font from TrueType/OpenType/CFF data.

        Raises:
            PageRenderError: INVALID_DATA if PyMuPDF cannot parse the data
        """
        fitz = _import_fitz()
        try:
            font = fitz.Font(fontbuffer=data)
        except Exception as e:
            raise PageRenderError(
                f"Could not load font {name or '<bytes>'}", ErrorKind.INVALID_DATA
            ) from e
        return cls(name or font.name, FitzGlyphMetrics(font), data=bytes(data))

    @classmethod
    def from_file(cls, path: str | Path) -> Font:
        """Create an embedded font by reading a font file.

        Raises:
            PageRenderError: IO if the file cannot be read
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise PageRenderError(f"Could not read font from path {path}", ErrorKind.IO) from e
        logger.debug("Loaded %d bytes of font data from %s", len(data), path)
        return cls.from_bytes(data, name=path.stem)

    @property
    def is_builtin(self) -> bool:
        return self.builtin is not None

    def metrics(self, font_size: float) -> Metrics:
        m = self.glyph_metrics
        ascent = pt_to_mm(m.ascender * font_size)
        descent = pt_to_mm(m.descender * font_size)
        glyph_height = ascent - descent
        return Metrics(
            line_height=glyph_height,
            glyph_height=glyph_height,
            ascent=ascent,
            descent=descent,
        )

    def kerning(self, text: str) -> List[float]:
        """Kerning before each character of text, in em.

        The first entry is always 0; entry i is the adjustment between
        character i-1 and character i.
        """
        if not text:
            return []
        return [0.0] + [self.glyph_metrics.kerning(a, b) for a, b in zip(text, text[1:])]

    def glyph_ids(self, text: str) -> List[int]:
        """Glyph IDs of an embedded font for every character of text.

        Raises:
            PageRenderError: UNSUPPORTED_ENCODING if the font has no glyph
                for a character (glyph ID 0); the message names the string
        """
        ids = [self.glyph_metrics.glyph_id(c) for c in text]
        missing = [c for c, gid in zip(text, ids) if gid == 0]
        if missing:
            raise PageRenderError(
                f"Font {self.name} has no glyph for {''.join(missing)!r} in: {text}",
                ErrorKind.UNSUPPORTED_ENCODING,
            )
        return ids

    def char_left_side_bearing(self, char: str, font_size: float) -> Mm:
        return pt_to_mm(self.glyph_metrics.left_side_bearing(char) * font_size)

    def str_width(self, text: str, font_size: float) -> Mm:
        """Width of text including kerning, in millimeters."""
        em = sum(self.glyph_metrics.advance(c) for c in text) + sum(self.kerning(text))
        return pt_to_mm(em * font_size)


class FontCache:
    """Registers fonts with a renderer and maps them to backend handles."""

    def __init__(self, renderer: Renderer):
        self._renderer = renderer
        self._handles: Dict[Font, object] = {}

    def __contains__(self, font: Font) -> bool:
        return font in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def add(self, font: Font) -> object:
        """Register a font with the document; registering twice is a no-op."""
        if font in self._handles:
            return self._handles[font]
        if font.is_builtin:
            handle = self._renderer.add_builtin_font(font.builtin)
        else:
            handle = self._renderer.add_embedded_font(font.data)
        self._handles[font] = handle
        return handle

    def get_pdf_font(self, font: Font) -> object:
        """Return the backend handle of a registered font.

        Raises:
            LookupError: If the font was never added to this cache
        """
        try:
            return self._handles[font]
        except KeyError:
            raise LookupError(f"Font {font.name} is not registered in the font cache") from None
