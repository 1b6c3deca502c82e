"""Text style: font, size, color and line spacing."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from pagerender.config import DEFAULT_FONT_SIZE, DEFAULT_LINE_SPACING
from pagerender.fonts import Font, Metrics
from pagerender.models import Color, Mm


@dataclass(frozen=True)
class Style:
    """Style applied to printed text.

    ``color`` None means the PDF default (black).
    """
    font: Font
    font_size: int = DEFAULT_FONT_SIZE
    color: Optional[Color] = None
    line_spacing: float = DEFAULT_LINE_SPACING

    def with_font_size(self, font_size: int) -> Style:
        return replace(self, font_size=font_size)

    def with_color(self, color: Color) -> Style:
        return replace(self, color=color)

    def with_line_spacing(self, line_spacing: float) -> Style:
        return replace(self, line_spacing=line_spacing)

    def with_font(self, font: Font) -> Style:
        return replace(self, font=font)

    def metrics(self) -> Metrics:
        """Font metrics at this size, with the line spacing applied."""
        m = self.font.metrics(self.font_size)
        return replace(m, line_height=m.line_height * self.line_spacing)

    def char_left_side_bearing(self, char: str) -> Mm:
        return self.font.char_left_side_bearing(char, self.font_size)

    def str_width(self, text: str) -> Mm:
        return self.font.str_width(text, self.font_size)
