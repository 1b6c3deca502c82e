"""
Base element interface.

Elements are the leaves of a layout: they know how to draw themselves into
an Area and report how much of it they used. The Document stacks elements
vertically and starts a new page whenever an element reports that content
remains.

Design Philosophy:
- Elements draw relative to the top-left corner of the area they receive
- Rendering returns a RenderResult instead of mutating the area
- Shared resources (the font cache) travel in a Context
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from pagerender.fonts import FontCache
from pagerender.models import Size
from pagerender.render.area import Area
from pagerender.style import Style


@dataclass
class Context:
    """State shared by all elements of one render pass.

    Attributes:
        font_cache: Fonts registered with the renderer being drawn on
    """
    font_cache: FontCache


@dataclass
class RenderResult:
    """Result of rendering an element.

    Attributes:
        size: Space consumed in the area, measured from its top-left corner
        has_more: True if the element did not fit and must continue in a
            new area
    """
    size: Size = field(default_factory=Size)
    has_more: bool = False


class Element(ABC):
    """Abstract base class for anything that can be drawn into an Area."""

    @abstractmethod
    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        """Draw the element.

        Args:
            context: Shared render state
            area: Area to draw into; its origin is the element's top-left
            style: Inherited text style

        Returns:
            RenderResult describing the consumed space

        Raises:
            PageRenderError: On encoding, data or backend failures
        """
        pass


class Text(Element):
    """A single line of text.

    The line is never wrapped. If it does not fit vertically, nothing is
    printed and the result asks for a new area.
    """

    def __init__(self, text: str, style: Optional[Style] = None):
        self.text = text
        self.style = style

    def __repr__(self) -> str:
        return f"Text({self.text!r})"

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        style = self.style or style
        context.font_cache.add(style.font)
        if not area.print_str(context.font_cache, (0, 0), style, self.text):
            return RenderResult(has_more=True)
        return RenderResult(Size(style.str_width(self.text), style.metrics().line_height))
