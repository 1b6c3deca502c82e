"""
Layout elements.

This module provides:
- The Element interface and RenderResult
- Text: a single line of text
- Image: a rotated, scaled and aligned raster image
"""

from pagerender.elements.base import Context, Element, RenderResult, Text
from pagerender.elements.images import Image

__all__ = [
    "Context",
    "Element",
    "RenderResult",
    "Text",
    "Image",
]
