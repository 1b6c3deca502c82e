"""
pagerender: paginated PDF rendering core

Turns layout coordinates into PDF drawing calls: pages, layers and areas
with a state cache that drops redundant backend calls, text sections with
per-glyph kerning, and placement of images rotated by arbitrary angles.

Core pieces:
1. Renderer / Page / Layer / Area: document structure and drawing primitives
2. Geometry engine: bounding boxes and pivot offsets of rotated rectangles
3. Elements and Document: stacking text and images onto pages

License: MIT
"""

__version__ = "0.1.0"

from pagerender.document import Document
from pagerender.elements import Image, Text
from pagerender.errors import ErrorKind, PageRenderError
from pagerender.fonts import Builtin, Font, FontCache
from pagerender.geometry import bounding_box
from pagerender.models import Alignment, Color, LineStyle, Margins, Position, Rotation, Scale, Size
from pagerender.render import Area, Renderer
from pagerender.style import Style

__all__ = [
    "Document",
    "Image",
    "Text",
    "ErrorKind",
    "PageRenderError",
    "Builtin",
    "Font",
    "FontCache",
    "bounding_box",
    "Alignment",
    "Color",
    "LineStyle",
    "Margins",
    "Position",
    "Rotation",
    "Scale",
    "Size",
    "Area",
    "Renderer",
    "Style",
]
