"""
Rendering core.

This module provides:
- Renderer, Page and Layer: the document structure and its state cache
- Area and TextSection: drawing primitives in layout coordinates
- Backend: the interface to the document writer

The PyMuPDF backend lives in ``pagerender.render.pymupdf`` and is imported
on demand so the core can be used without PyMuPDF installed.
"""

from pagerender.render.area import Area, TextSection
from pagerender.render.backend import Backend, DocumentInfo
from pagerender.render.coords import LayerPosition, UserSpacePosition, to_backend_space
from pagerender.render.layers import Layer, LayerState, Page, Renderer

__all__ = [
    "Area",
    "TextSection",
    "Backend",
    "DocumentInfo",
    "LayerPosition",
    "UserSpacePosition",
    "to_backend_space",
    "Layer",
    "LayerState",
    "Page",
    "Renderer",
]
