"""
Project-wide configuration and rendering defaults.

This module defines the constants used throughout pagerender for unit
conversion, image resolution, page sizes and layer naming, plus the
DocumentConfig dataclass consumed by the high-level Document.

Module Contents:
    APP_NAME: Application name for display purposes
    MM_PER_INCH / PT_PER_INCH: Physical unit conversion factors
    DEFAULT_DPI: Image resolution assumed when none is configured
    LAYER_NAME_TEMPLATE: Name pattern for automatically created layers
    PAGE_SIZES: Named paper sizes in millimeters
    DocumentConfig: Settings for a complete document render

Example:
    >>> from pagerender.config import page_size, DEFAULT_DPI
    >>> page_size("a4")
    (210.0, 297.0)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

# Application name for display and identification
APP_NAME = "pagerender"

# Physical units
MM_PER_INCH = 25.4
PT_PER_INCH = 72.0

# Images without an explicit resolution are assumed to be printed at 300 dpi
DEFAULT_DPI = 300.0

# Text defaults
DEFAULT_FONT_SIZE = 12
DEFAULT_LINE_SPACING = 1.0

# Initial outline thickness of a fresh layer, in points
DEFAULT_OUTLINE_THICKNESS_PT = 1.0

# Automatically created layers are named "Layer 2", "Layer 3", ...
LAYER_NAME_TEMPLATE = "Layer {}"

# Paper sizes in millimeters (width, height)
PAGE_SIZES = {
    "A3": (297.0, 420.0),
    "A4": (210.0, 297.0),
    "A5": (148.0, 210.0),
    "LETTER": (215.9, 279.4),
    "LEGAL": (215.9, 355.6),
}

DEFAULT_PAGE_SIZE = "A4"


def page_size(name: str) -> Tuple[float, float]:
    """Look up a named paper size.

    Args:
        name: Paper size name, case-insensitive (e.g. "A4", "letter")

    Returns:
        (width, height) in millimeters

    Raises:
        ValueError: If the name is unknown
    """
    key = (name or "").strip().upper()
    if key not in PAGE_SIZES:
        known = ", ".join(sorted(PAGE_SIZES))
        raise ValueError(f"Unknown page size {name!r} (known: {known})")
    return PAGE_SIZES[key]


@dataclass
class DocumentConfig:
    """Configuration for rendering a complete document."""
    title: str = "pagerender document"
    page_size: Tuple[float, float] = field(default_factory=lambda: PAGE_SIZES[DEFAULT_PAGE_SIZE])
    margins: float = 10.0  # mm on every side
    font_size: int = DEFAULT_FONT_SIZE
    line_spacing: float = DEFAULT_LINE_SPACING
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Serialize config for logging/debugging."""
        return {
            "title": self.title,
            "page_size": list(self.page_size),
            "margins": self.margins,
            "font_size": self.font_size,
            "line_spacing": self.line_spacing,
            "creation_date": self.creation_date.isoformat() if self.creation_date else None,
            "modification_date": (
                self.modification_date.isoformat() if self.modification_date else None
            ),
        }
