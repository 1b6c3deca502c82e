"""
Image element.

Images are decoded with Pillow and placed through Area.add_image. The
element owns all placement geometry:

1. Physical size from pixels, scale and resolution:
   ``25.4 * scale * pixels / dpi`` millimeters per axis (300 dpi default)
2. Bounding box and pivot offset of the rotated image (pagerender.geometry)
3. Anchor: the configured absolute position, or an alignment offset within
   the area (left, center, right)
4. The bottom-left corner handed to the backend is anchor + pivot offset

Images with an alpha channel cannot be written and are rejected when the
element is created.

Example:
    >>> image = Image.from_path("figure.jpg").with_alignment(Alignment.CENTER)
    >>> image = image.with_clockwise_rotation(30).with_scale(0.5)
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional

from pagerender.config import DEFAULT_DPI, MM_PER_INCH
from pagerender.elements.base import Context, Element, RenderResult
from pagerender.errors import ErrorKind, PageRenderError
from pagerender.geometry import bounding_box
from pagerender.models import Alignment, Mm, Position, Rotation, Scale, Size
from pagerender.render.area import Area
from pagerender.style import Style

logger = logging.getLogger(__name__)


def _has_alpha(image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


class Image(Element):
    """An image to embed in the document.

    Construct with one of the ``from_*`` classmethods; configure with the
    builder-style ``with_*`` methods or the mutating ``set_*`` methods.
    """

    def __init__(self, image):
        if _has_alpha(image):
            raise PageRenderError(
                f"Images with an alpha channel are not supported (mode {image.mode})",
                ErrorKind.INVALID_DATA,
            )
        self.image = image
        self.position: Optional[Position] = None
        self.scale = Scale()
        self.alignment = Alignment.LEFT
        self.rotation = Rotation()
        self.dpi: Optional[float] = None

    def __repr__(self) -> str:
        return f"Image({self.image.width}x{self.image.height}, mode={self.image.mode})"

    @classmethod
    def from_pil(cls, image) -> Image:
        """Wrap a decoded PIL image."""
        return cls(image)

    @classmethod
    def from_bytes(cls, data: bytes) -> Image:
        """Decode image data; the format is detected from the content.

        Raises:
            PageRenderError: INVALID_DATA if the data cannot be decoded or
                has an alpha channel
        """
        from PIL import Image as PILImage
        from PIL import UnidentifiedImageError

        try:
            image = PILImage.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, ValueError) as e:
            raise PageRenderError("Could not decode image data", ErrorKind.INVALID_DATA) from e
        return cls(image)

    @classmethod
    def from_reader(cls, reader: BinaryIO) -> Image:
        """Read and decode an image from a binary file object."""
        try:
            data = reader.read()
        except OSError as e:
            raise PageRenderError("Could not read image", ErrorKind.IO) from e
        return cls.from_bytes(data)

    @classmethod
    def from_path(cls, path: str | Path) -> Image:
        """Read and decode an image file.

        Raises:
            PageRenderError: IO if the file cannot be read, INVALID_DATA if
                it cannot be decoded or has an alpha channel
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise PageRenderError(f"Could not read image from path {path}", ErrorKind.IO) from e
        try:
            image = cls.from_bytes(data)
        except PageRenderError as e:
            raise PageRenderError(f"{e.message} ({path})", e.kind) from e.__cause__
        logger.debug("Loaded image %s (%dx%d)", path, image.image.width, image.image.height)
        return image

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_position(self, position) -> None:
        """Draw at an absolute position, relative to the area's top-left corner.

        The position is the top-left corner of the rotated image's bounding
        box. Overrides the alignment.
        """
        self.position = Position.coerce(position)

    def with_position(self, position) -> Image:
        self.set_position(position)
        return self

    def set_scale(self, scale) -> None:
        self.scale = Scale.coerce(scale)

    def with_scale(self, scale) -> Image:
        self.set_scale(scale)
        return self

    def set_alignment(self, alignment: Alignment) -> None:
        self.alignment = alignment

    def with_alignment(self, alignment: Alignment) -> Image:
        self.set_alignment(alignment)
        return self

    def set_clockwise_rotation(self, rotation) -> None:
        self.rotation = Rotation.coerce(rotation)

    def with_clockwise_rotation(self, rotation) -> Image:
        self.set_clockwise_rotation(rotation)
        return self

    def set_dpi(self, dpi: float) -> None:
        self.dpi = dpi

    def with_dpi(self, dpi: float) -> Image:
        self.set_dpi(dpi)
        return self

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def size(self) -> Size:
        """Printed size of the unrotated image in millimeters."""
        dpi = self.dpi or DEFAULT_DPI
        return Size(
            MM_PER_INCH * (self.scale.x * self.image.width) / dpi,
            MM_PER_INCH * (self.scale.y * self.image.height) / dpi,
        )

    def _get_offset(self, width: Mm, max_width: Mm) -> Position:
        if self.alignment == Alignment.CENTER:
            return Position((max_width - width) / 2.0, 0.0)
        if self.alignment == Alignment.RIGHT:
            return Position(max_width - width, 0.0)
        return Position(0.0, 0.0)

    def render(self, context: Context, area: Area, style: Style) -> RenderResult:
        result = RenderResult()
        bb_offset, bb_size = bounding_box(self.size(), self.rotation)

        if self.position is not None:
            position = self.position
        else:
            position = self._get_offset(bb_size.width, area.size.width)
            result.size = bb_size

        area.add_image(self.image, position + bb_offset, self.scale, self.rotation, self.dpi)
        return result
