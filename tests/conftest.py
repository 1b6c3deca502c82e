"""
Shared fixtures: a recording backend and fonts with fixed metrics.
"""

from typing import Dict, Tuple

import pytest

from pagerender.fonts import Builtin, Font, FontCache, GlyphMetrics
from pagerender.models import Size
from pagerender.render.backend import Backend, DocumentInfo
from pagerender.render.layers import Renderer
from pagerender.style import Style

MISSING_GLYPH = "\u2603"


class RecordingBackend(Backend):
    """Backend that records every call as a tuple ``(method, *args)``."""

    def __init__(self, fail_on_save: bool = False):
        self.calls = []
        self.fail_on_save = fail_on_save
        self.page_count = 0
        self.embedded_count = 0

    def names(self):
        return [call[0] for call in self.calls]

    def calls_to(self, name: str):
        return [call[1:] for call in self.calls if call[0] == name]

    def add_page(self, size):
        self.calls.append(("add_page", size))
        self.page_count += 1
        return self.page_count - 1

    def add_layer(self, page, name):
        self.calls.append(("add_layer", page, name))
        return f"{page}:{name}"

    def add_builtin_font(self, builtin):
        self.calls.append(("add_builtin_font", builtin))
        return f"builtin:{builtin.value}"

    def add_embedded_font(self, data):
        self.calls.append(("add_embedded_font", data))
        self.embedded_count += 1
        return f"embedded:{self.embedded_count}"

    def set_fill_color(self, layer, color):
        self.calls.append(("set_fill_color", layer, color))

    def set_outline_color(self, layer, color):
        self.calls.append(("set_outline_color", layer, color))

    def set_outline_thickness(self, layer, thickness):
        self.calls.append(("set_outline_thickness", layer, thickness))

    def draw_polyline(self, layer, points):
        self.calls.append(("draw_polyline", layer, list(points)))

    def add_image(self, layer, image, position, rotation_ccw, scale, dpi):
        self.calls.append(("add_image", layer, image, position, rotation_ccw, scale, dpi))

    def begin_text(self, layer):
        self.calls.append(("begin_text", layer))

    def end_text(self, layer):
        self.calls.append(("end_text", layer))

    def set_text_cursor(self, layer, position):
        self.calls.append(("set_text_cursor", layer, position))

    def set_line_height(self, layer, line_height):
        self.calls.append(("set_line_height", layer, line_height))

    def add_line_break(self, layer):
        self.calls.append(("add_line_break", layer))

    def set_font(self, layer, font, font_size):
        self.calls.append(("set_font", layer, font, font_size))

    def write_positioned_codepoints(self, layer, items):
        self.calls.append(("write_positioned_codepoints", layer, list(items)))

    def save(self, info: DocumentInfo) -> bytes:
        self.calls.append(("save", info))
        if self.fail_on_save:
            raise OSError("disk full")
        return b"%PDF-recorded"


class FixedGlyphMetrics(GlyphMetrics):
    """Every glyph is 0.5 em wide with a 0.05 em bearing; "AV" kerns by -0.125 em.

    The snowman has no glyph.
    """

    KERNING: Dict[Tuple[str, str], float] = {("A", "V"): -0.125, ("V", "A"): -0.125}

    @property
    def ascender(self) -> float:
        return 0.8

    @property
    def descender(self) -> float:
        return -0.2

    def advance(self, char: str) -> float:
        return 0.5

    def left_side_bearing(self, char: str) -> float:
        return 0.05

    def glyph_id(self, char: str) -> int:
        if char == MISSING_GLYPH:
            return 0
        return ord(char) + 100

    def kerning(self, left: str, right: str) -> float:
        return self.KERNING.get((left, right), 0.0)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def renderer(backend):
    """An A4 renderer drawing to a recording backend."""
    return Renderer(Size(210, 297), "Test", backend=backend)


@pytest.fixture
def builtin_font():
    """A built-in (Windows-1252) font with fixed metrics."""
    return Font("Helvetica", FixedGlyphMetrics(), builtin=Builtin.HELVETICA)


@pytest.fixture
def embedded_font():
    """An embedded font with fixed metrics; the data is never parsed."""
    return Font("Fixed", FixedGlyphMetrics(), data=b"font-data")


@pytest.fixture
def style(builtin_font):
    return Style(builtin_font, font_size=10)


@pytest.fixture
def font_cache(renderer, builtin_font, embedded_font):
    cache = FontCache(renderer)
    cache.add(builtin_font)
    cache.add(embedded_font)
    return cache


@pytest.fixture
def failing_renderer():
    """A renderer whose backend fails to save."""
    return Renderer(Size(210, 297), "Test", backend=RecordingBackend(fail_on_save=True))


@pytest.fixture
def recording_factory():
    """A backend factory for Document plus the list of backends it created."""
    backends = []

    def factory():
        backend = RecordingBackend()
        backends.append(backend)
        return backend

    return factory, backends
