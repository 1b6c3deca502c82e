"""
Tests for the Image element.

Tests cover:
- Decoding and rejecting images with an alpha channel
- Physical size from pixels, scale and resolution
- Alignment, absolute positions and rotation compensation
"""

import io

import pytest

PIL = pytest.importorskip("PIL")
from PIL import Image as PILImage  # noqa: E402

from pagerender.elements import Context, Image  # noqa: E402
from pagerender.errors import ErrorKind, PageRenderError  # noqa: E402
from pagerender.models import Alignment, Position, Size  # noqa: E402


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def rgb_image():
    """300 x 150 pixels: 25.4 x 12.7 mm at 300 dpi."""
    return PILImage.new("RGB", (300, 150), "white")


@pytest.fixture
def png_bytes(rgb_image):
    buffer = io.BytesIO()
    rgb_image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def area(renderer):
    area = renderer.first_page().first_layer().area()
    area.set_width(100)
    return area


# ============================================================================
# Construction
# ============================================================================

class TestImageLoading:
    """Test decoding and validation."""

    def test_from_bytes(self, png_bytes):
        image = Image.from_bytes(png_bytes)
        assert image.image.size == (300, 150)

    def test_from_path_and_reader(self, png_bytes, tmp_path):
        path = tmp_path / "image.png"
        path.write_bytes(png_bytes)
        assert Image.from_path(path).image.size == (300, 150)
        with open(path, "rb") as f:
            assert Image.from_reader(f).image.size == (300, 150)

    def test_missing_file_is_io_error(self, tmp_path):
        with pytest.raises(PageRenderError) as exc_info:
            Image.from_path(tmp_path / "missing.png")
        assert exc_info.value.kind == ErrorKind.IO
        assert "missing.png" in str(exc_info.value)

    def test_garbage_is_invalid_data(self):
        with pytest.raises(PageRenderError) as exc_info:
            Image.from_bytes(b"not an image")
        assert exc_info.value.kind == ErrorKind.INVALID_DATA

    def test_decompression_bomb_is_invalid_data(self, png_bytes, monkeypatch):
        # 300 x 150 pixels exceeds twice the lowered limit
        monkeypatch.setattr(PILImage, "MAX_IMAGE_PIXELS", 1000)
        with pytest.raises(PageRenderError) as exc_info:
            Image.from_bytes(png_bytes)
        assert exc_info.value.kind == ErrorKind.INVALID_DATA
        assert isinstance(exc_info.value.__cause__, PILImage.DecompressionBombError)

    def test_alpha_channel_rejected(self):
        with pytest.raises(PageRenderError) as exc_info:
            Image.from_pil(PILImage.new("RGBA", (10, 10)))
        assert exc_info.value.kind == ErrorKind.INVALID_DATA

    def test_palette_transparency_rejected(self):
        image = PILImage.new("P", (10, 10))
        image.info["transparency"] = 0
        with pytest.raises(PageRenderError):
            Image.from_pil(image)

    def test_alpha_rejected_before_any_backend_call(self, backend):
        calls_before = list(backend.calls)
        buffer = io.BytesIO()
        PILImage.new("LA", (4, 4)).save(buffer, format="PNG")
        with pytest.raises(PageRenderError):
            Image.from_bytes(buffer.getvalue())
        assert backend.calls == calls_before


# ============================================================================
# Size and placement
# ============================================================================

class TestImagePlacement:
    """Test geometry of placed images."""

    def test_size_at_default_dpi(self, rgb_image):
        size = Image.from_pil(rgb_image).size()
        assert size.width == pytest.approx(25.4)
        assert size.height == pytest.approx(12.7)

    def test_size_with_scale_and_dpi(self, rgb_image):
        size = Image.from_pil(rgb_image).with_scale(2).with_dpi(150).size()
        assert size.width == pytest.approx(101.6)
        assert size.height == pytest.approx(50.8)

    def test_left_aligned(self, rgb_image, area, backend, font_cache, style):
        result = Image.from_pil(rgb_image).render(Context(font_cache), area, style)
        assert not result.has_more
        assert result.size.width == pytest.approx(25.4)
        assert result.size.height == pytest.approx(12.7)
        (_, _, position, rotation, _, dpi), = backend.calls_to("add_image")
        # Bottom-left corner of the image, in user space
        assert position.x == pytest.approx(0)
        assert position.y == pytest.approx(297 - 12.7)
        assert rotation == 0
        assert dpi is None

    @pytest.mark.parametrize("alignment, expected_x", [
        (Alignment.CENTER, (100 - 25.4) / 2),
        (Alignment.RIGHT, 100 - 25.4),
    ])
    def test_alignment(self, rgb_image, area, backend, font_cache, style,
                       alignment, expected_x):
        image = Image.from_pil(rgb_image).with_alignment(alignment)
        image.render(Context(font_cache), area, style)
        position = backend.calls_to("add_image")[0][2]
        assert position.x == pytest.approx(expected_x)

    def test_absolute_position_reports_no_size(self, rgb_image, area, backend,
                                               font_cache, style):
        image = Image.from_pil(rgb_image).with_position(Position(10, 20))
        result = image.render(Context(font_cache), area, style)
        assert result.size == Size(0, 0)
        position = backend.calls_to("add_image")[0][2]
        assert position.x == pytest.approx(10)
        assert position.y == pytest.approx(297 - 20 - 12.7)

    def test_quarter_turn_grows_footprint(self, rgb_image, area, backend, font_cache, style):
        image = Image.from_pil(rgb_image).with_clockwise_rotation(90)
        result = image.render(Context(font_cache), area, style)
        assert result.size.width == pytest.approx(12.7)
        assert result.size.height == pytest.approx(25.4)
        _, _, position, rotation, _, _ = backend.calls_to("add_image")[0]
        assert rotation == -90
        # The pivot sits at the top-left corner of the rotated box
        assert position.x == pytest.approx(0)
        assert position.y == pytest.approx(297)

    def test_invalid_rotation(self, rgb_image):
        with pytest.raises(ValueError):
            Image.from_pil(rgb_image).with_clockwise_rotation(270)
