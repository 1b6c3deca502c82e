"""
Tests for areas and text sections.

Tests cover:
- Margins, offsets and horizontal splits
- Line drawing and image forwarding through the coordinate transform
- Text sections: begin/end pairing, cursor, kerning and encoding
- The single-line Text element
"""

import pytest

from pagerender.elements import Context, Text
from pagerender.errors import ErrorKind, PageRenderError
from pagerender.models import LineStyle, Position, Rotation, Scale, Size, pt_to_mm


@pytest.fixture
def area(renderer):
    return renderer.first_page().first_layer().area()


def layer_handle(area):
    return area.layer.state.handle


# ============================================================================
# Area geometry
# ============================================================================

class TestAreaGeometry:
    """Test area views."""

    def test_area_covers_page(self, area):
        assert area.origin == Position(0, 0)
        assert area.size == Size(210, 297)

    def test_margins(self, area):
        area.add_margins((10, 20))
        assert area.origin == Position(20, 10)
        assert area.size == Size(170, 277)

    def test_offset_shrinks_area(self, area):
        area.add_offset(Position(5, 7))
        assert area.origin == Position(5, 7)
        assert area.size == Size(205, 290)

    def test_copy_is_independent(self, area):
        other = area.copy()
        other.add_offset(Position(1, 1))
        assert area.origin == Position(0, 0)
        assert other.layer == area.layer

    def test_split_equal_weights(self, area):
        area.set_width(40)
        parts = area.split_horizontally([2, 2, 2, 2])
        assert [p.origin.x for p in parts] == [0, 10, 20, 30]
        assert all(p.size == Size(10, 297) for p in parts)

    def test_split_uneven_weights(self, area):
        area.set_width(60)
        parts = area.split_horizontally([1, 2])
        assert [p.size.width for p in parts] == [20, 40]
        assert parts[1].origin.x == 20

    @pytest.mark.parametrize("weights", [[], [0, 0]])
    def test_split_rejects_empty_weights(self, area, weights):
        with pytest.raises(ValueError):
            area.split_horizontally(weights)

    def test_split_areas_share_layer_state(self, area, backend):
        left, right = area.split_horizontally([1, 1])
        left.layer.set_outline_thickness(2.0)
        right.layer.set_outline_thickness(2.0)
        assert len(backend.calls_to("set_outline_thickness")) == 1

    def test_next_layer_keeps_rectangle(self, area):
        area.add_margins(5)
        upper = area.next_layer()
        assert upper.layer.name == "Layer 2"
        assert upper.origin == area.origin
        assert upper.size == area.size


# ============================================================================
# Drawing
# ============================================================================

class TestDrawing:
    """Test drawing primitives."""

    def test_draw_line_transforms_points(self, area, backend):
        area.add_margins(10)
        area.draw_line([Position(0, 0), Position(5, 5)], LineStyle(thickness=0.1))
        assert backend.calls_to("set_outline_thickness") == [(layer_handle(area), 0.1)]
        # Black is the initial outline color
        assert backend.calls_to("set_outline_color") == []
        assert backend.calls_to("draw_polyline") == [
            (layer_handle(area), [Position(10, 287), Position(15, 282)])
        ]

    def test_draw_frame_is_closed(self, area, backend):
        area.set_size((20, 10))
        area.draw_frame(LineStyle())
        points = backend.calls_to("draw_polyline")[0][1]
        assert len(points) == 5
        assert points[0] == points[-1]
        assert Position(20, 287) in points

    def test_add_image_negates_rotation(self, area, backend):
        area.add_image("pixels", Position(5, 10), Scale(2, 2), Rotation(30), 150)
        assert backend.calls_to("add_image") == [
            (layer_handle(area), "pixels", Position(5, 287), -30.0, Scale(2, 2), 150)
        ]


# ============================================================================
# Text sections
# ============================================================================

class TestTextSection:
    """Test scoped text output."""

    def test_section_is_none_when_line_does_not_fit(self, area, font_cache, style):
        area.set_height(3)
        assert area.text_section(font_cache, Position(0, 0), style.metrics()) is None

    def test_print_builtin_font(self, area, backend, font_cache, style):
        handle = layer_handle(area)
        section = area.text_section(font_cache, Position(0, 0), style.metrics())
        with section:
            section.print_str("AV", style)

        metrics = style.metrics()
        text_calls = [c for c in backend.calls if c[0] not in ("add_page", "add_layer",
                                                               "add_builtin_font",
                                                               "add_embedded_font")]
        assert text_calls[0] == ("begin_text", handle)
        assert text_calls[1] == ("set_line_height", handle, metrics.line_height)
        name, _, cursor = text_calls[2]
        assert name == "set_text_cursor"
        assert cursor.x == pytest.approx(-pt_to_mm(0.5))
        assert cursor.y == pytest.approx(297 - metrics.ascent)
        assert text_calls[3] == ("set_font", handle, "builtin:Helvetica", 10)
        assert text_calls[4] == ("write_positioned_codepoints", handle, [(0, 65), (-125, 86)])
        assert text_calls[5] == ("end_text", handle)

    def test_print_embedded_font_uses_glyph_ids(self, area, backend, font_cache,
                                                 embedded_font, style):
        embedded = style.with_font(embedded_font)
        section = area.text_section(font_cache, Position(0, 0), embedded.metrics())
        with section:
            section.print_str("AV", embedded)
        assert backend.calls_to("set_font")[0][1] == "embedded:1"
        assert backend.calls_to("write_positioned_codepoints")[0][1] == [(0, 165), (-125, 186)]

    def test_cursor_set_only_for_first_string(self, area, backend, font_cache, style):
        section = area.text_section(font_cache, Position(0, 0), style.metrics())
        with section:
            section.print_str("a", style)
            section.print_str("b", style.with_font_size(12))
        assert len(backend.calls_to("set_text_cursor")) == 1
        assert len(backend.calls_to("set_font")) == 2

    def test_end_text_emitted_on_encoding_error(self, area, backend, font_cache, style):
        section = area.text_section(font_cache, Position(0, 0), style.metrics())
        with pytest.raises(PageRenderError) as exc_info:
            with section:
                section.print_str("日本", style)
        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_ENCODING
        assert "日本" in str(exc_info.value)
        assert backend.names()[-1] == "end_text"
        assert backend.calls_to("write_positioned_codepoints") == []

    def test_embedded_font_prints_any_character(self, area, backend, font_cache,
                                                 embedded_font, style):
        embedded = style.with_font(embedded_font)
        assert area.print_str(font_cache, Position(0, 0), embedded, "日本")
        assert backend.calls_to("write_positioned_codepoints")[0][1] == [
            (0, ord("日") + 100), (0, ord("本") + 100),
        ]

    def test_missing_glyph_names_the_text(self, area, backend, font_cache,
                                          embedded_font, style):
        embedded = style.with_font(embedded_font)
        with pytest.raises(PageRenderError) as exc_info:
            area.print_str(font_cache, Position(0, 0), embedded, "snow ☃ man")
        assert exc_info.value.kind == ErrorKind.UNSUPPORTED_ENCODING
        assert "snow ☃ man" in str(exc_info.value)
        assert backend.names()[-1] == "end_text"
        assert backend.calls_to("write_positioned_codepoints") == []

    def test_newline_until_area_is_full(self, area, backend, font_cache, style):
        area.set_height(5)
        section = area.text_section(font_cache, Position(0, 0), style.metrics())
        with section:
            assert section.add_newline()
            assert not section.add_newline()
        assert len(backend.calls_to("add_line_break")) == 1

    def test_use_outside_with_block_raises(self, area, font_cache, style):
        section = area.text_section(font_cache, Position(0, 0), style.metrics())
        with pytest.raises(RuntimeError):
            section.print_str("x", style)

    def test_unregistered_font_raises(self, renderer, area, style):
        from pagerender.fonts import FontCache

        with pytest.raises(LookupError):
            area.print_str(FontCache(renderer), Position(0, 0), style, "x")


# ============================================================================
# Text element
# ============================================================================

class TestTextElement:
    """Test the single-line Text element."""

    def test_reports_consumed_size(self, area, font_cache, style):
        result = Text("Hello").render(Context(font_cache), area, style)
        assert not result.has_more
        assert result.size.width == pytest.approx(pt_to_mm(25))
        assert result.size.height == pytest.approx(style.metrics().line_height)

    def test_has_more_when_line_does_not_fit(self, area, backend, font_cache, style):
        area.set_height(1)
        result = Text("Hello").render(Context(font_cache), area, style)
        assert result.has_more
        assert backend.calls_to("begin_text") == []

    def test_own_style_overrides_inherited(self, area, backend, font_cache, style):
        Text("Hi", style.with_font_size(20)).render(Context(font_cache), area, style)
        assert backend.calls_to("set_font")[0][2] == 20
