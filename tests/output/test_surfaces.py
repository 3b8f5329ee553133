"""
Tests for the PostScript, PDF and SVG rendering surfaces.

PDF output is checked with PyMuPDF (fitz); PostScript by its DSC
comments; SVG by parsing the document back.
"""

import io
import xml.etree.ElementTree as ET

import fitz
import pytest

from textpaps.engine import Alignment, Rect, ShapedLayout, ShapedLine, TextRun
from textpaps.errors import ConfigurationError
from textpaps.output import (
    PdfSurface,
    PostScriptSurface,
    SurfaceError,
    SvgSurface,
    create_surface,
    escape_ps_string,
)
from textpaps.output.svg_surface import SVG_NS, font_attributes


@pytest.fixture
def hello_layout(engine):
    return engine.shape("hello  world", None, False, False, Alignment.LEFT)


def _layout_in_font(font_name):
    run = TextRun("x", font_name, 12.0, 7.2)
    line = ShapedLine((run,), Rect(0, -7, 7.2, 9), Rect(0, -10, 7.2, 14.4))
    return ShapedLayout("x", (line,))


def _render(surface, layout, pages=1):
    for _ in range(pages):
        surface.begin_page()
        surface.draw_line(36, 50, layout, 0)
        surface.draw_rule(36, 60, 200, 60, 0.1)
        surface.end_page()
    surface.finish()


class TestSurfaceLifecycle:

    def test_when_drawing_outside_page_then_raises(self, hello_layout):
        surface = SvgSurface(io.BytesIO(), 612, 792)

        with pytest.raises(SurfaceError):
            surface.draw_line(0, 0, hello_layout, 0)
        with pytest.raises(SurfaceError):
            surface.end_page()

    def test_when_begin_page_twice_then_raises(self):
        surface = SvgSurface(io.BytesIO(), 612, 792)
        surface.begin_page()

        with pytest.raises(SurfaceError):
            surface.begin_page()

    def test_finish_ends_open_page_and_is_idempotent(self):
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, 612, 792)
        surface.begin_page()

        surface.finish()
        size = len(stream.getvalue())
        surface.finish()

        assert surface.page_count == 1
        assert not surface.in_page
        assert len(stream.getvalue()) == size

    def test_blank_lines_are_not_drawn(self, engine):
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, 612, 792)
        blank = engine.shape("", None, False, False, Alignment.LEFT)

        surface.begin_page()
        surface.draw_line(36, 50, blank, 0)
        surface.finish()

        assert b" show" not in stream.getvalue()


class TestPostScriptSurface:

    def test_document_structure(self, hello_layout):
        # Arrange
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, 612, 792, title="doc (1)")

        # Act
        _render(surface, hello_layout, pages=2)

        # Assert
        ps = stream.getvalue().decode("latin-1")
        assert ps.startswith("%!PS-Adobe-3.0\n")
        assert "%%Title: doc \\(1\\)\n" in ps
        assert "%%BoundingBox: 0 0 612 792\n" in ps
        assert "%%Page: 2 2\n" in ps
        assert "/Courier-Latin1 /Courier reencode-latin1\n" in ps
        assert "(hello  world) show" in ps
        assert ps.endswith("%%DocumentNeededResources: font Courier\n%%Pages: 2\n%%EOF\n")
        assert ps.count("showpage") == 2

    def test_when_landscape_then_portrait_page_rotated(self, hello_layout):
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, 792, 612, landscape=True)

        _render(surface, hello_layout)

        ps = stream.getvalue().decode("latin-1")
        assert "%%BoundingBox: 0 0 612 792\n" in ps
        assert "%%PageOrientation: Landscape\n" in ps
        assert "612 792 translate -90 rotate\n" in ps

    def test_when_filter_options_then_header_comments_and_duplex(self):
        stream = io.BytesIO()

        PostScriptSurface(
            stream, 612, 792, dsc_for="alice", cups_rotation=True, duplex=True, tumble=True
        ).finish()

        ps = stream.getvalue().decode("latin-1")
        assert "%%For: alice\n" in ps
        assert "%%cupsRotation: 0\n" in ps
        assert "/Duplex true /Tumble true" in ps

    def test_when_stretched_then_scale_emitted(self, hello_layout):
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, 612, 792)

        surface.begin_page()
        surface.set_transform(1.0, 0.5)
        surface.draw_line(36, 50, hello_layout, 0)
        surface.finish()

        assert b"1 0.5 scale" in stream.getvalue()

    def test_when_font_not_standard_then_courier_used(self):
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, 612, 792)

        surface.begin_page()
        surface.draw_line(36, 50, _layout_in_font("DejaVuSansMono"), 0)
        surface.finish()

        ps = stream.getvalue()
        assert b"/Courier-Latin1 12 selectfont" in ps
        assert b"DejaVuSansMono" not in ps

    def test_when_justified_then_widthshow_used(self, engine):
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, 612, 792)
        layout = engine.shape("aa bb cc", 40, True, True, Alignment.LEFT)

        surface.begin_page()
        surface.draw_line(36, 50, layout, 0)
        surface.finish()

        assert b"0 32 (aa bb) widthshow" in stream.getvalue()

    def test_escape_ps_string(self):
        assert escape_ps_string("f(x) \\ é€") == "f\\(x\\) \\\\ \\351?"


class TestPdfSurface:

    def test_pages_size_and_text(self, hello_layout):
        # Arrange
        stream = io.BytesIO()
        surface = PdfSurface(stream, 612, 792, title="notes")

        # Act
        _render(surface, hello_layout, pages=2)

        # Assert
        doc = fitz.open(stream=stream.getvalue(), filetype="pdf")
        assert doc.page_count == 2
        assert doc[0].rect.width == pytest.approx(612)
        assert doc[0].rect.height == pytest.approx(792)
        assert "hello" in doc[0].get_text()
        assert doc.metadata["title"] == "notes"

    def test_when_landscape_then_page_size_swapped(self, hello_layout):
        stream = io.BytesIO()
        surface = PdfSurface(stream, 792, 612, landscape=True)

        _render(surface, hello_layout)

        doc = fitz.open(stream=stream.getvalue(), filetype="pdf")
        assert doc[0].rect.width == pytest.approx(792)
        assert doc[0].rect.height == pytest.approx(612)

    def test_text_placed_at_baseline_from_top(self, hello_layout):
        stream = io.BytesIO()
        surface = PdfSurface(stream, 612, 792)

        _render(surface, hello_layout)

        doc = fitz.open(stream=stream.getvalue(), filetype="pdf")
        x0, y0, x1, y1, text, *_ = doc[0].get_text("words")[0]
        assert text == "hello"
        assert x0 == pytest.approx(36, abs=1)
        assert y0 < 50 < y1 + 3


class TestSvgSurface:

    def test_pages_stacked_in_one_document(self, hello_layout):
        # Arrange
        stream = io.BytesIO()
        surface = SvgSurface(stream, 612, 792, title="notes")

        # Act
        _render(surface, hello_layout, pages=2)

        # Assert
        root = ET.fromstring(stream.getvalue())
        assert root.get("height") == "1584pt"
        pages = root.findall(f"{{{SVG_NS}}}g")
        assert [p.get("id") for p in pages] == ["page1", "page2"]
        assert pages[1].get("transform") == "translate(0,792)"
        assert root.find(f"{{{SVG_NS}}}title").text == "notes"

    def test_text_keeps_spaces_and_font(self, hello_layout):
        stream = io.BytesIO()
        surface = SvgSurface(stream, 612, 792)

        _render(surface, hello_layout)

        root = ET.fromstring(stream.getvalue())
        span = root.find(f".//{{{SVG_NS}}}tspan")
        assert span.text == "hello  world"
        assert span.get("font-family") == "Courier, monospace"
        assert span.get("font-size") == "12"
        assert root.find(f".//{{{SVG_NS}}}line").get("stroke-width") == "0.1"

    def test_font_attributes(self):
        assert font_attributes("Courier-BoldOblique") == {
            "font-family": "Courier, monospace",
            "font-weight": "bold",
            "font-style": "italic",
        }
        assert font_attributes("DejaVuSansMono") == {"font-family": "DejaVuSansMono"}


class TestCreateSurface:

    @pytest.mark.parametrize("fmt,cls", [
        ("ps", PostScriptSurface),
        ("pdf", PdfSurface),
        ("svg", SvgSurface),
    ])
    def test_creates_surface_for_format(self, fmt, cls):
        surface = create_surface(fmt, io.BytesIO(), 612, 792, title="t", dsc_for="u")

        assert isinstance(surface, cls)

    def test_when_format_unknown_then_raises(self):
        with pytest.raises(ConfigurationError):
            create_surface("xps", io.BytesIO(), 612, 792)
