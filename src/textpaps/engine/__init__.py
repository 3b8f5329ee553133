"""
Module: engine

Purpose:
    Text layout engine: font descriptors, markup, measuring and
    line breaking. The layout core only talks to TextLayoutEngine.

Key Classes:
    - TextLayoutEngine: Abstract engine interface
    - ReportLabLayoutEngine: ReportLab-backed implementation
    - ShapedLayout / ShapedLine / TextRun / Rect: Engine output

Dependencies:
    - reportlab: Font metrics

Used By:
    - textpaps.layout: Splitter, flattener, header renderer
    - textpaps.output: Surfaces draw shaped lines
"""

from .base import TextLayoutEngine
from .fonts import DEFAULT_FONT, DEFAULT_HEADER_FONT, FontSpec, parse_font_desc, resolve_font_name
from .markup import parse_markup
from .models import Alignment, Rect, ShapedLayout, ShapedLine, TextRun
from .reportlab_engine import ReportLabLayoutEngine, char_display_width

__all__ = [
    # Interface
    "TextLayoutEngine",
    "ReportLabLayoutEngine",
    # Models
    "Alignment",
    "Rect",
    "ShapedLayout",
    "ShapedLine",
    "TextRun",
    # Fonts
    "DEFAULT_FONT",
    "DEFAULT_HEADER_FONT",
    "FontSpec",
    "parse_font_desc",
    "resolve_font_name",
    # Helpers
    "parse_markup",
    "char_display_width",
]
