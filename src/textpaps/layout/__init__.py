"""
Module: layout

Purpose:
    Pagination and column compositing.
    Turns decoded text into paragraphs, flat lines and finally pages
    drawn on a rendering surface.

Key Functions:
    - split_text_into_paragraphs(): Input -> Paragraphs
    - split_paragraphs_into_lines(): Paragraphs -> LineRecords
    - output_pages(): LineRecords -> pages on a surface
    - draw_page_header(): Running header/footer

Key Classes:
    - LayoutConfig: Page geometry for one run
    - RunContext: Mutable per-run state
    - Paragraph / LineRecord / PagePlan / CompositionResult: Models

Dependencies:
    - textpaps.engine: TextLayoutEngine
    - textpaps.output: RenderingSurface

Used By:
    - textpaps.controller: Render pipeline
"""

from .config import (
    DEFAULT_GUTTER_WIDTH,
    DEFAULT_HEADER_SEP,
    DEFAULT_MARGIN,
    POINTS_PER_INCH,
    LayoutConfig,
    RunContext,
)
from .models import (
    CompositionResult,
    CompositorState,
    LinePlacement,
    LineRecord,
    PagePlan,
    Paragraph,
)
from .splitter import split_text_into_paragraphs
from .flattener import split_paragraphs_into_lines
from .header import RULE_WIDTH, draw_page_header, header_fragments
from .compositor import Transition, column_x, next_transition, output_pages

__all__ = [
    # Config
    "LayoutConfig",
    "RunContext",
    "POINTS_PER_INCH",
    "DEFAULT_MARGIN",
    "DEFAULT_GUTTER_WIDTH",
    "DEFAULT_HEADER_SEP",
    # Models
    "Paragraph",
    "LineRecord",
    "CompositorState",
    "LinePlacement",
    "PagePlan",
    "CompositionResult",
    # Functions
    "split_text_into_paragraphs",
    "split_paragraphs_into_lines",
    "draw_page_header",
    "header_fragments",
    "RULE_WIDTH",
    "output_pages",
    "next_transition",
    "column_x",
    "Transition",
]
