"""
Module: layout.models

Purpose:
    Data models for pagination.
    Paragraph arena records, flat line references and page plans.

Key Classes:
    - Paragraph: Span of input text plus its shaped layout
    - LineRecord: One shaped line, addressed into the paragraph arena
    - CompositorState: Page/column cursor of the compositor
    - LinePlacement: Line positioned on a page
    - PagePlan: Placements of one page
    - CompositionResult: Final compositor output

Dependencies:
    - dataclasses (std)
    - textpaps.engine.models: Rect, ShapedLayout

Used By:
    - layout.splitter: Creates Paragraphs
    - layout.flattener: Creates LineRecords
    - layout.compositor: Creates PagePlans
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from textpaps.engine.models import Rect, ShapedLayout


@dataclass(frozen=True)
class Paragraph:
    """
    Paragraph between two hard breaks (immutable).

    Attributes:
        start: Offset of the first character in the input buffer
        length: Number of input characters covered (boundary excluded)
        text: Text actually shaped (invalid characters removed)
        formfeed: Paragraph ended at a form feed
        layout: Shaped layout, one per paragraph

    Example:
        >>> para.start, para.length, para.formfeed
        (2, 1, True)  # "b" in "a\\nb\\f\\nc"
    """

    start: int
    length: int
    text: str
    formfeed: bool
    layout: ShapedLayout

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class LineRecord:
    """
    Reference to one shaped line (immutable).

    Attributes:
        paragraph_index: Index into the paragraph arena
        line_index: Line inside that paragraph's layout
        ink_rect: Tight glyph box
        logical_rect: Advance box
        formfeed: True only on the last line of a form-feed paragraph
    """

    paragraph_index: int
    line_index: int
    ink_rect: Rect
    logical_rect: Rect
    formfeed: bool = False

    @property
    def logical_height(self) -> float:
        return self.logical_rect.height

    @property
    def logical_width(self) -> float:
        return self.logical_rect.width


@dataclass
class CompositorState:
    """
    Mutable cursor of the page compositor.

    Attributes:
        page: Current page number (1-based)
        column: Current logical column (0-based)
        offset: Vertical offset inside the column
        prev_formfeed: Previous line ended a form-feed paragraph
        column_used: Something was placed in the current column
    """

    page: int = 1
    column: int = 0
    offset: float = 0.0
    prev_formfeed: bool = False
    column_used: bool = False

    def reset_column(self) -> None:
        self.offset = 0.0
        self.column_used = False


@dataclass(frozen=True)
class LinePlacement:
    """
    Line drawn at a page position.

    Attributes:
        line: The placed line
        column: Logical column index
        x: Left edge of the line in points
        y: Baseline in points from the page top
    """

    line: LineRecord
    column: int
    x: float
    y: float


@dataclass(frozen=True)
class PagePlan:
    """
    Everything drawn on one page.

    Attributes:
        index: Page number (1-based)
        placements: Lines in drawing order
        columns_used: Number of logical columns that received lines
    """

    index: int
    placements: Tuple[LinePlacement, ...]
    columns_used: int = 0

    @property
    def line_count(self) -> int:
        return len(self.placements)


@dataclass(frozen=True)
class CompositionResult:
    """
    Final compositor output.

    Attributes:
        pages: Page plans in order (never empty)
        warnings: Non-fatal problems met while placing lines
    """

    pages: Tuple[PagePlan, ...]
    warnings: Tuple[str, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def line_count(self) -> int:
        return sum(page.line_count for page in self.pages)

    def lines_on_page(self, index: int) -> List[LineRecord]:
        return [p.line for p in self.pages[index - 1].placements]
