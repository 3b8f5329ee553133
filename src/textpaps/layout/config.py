"""
Module: layout.config

Purpose:
    Page geometry for one formatting run.
    Defines page dimensions, margins, columns and fixed-pitch settings,
    plus the small mutable context the pipeline shares.

Key Classes:
    - LayoutConfig: Immutable page/column geometry and layout flags
    - RunContext: Mutable per-run fields (scales, header heights, mode)

Dependencies:
    - dataclasses (std)

Used By:
    - layout.splitter: Wrap width and CPI budget
    - layout.flattener: Stretch scale
    - layout.compositor: Column/page placement
    - layout.header: Header/footer geometry
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from textpaps.engine.fonts import DEFAULT_FONT, DEFAULT_HEADER_FONT

POINTS_PER_INCH = 72.0

DEFAULT_MARGIN = 36
DEFAULT_GUTTER_WIDTH = 40
DEFAULT_HEADER_SEP = 20


@dataclass(frozen=True)
class LayoutConfig:
    """
    Page layout for one run (immutable).

    All lengths are PostScript points (1/72 inch). ``page_width`` and
    ``page_height`` are already swapped for landscape output.

    Attributes:
        page_width: Logical page width in points
        page_height: Logical page height in points
        num_columns: Number of text columns per page
        gutter_width: Space between two columns
        top_margin: Top margin
        bottom_margin: Bottom margin
        left_margin: Left margin
        right_margin: Right margin
        header_sep: Space between a header (or footer) and the text, rule centred in it
        rtl: Right-to-left base direction
        do_wordwrap: Wrap paragraphs at the column width
        do_justify: Justify wrapped lines
        do_use_markup: Treat the input as markup
        do_stretch_chars: Stretch glyphs vertically to fill the LPI advance
        cpi: Characters per inch (0 = unset)
        lpi: Lines per inch (0 = unset)
        do_draw_header: Draw the page header
        do_draw_footer: Draw the page footer
        do_separation_line: Draw a rule between columns
        filename: Document name shown in the header
        font_desc: Body font descriptor
        header_font_desc: Header font descriptor

    Example:
        >>> config = LayoutConfig(page_width=612, page_height=792, num_columns=2)
        >>> config.column_width
        250.0  # (612 - 36 - 36 - 40) / 2
    """

    page_width: float
    page_height: float
    num_columns: int = 1
    gutter_width: float = DEFAULT_GUTTER_WIDTH

    top_margin: float = DEFAULT_MARGIN
    bottom_margin: float = DEFAULT_MARGIN
    left_margin: float = DEFAULT_MARGIN
    right_margin: float = DEFAULT_MARGIN
    header_sep: float = 0

    # Orientation
    do_landscape: bool = False
    do_tumble: bool = True
    do_duplex: bool = True
    rtl: bool = False

    # Text behaviour
    do_wordwrap: bool = True
    do_justify: bool = False
    do_use_markup: bool = False
    do_stretch_chars: bool = False
    cpi: float = 0.0
    lpi: float = 0.0

    # Decorations
    do_draw_header: bool = False
    do_draw_footer: bool = False
    do_separation_line: bool = True
    filename: str = "stdin"
    font_desc: str = DEFAULT_FONT
    header_font_desc: str = DEFAULT_HEADER_FONT

    def __post_init__(self) -> None:
        """Validate geometry on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.num_columns < 1:
            raise ValueError(f"num_columns must be at least 1: {self.num_columns}")
        if self.cpi < 0 or self.lpi < 0:
            raise ValueError("cpi and lpi must not be negative")
        if self.column_width <= 0:
            raise ValueError("Margins and gutters exceed page width")
        if self.column_height <= 0:
            raise ValueError("Margins exceed page height")

    @property
    def total_gutter_width(self) -> float:
        """Width taken by all gutters together (none for a single column)."""
        if self.num_columns == 1:
            return 0.0
        return self.gutter_width * (self.num_columns - 1)

    @property
    def column_width(self) -> float:
        """Width of one column."""
        printable = (
            self.page_width
            - self.left_margin
            - self.right_margin
            - self.total_gutter_width
        )
        return printable / self.num_columns

    @property
    def header_reserve(self) -> float:
        """Separator space above the text, only when a header is drawn."""
        return self.header_sep if self.do_draw_header else 0.0

    @property
    def footer_reserve(self) -> float:
        """Separator space below the text, only when a footer is drawn."""
        return self.header_sep if self.do_draw_footer else 0.0

    @property
    def column_height(self) -> float:
        """Height of a column before header/footer blocks are subtracted."""
        return (
            self.page_height
            - self.top_margin
            - self.bottom_margin
            - self.header_reserve
            - self.footer_reserve
        )

    @property
    def line_advance(self) -> Optional[float]:
        """Uniform line advance mandated by LPI, or None for natural spacing."""
        if self.lpi > 0:
            return POINTS_PER_INCH / self.lpi
        return None

    @property
    def cpi_column_budget(self) -> int:
        """Characters that fit in one column at the configured CPI."""
        return int(self.column_width / POINTS_PER_INCH * self.cpi)


@dataclass
class RunContext:
    """
    Mutable state shared by the pipeline stages of one run.

    Only the derived fields change: the scales are written once before
    compositing, the header/footer heights once per page.

    Attributes:
        output_format: "ps", "pdf" or "svg"
        scale_x: Horizontal font scale derived from CPI
        scale_y: Vertical glyph stretch derived from LPI
        header_height: Height of the current page header block
        footer_height: Height of the current page footer block
        filter_mode: Running as a managed print filter (recover per paragraph)
        started_at: Timestamp printed in page headers
        warnings: Diagnostics collected during the run
    """

    output_format: str = "ps"
    scale_x: float = 1.0
    scale_y: float = 1.0
    header_height: float = 0.0
    footer_height: float = 0.0
    filter_mode: bool = False
    started_at: datetime = field(default_factory=datetime.now)
    warnings: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        """Record a diagnostic for the run result."""
        self.warnings.append(message)
