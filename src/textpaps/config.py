"""
Module: config

Purpose:
    Run options for one formatting job. Immutable configuration with
    validation on construction; the loader turns it into a LayoutConfig.

Key Classes:
    - RunOptions: Everything the CLI or print filter decided

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - controller: render_document()
    - loading.loader: build_layout_config(), read_text()
    - cli / loading.cups: Option parsing
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from textpaps.engine.fonts import DEFAULT_FONT, DEFAULT_HEADER_FONT
from textpaps.layout.config import DEFAULT_GUTTER_WIDTH, DEFAULT_MARGIN
from textpaps.loading.paper import PAPER_SIZES
from textpaps.output import OUTPUT_FORMATS


@dataclass(frozen=True)
class RunOptions:
    """
    Options for one run (immutable).

    Attributes:
        input_path: Text file to format, None for stdin
        output_path: Destination file, None for stdout
        output_format: "ps", "pdf" or "svg"
        paper: Paper name (a4, letter, legal, a3)
        page_width: Explicit page width in points, overrides ``paper``
        page_height: Explicit page height in points, overrides ``paper``
        landscape: Rotate the page
        columns: Number of columns
        font: Body font descriptor
        header_font: Header/footer font descriptor
        rtl: Right-to-left columns and alignment
        justify: Justify wrapped lines
        markup: Treat the input as markup
        stretch_chars: Stretch glyphs to the LPI advance
        wrap: Wrap long lines
        separation_line: Rule between columns
        header: Draw a page header
        footer: Draw a page footer
        top_margin / bottom_margin / left_margin / right_margin: Margins in points
        gutter_width: Space between columns
        cpi: Characters per inch (0 = unset)
        lpi: Lines per inch (0 = unset)
        encoding: Input encoding, None for UTF-8
        lang_encoding: Take the input encoding from the locale
        title: Document name for headers and metadata (default: file name)
        filter_mode: Running as a print filter (paragraph-level recovery)
        owner: Job owner for the PostScript ``%%For`` comment
        duplex: Request duplex printing (PostScript)
        tumble: Short-edge duplex binding

    Example:
        >>> options = RunOptions(input_path=Path("notes.txt"), columns=2, header=True)
    """

    # Input / output
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    output_format: str = "ps"

    # Page
    paper: str = "a4"
    page_width: Optional[float] = None
    page_height: Optional[float] = None
    landscape: bool = False
    columns: int = 1

    # Fonts
    font: str = DEFAULT_FONT
    header_font: str = DEFAULT_HEADER_FONT

    # Text behaviour
    rtl: bool = False
    justify: bool = False
    markup: bool = False
    stretch_chars: bool = False
    wrap: bool = True
    separation_line: bool = True
    header: bool = False
    footer: bool = False

    # Geometry
    top_margin: float = DEFAULT_MARGIN
    bottom_margin: float = DEFAULT_MARGIN
    left_margin: float = DEFAULT_MARGIN
    right_margin: float = DEFAULT_MARGIN
    gutter_width: float = DEFAULT_GUTTER_WIDTH
    cpi: float = 0.0
    lpi: float = 0.0

    # Encoding
    encoding: Optional[str] = None
    lang_encoding: bool = False

    # Print filter
    title: Optional[str] = None
    filter_mode: bool = False
    owner: Optional[str] = None
    duplex: bool = False
    tumble: bool = False

    def __post_init__(self) -> None:
        """Validate options on construction."""
        if self.columns < 1:
            raise ValueError(f"columns must be at least 1: {self.columns}")
        for name in ("top_margin", "bottom_margin", "left_margin", "right_margin", "gutter_width"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative: {value}")
        if self.cpi < 0:
            raise ValueError(f"cpi must be non-negative: {self.cpi}")
        if self.lpi < 0:
            raise ValueError(f"lpi must be non-negative: {self.lpi}")
        if self.paper.lower() not in PAPER_SIZES:
            raise ValueError(f"Unknown paper size: {self.paper!r}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.output_format!r}")
        if (self.page_width is None) != (self.page_height is None):
            raise ValueError("page_width and page_height must be given together")

    @property
    def document_name(self) -> str:
        """Name shown in page headers."""
        if self.title:
            return self.title
        if self.input_path is not None:
            return self.input_path.name
        return "stdin"
