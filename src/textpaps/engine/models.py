"""
Module: engine.models

Purpose:
    Data models produced by the text layout engine.
    Immutable dataclasses for runs, shaped lines and whole layouts.

Key Classes:
    - Rect: Box in points relative to a line origin
    - TextRun: Same-font piece of a line
    - ShapedLine: One laid-out line with its extents
    - ShapedLayout: All lines shaped from one paragraph
    - Alignment: Paragraph alignment

Dependencies:
    - dataclasses (std)

Used By:
    - engine.reportlab_engine: Produces layouts
    - output: Surfaces draw ShapedLine runs
    - layout: Splitter/flattener/compositor hold layout handles
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Alignment(Enum):
    """Horizontal alignment of lines inside a layout."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Rect:
    """
    Rectangle in points.

    For line extents the origin is the baseline start, so ``y`` is the
    negative distance from the baseline up to the top of the box.

    Example:
        >>> r = Rect(0, -9.6, 72, 14.4)
        >>> r.bottom
        4.8
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class TextRun:
    """
    Piece of a line drawn with one font.

    Attributes:
        text: Characters of the run (tabs already expanded)
        font_name: Registered ReportLab font name
        font_size: Size in points
        width: Natural advance width in points
    """

    text: str
    font_name: str
    font_size: float
    width: float


@dataclass(frozen=True)
class ShapedLine:
    """
    One visually laid-out line.

    Attributes:
        runs: Runs in logical order
        ink_rect: Tight box around the visible glyphs
        logical_rect: Advance box (used for advance and width)
        word_space: Extra space added after each space when justified
    """

    runs: Tuple[TextRun, ...]
    ink_rect: Rect
    logical_rect: Rect
    word_space: float = 0.0

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def width(self) -> float:
        return self.logical_rect.width

    @property
    def height(self) -> float:
        return self.logical_rect.height

    @property
    def baseline(self) -> float:
        """Distance from the top of the logical box down to the baseline."""
        return -self.logical_rect.y


@dataclass(frozen=True)
class ShapedLayout:
    """
    Layout handle for one paragraph.

    Attributes:
        text: Source text the layout was built from
        lines: Shaped lines in order
        width: Wrap width in points, None when unconstrained
        alignment: Line alignment inside ``width``
        justify: Whether wrapped lines were justified
        markup: Whether ``text`` was parsed as markup
    """

    text: str
    lines: Tuple[ShapedLine, ...]
    width: Optional[float] = None
    alignment: Alignment = Alignment.LEFT
    justify: bool = False
    markup: bool = False

    @property
    def line_count(self) -> int:
        return len(self.lines)
