"""
Module: engine.reportlab_engine

Purpose:
    Text layout engine built on ReportLab font metrics.
    Measures text, breaks paragraphs into lines (word first, then
    character) and reports per-line ink/logical extents.

Key Classes:
    - ReportLabLayoutEngine: TextLayoutEngine implementation

Key Functions:
    - char_display_width(): Terminal-style display width of one character

Algorithm:
    1. Split the (optionally marked-up) text into styled cells, one per
       character, expanding tabs to 8-column stops
    2. Cut the cells into hard lines at newlines
    3. Greedy wrap each hard line at spaces; words wider than the width
       are split between characters
    4. Merge cells of a line into same-font runs and compute extents

Dependencies:
    - reportlab.pdfbase.pdfmetrics: String widths, ascent/descent
    - unicodedata (std): Display widths

Used By:
    - controller: Default engine for a run
    - layout.header: Header fragments
"""

from __future__ import annotations

import logging
import string
import unicodedata
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from reportlab.pdfbase import pdfmetrics

from textpaps.errors import EncodingConversionError, MeasurementError
from .base import TextLayoutEngine
from .fonts import DEFAULT_FONT, FontSpec, parse_font_desc, resolve_font_name
from .markup import parse_markup
from .models import Alignment, Rect, ShapedLayout, ShapedLine, TextRun

logger = logging.getLogger(__name__)

LINE_SPACING = 1.2
TAB_WIDTH = 8

_APPROX_SAMPLE = string.ascii_letters


@dataclass(frozen=True)
class _Cell:
    char: str
    font_name: str
    font_size: float
    width: float

    @property
    def is_space(self) -> bool:
        return self.char.isspace() and self.char != "\xa0"


# (cells, fallback font) per hard line
_HardLine = Tuple[List[_Cell], Tuple[str, float]]


def char_display_width(char: str) -> int:
    """
    Display width of ``char`` in terminal cells.

    Example:
        >>> [char_display_width(c) for c in "a中́"]
        [1, 2, 0]
    """
    cp = ord(char)
    if cp == 0:
        return 0
    if cp < 32 or 0x7F <= cp < 0xA0:
        return -1
    if unicodedata.combining(char) or unicodedata.category(char) in ("Mn", "Me", "Cf"):
        return 0
    if 0x1160 <= cp <= 0x11FF:
        # Hangul medial vowels and final consonants join the previous syllable
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


class ReportLabLayoutEngine(TextLayoutEngine):
    """
    Text layout engine over ReportLab fonts.

    Args:
        font_desc: Body font descriptor (default "Monospace 12")
        line_spacing: Line box height as a multiple of the font size
        tab_width: Tab stop interval in characters

    Example:
        >>> engine = ReportLabLayoutEngine("Monospace 12")
        >>> layout = engine.shape("hello world", 40, True, False, Alignment.LEFT)
        >>> [line.text for line in layout.lines]
        ['hello', 'world']
    """

    def __init__(
        self,
        font_desc: str = DEFAULT_FONT,
        *,
        line_spacing: float = LINE_SPACING,
        tab_width: int = TAB_WIDTH,
    ) -> None:
        self._font = parse_font_desc(font_desc)
        self._line_spacing = line_spacing
        self._tab_width = tab_width
        self._names: Dict[FontSpec, str] = {}
        self._widths: Dict[Tuple[str, str, float], float] = {}
        # Resolve eagerly so a bad descriptor fails before any output
        self._font_name(self._font)

    @property
    def font(self) -> FontSpec:
        return self._font

    @property
    def font_size(self) -> float:
        return self._font.size

    def set_font_size(self, size: float) -> None:
        if size <= 0:
            raise ValueError(f"font size must be positive: {size}")
        self._font = self._font.with_size(size)
        logger.debug(f"Body font size set to {size:.3f}pt")

    def approximate_char_width(self) -> float:
        name = self._font_name(self._font)
        size = self._font.size
        text_width = pdfmetrics.stringWidth(_APPROX_SAMPLE, name, size) / len(_APPROX_SAMPLE)
        digit_width = max(pdfmetrics.stringWidth(d, name, size) for d in string.digits)
        return max(text_width, digit_width)

    def measure_char_widths(self, text: str) -> List[int]:
        try:
            text.encode("utf-32-le")
        except UnicodeEncodeError as e:
            raise EncodingConversionError(
                f"Unable to convert text to UCS-4 at offset {e.start}"
            ) from e
        try:
            return [char_display_width(char) for char in text]
        except (TypeError, ValueError) as e:
            raise MeasurementError(f"Unable to measure character widths: {e}") from e

    def shape(
        self,
        text: str,
        width: Optional[float],
        wrap: bool,
        justify: bool,
        alignment: Alignment,
        *,
        markup: bool = False,
        font: Optional[str] = None,
    ) -> ShapedLayout:
        base = self._font if font is None else parse_font_desc(font)
        if markup:
            segments = parse_markup(text, base)
        else:
            segments = [(text, base)]

        wrap_width = width if wrap else None
        lines: List[ShapedLine] = []
        for cells, fallback in self._hard_lines(segments, base):
            if wrap_width is None:
                spans = [(0, len(cells), False)]
            else:
                spans = _wrap(cells, wrap_width)
            for start, end, soft in spans:
                lines.append(self._build_line(
                    cells[start:end],
                    fallback,
                    soft=soft,
                    width=wrap_width,
                    justify=justify,
                ))

        return ShapedLayout(
            text=text,
            lines=tuple(lines),
            width=wrap_width,
            alignment=alignment,
            justify=justify,
            markup=markup,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _font_name(self, spec: FontSpec) -> str:
        name = self._names.get(spec)
        if name is None:
            name = resolve_font_name(spec)
            self._names[spec] = name
        return name

    def _cell(self, char: str, font_name: str, size: float) -> _Cell:
        key = (char, font_name, size)
        width = self._widths.get(key)
        if width is None:
            width = pdfmetrics.stringWidth(char, font_name, size)
            self._widths[key] = width
        return _Cell(char, font_name, size, width)

    def _hard_lines(
        self,
        segments: Sequence[Tuple[str, FontSpec]],
        base: FontSpec,
    ) -> Iterator[_HardLine]:
        cells: List[_Cell] = []
        column = 0
        current = (self._font_name(base), base.size)

        for text, spec in segments:
            name = self._font_name(spec)
            current = (name, spec.size)
            for char in text:
                if char == "\n":
                    yield cells, current
                    cells = []
                    column = 0
                elif char == "\t":
                    pad = self._tab_width - column % self._tab_width
                    cells.extend(self._cell(" ", name, spec.size) for _ in range(pad))
                    column += pad
                elif ord(char) < 32:
                    # Other control characters have no glyph
                    continue
                else:
                    cells.append(self._cell(char, name, spec.size))
                    column += 1

        yield cells, current

    def _metrics(self, font_name: str, size: float) -> Tuple[float, float, float]:
        """Return (ascent, descent, baseline offset) for a font."""
        ascent, descent = pdfmetrics.getAscentDescent(font_name, size)
        box = size * self._line_spacing
        baseline = (box - (ascent - descent)) / 2 + ascent
        return ascent, descent, baseline

    def _build_line(
        self,
        cells: List[_Cell],
        fallback: Tuple[str, float],
        *,
        soft: bool,
        width: Optional[float],
        justify: bool,
    ) -> ShapedLine:
        runs: List[TextRun] = []
        for cell in cells:
            last = runs[-1] if runs else None
            if last and last.font_name == cell.font_name and last.font_size == cell.font_size:
                runs[-1] = TextRun(
                    last.text + cell.char, last.font_name, last.font_size, last.width + cell.width
                )
            else:
                runs.append(TextRun(cell.char, cell.font_name, cell.font_size, cell.width))

        fonts = {(run.font_name, run.font_size) for run in runs} or {fallback}
        metrics = [self._metrics(name, size) for name, size in fonts]
        height = max(size * self._line_spacing for _, size in fonts)
        ascent = max(m[0] for m in metrics)
        descent = min(m[1] for m in metrics)
        baseline = max(m[2] for m in metrics)

        natural = sum(cell.width for cell in cells)
        logical_width = natural
        word_space = 0.0
        if justify and soft and width is not None and natural < width:
            spaces = sum(1 for cell in cells if cell.char == " ")
            if spaces:
                word_space = (width - natural) / spaces
                logical_width = width

        leading = _edge_space_width(cells)
        trailing = _edge_space_width(reversed(cells)) if leading < natural else 0.0
        ink_width = max(0.0, logical_width - leading - trailing)

        return ShapedLine(
            runs=tuple(runs),
            ink_rect=Rect(leading, -ascent, ink_width, ascent - descent),
            logical_rect=Rect(0.0, -baseline, logical_width, height),
            word_space=word_space,
        )


def _edge_space_width(cells) -> float:
    total = 0.0
    for cell in cells:
        if not cell.is_space:
            break
        total += cell.width
    return total


def _tokens(cells: Sequence[_Cell]) -> Iterator[Tuple[int, int, bool]]:
    """Yield (start, end, is_space) for runs of spaces and runs of non-spaces."""
    start = 0
    while start < len(cells):
        is_space = cells[start].is_space
        end = start + 1
        while end < len(cells) and cells[end].is_space == is_space:
            end += 1
        yield start, end, is_space
        start = end


def _span_width(cells: Sequence[_Cell], start: int, end: int) -> float:
    return sum(cell.width for cell in cells[start:end])


def _wrap(cells: Sequence[_Cell], width: float) -> List[Tuple[int, int, bool]]:
    """
    Greedy word-then-character wrap.

    Returns:
        (start, end, soft) slices; ``soft`` marks lines ended by wrapping.
        Spaces at a soft break are dropped.
    """
    spans: List[Tuple[int, int, bool]] = []
    line_start = 0
    content_end = 0
    line_width = 0.0
    has_word = False
    dropping = False

    for start, end, is_space in _tokens(cells):
        if is_space:
            if dropping:
                line_start = content_end = end
                continue
            line_width += _span_width(cells, start, end)
            if not has_word:
                content_end = end
            continue

        pos = start
        while pos < end:
            remaining = _span_width(cells, pos, end)
            if line_width + remaining <= width:
                line_width += remaining
                content_end = end
                has_word = True
                dropping = False
                break

            if has_word:
                spans.append((line_start, content_end, True))
                line_start = content_end = pos
                line_width = 0.0
                has_word = False
                dropping = True
                continue

            # Word alone is too wide: take what fits, at least one character
            cut = pos
            used = line_width
            while cut < end and (cut == pos or used + cells[cut].width <= width):
                used += cells[cut].width
                cut += 1
            spans.append((line_start, cut, True))
            line_start = content_end = pos = cut
            line_width = 0.0
            dropping = True

    if line_start < len(cells) or not spans:
        spans.append((line_start, len(cells), False))
    else:
        start, end, _ = spans[-1]
        spans[-1] = (start, end, False)
    return spans
