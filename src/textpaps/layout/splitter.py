"""
Module: layout.splitter

Purpose:
    Split the input buffer into paragraphs and shape each one.

Key Functions:
    - split_text_into_paragraphs(): Main entry point

Algorithm:
    Markup mode:
        The whole buffer is a single markup paragraph.
    Plain mode:
    1. Scan forward to the next boundary (newline, form feed, end of input)
    2. Build a paragraph for the span; with CPI set, cut the span at the
       per-column character budget and rescan from the cut
    3. Skip the boundary (a newline right after a form feed belongs to it)

Dependencies:
    - layout.config: LayoutConfig, RunContext
    - engine.base: TextLayoutEngine

Used By:
    - controller: render_text()
    - layout.flattener: Consumes the paragraph arena
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from textpaps.engine.base import TextLayoutEngine
from textpaps.engine.models import Alignment
from textpaps.errors import (
    EncodingConversionError,
    InvalidCharacterError,
    MeasurementError,
)
from .config import LayoutConfig, RunContext
from .models import Paragraph

logger = logging.getLogger(__name__)

NEWLINE = "\n"
FORMFEED = "\f"


def is_invalid_char(char: str) -> bool:
    """True for lone surrogates left behind by undecodable input bytes."""
    return 0xD800 <= ord(char) <= 0xDFFF


def split_text_into_paragraphs(
    text: str,
    config: LayoutConfig,
    run: RunContext,
    engine: TextLayoutEngine,
) -> List[Paragraph]:
    """
    Split ``text`` into shaped paragraphs.

    Args:
        text: Decoded, newline-normalised input
        config: Page layout
        run: Run context (filter mode decides error recovery)
        engine: Engine used to shape every paragraph

    Returns:
        Paragraphs in input order

    Raises:
        InvalidCharacterError: Invalid input outside filter mode
        MeasurementError: Width measurement failed outside filter mode
        EncodingConversionError: Width conversion failed outside filter mode

    Example:
        >>> paras = split_text_into_paragraphs("a\\nb\\f\\nc", config, run, engine)
        >>> [(p.text, p.formfeed) for p in paras]
        [('a', False), ('b', True), ('c', False)]
    """
    alignment = Alignment.RIGHT if config.rtl else Alignment.LEFT

    if config.do_use_markup:
        return [_markup_paragraph(text, config, run, engine, alignment)]

    paragraphs: List[Paragraph] = []
    length = len(text)
    pos = 0

    while pos < length:
        boundary = _find_boundary(text, pos)
        formfeed = boundary < length and text[boundary] == FORMFEED

        try:
            paragraph, cut = _build_paragraph(
                text, pos, boundary, formfeed, config, run, engine, alignment
            )
        except (MeasurementError, EncodingConversionError) as e:
            if not run.filter_mode:
                logger.error(f"Failed to measure paragraph at offset {pos}: {e}")
                raise
            message = f"Skipped paragraph at offset {pos}: {e}"
            logger.warning(message)
            run.warn(message)
            pos = _skip_boundary(text, boundary)
            continue

        paragraphs.append(paragraph)
        if cut is not None:
            pos = cut
        else:
            pos = _skip_boundary(text, boundary)

    logger.info(f"Split input into {len(paragraphs)} paragraphs")
    return paragraphs


def _markup_paragraph(
    text: str,
    config: LayoutConfig,
    run: RunContext,
    engine: TextLayoutEngine,
    alignment: Alignment,
) -> Paragraph:
    retained = _retained_text(text, 0, len(text), run)
    layout = engine.shape(
        retained,
        config.column_width if config.do_wordwrap else None,
        config.do_wordwrap,
        config.do_justify,
        alignment,
        markup=True,
    )
    return Paragraph(start=0, length=len(text), text=retained, formfeed=False, layout=layout)


def _find_boundary(text: str, start: int) -> int:
    """Index of the next newline/form feed at or after ``start``, else len(text)."""
    newline = text.find(NEWLINE, start)
    formfeed = text.find(FORMFEED, start)
    candidates = [i for i in (newline, formfeed) if i >= 0]
    return min(candidates) if candidates else len(text)


def _skip_boundary(text: str, boundary: int) -> int:
    """Offset where scanning resumes after the boundary at ``boundary``."""
    if boundary >= len(text):
        return boundary
    if text[boundary] == FORMFEED and text[boundary + 1:boundary + 2] == NEWLINE:
        return boundary + 2
    return boundary + 1


def _build_paragraph(
    text: str,
    start: int,
    end: int,
    formfeed: bool,
    config: LayoutConfig,
    run: RunContext,
    engine: TextLayoutEngine,
    alignment: Alignment,
) -> Tuple[Paragraph, Optional[int]]:
    """
    Build the paragraph for ``text[start:end]``.

    Returns:
        (paragraph, cut) where ``cut`` is the raw offset where scanning
        resumes after a CPI truncation, or None if the span was used whole.
    """
    kept = [i for i in range(start, end) if not is_invalid_char(text[i])]
    if len(kept) < end - start and not run.filter_mode:
        offset = next(i for i in range(start, end) if is_invalid_char(text[i]))
        logger.error(f"Invalid character in input at offset {offset}")
        raise InvalidCharacterError(offset, text[offset])

    retained = "".join(text[i] for i in kept)

    if config.cpi > 0 and config.do_wordwrap:
        budget = config.cpi_column_budget
        cut: Optional[int] = None
        if len(retained) > budget:
            count = _fitting_prefix(retained, budget, engine)
            if count < len(retained):
                cut = kept[count]
                retained = retained[:count]
                formfeed = False
                end = cut

        _report_dropped(text, start, end)
        layout = engine.shape(retained, None, False, config.do_justify, alignment)
        paragraph = Paragraph(start, end - start, retained, formfeed, layout)
        return paragraph, cut

    _report_dropped(text, start, end)
    layout = engine.shape(
        retained,
        config.column_width if config.do_wordwrap else None,
        config.do_wordwrap,
        config.do_justify,
        alignment,
    )
    return Paragraph(start, end - start, retained, formfeed, layout), None


def _fitting_prefix(text: str, budget: int, engine: TextLayoutEngine) -> int:
    """Longest prefix whose display width fits ``budget`` (at least 1)."""
    widths = engine.measure_char_widths(text)
    used = 0
    count = 0
    for width in widths:
        used += max(width, 0)
        if used > budget:
            break
        count += 1
    return max(count, 1)


def _retained_text(text: str, start: int, end: int, run: RunContext) -> str:
    if not run.filter_mode:
        for i in range(start, end):
            if is_invalid_char(text[i]):
                logger.error(f"Invalid character in input at offset {i}")
                raise InvalidCharacterError(i, text[i])
        return text[start:end]
    _report_dropped(text, start, end)
    return "".join(c for c in text[start:end] if not is_invalid_char(c))


def _report_dropped(text: str, start: int, end: int) -> None:
    for i in range(start, end):
        if is_invalid_char(text[i]):
            logger.warning(f"Invalid character in input at offset {i}, dropped")
