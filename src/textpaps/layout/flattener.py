"""
Module: layout.flattener

Purpose:
    Flatten the paragraph arena into one ordered sequence of line
    records and derive the document-wide vertical stretch.

Key Functions:
    - split_paragraphs_into_lines(): Paragraphs -> LineRecords

Dependencies:
    - layout.models: Paragraph, LineRecord
    - engine.base: TextLayoutEngine (line extents)

Used By:
    - controller: render_text()
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from textpaps.engine.base import TextLayoutEngine
from .config import POINTS_PER_INCH, LayoutConfig, RunContext
from .models import LineRecord, Paragraph

logger = logging.getLogger(__name__)


def split_paragraphs_into_lines(
    paragraphs: Sequence[Paragraph],
    config: LayoutConfig,
    run: RunContext,
    engine: TextLayoutEngine,
) -> List[LineRecord]:
    """
    Turn paragraphs into a flat list of line records.

    Only the last line of a form-feed paragraph carries the form-feed
    flag. With ``do_stretch_chars`` and LPI set, ``run.scale_y`` becomes
    ``(72 / lpi) / max_line_height`` so the tallest line fills one LPI
    advance.

    Args:
        paragraphs: Paragraph arena in input order
        config: Page layout
        run: Run context; receives ``scale_y``
        engine: Engine that shaped the paragraphs

    Returns:
        Line records in paragraph order, then line order
    """
    lines: List[LineRecord] = []
    max_height = 0.0

    for para_index, paragraph in enumerate(paragraphs):
        count = engine.line_count(paragraph.layout)
        for line_index in range(count):
            ink, logical = engine.line_extents(paragraph.layout, line_index)
            lines.append(LineRecord(
                paragraph_index=para_index,
                line_index=line_index,
                ink_rect=ink,
                logical_rect=logical,
                formfeed=paragraph.formfeed and line_index == count - 1,
            ))
            max_height = max(max_height, logical.height)

    if config.do_stretch_chars and config.lpi > 0 and max_height > 0:
        run.scale_y = (POINTS_PER_INCH / config.lpi) / max_height
        logger.debug(f"Vertical stretch {run.scale_y:.4f} (max line height {max_height:.2f}pt)")

    logger.info(f"Flattened {len(paragraphs)} paragraphs into {len(lines)} lines")
    return lines
