"""
Module: layout.header

Purpose:
    Draw the running header (or footer) of a page: date on the left,
    document name centred, page number on the right, plus a rule that
    separates the block from the text columns.

Key Functions:
    - draw_page_header(): Draw one header/footer and record its height

Dependencies:
    - engine.base: Shapes the three fragments in the header font
    - output.base: RenderingSurface

Used By:
    - layout.compositor: Once per page
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from textpaps.engine.base import TextLayoutEngine
from textpaps.engine.models import Alignment, ShapedLayout
from .config import LayoutConfig, RunContext

if TYPE_CHECKING:
    from textpaps.output.base import RenderingSurface

logger = logging.getLogger(__name__)

DATE_FORMAT = "%c"
RULE_WIDTH = 0.1


def header_fragments(config: LayoutConfig, run: RunContext, page_index: int) -> List[str]:
    """
    Text of the left, centre and right fragments.

    Example:
        >>> header_fragments(config, run, 3)
        ['Sat Oct 17 09:30:00 2026', 'notes.txt', 'Page 3']
    """
    return [
        run.started_at.strftime(DATE_FORMAT),
        config.filename,
        f"Page {page_index}",
    ]


def draw_page_header(
    surface: "RenderingSurface",
    engine: TextLayoutEngine,
    config: LayoutConfig,
    run: RunContext,
    page_index: int,
    *,
    is_footer: bool = False,
) -> float:
    """
    Draw the header (or footer) of page ``page_index``.

    The block height is the fragment line height. It is stored on
    ``run.header_height`` (or ``run.footer_height``) before the rule is
    drawn, so the compositor sees it for the rest of the page.

    Args:
        surface: Surface of the current page
        engine: Engine used to shape the fragments
        config: Page layout (margins, header font, filename)
        run: Run context receiving the block height
        page_index: 1-based page number shown on the right
        is_footer: Draw at the bottom margin instead of the top

    Returns:
        Height of the header/footer block in points
    """
    layouts: List[ShapedLayout] = [
        engine.shape(text, None, False, False, Alignment.LEFT, font=config.header_font_desc)
        for text in header_fragments(config, run, page_index)
    ]
    left, centre, right = layouts

    first = left.lines[0]
    height = first.height

    if is_footer:
        top = config.page_height - config.bottom_margin - height
        run.footer_height = height
        rule_y = top - config.header_sep / 2
    else:
        top = config.top_margin
        run.header_height = height
        rule_y = config.top_margin + height + config.header_sep / 2

    baseline = top + first.baseline

    surface.set_transform(1.0, 1.0)
    surface.draw_line(config.left_margin, baseline, left, 0)

    centre_width = centre.lines[0].width
    surface.draw_line((config.page_width - centre_width) / 2, baseline, centre, 0)

    right_width = right.lines[0].width
    surface.draw_line(config.page_width - config.right_margin - right_width, baseline, right, 0)

    surface.draw_rule(
        config.left_margin,
        rule_y,
        config.page_width - config.right_margin,
        rule_y,
        RULE_WIDTH,
    )

    kind = "footer" if is_footer else "header"
    logger.debug(f"Drew {kind} for page {page_index} ({height:.2f}pt)")
    return height
