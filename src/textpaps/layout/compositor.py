"""
Module: layout.compositor

Purpose:
    Place the flat line sequence into columns and pages, driving the
    rendering surface as it goes. Lines are never moved once drawn.

Key Functions:
    - output_pages(): Main composition function
    - next_transition(): Column/page break decision for one line

Algorithm:
    For every line, in order:
    1. Break if the line would reach the column bottom or the previous
       line ended a form-feed paragraph (an oversize line on an empty
       column is placed alone instead)
    2. A break moves to the next column; past the last column the page
       is ejected and a new one begun (with its header/footer)
    3. Draw the line at its column position and advance the offset by
       the LPI advance or the line's own height

Dependencies:
    - layout.header: Header/footer per page
    - output.base: RenderingSurface

Used By:
    - controller: render_text()
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, List, Sequence

from textpaps.engine.base import TextLayoutEngine
from .config import LayoutConfig, RunContext
from .header import RULE_WIDTH, draw_page_header
from .models import (
    CompositionResult,
    CompositorState,
    LinePlacement,
    LineRecord,
    PagePlan,
    Paragraph,
)

if TYPE_CHECKING:
    from textpaps.output.base import RenderingSurface

logger = logging.getLogger(__name__)


class Transition(Enum):
    """What happens before the next line is placed."""

    STAY = "stay"
    NEXT_COLUMN = "next_column"
    NEXT_PAGE = "next_page"


def next_transition(
    state: CompositorState,
    line_height: float,
    available_height: float,
    num_columns: int,
) -> Transition:
    """
    Decide whether the next line needs a column or page break.

    Args:
        state: Current cursor (not modified)
        line_height: Logical height of the line about to be placed
        available_height: Column height left after header/footer
        num_columns: Columns per page

    Returns:
        Transition to apply before placing the line

    Example:
        >>> state = CompositorState(offset=80, column_used=True)
        >>> next_transition(state, 40, 100, 1)
        <Transition.NEXT_PAGE: 'next_page'>
    """
    overflow = state.offset + line_height >= available_height
    if state.prev_formfeed or (overflow and state.column_used):
        if state.column + 1 >= num_columns:
            return Transition.NEXT_PAGE
        return Transition.NEXT_COLUMN
    return Transition.STAY


def column_x(config: LayoutConfig, column: int, line_width: float) -> float:
    """Left edge of a line of ``line_width`` in logical column ``column``."""
    physical = config.num_columns - 1 - column if config.rtl else column
    left = config.left_margin + physical * (config.column_width + config.gutter_width)
    if config.rtl:
        return left + config.column_width - line_width
    return left


def output_pages(
    lines: Sequence[LineRecord],
    paragraphs: Sequence[Paragraph],
    surface: "RenderingSurface",
    engine: TextLayoutEngine,
    config: LayoutConfig,
    run: RunContext,
) -> CompositionResult:
    """
    Composite ``lines`` onto pages.

    Always produces at least one page, and always ends the last page.

    Args:
        lines: Flat line sequence from the flattener
        paragraphs: Paragraph arena the lines point into
        surface: Output surface (pages are begun and ended here)
        engine: Engine for header/footer fragments
        config: Page layout
        run: Run context (scales, header/footer heights)

    Returns:
        CompositionResult with one PagePlan per page
    """
    state = CompositorState()
    warnings: List[str] = []
    pages: List[PagePlan] = []
    placements: List[LinePlacement] = []
    fixed_advance = config.line_advance

    _start_page(surface, engine, config, run, state.page)

    for line in lines:
        available = config.column_height - run.header_height - run.footer_height
        transition = next_transition(state, line.logical_height, available, config.num_columns)

        if transition is Transition.NEXT_PAGE:
            pages.append(_page_plan(state, placements))
            placements = []
            surface.end_page()
            state.page += 1
            state.column = 0
            state.reset_column()
            _start_page(surface, engine, config, run, state.page)
            logger.debug(f"Page break before page {state.page}")
        elif transition is Transition.NEXT_COLUMN:
            state.column += 1
            state.reset_column()
            _eject_column(surface, config, run, state.column)
            logger.debug(f"Column break to column {state.column} on page {state.page}")

        available = config.column_height - run.header_height - run.footer_height
        if not state.column_used and line.logical_height >= available:
            message = (
                f"Line taller than the column on page {state.page}: "
                f"{line.logical_height:.1f}pt needed, {available:.1f}pt available"
            )
            logger.warning(message)
            warnings.append(message)

        placements.append(_draw_line(surface, paragraphs, config, run, state, line))

        state.offset += fixed_advance if fixed_advance is not None else line.logical_height
        state.column_used = True
        state.prev_formfeed = line.formfeed

    pages.append(_page_plan(state, placements))
    surface.end_page()

    run.warnings.extend(warnings)
    logger.info(f"Composited {len(lines)} lines onto {len(pages)} pages")
    return CompositionResult(pages=tuple(pages), warnings=tuple(warnings))


def _start_page(
    surface: "RenderingSurface",
    engine: TextLayoutEngine,
    config: LayoutConfig,
    run: RunContext,
    page: int,
) -> None:
    surface.begin_page(config.do_landscape)
    run.header_height = 0.0
    run.footer_height = 0.0
    if config.do_draw_header:
        draw_page_header(surface, engine, config, run, page)
    if config.do_draw_footer:
        draw_page_header(surface, engine, config, run, page, is_footer=True)
    surface.set_transform(1.0, run.scale_y)


def _eject_column(
    surface: "RenderingSurface",
    config: LayoutConfig,
    run: RunContext,
    column: int,
) -> None:
    """Draw the separator in front of logical column ``column``."""
    if not config.do_separation_line:
        return

    gutter = config.num_columns - column if config.rtl else column
    x = (
        config.left_margin
        + gutter * config.column_width
        + (gutter - 0.5) * config.gutter_width
    )
    y_top = config.top_margin + run.header_height + config.header_reserve / 2
    y_bottom = config.page_height - config.bottom_margin - run.footer_height - config.footer_reserve / 2
    surface.draw_rule(x, y_top, x, y_bottom, RULE_WIDTH)


def _draw_line(
    surface: "RenderingSurface",
    paragraphs: Sequence[Paragraph],
    config: LayoutConfig,
    run: RunContext,
    state: CompositorState,
    line: LineRecord,
) -> LinePlacement:
    x = column_x(config, state.column, line.logical_width)
    column_top = config.top_margin + run.header_height + config.header_reserve
    y = column_top + state.offset + (-line.logical_rect.y) * run.scale_y

    layout = paragraphs[line.paragraph_index].layout
    surface.draw_line(x, y, layout, line.line_index)
    return LinePlacement(line=line, column=state.column, x=x, y=y)


def _page_plan(state: CompositorState, placements: List[LinePlacement]) -> PagePlan:
    columns = state.column + 1 if placements else 0
    return PagePlan(index=state.page, placements=tuple(placements), columns_used=columns)
