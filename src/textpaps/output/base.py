"""
Module: output.base

Purpose:
    Abstract rendering surface the compositor draws through.

Key Classes:
    - RenderingSurface: Page lifecycle, line/rule drawing, finishing

Coordinates:
    Points from the top-left corner of the (logical) page, y growing
    downward. ``draw_line`` receives the baseline position of the line.

Used By:
    - layout.compositor, layout.header
    - output.pdf_surface, output.ps_surface, output.svg_surface
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO

from textpaps.engine.models import ShapedLayout, ShapedLine

logger = logging.getLogger(__name__)


class SurfaceError(Exception):
    """Raised when a surface is driven out of order."""
    pass


class RenderingSurface(ABC):
    """
    Base class for output surfaces.

    Subclasses implement the ``_``-prefixed hooks; the public methods
    keep the page bookkeeping shared by every format.

    Args:
        stream: Binary stream receiving the document
        width: Logical page width in points (landscape already applied)
        height: Logical page height in points
        landscape: Pages are landscape
        title: Document title for metadata
    """

    format_name = ""

    def __init__(
        self,
        stream: BinaryIO,
        width: float,
        height: float,
        *,
        landscape: bool = False,
        title: str = "",
    ) -> None:
        self.stream = stream
        self.width = width
        self.height = height
        self.landscape = landscape
        self.title = title
        self.scale_x = 1.0
        self.scale_y = 1.0
        self._page_count = 0
        self._in_page = False
        self._finished = False

    @property
    def page_count(self) -> int:
        """Number of pages begun so far."""
        return self._page_count

    @property
    def in_page(self) -> bool:
        return self._in_page

    def begin_page(self, landscape: bool = False) -> None:
        if self._finished:
            raise SurfaceError("Surface already finished")
        if self._in_page:
            raise SurfaceError("begin_page() called twice without end_page()")
        self._page_count += 1
        self._in_page = True
        self._begin_page(self._page_count, landscape)

    def end_page(self) -> None:
        if not self._in_page:
            raise SurfaceError("end_page() called outside a page")
        self._end_page(self._page_count)
        self._in_page = False

    def set_transform(self, scale_x: float, scale_y: float) -> None:
        """Stretch glyphs about their origin; positions stay in page points."""
        self.scale_x = scale_x
        self.scale_y = scale_y

    def draw_line(self, x: float, y: float, layout: ShapedLayout, line_index: int) -> None:
        if not self._in_page:
            raise SurfaceError("draw_line() called outside a page")
        line = layout.lines[line_index]
        if line.runs:
            self._draw_line(x, y, line)

    def draw_rule(self, x0: float, y0: float, x1: float, y1: float, width: float) -> None:
        if not self._in_page:
            raise SurfaceError("draw_rule() called outside a page")
        self._draw_rule(x0, y0, x1, y1, width)

    def finish(self) -> None:
        """Write the document trailer and flush the stream."""
        if self._finished:
            return
        if self._in_page:
            self.end_page()
        self._finish()
        self._finished = True
        logger.info(f"Wrote {self._page_count} {self.format_name} pages")

    # ------------------------------------------------------------------
    # Format hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _begin_page(self, page_index: int, landscape: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def _end_page(self, page_index: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def _draw_line(self, x: float, y: float, line: ShapedLine) -> None:
        raise NotImplementedError

    @abstractmethod
    def _draw_rule(self, x0: float, y0: float, x1: float, y1: float, width: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def _finish(self) -> None:
        raise NotImplementedError
