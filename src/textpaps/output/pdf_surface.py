"""
Module: output.pdf_surface

Purpose:
    PDF rendering surface built on the ReportLab canvas.

Key Classes:
    - PdfSurface: RenderingSurface writing PDF

Dependencies:
    - reportlab.pdfgen.canvas: PDF generation

Used By:
    - output.create_surface(): "pdf" format
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from reportlab.pdfgen import canvas

from textpaps.engine.models import ShapedLine
from .base import RenderingSurface

logger = logging.getLogger(__name__)


class PdfSurface(RenderingSurface):
    """
    Render pages to PDF.

    Landscape pages are produced by swapping the physical page size,
    so no rotation is involved.

    Example:
        >>> with open("out.pdf", "wb") as f:
        ...     surface = PdfSurface(f, 612, 792)
        ...     surface.begin_page()
        ...     surface.draw_rule(36, 36, 576, 36, 0.1)
        ...     surface.finish()
    """

    format_name = "pdf"

    def __init__(
        self,
        stream: BinaryIO,
        width: float,
        height: float,
        *,
        landscape: bool = False,
        title: str = "",
    ) -> None:
        super().__init__(stream, width, height, landscape=landscape, title=title)
        self._canvas = canvas.Canvas(stream, pagesize=(width, height), invariant=1)
        if title:
            self._canvas.setTitle(title)
        self._canvas.setCreator("textpaps")

    def _begin_page(self, page_index: int, landscape: bool) -> None:
        self._canvas.setPageSize((self.width, self.height))

    def _end_page(self, page_index: int) -> None:
        self._canvas.showPage()

    def _draw_line(self, x: float, y: float, line: ShapedLine) -> None:
        c = self._canvas
        c.saveState()
        # Flip to PDF's bottom-up space at the baseline, then stretch glyphs
        c.translate(x, self.height - y)
        c.scale(self.scale_x, self.scale_y)

        text = c.beginText()
        text.setTextOrigin(0, 0)
        if line.word_space:
            text.setWordSpace(line.word_space / self.scale_x)
        for run in line.runs:
            text.setFont(run.font_name, run.font_size)
            text.textOut(run.text)
        c.drawText(text)
        c.restoreState()

    def _draw_rule(self, x0: float, y0: float, x1: float, y1: float, width: float) -> None:
        c = self._canvas
        c.setLineWidth(width)
        c.line(x0, self.height - y0, x1, self.height - y1)

    def _finish(self) -> None:
        self._canvas.save()
