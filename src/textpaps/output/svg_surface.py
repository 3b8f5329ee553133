"""
Module: output.svg_surface

Purpose:
    SVG rendering surface. All pages go into one SVG document, stacked
    top to bottom, one <g> per page.

Key Classes:
    - SvgSurface: RenderingSurface writing SVG

Dependencies:
    - xml.etree.ElementTree (std): Document tree and serialisation

Used By:
    - output.create_surface(): "svg" format
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import BinaryIO, Dict, Optional

from textpaps.engine.models import ShapedLine
from .base import RenderingSurface

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

_GENERIC_FAMILIES = {
    "Courier": "monospace",
    "Helvetica": "sans-serif",
    "Times": "serif",
}


def _fmt(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


def font_attributes(font_name: str) -> Dict[str, str]:
    """
    CSS font attributes for a ReportLab font name.

    Example:
        >>> font_attributes("Courier-BoldOblique")
        {'font-family': 'Courier, monospace', 'font-weight': 'bold', 'font-style': 'italic'}
    """
    family, _, style = font_name.partition("-")
    attrs = {"font-family": family}
    generic = _GENERIC_FAMILIES.get(family)
    if generic:
        attrs["font-family"] = f"{family}, {generic}"
    if "Bold" in style:
        attrs["font-weight"] = "bold"
    if "Italic" in style or "Oblique" in style:
        attrs["font-style"] = "italic"
    return attrs


class SvgSurface(RenderingSurface):
    """
    Render pages to a single SVG document.

    The document is serialised by ``finish()``, once the page count is
    known. Landscape swaps the page size, like the PDF surface.
    """

    format_name = "svg"

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
        ET.register_namespace("", SVG_NS)
        self._root = ET.Element(f"{{{SVG_NS}}}svg", {"version": "1.1"})
        if title:
            ET.SubElement(self._root, f"{{{SVG_NS}}}title").text = title
        self._page: Optional[ET.Element] = None

    def _begin_page(self, page_index: int, landscape: bool) -> None:
        top = (page_index - 1) * self.height
        self._page = ET.SubElement(self._root, f"{{{SVG_NS}}}g", {
            "id": f"page{page_index}",
            "transform": f"translate(0,{_fmt(top)})",
        })
        ET.SubElement(self._page, f"{{{SVG_NS}}}rect", {
            "x": "0",
            "y": "0",
            "width": _fmt(self.width),
            "height": _fmt(self.height),
            "fill": "white",
        })

    def _end_page(self, page_index: int) -> None:
        self._page = None

    def _draw_line(self, x: float, y: float, line: ShapedLine) -> None:
        attrs = {
            "x": "0",
            "y": "0",
            "transform": f"translate({_fmt(x)},{_fmt(y)})",
            "{http://www.w3.org/XML/1998/namespace}space": "preserve",
        }
        if self.scale_x != 1.0 or self.scale_y != 1.0:
            attrs["transform"] += f" scale({_fmt(self.scale_x)},{_fmt(self.scale_y)})"
        if line.word_space:
            attrs["word-spacing"] = _fmt(line.word_space / self.scale_x)

        text = ET.SubElement(self._page, f"{{{SVG_NS}}}text", attrs)
        for run in line.runs:
            span_attrs = font_attributes(run.font_name)
            span_attrs["font-size"] = _fmt(run.font_size)
            span = ET.SubElement(text, f"{{{SVG_NS}}}tspan", span_attrs)
            span.text = run.text

    def _draw_rule(self, x0: float, y0: float, x1: float, y1: float, width: float) -> None:
        ET.SubElement(self._page, f"{{{SVG_NS}}}line", {
            "x1": _fmt(x0),
            "y1": _fmt(y0),
            "x2": _fmt(x1),
            "y2": _fmt(y1),
            "stroke": "black",
            "stroke-width": _fmt(width),
        })

    def _finish(self) -> None:
        total_height = self.height * max(self.page_count, 1)
        self._root.set("width", f"{_fmt(self.width)}pt")
        self._root.set("height", f"{_fmt(total_height)}pt")
        self._root.set("viewBox", f"0 0 {_fmt(self.width)} {_fmt(total_height)}")

        tree = ET.ElementTree(self._root)
        tree.write(self.stream, encoding="utf-8", xml_declaration=True)
        self.stream.flush()
