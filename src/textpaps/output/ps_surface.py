"""
Module: output.ps_surface

Purpose:
    DSC-conforming PostScript rendering surface.
    Writes pages as they are finished; page count and font list go to
    the trailer (``(atend)``).

Key Classes:
    - PostScriptSurface: RenderingSurface writing PostScript level 2

Notes:
    Standard Type 1 fonts are re-encoded to ISOLatin1. Characters outside
    Latin-1 print as '?'. TrueType fonts are not embedded; lines set in
    them fall back to Courier.

    Landscape keeps the portrait physical page and rotates the content
    (``%%PageOrientation: Landscape``).

Dependencies:
    - reportlab.pdfbase.pdfmetrics: Standard font names

Used By:
    - output.create_surface(): "ps" format
"""

from __future__ import annotations

import logging
from typing import BinaryIO, List, Optional, Set

from reportlab.pdfbase import pdfmetrics

from textpaps.engine.models import ShapedLine
from .base import RenderingSurface

logger = logging.getLogger(__name__)

FALLBACK_FONT = "Courier"
LATIN1_SUFFIX = "-Latin1"

PS_PROLOG = """%%BeginProlog
%%BeginResource: procset textpaps-procs 0 0
/reencode-latin1 {
  exch findfont dup length dict begin
  { 1 index /FID ne { def } { pop pop } ifelse } forall
  /Encoding ISOLatin1Encoding def
  currentdict end definefont pop
} bind def
%%EndResource
%%EndProlog
"""


def escape_ps_string(text: str) -> str:
    """
    Escape ``text`` for a PostScript string literal.

    Example:
        >>> escape_ps_string("f(x) é€")
        "f\\(x\\) \\351?"
    """
    out: List[str] = []
    for char in text:
        code = ord(char)
        if char in "\\()":
            out.append("\\" + char)
        elif 32 <= code < 127:
            out.append(char)
        elif code < 256:
            out.append(f"\\{code:03o}")
        else:
            out.append("?")
    return "".join(out)


def _num(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


class PostScriptSurface(RenderingSurface):
    """
    Render pages to PostScript.

    Args:
        stream: Binary output stream
        width: Logical page width in points
        height: Logical page height in points
        landscape: Rotate content onto a portrait physical page
        title: ``%%Title`` value
        dsc_for: Optional ``%%For`` value (print filter user)
        cups_rotation: Emit ``%%cupsRotation: 0``
        duplex: Emit a duplex ``setpagedevice`` request
        tumble: Short-edge binding for duplex
    """

    format_name = "ps"

    def __init__(
        self,
        stream: BinaryIO,
        width: float,
        height: float,
        *,
        landscape: bool = False,
        title: str = "",
        dsc_for: Optional[str] = None,
        cups_rotation: bool = False,
        duplex: bool = False,
        tumble: bool = False,
    ) -> None:
        super().__init__(stream, width, height, landscape=landscape, title=title)
        if landscape:
            self.physical_width, self.physical_height = height, width
        else:
            self.physical_width, self.physical_height = width, height
        self._fonts: Set[str] = set()
        self._fallback_logged: Set[str] = set()
        self._write_header(dsc_for, cups_rotation, duplex, tumble)

    def _write(self, text: str) -> None:
        self.stream.write(text.encode("latin-1"))

    def _write_header(
        self,
        dsc_for: Optional[str],
        cups_rotation: bool,
        duplex: bool,
        tumble: bool,
    ) -> None:
        lines = [
            "%!PS-Adobe-3.0",
            "%%Creator: textpaps",
            f"%%Title: {escape_ps_string(self.title)}",
        ]
        if dsc_for:
            lines.append(f"%%For: {escape_ps_string(dsc_for)}")
        if cups_rotation:
            lines.append("%%cupsRotation: 0")
        lines += [
            "%%LanguageLevel: 2",
            f"%%BoundingBox: 0 0 {round(self.physical_width)} {round(self.physical_height)}",
            f"%%Orientation: {'Landscape' if self.landscape else 'Portrait'}",
            "%%DocumentNeededResources: (atend)",
            "%%Pages: (atend)",
            "%%PageOrder: Ascend",
            "%%EndComments",
        ]
        self._write("\n".join(lines) + "\n")
        self._write(PS_PROLOG)

        setup = ["%%BeginSetup"]
        if duplex:
            setup.append(
                f"[{{<< /Duplex true /Tumble {'true' if tumble else 'false'} >> setpagedevice}}"
                " stopped cleartomark"
            )
        setup.append("%%EndSetup")
        self._write("\n".join(setup) + "\n")

    def _ps_font(self, font_name: str) -> str:
        if font_name not in pdfmetrics.standardFonts:
            if font_name not in self._fallback_logged:
                logger.warning(f"Font {font_name} is not embeddable in PostScript, using {FALLBACK_FONT}")
                self._fallback_logged.add(font_name)
            font_name = FALLBACK_FONT
        if font_name not in self._fonts:
            self._fonts.add(font_name)
            self._write(f"/{font_name}{LATIN1_SUFFIX} /{font_name} reencode-latin1\n")
        return font_name + LATIN1_SUFFIX

    def _begin_page(self, page_index: int, landscape: bool) -> None:
        orientation = "Landscape" if self.landscape else "Portrait"
        self._write(
            f"%%Page: {page_index} {page_index}\n"
            f"%%PageOrientation: {orientation}\n"
            "%%BeginPageSetup\n"
            "gsave\n"
        )
        if self.landscape:
            self._write(
                f"{_num(self.physical_width)} {_num(self.physical_height)} translate -90 rotate\n"
            )
        else:
            self._write(f"0 {_num(self.physical_height)} translate\n")
        self._write("%%EndPageSetup\n")

    def _end_page(self, page_index: int) -> None:
        self._write("grestore\nshowpage\n")

    def _draw_line(self, x: float, y: float, line: ShapedLine) -> None:
        out = [f"gsave {_num(x)} {_num(-y)} translate"]
        if self.scale_x != 1.0 or self.scale_y != 1.0:
            out.append(f"{_num(self.scale_x)} {_num(self.scale_y)} scale")
        out.append("0 0 moveto")
        for run in line.runs:
            font = self._ps_font(run.font_name)
            out.append(f"/{font} {_num(run.font_size)} selectfont")
            literal = escape_ps_string(run.text)
            if line.word_space:
                ws = line.word_space / self.scale_x
                out.append(f"{_num(ws)} 0 32 ({literal}) widthshow")
            else:
                out.append(f"({literal}) show")
        out.append("grestore")
        self._write(" ".join(out) + "\n")

    def _draw_rule(self, x0: float, y0: float, x1: float, y1: float, width: float) -> None:
        self._write(
            f"{_num(width)} setlinewidth newpath "
            f"{_num(x0)} {_num(-y0)} moveto {_num(x1)} {_num(-y1)} lineto stroke\n"
        )

    def _finish(self) -> None:
        trailer = ["%%Trailer"]
        fonts = sorted(self._fonts)
        if fonts:
            trailer.append("%%DocumentNeededResources: font " + fonts[0])
            trailer.extend(f"%%+ font {name}" for name in fonts[1:])
        else:
            trailer.append("%%DocumentNeededResources:")
        trailer.append(f"%%Pages: {self.page_count}")
        trailer.append("%%EOF")
        self._write("\n".join(trailer) + "\n")
        self.stream.flush()
