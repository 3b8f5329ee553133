"""
Module: output

Purpose:
    Rendering surfaces for the supported page-description formats.

Key Functions:
    - create_surface(): Pick the surface for an output format

Key Classes:
    - RenderingSurface: Abstract surface
    - PdfSurface / PostScriptSurface / SvgSurface: Concrete formats

Dependencies:
    - reportlab: PDF canvas, standard font names

Used By:
    - controller: One surface per run
"""

from __future__ import annotations

from typing import BinaryIO

from textpaps.errors import ConfigurationError
from .base import RenderingSurface, SurfaceError
from .pdf_surface import PdfSurface
from .ps_surface import PostScriptSurface, escape_ps_string
from .svg_surface import SvgSurface

OUTPUT_FORMATS = ("ps", "pdf", "svg")


def create_surface(
    fmt: str,
    stream: BinaryIO,
    width: float,
    height: float,
    landscape: bool = False,
    **options,
) -> RenderingSurface:
    """
    Create the surface for ``fmt``.

    Args:
        fmt: "ps", "pdf" or "svg"
        stream: Binary output stream
        width: Logical page width in points
        height: Logical page height in points
        landscape: Landscape pages
        **options: Format options (``title`` for all; ``dsc_for``,
            ``cups_rotation``, ``duplex``, ``tumble`` for PostScript)

    Raises:
        ConfigurationError: If the format is unknown
    """
    if fmt == "ps":
        return PostScriptSurface(stream, width, height, landscape=landscape, **options)

    title = options.get("title", "")
    if fmt == "pdf":
        return PdfSurface(stream, width, height, landscape=landscape, title=title)
    if fmt == "svg":
        return SvgSurface(stream, width, height, landscape=landscape, title=title)
    raise ConfigurationError(f"Unknown output format: {fmt!r}")


__all__ = [
    "OUTPUT_FORMATS",
    "create_surface",
    "RenderingSurface",
    "SurfaceError",
    "PdfSurface",
    "PostScriptSurface",
    "SvgSurface",
    "escape_ps_string",
]
