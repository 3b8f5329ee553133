"""
Module: engine.fonts

Purpose:
    Parse Pango-style font descriptors ("Monospace Bold 12") and map
    them onto fonts ReportLab can measure and draw.

Key Functions:
    - parse_font_desc(): Descriptor string -> FontSpec
    - resolve_font_name(): FontSpec -> registered ReportLab font name

Dependencies:
    - reportlab.pdfbase: Standard fonts, TrueType registration
    - reportlab.lib.fonts: Family/bold/italic mapping

Used By:
    - engine.reportlab_engine: Body and header fonts
    - engine.markup: Span font attributes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from reportlab.lib.fonts import tt2ps
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from textpaps.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_FAMILY = "Monospace"
DEFAULT_SIZE = 12.0
DEFAULT_FONT = "Monospace 12"
DEFAULT_HEADER_FONT = "Monospace Bold 12"

FAMILY_ALIASES = {
    "monospace": "courier",
    "mono": "courier",
    "sans": "helvetica",
    "sans-serif": "helvetica",
    "serif": "times",
}

_BOLD_WORDS = {"bold", "heavy", "semi-bold", "semibold", "ultra-bold"}
_ITALIC_WORDS = {"italic", "oblique"}
_PLAIN_WORDS = {"regular", "normal", "book", "roman", "medium"}
_TRUETYPE_SUFFIXES = (".ttf", ".otf", ".ttc")


@dataclass(frozen=True)
class FontSpec:
    """
    Font request (immutable).

    Attributes:
        family: Family name, alias, ReportLab font name or TrueType path
        size: Size in points
        bold: Bold weight requested
        italic: Italic/oblique style requested
    """

    family: str = DEFAULT_FAMILY
    size: float = DEFAULT_SIZE
    bold: bool = False
    italic: bool = False

    def with_size(self, size: float) -> "FontSpec":
        return replace(self, size=size)

    def styled(self, *, bold: bool | None = None, italic: bool | None = None) -> "FontSpec":
        return replace(
            self,
            bold=self.bold if bold is None else bold,
            italic=self.italic if italic is None else italic,
        )


def parse_font_desc(desc: str, default_size: float = DEFAULT_SIZE) -> FontSpec:
    """
    Parse a Pango-style font descriptor.

    The size is the trailing number, style words precede it and whatever
    is left is the family.

    Args:
        desc: Descriptor like "Monospace Bold 12" or "/fonts/Mono.ttf 10"
        default_size: Size used when the descriptor has none

    Returns:
        FontSpec for the descriptor

    Example:
        >>> parse_font_desc("Sans Bold Italic 10")
        FontSpec(family='Sans', size=10.0, bold=True, italic=True)
    """
    tokens = desc.replace(",", " ").split()
    size = default_size
    bold = italic = False

    if tokens:
        try:
            size = float(tokens[-1].removesuffix("px"))
            tokens = tokens[:-1]
        except ValueError:
            pass

    while tokens:
        word = tokens[-1].lower()
        if word in _BOLD_WORDS:
            bold = True
        elif word in _ITALIC_WORDS:
            italic = True
        elif word not in _PLAIN_WORDS:
            break
        tokens = tokens[:-1]

    if size <= 0:
        raise ConfigurationError(f"Font size must be positive in {desc!r}")

    family = " ".join(tokens) or DEFAULT_FAMILY
    return FontSpec(family=family, size=size, bold=bold, italic=italic)


def resolve_font_name(spec: FontSpec) -> str:
    """
    Return the ReportLab font name that renders ``spec``.

    TrueType paths are registered on first use under their file stem.
    Style requests are honoured for the standard families only.

    Raises:
        ConfigurationError: If the family is unknown or the file unreadable
    """
    family = spec.family
    if family.lower().endswith(_TRUETYPE_SUFFIXES):
        return _register_truetype(Path(family))

    key = FAMILY_ALIASES.get(family.lower(), family.lower())
    try:
        return tt2ps(key, int(spec.bold), int(spec.italic))
    except ValueError:
        pass

    if family in pdfmetrics.standardFonts or family in pdfmetrics.getRegisteredFontNames():
        return family

    raise ConfigurationError(f"Unknown font family: {family!r}")


def _register_truetype(path: Path) -> str:
    name = path.stem
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        pdfmetrics.registerFont(TTFont(name, str(path)))
    except Exception as e:
        raise ConfigurationError(f"Failed to load font file: {path}") from e
    logger.debug(f"Registered TrueType font {name} from {path}")
    return name
