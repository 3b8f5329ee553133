"""
Module: engine.markup

Purpose:
    Parse the Pango-style markup subset accepted in markup mode into
    styled text segments.

Supported tags:
    <b>, <i>, <tt>, <big>, <small>, <u>, <s>, <sub>, <sup> and
    <span> with font_desc/font, font_family/face, size, weight, style.
    Decorations (<u>, <s>, <sub>, <sup>) keep the text but are not drawn.

Dependencies:
    - xml.etree.ElementTree (std): Markup parsing
    - engine.fonts: Font descriptor handling

Used By:
    - engine.reportlab_engine: shape(..., markup=True)
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import List, Tuple

from textpaps.errors import MarkupError

from .fonts import DEFAULT_FAMILY, FontSpec, parse_font_desc

Segment = Tuple[str, FontSpec]

SIZE_STEP = 1.2
PANGO_SCALE = 1024

_PASSTHROUGH_TAGS = {"u", "s", "sub", "sup"}
_BOLD_WEIGHTS = {"bold", "heavy", "ultrabold", "semibold"}


def parse_markup(markup: str, base: FontSpec) -> List[Segment]:
    """
    Split ``markup`` into (text, font) segments.

    Adjacent segments with the same font are merged.

    Raises:
        MarkupError: If the markup is not well formed or uses unknown tags

    Example:
        >>> parse_markup("a <b>bold</b> word", FontSpec())
        [('a ', FontSpec(...)), ('bold', FontSpec(..., bold=True)), (' word', FontSpec(...))]
    """
    try:
        root = ET.fromstring(f"<markup>{markup}</markup>")
    except ET.ParseError as e:
        raise MarkupError(f"Failed to parse markup: {e}") from e

    segments: List[Segment] = []
    _walk(root, base, segments)

    merged: List[Segment] = []
    for text, spec in segments:
        if merged and merged[-1][1] == spec:
            merged[-1] = (merged[-1][0] + text, spec)
        else:
            merged.append((text, spec))
    return merged


def _walk(elem: ET.Element, spec: FontSpec, out: List[Segment]) -> None:
    if elem.text:
        out.append((elem.text, spec))
    for child in elem:
        _walk(child, _apply_tag(child, spec), out)
        if child.tail:
            out.append((child.tail, spec))


def _apply_tag(elem: ET.Element, spec: FontSpec) -> FontSpec:
    tag = elem.tag.lower()
    if tag == "b":
        return spec.styled(bold=True)
    if tag == "i":
        return spec.styled(italic=True)
    if tag == "tt":
        return FontSpec("Monospace", spec.size, spec.bold, spec.italic)
    if tag == "big":
        return spec.with_size(spec.size * SIZE_STEP)
    if tag == "small":
        return spec.with_size(spec.size / SIZE_STEP)
    if tag in _PASSTHROUGH_TAGS:
        return spec
    if tag == "span":
        return _apply_span(elem.attrib, spec)
    raise MarkupError(f"Unsupported markup tag: <{elem.tag}>")


def _apply_span(attrs: dict, spec: FontSpec) -> FontSpec:
    for name, value in attrs.items():
        if name in ("font_desc", "font"):
            parsed = parse_font_desc(value, default_size=spec.size)
            family_given = (
                parsed.family != DEFAULT_FAMILY or DEFAULT_FAMILY.lower() in value.lower()
            )
            spec = FontSpec(
                family=parsed.family if family_given else spec.family,
                size=parsed.size,
                bold=parsed.bold or spec.bold,
                italic=parsed.italic or spec.italic,
            )
        elif name in ("font_family", "face"):
            spec = FontSpec(value, spec.size, spec.bold, spec.italic)
        elif name == "size":
            spec = spec.with_size(_parse_size(value, spec.size))
        elif name == "weight":
            spec = spec.styled(bold=_is_bold_weight(value))
        elif name == "style":
            spec = spec.styled(italic=value.lower() in ("italic", "oblique"))
        # Colour and other attributes do not change metrics.
    return spec


def _parse_size(value: str, current: float) -> float:
    value = value.strip().lower()
    if value == "larger":
        return current * SIZE_STEP
    if value == "smaller":
        return current / SIZE_STEP
    try:
        if value.endswith("pt"):
            return float(value[:-2])
        return int(value) / PANGO_SCALE
    except ValueError as e:
        raise MarkupError(f"Invalid span size: {value!r}") from e


def _is_bold_weight(value: str) -> bool:
    value = value.lower()
    if value.isdigit():
        return int(value) >= 600
    return value in _BOLD_WEIGHTS
