"""
Module: loading.paper

Purpose:
    Known paper sizes in PostScript points (portrait).

Key Functions:
    - paper_size(): Look up a paper by name
"""

from __future__ import annotations

from typing import Dict, Tuple

from textpaps.errors import ConfigurationError

PAPER_SIZES: Dict[str, Tuple[float, float]] = {
    "a4": (595.28, 841.89),
    "letter": (612.0, 792.0),
    "legal": (612.0, 1008.0),
    "a3": (842.0, 1190.0),
}


def paper_size(name: str) -> Tuple[float, float]:
    """
    Return (width, height) of paper ``name`` in points.

    Raises:
        ConfigurationError: If the paper is unknown
    """
    try:
        return PAPER_SIZES[name.lower()]
    except KeyError:
        known = ", ".join(sorted(PAPER_SIZES))
        raise ConfigurationError(f"Unknown paper size {name!r} (known: {known})") from None
