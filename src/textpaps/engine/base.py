"""
Module: engine.base

Purpose:
    Abstract text layout engine interface consumed by the layout core.

Key Classes:
    - TextLayoutEngine: shape / line_count / line_extents / width queries

Used By:
    - layout.splitter, layout.flattener, layout.header
    - engine.reportlab_engine: Concrete implementation
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .models import Alignment, Rect, ShapedLayout


class TextLayoutEngine(ABC):
    """
    Abstract text layout engine.

    The layout core owns pagination; implementations own measuring and
    line breaking. Implementations are not expected to be reentrant.
    """

    @abstractmethod
    def shape(
        self,
        text: str,
        width: Optional[float],
        wrap: bool,
        justify: bool,
        alignment: Alignment,
        *,
        markup: bool = False,
        font: Optional[str] = None,
    ) -> ShapedLayout:
        """
        Lay out ``text`` into lines.

        - ``width`` None means unconstrained (one line per hard break).
        - ``font`` overrides the engine's body font for this layout.
        """
        raise NotImplementedError

    def line_count(self, layout: ShapedLayout) -> int:
        return layout.line_count

    def line_extents(self, layout: ShapedLayout, index: int) -> Tuple[Rect, Rect]:
        """Return (ink_rect, logical_rect) of line ``index``."""
        line = layout.lines[index]
        return line.ink_rect, line.logical_rect

    @abstractmethod
    def measure_char_widths(self, text: str) -> List[int]:
        """
        Return the display-cell width of every character in ``text``.

        Wide characters count 2, combining marks 0, control characters -1.
        """
        raise NotImplementedError

    @abstractmethod
    def approximate_char_width(self) -> float:
        """Approximate advance of one character of the body font, in points."""
        raise NotImplementedError

    @abstractmethod
    def set_font_size(self, size: float) -> None:
        """Change the body font size used by later shape() calls."""
        raise NotImplementedError

    @property
    @abstractmethod
    def font_size(self) -> float:
        raise NotImplementedError
