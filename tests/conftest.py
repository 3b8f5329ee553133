import pytest
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from unittest.mock import MagicMock

SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from textpaps.engine import (  # noqa: E402
    Alignment,
    Rect,
    ReportLabLayoutEngine,
    ShapedLayout,
    ShapedLine,
    TextLayoutEngine,
    TextRun,
    char_display_width,
)
from textpaps.errors import MeasurementError  # noqa: E402
from textpaps.layout import LayoutConfig, RunContext  # noqa: E402
from textpaps.output import RenderingSurface  # noqa: E402


class FakeLayoutEngine(TextLayoutEngine):
    """
    Deterministic engine for layout tests.

    Every character is ``char_width`` wide, every line ``line_height``
    tall with its baseline at 80% of the height. Wrapping cuts lines at
    whole characters. Shaping text containing ``fail_on`` raises
    MeasurementError.
    """

    def __init__(self, line_height: float = 10.0, char_width: float = 6.0,
                 fail_on: Optional[str] = None):
        self.line_height = line_height
        self.char_width = char_width
        self.fail_on = fail_on
        self.size = 12.0
        self.calls: List[dict] = []

    @property
    def font_size(self) -> float:
        return self.size

    def set_font_size(self, size: float) -> None:
        self.size = size

    def approximate_char_width(self) -> float:
        return self.char_width

    def measure_char_widths(self, text: str) -> List[int]:
        if self.fail_on and self.fail_on in text:
            raise MeasurementError(f"cannot measure {text!r}")
        return [char_display_width(c) for c in text]

    def shape(self, text, width, wrap, justify, alignment, *, markup=False, font=None):
        self.calls.append({"text": text, "width": width, "wrap": wrap, "font": font, "markup": markup})
        if self.fail_on and self.fail_on in text:
            raise MeasurementError(f"cannot shape {text!r}")

        chunks: List[str] = []
        for hard in text.split("\n"):
            if wrap and width is not None and hard:
                step = max(1, int(width // self.char_width))
                chunks.extend(hard[i:i + step] for i in range(0, len(hard), step))
            else:
                chunks.append(hard)

        lines = []
        for chunk in chunks:
            w = len(chunk) * self.char_width
            runs = (TextRun(chunk, "Courier", self.size, w),) if chunk else ()
            lines.append(ShapedLine(
                runs=runs,
                ink_rect=Rect(0, -0.7 * self.line_height, w, 0.9 * self.line_height),
                logical_rect=Rect(0, -0.8 * self.line_height, w, self.line_height),
            ))
        return ShapedLayout(text, tuple(lines), width, alignment, justify, markup)


@pytest.fixture
def fake_engine_factory():
    """Factory for FakeLayoutEngine instances."""
    def _create(**kwargs):
        return FakeLayoutEngine(**kwargs)
    return _create


@pytest.fixture
def fake_engine():
    return FakeLayoutEngine()


@pytest.fixture
def engine():
    """ReportLab engine with Courier 12 (7.2pt cells, 14.4pt lines)."""
    return ReportLabLayoutEngine("Courier 12")


@pytest.fixture
def letter_config():
    return LayoutConfig(page_width=612, page_height=792)


@pytest.fixture
def run_context():
    return RunContext(started_at=datetime(2026, 3, 14, 9, 26, 53))


@pytest.fixture
def filter_run_context():
    return RunContext(filter_mode=True, started_at=datetime(2026, 3, 14, 9, 26, 53))


@pytest.fixture
def mock_surface():
    """Surface mock that records every drawing call."""
    return MagicMock(spec=RenderingSurface)


@pytest.fixture
def sample_text_file(tmp_path):
    """Plain text file with a few short paragraphs."""
    path = tmp_path / "notes.txt"
    path.write_text("first line\nsecond line\n\nfourth line\n", encoding="utf-8")
    return path
