"""
Module: controller

Purpose:
    Orchestrate one formatting run.
    Load -> Split -> Flatten -> Composite -> Finish

Key Functions:
    - render_document(): Main entry point (options in, document out)
    - render_text(): Core pipeline over an already decoded buffer

Key Classes:
    - RenderResult: Summary of a finished run
    - RenderError: Exception for run failures

Dependencies:
    - textpaps.loading: Layout config, input decoding
    - textpaps.engine: ReportLab layout engine
    - textpaps.layout: Splitter, flattener, compositor
    - textpaps.output: Rendering surfaces

Used By:
    - textpaps.cli: Command line and print filter
"""

from __future__ import annotations

import contextlib
import logging
import sys
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from .config import RunOptions
from .engine import ReportLabLayoutEngine, TextLayoutEngine
from .errors import AllocationError, PapsError
from .layout import (
    POINTS_PER_INCH,
    LayoutConfig,
    RunContext,
    output_pages,
    split_paragraphs_into_lines,
    split_text_into_paragraphs,
)
from .loading import build_layout_config, read_text
from .output import RenderingSurface, create_surface

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """Error during a formatting run."""
    pass


@dataclass(frozen=True)
class RenderResult:
    """
    Summary of a finished run (immutable).

    Attributes:
        output_path: File written, None for a stream
        output_format: "ps", "pdf" or "svg"
        page_count: Pages produced
        paragraph_count: Paragraphs shaped
        line_count: Lines placed
        scale_x: Font scale applied for CPI
        scale_y: Vertical glyph stretch applied for LPI
        warnings: Recoverable problems met during the run
        elapsed_seconds: Wall time of the run

    Example:
        >>> result = render_document(RunOptions(input_path=Path("notes.txt")))
        >>> print(f"Generated {result.page_count} pages")
    """

    output_path: Optional[Path]
    output_format: str
    page_count: int
    paragraph_count: int
    line_count: int
    scale_x: float
    scale_y: float
    warnings: tuple[str, ...]
    elapsed_seconds: float = 0.0


def apply_cpi(config: LayoutConfig, run: RunContext, engine: TextLayoutEngine) -> None:
    """Resize the body font so one character cell matches the CPI pitch."""
    if config.cpi <= 0:
        return
    char_width = engine.approximate_char_width()
    run.scale_x = (POINTS_PER_INCH / config.cpi) / char_width
    engine.set_font_size(engine.font_size * run.scale_x)
    logger.info(f"CPI {config.cpi:g}: body font scaled by {run.scale_x:.4f}")


def render_text(
    text: str,
    config: LayoutConfig,
    run: RunContext,
    engine: TextLayoutEngine,
    surface: RenderingSurface,
) -> RenderResult:
    """
    Format ``text`` onto ``surface``.

    The surface is left open; call ``surface.finish()`` afterwards.

    Args:
        text: Decoded, newline-normalised input
        config: Page layout
        run: Run context
        engine: Text layout engine
        surface: Output surface

    Returns:
        RenderResult (without an output path)

    Raises:
        PapsError: Any fatal formatting error
        AllocationError: If the run runs out of memory
    """
    start_time = time.perf_counter()
    try:
        apply_cpi(config, run, engine)
        paragraphs = split_text_into_paragraphs(text, config, run, engine)
        lines = split_paragraphs_into_lines(paragraphs, config, run, engine)
        composition = output_pages(lines, paragraphs, surface, engine, config, run)
    except MemoryError as e:
        raise AllocationError("Unable to allocate memory") from e

    return RenderResult(
        output_path=None,
        output_format=run.output_format,
        page_count=composition.page_count,
        paragraph_count=len(paragraphs),
        line_count=len(lines),
        scale_x=run.scale_x,
        scale_y=run.scale_y,
        warnings=tuple(run.warnings),
        elapsed_seconds=time.perf_counter() - start_time,
    )


@contextlib.contextmanager
def _open_output(path: Optional[Path], stdout: Optional[BinaryIO]) -> Iterator[BinaryIO]:
    if path is None:
        yield stdout if stdout is not None else sys.stdout.buffer
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as stream:
        yield stream


def render_document(
    options: RunOptions,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> RenderResult:
    """
    Format one document from start to finish.

    Pipeline:
    1. Build the page layout and read the input
    2. Create the engine and the output surface
    3. Split, flatten and composite
    4. Finish the document

    Args:
        options: Run options
        stdin: Input stream when ``options.input_path`` is None
        stdout: Output stream when ``options.output_path`` is None

    Returns:
        RenderResult for the run

    Raises:
        RenderError: If any step fails

    Example:
        >>> options = RunOptions(input_path=Path("notes.txt"), output_path=Path("notes.pdf"),
        ...                      output_format="pdf", columns=2)
        >>> result = render_document(options)
    """
    logger.info(
        f"Formatting {options.document_name} as {options.output_format} "
        f"({options.columns} columns, {options.paper})"
    )

    try:
        config = build_layout_config(options)
        text = read_text(options, stdin)
        engine = ReportLabLayoutEngine(options.font)
        run = RunContext(output_format=options.output_format, filter_mode=options.filter_mode)

        surface_options = {"title": options.document_name}
        if options.output_format == "ps":
            surface_options.update(
                dsc_for=options.owner,
                cups_rotation=options.filter_mode,
                duplex=options.duplex,
                tumble=options.tumble,
            )

        with _open_output(options.output_path, stdout) as stream:
            surface = create_surface(
                options.output_format,
                stream,
                config.page_width,
                config.page_height,
                config.do_landscape,
                **surface_options,
            )
            result = render_text(text, config, run, engine, surface)
            surface.finish()
    except PapsError as e:
        raise RenderError(str(e)) from e
    except OSError as e:
        raise RenderError(f"Failed to write output: {e}") from e

    logger.info(
        f"Produced {result.page_count} pages from {result.line_count} lines "
        f"in {result.elapsed_seconds:.2f}s"
    )
    return replace(result, output_path=options.output_path)
