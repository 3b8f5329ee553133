"""
Module: cli

Purpose:
    Command line entry points.
    ``textpaps`` formats a text file; ``texttopaps`` runs the same
    pipeline as a print filter (job-id user title copies options [file]).

Key Functions:
    - main(): textpaps entry point
    - filter_main(): texttopaps entry point
    - build_parser(): Argument parser
    - options_from_args(): Parsed arguments -> RunOptions

Dependencies:
    - argparse (std)
    - controller: render_document()
    - loading.cups: Print-filter options

Exit codes:
    0 on success, 1 on a usage, configuration or run error.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .config import RunOptions
from .controller import RenderError, render_document
from .engine.fonts import DEFAULT_FONT, DEFAULT_HEADER_FONT
from .errors import PapsError
from .layout.config import DEFAULT_GUTTER_WIDTH, DEFAULT_MARGIN
from .loading.cups import FILTER_PROGRAM, filter_options, is_filter_invocation
from .loading.paper import PAPER_SIZES
from .output import OUTPUT_FORMATS

logger = logging.getLogger(__name__)

PROGRAM = "textpaps"

EXIT_OK = 0
EXIT_ERROR = 1


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the ``textpaps`` argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Convert text files to PostScript, PDF or SVG with columns, headers and fixed pitch.",
    )
    parser.add_argument("file", nargs="?", type=Path, help="Text file to format (default: stdin)")
    parser.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="ps", help="Output format (default: ps)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")

    page = parser.add_argument_group("page")
    page.add_argument("--paper", choices=sorted(PAPER_SIZES), default="a4", help="Paper size (default: a4)")
    page.add_argument("--landscape", action="store_true", help="Landscape output")
    page.add_argument("--columns", type=int, default=1, help="Number of columns (default: 1)")
    page.add_argument("--top-margin", type=_non_negative_int, default=DEFAULT_MARGIN)
    page.add_argument("--bottom-margin", type=_non_negative_int, default=DEFAULT_MARGIN)
    page.add_argument("--left-margin", type=_non_negative_int, default=DEFAULT_MARGIN)
    page.add_argument("--right-margin", type=_non_negative_int, default=DEFAULT_MARGIN)
    page.add_argument("--gutter-width", type=_non_negative_int, default=DEFAULT_GUTTER_WIDTH,
                      help="Space between columns")
    page.add_argument("--header", action="store_true", help="Draw a page header")
    page.add_argument("--footer", action="store_true", help="Draw a page footer")
    page.add_argument("--title", help="Document name shown in the header")
    page.add_argument("--no-separation-line", dest="separation_line", action="store_false",
                      help="Do not draw rules between columns")

    text = parser.add_argument_group("text")
    text.add_argument("--font", default=DEFAULT_FONT, help=f'Body font (default: "{DEFAULT_FONT}")')
    text.add_argument("--header-font", default=DEFAULT_HEADER_FONT, help="Header/footer font")
    text.add_argument("--markup", action="store_true", help="Interpret the input as markup")
    text.add_argument("--rtl", action="store_true", help="Right-to-left columns and alignment")
    text.add_argument("--justify", action="store_true", help="Justify wrapped lines")
    text.add_argument("--no-wrap", dest="wrap", action="store_false", help="Do not wrap long lines")
    text.add_argument("--cpi", type=_positive_float, default=0.0, help="Characters per inch")
    text.add_argument("--lpi", type=_positive_float, default=0.0, help="Lines per inch")
    text.add_argument("--stretch-chars", action="store_true",
                      help="Stretch characters vertically to fill the LPI advance")
    text.add_argument("--encoding", help="Input encoding (default: UTF-8)")
    text.add_argument("--lang-encoding", action="store_true",
                      help="Take the input encoding from the locale")
    return parser


def options_from_args(args: argparse.Namespace) -> RunOptions:
    """
    Convert parsed arguments to RunOptions.

    Raises:
        ValueError: If the combination of values is invalid
    """
    return RunOptions(
        input_path=args.file,
        output_path=args.output,
        output_format=args.format,
        paper=args.paper,
        landscape=args.landscape,
        columns=args.columns,
        font=args.font,
        header_font=args.header_font,
        rtl=args.rtl,
        justify=args.justify,
        markup=args.markup,
        stretch_chars=args.stretch_chars,
        wrap=args.wrap,
        separation_line=args.separation_line,
        header=args.header,
        footer=args.footer,
        top_margin=args.top_margin,
        bottom_margin=args.bottom_margin,
        left_margin=args.left_margin,
        right_margin=args.right_margin,
        gutter_width=args.gutter_width,
        cpi=args.cpi,
        lpi=args.lpi,
        encoding=args.encoding,
        lang_encoding=args.lang_encoding,
        title=args.title,
    )


def configure_logging(verbosity: int) -> None:
    """WARNING by default, INFO with -v, DEBUG with -vv."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(name)s: %(levelname)s: %(message)s", stream=sys.stderr)


def _run(options: RunOptions, program: str) -> int:
    try:
        result = render_document(options)
    except RenderError as e:
        print(f"{program}: {e}", file=sys.stderr)
        return EXIT_ERROR

    logger.info(f"{result.page_count} pages written")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    ``textpaps`` entry point.

    Switches to print-filter mode when started as ``texttopaps`` or with
    ``CUPS_SERVER`` set.

    Args:
        argv: Arguments without the program name (default ``sys.argv[1:]``)

    Returns:
        Process exit code
    """
    if argv is None and is_filter_invocation(sys.argv[0], os.environ):
        return filter_main()

    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # --help and --version exit cleanly, usage errors map to 1
        return EXIT_OK if e.code == 0 else EXIT_ERROR
    configure_logging(args.verbose)

    try:
        options = options_from_args(args)
    except ValueError as e:
        print(f"{PROGRAM}: {e}", file=sys.stderr)
        return EXIT_ERROR

    return _run(options, PROGRAM)


def filter_main(argv: Optional[List[str]] = None) -> int:
    """
    ``texttopaps`` entry point.

    Args:
        argv: job-id user title copies options [file] (default ``sys.argv[1:]``)
    """
    if argv is None:
        argv = sys.argv[1:]
    configure_logging(0)

    try:
        options = filter_options(argv)
    except PapsError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    return _run(options, FILTER_PROGRAM)


if __name__ == "__main__":
    sys.exit(main())
