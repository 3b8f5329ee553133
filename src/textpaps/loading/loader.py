"""
Module: loading.loader

Purpose:
    Turn run options into a finished page layout and read the input
    text: decoding, newline normalisation and the trailing newline.

Key Functions:
    - build_layout_config(): RunOptions -> LayoutConfig
    - read_text(): Read and decode the input document
    - decode_text(): Decode raw bytes
    - resolve_encoding(): Pick the input encoding

Dependencies:
    - codecs / locale (std): Encoding lookup
    - layout.config: LayoutConfig
    - loading.paper: Paper sizes

Used By:
    - controller: render_document()
"""

from __future__ import annotations

import codecs
import locale
import logging
import sys
from typing import TYPE_CHECKING, BinaryIO, Optional

from textpaps.errors import ConfigurationError, EncodingConversionError
from textpaps.layout.config import DEFAULT_HEADER_SEP, LayoutConfig

from .paper import paper_size

if TYPE_CHECKING:
    from textpaps.config import RunOptions

logger = logging.getLogger(__name__)

UTF8_NAMES = {"utf-8", "utf8"}


def build_layout_config(options: "RunOptions") -> LayoutConfig:
    """
    Build the page layout for ``options``.

    Width and height come from the paper name unless given explicitly;
    landscape swaps them. The header separator is reserved whenever a
    header or footer is drawn.

    Raises:
        ConfigurationError: If the geometry leaves no room for text

    Example:
        >>> config = build_layout_config(RunOptions(paper="letter", columns=2))
        >>> config.column_width
        250.0
    """
    if options.page_width is not None and options.page_height is not None:
        width, height = options.page_width, options.page_height
    else:
        width, height = paper_size(options.paper)

    if options.landscape:
        width, height = height, width

    header_sep = DEFAULT_HEADER_SEP if (options.header or options.footer) else 0

    try:
        config = LayoutConfig(
            page_width=width,
            page_height=height,
            num_columns=options.columns,
            gutter_width=options.gutter_width,
            top_margin=options.top_margin,
            bottom_margin=options.bottom_margin,
            left_margin=options.left_margin,
            right_margin=options.right_margin,
            header_sep=header_sep,
            do_landscape=options.landscape,
            do_tumble=options.tumble,
            do_duplex=options.duplex,
            rtl=options.rtl,
            do_wordwrap=options.wrap,
            do_justify=options.justify,
            do_use_markup=options.markup,
            do_stretch_chars=options.stretch_chars,
            cpi=options.cpi,
            lpi=options.lpi,
            do_draw_header=options.header,
            do_draw_footer=options.footer,
            do_separation_line=options.separation_line,
            filename=options.document_name,
            font_desc=options.font,
            header_font_desc=options.header_font,
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    logger.debug(
        f"Page {width:.2f}x{height:.2f}pt, {config.num_columns} columns "
        f"of {config.column_width:.2f}x{config.column_height:.2f}pt"
    )
    return config


def resolve_encoding(options: "RunOptions") -> Optional[str]:
    """
    Return the input encoding, or None for UTF-8.

    Raises:
        ConfigurationError: If the encoding is unknown
    """
    encoding = options.encoding
    if encoding is None and options.lang_encoding:
        encoding = locale.getpreferredencoding(False)

    if encoding is None or encoding.lower() in UTF8_NAMES:
        return None

    try:
        codecs.lookup(encoding)
    except LookupError:
        raise ConfigurationError(f"Invalid encoding: {encoding}") from None
    return encoding


def decode_text(data: bytes, encoding: Optional[str] = None) -> str:
    """
    Decode ``data`` and normalise it for splitting.

    Without an encoding the data is read as UTF-8 and undecodable bytes
    are kept as lone surrogates, which the splitter reports as invalid
    characters. ``\\r\\n`` and ``\\r`` become ``\\n`` and a final newline
    is added to non-empty text.

    Raises:
        EncodingConversionError: If ``data`` is not valid in ``encoding``

    Example:
        >>> decode_text(b"a\\r\\nb")
        'a\\nb\\n'
    """
    if encoding is None:
        text = data.decode("utf-8", errors="surrogateescape")
        if text.startswith("\ufeff"):
            text = text[1:]
    else:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as e:
            raise EncodingConversionError(
                f"Error while converting strings from {encoding} at byte {e.start}"
            ) from e

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if text and not text.endswith("\n"):
        text += "\n"
    return text


def read_text(options: "RunOptions", stream: Optional[BinaryIO] = None) -> str:
    """
    Read the input document named by ``options``.

    Args:
        options: Run options (input path and encoding)
        stream: Stream used when there is no input path (default stdin)

    Raises:
        ConfigurationError: If the file cannot be read or the encoding is unknown
        EncodingConversionError: If decoding fails
    """
    encoding = resolve_encoding(options)

    if options.input_path is not None:
        try:
            data = options.input_path.read_bytes()
        except OSError as e:
            raise ConfigurationError(f"Unable to read {options.input_path}: {e}") from e
    else:
        source = stream if stream is not None else sys.stdin.buffer
        data = source.read()

    text = decode_text(data, encoding)
    logger.info(f"Read {len(data)} bytes ({len(text)} characters) from {options.document_name}")
    return text
