"""
Module: loading.cups

Purpose:
    Print-filter (CUPS-style) invocation support.
    Translates the filter argument vector, job options string and
    environment into RunOptions with filter defaults.

Key Functions:
    - is_filter_invocation(): Detect filter mode
    - parse_job_options(): "a=1 b='x y' c" -> dict
    - filter_options(): Filter argv + environment -> RunOptions

Filter defaults:
    Letter paper, 36pt margins, Courier 12, 10 CPI, 6 LPI and glyph
    stretching, PostScript to stdout.

Dependencies:
    - shlex (std): Option string tokenising

Used By:
    - cli: texttopaps entry point
"""

from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from textpaps.config import RunOptions
from textpaps.errors import ConfigurationError

logger = logging.getLogger(__name__)

FILTER_PROGRAM = "texttopaps"
FILTER_USAGE = "job-id user title copies options [file]"

FILTER_FONT = "Courier 12"
FILTER_HEADER_FONT = "Courier Bold 12"
FILTER_CPI = 10.0
FILTER_LPI = 6.0

_FALSE_WORDS = {"no", "off", "false"}
_TRUE_WORDS = {"yes", "on", "true"}

# Charset names the spooler uses that Python spells differently
CHARSET_ALIASES = {
    "windows-932": "cp932",
}


def is_filter_invocation(program: str, environ: Mapping[str, str]) -> bool:
    """True when running as ``texttopaps`` or under a print spooler."""
    return os.path.basename(program).startswith(FILTER_PROGRAM) or "CUPS_SERVER" in environ


def parse_job_options(text: str) -> Dict[str, str]:
    """
    Parse a job options string.

    Bare names are stored as "true"; values may be quoted.

    Example:
        >>> parse_job_options("landscape page-left=18 title='My doc'")
        {'landscape': 'true', 'page-left': '18', 'title': 'My doc'}
    """
    try:
        tokens = shlex.split(text)
    except ValueError as e:
        raise ConfigurationError(f"Malformed job options {text!r}: {e}") from e

    options: Dict[str, str] = {}
    for token in tokens:
        name, sep, value = token.partition("=")
        options[name] = value if sep else "true"
    return options


def charset_encoding(environ: Mapping[str, str]) -> Optional[str]:
    """Input encoding named by ``CHARSET``, None for UTF-8 or unset."""
    charset = environ.get("CHARSET")
    if not charset:
        return None
    charset = CHARSET_ALIASES.get(charset.lower(), charset)
    if charset.lower() in ("utf-8", "utf8"):
        return None
    return charset


def _number(options: Dict[str, str], name: str) -> Optional[float]:
    value = options.get(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}") from None


def filter_options(
    args: Sequence[str],
    environ: Optional[Mapping[str, str]] = None,
) -> RunOptions:
    """
    Build RunOptions for a filter invocation.

    Args:
        args: Arguments after the program name:
            job-id user title copies options [file]
        environ: Environment (default ``os.environ``)

    Returns:
        RunOptions in filter mode

    Raises:
        ConfigurationError: On a wrong argument count or bad option value
    """
    if environ is None:
        environ = os.environ
    if len(args) not in (5, 6):
        raise ConfigurationError(f"Usage: {FILTER_PROGRAM} {FILTER_USAGE}")

    _job_id, user, title, _copies, option_text = args[:5]
    input_path = Path(args[5]) if len(args) == 6 else None
    job = parse_job_options(option_text)

    settings = dict(
        input_path=input_path,
        output_format="ps",
        paper="letter",
        font=FILTER_FONT,
        header_font=FILTER_HEADER_FONT,
        cpi=FILTER_CPI,
        lpi=FILTER_LPI,
        stretch_chars=True,
        title=title or None,
        owner=user,
        filter_mode=True,
        encoding=charset_encoding(environ),
    )

    landscape = job.get("landscape")
    if landscape is not None and landscape.lower() not in _FALSE_WORDS:
        settings["landscape"] = True

    for side in ("left", "right", "top", "bottom"):
        value = _number(job, f"page-{side}")
        if value is not None:
            settings[f"{side}_margin"] = float(int(value))

    wrap = job.get("wrap")
    if wrap is not None:
        settings["wrap"] = wrap.lower() in _TRUE_WORDS

    columns = _number(job, "columns")
    if columns is not None:
        settings["columns"] = int(columns)

    for name in ("cpi", "lpi"):
        value = _number(job, name)
        if value is not None:
            settings[name] = value

    duplex = job.get("Duplex", job.get("sides"))
    if duplex in ("DuplexNoTumble", "two-sided-long-edge"):
        settings["duplex"] = True
    elif duplex in ("DuplexTumble", "two-sided-short-edge"):
        settings["duplex"] = True
        settings["tumble"] = True

    logger.info(f"Print filter job for {user!r}: {title!r} with options {job}")
    try:
        return RunOptions(**settings)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
