"""Typed exceptions raised while formatting a document.

Every error a run can end with derives from :class:`PapsError`. The
print-filter mode downgrades :class:`InvalidCharacterError` and
:class:`MeasurementError` to paragraph-local problems; everything else
stays fatal.
"""

from __future__ import annotations


class PapsError(Exception):
    """Base class for formatting errors."""
    pass


class ConfigurationError(PapsError):
    """Raised when options cannot be turned into a usable page layout."""
    pass


class InvalidCharacterError(PapsError):
    """Raised when the input holds a character that could not be decoded."""

    def __init__(self, offset: int, char: str) -> None:
        self.offset = offset
        self.char = char
        super().__init__(f"Invalid character in input at offset {offset}: {char!r}")


class EncodingConversionError(PapsError):
    """Raised when text cannot be converted between encodings."""
    pass


class MeasurementError(PapsError):
    """Raised when character display widths cannot be measured."""
    pass


class AllocationError(PapsError):
    """Raised when the run runs out of memory."""
    pass


class MarkupError(PapsError):
    """Raised when marked-up input is not well formed."""
    pass
