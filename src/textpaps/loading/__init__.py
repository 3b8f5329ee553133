"""
Module: loading

Purpose:
    Configuration loading: paper sizes, page layout construction,
    input decoding and print-filter option translation.

Key Functions:
    - build_layout_config(): RunOptions -> LayoutConfig
    - read_text(): Read and decode the input document
    - paper_size(): Paper name -> points

Used By:
    - controller: render_document()
    - cli: Filter mode via loading.cups
"""

from .paper import PAPER_SIZES, paper_size
from .loader import build_layout_config, decode_text, read_text, resolve_encoding

__all__ = [
    "PAPER_SIZES",
    "paper_size",
    "build_layout_config",
    "decode_text",
    "read_text",
    "resolve_encoding",
]
