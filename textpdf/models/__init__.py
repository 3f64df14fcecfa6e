"""Data model of compiled templates."""

from .block import Block, BlockKind
from .chunk import TextChunk
from .page import PAGE_SIZES, PageMargins, lookup_page_size
from .table import TextTable, normalize_columns, parse_columns

__all__ = [
    "Block",
    "BlockKind",
    "PAGE_SIZES",
    "PageMargins",
    "TextChunk",
    "TextTable",
    "lookup_page_size",
    "normalize_columns",
    "parse_columns",
]
