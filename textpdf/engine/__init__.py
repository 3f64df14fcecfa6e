"""Template compilation engine components."""

from .attribute_stack import AttributeStack
from .block_assembler import BlockAssembler
from .placeholder_resolver import DataResolver, DataStore
from .table_builder import TableBuilder
from .text_buffer import TextBuffer, collapse_whitespace

__all__ = [
    "AttributeStack",
    "BlockAssembler",
    "DataResolver",
    "DataStore",
    "TableBuilder",
    "TextBuffer",
    "collapse_whitespace",
]
