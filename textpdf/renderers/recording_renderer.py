"""In-memory renderer that records the call sequence it receives."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple, Union

from ..models.block import Block, BlockKind
from ..models.chunk import TextChunk
from ..models.table import TextTable
from .base_renderer import Attributes, DocumentRenderer, DocumentState


class RecordingRenderer(DocumentRenderer):
    """
    Renderer that keeps everything it is given.

    ``calls`` holds ``(method, payload)`` tuples in order; ``blocks`` and
    ``tables`` hold deep copies of the written content so later mutation by
    the compiler cannot change what was recorded.
    """

    def __init__(self, accept_open: bool = True) -> None:
        self.accept_open = accept_open
        self.calls: List[Tuple[str, Any]] = []
        self.blocks: List[Block] = []
        self.tables: List[TextTable] = []
        self.state = DocumentState.UNOPENED

    def open(self) -> bool:
        self.calls.append(("open", None))
        if not self.accept_open:
            return False
        self.state = DocumentState.OPEN
        return True

    def close(self) -> None:
        self.calls.append(("close", None))
        self.state = DocumentState.CLOSED

    def abort(self) -> None:
        self.calls.append(("abort", None))
        self.state = DocumentState.CLOSED

    def is_open(self) -> bool:
        return self.state is DocumentState.OPEN

    def set_page_size(self, name: str) -> None:
        self.calls.append(("set_page_size", name))

    def set_page_margins(self, left: int, right: int, top: int, bottom: int) -> None:
        self.calls.append(("set_page_margins", (left, right, top, bottom)))

    def new_page(self) -> None:
        self.calls.append(("new_page", None))

    def add_horizontal_rule(self, attributes: Attributes) -> None:
        self.calls.append(("add_horizontal_rule", dict(attributes)))

    def add_image(self, attributes: Attributes) -> None:
        self.calls.append(("add_image", dict(attributes)))

    def write_block(self, kind: Union[BlockKind, str], chunks: Sequence[TextChunk]) -> None:
        block = Block(BlockKind(kind), [chunk.clone() for chunk in chunks])
        self.blocks.append(block)
        self.calls.append(("write_block", block))

    def write_table(self, table: TextTable) -> None:
        recorded = TextTable(dict(table.attributes), [cell.clone() for cell in table.cells])
        self.tables.append(recorded)
        self.calls.append(("write_table", recorded))

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------
    @property
    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def block_texts(self) -> List[str]:
        return [block.text for block in self.blocks]

    def last_block(self) -> Optional[Block]:
        return self.blocks[-1] if self.blocks else None
