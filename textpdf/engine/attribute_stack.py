"""Attribute inheritance stack for nested inline elements."""

from __future__ import annotations

from typing import List, Mapping, Optional

from ..models.chunk import TextChunk
from .block_assembler import BlockAssembler
from .text_buffer import TextBuffer


class AttributeStack:
    """
    One in-progress chunk per open inline element, outermost first.

    A newly opened element starts from the attributes of the chunk below it
    and overrides them with its own. Pending text always belongs to the
    top-of-stack chunk, which is flushed (cloned into the block) whenever a
    nested element opens or the element itself closes.
    """

    def __init__(self, pending: TextBuffer, block: BlockAssembler) -> None:
        self._chunks: List[TextChunk] = []
        self._pending = pending
        self._block = block

    @property
    def depth(self) -> int:
        return len(self._chunks)

    @property
    def top(self) -> Optional[TextChunk]:
        return self._chunks[-1] if self._chunks else None

    def open(self, attributes: Optional[Mapping[str, str]] = None) -> TextChunk:
        previous = self.top
        if previous is not None and self._pending:
            self._flush(previous)

        chunk = TextChunk()
        if previous is not None:
            chunk.update_attributes(previous.attributes)
        chunk.update_attributes(attributes)
        self._chunks.append(chunk)
        return chunk

    def close(self, force: bool = False) -> Optional[TextChunk]:
        """
        Pop the top chunk, flushing pending text into the block.

        With ``force`` the chunk is flushed even without pending text
        (placeholders and spacers render even when empty). Closing an empty
        stack returns ``None``; unmatched closing tags are tolerated.
        """
        if not self._chunks:
            return None
        chunk = self._chunks.pop()
        if self._pending or force:
            self._flush(chunk)
        return chunk

    def discard(self) -> Optional[TextChunk]:
        """Pop the top chunk without flushing; pending text stays for its parent."""
        if not self._chunks:
            return None
        return self._chunks.pop()

    def _flush(self, chunk: TextChunk) -> None:
        chunk.contents = self._pending.take()
        self._block.add(chunk.clone())
