"""Groups chunks into blocks."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..models.block import Block, BlockKind
from ..models.chunk import TextChunk

logger = logging.getLogger(__name__)

EMPTY_PARAGRAPH_TEXT = " "


class BlockAssembler:
    """
    Collects the chunks of the block currently being parsed.

    Blocks never nest: opening any block element starts a fresh chunk list.
    """

    def __init__(self) -> None:
        self._chunks: List[TextChunk] = []

    def begin(self) -> None:
        self._chunks.clear()

    def add(self, chunk: TextChunk) -> None:
        self._chunks.append(chunk)

    @property
    def chunks(self) -> List[TextChunk]:
        return list(self._chunks)

    def __len__(self) -> int:
        return len(self._chunks)

    def finish(self, kind: BlockKind, carrier: Optional[TextChunk] = None) -> Optional[Block]:
        """
        Close the block of ``kind`` and hand back the assembled block.

        An empty paragraph gets a single-space chunk cloned from ``carrier``
        (the paragraph's own stack entry) so it still occupies a line.
        Returns ``None`` when there is nothing to render.
        """
        if not self._chunks and kind is BlockKind.PARAGRAPH:
            filler = carrier.clone() if carrier is not None else TextChunk()
            filler.contents = EMPTY_PARAGRAPH_TEXT
            self._chunks.append(filler)
            logger.debug("Synthesized filler chunk for empty paragraph")

        if not self._chunks:
            return None

        block = Block(kind=kind, chunks=list(self._chunks))
        self._chunks.clear()
        return block
