"""Block kinds and assembled blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .chunk import TextChunk


class BlockKind(str, Enum):
    TITLE = "title"
    CHAPTER = "chapter"
    SECTION = "section"
    PARAGRAPH = "para"
    PAGE_BREAK = "pagebreak"

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["BlockKind"]:
        """Return the kind for an element name (case-insensitive), or ``None``."""
        if not name:
            return None
        try:
            return cls(name.lower())
        except ValueError:
            return None

    @property
    def is_content(self) -> bool:
        """Whether blocks of this kind carry chunks (everything but page breaks)."""
        return self is not BlockKind.PAGE_BREAK


@dataclass
class Block:
    kind: BlockKind
    chunks: List[TextChunk] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(chunk.contents for chunk in self.chunks)
