"""Document renderer contract - the compiler's only output boundary."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Mapping, Sequence, Union

from ..models.block import BlockKind
from ..models.chunk import TextChunk
from ..models.table import TextTable

Attributes = Mapping[str, str]


class DocumentState(str, Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class DocumentRenderer(ABC):
    """
    Interface every rendering backend implements.

    A renderer moves through ``unopened -> open -> closed``; every call other
    than :meth:`open` and :meth:`is_open` is only valid while open.
    """

    @abstractmethod
    def open(self) -> bool:
        """Open the document; ``False`` means the document cannot be produced."""

    @abstractmethod
    def close(self) -> None:
        """Finish the document. Called exactly once, for the closing root element."""

    @abstractmethod
    def is_open(self) -> bool:
        """Whether the document is currently open."""

    def abort(self) -> None:
        """
        Release the document after a fatal compilation error.

        Called instead of :meth:`close` when compilation stops early; the
        document is left unfinished. Backends holding no resources keep this
        no-op.
        """

    @abstractmethod
    def set_page_size(self, name: str) -> None:
        """Select a named page size (``a4``, ``b5``...) for the pages that follow."""

    @abstractmethod
    def set_page_margins(self, left: int, right: int, top: int, bottom: int) -> None:
        """Set page margins in points for the pages that follow."""

    @abstractmethod
    def new_page(self) -> None:
        """Advance to a new page."""

    @abstractmethod
    def add_horizontal_rule(self, attributes: Attributes) -> None:
        """Add a horizontal rule (``width`` thickness, ``percent`` length)."""

    @abstractmethod
    def add_image(self, attributes: Attributes) -> None:
        """Add the image named by the ``src`` attribute."""

    @abstractmethod
    def write_block(self, kind: Union[BlockKind, str], chunks: Sequence[TextChunk]) -> None:
        """Render one assembled block."""

    @abstractmethod
    def write_table(self, table: TextTable) -> None:
        """Render one assembled table."""
