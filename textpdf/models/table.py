"""Table model - block attributes plus a flat, row-major list of cells."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .chunk import TextChunk

DEFAULT_TABLE_WIDTH = 100.0


def parse_columns(value: str) -> List[int]:
    """
    Parse a ``columns`` attribute such as ``"3,7"`` into relative widths.

    Raises:
        ValueError: if an entry is not an integer, is negative, or all are zero.
    """
    widths = [int(part.strip()) for part in value.split(",")]
    if any(width < 0 for width in widths):
        raise ValueError(f"negative column width in {value!r}")
    if sum(widths) <= 0:
        raise ValueError(f"column widths in {value!r} add up to zero")
    return widths


def normalize_columns(widths: List[int]) -> List[int]:
    """Convert relative widths to integer percentages (floor division)."""
    total = sum(widths)
    return [width * 100 // total for width in widths]


@dataclass
class TextTable:
    attributes: Dict[str, str] = field(default_factory=dict)
    cells: List[TextChunk] = field(default_factory=list)

    def update_attributes(self, attributes: Optional[Mapping[str, Optional[str]]]) -> None:
        if not attributes:
            return
        for key, value in attributes.items():
            if key is not None and value is not None:
                self.attributes[str(key)] = str(value)

    def add_cell(self, chunk: TextChunk) -> None:
        self.cells.append(chunk)

    def last_cell(self) -> Optional[TextChunk]:
        return self.cells[-1] if self.cells else None

    @property
    def columns(self) -> Optional[List[int]]:
        """Relative column widths, or ``None`` if absent or malformed."""
        value = self.attributes.get("columns")
        if value is None:
            return None
        try:
            return parse_columns(value)
        except ValueError:
            return None

    @property
    def column_count(self) -> int:
        columns = self.columns
        return len(columns) if columns else 1

    def column_percentages(self) -> Optional[List[int]]:
        columns = self.columns
        if columns is None:
            return None
        return normalize_columns(columns)

    @property
    def width(self) -> float:
        """Table width as a percentage of the available width."""
        value = self.attributes.get("width")
        if value is None:
            return DEFAULT_TABLE_WIDTH
        try:
            return float(value)
        except ValueError:
            return DEFAULT_TABLE_WIDTH

    def rows(self) -> List[List[TextChunk]]:
        """Cells grouped into rows of ``column_count`` (last row may be short)."""
        count = self.column_count
        return [self.cells[index:index + count] for index in range(0, len(self.cells), count)]
