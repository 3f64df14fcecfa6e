"""Assembly of tabular content."""

from __future__ import annotations

from typing import Mapping, Optional

from ..diagnostics import DiagnosticCode, Diagnostics
from ..models.chunk import TextChunk
from ..models.table import TextTable, parse_columns


class TableBuilder:
    """Builds one table at a time: block attributes plus cells in row-major order."""

    def __init__(self, diagnostics: Diagnostics) -> None:
        self.diagnostics = diagnostics
        self.table: Optional[TextTable] = None

    @property
    def active(self) -> bool:
        return self.table is not None

    def begin(self, attributes: Optional[Mapping[str, str]] = None) -> TextTable:
        self.table = TextTable()
        self.table.update_attributes(attributes)
        self._check_attributes(self.table)
        return self.table

    def add_cell(self, attributes: Optional[Mapping[str, str]] = None) -> TextChunk:
        chunk = TextChunk()
        chunk.update_attributes(attributes)
        self._require_table().add_cell(chunk)
        return chunk

    def close_cell(self, contents: str) -> None:
        cell = self._require_table().last_cell()
        if cell is not None:
            cell.contents = contents

    def finish(self) -> Optional[TextTable]:
        """Close the table; returns it when it has at least one cell."""
        table, self.table = self.table, None
        if table is None or not table.cells:
            return None
        return table

    def _require_table(self) -> TextTable:
        if self.table is None:
            raise RuntimeError("no table is being built")
        return self.table

    def _check_attributes(self, table: TextTable) -> None:
        columns = table.attributes.get("columns")
        if columns is not None:
            try:
                parse_columns(columns)
            except ValueError as exc:
                self.diagnostics.report(
                    DiagnosticCode.INVALID_COLUMNS,
                    f"columns {columns!r} must be comma-separated integers ({exc})",
                    element="table",
                )
        width = table.attributes.get("width")
        if width is not None:
            try:
                float(width)
            except ValueError:
                self.diagnostics.report(
                    DiagnosticCode.INVALID_TABLE_WIDTH,
                    f"width {width!r} must be a number",
                    element="table",
                )
