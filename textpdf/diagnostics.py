"""
Non-fatal diagnostics collected while compiling a template.

Problems that do not abort compilation (a placeholder without data, a
malformed ``margin`` attribute, an unknown block kind...) are reported here
instead of being raised. Each report is also logged at WARNING level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticCode(str, Enum):
    MISSING_DATA_SECTION = "missing_data_section"
    MISSING_DATA_KEY = "missing_data_key"
    INVALID_DATA_VALUE = "invalid_data_value"
    MISSING_PLACEHOLDER_ID = "missing_placeholder_id"
    INVALID_SPACER_SIZE = "invalid_spacer_size"
    INVALID_MARGIN = "invalid_margin"
    UNKNOWN_PAGE_SIZE = "unknown_page_size"
    INVALID_COLUMNS = "invalid_columns"
    INVALID_TABLE_WIDTH = "invalid_table_width"
    UNKNOWN_BLOCK = "unknown_block"
    MISSING_IMAGE_SOURCE = "missing_image_source"
    INVALID_ATTRIBUTE = "invalid_attribute"
    UNKNOWN_FONT_FAMILY = "unknown_font_family"


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal problem."""

    code: DiagnosticCode
    message: str
    element: Optional[str] = None

    def __str__(self) -> str:
        if self.element:
            return f"[{self.code.value}] <{self.element}> {self.message}"
        return f"[{self.code.value}] {self.message}"


class Diagnostics:
    """Collector of diagnostics for one compilation."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._items: List[Diagnostic] = []
        self._logger = log or logger

    def report(
        self,
        code: DiagnosticCode,
        message: str,
        element: Optional[str] = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(code=DiagnosticCode(code), message=message, element=element)
        self._items.append(diagnostic)
        self._logger.warning(str(diagnostic))
        return diagnostic

    def codes(self) -> List[DiagnosticCode]:
        return [item.code for item in self._items]

    def count(self, code: Optional[DiagnosticCode] = None) -> int:
        if code is None:
            return len(self._items)
        return sum(1 for item in self._items if item.code == code)

    def clear(self) -> None:
        self._items.clear()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"Diagnostics(count={len(self._items)})"
