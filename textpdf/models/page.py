"""Named page sizes and page margins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from reportlab.lib import pagesizes

PAGE_SIZES: Dict[str, Tuple[float, float]] = {
    **{f"a{index}": getattr(pagesizes, f"A{index}") for index in range(11)},
    **{f"b{index}": getattr(pagesizes, f"B{index}") for index in range(11)},
    "letter": pagesizes.LETTER,
    "legal": pagesizes.LEGAL,
}

DEFAULT_PAGE_SIZE = "a4"


def lookup_page_size(name: Optional[str]) -> Optional[Tuple[float, float]]:
    if not name:
        return None
    return PAGE_SIZES.get(name.strip().lower())


@dataclass(frozen=True)
class PageMargins:
    """Page margins in points."""

    left: int = 45
    right: int = 45
    top: int = 50
    bottom: int = 56

    @classmethod
    def parse(cls, value: str) -> "PageMargins":
        """
        Parse ``"left,right,top,bottom"``.

        Raises:
            ValueError: if fewer than four integers are given.
        """
        parts = value.split(",")
        if len(parts) < 4:
            raise ValueError(f"margin needs four values, got {len(parts)}")
        left, right, top, bottom = (int(part.strip()) for part in parts[:4])
        return cls(left=left, right=right, top=top, bottom=bottom)
