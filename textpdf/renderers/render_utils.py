"""Utility helpers shared across renderer components."""

from __future__ import annotations

import re
from html import escape
from typing import Callable, FrozenSet, Mapping, Optional, Tuple, TypeVar

from ..diagnostics import DiagnosticCode, Diagnostics
from ..models.block import BlockKind

T = TypeVar("T")

FONT_STYLES = ("bold", "italic", "underline")
ALIGNMENTS = ("left", "center", "right")

_SPACE_RUN = re.compile(r"(?<= ) |^ ")


def parse_font_style(value: Optional[str]) -> FrozenSet[str]:
    """Parse a ``font-style`` list such as ``"bold, underline"``; unknown labels are ignored."""
    if not value:
        return frozenset()
    labels = {label.strip().lower() for label in value.split(",")}
    return frozenset(label for label in labels if label in FONT_STYLES)


def display_width(text: str) -> int:
    """Width in columns: ASCII characters count one, everything else two."""
    return sum(1 if ord(ch) < 127 else 2 for ch in text)


def pad_to_minlen(contents: str, minlen: Optional[str]) -> Tuple[str, bool]:
    """
    Pad ``contents`` with spaces up to the ``minlen`` display width.

    Returns the padded text and whether it should be drawn as a fill-in
    line (underlined because the original contents were empty).

    Raises:
        ValueError: if ``minlen`` is not an integer.
    """
    if not minlen:
        return contents, False
    target = int(minlen)
    fill_in = not contents
    missing = target - display_width(contents)
    if missing > 0:
        contents = contents + " " * missing
    return contents, fill_in


def coerce_attribute(
    attributes: Mapping[str, str],
    key: str,
    cast: Callable[[str], T],
    default: T,
    diagnostics: Optional[Diagnostics] = None,
    element: Optional[str] = None,
) -> T:
    """Read ``key`` with ``cast``; malformed values keep ``default`` and are reported."""
    value = attributes.get(key)
    if value is None:
        return default
    try:
        return cast(value.strip())
    except ValueError:
        if diagnostics is not None:
            diagnostics.report(
                DiagnosticCode.INVALID_ATTRIBUTE,
                f"attribute {key}={value!r} is not a valid {cast.__name__}",
                element=element,
            )
        return default


def resolve_block_kind(
    kind,
    diagnostics: Optional[Diagnostics] = None,
) -> Optional[BlockKind]:
    """Map a block kind or name to a content :class:`BlockKind`; unknown kinds are reported."""
    resolved = kind if isinstance(kind, BlockKind) else BlockKind.from_name(str(kind))
    if resolved is None or not resolved.is_content:
        if diagnostics is not None:
            diagnostics.report(DiagnosticCode.UNKNOWN_BLOCK, f"block type '{kind}' unknown")
        return None
    return resolved


def escape_html_text(text: str) -> str:
    """Escape text for HTML element content; newlines become ``<br/>``."""
    return "<br/>".join(escape(line, quote=True) for line in text.split("\n"))


def preserve_spaces(text: str) -> str:
    """Turn leading and repeated spaces into no-break spaces so layout keeps them."""
    return _SPACE_RUN.sub("\u00a0", text)
