"""Pending text accumulated between markup tags."""

from __future__ import annotations

import re

# whitespace around line breaks comes from template indentation
_TEMPLATE_WHITESPACE = re.compile(r"\s*\n+\s*")


def collapse_whitespace(text: str) -> str:
    """Drop whitespace runs that span a newline, then trim the result."""
    return _TEMPLATE_WHITESPACE.sub("", text).strip()


class TextBuffer:
    """Accumulates text until the next chunk takes it."""

    def __init__(self) -> None:
        self._parts: list = []

    def append_markup_text(self, text: str) -> None:
        """Append raw character data from the template."""
        collapsed = collapse_whitespace(text)
        if collapsed:
            self._parts.append(collapsed)

    def append(self, text: str) -> None:
        """Append literal text (placeholder values, spacer runs, line breaks)."""
        if text:
            self._parts.append(text)

    def take(self) -> str:
        value = self.value
        self._parts.clear()
        return value

    def clear(self) -> None:
        self._parts.clear()

    @property
    def value(self) -> str:
        return "".join(self._parts)

    def __bool__(self) -> bool:
        return any(self._parts)

    def __len__(self) -> int:
        return len(self.value)
