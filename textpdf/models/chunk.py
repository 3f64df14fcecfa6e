"""Text chunk - the smallest unit of styled inline content."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional


@dataclass
class TextChunk:
    """
    Inline text with its attribute mapping.

    Chunks on the attribute stack are mutated while the template is parsed;
    chunks stored in a block or table are clones that never change again.
    """

    contents: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    is_placeholder: bool = False

    def update_attributes(self, attributes: Optional[Mapping[str, Optional[str]]]) -> None:
        """Copy ``attributes`` over the current ones, key by key."""
        if not attributes:
            return
        for key, value in attributes.items():
            self.set_attribute(key, value)

    def set_attribute(self, key: Optional[str], value: Optional[str]) -> None:
        if key is None or value is None:
            return
        self.attributes[str(key)] = str(value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(key, default)

    def clone(self) -> "TextChunk":
        return TextChunk(
            contents=self.contents,
            attributes=dict(self.attributes),
            is_placeholder=self.is_placeholder,
        )
