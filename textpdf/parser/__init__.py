"""Template markup parsing."""

from .template_parser import (
    BLOCK_ELEMENTS,
    ROOT_ELEMENT,
    CompilerState,
    TemplateCompiler,
)

__all__ = [
    "BLOCK_ELEMENTS",
    "ROOT_ELEMENT",
    "CompilerState",
    "TemplateCompiler",
]
