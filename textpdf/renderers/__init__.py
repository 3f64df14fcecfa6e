"""Rendering backends for compiled templates."""

from .base_renderer import Attributes, DocumentRenderer, DocumentState
from .html_renderer import HTMLRenderer, HTMLRendererConfig, HtmlValueMode
from .pdf_renderer import BlockStyle, PDFRenderer, PDFRendererConfig, default_block_styles
from .recording_renderer import RecordingRenderer

__all__ = [
    "Attributes",
    "BlockStyle",
    "DocumentRenderer",
    "DocumentState",
    "HTMLRenderer",
    "HTMLRendererConfig",
    "HtmlValueMode",
    "PDFRenderer",
    "PDFRendererConfig",
    "RecordingRenderer",
    "default_block_styles",
]
