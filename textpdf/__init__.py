"""
TextPDF - XML document templates rendered to PDF or HTML.

A template is an XML document rooted at ``<textpdf>`` made of blocks
(titles, chapters, sections, paragraphs, tables, page breaks) whose inline
elements carry font attributes and data placeholders. The template compiler
turns it into a block stream for a pluggable renderer.

Main Components:
- Template: high-level API (template + data source)
- TemplateCompiler: event-driven markup compiler
- DataStore: placeholder values and document title
- PDFRenderer / HTMLRenderer: rendering backends
- Diagnostics: non-fatal problems reported during a run
"""

from .api import Template, compile_template, render_to_html, render_to_pdf
from .diagnostics import Diagnostic, DiagnosticCode, Diagnostics
from .engine.placeholder_resolver import DataStore
from .exceptions import (
    DataSourceError,
    RenderingError,
    TemplateError,
    TextPDFError,
    UnsupportedFormatError,
)
from .parser.template_parser import TemplateCompiler
from .renderers import (
    DocumentRenderer,
    HTMLRenderer,
    HTMLRendererConfig,
    PDFRenderer,
    PDFRendererConfig,
    RecordingRenderer,
)
from .version import __version__

__all__ = [
    "DataSourceError",
    "DataStore",
    "Diagnostic",
    "DiagnosticCode",
    "Diagnostics",
    "DocumentRenderer",
    "HTMLRenderer",
    "HTMLRendererConfig",
    "PDFRenderer",
    "PDFRendererConfig",
    "RecordingRenderer",
    "RenderingError",
    "Template",
    "TemplateCompiler",
    "TemplateError",
    "TextPDFError",
    "UnsupportedFormatError",
    "__version__",
    "compile_template",
    "render_to_html",
    "render_to_pdf",
]
