"""
High-level API for TextPDF.

Main entry point for users: load a template and its data, render to PDF or
HTML, and inspect the diagnostics of the run.

Example:
    >>> from textpdf import Template
    >>>
    >>> template = Template("contract.xml", data="contract.json")
    >>> diagnostics = template.to_pdf("contract.pdf")
    >>> for diagnostic in diagnostics:
    ...     print(diagnostic)
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import IO, Any, Mapping, Optional, Union

from .diagnostics import Diagnostics
from .engine.placeholder_resolver import DataSource, DataStore
from .exceptions import TextPDFError, UnsupportedFormatError
from .parser.template_parser import TemplateCompiler, TemplateSource
from .renderers.base_renderer import DocumentRenderer
from .renderers.html_renderer import HTMLRenderer, HTMLRendererConfig
from .renderers.pdf_renderer import PDFRenderer, PDFRendererConfig

logger = logging.getLogger(__name__)

__all__ = [
    "Template",
    "compile_template",
    "render_to_html",
    "render_to_pdf",
]

OutputTarget = Union[str, Path, IO]
TemplateData = Union[DataStore, DataSource, None]

SUPPORTED_FORMATS = ("pdf", "html")


class Template:
    """
    A template plus its data source.

    The data source may be a :class:`DataStore`, a mapping shaped like the
    JSON document, a JSON file path or a readable stream. A template given
    as a stream can only be rendered once.

    Examples:
        >>> template = Template("<textpdf><para>Hello</para></textpdf>")
        >>> template.to_html("hello.html")
    """

    def __init__(self, source: TemplateSource, data: TemplateData = None):
        self.source = source
        self.data = data

    def load_data(self, diagnostics: Optional[Diagnostics] = None) -> Optional[DataStore]:
        """Load the data source; ``None`` when the template has no data."""
        if self.data is None or isinstance(self.data, DataStore):
            return self.data
        return DataStore.load(self.data, diagnostics)

    def compile(
        self,
        renderer: DocumentRenderer,
        diagnostics: Optional[Diagnostics] = None,
    ) -> Diagnostics:
        """
        Compile the template against any renderer.

        Returns:
            Diagnostics collected while loading data and compiling.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        store = self.load_data(diagnostics)
        return self._run(renderer, store, diagnostics)

    def to_pdf(self, output: OutputTarget, config: Optional[PDFRendererConfig] = None) -> Diagnostics:
        """Render the template to a PDF file or binary stream."""
        diagnostics = Diagnostics()
        store = self.load_data(diagnostics)
        config = config or PDFRendererConfig()
        if store is not None and store.title and not config.title:
            config = replace(config, title=store.title)
        renderer = PDFRenderer(output, config=config, diagnostics=diagnostics)
        return self._run(renderer, store, diagnostics)

    def to_html(self, output: OutputTarget, config: Optional[HTMLRendererConfig] = None) -> Diagnostics:
        """Render the template to an HTML file or stream."""
        diagnostics = Diagnostics()
        store = self.load_data(diagnostics)
        config = config or HTMLRendererConfig()
        if store is not None and store.title and not config.title:
            config = replace(config, title=store.title)
        renderer = HTMLRenderer(output, config=config, diagnostics=diagnostics)
        return self._run(renderer, store, diagnostics)

    def render(self, output: OutputTarget, format: str = "pdf", config: Any = None) -> Diagnostics:
        """Render to ``format`` (``pdf`` or ``html``)."""
        format_name = (format or "").lower()
        if format_name == "pdf":
            return self.to_pdf(output, config)
        if format_name == "html":
            return self.to_html(output, config)
        raise UnsupportedFormatError(f"Unsupported output format: {format}", ", ".join(SUPPORTED_FORMATS))

    def _run(
        self,
        renderer: DocumentRenderer,
        store: Optional[DataStore],
        diagnostics: Diagnostics,
    ) -> Diagnostics:
        compiler = TemplateCompiler(renderer, data_store=store, diagnostics=diagnostics)
        try:
            return compiler.compile(self.source)
        except TextPDFError as exc:
            logger.error(f"Template compilation failed: {exc}")
            raise


def render_to_pdf(
    source: TemplateSource,
    output: OutputTarget,
    data: TemplateData = None,
    config: Optional[PDFRendererConfig] = None,
) -> Diagnostics:
    """
    Quick helper - render a template to PDF.

    Args:
        source: Template markup, path or stream
        output: PDF file path or binary stream
        data: Optional data source
        config: Optional PDF renderer configuration

    Returns:
        Diagnostics of the run
    """
    return Template(source, data).to_pdf(output, config)


def render_to_html(
    source: TemplateSource,
    output: OutputTarget,
    data: TemplateData = None,
    config: Optional[HTMLRendererConfig] = None,
) -> Diagnostics:
    """Quick helper - render a template to HTML."""
    return Template(source, data).to_html(output, config)


def compile_template(
    source: TemplateSource,
    renderer: DocumentRenderer,
    data: TemplateData = None,
) -> Diagnostics:
    """Compile a template against an arbitrary renderer."""
    return Template(source, data).compile(renderer)
