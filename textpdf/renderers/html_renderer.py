"""
HTML renderer - serializes the block stream as an HTML page.

Placeholders become form inputs so the page can be used to collect or
review template data.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from html import escape
from pathlib import Path
from typing import IO, List, Mapping, Optional, Sequence, Tuple, Union

from ..diagnostics import DiagnosticCode, Diagnostics
from ..exceptions import RenderingError
from ..models.block import BlockKind
from ..models.chunk import TextChunk
from ..models.table import TextTable
from ..version import __version__
from .base_renderer import Attributes, DocumentRenderer, DocumentState
from .render_utils import escape_html_text, parse_font_style, preserve_spaces, resolve_block_kind

logger = logging.getLogger(__name__)

HTMLTarget = Union[str, Path, IO]

BLOCK_TAGS = {
    BlockKind.TITLE: "h1",
    BlockKind.CHAPTER: "h2",
    BlockKind.SECTION: "h3",
    BlockKind.PARAGRAPH: "p",
}

STYLE_DECLARATIONS = {
    "bold": "font-weight: bold",
    "italic": "font-style: italic",
    "underline": "text-decoration: underline",
}


class HtmlValueMode(str, Enum):
    INPUT = "input"
    COMBO = "combo"


@dataclass(frozen=True)
class HTMLRendererConfig:
    """
    Configuration of the HTML renderer.

    Attributes:
        title: Fallback ``<title>`` when the data source has none.
        encoding: Output encoding, also declared in the ``<meta>`` tag.
        declare: Document type declaration written first.
        css_links: Stylesheet URLs linked from ``<head>``.
        js_links: Script URLs linked from ``<head>``.
        extra: Raw markup appended at the end of ``<body>``.
        value_mode: How placeholders are rendered.
    """

    title: Optional[str] = None
    encoding: str = "utf-8"
    declare: str = "<!DOCTYPE html>"
    css_links: Tuple[str, ...] = ()
    js_links: Tuple[str, ...] = ()
    extra: Optional[str] = None
    value_mode: HtmlValueMode = HtmlValueMode.INPUT


class HTMLRenderer(DocumentRenderer):
    """Render blocks and tables to an HTML file, text stream or binary stream."""

    def __init__(
        self,
        output: Optional[HTMLTarget],
        config: Optional[HTMLRendererConfig] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        self.output = output
        self.config = config or HTMLRendererConfig()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._state = DocumentState.UNOPENED
        self._stream: Optional[IO] = None
        self._owns_stream = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> bool:
        if self._state is not DocumentState.UNOPENED or self.output is None:
            return False
        if isinstance(self.output, (str, Path)):
            try:
                self._stream = open(self.output, "wb")
            except OSError as exc:
                logger.error(f"Failed to open HTML output {self.output}: {exc}")
                return False
            self._owns_stream = True
        else:
            self._stream = self.output

        self._state = DocumentState.OPEN
        self._write(self._head())
        return True

    def close(self) -> None:
        if self._state is not DocumentState.OPEN:
            return
        try:
            if self.config.extra:
                self._write(self.config.extra)
            self._write("  </body>\n</html>\n")
        finally:
            self._state = DocumentState.CLOSED
            if self._owns_stream and self._stream is not None:
                self._stream.close()

    def abort(self) -> None:
        if self._state is not DocumentState.OPEN:
            return
        self._state = DocumentState.CLOSED
        if self._owns_stream and self._stream is not None:
            self._stream.close()
            # an unfinished page is not worth keeping
            try:
                Path(self.output).unlink()
            except OSError as exc:
                logger.warning(f"Failed to remove partial HTML output {self.output}: {exc}")
            else:
                logger.debug(f"Discarded partial HTML output {self.output}")

    def is_open(self) -> bool:
        return self._state is DocumentState.OPEN

    # ------------------------------------------------------------------
    # Page control - pages have no meaning in a single HTML page
    # ------------------------------------------------------------------
    def set_page_size(self, name: str) -> None:
        logger.debug(f"Ignoring page size {name} in HTML output")

    def set_page_margins(self, left: int, right: int, top: int, bottom: int) -> None:
        logger.debug("Ignoring page margins in HTML output")

    def new_page(self) -> None:
        self._write("    <hr/>\n")

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    def add_horizontal_rule(self, attributes: Attributes) -> None:
        percent = attributes.get("percent", "").strip()
        if percent.isdigit():
            self._write(f'    <hr style="width: {percent}%"/>\n')
        else:
            self._write("    <hr/>\n")

    def add_image(self, attributes: Attributes) -> None:
        src = attributes.get("src")
        if not src:
            self.diagnostics.report(DiagnosticCode.MISSING_IMAGE_SOURCE, "img missing src attribute", element="img")
            return
        self._write(f'    <img src="{escape(src)}"/>\n')

    def write_block(self, kind: Union[BlockKind, str], chunks: Sequence[TextChunk]) -> None:
        if not chunks:
            return
        block_kind = resolve_block_kind(kind, self.diagnostics)
        if block_kind is None:
            return

        tag = BLOCK_TAGS[block_kind]
        parts = [f'    <{tag} class="{block_kind.value}"{_style_attribute(_block_styles(chunks[0].attributes))}>']
        for chunk in chunks:
            if chunk.is_placeholder:
                parts.append(self._value_markup(chunk))
                continue
            text = preserve_spaces(escape_html_text(chunk.contents or ""))
            styles = _inline_styles(chunk.attributes)
            if styles:
                parts.append(f"<span{_style_attribute(styles)}>{text}</span>")
            else:
                parts.append(text)
        parts.append(f"</{tag}>\n")
        self._write("".join(parts))

    def write_table(self, table: TextTable) -> None:
        if table is None or not table.cells:
            return
        columns = table.column_percentages()
        if columns is None:
            logger.warning("Table without usable 'columns' attribute skipped in HTML output")
            return

        lines = ['    <table border="2" width="100%">\n']
        for index, chunk in enumerate(table.cells):
            column = index % len(columns)
            if column == 0:
                if index > 0:
                    lines.append("      </tr>\n")
                lines.append("      <tr>\n")
            if columns[column] > 0:
                text = escape_html_text(chunk.contents or "")
                lines.append(f'        <td width="{columns[column]}%">{text}</td>\n')
        lines.append("      </tr>\n")
        lines.append("    </table>\n")
        self._write("".join(lines))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _head(self) -> str:
        config = self.config
        lines = [
            config.declare,
            "<html>",
            "  <head>",
            f"    <title>{escape(config.title or '')}</title>",
            f'    <meta name="generator" content="TextPDF {__version__}"/>',
            f'    <meta http-equiv="Content-Type" content="text/html; charset={escape(config.encoding)}"/>',
        ]
        for path in config.css_links:
            lines.append(f'    <link rel="stylesheet" type="text/css" href="{escape(path)}"/>')
        for path in config.js_links:
            lines.append(f'    <script src="{escape(path)}"></script>')
        lines.extend(["  </head>", "  <body>", ""])
        return "\n".join(lines)

    def _value_markup(self, chunk: TextChunk) -> str:
        attrs = chunk.attributes
        placeholder_id = attrs.get("id")
        minlen = attrs.get("minlen")

        input_attrs = ['type="text"']
        if placeholder_id and self.config.value_mode is HtmlValueMode.INPUT:
            input_attrs.append(f'id="{escape(placeholder_id)}" name="{escape(placeholder_id)}"')
        if minlen:
            input_attrs.append(f'size="{escape(minlen)}"')
        if chunk.contents:
            input_attrs.append(f'value="{escape(chunk.contents)}"')
        if self.config.value_mode is HtmlValueMode.INPUT:
            return f"<input {' '.join(input_attrs)} />"

        select_id = ""
        if placeholder_id:
            select_id = f' id="{escape(placeholder_id)}" name="{escape(placeholder_id)}"'
        return (
            f"<input {' '.join(input_attrs)} readonly=\"readonly\" />"
            f"<select{select_id}>\n"
            '<option value="1">Required</option>\n'
            '<option value="0">Optional</option>\n'
            "</select>\n"
        )

    def _write(self, text: str) -> None:
        if self._state is not DocumentState.OPEN or self._stream is None:
            raise RenderingError("Document is not open", self._state.value)
        try:
            if isinstance(self._stream, io.TextIOBase):
                self._stream.write(text)
            else:
                self._stream.write(text.encode(self.config.encoding, errors="xmlcharrefreplace"))
        except (OSError, LookupError) as exc:
            raise RenderingError("Write to HTML stream failed", str(exc)) from exc


def _inline_styles(attrs: Mapping[str, str]) -> List[str]:
    styles = [STYLE_DECLARATIONS[label] for label in sorted(parse_font_style(attrs.get("font-style")))]
    size = attrs.get("font-size", "").strip()
    if size.isdigit():
        styles.append(f"font-size: {size}pt")
    if attrs.get("super", "").lower() == "true":
        styles.append("vertical-align: super")
    elif attrs.get("sub", "").lower() == "true":
        styles.append("vertical-align: sub")
    return styles


def _block_styles(attrs: Mapping[str, str]) -> List[str]:
    styles: List[str] = []
    indent = attrs.get("indent")
    if indent:
        styles.append(f"text-indent: {escape(indent)}px")
    align = attrs.get("align")
    if align:
        styles.append(f"text-align: {escape(align)}")
    return styles


def _style_attribute(styles: List[str]) -> str:
    if not styles:
        return ""
    return f' style="{"; ".join(styles)};"'
