"""
Template compiler.

Consumes the element/text events of a ``<textpdf>`` template (delivered by an
lxml parser target) and drives a :class:`DocumentRenderer` with the blocks,
tables and page operations the template describes.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import IO, Any, Callable, Dict, Iterator, List, Optional, Union

from lxml import etree

from ..diagnostics import DiagnosticCode, Diagnostics
from ..engine.attribute_stack import AttributeStack
from ..engine.block_assembler import BlockAssembler
from ..engine.placeholder_resolver import DataResolver, DataStore
from ..engine.table_builder import TableBuilder
from ..engine.text_buffer import TextBuffer
from ..exceptions import RenderingError, TemplateError, TextPDFError
from ..models.block import BlockKind
from ..models.page import PageMargins, lookup_page_size
from ..renderers.base_renderer import DocumentRenderer

logger = logging.getLogger(__name__)

TemplateSource = Union[str, bytes, Path, IO]

ROOT_ELEMENT = "textpdf"
VALUE_ELEMENT = "value"
SPACER_ELEMENT = "hspace"
BREAK_ELEMENT = "break"
PAGE_ELEMENT = "page"
RULE_ELEMENT = "hrule"
IMAGE_ELEMENT = "img"
TABLE_ELEMENT = "table"
CELL_ELEMENT = "cell"

# elements that start a fresh block
BLOCK_ELEMENTS = frozenset(["title", "chapter", "section", "para", "pagebreak", "table"])

# elements that flush into the block even without pending text
FORCED_FLUSH_ELEMENTS = frozenset([VALUE_ELEMENT, SPACER_ELEMENT])

DEFAULT_VALUE_STYLE = "bold,underline"
FEED_CHUNK_SIZE = 64 * 1024

# encoding named by the XML declaration of already decoded markup
DECLARED_ENCODING = re.compile(r"""\A(\s*<\?xml\b[^>]*?\bencoding\s*=\s*)(['"])[^'"]*\2""")


class CompilerState(str, Enum):
    BEFORE_ROOT = "before_root"
    IN_DOCUMENT = "in_document"
    DONE = "done"


class TemplateCompiler:
    """
    Event-driven compiler from template markup to renderer calls.

    One compiler handles one template: it owns the pending text, the
    attribute stack and the block in progress, so independent compilers can
    run concurrently. The instance itself is the lxml parser target.

    Examples:
        >>> compiler = TemplateCompiler(RecordingRenderer())
        >>> diagnostics = compiler.compile("<textpdf><para>Hello</para></textpdf>")
    """

    def __init__(
        self,
        renderer: DocumentRenderer,
        data_store: Optional[DataStore] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        self.renderer = renderer
        self.data_store = data_store
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

        self.pending = TextBuffer()
        self.block = BlockAssembler()
        self.stack = AttributeStack(self.pending, self.block)
        self.tables = TableBuilder(self.diagnostics)
        self.resolver = DataResolver(data_store, self.diagnostics)
        self.state = CompilerState.BEFORE_ROOT

        # raw character data since the last tag; collapsed as one run
        self._text: List[str] = []

        self._start_handlers: Dict[str, Callable[[str, Dict[str, str]], None]] = {
            "title": self._start_block,
            "chapter": self._start_block,
            "section": self._start_block,
            "para": self._start_block,
            "pagebreak": self._start_page_break,
            TABLE_ELEMENT: self._start_table,
            CELL_ELEMENT: self._start_cell,
            PAGE_ELEMENT: self._start_page_setup,
            RULE_ELEMENT: self._start_rule,
            IMAGE_ELEMENT: self._start_image,
            VALUE_ELEMENT: self._start_value,
            SPACER_ELEMENT: self._start_spacer,
        }
        self._end_handlers: Dict[str, Callable[[str], None]] = {
            "pagebreak": self._end_page_break,
            BREAK_ELEMENT: self._end_line_break,
            TABLE_ELEMENT: self._end_table,
            CELL_ELEMENT: self._end_cell,
            PAGE_ELEMENT: self._end_standalone,
            RULE_ELEMENT: self._end_standalone,
            IMAGE_ELEMENT: self._end_standalone,
        }

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def compile(self, source: TemplateSource) -> Diagnostics:
        """
        Compile a template and drive the renderer to ``close()``.

        Args:
            source: Markup as ``str``/``bytes``, a file path, or a readable stream.

        Returns:
            The diagnostics collected during compilation.

        Raises:
            TemplateError: Malformed markup or a structural violation.
            RenderingError: The renderer failed while writing.
        """
        if self.state is not CompilerState.BEFORE_ROOT:
            raise TemplateError("Template compiler can only be used once", self.state.value)

        parser = etree.XMLParser(target=self, resolve_entities=False, no_network=True)
        try:
            try:
                for piece in _read_source(source):
                    parser.feed(piece)
                parser.close()
            except etree.XMLSyntaxError as exc:
                raise TemplateError("Malformed template markup", str(exc)) from exc

            if self.state is not CompilerState.DONE:
                raise TemplateError("Template ended before the document root was closed", element=ROOT_ELEMENT)
        except Exception:
            if self.renderer.is_open():
                self.renderer.abort()
            raise

        logger.info(f"Template compiled with {len(self.diagnostics)} diagnostic(s)")
        return self.diagnostics

    # ------------------------------------------------------------------
    # lxml parser target interface
    # ------------------------------------------------------------------
    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        self._flush_text()
        name = _local_name(tag)
        attributes = _sanitize_attrib(attrib)

        if self.state is CompilerState.DONE:
            raise TemplateError("Element found after the document root was closed", element=name)
        if name == ROOT_ELEMENT:
            self._open_document()
            return
        if self.state is CompilerState.BEFORE_ROOT:
            raise TemplateError(f"Template must start with <{ROOT_ELEMENT}>", element=name)

        if self.tables.active:
            if name == TABLE_ELEMENT:
                raise TemplateError("Tables cannot be nested", element=name)
            if name != CELL_ELEMENT:
                raise TemplateError("Only <cell> elements are allowed inside <table>", element=name)
        elif name == CELL_ELEMENT:
            raise TemplateError("<cell> is only allowed inside <table>", element=name)

        handler = self._start_handlers.get(name, self._start_inline)
        handler(name, attributes)

    def end(self, tag: str) -> None:
        self._flush_text()
        name = _local_name(tag)

        if self.state is not CompilerState.IN_DOCUMENT:
            raise TemplateError("Closing tag outside the document root", element=name)
        if name == ROOT_ELEMENT:
            self._close_document()
            return

        handler = self._end_handlers.get(name, self._end_inline)
        handler(name)

    def data(self, text: str) -> None:
        if self.state is CompilerState.IN_DOCUMENT:
            self._text.append(text)

    def close(self) -> Diagnostics:
        return self.diagnostics

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------
    def _open_document(self) -> None:
        if self.state is not CompilerState.BEFORE_ROOT:
            raise TemplateError("Document is already open", element=ROOT_ELEMENT)
        try:
            opened = self.renderer.open()
        except Exception as exc:
            raise TemplateError("Renderer failed to open the document", str(exc), element=ROOT_ELEMENT) from exc
        if not opened:
            raise TemplateError("Renderer could not open the document", element=ROOT_ELEMENT)
        self.state = CompilerState.IN_DOCUMENT
        logger.debug("Document opened")

    def _close_document(self) -> None:
        if self.pending:
            logger.debug(f"Discarding trailing text outside any element: {self.pending.value!r}")
            self.pending.clear()
        self._render(self.renderer.close)
        self.state = CompilerState.DONE
        logger.debug("Document closed")

    # ------------------------------------------------------------------
    # Start handlers
    # ------------------------------------------------------------------
    def _start_block(self, name: str, attributes: Dict[str, str]) -> None:
        self.block.begin()
        self.stack.open(attributes)

    def _start_page_break(self, name: str, attributes: Dict[str, str]) -> None:
        self.block.begin()

    def _start_table(self, name: str, attributes: Dict[str, str]) -> None:
        self.block.begin()
        self.tables.begin(attributes)

    def _start_cell(self, name: str, attributes: Dict[str, str]) -> None:
        self.pending.clear()
        self.tables.add_cell(attributes)

    def _start_page_setup(self, name: str, attributes: Dict[str, str]) -> None:
        size = attributes.get("size")
        if size is not None:
            if lookup_page_size(size) is None:
                self.diagnostics.report(DiagnosticCode.UNKNOWN_PAGE_SIZE, f"page size '{size}' unknown", element=name)
            else:
                self._render(self.renderer.set_page_size, size.strip().lower())

        margin = attributes.get("margin")
        if margin is not None:
            try:
                margins = PageMargins.parse(margin)
            except ValueError as exc:
                self.diagnostics.report(
                    DiagnosticCode.INVALID_MARGIN,
                    f"margin '{margin}' must be four integers left,right,top,bottom ({exc})",
                    element=name,
                )
            else:
                self._render(self.renderer.set_page_margins, margins.left, margins.right, margins.top, margins.bottom)

        self._render(self.renderer.new_page)

    def _start_rule(self, name: str, attributes: Dict[str, str]) -> None:
        self._render(self.renderer.add_horizontal_rule, attributes)

    def _start_image(self, name: str, attributes: Dict[str, str]) -> None:
        self._render(self.renderer.add_image, attributes)

    def _start_value(self, name: str, attributes: Dict[str, str]) -> None:
        chunk = self.stack.open(attributes)
        chunk.is_placeholder = True

        value = self.resolver.resolve(attributes.get("id"))
        if value is None:
            return
        self.pending.append(value)
        if "font-style" not in attributes:
            chunk.set_attribute("font-style", DEFAULT_VALUE_STYLE)

    def _start_spacer(self, name: str, attributes: Dict[str, str]) -> None:
        self.stack.open(attributes)
        size = attributes.get("size")
        try:
            count = int(size.strip()) if size is not None else None
        except ValueError:
            count = None
        if count is None or count < 0:
            self.diagnostics.report(
                DiagnosticCode.INVALID_SPACER_SIZE,
                f"size {size!r} must be a non-negative integer",
                element=name,
            )
            return
        self.pending.append(" " * count)

    def _start_inline(self, name: str, attributes: Dict[str, str]) -> None:
        self.stack.open(attributes)

    # ------------------------------------------------------------------
    # End handlers
    # ------------------------------------------------------------------
    def _end_page_break(self, name: str) -> None:
        self._render(self.renderer.new_page)

    def _end_line_break(self, name: str) -> None:
        self.pending.append("\n")
        self.stack.discard()

    def _end_cell(self, name: str) -> None:
        self.tables.close_cell(self.pending.take())

    def _end_table(self, name: str) -> None:
        table = self.tables.finish()
        self.pending.clear()
        if table is None:
            logger.debug("Skipping table without cells")
            return
        self._render(self.renderer.write_table, table)

    def _end_standalone(self, name: str) -> None:
        pass

    def _end_inline(self, name: str) -> None:
        chunk = self.stack.close(force=name in FORCED_FLUSH_ELEMENTS)
        if name not in BLOCK_ELEMENTS:
            return
        kind = BlockKind.from_name(name)
        block = self.block.finish(kind, carrier=chunk)
        if block is not None:
            logger.debug(f"Writing {kind.value} block with {len(block.chunks)} chunk(s)")
            self._render(self.renderer.write_block, block.kind, block.chunks)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _flush_text(self) -> None:
        if self._text:
            self.pending.append_markup_text("".join(self._text))
            self._text.clear()

    def _render(self, method: Callable[..., Any], *args: Any) -> Any:
        if not self.renderer.is_open():
            raise RenderingError("Renderer is not open", method.__name__)
        try:
            return method(*args)
        except TextPDFError:
            raise
        except Exception as exc:
            raise RenderingError(f"Renderer failed in {method.__name__}", str(exc)) from exc


def _local_name(tag: Any) -> str:
    """Element name without namespace, lowercased."""
    name = str(tag)
    if "}" in name:
        name = name.split("}")[-1]
    return name.lower()


def _sanitize_attrib(attrib: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Strip namespaces from attribute keys and lowercase them."""
    clean: Dict[str, str] = {}
    for key, value in (attrib or {}).items():
        clean_key = str(key)
        if "}" in clean_key:
            clean_key = clean_key.split("}")[-1]
        elif ":" in clean_key:
            clean_key = clean_key.split(":", 1)[1]
        clean[clean_key.lower()] = str(value)
    return clean


def _read_source(source: TemplateSource) -> Iterator[bytes]:
    """Yield the template in pieces suitable for ``XMLParser.feed``."""
    if isinstance(source, bytes):
        yield source
        return
    if isinstance(source, str) and source.lstrip().startswith("<"):
        yield _encode_markup(source)
        return
    if isinstance(source, (str, Path)):
        try:
            with open(source, "rb") as handle:
                yield from _read_stream(handle)
        except OSError as exc:
            raise TemplateError("Failed to read template", str(exc)) from exc
        return
    yield from _read_stream(source)


def _read_stream(stream: IO) -> Iterator[bytes]:
    first = True
    while True:
        piece = stream.read(FEED_CHUNK_SIZE)
        if not piece:
            return
        if isinstance(piece, str):
            yield _encode_markup(piece) if first else piece.encode("utf-8")
        else:
            yield piece
        first = False


def _encode_markup(text: str) -> bytes:
    """
    Encode decoded markup as UTF-8.

    The text is no longer in the encoding its XML declaration names, so the
    declaration is rewritten to say UTF-8 before lxml sees the bytes.
    """
    return DECLARED_ENCODING.sub(r"\g<1>\g<2>UTF-8\g<2>", text, count=1).encode("utf-8")
