"""
PDF renderer - lays blocks and tables out with ReportLab platypus.

Flowables are collected while the template is compiled and the document is
built when the renderer is closed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from html import escape
from pathlib import Path
from typing import IO, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from PIL import Image as PILImage
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import (
    BaseDocTemplate,
    Frame,
    Image,
    NextPageTemplate,
    PageBreak,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.flowables import HRFlowable

from ..diagnostics import DiagnosticCode, Diagnostics
from ..exceptions import RenderingError
from ..models.block import BlockKind
from ..models.chunk import TextChunk
from ..models.page import DEFAULT_PAGE_SIZE, PageMargins, lookup_page_size
from ..models.table import TextTable
from ..version import __version__
from .base_renderer import Attributes, DocumentRenderer, DocumentState
from .render_utils import (
    coerce_attribute,
    pad_to_minlen,
    parse_font_style,
    preserve_spaces,
    resolve_block_kind,
)

logger = logging.getLogger(__name__)

PDFTarget = Union[str, Path, IO[bytes]]

FONT_FAMILY_ALIASES = {
    "hei": "hei",
    "heiti": "hei",
    "song": "song",
    "songti": "song",
}

# used when no TrueType file is configured for a family
BUILTIN_FONTS = {
    "hei": "Helvetica",
    "song": "Times-Roman",
}

ALIGNMENT_MAP = {
    "left": TA_LEFT,
    "center": TA_CENTER,
    "right": TA_RIGHT,
}

SCRIPT_FONT_SIZE = 8
LEADING_FACTOR = 1.25


@dataclass
class BlockStyle:
    """Default formatting of one block kind."""

    font_family: str = "song"
    font_size: int = 12
    font_style: str = ""
    alignment: str = "left"
    indent: float = 0.0
    space_before: float = 0.0
    space_after: float = 0.0


def default_block_styles() -> Dict[BlockKind, BlockStyle]:
    return {
        BlockKind.TITLE: BlockStyle("hei", 18, "bold", "center", 0.0, 0.0, 16.0),
        BlockKind.CHAPTER: BlockStyle("song", 16, "bold", "left", 0.0, 14.0, 0.0),
        BlockKind.SECTION: BlockStyle("song", 14, "bold", "left", 0.0, 12.0, 0.0),
        BlockKind.PARAGRAPH: BlockStyle("song", 12, "", "left", 22.0, 6.0, 0.0),
    }


@dataclass(frozen=True)
class PDFRendererConfig:
    """
    Configuration of the PDF renderer.

    Attributes:
        title: Document title stored in the PDF metadata.
        page_size: Named page size of the first page.
        margins: Page margins of the first page.
        font_paths: TrueType files keyed by font family (``hei``, ``song``).
        table_padding: Padding inside table cells, in points.
    """

    title: Optional[str] = None
    author: str = "TextPDF"
    subject: str = ""
    keywords: str = "TextPDF, PDF"
    creator: str = f"TextPDF {__version__}"
    page_size: str = DEFAULT_PAGE_SIZE
    margins: PageMargins = PageMargins()
    font_paths: Mapping[str, str] = field(default_factory=dict)
    table_padding: float = 5.0


class PDFRenderer(DocumentRenderer):
    """Render blocks and tables to a PDF file or binary stream."""

    def __init__(
        self,
        output: Optional[PDFTarget],
        config: Optional[PDFRendererConfig] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        self.output = output
        self.config = config or PDFRendererConfig()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.block_styles = default_block_styles()

        self.page_size: Tuple[float, float] = lookup_page_size(self.config.page_size) or lookup_page_size(DEFAULT_PAGE_SIZE)
        self.margins = self.config.margins

        self._state = DocumentState.UNOPENED
        self._doc: Optional[BaseDocTemplate] = None
        self._story: list = []
        self._templates: List[PageTemplate] = []
        self._template_serial = 0
        self._layout_changed = False
        self._page_dirty = False
        # story index of the PageBreak that started the current, still empty page
        self._pending_break: Optional[int] = None
        self._image_sizes: Dict[str, Tuple[float, float]] = {}
        self._fonts: Dict[str, str] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> bool:
        if self._state is not DocumentState.UNOPENED or self.output is None:
            return False
        target = str(self.output) if isinstance(self.output, Path) else self.output
        try:
            self._register_fonts()
            self._doc = BaseDocTemplate(
                target,
                pagesize=self.page_size,
                title=self.config.title or "",
                author=self.config.author,
                subject=self.config.subject,
                keywords=self.config.keywords,
                creator=self.config.creator,
            )
        except Exception as exc:
            logger.error(f"Failed to open PDF document: {exc}")
            return False
        self._templates = [self._page_template()]
        self._state = DocumentState.OPEN
        return True

    def close(self) -> None:
        if self._state is not DocumentState.OPEN:
            return
        self._state = DocumentState.CLOSED
        if not self._story:
            self._story.append(Spacer(1, 0))
        self._doc.addPageTemplates(self._templates)
        try:
            self._doc.build(self._story)
        except Exception as exc:
            raise RenderingError("Failed to build PDF document", str(exc)) from exc
        logger.debug(f"PDF document built with {len(self._story)} flowables")

    def abort(self) -> None:
        if self._state is not DocumentState.OPEN:
            return
        # nothing is written before build, dropping the story is enough
        self._state = DocumentState.CLOSED
        self._story = []
        logger.debug("PDF document discarded before build")

    def is_open(self) -> bool:
        return self._state is DocumentState.OPEN

    # ------------------------------------------------------------------
    # Page control
    # ------------------------------------------------------------------
    def set_page_size(self, name: str) -> None:
        size = lookup_page_size(name)
        if size is None:
            self.diagnostics.report(DiagnosticCode.UNKNOWN_PAGE_SIZE, f"page size '{name}' unknown", element="page")
            return
        self.page_size = size
        self._layout_changed = True

    def set_page_margins(self, left: int, right: int, top: int, bottom: int) -> None:
        self.margins = PageMargins(left=left, right=right, top=top, bottom=bottom)
        self._layout_changed = True

    def new_page(self) -> None:
        self._require_open()
        if self._layout_changed:
            self._layout_changed = False
            template = self._page_template()
            if not self._story:
                # nothing laid out yet, the first page takes the new setup
                self._templates[0] = template
            else:
                self._templates.append(template)
                switch = NextPageTemplate(template.id)
                if self._pending_break is None:
                    self._story.append(switch)
                else:
                    # the current page is still empty, so it takes the new setup
                    self._story.insert(self._pending_break, switch)
                    self._pending_break += 1
        if self._page_dirty:
            self._pending_break = len(self._story)
            self._story.append(PageBreak())
            self._page_dirty = False

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    def add_horizontal_rule(self, attributes: Attributes) -> None:
        self._require_open()
        thickness = coerce_attribute(attributes, "width", int, 1)
        percent = coerce_attribute(attributes, "percent", int, 100)
        leading = self.block_styles[BlockKind.PARAGRAPH].font_size * LEADING_FACTOR
        self._add(Spacer(1, leading))
        self._add(HRFlowable(width=f"{percent}%", thickness=thickness, hAlign="CENTER", color=colors.black))

    def add_image(self, attributes: Attributes) -> None:
        self._require_open()
        src = attributes.get("src")
        if not src:
            self.diagnostics.report(DiagnosticCode.MISSING_IMAGE_SOURCE, "img missing src attribute", element="img")
            return

        size = self._image_sizes.get(src)
        if size is None:
            try:
                with PILImage.open(src) as image:
                    size = (float(image.width), float(image.height))
            except (OSError, ValueError) as exc:
                raise RenderingError(f"Failed to load image '{src}'", str(exc)) from exc
            self._image_sizes[src] = size

        width, height = size
        available = self._frame_width()
        if width > available:
            height = height * available / width
            width = available
        self._add(Image(src, width=width, height=height))

    def write_block(self, kind: Union[BlockKind, str], chunks: Sequence[TextChunk]) -> None:
        self._require_open()
        if not chunks:
            return
        block_kind = resolve_block_kind(kind, self.diagnostics)
        if block_kind is None:
            return

        block_style = self.block_styles[block_kind]
        markup = []
        largest = block_style.font_size
        for chunk in chunks:
            text, size = self._chunk_markup(chunk, block_style)
            markup.append(text)
            largest = max(largest, size)

        style = self._paragraph_style(block_kind.value, block_style, chunks[0].attributes, largest)
        self._add(Paragraph("".join(markup), style))

    def write_table(self, table: TextTable) -> None:
        self._require_open()
        if table is None or not table.cells:
            return

        columns = table.columns or [1]
        total = float(sum(columns))
        table_width = self._frame_width() * table.width / 100.0
        col_widths = [table_width * column / total for column in columns]

        rows, spans = self._table_rows(table, len(columns))
        padding = self.config.table_padding
        commands = [
            ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LEFTPADDING", (0, 0), (-1, -1), padding),
            ("RIGHTPADDING", (0, 0), (-1, -1), padding),
            ("TOPPADDING", (0, 0), (-1, -1), padding),
            ("BOTTOMPADDING", (0, 0), (-1, -1), padding),
        ]
        commands.extend(spans)

        pdf_table = Table(rows, colWidths=col_widths, hAlign="CENTER")
        pdf_table.setStyle(TableStyle(commands))
        self._add(pdf_table)

    # ------------------------------------------------------------------
    # Block defaults
    # ------------------------------------------------------------------
    def set_block_default(self, kind: Union[BlockKind, str], **fields) -> BlockStyle:
        """Change default formatting of a block kind, e.g. ``set_block_default("para", indent=0)``."""
        block_kind = resolve_block_kind(kind)
        if block_kind is None:
            raise ValueError(f"Unknown block kind: {kind}")
        self.block_styles[block_kind] = replace(self.block_styles[block_kind], **fields)
        return self.block_styles[block_kind]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_open(self) -> None:
        if self._state is not DocumentState.OPEN:
            raise RenderingError("Document is not open", self._state.value)

    def _add(self, flowable) -> None:
        self._story.append(flowable)
        self._page_dirty = True
        self._pending_break = None

    def _frame_width(self) -> float:
        return max(self.page_size[0] - self.margins.left - self.margins.right, 1.0)

    def _page_template(self) -> PageTemplate:
        width, height = self.page_size
        margins = self.margins
        self._template_serial += 1
        index = self._template_serial
        frame = Frame(
            margins.left,
            margins.bottom,
            max(width - margins.left - margins.right, 1.0),
            max(height - margins.top - margins.bottom, 1.0),
            leftPadding=0,
            rightPadding=0,
            topPadding=0,
            bottomPadding=0,
            id=f"body-{index}",
        )
        return PageTemplate(id=f"page-{index}", frames=[frame], pagesize=(width, height))

    def _register_fonts(self) -> None:
        for family, path in self.config.font_paths.items():
            canonical = FONT_FAMILY_ALIASES.get(family.lower(), family.lower())
            font_name = f"TextPDF-{canonical}"
            pdfmetrics.registerFont(TTFont(font_name, str(path)))
            pdfmetrics.registerFontFamily(
                font_name, normal=font_name, bold=font_name, italic=font_name, boldItalic=font_name
            )
            self._fonts[canonical] = font_name

    def _font_name(self, family: str) -> str:
        return self._fonts.get(family) or BUILTIN_FONTS.get(family, BUILTIN_FONTS["song"])

    def _chunk_markup(self, chunk: TextChunk, block_style: BlockStyle) -> Tuple[str, int]:
        """Convert a chunk to platypus paragraph markup; returns the markup and font size."""
        attrs = chunk.attributes
        family = block_style.font_family
        size = block_style.font_size
        styles = parse_font_style(block_style.font_style)

        value = attrs.get("font-family")
        if value is not None:
            alias = FONT_FAMILY_ALIASES.get(value.strip().lower())
            if alias is None:
                self.diagnostics.report(DiagnosticCode.UNKNOWN_FONT_FAMILY, f"font family '{value}' unknown")
            else:
                family = alias

        explicit_size = "font-size" in attrs
        size = coerce_attribute(attrs, "font-size", int, size, self.diagnostics)
        if "font-style" in attrs:
            styles = parse_font_style(attrs["font-style"])

        script = None
        if attrs.get("super", "").lower() == "true":
            script = "super"
        elif attrs.get("sub", "").lower() == "true":
            script = "sub"
        if script and not explicit_size:
            size = SCRIPT_FONT_SIZE

        try:
            contents, fill_in = pad_to_minlen(chunk.contents or "", attrs.get("minlen"))
        except ValueError:
            self.diagnostics.report(DiagnosticCode.INVALID_ATTRIBUTE, "minlen needs an integer value")
            contents, fill_in = chunk.contents or "", False
        if fill_in:
            styles = styles | {"underline"}

        text = preserve_spaces(escape(contents, quote=False)).replace("\n", "<br/>")
        text = f'<font name="{self._font_name(family)}" size="{size}">{text}</font>'
        if "bold" in styles:
            text = f"<b>{text}</b>"
        if "italic" in styles:
            text = f"<i>{text}</i>"
        if "underline" in styles:
            text = f"<u>{text}</u>"
        if script:
            text = f"<{script}>{text}</{script}>"
        return text, size

    def _paragraph_style(
        self,
        name: str,
        block_style: BlockStyle,
        attrs: Mapping[str, str],
        largest_size: int,
    ) -> ParagraphStyle:
        alignment = block_style.alignment
        value = attrs.get("align")
        if value is not None:
            if value.lower() in ALIGNMENT_MAP:
                alignment = value.lower()
            else:
                self.diagnostics.report(DiagnosticCode.INVALID_ATTRIBUTE, f"block alignment type '{value}' unknown")

        return ParagraphStyle(
            name=name,
            fontName=self._font_name(block_style.font_family),
            fontSize=block_style.font_size,
            leading=largest_size * LEADING_FACTOR,
            alignment=ALIGNMENT_MAP[alignment],
            firstLineIndent=coerce_attribute(attrs, "indent", float, block_style.indent, self.diagnostics),
            spaceBefore=coerce_attribute(attrs, "space-before", float, block_style.space_before, self.diagnostics),
            spaceAfter=coerce_attribute(attrs, "space-after", float, block_style.space_after, self.diagnostics),
        )

    def _table_rows(self, table: TextTable, column_count: int) -> Tuple[list, list]:
        """Lay cells out row-major, honouring ``colspan``; the last row is padded."""
        cell_style = self.block_styles[BlockKind.PARAGRAPH]
        rows: list = []
        spans: list = []
        row: list = []
        for chunk in table.cells:
            column = len(row)
            span = coerce_attribute(chunk.attributes, "colspan", int, 1, self.diagnostics, "cell")
            span = max(1, min(span, column_count - column))

            markup, size = self._chunk_markup(chunk, cell_style)
            style = self._paragraph_style("cell", replace(cell_style, indent=0.0, space_before=0.0), chunk.attributes, size)
            row.append(Paragraph(markup, style))
            row.extend([""] * (span - 1))
            if span > 1:
                spans.append(("SPAN", (column, len(rows)), (column + span - 1, len(rows))))

            if len(row) >= column_count:
                rows.append(row)
                row = []

        if row:
            row.extend([""] * (column_count - len(row)))
            rows.append(row)
        return rows, spans


