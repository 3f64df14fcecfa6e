"""
Tests for the data model: chunks, block kinds, tables and page setup.
"""

import pytest
from reportlab.lib.pagesizes import A4, B5

from textpdf.models import (
    Block,
    BlockKind,
    PageMargins,
    TextChunk,
    TextTable,
    lookup_page_size,
    normalize_columns,
    parse_columns,
)


class TestTextChunk:
    """Test cases for TextChunk."""

    def test_update_attributes_overrides_key_by_key(self):
        chunk = TextChunk(attributes={"font-style": "bold", "font-size": "12"})
        chunk.update_attributes({"font-size": "14"})

        assert chunk.attributes == {"font-style": "bold", "font-size": "14"}

    def test_update_attributes_skips_none_values(self):
        chunk = TextChunk()
        chunk.update_attributes({"align": None, "indent": "10"})

        assert chunk.attributes == {"indent": "10"}

    def test_clone_is_decoupled(self):
        chunk = TextChunk("text", {"font-style": "italic"}, is_placeholder=True)
        copy = chunk.clone()
        chunk.contents = "changed"
        chunk.set_attribute("font-style", "bold")

        assert copy.contents == "text"
        assert copy.attributes == {"font-style": "italic"}
        assert copy.is_placeholder is True

    def test_get_with_default(self):
        chunk = TextChunk(attributes={"id": "name"})

        assert chunk.get("id") == "name"
        assert chunk.get("minlen", "0") == "0"


class TestBlockKind:
    """Test cases for BlockKind."""

    @pytest.mark.parametrize("name,kind", [
        ("title", BlockKind.TITLE),
        ("CHAPTER", BlockKind.CHAPTER),
        ("Section", BlockKind.SECTION),
        ("para", BlockKind.PARAGRAPH),
        ("pagebreak", BlockKind.PAGE_BREAK),
    ])
    def test_from_name(self, name, kind):
        assert BlockKind.from_name(name) is kind

    def test_from_name_unknown(self):
        assert BlockKind.from_name("figure") is None
        assert BlockKind.from_name(None) is None

    def test_page_break_is_not_content(self):
        assert BlockKind.PARAGRAPH.is_content
        assert not BlockKind.PAGE_BREAK.is_content

    def test_block_text(self):
        block = Block(BlockKind.PARAGRAPH, [TextChunk("Hello, "), TextChunk("world")])

        assert block.text == "Hello, world"


class TestTextTable:
    """Test cases for TextTable and column parsing."""

    def test_parse_columns(self):
        assert parse_columns("3, 7") == [3, 7]

    @pytest.mark.parametrize("value", ["a,b", "1,-1", "0,0", ""])
    def test_parse_columns_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            parse_columns(value)

    def test_normalize_columns_floors_percentages(self):
        assert normalize_columns([1, 1]) == [50, 50]
        assert normalize_columns([1, 2]) == [33, 66]

    def test_columns_missing_or_malformed(self):
        assert TextTable().columns is None
        assert TextTable(attributes={"columns": "x"}).columns is None
        assert TextTable(attributes={"columns": "x"}).column_count == 1

    def test_column_percentages(self):
        table = TextTable(attributes={"columns": "1,1"})

        assert table.column_percentages() == [50, 50]

    def test_width_defaults_to_full(self):
        assert TextTable().width == 100.0
        assert TextTable(attributes={"width": "80"}).width == 80.0
        assert TextTable(attributes={"width": "wide"}).width == 100.0

    def test_rows_are_row_major(self):
        table = TextTable(attributes={"columns": "1,1"})
        for text in "ABC":
            table.add_cell(TextChunk(text))

        rows = [[cell.contents for cell in row] for row in table.rows()]

        assert rows == [["A", "B"], ["C"]]
        assert table.last_cell().contents == "C"


class TestPageSetup:
    """Test cases for page sizes and margins."""

    def test_lookup_page_size(self):
        assert lookup_page_size("a4") == A4
        assert lookup_page_size(" B5 ") == B5
        assert lookup_page_size("a11") is None
        assert lookup_page_size(None) is None

    def test_default_margins(self):
        assert PageMargins() == PageMargins(45, 45, 50, 56)

    def test_parse_margins(self):
        assert PageMargins.parse("10, 20, 30, 40") == PageMargins(10, 20, 30, 40)

    @pytest.mark.parametrize("value", ["10,20,30", "a,b,c,d"])
    def test_parse_margins_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            PageMargins.parse(value)
