"""
Tests for the attribute inheritance stack and block assembly.
"""

from textpdf.engine import AttributeStack, BlockAssembler, TextBuffer
from textpdf.engine.block_assembler import EMPTY_PARAGRAPH_TEXT
from textpdf.models import BlockKind, TextChunk


def make_stack():
    pending = TextBuffer()
    block = BlockAssembler()
    return AttributeStack(pending, block), pending, block


class TestAttributeStack:
    """Test cases for AttributeStack."""

    def test_open_inherits_from_enclosing_chunk(self):
        stack, _, _ = make_stack()
        stack.open({"font-style": "bold", "font-size": "12"})
        inner = stack.open({"font-size": "14"})

        assert inner.attributes == {"font-style": "bold", "font-size": "14"}
        assert stack.depth == 2

    def test_open_flushes_pending_text_of_enclosing_chunk(self):
        stack, pending, block = make_stack()
        outer = stack.open({"font-style": "bold"})
        pending.append("before")
        stack.open({})

        assert [chunk.contents for chunk in block.chunks] == ["before"]
        assert not pending
        # flushed chunk is a clone
        outer.contents = "mutated"
        assert block.chunks[0].contents == "before"

    def test_close_flushes_pending_text(self):
        stack, pending, block = make_stack()
        stack.open({"align": "center"})
        pending.append("text")
        chunk = stack.close()

        assert chunk.contents == "text"
        assert block.chunks[0].attributes == {"align": "center"}
        assert stack.depth == 0

    def test_close_without_text_does_not_flush(self):
        stack, _, block = make_stack()
        stack.open({})
        stack.close()

        assert len(block) == 0

    def test_forced_close_flushes_empty_chunk(self):
        stack, _, block = make_stack()
        stack.open({"id": "missing"})
        stack.close(force=True)

        assert len(block) == 1
        assert block.chunks[0].contents == ""

    def test_close_on_empty_stack_is_tolerated(self):
        stack, _, _ = make_stack()

        assert stack.close() is None
        assert stack.discard() is None

    def test_discard_keeps_pending_for_parent(self):
        stack, pending, block = make_stack()
        stack.open({"font-style": "bold"})
        stack.open({})
        pending.append("\n")
        stack.discard()

        assert pending.value == "\n"
        assert len(block) == 0
        assert stack.top.attributes == {"font-style": "bold"}


class TestBlockAssembler:
    """Test cases for BlockAssembler."""

    def test_finish_returns_block_and_resets(self):
        assembler = BlockAssembler()
        assembler.add(TextChunk("a"))
        block = assembler.finish(BlockKind.TITLE)

        assert block.kind is BlockKind.TITLE
        assert block.text == "a"
        assert len(assembler) == 0

    def test_empty_paragraph_gets_filler_chunk(self):
        assembler = BlockAssembler()
        carrier = TextChunk(attributes={"align": "right"})
        block = assembler.finish(BlockKind.PARAGRAPH, carrier=carrier)

        assert len(block.chunks) == 1
        assert block.chunks[0].contents == EMPTY_PARAGRAPH_TEXT
        assert block.chunks[0].attributes == {"align": "right"}
        assert carrier.contents == ""

    def test_empty_non_paragraph_block_is_dropped(self):
        assembler = BlockAssembler()

        assert assembler.finish(BlockKind.CHAPTER, carrier=TextChunk()) is None

    def test_begin_clears_chunks(self):
        assembler = BlockAssembler()
        assembler.add(TextChunk("stale"))
        assembler.begin()

        assert assembler.chunks == []
