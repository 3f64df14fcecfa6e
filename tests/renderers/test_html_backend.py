"""
Tests for HTMLRenderer.
"""

import io

import pytest

from textpdf.diagnostics import DiagnosticCode
from textpdf.models import BlockKind, TextChunk, TextTable
from textpdf.renderers import HTMLRenderer, HTMLRendererConfig, HtmlValueMode


def render(build, config=None, diagnostics=None):
    """Open a renderer on a text stream, run ``build`` and return the page."""
    stream = io.StringIO()
    renderer = HTMLRenderer(stream, config=config, diagnostics=diagnostics)
    assert renderer.open()
    build(renderer)
    renderer.close()
    return stream.getvalue()


class TestHTMLRenderer:
    """Test cases for HTMLRenderer."""

    def test_document_skeleton(self):
        html = render(lambda renderer: None, HTMLRendererConfig(title="A & B"))

        assert html.startswith("<!DOCTYPE html>")
        assert "<title>A &amp; B</title>" in html
        assert 'charset=utf-8' in html
        assert html.rstrip().endswith("</html>")

    def test_links_and_extra_markup(self):
        config = HTMLRendererConfig(
            css_links=("form.css",),
            js_links=("form.js",),
            extra="<footer>end</footer>",
        )
        html = render(lambda renderer: None, config)

        assert '<link rel="stylesheet" type="text/css" href="form.css"/>' in html
        assert '<script src="form.js"></script>' in html
        assert html.index("<footer>end</footer>") < html.index("</body>")

    @pytest.mark.parametrize("kind,tag", [
        (BlockKind.TITLE, "h1"),
        (BlockKind.CHAPTER, "h2"),
        (BlockKind.SECTION, "h3"),
        (BlockKind.PARAGRAPH, "p"),
    ])
    def test_block_tags(self, kind, tag):
        html = render(lambda renderer: renderer.write_block(kind, [TextChunk("Text")]))

        assert f'<{tag} class="{kind.value}">Text</{tag}>' in html

    def test_block_and_inline_styles(self):
        chunks = [
            TextChunk("a", {"align": "center", "indent": "20"}),
            TextChunk("b", {"font-style": "bold,italic", "font-size": "14"}),
        ]
        html = render(lambda renderer: renderer.write_block(BlockKind.PARAGRAPH, chunks))

        assert '<p class="para" style="text-indent: 20px; text-align: center;">a' in html
        assert (
            '<span style="font-weight: bold; font-style: italic; font-size: 14pt;">b</span>' in html
        )

    def test_text_is_escaped(self):
        html = render(lambda renderer: renderer.write_block("para", [TextChunk("a < b & c\nd")]))

        assert "a &lt; b &amp; c<br/>d" in html

    def test_repeated_spaces_are_preserved(self):
        html = render(lambda renderer: renderer.write_block("para", [TextChunk(" ")]))

        assert "<p class=\"para\">\u00a0</p>" in html

    def test_placeholder_input(self):
        chunk = TextChunk("Alice", {"id": "name", "minlen": "10"}, is_placeholder=True)
        html = render(lambda renderer: renderer.write_block("para", [chunk]))

        assert '<input type="text" id="name" name="name" size="10" value="Alice" />' in html

    def test_placeholder_combo(self):
        chunk = TextChunk("", {"id": "name"}, is_placeholder=True)
        config = HTMLRendererConfig(value_mode=HtmlValueMode.COMBO)
        html = render(lambda renderer: renderer.write_block("para", [chunk]), config)

        assert 'readonly="readonly"' in html
        assert '<select id="name" name="name">' in html

    def test_unknown_block_kind_is_a_diagnostic(self, diagnostics):
        html = render(
            lambda renderer: renderer.write_block("figure", [TextChunk("x")]),
            diagnostics=diagnostics,
        )

        assert ">x<" not in html
        assert diagnostics.codes() == [DiagnosticCode.UNKNOWN_BLOCK]

    def test_rules_pages_and_images(self, diagnostics):
        def build(renderer):
            renderer.add_horizontal_rule({"percent": "50"})
            renderer.new_page()
            renderer.add_image({"src": "logo.png"})
            renderer.add_image({})

        html = render(build, diagnostics=diagnostics)

        assert '<hr style="width: 50%"/>' in html
        assert "<hr/>" in html
        assert '<img src="logo.png"/>' in html
        assert diagnostics.codes() == [DiagnosticCode.MISSING_IMAGE_SOURCE]

    def test_table_rows_and_widths(self):
        table = TextTable({"columns": "1,2"}, [TextChunk(text) for text in "ABC"])
        html = render(lambda renderer: renderer.write_table(table))

        assert html.count("<tr>") == 2
        assert '<td width="33%">A</td>' in html
        assert '<td width="66%">B</td>' in html
        assert '<td width="33%">C</td>' in html

    def test_zero_width_columns_are_skipped(self):
        table = TextTable({"columns": "0,1"}, [TextChunk("hidden"), TextChunk("shown")])
        html = render(lambda renderer: renderer.write_table(table))

        assert "hidden" not in html
        assert '<td width="100%">shown</td>' in html

    def test_table_without_columns_is_not_emitted(self):
        table = TextTable({}, [TextChunk("x")])
        html = render(lambda renderer: renderer.write_table(table))

        assert "<table" not in html

    def test_binary_stream_is_encoded(self):
        stream = io.BytesIO()
        renderer = HTMLRenderer(stream)
        renderer.open()
        renderer.write_block("para", [TextChunk("żółw")])
        renderer.close()

        assert "żółw" in stream.getvalue().decode("utf-8")

    def test_file_output(self, temp_dir):
        path = temp_dir / "out.html"
        renderer = HTMLRenderer(path)
        renderer.open()
        renderer.write_block("title", [TextChunk("Report")])
        renderer.close()

        assert '<h1 class="title">Report</h1>' in path.read_text(encoding="utf-8")
        assert not renderer.is_open()

    def test_open_twice_fails(self):
        renderer = HTMLRenderer(io.StringIO())

        assert renderer.open()
        assert not renderer.open()

    def test_abort_removes_partial_file(self, temp_dir):
        path = temp_dir / "out.html"
        renderer = HTMLRenderer(path)
        renderer.open()
        renderer.write_block("para", [TextChunk("half")])
        renderer.abort()

        assert not renderer.is_open()
        assert not path.exists()

    def test_abort_leaves_caller_stream_open(self):
        stream = io.StringIO()
        renderer = HTMLRenderer(stream)
        renderer.open()
        renderer.abort()
        renderer.close()

        assert not stream.closed
        assert "</html>" not in stream.getvalue()
