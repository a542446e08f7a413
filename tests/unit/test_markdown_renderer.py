#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_renderer.py
"""Unit tests for MarkdownRenderer."""

import io

import pytest

from mdtranspile.ast import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Frontmatter,
    Heading,
    HTMLBlock,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from mdtranspile.exceptions import InvalidOptionsError, RenderingError
from mdtranspile.options import HtmlRendererOptions, MarkdownRendererOptions
from mdtranspile.parsers import parse_markdown
from mdtranspile.renderers import MarkdownRenderer, render_markdown


def _para(*nodes):
    return Document(children=[Paragraph(content=list(nodes))])


def _plain(paragraph):
    parts = []
    for node in paragraph.content:
        if isinstance(node, LineBreak):
            parts.append("\n")
        else:
            assert isinstance(node, Text), node
            parts.append(node.content)
    return "".join(parts)


@pytest.mark.unit
class TestBlockRendering:
    """Tests for block node rendering."""

    def test_heading_atx(self):
        doc = Document(children=[Heading(level=2, content=[Text(content="Title")])])
        assert render_markdown(doc) == "## Title\n"

    def test_heading_setext(self):
        doc = Document(
            children=[
                Heading(level=1, content=[Text(content="Top")]),
                Heading(level=2, content=[Text(content="Sub")]),
                Heading(level=3, content=[Text(content="Deep")]),
            ]
        )
        result = render_markdown(doc, MarkdownRendererOptions(use_hash_headings=False))
        assert result == "Top\n===\n\nSub\n---\n\n### Deep\n"

    def test_paragraphs_separated_by_blank_line(self):
        doc = Document(children=[Paragraph(content=[Text(content="a")]), Paragraph(content=[Text(content="b")])])
        assert render_markdown(doc) == "a\n\nb\n"

    def test_block_quote(self):
        doc = Document(
            children=[
                BlockQuote(
                    children=[Paragraph(content=[Text(content="one")]), Paragraph(content=[Text(content="two")])]
                )
            ]
        )
        assert render_markdown(doc) == "> one\n>\n> two\n"

    def test_tight_bullet_list(self):
        doc = Document(
            children=[
                List(
                    ordered=False,
                    items=[
                        ListItem(children=[Paragraph(content=[Text(content="one")])]),
                        ListItem(children=[Paragraph(content=[Text(content="two")])]),
                    ],
                )
            ]
        )
        assert render_markdown(doc) == "- one\n- two\n"

    def test_loose_ordered_list_with_start(self):
        doc = Document(
            children=[
                List(
                    ordered=True,
                    start=3,
                    tight=False,
                    items=[
                        ListItem(children=[Paragraph(content=[Text(content="c")])]),
                        ListItem(children=[Paragraph(content=[Text(content="d")])]),
                    ],
                )
            ]
        )
        assert render_markdown(doc) == "3. c\n\n4. d\n"

    def test_nested_list_bullets_cycle(self):
        inner = List(ordered=False, items=[ListItem(children=[Paragraph(content=[Text(content="inner")])])])
        outer = List(
            ordered=False,
            items=[ListItem(children=[Paragraph(content=[Text(content="outer")]), inner])],
        )
        assert render_markdown(Document(children=[outer])) == "- outer\n  * inner\n"

    def test_task_items(self):
        doc = Document(
            children=[
                List(
                    ordered=False,
                    items=[
                        ListItem(children=[Paragraph(content=[Text(content="done")])], task_status="checked"),
                        ListItem(children=[Paragraph(content=[Text(content="todo")])], task_status="unchecked"),
                    ],
                )
            ]
        )
        assert render_markdown(doc) == "- [x] done\n- [ ] todo\n"

    def test_code_block_fenced_with_info(self):
        doc = Document(children=[CodeBlock(content="print(1)", language="python", info_string="python")])
        assert render_markdown(doc) == "```python\nprint(1)\n```\n"

    def test_code_block_fence_longer_than_content_run(self):
        doc = Document(children=[CodeBlock(content="```\nnested\n```")])
        assert render_markdown(doc) == "````\n```\nnested\n```\n````\n"

    def test_indented_code_block_rendered_fenced(self):
        doc = Document(children=[CodeBlock(content="x = 1", fence_char="", fence_length=0)])
        assert render_markdown(doc) == "```\nx = 1\n```\n"

    def test_tilde_fence_option(self):
        doc = Document(children=[CodeBlock(content="x")])
        result = render_markdown(doc, MarkdownRendererOptions(code_fence_char="~"))
        assert result == "~~~\nx\n~~~\n"

    def test_math_block(self):
        assert render_markdown(Document(children=[MathBlock(content="x^2")])) == "$$\nx^2\n$$\n"

    def test_html_block_verbatim(self):
        doc = Document(children=[HTMLBlock(content="<div>*raw*</div>\n")])
        assert render_markdown(doc) == "<div>*raw*</div>\n"

    def test_thematic_break(self):
        assert render_markdown(Document(children=[ThematicBreak()])) == "---\n"

    def test_table_with_alignment(self):
        table = Table(
            header=TableRow(
                cells=[TableCell(content=[Text(content="Name")]), TableCell(content=[Text(content="Qty")])],
                is_header=True,
            ),
            rows=[TableRow(cells=[TableCell(content=[Text(content="Tea")]), TableCell(content=[Text(content="2")])])],
            alignments=["left", "right"],
        )
        expected = "| Name | Qty |\n| :--- | ---: |\n| Tea | 2 |\n"
        assert render_markdown(Document(children=[table])) == expected

    def test_table_without_header_gets_empty_header(self):
        table = Table(rows=[TableRow(cells=[TableCell(content=[Text(content="a")])])])
        assert render_markdown(Document(children=[table])) == "|  |\n| --- |\n| a |\n"

    def test_table_cell_pipe_escaped(self):
        table = Table(
            header=TableRow(cells=[TableCell(content=[Text(content="a|b")])], is_header=True),
            alignments=[None],
        )
        assert "a\\|b" in render_markdown(Document(children=[table]))

    def test_frontmatter(self):
        doc = Document(children=[Frontmatter(content="title: x"), Paragraph(content=[Text(content="body")])])
        assert render_markdown(doc) == "---\ntitle: x\n---\n\nbody\n"

    def test_frontmatter_suppressed(self):
        doc = Document(children=[Frontmatter(content="title: x"), Paragraph(content=[Text(content="body")])])
        assert render_markdown(doc, MarkdownRendererOptions(render_frontmatter=False)) == "body\n"

    def test_empty_document(self):
        assert render_markdown(Document()) == ""


@pytest.mark.unit
class TestInlineRendering:
    """Tests for inline node rendering."""

    def test_emphasis_symbols(self):
        doc = _para(Emphasis(content=[Text(content="a")]), Text(content=" "), Strong(content=[Text(content="b")]))
        assert render_markdown(doc) == "*a* **b**\n"
        options = MarkdownRendererOptions(emphasis_symbol="_", strong_symbol="__")
        assert render_markdown(doc, options) == "_a_ __b__\n"

    def test_strikethrough(self):
        assert render_markdown(_para(Strikethrough(content=[Text(content="x")]))) == "~~x~~\n"

    def test_code_span_with_backticks(self):
        assert render_markdown(_para(Code(content="a`b"))) == "``a`b``\n"
        assert render_markdown(_para(Code(content="`x"))) == "`` `x ``\n"

    def test_link_with_title(self):
        doc = _para(Link(url="http://example.com", content=[Text(content="site")], title='say "hi"'))
        assert render_markdown(doc) == '[site](http://example.com "say \\"hi\\"")\n'

    def test_link_destination_with_space(self):
        doc = _para(Link(url="my file.md", content=[Text(content="f")]))
        assert render_markdown(doc) == "[f](<my file.md>)\n"

    def test_autolink(self):
        doc = _para(Link(url="https://example.com", content=[Text(content="https://example.com")]))
        assert render_markdown(doc) == "<https://example.com>\n"

    def test_image(self):
        doc = _para(Image(url="pic.png", alt_text="a [b]"))
        assert render_markdown(doc) == "![a \\[b\\]](pic.png)\n"

    def test_line_breaks(self):
        doc = _para(
            Text(content="a"),
            LineBreak(soft=True),
            Text(content="b"),
            LineBreak(soft=False),
            Text(content="c"),
        )
        assert render_markdown(doc) == "a\nb  \nc\n"

    def test_break_in_heading_becomes_space(self):
        doc = Document(children=[Heading(level=1, content=[Text(content="a"), LineBreak(), Text(content="b")])])
        assert render_markdown(doc) == "# a b\n"

    def test_math_inline(self):
        doc = _para(MathInline(content="x"), Text(content=" "), MathInline(content="y", metadata={"display": True}))
        assert render_markdown(doc) == "$x$ $$y$$\n"

    def test_emphasis_whitespace_moved_outside(self):
        doc = _para(Text(content="a"), Emphasis(content=[Text(content=" b ")]), Text(content="c"))
        assert render_markdown(doc) == "a *b* c\n"
        doc = _para(Text(content="a "), Strong(content=[Text(content="b ")]), Text(content="c"))
        assert render_markdown(doc) == "a **b** c\n"
        doc = _para(Strikethrough(content=[Text(content=" s")]), Text(content="!"))
        assert render_markdown(doc).endswith("~~s~~!\n")

    def test_whitespace_only_emphasis_dropped(self):
        doc = _para(Text(content="a"), Emphasis(content=[Text(content=" ")]), Text(content="b"))
        assert render_markdown(doc) == "a b\n"


@pytest.mark.unit
class TestEscaping:
    """Tests for context-aware escaping."""

    def test_always_escaped(self):
        assert render_markdown(_para(Text(content="*a* [b] `c` \\"))) == "\\*a\\* \\[b\\] \\`c\\` \\\\\n"

    def test_underscore_inside_word_kept(self):
        assert render_markdown(_para(Text(content="snake_case _x_"))) == "snake_case \\_x\\_\n"

    def test_line_start_markers(self):
        assert render_markdown(_para(Text(content="# not heading"))) == "\\# not heading\n"
        assert render_markdown(_para(Text(content="> not quote"))) == "\\> not quote\n"
        assert render_markdown(_para(Text(content="- not bullet"))) == "\\- not bullet\n"
        assert render_markdown(_para(Text(content="1. not list"))) == "1\\. not list\n"

    def test_mid_line_markers_untouched(self):
        assert render_markdown(_para(Text(content="a # b - c 1. d"))) == "a # b - c 1. d\n"

    def test_escaping_disabled(self):
        options = MarkdownRendererOptions(escape_special=False)
        assert render_markdown(_para(Text(content="*raw*")), options) == "*raw*\n"

    def test_html_and_entities_escaped(self):
        assert render_markdown(_para(Text(content="<b>x</b>"))) == "\\<b>x\\</b>\n"
        assert render_markdown(_para(Text(content="&amp; &copy;"))) == "\\&amp; \\&copy;\n"

    def test_math_and_strikethrough_markers_escaped(self):
        assert render_markdown(_para(Text(content="$x$"))) == "\\$x\\$\n"
        assert render_markdown(_para(Text(content="~~s~~"))) == "\\~\\~s\\~\\~\n"

    def test_rule_lines_escaped(self):
        assert render_markdown(_para(Text(content="---"))) == "\\---\n"
        assert render_markdown(_para(Text(content="a\n==="))) == "a\n\\===\n"
        assert render_markdown(_para(Text(content="- - -"))) == "\\- - -\n"

    def test_dash_run_inside_line_untouched(self):
        assert render_markdown(_para(Text(content="a --- b"))) == "a --- b\n"


@pytest.mark.unit
class TestEscapedTextReadsBack:
    """Rendered text parses back to the same literal characters."""

    @pytest.mark.parametrize(
        "text",
        [
            "<b>x</b>",
            "<!-- not a comment -->",
            "&amp; and &copy;",
            "price: $5 and $6",
            "$x$",
            "~~not struck~~",
            "---",
            "***",
            "___",
            "a\n===",
            "a\n---",
            "1) first",
            "snake_case *stars* [link](x)",
        ],
    )
    def test_text_survives(self, text):
        doc = parse_markdown(render_markdown(_para(Text(content=text))))
        assert len(doc.children) == 1
        paragraph = doc.children[0]
        assert isinstance(paragraph, Paragraph)
        assert _plain(paragraph) == text

    def test_spaced_emphasis_stays_emphasis(self):
        rendered = render_markdown(_para(Emphasis(content=[Text(content=" spaced ")]), Text(content="x")))
        assert rendered == " *spaced* x\n"
        paragraph = parse_markdown(rendered).children[0]
        assert isinstance(paragraph, Paragraph)
        emphasis = next(node for node in paragraph.content if isinstance(node, Emphasis))
        assert emphasis.content[0].content == "spaced"


@pytest.mark.unit
class TestRendererBehavior:
    """Tests for renderer plumbing."""

    def test_wrong_options_type(self):
        with pytest.raises(InvalidOptionsError):
            MarkdownRenderer(HtmlRendererOptions())

    def test_renderer_reusable(self):
        renderer = MarkdownRenderer()
        first = renderer.render_to_string(_para(Text(content="one")))
        second = renderer.render_to_string(_para(Text(content="two")))
        assert (first, second) == ("one\n", "two\n")

    def test_invalid_child_raises_rendering_error(self):
        doc = Document(children=["not a node"])
        with pytest.raises(RenderingError):
            render_markdown(doc)

    def test_render_to_path(self, tmp_path):
        target = tmp_path / "out.md"
        MarkdownRenderer().render(_para(Text(content="hi")), target)
        assert target.read_text(encoding="utf-8") == "hi\n"

    def test_render_to_binary_stream(self):
        buffer = io.BytesIO()
        MarkdownRenderer().render(_para(Text(content="hé")), buffer)
        assert buffer.getvalue() == "hé\n".encode("utf-8")

    def test_render_to_text_stream(self):
        buffer = io.StringIO()
        MarkdownRenderer().render(_para(Text(content="hi")), buffer)
        assert buffer.getvalue() == "hi\n"
