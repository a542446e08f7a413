#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_parser.py
"""Unit tests for the Markdown parser and its source positions."""

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
    MathBlock,
    MathInline,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    Text,
    ThematicBreak,
    iter_nodes,
)
from mdtranspile.exceptions import InvalidOptionsError, ParsingError, ValidationError
from mdtranspile.options import HtmlParserOptions, MarkdownParserOptions
from mdtranspile.parsers import MarkdownParser, parse_markdown


def _slice(source, node):
    start, end = node.span
    return source[start:end]


@pytest.mark.unit
class TestBlockParsing:
    """Tests for block-level structure."""

    def test_heading_and_paragraph(self):
        doc = parse_markdown("# Hello\n\nThis is **bold**.")
        assert isinstance(doc, Document)
        heading, paragraph = doc.children
        assert isinstance(heading, Heading)
        assert heading.level == 1
        assert heading.content[0].content == "Hello"
        assert isinstance(paragraph, Paragraph)
        assert [node.kind for node in paragraph.content] == ["text", "strong", "text"]

    def test_setext_heading(self):
        doc = parse_markdown("Title\n=====\n")
        heading = doc.children[0]
        assert isinstance(heading, Heading)
        assert heading.level == 1

    def test_fenced_code_block(self):
        source = "```python title=x\nprint(1)\n```\n"
        block = parse_markdown(source).children[0]
        assert isinstance(block, CodeBlock)
        assert block.content == "print(1)"
        assert block.language == "python"
        assert block.info_string == "python title=x"
        assert block.fence_char == "`"
        assert block.fence_length == 3
        assert _slice(source, block) == "```python title=x\nprint(1)\n```"

    def test_tilde_fence(self):
        block = parse_markdown("~~~~\ncode\n~~~~\n").children[0]
        assert block.fence_char == "~"
        assert block.fence_length == 4
        assert block.language is None

    def test_indented_code_block(self):
        block = parse_markdown("    x = 1\n").children[0]
        assert isinstance(block, CodeBlock)
        assert block.content == "x = 1"
        assert block.fence_length == 0

    def test_block_quote(self):
        quote = parse_markdown("> quoted text\n").children[0]
        assert isinstance(quote, BlockQuote)
        assert isinstance(quote.children[0], Paragraph)

    def test_bullet_list(self):
        lst = parse_markdown("- one\n- two\n").children[0]
        assert isinstance(lst, List)
        assert not lst.ordered
        assert lst.tight
        assert len(lst.items) == 2

    def test_ordered_list_start(self):
        lst = parse_markdown("3. three\n4. four\n").children[0]
        assert lst.ordered
        assert lst.start == 3

    def test_loose_list(self):
        lst = parse_markdown("- one\n\n- two\n").children[0]
        assert not lst.tight

    def test_task_list(self):
        lst = parse_markdown("- [x] done\n- [ ] todo\n- plain\n").children[0]
        assert [item.task_status for item in lst.items] == ["checked", "unchecked", None]

    def test_task_list_disabled(self):
        options = MarkdownParserOptions(parse_task_lists=False)
        lst = parse_markdown("- [x] done\n", options).children[0]
        assert lst.items[0].task_status is None

    def test_table(self):
        source = "| a | b |\n|:--|--:|\n| 1 | 2 |\n"
        table = parse_markdown(source).children[0]
        assert isinstance(table, Table)
        assert table.header is not None
        assert table.header.is_header
        assert table.alignments == ["left", "right"]
        assert len(table.rows) == 1
        assert table.rows[0].cells[1].content[0].content == "2"

    def test_thematic_break(self):
        doc = parse_markdown("a\n\n***\n\nb\n")
        assert isinstance(doc.children[1], ThematicBreak)

    def test_html_block(self):
        block = parse_markdown("<div>\nhi\n</div>\n").children[0]
        assert isinstance(block, HTMLBlock)
        assert block.content == "<div>\nhi\n</div>"

    def test_math_block(self):
        block = parse_markdown("$$\nx^2\n$$\n").children[0]
        assert isinstance(block, MathBlock)
        assert "x^2" in block.content


@pytest.mark.unit
class TestInlineParsing:
    """Tests for inline nodes."""

    def _inline(self, source):
        return parse_markdown(source).children[0].content

    def test_emphasis_and_strong(self):
        content = self._inline("*a* **b**")
        assert isinstance(content[0], Emphasis)
        assert isinstance(content[2], Strong)

    def test_strikethrough(self):
        assert isinstance(self._inline("~~gone~~")[0], Strikethrough)

    def test_code_span(self):
        code = self._inline("`x = 1`")[0]
        assert isinstance(code, Code)
        assert code.content == "x = 1"

    def test_link(self):
        link = self._inline('[text](http://example.com "Title")')[0]
        assert isinstance(link, Link)
        assert link.url == "http://example.com"
        assert link.title == "Title"
        assert link.content[0].content == "text"

    def test_image(self):
        image = self._inline("![alt *text*](pic.png)")[0]
        assert isinstance(image, Image)
        assert image.url == "pic.png"
        assert image.alt_text == "alt text"

    def test_soft_and_hard_breaks(self):
        content = self._inline("one\ntwo  \nthree")
        breaks = [node for node in content if isinstance(node, LineBreak)]
        assert [b.soft for b in breaks] == [True, False]

    def test_inline_math(self):
        math = [node for node in self._inline("area $\\pi r^2$ here") if isinstance(node, MathInline)]
        assert math[0].content == "\\pi r^2"

    def test_math_disabled(self):
        options = MarkdownParserOptions(parse_math=False)
        content = parse_markdown("cost $5 and $6", options).children[0].content
        assert not any(isinstance(node, MathInline) for node in content)

    def test_entities_decoded(self):
        text = self._inline("a &amp; b")
        assert "".join(node.content for node in text if isinstance(node, Text)) == "a & b"

    @pytest.mark.parametrize("source", ["*a **b** c*", "**a *b* c**", "*a*b*c*", "***a** b*", "~~a *b*~~"])
    def test_nested_delimiters_leave_no_empty_text(self, source):
        texts = [node for node in iter_nodes(parse_markdown(source)) if isinstance(node, Text)]
        assert texts
        assert all(node.content for node in texts)


@pytest.mark.unit
class TestFrontmatter:
    """Tests for frontmatter handling in the parser."""

    def test_frontmatter_node_and_metadata(self):
        doc = parse_markdown("---\ntitle: Hi\n---\n# Body\n")
        frontmatter = doc.children[0]
        assert isinstance(frontmatter, Frontmatter)
        assert frontmatter.content == "title: Hi"
        assert frontmatter.span == (0, len("---\ntitle: Hi\n---"))
        assert doc.metadata == {"title": "Hi"}
        assert isinstance(doc.children[1], Heading)

    def test_pandoc_frontmatter_normalized(self):
        doc = parse_markdown("---\ntitle: Hi\n...\nBody\n")
        assert isinstance(doc.children[0], Frontmatter)
        assert doc.metadata["title"] == "Hi"

    def test_pandoc_frontmatter_without_normalization(self):
        options = MarkdownParserOptions(normalize_frontmatter=False)
        doc = parse_markdown("---\ntitle: Hi\n...\nBody\n", options)
        assert not isinstance(doc.children[0], Frontmatter)

    def test_metadata_loading_disabled(self):
        options = MarkdownParserOptions(parse_frontmatter_metadata=False)
        doc = parse_markdown("---\ntitle: Hi\n---\nBody\n", options)
        assert isinstance(doc.children[0], Frontmatter)
        assert doc.metadata == {}

    def test_malformed_yaml_still_parses(self):
        doc = parse_markdown("---\ntitle: [oops\n---\nBody\n")
        assert isinstance(doc.children[0], Frontmatter)
        assert doc.metadata == {}


@pytest.mark.unit
class TestSourcePositions:
    """Tests for span recovery."""

    def test_heading_span(self):
        doc = MarkdownParser().parse("# Hello\n\nThis is **bold**.")
        assert doc.children[0].span == (0, 7)

    def test_text_spans_match_source(self):
        source = "Some *emphasis* and **strong** text.\n"
        paragraph = parse_markdown(source).children[0]
        for node in paragraph.content:
            assert _slice(source, node) in source
        text = paragraph.content[0]
        assert _slice(source, text) == "Some "
        emphasis = paragraph.content[1]
        assert _slice(source, emphasis) == "*emphasis*"

    def test_spans_after_frontmatter(self):
        source = "---\na: 1\n---\nHello there\n"
        paragraph = parse_markdown(source).children[1]
        assert _slice(source, paragraph.content[0]) == "Hello there"

    def test_line_and_column(self):
        source = "first\n\nsecond\n"
        paragraph = parse_markdown(source).children[1]
        location = paragraph.source_location
        assert location.line == 3
        assert location.column == 1

    def test_document_span(self):
        source = "a\n\nb\n"
        assert parse_markdown(source).span == (0, len(source))

    def test_positions_disabled(self):
        doc = parse_markdown("text", MarkdownParserOptions(track_positions=False))
        assert doc.span is None
        assert doc.children[0].span is None


@pytest.mark.unit
class TestErrors:
    """Tests for parser error handling."""

    def test_bytes_input(self):
        doc = parse_markdown("héllo".encode("utf-8"))
        assert doc.children[0].content[0].content == "héllo"

    def test_invalid_utf8(self):
        with pytest.raises(ValidationError):
            parse_markdown(b"\xff\xfe\xfa")

    def test_non_text_input(self):
        with pytest.raises(ValidationError):
            parse_markdown(42)

    def test_wrong_options_type(self):
        with pytest.raises(InvalidOptionsError):
            MarkdownParser(HtmlParserOptions())

    def test_unterminated_fence_is_lenient_by_default(self):
        block = parse_markdown("```\ncode without end\n").children[0]
        assert isinstance(block, CodeBlock)
        assert block.content.startswith("code without end")

    def test_unterminated_fence_strict(self):
        with pytest.raises(ParsingError) as exc_info:
            parse_markdown("```\ncode without end\n", MarkdownParserOptions(strict_fences=True))
        assert exc_info.value.offset == 0
        assert exc_info.value.expected == "```"

    def test_empty_document(self):
        doc = parse_markdown("")
        assert doc.children == []
