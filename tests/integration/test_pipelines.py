#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_pipelines.py
"""Integration tests for the conversion pipelines and their hooks."""

import asyncio
import dataclasses

import pytest

from mdtranspile import html_to_markdown, markdown_to_html
from mdtranspile.ast import Document, HtmlElement, HtmlRoot, HtmlText, Paragraph, Text
from mdtranspile.converters import MarkdownToHtmlConverter
from mdtranspile.exceptions import ParsingError, TransformError, ValidationError
from mdtranspile.options import HtmlRendererOptions, MarkdownParserOptions, MarkdownToHtmlOptions
from mdtranspile.parsers import MarkdownParser
from mdtranspile.renderers import HtmlRenderer
from mdtranspile.transforms import TranspilePipeline


def _append_paragraph(text):
    def hook(document):
        return dataclasses.replace(document, children=[*document.children, Paragraph(content=[Text(content=text)])])

    hook.__qualname__ = f"append_{text}"
    return hook


@pytest.mark.integration
class TestApi:
    """Tests for the async API functions."""

    def test_markdown_to_html(self):
        html = asyncio.run(markdown_to_html("# Title\n\nBody *text*\n"))
        assert html == "<h1>Title</h1>\n<p>Body <em>text</em></p>\n"

    def test_markdown_bytes(self):
        assert asyncio.run(markdown_to_html("café".encode("utf-8"))) == "<p>café</p>\n"

    def test_html_to_markdown(self):
        markdown = asyncio.run(html_to_markdown("<h1>Title</h1><p>Body</p>"))
        assert markdown == "# Title\n\nBody\n"

    def test_standalone(self):
        html = asyncio.run(
            markdown_to_html("---\ntitle: From Meta\n---\n\nx\n", renderer_options=HtmlRendererOptions(standalone=True))
        )
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>From Meta</title>" in html

    def test_invalid_input(self):
        with pytest.raises(ValidationError):
            asyncio.run(markdown_to_html(42))

    def test_parsing_error_surfaces_unchanged(self):
        options = MarkdownParserOptions(strict_fences=True)
        with pytest.raises(ParsingError) as exc_info:
            asyncio.run(markdown_to_html("```\nnever closed\n", parser_options=options))
        assert exc_info.value.offset == 0


@pytest.mark.integration
class TestHooks:
    """Tests for hook ordering and failure reporting."""

    def test_sync_hooks_run_in_order(self):
        html = asyncio.run(markdown_to_html("start\n", hooks=[_append_paragraph("one"), _append_paragraph("two")]))
        assert html == "<p>start</p>\n<p>one</p>\n<p>two</p>\n"

    def test_async_hook(self):
        calls = []

        async def resolve(document):
            await asyncio.sleep(0)
            calls.append(len(document.children))
            return document

        asyncio.run(markdown_to_html("a\n\nb\n", hooks=[resolve, _append_paragraph("c")]))
        assert calls == [2]

    def test_html_hooks_see_html_tree(self):
        seen = []

        def add_class(root):
            seen.append(type(root))
            first = root.children[0]
            assert isinstance(first, HtmlElement)
            first.properties["class"] = "lead"
            return root

        html = asyncio.run(markdown_to_html("x\n", html_hooks=[add_class]))
        assert seen == [HtmlRoot]
        assert html == '<p class="lead">x</p>\n'

    def test_html_to_markdown_hooks_get_markdown_tree(self):
        seen = []

        def record(document):
            seen.append(type(document))
            return document

        asyncio.run(html_to_markdown("<p>x</p>", hooks=[record]))
        assert seen == [Document]

    def test_hook_returning_none(self):
        def forgetful(document):
            document.children.clear()

        with pytest.raises(TransformError) as exc_info:
            asyncio.run(markdown_to_html("x\n", hooks=[forgetful]))
        assert "forgetful" in exc_info.value.transform_name
        assert "None" in str(exc_info.value)

    def test_hook_raising(self):
        async def broken(document):
            raise KeyError("missing")

        with pytest.raises(TransformError) as exc_info:
            asyncio.run(markdown_to_html("x\n", hooks=[broken]))
        error = exc_info.value
        assert "broken" in error.transform_name
        assert isinstance(error.original_error, KeyError)

    def test_later_hooks_skipped_after_failure(self):
        calls = []

        def failing(document):
            raise RuntimeError("stop")

        def after(document):
            calls.append("after")
            return document

        with pytest.raises(TransformError):
            asyncio.run(markdown_to_html("x\n", hooks=[failing, after]))
        assert calls == []


@pytest.mark.integration
class TestPipeline:
    """Tests for TranspilePipeline directly."""

    def test_run_sync(self):
        pipeline = TranspilePipeline.markdown_to_html()
        assert pipeline.run_sync("*a*\n") == "<p><em>a</em></p>\n"

    def test_bad_direction(self):
        with pytest.raises(ValueError):
            TranspilePipeline("sideways", MarkdownParser(), MarkdownToHtmlConverter(), HtmlRenderer())

    def test_concurrent_runs_share_pipeline(self):
        async def tag(root):
            await asyncio.sleep(0)
            root.children.append(HtmlText(value="!"))
            return root

        pipeline = TranspilePipeline.markdown_to_html(html_hooks=[tag])
        sources = [f"doc {index}\n" for index in range(10)]

        async def run_all():
            return await asyncio.gather(*(pipeline.run(source) for source in sources))

        results = asyncio.run(run_all())
        assert results == [f"<p>doc {index}</p>!\n" for index in range(10)]


@pytest.mark.integration
class TestRoundTrip:
    """Tests for Markdown to HTML to Markdown conversions."""

    def test_html_is_stable_after_round_trip(self, sample_markdown):
        first_html = asyncio.run(markdown_to_html(sample_markdown))
        markdown = asyncio.run(html_to_markdown(first_html))
        second_html = asyncio.run(markdown_to_html(markdown))
        assert second_html == first_html

    def test_simple_round_trip(self):
        source = "# Title\n\nSome *emphasis* and **strong** text.\n\n- a\n- b\n"
        html = asyncio.run(markdown_to_html(source))
        assert asyncio.run(html_to_markdown(html)) == source

    def test_frontmatter_round_trip(self):
        source = "---\ntitle: Kept\n---\n\nBody\n"
        html = asyncio.run(markdown_to_html(source, converter_options=MarkdownToHtmlOptions(keep_frontmatter=True)))
        assert html.startswith("<!--frontmatter")
        markdown = asyncio.run(html_to_markdown(html))
        assert markdown.startswith("---\ntitle: Kept\n---\n")
        assert markdown.endswith("Body\n")

    def test_escaped_markup_stays_text(self):
        html = "<p>&lt;script&gt;alert(1)&lt;/script&gt; &amp;copy; $x$ ~~y~~</p>\n"
        markdown = asyncio.run(html_to_markdown(html))
        second_html = asyncio.run(markdown_to_html(markdown))
        assert "<script>" not in second_html
        assert second_html == html

    def test_literal_rule_line_stays_paragraph(self):
        html = "<p>a\n---</p>\n"
        second_html = asyncio.run(markdown_to_html(asyncio.run(html_to_markdown(html))))
        assert "<h2>" not in second_html
        assert "<hr" not in second_html
