#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_options.py
"""Tests for the frozen options dataclasses."""

import dataclasses

import pytest

from mdtranspile.options import (
    HtmlParserOptions,
    HtmlRendererOptions,
    HtmlToMarkdownOptions,
    MarkdownParserOptions,
    MarkdownRendererOptions,
    MarkdownToHtmlOptions,
)


@pytest.mark.unit
class TestDefaults:
    """Tests for documented default values."""

    def test_markdown_parser_defaults(self):
        options = MarkdownParserOptions()
        assert options.normalize_frontmatter
        assert options.parse_frontmatter_metadata
        assert options.parse_tables and options.parse_strikethrough
        assert options.parse_task_lists and options.parse_math
        assert not options.strict_fences
        assert options.track_positions

    def test_markdown_renderer_defaults(self):
        options = MarkdownRendererOptions()
        assert options.emphasis_symbol == "*"
        assert options.strong_symbol == "**"
        assert options.bullet_symbols == "-*+"
        assert options.code_fence_char == "`"
        assert options.code_fence_min == 3
        assert options.use_hash_headings
        assert options.escape_special
        assert options.render_frontmatter

    def test_html_defaults(self):
        assert HtmlParserOptions().html_parser == "html.parser"
        renderer = HtmlRendererOptions()
        assert not renderer.standalone
        assert renderer.title is None
        assert renderer.ensure_trailing_newline

    def test_converter_defaults(self):
        to_html = MarkdownToHtmlOptions()
        assert not to_html.keep_frontmatter
        assert to_html.allow_raw_html
        assert to_html.newline_between_blocks
        to_markdown = HtmlToMarkdownOptions()
        assert to_markdown.collapse_whitespace
        assert to_markdown.preserve_unknown_elements


@pytest.mark.unit
class TestFrozenOptions:
    """Tests for immutability and cloning."""

    def test_frozen(self):
        options = MarkdownRendererOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.emphasis_symbol = "_"

    def test_create_updated(self):
        options = MarkdownRendererOptions()
        updated = options.create_updated(emphasis_symbol="_", code_fence_min=4)
        assert updated.emphasis_symbol == "_"
        assert updated.code_fence_min == 4
        assert options.emphasis_symbol == "*"

    def test_create_updated_validates(self):
        with pytest.raises(ValueError):
            MarkdownRendererOptions().create_updated(code_fence_min=2)

    def test_field_help(self):
        help_text = MarkdownParserOptions.field_help()
        assert set(help_text) >= {"normalize_frontmatter", "track_positions"}
        assert all(isinstance(value, str) and value for value in help_text.values())


@pytest.mark.unit
class TestValidation:
    """Tests for __post_init__ validation."""

    @pytest.mark.parametrize(
        "changes",
        [
            {"emphasis_symbol": "+"},
            {"strong_symbol": "*"},
            {"code_fence_char": "'"},
            {"code_fence_min": 1},
            {"bullet_symbols": ""},
            {"bullet_symbols": "-x"},
        ],
    )
    def test_invalid_markdown_renderer_values(self, changes):
        with pytest.raises(ValueError):
            MarkdownRendererOptions(**changes)

    def test_invalid_html_builder(self):
        with pytest.raises(ValueError):
            HtmlParserOptions(html_parser="xml")

    def test_valid_alternatives(self):
        MarkdownRendererOptions(emphasis_symbol="_", strong_symbol="__", code_fence_char="~", bullet_symbols="+")
        HtmlParserOptions(html_parser="lxml")
