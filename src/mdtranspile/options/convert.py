#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/options/convert.py
"""Configuration options for the Markdown and HTML tree converters."""

from __future__ import annotations

from dataclasses import dataclass, field

from mdtranspile.options.base import BaseConverterOptions


@dataclass(frozen=True)
class MarkdownToHtmlOptions(BaseConverterOptions):
    """Options for mapping a Markdown tree onto an HTML tree.

    Parameters
    ----------
    keep_frontmatter : bool, default False
        Keep the frontmatter as a ``<!--frontmatter ...-->`` comment instead
        of dropping it.
    allow_raw_html : bool, default True
        Pass raw HTML blocks and inline HTML through verbatim. When False they
        are emitted as escaped text.
    newline_between_blocks : bool, default True
        Separate sibling block elements with newline text nodes.

    """

    keep_frontmatter: bool = field(
        default=False,
        metadata={"help": "Keep frontmatter as an HTML comment", "importance": "advanced"},
    )
    allow_raw_html: bool = field(
        default=True,
        metadata={"help": "Pass raw HTML through unescaped", "importance": "security"},
    )
    newline_between_blocks: bool = field(
        default=True,
        metadata={"help": "Insert newlines between block elements", "importance": "advanced"},
    )


@dataclass(frozen=True)
class HtmlToMarkdownOptions(BaseConverterOptions):
    """Options for mapping an HTML tree onto a Markdown tree.

    Parameters
    ----------
    collapse_whitespace : bool, default True
        Collapse runs of whitespace in inline text the way browsers do.
    preserve_unknown_elements : bool, default True
        Keep elements without a Markdown analog as raw HTML. When False only
        their text content is kept.

    """

    collapse_whitespace: bool = field(
        default=True,
        metadata={"help": "Collapse inline whitespace runs", "importance": "advanced"},
    )
    preserve_unknown_elements: bool = field(
        default=True,
        metadata={"help": "Keep unrepresentable elements as raw HTML", "importance": "core"},
    )
