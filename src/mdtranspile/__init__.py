#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/__init__.py
"""mdtranspile - bidirectional Markdown and HTML conversion through typed trees.

The package parses Markdown (CommonMark plus GFM tables, strikethrough and
task lists, YAML frontmatter and dollar math) into a typed node tree, maps
it onto an HTML tree, and serializes either tree back to text. The reverse
direction parses HTML and reconstructs Markdown.

Examples
--------
Convert in either direction from async code:

    >>> import asyncio
    >>> from mdtranspile import markdown_to_html, html_to_markdown
    >>> asyncio.run(markdown_to_html("# Hello"))
    '<h1>Hello</h1>\\n'
    >>> asyncio.run(html_to_markdown("<p><strong>bold</strong></p>"))
    '**bold**\\n'

Pull out the visible text with source offsets:

    >>> from mdtranspile import extract_text
    >>> [(f.value, f.span) for f in extract_text("Hi *there*")]
    [('Hi ', (0, 3)), ('there', (4, 9))]

Logging
-------
Every module logs through ``logging.getLogger(__name__)``. The library never
installs handlers itself; the command-line interface does so through
:func:`mdtranspile.logging_utils.configure_logging`.

"""

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "mdtranspile requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.3.0"

from mdtranspile.api import html_to_markdown, markdown_to_html
from mdtranspile.ast import (
    CodeBlockInfo,
    Document,
    HtmlRoot,
    TextFragment,
    code_block_at,
    extract_text,
    find_code_blocks,
    iter_nodes,
)
from mdtranspile.converters import hast_to_markdown, markdown_to_hast
from mdtranspile.exceptions import (
    DependencyError,
    InvalidOptionsError,
    ParsingError,
    RenderingError,
    TransformError,
    TranspileError,
    ValidationError,
)
from mdtranspile.options import (
    HtmlParserOptions,
    HtmlRendererOptions,
    HtmlToMarkdownOptions,
    MarkdownParserOptions,
    MarkdownRendererOptions,
    MarkdownToHtmlOptions,
)
from mdtranspile.parsers import parse_html, parse_markdown
from mdtranspile.renderers import render_html, render_markdown
from mdtranspile.transforms import Hook, TranspilePipeline
from mdtranspile.utils.frontmatter import normalize_frontmatter

__all__ = [
    "__version__",
    # Conversion API
    "markdown_to_html",
    "html_to_markdown",
    "TranspilePipeline",
    "Hook",
    # Individual stages
    "normalize_frontmatter",
    "parse_markdown",
    "render_markdown",
    "parse_html",
    "render_html",
    "markdown_to_hast",
    "hast_to_markdown",
    # Tree helpers
    "Document",
    "HtmlRoot",
    "extract_text",
    "TextFragment",
    "iter_nodes",
    "find_code_blocks",
    "code_block_at",
    "CodeBlockInfo",
    # Options
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "HtmlParserOptions",
    "HtmlRendererOptions",
    "MarkdownToHtmlOptions",
    "HtmlToMarkdownOptions",
    # Exceptions
    "TranspileError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "TransformError",
    "DependencyError",
]
