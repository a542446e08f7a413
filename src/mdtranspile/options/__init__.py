#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/options/__init__.py
"""Options dataclasses for parsers, renderers and converters."""

from mdtranspile.options.base import BaseConverterOptions, BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from mdtranspile.options.convert import HtmlToMarkdownOptions, MarkdownToHtmlOptions
from mdtranspile.options.html import HtmlParserOptions, HtmlRendererOptions
from mdtranspile.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

__all__ = [
    "BaseConverterOptions",
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "HtmlParserOptions",
    "HtmlRendererOptions",
    "HtmlToMarkdownOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "MarkdownToHtmlOptions",
]
