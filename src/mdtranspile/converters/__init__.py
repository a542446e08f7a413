#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/converters/__init__.py
"""Converters mapping Markdown trees onto HTML trees and back."""

from mdtranspile.converters.html2markdown import HtmlToMarkdownConverter, hast_to_markdown
from mdtranspile.converters.markdown2html import MarkdownToHtmlConverter, markdown_to_hast

__all__ = ["HtmlToMarkdownConverter", "MarkdownToHtmlConverter", "hast_to_markdown", "markdown_to_hast"]
