#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/parsers/__init__.py
"""Parsers turning Markdown and HTML text into document trees."""

from mdtranspile.parsers.base import BaseParser
from mdtranspile.parsers.html import HtmlParser, parse_html
from mdtranspile.parsers.markdown import MarkdownParser, parse_markdown

__all__ = ["BaseParser", "HtmlParser", "MarkdownParser", "parse_html", "parse_markdown"]
