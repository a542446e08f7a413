#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/renderers/__init__.py
"""Renderers serializing document trees to Markdown and HTML text."""

from mdtranspile.renderers.base import BaseRenderer, InlineContentMixin
from mdtranspile.renderers.html import HtmlRenderer, render_html
from mdtranspile.renderers.markdown import MarkdownRenderer, render_markdown

__all__ = [
    "BaseRenderer",
    "HtmlRenderer",
    "InlineContentMixin",
    "MarkdownRenderer",
    "render_html",
    "render_markdown",
]
