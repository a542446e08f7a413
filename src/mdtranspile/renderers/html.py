#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/renderers/html.py
"""HTML rendering from an HTML tree.

This module provides the HtmlRenderer class which serializes an
:class:`~mdtranspile.ast.html_nodes.HtmlRoot` to markup. Serialization is
plain: no pretty-printing, no attribute reordering, void elements without an
end tag, and the contents of ``script``/``style`` written as-is.

"""

from __future__ import annotations

import logging
from typing import Optional

from mdtranspile.ast.html_nodes import HtmlComment, HtmlDoctype, HtmlElement, HtmlNode, HtmlRaw, HtmlRoot, HtmlText
from mdtranspile.ast.visitors import HtmlNodeVisitor
from mdtranspile.constants import RAW_TEXT_ELEMENTS, VOID_ELEMENTS
from mdtranspile.exceptions import RenderingError
from mdtranspile.options.html import HtmlRendererOptions
from mdtranspile.renderers.base import BaseRenderer
from mdtranspile.utils.decorators import debug_timer
from mdtranspile.utils.html_utils import escape_html_attribute, escape_html_text

logger = logging.getLogger(__name__)


class HtmlRenderer(HtmlNodeVisitor, BaseRenderer):
    """Render an HTML tree to markup.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML rendering options

    Examples
    --------
        >>> from mdtranspile.ast import HtmlElement, HtmlRoot, HtmlText
        >>> root = HtmlRoot(children=[HtmlElement("p", children=[HtmlText("a < b")])])
        >>> HtmlRenderer().render_to_string(root)
        '<p>a &lt; b</p>\\n'

    """

    def __init__(self, options: HtmlRendererOptions | None = None):
        """Initialize the HTML renderer with options."""
        BaseRenderer._validate_options_type(options, HtmlRendererOptions, "html")
        options = options or HtmlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: HtmlRendererOptions = options
        self._output: list[str] = []
        self._raw_text_depth: int = 0

    def render_to_string(self, root: HtmlNode) -> str:
        """Render an HTML tree to a string.

        Parameters
        ----------
        root : HtmlNode
            Root (or any node) of the tree to render

        Returns
        -------
        str
            Serialized HTML

        Raises
        ------
        RenderingError
            If the tree is nested too deeply or holds objects that are not
            HTML nodes

        """
        worker = type(self)(self.options)
        with debug_timer(logger, "Rendering (html)"):
            try:
                root.accept(worker)
            except RecursionError as e:
                raise RenderingError(
                    "HTML tree is nested too deeply to render", rendering_stage="visiting", original_error=e
                ) from e
            except AttributeError as e:
                raise RenderingError(
                    f"Invalid node in HTML tree: {e}", rendering_stage="visiting", original_error=e
                ) from e

        content = "".join(worker._output)
        if self.options.standalone and not _is_full_document(root):
            content = self._wrap_in_document(root, content)

        if self.options.ensure_trailing_newline and content and not content.endswith("\n"):
            content += "\n"
        return content

    def _wrap_in_document(self, root: HtmlNode, content: str) -> str:
        """Wrap a rendered fragment in a minimal HTML document shell.

        The title comes from ``options.title``, then the ``document_title``
        metadata entry of the root, then falls back to "Document".
        """
        title = self.options.title
        if title is None and isinstance(root, HtmlRoot):
            title = root.metadata.get("document_title")
        if title is None:
            title = "Document"

        parts = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="UTF-8">',
            f"<title>{escape_html_text(str(title))}</title>",
            "</head>",
            "<body>",
            content.rstrip("\n"),
            "</body>",
            "</html>",
        ]
        return "\n".join(parts)

    @staticmethod
    def _format_attributes(properties: dict[str, Optional[str]]) -> str:
        parts = []
        for name, value in properties.items():
            if value is None:
                parts.append(f" {name}")
            else:
                parts.append(f' {name}="{escape_html_attribute(value)}"')
        return "".join(parts)

    def visit_html_root(self, node: HtmlRoot) -> None:
        """Render every top-level node in order."""
        for child in node.children:
            child.accept(self)

    def visit_html_element(self, node: HtmlElement) -> None:
        """Render an element with its attributes and children.

        Void elements get no end tag and their children, if any, are dropped.
        """
        tag = node.tag_name
        self._output.append(f"<{tag}{self._format_attributes(node.properties)}>")
        if tag in VOID_ELEMENTS:
            if node.children:
                logger.debug("Dropping %d children of void element <%s>", len(node.children), tag)
            return

        raw_text = tag in RAW_TEXT_ELEMENTS
        if raw_text:
            self._raw_text_depth += 1
        try:
            for child in node.children:
                child.accept(self)
        finally:
            if raw_text:
                self._raw_text_depth -= 1
        self._output.append(f"</{tag}>")

    def visit_html_text(self, node: HtmlText) -> None:
        """Render text, escaped unless inside ``script`` or ``style``."""
        if self._raw_text_depth:
            self._output.append(node.value)
        else:
            self._output.append(escape_html_text(node.value))

    def visit_html_comment(self, node: HtmlComment) -> None:
        """Render a comment."""
        self._output.append(f"<!--{node.value}-->")

    def visit_html_doctype(self, node: HtmlDoctype) -> None:
        """Render a doctype declaration."""
        self._output.append(f"<!DOCTYPE {node.name}>")

    def visit_html_raw(self, node: HtmlRaw) -> None:
        """Render raw markup verbatim."""
        self._output.append(node.value)


def _is_full_document(root: HtmlNode) -> bool:
    if not isinstance(root, HtmlRoot):
        return False
    return any(
        isinstance(child, HtmlDoctype) or (isinstance(child, HtmlElement) and child.tag_name == "html")
        for child in root.children
    )


def render_html(root: HtmlNode, options: HtmlRendererOptions | None = None) -> str:
    """Render an HTML tree to markup.

    Parameters
    ----------
    root : HtmlNode
        Tree to render
    options : HtmlRendererOptions, optional
        Renderer options; defaults are used when omitted

    Returns
    -------
    str
        Serialized HTML

    """
    return HtmlRenderer(options).render_to_string(root)
