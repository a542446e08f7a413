#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/converters/markdown2html.py
"""Markdown tree to HTML tree conversion.

Every Markdown node kind maps onto HTML elements in the CommonMark/GFM
manner (``pre > code`` for code, ``del`` for strikethrough, ``ul``/``ol`` for
lists and so on). Math is kept as raw formula text inside ``div.math`` and
``span.math`` so a client-side typesetter can pick it up.

The converter is a visitor whose methods return freshly built lists of HTML
nodes. It keeps no per-call state, so one instance can be shared freely.

"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from mdtranspile.ast.html_nodes import HtmlComment, HtmlElement, HtmlNode, HtmlRaw, HtmlRoot, HtmlText
from mdtranspile.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Frontmatter,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Node,
    Paragraph,
    SourceLocation,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from mdtranspile.ast.visitors import NodeVisitor
from mdtranspile.constants import FRONTMATTER_COMMENT_PREFIX, MATH_CLASS, MATH_DISPLAY_CLASS, MATH_INLINE_CLASS
from mdtranspile.exceptions import InvalidOptionsError, TransformError
from mdtranspile.options.convert import MarkdownToHtmlOptions
from mdtranspile.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


def _copy_location(node: Node) -> Optional[SourceLocation]:
    location = node.source_location
    if location is None:
        return None
    return replace(location, metadata=dict(location.metadata))


class MarkdownToHtmlConverter(NodeVisitor):
    """Convert a Markdown document tree into an HTML tree.

    Parameters
    ----------
    options : MarkdownToHtmlOptions or None, default = None
        Conversion options

    Examples
    --------
        >>> from mdtranspile.parsers.markdown import parse_markdown
        >>> root = MarkdownToHtmlConverter().convert(parse_markdown("# Hi"))
        >>> root.children[0].tag_name
        'h1'

    """

    def __init__(self, options: MarkdownToHtmlOptions | None = None):
        """Initialize the converter with options."""
        if options is not None and not isinstance(options, MarkdownToHtmlOptions):
            raise InvalidOptionsError(
                converter_name="markdown-to-html",
                expected_type=MarkdownToHtmlOptions,
                received_type=type(options),
            )
        self.options: MarkdownToHtmlOptions = options or MarkdownToHtmlOptions()

    def convert(self, document: Node) -> HtmlRoot:
        """Convert a Markdown tree to an HTML tree.

        Parameters
        ----------
        document : Node
            Document (or any Markdown node) to convert

        Returns
        -------
        HtmlRoot
            New HTML tree. A ``title`` entry in the document metadata becomes
            ``document_title`` on the root.

        Raises
        ------
        TransformError
            If the tree is nested too deeply or holds objects that are not
            Markdown nodes

        """
        with debug_timer(logger, "Converting (markdown -> html)"):
            try:
                if isinstance(document, Document):
                    children = self._blocks(document.children, wrap=False)
                else:
                    children = document.accept(self)
            except RecursionError as e:
                raise TransformError(
                    "Document is nested too deeply to convert", transform_name="markdown-to-html", original_error=e
                ) from e
            except AttributeError as e:
                raise TransformError(
                    f"Invalid node in document tree: {e}", transform_name="markdown-to-html", original_error=e
                ) from e

        metadata = {}
        if isinstance(document, Document):
            title = document.metadata.get("title")
            if isinstance(title, str) and title.strip():
                metadata["document_title"] = title.strip()

        return HtmlRoot(children=children, metadata=metadata, source_location=_copy_location(document))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _newline(self) -> list[HtmlNode]:
        return [HtmlText("\n")] if self.options.newline_between_blocks else []

    def _blocks(self, children: list[Node], wrap: bool = True) -> list[HtmlNode]:
        """Convert block children, separating them with newline text.

        With ``wrap`` the result also starts and ends with a newline, which
        is how block containers such as ``blockquote`` lay out their content.
        """
        converted = [result for result in (child.accept(self) for child in children) if result]
        nodes: list[HtmlNode] = []
        for i, block in enumerate(converted):
            if i or wrap:
                nodes.extend(self._newline())
            nodes.extend(block)
        if converted and wrap:
            nodes.extend(self._newline())
        return nodes

    def _inline(self, content: list[Node]) -> list[HtmlNode]:
        nodes: list[HtmlNode] = []
        for child in content:
            nodes.extend(child.accept(self))
        return nodes

    def _element(
        self,
        tag_name: str,
        node: Node,
        children: Optional[list[HtmlNode]] = None,
        properties: Optional[dict[str, Optional[str]]] = None,
    ) -> list[HtmlNode]:
        return [
            HtmlElement(
                tag_name=tag_name,
                properties=properties or {},
                children=children or [],
                source_location=_copy_location(node),
            )
        ]

    def _raw(self, content: str, node: Node) -> list[HtmlNode]:
        if self.options.allow_raw_html:
            return [HtmlRaw(value=content, source_location=_copy_location(node))]
        logger.debug("Escaping raw HTML (%d chars) because allow_raw_html is off", len(content))
        return [HtmlText(value=content, source_location=_copy_location(node))]

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> list[HtmlNode]:
        """Convert a nested document to its blocks."""
        return self._blocks(node.children, wrap=False)

    def visit_frontmatter(self, node: Frontmatter) -> list[HtmlNode]:
        """Drop frontmatter, or keep it as a ``<!--frontmatter ...-->`` comment."""
        if not self.options.keep_frontmatter:
            logger.debug("Dropping frontmatter block")
            return []
        # "-->" would close the comment early
        content = node.content.replace("-->", "--&gt;")
        return [HtmlComment(value=f"{FRONTMATTER_COMMENT_PREFIX}{content}", source_location=_copy_location(node))]

    def visit_heading(self, node: Heading) -> list[HtmlNode]:
        """Convert to ``h1``-``h6``."""
        return self._element(f"h{node.level}", node, self._inline(node.content))

    def visit_paragraph(self, node: Paragraph) -> list[HtmlNode]:
        """Convert to ``p``."""
        return self._element("p", node, self._inline(node.content))

    def visit_block_quote(self, node: BlockQuote) -> list[HtmlNode]:
        """Convert to ``blockquote``."""
        return self._element("blockquote", node, self._blocks(node.children))

    def visit_list(self, node: List) -> list[HtmlNode]:
        """Convert to ``ul`` or ``ol``; ``start`` is set when it is not 1."""
        properties: dict[str, Optional[str]] = {}
        if node.ordered and node.start != 1:
            properties["start"] = str(node.start)

        items: list[HtmlNode] = []
        for item in node.items:
            items.extend(self._newline())
            if isinstance(item, ListItem):
                items.extend(self._list_item(item, node.tight))
            else:
                items.extend(item.accept(self))
        if node.items:
            items.extend(self._newline())

        return self._element("ol" if node.ordered else "ul", node, items, properties)

    def _list_item(self, node: ListItem, tight: bool) -> list[HtmlNode]:
        """Convert a list item.

        In a tight list the item's paragraphs are unwrapped into the ``li``.
        A task item starts with a disabled checkbox, placed inside the first
        paragraph when there is one.
        """
        checkbox: list[HtmlNode] = []
        if node.task_status is not None:
            properties: dict[str, Optional[str]] = {"type": "checkbox"}
            if node.task_status == "checked":
                properties["checked"] = None
            properties["disabled"] = None
            checkbox = [HtmlElement("input", properties=properties), HtmlText(" ")]

        if not tight:
            children = self._blocks(node.children)
            first = next((child for child in children if isinstance(child, HtmlElement)), None)
            if checkbox and first is not None and first.tag_name == "p":
                first.children[:0] = checkbox
            else:
                children[:0] = checkbox
            return self._element("li", node, children)

        children = list(checkbox)
        for i, child in enumerate(node.children):
            if isinstance(child, Paragraph):
                if i and isinstance(node.children[i - 1], Paragraph):
                    children.extend(self._newline())
                children.extend(self._inline(child.content))
                continue
            converted = child.accept(self)
            if converted:
                children.extend(self._newline())
                children.extend(converted)
                children.extend(self._newline())
        return self._element("li", node, children)

    def visit_list_item(self, node: ListItem) -> list[HtmlNode]:
        """Convert a list item outside of a list as a tight ``li``."""
        return self._list_item(node, tight=True)

    def visit_code_block(self, node: CodeBlock) -> list[HtmlNode]:
        """Convert to ``pre > code``.

        The first word of the info string becomes a ``language-*`` class and
        the rest is kept in ``data-meta``.
        """
        info = (node.info_string or node.language or "").strip()
        language, _, meta = info.partition(" ")
        properties: dict[str, Optional[str]] = {}
        if language:
            properties["class"] = f"language-{language}"
        if meta.strip():
            properties["data-meta"] = meta.strip()

        content = node.content
        if content and not content.endswith("\n"):
            content += "\n"
        code = HtmlElement("code", properties=properties, children=[HtmlText(content)] if content else [])
        return self._element("pre", node, [code])

    def visit_math_block(self, node: MathBlock) -> list[HtmlNode]:
        """Convert to ``div.math.math-display`` holding the raw formula."""
        return self._element(
            "div", node, [HtmlText(node.content)], {"class": f"{MATH_CLASS} {MATH_DISPLAY_CLASS}"}
        )

    def visit_html_block(self, node: HTMLBlock) -> list[HtmlNode]:
        """Pass raw HTML through, or escape it when raw HTML is not allowed."""
        return self._raw(node.content, node)

    def visit_thematic_break(self, node: ThematicBreak) -> list[HtmlNode]:
        """Convert to ``hr``."""
        return self._element("hr", node)

    def visit_table(self, node: Table) -> list[HtmlNode]:
        """Convert to ``table`` with ``thead`` and ``tbody`` sections."""
        sections: list[HtmlNode] = []
        if node.header is not None:
            sections.extend(self._newline())
            sections.append(HtmlElement("thead", children=self._table_rows([node.header], node.alignments, "th")))
        if node.rows:
            sections.extend(self._newline())
            sections.append(HtmlElement("tbody", children=self._table_rows(node.rows, node.alignments, "td")))
        if sections:
            sections.extend(self._newline())
        return self._element("table", node, sections)

    def _table_rows(self, rows: list[TableRow], alignments: list, cell_tag: str) -> list[HtmlNode]:
        nodes: list[HtmlNode] = []
        for row in rows:
            nodes.extend(self._newline())
            nodes.extend(self._table_row(row, alignments, cell_tag))
        nodes.extend(self._newline())
        return nodes

    def _table_row(self, row: TableRow, alignments: list, cell_tag: str) -> list[HtmlNode]:
        cells: list[HtmlNode] = []
        for i, cell in enumerate(row.cells):
            alignment = cell.alignment or (alignments[i] if i < len(alignments) else None)
            properties: dict[str, Optional[str]] = {"align": alignment} if alignment else {}
            cells.extend(self._newline())
            cells.extend(self._element(cell_tag, cell, self._inline(cell.content), properties))
        if cells:
            cells.extend(self._newline())
        return self._element("tr", row, cells)

    def visit_table_row(self, node: TableRow) -> list[HtmlNode]:
        """Convert a row outside of a table to ``tr``."""
        return self._table_row(node, [], "th" if node.is_header else "td")

    def visit_table_cell(self, node: TableCell) -> list[HtmlNode]:
        """Convert a cell outside of a table to ``td``."""
        properties: dict[str, Optional[str]] = {"align": node.alignment} if node.alignment else {}
        return self._element("td", node, self._inline(node.content), properties)

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> list[HtmlNode]:
        """Convert to a text node."""
        return [HtmlText(value=node.content, source_location=_copy_location(node))]

    def visit_emphasis(self, node: Emphasis) -> list[HtmlNode]:
        """Convert to ``em``."""
        return self._element("em", node, self._inline(node.content))

    def visit_strong(self, node: Strong) -> list[HtmlNode]:
        """Convert to ``strong``."""
        return self._element("strong", node, self._inline(node.content))

    def visit_strikethrough(self, node: Strikethrough) -> list[HtmlNode]:
        """Convert to ``del``."""
        return self._element("del", node, self._inline(node.content))

    def visit_code(self, node: Code) -> list[HtmlNode]:
        """Convert to ``code``."""
        return self._element("code", node, [HtmlText(node.content)])

    def visit_link(self, node: Link) -> list[HtmlNode]:
        """Convert to ``a`` with ``href`` and an optional ``title``."""
        properties: dict[str, Optional[str]] = {"href": node.url}
        if node.title:
            properties["title"] = node.title
        return self._element("a", node, self._inline(node.content), properties)

    def visit_image(self, node: Image) -> list[HtmlNode]:
        """Convert to ``img`` with ``src``, ``alt`` and an optional ``title``."""
        properties: dict[str, Optional[str]] = {"src": node.url, "alt": node.alt_text}
        if node.title:
            properties["title"] = node.title
        return self._element("img", node, properties=properties)

    def visit_line_break(self, node: LineBreak) -> list[HtmlNode]:
        """Convert a hard break to ``br`` plus a newline, a soft break to a newline."""
        newline = HtmlText(value="\n", source_location=_copy_location(node))
        if node.soft:
            return [newline]
        return self._element("br", node) + [newline]

    def visit_html_inline(self, node: HTMLInline) -> list[HtmlNode]:
        """Pass inline HTML through, or escape it when raw HTML is not allowed."""
        return self._raw(node.content, node)

    def visit_math_inline(self, node: MathInline) -> list[HtmlNode]:
        """Convert to ``span.math.math-inline`` holding the raw formula.

        Display math written inside a paragraph keeps the ``math-display``
        class instead.
        """
        variant = MATH_DISPLAY_CLASS if node.metadata.get("display") else MATH_INLINE_CLASS
        return self._element("span", node, [HtmlText(node.content)], {"class": f"{MATH_CLASS} {variant}"})


def markdown_to_hast(document: Node, options: MarkdownToHtmlOptions | None = None) -> HtmlRoot:
    """Convert a Markdown tree to an HTML tree.

    Parameters
    ----------
    document : Node
        Markdown document to convert
    options : MarkdownToHtmlOptions, optional
        Conversion options; defaults are used when omitted

    Returns
    -------
    HtmlRoot

    """
    return MarkdownToHtmlConverter(options).convert(document)
