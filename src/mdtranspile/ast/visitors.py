#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/ast/visitors.py
"""Visitor base classes for the Markdown and HTML trees.

Every visit method is abstract, so a concrete visitor that forgets a node
kind fails at instantiation rather than silently skipping nodes.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from mdtranspile.ast.html_nodes import HtmlComment, HtmlDoctype, HtmlElement, HtmlRaw, HtmlRoot, HtmlText
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
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)


class NodeVisitor(ABC):
    """Abstract base class for Markdown tree visitors.

    Subclasses implement one ``visit_<kind>`` method per node kind. Each
    method receives the node and returns whatever the algorithm needs
    (None for side-effect visitors such as renderers, a value for
    transforming visitors such as converters).

    Examples
    --------
    Counting text nodes:

        >>> class TextCounter(NodeVisitor):
        ...     def visit_text(self, node):
        ...         return 1
        ...     def visit_paragraph(self, node):
        ...         return sum(child.accept(self) for child in node.content)
        ...     # ... one method per remaining kind

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""

    @abstractmethod
    def visit_frontmatter(self, node: Frontmatter) -> Any:
        """Visit a Frontmatter node."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""

    @abstractmethod
    def visit_math_block(self, node: MathBlock) -> Any:
        """Visit a MathBlock node."""

    @abstractmethod
    def visit_html_block(self, node: HTMLBlock) -> Any:
        """Visit a HTMLBlock node."""

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit a Emphasis node."""

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""

    @abstractmethod
    def visit_strikethrough(self, node: Strikethrough) -> Any:
        """Visit a Strikethrough node."""

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit a Code node."""

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit a Image node."""

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""

    @abstractmethod
    def visit_html_inline(self, node: HTMLInline) -> Any:
        """Visit a HTMLInline node."""

    @abstractmethod
    def visit_math_inline(self, node: MathInline) -> Any:
        """Visit a MathInline node."""


class HtmlNodeVisitor(ABC):
    """Abstract base class for HTML tree visitors."""

    @abstractmethod
    def visit_html_root(self, node: HtmlRoot) -> Any:
        """Visit an HtmlRoot node."""

    @abstractmethod
    def visit_html_element(self, node: HtmlElement) -> Any:
        """Visit an HtmlElement node."""

    @abstractmethod
    def visit_html_text(self, node: HtmlText) -> Any:
        """Visit an HtmlText node."""

    @abstractmethod
    def visit_html_comment(self, node: HtmlComment) -> Any:
        """Visit an HtmlComment node."""

    @abstractmethod
    def visit_html_doctype(self, node: HtmlDoctype) -> Any:
        """Visit an HtmlDoctype node."""

    @abstractmethod
    def visit_html_raw(self, node: HtmlRaw) -> Any:
        """Visit an HtmlRaw node."""
