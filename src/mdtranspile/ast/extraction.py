#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/ast/extraction.py
"""Plain-text extraction from Markdown trees.

The extractor walks a document in order and emits one :class:`TextFragment`
per text node, with the node's source span. Verbatim content (code blocks,
display math and inline math) never produces fragments, which makes the
result suitable for spell-checking and search indexing.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

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
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from mdtranspile.ast.visitors import NodeVisitor
from mdtranspile.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextFragment:
    """A run of prose text and where it sits in the source.

    Parameters
    ----------
    value : str
        The text node's value, unmodified
    span : tuple of int or None
        Half-open ``(start, end)`` offsets into the parsed source, or None
        when the tree carries no position for the node

    """

    value: str
    span: Optional[tuple[int, int]]


class TextExtractor(NodeVisitor):
    """Visitor collecting text fragments in document order.

    Each ``visit_*`` returns a new list, so one instance can serve any number
    of concurrent extractions.
    """

    def _collect(self, nodes: list) -> list[TextFragment]:
        fragments: list[TextFragment] = []
        for child in nodes:
            fragments.extend(child.accept(self))
        return fragments

    def visit_document(self, node: Document) -> list[TextFragment]:
        """Collect fragments from every block."""
        return self._collect(node.children)

    def visit_frontmatter(self, node: Frontmatter) -> list[TextFragment]:
        """Frontmatter is metadata, not prose."""
        return []

    def visit_heading(self, node: Heading) -> list[TextFragment]:
        """Collect heading text."""
        return self._collect(node.content)

    def visit_paragraph(self, node: Paragraph) -> list[TextFragment]:
        """Collect paragraph text."""
        return self._collect(node.content)

    def visit_block_quote(self, node: BlockQuote) -> list[TextFragment]:
        """Collect quoted blocks."""
        return self._collect(node.children)

    def visit_list(self, node: List) -> list[TextFragment]:
        """Collect list items."""
        return self._collect(node.items)

    def visit_list_item(self, node: ListItem) -> list[TextFragment]:
        """Collect list item blocks."""
        return self._collect(node.children)

    def visit_code_block(self, node: CodeBlock) -> list[TextFragment]:
        """Skip verbatim code."""
        return []

    def visit_math_block(self, node: MathBlock) -> list[TextFragment]:
        """Skip display math."""
        return []

    def visit_html_block(self, node: HTMLBlock) -> list[TextFragment]:
        """Raw HTML is not prose."""
        return []

    def visit_thematic_break(self, node: ThematicBreak) -> list[TextFragment]:
        """Thematic breaks carry no text."""
        return []

    def visit_table(self, node: Table) -> list[TextFragment]:
        """Collect the header row, then the body rows."""
        rows: list[Node] = [node.header] if node.header is not None else []
        rows.extend(node.rows)
        return self._collect(rows)

    def visit_table_row(self, node: TableRow) -> list[TextFragment]:
        """Collect cells left to right."""
        return self._collect(node.cells)

    def visit_table_cell(self, node: TableCell) -> list[TextFragment]:
        """Collect cell text."""
        return self._collect(node.content)

    def visit_text(self, node: Text) -> list[TextFragment]:
        """Emit the text node itself."""
        return [TextFragment(value=node.content, span=node.span)]

    def visit_emphasis(self, node: Emphasis) -> list[TextFragment]:
        """Collect emphasized text."""
        return self._collect(node.content)

    def visit_strong(self, node: Strong) -> list[TextFragment]:
        """Collect strong text."""
        return self._collect(node.content)

    def visit_strikethrough(self, node: Strikethrough) -> list[TextFragment]:
        """Collect struck-through text."""
        return self._collect(node.content)

    def visit_code(self, node: Code) -> list[TextFragment]:
        """Inline code is a leaf without prose."""
        return []

    def visit_link(self, node: Link) -> list[TextFragment]:
        """Collect link text."""
        return self._collect(node.content)

    def visit_image(self, node: Image) -> list[TextFragment]:
        """Images are leaves; alt text is not a text node."""
        return []

    def visit_line_break(self, node: LineBreak) -> list[TextFragment]:
        """Line breaks carry no text."""
        return []

    def visit_html_inline(self, node: HTMLInline) -> list[TextFragment]:
        """Raw HTML is not prose."""
        return []

    def visit_math_inline(self, node: MathInline) -> list[TextFragment]:
        """Skip inline math."""
        return []


_EXTRACTOR = TextExtractor()


def extract_text(source_or_tree: Union[str, Node]) -> list[TextFragment]:
    """Return the prose text fragments of a Markdown document.

    Parameters
    ----------
    source_or_tree : str or Node
        Markdown source (normalized and parsed with default options) or an
        already-parsed tree

    Returns
    -------
    list of TextFragment
        Fragments in document order. Spans refer to the parsed source.

    Raises
    ------
    ValidationError
        If the input is neither a string nor a Markdown node
    ParsingError
        Propagated unchanged when parsing string input fails

    Examples
    --------
        >>> [f.value for f in extract_text("Hello\\n\\n```\\ncode\\n```\\n\\nWorld\\n")]
        ['Hello', 'World']

    """
    if isinstance(source_or_tree, str):
        from mdtranspile.parsers.markdown import parse_markdown

        tree: Node = parse_markdown(source_or_tree)
    elif isinstance(source_or_tree, Node):
        tree = source_or_tree
    else:
        raise ValidationError(
            f"extract_text expects Markdown source or a Markdown node, got {type(source_or_tree).__name__}",
            parameter_name="source_or_tree",
            parameter_value=source_or_tree,
        )

    fragments = tree.accept(_EXTRACTOR)
    logger.debug("Extracted %d text fragments", len(fragments))
    return fragments
