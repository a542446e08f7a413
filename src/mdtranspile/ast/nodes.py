#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/ast/nodes.py
"""Markdown document tree.

This module defines the node hierarchy produced by the Markdown parser and
consumed by the Markdown renderer, the Markdown-to-HTML converter and the
text extractor. Each node represents a structural or inline element.

Node Hierarchy
--------------
All nodes inherit from the base Node class, carry a class-level ``kind``
tag and support the visitor pattern (``accept`` dispatches to
``visitor.visit_<kind>``).

Block-level nodes:
    - Document, Frontmatter, Heading, Paragraph, BlockQuote
    - List, ListItem, CodeBlock, MathBlock, HTMLBlock, ThematicBreak
    - Table, TableRow, TableCell

Inline nodes:
    - Text, Emphasis, Strong, Strikethrough, Code
    - Link, Image, LineBreak, HTMLInline, MathInline

Trees are plain data. Every transform in the library builds new nodes
instead of mutating the ones it was given.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Literal, Optional

Alignment = Literal["left", "center", "right"]


@dataclass
class SourceLocation:
    """Where a node came from in its source text.

    Parameters
    ----------
    format : str
        Source format ('markdown' or 'html')
    start : int or None, default = None
        Offset of the first character of the node
    end : int or None, default = None
        Offset just past the last character of the node (half-open)
    line : int or None, default = None
        1-based line of ``start``
    column : int or None, default = None
        1-based column of ``start``
    metadata : dict, default = empty dict
        Additional format-specific location information

    """

    format: str
    start: Optional[int] = None
    end: Optional[int] = None
    line: Optional[int] = None
    column: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def span(self) -> tuple[int, int] | None:
        """Return ``(start, end)`` when both offsets are known."""
        if self.start is None or self.end is None:
            return None
        return self.start, self.end


class Node(ABC):
    """Base class for all Markdown tree nodes.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node
    source_location : SourceLocation or None, default = None
        Information about where this node came from in the source

    """

    kind: ClassVar[str]
    metadata: dict[str, Any]
    source_location: Optional[SourceLocation]

    @property
    def span(self) -> tuple[int, int] | None:
        """Half-open ``(start, end)`` source offsets, or None if unknown."""
        if self.source_location is None:
            return None
        return self.source_location.span

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from ``visitor.visit_<kind>(self)``

        """


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root node of a Markdown document.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata; holds the frontmatter mapping when one was loaded
    source_location : SourceLocation or None, default = None
        Spans the whole source

    """

    kind: ClassVar[str] = "document"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_document``."""
        return visitor.visit_document(self)


@dataclass
class Frontmatter(Node):
    """YAML metadata block at the top of a document.

    Parameters
    ----------
    content : str
        Raw YAML between the fences
    format : str, default = 'yaml'
        Metadata language

    """

    kind: ClassVar[str] = "frontmatter"

    content: str = ""
    format: str = "yaml"
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_frontmatter``."""
        return visitor.visit_frontmatter(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    content : list of Node, default = empty list
        Inline nodes representing heading text

    """

    kind: ClassVar[str] = "heading"

    level: int
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_heading``."""
        return visitor.visit_heading(self)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content."""

    kind: ClassVar[str] = "paragraph"

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing other block elements."""

    kind: ClassVar[str] = "block_quote"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block_quote``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for unordered
    items : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Starting number for ordered lists
    tight : bool, default = True
        Whether list is tight (no blank lines between items)

    """

    kind: ClassVar[str] = "list"

    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    start: int = 1
    tight: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item node containing block content.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the list item
    task_status : {'checked', 'unchecked'} or None, default = None
        Checkbox state for task list items

    """

    kind: ClassVar[str] = "list_item"

    children: list[Node] = field(default_factory=list)
    task_status: Optional[Literal["checked", "unchecked"]] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list_item``."""
        return visitor.visit_list_item(self)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    The content is verbatim and never interpreted as Markdown.

    Parameters
    ----------
    content : str
        Code content, without the fences
    language : str or None, default = None
        First word of the info string
    info_string : str, default = ''
        Complete info string after the opening fence
    fence_char : str, default = '`'
        Character used for fencing (` or ~); empty for indented code
    fence_length : int, default = 3
        Number of fence characters

    """

    kind: ClassVar[str] = "code_block"

    content: str
    language: Optional[str] = None
    info_string: str = ""
    fence_char: str = "`"
    fence_length: int = 3
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code_block``."""
        return visitor.visit_code_block(self)


@dataclass
class MathBlock(Node):
    """Display math block (``$$ ... $$``) holding the raw formula."""

    kind: ClassVar[str] = "math_block"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_math_block``."""
        return visitor.visit_math_block(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block, passed through unchanged."""

    kind: ClassVar[str] = "html_block"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_block``."""
        return visitor.visit_html_block(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""

    kind: ClassVar[str] = "thematic_break"

    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_thematic_break``."""
        return visitor.visit_thematic_break(self)


@dataclass
class Table(Node):
    """GFM table.

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        Body rows
    header : TableRow or None, default = None
        Header row
    alignments : list, default = empty list
        Column alignments ('left', 'center', 'right', or None)

    """

    kind: ClassVar[str] = "table"

    rows: list[TableRow] = field(default_factory=list)
    header: Optional[TableRow] = None
    alignments: list[Alignment | None] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table``."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row containing cells."""

    kind: ClassVar[str] = "table_row"

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_row``."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell with inline content and optional alignment."""

    kind: ClassVar[str] = "table_cell"

    content: list[Node] = field(default_factory=list)
    alignment: Alignment | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_cell``."""
        return visitor.visit_table_cell(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text run.

    ``content`` holds the decoded value: backslash escapes and entity
    references in the source have already been resolved.
    """

    kind: ClassVar[str] = "text"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasized (italic) inline content."""

    kind: ClassVar[str] = "emphasis"

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_emphasis``."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strongly emphasized (bold) inline content."""

    kind: ClassVar[str] = "strong"

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strong``."""
        return visitor.visit_strong(self)


@dataclass
class Strikethrough(Node):
    """Struck-through inline content (GFM ``~~``)."""

    kind: ClassVar[str] = "strikethrough"

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strikethrough``."""
        return visitor.visit_strikethrough(self)


@dataclass
class Code(Node):
    """Inline code span."""

    kind: ClassVar[str] = "code"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code``."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink.

    Parameters
    ----------
    url : str
        Link destination
    content : list of Node, default = empty list
        Inline nodes forming the link text
    title : str or None, default = None
        Optional link title

    """

    kind: ClassVar[str] = "link"

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_link``."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image reference.

    Parameters
    ----------
    url : str
        Image source
    alt_text : str, default = ''
        Alternative text
    title : str or None, default = None
        Optional title

    """

    kind: ClassVar[str] = "image"

    url: str = ""
    alt_text: str = ""
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_image``."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Line break.

    Parameters
    ----------
    soft : bool, default = False
        True for a soft break (a plain newline in the source), False for a
        hard break (trailing backslash or two trailing spaces)

    """

    kind: ClassVar[str] = "line_break"

    soft: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


@dataclass
class HTMLInline(Node):
    """Inline raw HTML, passed through unchanged."""

    kind: ClassVar[str] = "html_inline"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_inline``."""
        return visitor.visit_html_inline(self)


@dataclass
class MathInline(Node):
    """Inline math (``$ ... $``) holding the raw formula."""

    kind: ClassVar[str] = "math_inline"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_math_inline``."""
        return visitor.visit_math_inline(self)


# Every concrete node class keyed by its kind tag
NODE_CLASSES: dict[str, type[Node]] = {
    cls.kind: cls
    for cls in (
        Document,
        Frontmatter,
        Heading,
        Paragraph,
        BlockQuote,
        List,
        ListItem,
        CodeBlock,
        MathBlock,
        HTMLBlock,
        ThematicBreak,
        Table,
        TableRow,
        TableCell,
        Text,
        Emphasis,
        Strong,
        Strikethrough,
        Code,
        Link,
        Image,
        LineBreak,
        HTMLInline,
        MathInline,
    )
}

_CHILDREN_NODES = (Document, BlockQuote, ListItem)
_CONTENT_NODES = (Heading, Paragraph, Emphasis, Strong, Strikethrough, Link, TableCell)


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes of a node in document order.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Child nodes (empty list for leaves)

    Examples
    --------
    >>> heading = Heading(level=1, content=[Text("Hello"), Strong(content=[Text("world")])])
    >>> len(get_node_children(heading))
    2

    """
    if isinstance(node, _CHILDREN_NODES):
        return list(node.children)
    if isinstance(node, _CONTENT_NODES):
        return list(node.content)
    if isinstance(node, List):
        return list(node.items)
    if isinstance(node, Table):
        rows: list[Node] = [node.header] if node.header is not None else []
        rows.extend(node.rows)
        return rows
    if isinstance(node, TableRow):
        return list(node.cells)
    return []


def replace_node_children(node: Node, new_children: list[Node]) -> Node:
    """Create a copy of a node with replaced children.

    Parameters
    ----------
    node : Node
        The node to copy
    new_children : list of Node
        Children for the copy. For a Table, the first row marked
        ``is_header`` becomes the header and the rest become body rows.

    Returns
    -------
    Node
        New node of the same type

    Raises
    ------
    ValueError
        If the node is a leaf, or a Table receives something other than rows

    """
    if isinstance(node, _CHILDREN_NODES):
        return replace(node, children=list(new_children))
    if isinstance(node, _CONTENT_NODES):
        return replace(node, content=list(new_children))
    if isinstance(node, List):
        return replace(node, items=list(new_children))  # type: ignore[arg-type]
    if isinstance(node, TableRow):
        return replace(node, cells=list(new_children))  # type: ignore[arg-type]
    if isinstance(node, Table):
        header: TableRow | None = None
        body: list[TableRow] = []
        for child in new_children:
            if not isinstance(child, TableRow):
                raise ValueError(f"Table children must be TableRow instances, got {type(child).__name__}")
            if child.is_header and header is None:
                header = child
            else:
                body.append(child)
        return replace(node, header=header, rows=body)
    raise ValueError(f"{type(node).__name__} nodes have no children")
