#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/ast/__init__.py
"""Document trees for Markdown and HTML, their visitors and tree queries."""

from mdtranspile.ast.extraction import TextExtractor, TextFragment, extract_text
from mdtranspile.ast.html_nodes import (
    HtmlComment,
    HtmlDoctype,
    HtmlElement,
    HtmlNode,
    HtmlRaw,
    HtmlRoot,
    HtmlText,
    html_text_content,
)
from mdtranspile.ast.nodes import (
    NODE_CLASSES,
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
    get_node_children,
    replace_node_children,
)
from mdtranspile.ast.utils import CodeBlockInfo, code_block_at, find_code_blocks, iter_nodes
from mdtranspile.ast.visitors import HtmlNodeVisitor, NodeVisitor

__all__ = [
    "NODE_CLASSES",
    "BlockQuote",
    "Code",
    "CodeBlock",
    "CodeBlockInfo",
    "Document",
    "Emphasis",
    "Frontmatter",
    "HTMLBlock",
    "HTMLInline",
    "Heading",
    "HtmlComment",
    "HtmlDoctype",
    "HtmlElement",
    "HtmlNode",
    "HtmlNodeVisitor",
    "HtmlRaw",
    "HtmlRoot",
    "HtmlText",
    "Image",
    "LineBreak",
    "Link",
    "List",
    "ListItem",
    "MathBlock",
    "MathInline",
    "Node",
    "NodeVisitor",
    "Paragraph",
    "SourceLocation",
    "Strikethrough",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "TextExtractor",
    "TextFragment",
    "ThematicBreak",
    "code_block_at",
    "extract_text",
    "find_code_blocks",
    "get_node_children",
    "html_text_content",
    "iter_nodes",
    "replace_node_children",
]
