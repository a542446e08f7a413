#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/ast/utils.py
"""Tree queries used by editor integrations.

An editor overlay (for example a diagram preview attached to ``plantuml``
code fences) needs to find fenced code blocks, read their info strings
and map them back to source offsets. These helpers expose exactly that,
without the overlay having to walk the tree itself.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from mdtranspile.ast.nodes import CodeBlock, Node, get_node_children


@dataclass(frozen=True)
class CodeBlockInfo:
    """Summary of one code block.

    Parameters
    ----------
    info_string : str
        Complete info string after the opening fence
    language : str or None
        First word of the info string
    content : str
        Code content without fences
    span : tuple of int or None
        Half-open source offsets of the whole block, fences included

    """

    info_string: str
    language: Optional[str]
    content: str
    span: Optional[tuple[int, int]]

    @property
    def info_length(self) -> int:
        """Length of the info string."""
        return len(self.info_string)


def iter_nodes(tree: Node) -> Iterator[Node]:
    """Yield ``tree`` and all of its descendants depth-first in document order.

    The walk uses an explicit stack, so arbitrarily deep trees do not hit
    the interpreter's recursion limit.
    """
    stack: list[Node] = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(get_node_children(node)))


def find_code_blocks(tree: Node, info: Optional[str] = None) -> list[CodeBlockInfo]:
    """Return every code block under ``tree`` in document order.

    Parameters
    ----------
    tree : Node
        Tree to search
    info : str, optional
        Only return blocks whose language equals this token

    Returns
    -------
    list of CodeBlockInfo

    """
    blocks = []
    for node in iter_nodes(tree):
        if not isinstance(node, CodeBlock):
            continue
        if info is not None and node.language != info:
            continue
        blocks.append(
            CodeBlockInfo(
                info_string=node.info_string,
                language=node.language,
                content=node.content,
                span=node.span,
            )
        )
    return blocks


def code_block_at(tree: Node, start: int, end: int, info: Optional[str] = None) -> Optional[CodeBlockInfo]:
    """Return the code block spanning exactly ``[start, end)``, if any.

    Parameters
    ----------
    tree : Node
        Tree to search
    start, end : int
        Source offsets of the block, fences included
    info : str, optional
        Required language token

    Returns
    -------
    CodeBlockInfo or None

    """
    for block in find_code_blocks(tree, info):
        if block.span == (start, end):
            return block
    return None
