#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/ast/html_nodes.py
"""HTML document tree.

A small element/text/comment tree that sits between BeautifulSoup and the
HTML renderer, and is the target of the Markdown-to-HTML converter. Nodes
follow the same visitor protocol as the Markdown tree: ``accept`` dispatches
to ``visitor.visit_html_<kind>``.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from mdtranspile.ast.nodes import SourceLocation


class HtmlNode(ABC):
    """Base class for all HTML tree nodes."""

    kind: ClassVar[str]
    source_location: Optional[SourceLocation]

    @property
    def span(self) -> tuple[int, int] | None:
        """Half-open ``(start, end)`` source offsets, or None if unknown."""
        if self.source_location is None:
            return None
        return self.source_location.span

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept an HtmlNodeVisitor."""


@dataclass
class HtmlRoot(HtmlNode):
    """Root of an HTML fragment or document.

    Parameters
    ----------
    children : list of HtmlNode, default = empty list
        Top-level nodes
    metadata : dict, default = empty dict
        Document-level metadata (e.g., ``document_title``) carried over
        from a Markdown document

    """

    kind: ClassVar[str] = "root"

    children: list[HtmlNode] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_root``."""
        return visitor.visit_html_root(self)


@dataclass
class HtmlElement(HtmlNode):
    """An element with attributes and children.

    Parameters
    ----------
    tag_name : str
        Lower-case tag name
    properties : dict, default = empty dict
        Attribute values keyed by name. A value of None is a bare boolean
        attribute (``<input disabled>``).
    children : list of HtmlNode, default = empty list
        Child nodes

    """

    kind: ClassVar[str] = "element"

    tag_name: str
    properties: dict[str, Optional[str]] = field(default_factory=dict)
    children: list[HtmlNode] = field(default_factory=list)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_element``."""
        return visitor.visit_html_element(self)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return an attribute value, or ``default`` when it is absent."""
        return self.properties.get(name, default)

    def has_class(self, name: str) -> bool:
        """Return True if ``name`` is one of the element's classes."""
        return name in (self.properties.get("class") or "").split()


@dataclass
class HtmlText(HtmlNode):
    """Character data, stored unescaped."""

    kind: ClassVar[str] = "text"

    value: str
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_text``."""
        return visitor.visit_html_text(self)


@dataclass
class HtmlComment(HtmlNode):
    """Comment; ``value`` excludes the ``<!--``/``-->`` delimiters."""

    kind: ClassVar[str] = "comment"

    value: str
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_comment``."""
        return visitor.visit_html_comment(self)


@dataclass
class HtmlDoctype(HtmlNode):
    """Document type declaration."""

    kind: ClassVar[str] = "doctype"

    name: str = "html"
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_doctype``."""
        return visitor.visit_html_doctype(self)


@dataclass
class HtmlRaw(HtmlNode):
    """Verbatim markup written to the output without escaping."""

    kind: ClassVar[str] = "raw"

    value: str
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html_raw``."""
        return visitor.visit_html_raw(self)


def html_text_content(node: HtmlNode) -> str:
    """Concatenate the text of every HtmlText under ``node``.

    Comments and raw markup contribute nothing.
    """
    if isinstance(node, HtmlText):
        return node.value
    if isinstance(node, (HtmlRoot, HtmlElement)):
        return "".join(html_text_content(child) for child in node.children)
    return ""
