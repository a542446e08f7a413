#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/parsers/html.py
"""HTML to HTML tree parser.

BeautifulSoup does the tokenizing and error recovery (unclosed tags are
closed). Unknown named entity references are escaped before the soup is
built, so they come through as literal text. This module then copies the
soup into the library's own :mod:`~mdtranspile.ast.html_nodes` tree so the
rest of the pipeline never touches bs4 objects.

"""

from __future__ import annotations

import logging
import re
from bisect import bisect_left
from html.entities import html5
from typing import Any, Optional, Union

from mdtranspile.ast.html_nodes import HtmlComment, HtmlDoctype, HtmlElement, HtmlNode, HtmlRaw, HtmlRoot, HtmlText
from mdtranspile.ast.nodes import SourceLocation
from mdtranspile.constants import DEPS_HTML
from mdtranspile.exceptions import DependencyError, ParsingError
from mdtranspile.options.html import HtmlParserOptions
from mdtranspile.parsers.base import BaseParser
from mdtranspile.utils.decorators import debug_timer, requires_dependencies

logger = logging.getLogger(__name__)

_NAMED_REFERENCE_RE = re.compile(r"&([A-Za-z][A-Za-z0-9]*);")
# Regions whose text the builders never decode
_RAW_REGION_RE = re.compile(
    r"<script\b.*?</script\s*>|<style\b.*?</style\s*>|<!--.*?-->|<!\[CDATA\[.*?\]\]>", re.IGNORECASE | re.DOTALL
)
_AMP_ESCAPE = "&amp;"


class _SourcePositions:
    """Map builder line/column positions back to offsets in the original text.

    ``inserted`` holds the offsets, in the text given to the builder, of
    every ``&`` that was rewritten to ``&amp;``.
    """

    def __init__(self, original: str, rewritten: str, inserted: list[int]):
        self.line_starts = [0] + [i + 1 for i, ch in enumerate(rewritten) if ch == "\n"]
        self.inserted = inserted
        self.original_line_starts = [0] + [i + 1 for i, ch in enumerate(original) if ch == "\n"]

    def locate(self, line: int, column: int) -> tuple[Optional[int], int]:
        """Return ``(start offset, 0-based column)`` in the original text."""
        if not 0 < line <= len(self.line_starts):
            return None, column
        rewritten_offset = self.line_starts[line - 1] + column
        start = rewritten_offset - (len(_AMP_ESCAPE) - 1) * bisect_left(self.inserted, rewritten_offset)
        return start, start - self.original_line_starts[line - 1]


def _protect_unknown_references(source: str) -> tuple[str, list[int]]:
    """Escape the ``&`` of named references that HTML5 does not define.

    ``html.parser`` drops the semicolon of an unknown reference, so
    ``&madeup;`` would read back as ``&madeup``. Escaping the ampersand keeps
    the reference as literal text. Script, style, comment and CDATA regions
    are left alone.
    """
    pieces: list[str] = []
    inserted: list[int] = []
    length = 0

    def protect(segment: str) -> None:
        nonlocal length
        last = 0
        for match in _NAMED_REFERENCE_RE.finditer(segment):
            if f"{match.group(1)};" in html5:
                continue
            pieces.append(segment[last : match.start()])
            length += match.start() - last
            inserted.append(length)
            pieces.append(_AMP_ESCAPE)
            length += len(_AMP_ESCAPE)
            last = match.start() + 1
        pieces.append(segment[last:])
        length += len(segment) - last

    position = 0
    for region in _RAW_REGION_RE.finditer(source):
        protect(source[position : region.start()])
        pieces.append(region.group(0))
        length += len(region.group(0))
        position = region.end()
    protect(source[position:])

    if inserted:
        logger.debug("Escaped %d unknown entity reference(s)", len(inserted))
    return "".join(pieces), inserted


class HtmlParser(BaseParser):
    """Parse HTML text into an :class:`HtmlRoot`.

    Parameters
    ----------
    options : HtmlParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
        >>> root = HtmlParser().parse("<p>Hello <b>world</b></p>")
        >>> root.children[0].tag_name
        'p'

    """

    def __init__(self, options: HtmlParserOptions | None = None):
        """Initialize the HTML parser with options."""
        BaseParser._validate_options_type(options, HtmlParserOptions, "html")
        options = options or HtmlParserOptions()
        super().__init__(options)
        self.options: HtmlParserOptions = options

    @requires_dependencies("html", DEPS_HTML)
    def parse(self, input_data: Union[str, bytes]) -> HtmlRoot:
        """Parse HTML input into an HtmlRoot.

        Parameters
        ----------
        input_data : str or bytes
            HTML fragment or document; bytes are decoded as UTF-8

        Returns
        -------
        HtmlRoot

        Raises
        ------
        ValidationError
            If the input is not text
        DependencyError
            If the configured tree builder is not installed
        ParsingError
            If the tree builder fails unexpectedly

        """
        source = self._coerce_text(input_data, "html")

        from bs4 import BeautifulSoup
        from bs4.exceptions import FeatureNotFound

        with debug_timer(logger, "Parsing (html)"):
            try:
                protected, inserted = _protect_unknown_references(source)
                soup = BeautifulSoup(protected, self.options.html_parser)
            except FeatureNotFound as e:
                raise DependencyError(
                    converter_name="html",
                    missing_packages=[(self.options.html_parser, "")],
                    message=f"HTML tree builder {self.options.html_parser!r} is not installed: {e}",
                ) from e
            except Exception as e:
                raise ParsingError(f"Failed to parse HTML: {e}", parsing_stage="tokenizing", original_error=e) from e

            positions = _SourcePositions(source, protected, inserted)
            try:
                children = self._convert_children(soup, positions)
            except RecursionError as e:
                raise ParsingError(
                    "HTML document is nested too deeply", parsing_stage="tree_building", original_error=e
                ) from e

        return HtmlRoot(
            children=children,
            source_location=SourceLocation(format="html", start=0, end=len(source), line=1, column=1),
        )

    def _convert_children(self, parent: Any, positions: _SourcePositions) -> list[HtmlNode]:
        nodes = []
        for child in parent.children:
            node = self._convert_node(child, positions)
            if node is not None:
                nodes.append(node)
        return nodes

    def _convert_node(self, node: Any, positions: _SourcePositions) -> Optional[HtmlNode]:
        """Copy one bs4 node into the HTML tree."""
        from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

        if isinstance(node, Comment):
            return HtmlComment(value=str(node))
        if isinstance(node, Doctype):
            return HtmlDoctype(name=str(node))
        if isinstance(node, (CData, ProcessingInstruction, Declaration)):
            return HtmlRaw(value=f"{node.PREFIX}{node}{node.SUFFIX}")
        if isinstance(node, NavigableString):
            return HtmlText(value=str(node))
        if isinstance(node, Tag):
            return HtmlElement(
                tag_name=node.name.lower(),
                properties={name: _attribute_value(value) for name, value in node.attrs.items()},
                children=self._convert_children(node, positions),
                source_location=self._element_location(node, positions),
            )

        logger.debug("Ignoring unknown bs4 node type %s", type(node).__name__)
        return None

    @staticmethod
    def _element_location(tag: Any, positions: _SourcePositions) -> Optional[SourceLocation]:
        line = getattr(tag, "sourceline", None)
        column = getattr(tag, "sourcepos", None)
        if line is None:
            return None
        start = None
        if column is not None:
            start, column = positions.locate(line, column)
        return SourceLocation(
            format="html",
            start=start,
            line=line,
            column=column + 1 if column is not None else None,
        )


def _attribute_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def parse_html(source: Union[str, bytes], options: HtmlParserOptions | None = None) -> HtmlRoot:
    """Parse HTML source into an HtmlRoot.

    Parameters
    ----------
    source : str or bytes
        HTML text
    options : HtmlParserOptions, optional
        Parser options; defaults are used when omitted

    Returns
    -------
    HtmlRoot

    """
    return HtmlParser(options).parse(source)

