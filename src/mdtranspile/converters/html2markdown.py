#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/converters/html2markdown.py
"""HTML tree to Markdown tree conversion.

Elements with a Markdown counterpart are mapped onto it. Generic containers
(``div``, ``section``, ``body`` and friends) are flattened, and loose inline
content between blocks is wrapped in paragraphs. Elements that Markdown
cannot express are kept as raw HTML (serialized with
:class:`~mdtranspile.renderers.html.HtmlRenderer`), so content is never
dropped without a trace.

Whitespace in ordinary text collapses the way a browser would render it;
``pre`` content is kept verbatim.

"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Optional, Union

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
from mdtranspile.constants import FRONTMATTER_COMMENT_PREFIX, MATH_CLASS, MATH_DISPLAY_CLASS
from mdtranspile.exceptions import InvalidOptionsError, TransformError
from mdtranspile.options.convert import HtmlToMarkdownOptions
from mdtranspile.options.html import HtmlRendererOptions
from mdtranspile.renderers.html import HtmlRenderer
from mdtranspile.utils.decorators import debug_timer
from mdtranspile.utils.frontmatter import load_frontmatter_metadata
from mdtranspile.utils.html_utils import language_from_classes

logger = logging.getLogger(__name__)

# Containers whose children are lifted into the parent
CONTAINER_ELEMENTS = frozenset(
    {
        "html",
        "body",
        "div",
        "section",
        "article",
        "main",
        "header",
        "footer",
        "nav",
        "aside",
        "figure",
        "figcaption",
        "address",
        "hgroup",
        "center",
        "caption",
    }
)

# Block elements without a Markdown analog, kept as raw HTML
RAW_BLOCK_ELEMENTS = frozenset(
    {
        "script",
        "style",
        "noscript",
        "template",
        "iframe",
        "video",
        "audio",
        "canvas",
        "object",
        "form",
        "fieldset",
        "details",
        "dialog",
        "dl",
        "svg",
        "math",
        "select",
        "textarea",
    }
)

HEADING_ELEMENTS = {f"h{level}": level for level in range(1, 7)}

BLOCK_ELEMENTS = (
    CONTAINER_ELEMENTS
    | RAW_BLOCK_ELEMENTS
    | frozenset(HEADING_ELEMENTS)
    | frozenset({"head", "p", "blockquote", "ul", "ol", "li", "pre", "hr", "table"})
)

# Inline elements whose markup is dropped but whose content is kept
TRANSPARENT_INLINE_ELEMENTS = frozenset({"span", "font", "bdi", "bdo", "data", "time", "label", "nobr"})

INLINE_WRAPPERS: dict[str, type[Union[Emphasis, Strong, Strikethrough]]] = {
    "em": Emphasis,
    "i": Emphasis,
    "strong": Strong,
    "b": Strong,
    "del": Strikethrough,
    "s": Strikethrough,
    "strike": Strikethrough,
}

# Elements that never contribute content when raw passthrough is off
_NON_CONTENT_ELEMENTS = frozenset({"script", "style", "noscript", "template"})

_WHITESPACE_RE = re.compile(r"[ \t\n\r\f]+")


def _copy_location(node: HtmlNode) -> Optional[SourceLocation]:
    location = node.source_location
    if location is None:
        return None
    return replace(location, metadata=dict(location.metadata))


def _is_blank(node: HtmlNode) -> bool:
    return isinstance(node, HtmlText) and not node.value.strip()


def _meaningful_children(node: Union[HtmlElement, HtmlRoot]) -> list[HtmlNode]:
    return [child for child in node.children if not _is_blank(child)]


class HtmlToMarkdownConverter:
    """Convert an HTML tree into a Markdown document tree.

    Parameters
    ----------
    options : HtmlToMarkdownOptions or None, default = None
        Conversion options

    Examples
    --------
        >>> from mdtranspile.parsers.html import parse_html
        >>> doc = HtmlToMarkdownConverter().convert(parse_html("<h2>Hi</h2><p>there</p>"))
        >>> [child.kind for child in doc.children]
        ['heading', 'paragraph']

    """

    def __init__(self, options: HtmlToMarkdownOptions | None = None):
        """Initialize the converter with options."""
        if options is not None and not isinstance(options, HtmlToMarkdownOptions):
            raise InvalidOptionsError(
                converter_name="html-to-markdown",
                expected_type=HtmlToMarkdownOptions,
                received_type=type(options),
            )
        self.options: HtmlToMarkdownOptions = options or HtmlToMarkdownOptions()
        self._raw_renderer = HtmlRenderer(HtmlRendererOptions(ensure_trailing_newline=False))

    def convert(self, root: HtmlNode) -> Document:
        """Convert an HTML tree to a Markdown document.

        Parameters
        ----------
        root : HtmlNode
            Root (or any node) of the HTML tree

        Returns
        -------
        Document
            New Markdown tree. ``metadata`` holds the frontmatter mapping of
            a ``<!--frontmatter ...-->`` comment and the ``<title>`` text.

        Raises
        ------
        TransformError
            If the tree is nested too deeply or holds objects that are not
            HTML nodes

        """
        metadata: dict = {}
        with debug_timer(logger, "Converting (html -> markdown)"):
            try:
                nodes = root.children if isinstance(root, HtmlRoot) else [root]
                children = self._blocks(nodes, metadata)
            except RecursionError as e:
                raise TransformError(
                    "HTML tree is nested too deeply to convert", transform_name="html-to-markdown", original_error=e
                ) from e
            except AttributeError as e:
                raise TransformError(
                    f"Invalid node in HTML tree: {e}", transform_name="html-to-markdown", original_error=e
                ) from e

        for child in children:
            if isinstance(child, Frontmatter):
                metadata = {**metadata, **load_frontmatter_metadata(child.content)}
                break

        return Document(children=children, metadata=metadata, source_location=_copy_location(root))

    # ------------------------------------------------------------------
    # Block context
    # ------------------------------------------------------------------

    def _is_block(self, node: HtmlNode) -> bool:
        if isinstance(node, HtmlElement):
            return node.tag_name in BLOCK_ELEMENTS
        return False

    def _blocks(self, nodes: list[HtmlNode], metadata: dict) -> list[Node]:
        """Convert a sequence of HTML nodes in block context.

        Inline runs between blocks are wrapped in paragraphs. Comments and
        raw markup that sit between blocks become block passthrough.
        """
        blocks: list[Node] = []
        inline_buffer: list[Node] = []

        def flush() -> None:
            paragraph = self._paragraph(inline_buffer)
            if paragraph is not None:
                blocks.append(paragraph)
            inline_buffer.clear()

        for node in nodes:
            if isinstance(node, HtmlDoctype):
                continue
            if isinstance(node, (HtmlComment, HtmlRaw)) and not self._has_content(inline_buffer):
                flush()
                blocks.extend(self._block_passthrough(node))
            elif self._is_block(node):
                flush()
                blocks.extend(self._block_element(node, metadata))  # type: ignore[arg-type]
            else:
                inline_buffer.extend(self._inline_node(node))
        flush()
        return blocks

    @staticmethod
    def _has_content(nodes: list[Node]) -> bool:
        return any(not isinstance(node, Text) or node.content.strip() for node in nodes)

    def _paragraph(
        self, content: list[Node], source_location: Optional[SourceLocation] = None
    ) -> Optional[Paragraph]:
        content = self._trim_inline(content)
        if not content:
            return None
        return Paragraph(content=content, source_location=source_location)

    def _block_passthrough(self, node: Union[HtmlComment, HtmlRaw]) -> list[Node]:
        if isinstance(node, HtmlComment) and node.value.startswith(FRONTMATTER_COMMENT_PREFIX):
            content = node.value[len(FRONTMATTER_COMMENT_PREFIX) :].replace("--&gt;", "-->")
            logger.debug("Restoring frontmatter from HTML comment")
            return [Frontmatter(content=content.rstrip("\n"), source_location=_copy_location(node))]
        return [HTMLBlock(content=self._raw_renderer.render_to_string(node), source_location=_copy_location(node))]

    def _block_element(self, node: HtmlElement, metadata: dict) -> list[Node]:
        tag = node.tag_name
        location = _copy_location(node)

        if tag == "head":
            self._read_head(node, metadata)
            return []
        if tag == "div" and node.has_class(MATH_CLASS):
            return [MathBlock(content=html_text_content(node), source_location=location)]
        if tag in CONTAINER_ELEMENTS:
            return self._blocks(node.children, metadata)
        if tag in HEADING_ELEMENTS:
            return [
                Heading(
                    level=HEADING_ELEMENTS[tag],
                    content=self._trim_inline(self._inline_children(node)),
                    source_location=location,
                )
            ]
        if tag == "p":
            if any(self._is_block(child) for child in node.children):
                return self._blocks(node.children, metadata)
            paragraph = self._paragraph(self._inline_children(node), location)
            return [paragraph] if paragraph is not None else []
        if tag == "blockquote":
            return [BlockQuote(children=self._blocks(node.children, metadata), source_location=location)]
        if tag in ("ul", "ol"):
            return [self._list(node, metadata)]
        if tag == "li":
            # an li outside of a list
            return [List(items=[self._list_item(node, metadata)], source_location=location)]
        if tag == "pre":
            return [self._code_block(node)]
        if tag == "hr":
            return [ThematicBreak(source_location=location)]
        if tag == "table":
            return [self._table(node)]
        return self._unrepresentable_block(node)

    def _unrepresentable_block(self, node: HtmlElement) -> list[Node]:
        if self.options.preserve_unknown_elements:
            logger.debug("Keeping <%s> as raw HTML block", node.tag_name)
            return [
                HTMLBlock(content=self._raw_renderer.render_to_string(node), source_location=_copy_location(node))
            ]
        if node.tag_name in _NON_CONTENT_ELEMENTS:
            logger.debug("Dropping <%s> because preserve_unknown_elements is off", node.tag_name)
            return []
        logger.debug("Keeping only the text of <%s>", node.tag_name)
        paragraph = self._paragraph(self._collapse(html_text_content(node), node))
        return [paragraph] if paragraph is not None else []

    def _read_head(self, node: HtmlElement, metadata: dict) -> None:
        for child in node.children:
            if isinstance(child, HtmlElement) and child.tag_name == "title":
                title = _WHITESPACE_RE.sub(" ", html_text_content(child)).strip()
                if title:
                    metadata["title"] = title
                return

    def _list(self, node: HtmlElement, metadata: dict) -> List:
        """Convert ``ul``/``ol``.

        The list is tight unless one of its items holds a ``p`` element.
        Stray content between items becomes an item of its own.
        """
        ordered = node.tag_name == "ol"
        start = 1
        if ordered and node.get("start"):
            try:
                start = int(node.get("start") or 1)
            except ValueError:
                logger.debug("Ignoring non-numeric list start %r", node.get("start"))

        items: list[ListItem] = []
        tight = True
        for child in _meaningful_children(node):
            if isinstance(child, HtmlElement) and child.tag_name == "li":
                if any(isinstance(grand, HtmlElement) and grand.tag_name == "p" for grand in child.children):
                    tight = False
                items.append(self._list_item(child, metadata))
            else:
                logger.debug("Wrapping stray %s inside <%s> as a list item", child.kind, node.tag_name)
                items.append(ListItem(children=self._blocks([child], metadata)))

        return List(ordered=ordered, items=items, start=start, tight=tight, source_location=_copy_location(node))

    def _list_item(self, node: HtmlElement, metadata: dict) -> ListItem:
        children = list(node.children)
        task_status = self._take_checkbox(children)
        if task_status is None:
            first = next((child for child in children if not _is_blank(child)), None)
            if isinstance(first, HtmlElement) and first.tag_name == "p":
                paragraph_children = list(first.children)
                task_status = self._take_checkbox(paragraph_children)
                if task_status is not None:
                    children[children.index(first)] = replace(first, children=paragraph_children)
        return ListItem(
            children=self._blocks(children, metadata),
            task_status=task_status,
            source_location=_copy_location(node),
        )

    @staticmethod
    def _take_checkbox(children: list[HtmlNode]) -> Optional[str]:
        """Remove a leading checkbox ``input`` from ``children`` and return its task status."""
        for i, child in enumerate(children):
            if _is_blank(child):
                continue
            if (
                isinstance(child, HtmlElement)
                and child.tag_name == "input"
                and (child.get("type") or "").lower() == "checkbox"
            ):
                del children[i]
                return "checked" if "checked" in child.properties else "unchecked"
            return None
        return None

    def _code_block(self, node: HtmlElement) -> CodeBlock:
        """Convert ``pre`` (optionally wrapping a single ``code``) to a code block.

        The language comes from a ``language-*``/``lang-*`` class on either
        element and ``data-meta`` completes the info string.
        """
        meaningful = _meaningful_children(node)
        code = meaningful[0] if len(meaningful) == 1 else None
        if isinstance(code, HtmlElement) and code.tag_name == "code":
            content = html_text_content(code)
        else:
            code = None
            content = html_text_content(node)
            if content.startswith("\n"):
                content = content[1:]

        language = language_from_classes(node.get("class"))
        meta = node.get("data-meta")
        if code is not None:
            language = language or language_from_classes(code.get("class"))
            meta = meta or code.get("data-meta")

        info_string = language or ""
        if meta and meta.strip():
            info_string = f"{info_string} {meta.strip()}".strip()

        if content.endswith("\n"):
            content = content[:-1]

        return CodeBlock(
            content=content,
            language=language,
            info_string=info_string,
            source_location=_copy_location(node),
        )

    def _table(self, node: HtmlElement) -> Table:
        """Convert ``table``.

        The header is the first ``thead`` row, or else a first row made only
        of ``th`` cells. Column alignments come from the header cells.
        """
        header_rows: list[HtmlElement] = []
        body_rows: list[HtmlElement] = []
        for child in node.children:
            if not isinstance(child, HtmlElement):
                continue
            if child.tag_name == "tr":
                body_rows.append(child)
            elif child.tag_name in ("thead", "tbody", "tfoot"):
                rows = [row for row in child.children if isinstance(row, HtmlElement) and row.tag_name == "tr"]
                (header_rows if child.tag_name == "thead" else body_rows).extend(rows)

        header_tr: Optional[HtmlElement] = None
        if header_rows:
            header_tr = header_rows[0]
            body_rows = header_rows[1:] + body_rows
        elif body_rows:
            first_cells = self._cell_elements(body_rows[0])
            if first_cells and all(cell.tag_name == "th" for cell in first_cells):
                header_tr = body_rows.pop(0)

        header = self._table_row(header_tr, is_header=True) if header_tr is not None else None
        rows = [self._table_row(tr) for tr in body_rows]
        alignments = [cell.alignment for cell in header.cells] if header is not None else []
        return Table(rows=rows, header=header, alignments=alignments, source_location=_copy_location(node))

    @staticmethod
    def _cell_elements(tr: HtmlElement) -> list[HtmlElement]:
        return [cell for cell in tr.children if isinstance(cell, HtmlElement) and cell.tag_name in ("th", "td")]

    def _table_row(self, tr: HtmlElement, is_header: bool = False) -> TableRow:
        cells = [
            TableCell(
                content=self._trim_inline(self._inline_children(cell)),
                alignment=self._alignment(cell),
                source_location=_copy_location(cell),
            )
            for cell in self._cell_elements(tr)
        ]
        return TableRow(cells=cells, is_header=is_header, source_location=_copy_location(tr))

    @staticmethod
    def _alignment(cell: HtmlElement) -> Optional[str]:
        align = (cell.get("align") or "").lower()
        if align in ("left", "center", "right"):
            return align
        style = (cell.get("style") or "").lower().replace(" ", "")
        for value in ("left", "center", "right"):
            if f"text-align:{value}" in style:
                return value
        return None

    # ------------------------------------------------------------------
    # Inline context
    # ------------------------------------------------------------------

    def _inline_children(self, node: HtmlElement) -> list[Node]:
        result: list[Node] = []
        for child in node.children:
            result.extend(self._inline_node(child))
        return result

    def _collapse(self, text: str, node: HtmlNode) -> list[Node]:
        if self.options.collapse_whitespace:
            text = _WHITESPACE_RE.sub(" ", text)
        if not text:
            return []
        return [Text(content=text, source_location=_copy_location(node))]

    def _inline_node(self, node: HtmlNode) -> list[Node]:
        """Convert one HTML node in inline context."""
        location = _copy_location(node)

        if isinstance(node, HtmlText):
            return self._collapse(node.value, node)
        if isinstance(node, HtmlComment):
            return [HTMLInline(content=f"<!--{node.value}-->", source_location=location)]
        if isinstance(node, HtmlRaw):
            return [HTMLInline(content=node.value, source_location=location)]
        if not isinstance(node, HtmlElement):
            return []

        tag = node.tag_name
        if tag in INLINE_WRAPPERS:
            return [INLINE_WRAPPERS[tag](content=self._inline_children(node), source_location=location)]
        if tag == "code":
            return [Code(content=html_text_content(node), source_location=location)]
        if tag == "a":
            href = node.get("href")
            if href is None:
                return self._inline_children(node)
            return [
                Link(url=href, content=self._inline_children(node), title=node.get("title"), source_location=location)
            ]
        if tag == "img":
            return [
                Image(
                    url=node.get("src") or "",
                    alt_text=node.get("alt") or "",
                    title=node.get("title"),
                    source_location=location,
                )
            ]
        if tag == "br":
            return [LineBreak(soft=False, source_location=location)]
        if tag == "span" and node.has_class(MATH_CLASS):
            metadata = {"display": True} if node.has_class(MATH_DISPLAY_CLASS) else {}
            return [MathInline(content=html_text_content(node), metadata=metadata, source_location=location)]
        if tag in TRANSPARENT_INLINE_ELEMENTS:
            return self._inline_children(node)
        if tag == "head":
            return []

        if tag in BLOCK_ELEMENTS and tag not in RAW_BLOCK_ELEMENTS:
            # block markup in inline context (e.g. <p> inside <a>)
            logger.debug("Flattening block <%s> found in inline context", tag)
            return self._inline_children(node) + [Text(content=" ")]

        if self.options.preserve_unknown_elements:
            logger.debug("Keeping <%s> as raw inline HTML", tag)
            return [HTMLInline(content=self._raw_renderer.render_to_string(node), source_location=location)]
        if tag in _NON_CONTENT_ELEMENTS:
            logger.debug("Dropping <%s> because preserve_unknown_elements is off", tag)
            return []
        return self._inline_children(node)

    def _trim_inline(self, content: list[Node]) -> list[Node]:
        """Apply browser whitespace rules to an inline run.

        Adjacent spaces across text nodes collapse into one, whitespace next
        to a hard break goes away, and the run is trimmed at both ends.
        """
        if not self.options.collapse_whitespace:
            return [node for node in content if not (isinstance(node, Text) and not node.content)]

        result: list[Node] = []
        for node in content:
            if isinstance(node, Text):
                text = node.content
                previous = result[-1] if result else None
                if previous is None or isinstance(previous, LineBreak):
                    text = text.lstrip(" ")
                elif isinstance(previous, Text) and previous.content.endswith(" "):
                    text = text.lstrip(" ")
                if not text:
                    continue
                if text != node.content:
                    node = Text(content=text, source_location=node.source_location)
            elif isinstance(node, LineBreak) and result and isinstance(result[-1], Text):
                stripped = result[-1].content.rstrip(" ")
                if stripped:
                    result[-1] = Text(content=stripped, source_location=result[-1].source_location)
                else:
                    result.pop()
            result.append(node)

        while result and isinstance(result[-1], (Text, LineBreak)):
            last = result[-1]
            if isinstance(last, LineBreak):
                result.pop()
                continue
            stripped = last.content.rstrip(" ")
            if stripped:
                result[-1] = Text(content=stripped, source_location=last.source_location)
                break
            result.pop()
        return result


def hast_to_markdown(root: HtmlNode, options: HtmlToMarkdownOptions | None = None) -> Document:
    """Convert an HTML tree to a Markdown tree.

    Parameters
    ----------
    root : HtmlNode
        HTML tree to convert
    options : HtmlToMarkdownOptions, optional
        Conversion options; defaults are used when omitted

    Returns
    -------
    Document

    """
    return HtmlToMarkdownConverter(options).convert(root)
