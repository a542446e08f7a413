#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/parsers/markdown.py
"""Markdown to document tree parser.

This module parses Markdown into the tree defined in
:mod:`mdtranspile.ast.nodes` using the mistune tokenizer. A leading YAML
frontmatter block is split off before tokenization and becomes a
:class:`~mdtranspile.ast.nodes.Frontmatter` node. Every node is annotated
with its source span by a per-call
:class:`~mdtranspile.parsers._source_map.SourceLocator`.

"""

from __future__ import annotations

import logging
from typing import Any, Callable, Literal, Optional, Union

from mdtranspile.ast import (
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
from mdtranspile.constants import DEPS_MARKDOWN, MISTUNE_PLUGINS
from mdtranspile.exceptions import ParsingError
from mdtranspile.options.markdown import MarkdownParserOptions
from mdtranspile.parsers._source_map import SourceLocator, Span, decode_entities
from mdtranspile.parsers.base import BaseParser
from mdtranspile.utils.decorators import debug_timer, requires_dependencies
from mdtranspile.utils.frontmatter import load_frontmatter_metadata, normalize_frontmatter, split_frontmatter

logger = logging.getLogger(__name__)

Token = dict[str, Any]


class MarkdownParser(BaseParser):
    r"""Parse Markdown text into a :class:`Document`.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> doc = MarkdownParser().parse("# Hello\n\nThis is **bold**.")
        >>> doc.children[0].span
        (0, 7)

    Without positions:

        >>> parser = MarkdownParser(MarkdownParserOptions(track_positions=False))
        >>> parser.parse("text").children[0].span is None
        True

    Notes
    -----
    The parser holds no per-call state. All cursor bookkeeping lives in the
    locator created by each :meth:`parse` call, so one instance can parse
    many documents concurrently.

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def parse(self, input_data: Union[str, bytes]) -> Document:
        """Parse Markdown input into a Document.

        Parameters
        ----------
        input_data : str or bytes
            Markdown source; bytes are decoded as UTF-8

        Returns
        -------
        Document
            Root of the parsed tree. Spans refer to the (normalized) source.

        Raises
        ------
        ValidationError
            If the input is not text
        ParsingError
            If tokenization fails, or ``strict_fences`` is set and a fence is
            never closed

        """
        source = self._coerce_text(input_data, "markdown")

        with debug_timer(logger, "Parsing (markdown)"):
            if self.options.normalize_frontmatter:
                source = normalize_frontmatter(source)

            locator = SourceLocator(source)
            children: list[Node] = []
            metadata: dict[str, Any] = {}
            body_start = 0

            block = split_frontmatter(source)
            if block is not None:
                logger.debug("Found frontmatter block spanning %d..%d", block.start, block.end)
                children.append(
                    Frontmatter(content=block.raw, source_location=self._locate(locator, (block.start, block.end)))
                )
                if self.options.parse_frontmatter_metadata:
                    metadata = load_frontmatter_metadata(block.raw)
                body_start = block.body_start
                locator.advance(body_start)

            tokens = self._tokenize(source[body_start:])
            try:
                children.extend(self._process_tokens(tokens, locator))
            except RecursionError as e:
                raise ParsingError(
                    "Markdown document is nested too deeply",
                    parsing_stage="tree_building",
                    offset=locator.cursor,
                    original_error=e,
                ) from e

        return Document(
            children=children,
            metadata=metadata,
            source_location=self._locate(locator, (0, len(source))),
        )

    def _tokenize(self, text: str) -> list[Token]:
        """Run mistune over ``text`` and return its block tokens."""
        import mistune

        plugins = [plugin for option, plugin in MISTUNE_PLUGINS.items() if getattr(self.options, option)]
        markdown = mistune.create_markdown(plugins=plugins, renderer=None)
        try:
            tokens, _state = markdown.parse(text)
        except RecursionError as e:
            raise ParsingError(
                "Markdown document is nested too deeply", parsing_stage="tokenizing", original_error=e
            ) from e
        except Exception as e:
            raise ParsingError(f"Failed to tokenize Markdown: {e}", parsing_stage="tokenizing", original_error=e) from e

        return tokens if isinstance(tokens, list) else []

    def _locate(self, locator: SourceLocator, span: Optional[Span]) -> Optional[SourceLocation]:
        if span is None or not self.options.track_positions:
            return None
        return locator.location(*span)

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[Token], locator: SourceLocator) -> list[Node]:
        """Process a list of block tokens into nodes."""
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token, locator)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: Token, locator: SourceLocator) -> Node | None:
        """Process a single block token."""
        handlers: dict[str, Callable[[Token, SourceLocator], Node]] = {
            "heading": self._process_heading,
            "paragraph": self._process_paragraph,
            "block_text": self._process_paragraph,
            "block_code": self._process_code_block,
            "block_quote": self._process_block_quote,
            "list": self._process_list,
            "table": self._process_table,
            "thematic_break": self._process_thematic_break,
            "block_html": self._process_html_block,
            "block_math": self._process_math_block,
        }
        token_type = token.get("type", "")
        if token_type == "blank_line":
            return None

        handler = handlers.get(token_type)
        if handler is None:
            logger.debug("Skipping unsupported block token %r", token_type)
            return None
        return handler(token, locator)

    def _process_heading(self, token: Token, locator: SourceLocator) -> Heading:
        """Process heading token (ATX or setext)."""
        level = token.get("attrs", {}).get("level", 1)
        if not isinstance(level, int) or not 1 <= level <= 6:
            level = 1

        if token.get("style") == "setext":
            content = self._process_inline_tokens(token.get("children", []), locator)
            inner = locator.union(content)
            underline = locator.find_setext_underline()
            span: Optional[Span] = None
            if inner is not None:
                span = (inner[0], underline[1] if underline else inner[1])
            return Heading(level=level, content=content, source_location=self._locate(locator, span))

        marker = locator.find_atx_marker(level)
        content = self._process_inline_tokens(token.get("children", []), locator)
        if marker is None:
            span = locator.union(content)
        else:
            span = (marker[0], max(locator.line_end(), marker[1]))
        return Heading(level=level, content=content, source_location=self._locate(locator, span))

    def _process_paragraph(self, token: Token, locator: SourceLocator) -> Paragraph:
        """Process paragraph and tight-list block_text tokens."""
        content = self._process_inline_tokens(token.get("children", []), locator)
        return Paragraph(content=content, source_location=self._locate(locator, locator.union(content)))

    def _process_code_block(self, token: Token, locator: SourceLocator) -> CodeBlock:
        """Process fenced and indented code blocks."""
        raw = token.get("raw", "")
        content = raw[:-1] if raw.endswith("\n") else raw

        if token.get("style") != "fenced":
            span = locator.find_indented_code(raw)
            return CodeBlock(
                content=content,
                fence_char="",
                fence_length=0,
                source_location=self._locate(locator, span),
            )

        marker = token.get("marker") or "```"
        info_string = (token.get("attrs") or {}).get("info", "") or ""
        parts = info_string.split(maxsplit=1)
        start, end, closed = locator.find_fenced_code(marker, raw)

        if start is not None and not closed and self.options.strict_fences:
            raise ParsingError(
                "Unterminated code fence",
                parsing_stage="block",
                offset=start,
                expected=marker,
                found="end of input",
            )

        return CodeBlock(
            content=content,
            language=parts[0] if parts else None,
            info_string=info_string,
            fence_char=marker[0],
            fence_length=len(marker),
            source_location=self._locate(locator, None if start is None or end is None else (start, end)),
        )

    def _process_block_quote(self, token: Token, locator: SourceLocator) -> BlockQuote:
        """Process block quote token."""
        locator.skip_blank()
        opener = locator.take(">")
        children = self._process_tokens(token.get("children", []), locator)
        inner = locator.union(children)
        span: Optional[Span]
        if opener is None:
            span = inner
        else:
            span = (opener[0], inner[1] if inner else opener[1])
        return BlockQuote(children=children, source_location=self._locate(locator, span))

    def _process_list(self, token: Token, locator: SourceLocator) -> List:
        """Process list token."""
        attrs = token.get("attrs") or {}
        items = [
            self._process_list_item(child, locator)
            for child in token.get("children", [])
            if child.get("type") in ("list_item", "task_list_item")
        ]
        return List(
            ordered=bool(attrs.get("ordered", False)),
            items=items,
            start=attrs.get("start", 1),
            tight=bool(token.get("tight", True)),
            source_location=self._locate(locator, locator.union(items)),
        )

    def _process_list_item(self, token: Token, locator: SourceLocator) -> ListItem:
        """Process list item token, including task list items."""
        marker = locator.find_list_marker()
        children = self._process_tokens(token.get("children", []), locator)

        task_status: Literal["checked", "unchecked"] | None = None
        attrs = token.get("attrs") or {}
        if "checked" in attrs:
            task_status = "checked" if attrs["checked"] else "unchecked"

        inner = locator.union(children)
        span: Optional[Span]
        if marker is None:
            span = inner
        else:
            span = (marker[0], inner[1] if inner else marker[1])
        return ListItem(children=children, task_status=task_status, source_location=self._locate(locator, span))

    def _process_table(self, token: Token, locator: SourceLocator) -> Table:
        """Process table token (table_head + table_body)."""
        header: TableRow | None = None
        rows: list[TableRow] = []
        alignments: list = []

        for part in token.get("children", []):
            part_type = part.get("type", "")
            if part_type == "table_head":
                cells = self._process_table_cells(part.get("children", []), locator)
                alignments = [cell.alignment for cell in cells]
                header = TableRow(cells=cells, is_header=True, source_location=self._row_location(cells, locator))
            elif part_type == "table_body":
                for row_token in part.get("children", []):
                    cells = self._process_table_cells(row_token.get("children", []), locator)
                    rows.append(TableRow(cells=cells, source_location=self._row_location(cells, locator)))

        all_rows: list[Optional[Node]] = [header, *rows]
        return Table(
            header=header,
            rows=rows,
            alignments=alignments,
            source_location=self._locate(locator, locator.union(all_rows)),
        )

    def _process_table_cells(self, tokens: list[Token], locator: SourceLocator) -> list[TableCell]:
        cells = []
        for cell_token in tokens:
            content = self._process_inline_tokens(cell_token.get("children", []), locator)
            cells.append(
                TableCell(
                    content=content,
                    alignment=(cell_token.get("attrs") or {}).get("align"),
                    source_location=self._locate(locator, locator.union(content)),
                )
            )
        return cells

    def _row_location(self, cells: list[TableCell], locator: SourceLocator) -> Optional[SourceLocation]:
        span = locator.union(cells)
        return self._locate(locator, locator.line_bounds(span) if span else None)

    def _process_thematic_break(self, token: Token, locator: SourceLocator) -> ThematicBreak:
        """Process thematic break token."""
        return ThematicBreak(source_location=self._locate(locator, locator.find_thematic_break()))

    def _process_html_block(self, token: Token, locator: SourceLocator) -> HTMLBlock:
        """Process raw HTML block token."""
        content = token.get("raw", "").rstrip("\n")
        return HTMLBlock(content=content, source_location=self._locate(locator, locator.find_text(content)))

    def _process_math_block(self, token: Token, locator: SourceLocator) -> MathBlock:
        """Process ``$$`` display math token."""
        raw = token.get("raw", "")
        start, end, closed = locator.find_block_math(raw)
        if start is not None and not closed and self.options.strict_fences:
            raise ParsingError(
                "Unterminated math fence", parsing_stage="block", offset=start, expected="$$", found="end of input"
            )
        span = None if start is None or end is None else (start, end)
        return MathBlock(content=raw, source_location=self._locate(locator, span))

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[Token], locator: SourceLocator) -> list[Node]:
        """Process inline tokens."""
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_inline_token(token, locator)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_inline_token(self, token: Token, locator: SourceLocator) -> Node | None:
        """Process a single inline token."""
        handler_map: dict[str, Callable[[Token, SourceLocator], Node | None]] = {
            "text": self._handle_text_token,
            "emphasis": self._handle_emphasis_token,
            "strong": self._handle_strong_token,
            "strikethrough": self._handle_strikethrough_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_softbreak_token,
            "inline_html": self._handle_inline_html_token,
            "inline_math": self._handle_inline_math_token,
            "block_math": self._handle_display_math_token,
        }
        token_type = token.get("type", "")
        handler = handler_map.get(token_type)
        if handler is None:
            logger.debug("Skipping unsupported inline token %r", token_type)
            return None
        return handler(token, locator)

    def _handle_text_token(self, token: Token, locator: SourceLocator) -> Text | None:
        """Handle text token; entity references are decoded.

        mistune leaves empty text tokens around nested delimiters; those
        produce no node.
        """
        content = decode_entities(token.get("raw", ""))
        if not content:
            return None
        return Text(content=content, source_location=self._locate(locator, locator.find_text(content)))

    def _delimited(
        self, token: Token, locator: SourceLocator, delimiters: tuple[str, ...]
    ) -> tuple[list[Node], Optional[Span]]:
        """Process a delimited inline container and compute its span."""
        opener = None
        used = ""
        for delimiter in delimiters:
            opener = locator.take(delimiter)
            if opener is not None:
                used = delimiter
                break

        content = self._process_inline_tokens(token.get("children", []), locator)
        inner = locator.union(content)
        closer = locator.take(used) if used else None

        start = opener[0] if opener else (inner[0] if inner else None)
        end = closer[1] if closer else (inner[1] if inner else None)
        if start is None or end is None:
            return content, None
        return content, (start, end)

    def _handle_emphasis_token(self, token: Token, locator: SourceLocator) -> Emphasis:
        """Handle emphasis token."""
        content, span = self._delimited(token, locator, ("*", "_"))
        return Emphasis(content=content, source_location=self._locate(locator, span))

    def _handle_strong_token(self, token: Token, locator: SourceLocator) -> Strong:
        """Handle strong token."""
        content, span = self._delimited(token, locator, ("**", "__"))
        return Strong(content=content, source_location=self._locate(locator, span))

    def _handle_strikethrough_token(self, token: Token, locator: SourceLocator) -> Strikethrough:
        """Handle strikethrough token."""
        content, span = self._delimited(token, locator, ("~~",))
        return Strikethrough(content=content, source_location=self._locate(locator, span))

    def _handle_codespan_token(self, token: Token, locator: SourceLocator) -> Code:
        """Handle codespan token."""
        return Code(content=token.get("raw", ""), source_location=self._locate(locator, locator.find_code_span()))

    def _handle_link_token(self, token: Token, locator: SourceLocator) -> Link:
        """Handle link token (inline, reference and autolinks)."""
        attrs = token.get("attrs") or {}
        start = locator.open_link(is_image=False)
        content = self._process_inline_tokens(token.get("children", []), locator)
        end = locator.close_link()
        inner = locator.union(content)
        span: Optional[Span] = None
        if start is not None and end is not None:
            span = (start, end)
        elif inner is not None:
            span = (start if start is not None else inner[0], end if end is not None else inner[1])
        return Link(
            url=attrs.get("url", ""),
            content=content,
            title=attrs.get("title"),
            source_location=self._locate(locator, span),
        )

    def _handle_image_token(self, token: Token, locator: SourceLocator) -> Image:
        """Handle image token; alt text is flattened from its children."""
        attrs = token.get("attrs") or {}
        start = locator.open_link(is_image=True)
        alt_nodes = self._process_inline_tokens(token.get("children", []), locator)
        end = locator.close_link()
        span = (start, end) if start is not None and end is not None else None
        return Image(
            url=attrs.get("url", ""),
            alt_text=_plain_text(alt_nodes),
            title=attrs.get("title"),
            source_location=self._locate(locator, span),
        )

    def _handle_linebreak_token(self, token: Token, locator: SourceLocator) -> LineBreak:
        """Handle hard line break token."""
        return LineBreak(soft=False, source_location=self._locate(locator, locator.find_break()))

    def _handle_softbreak_token(self, token: Token, locator: SourceLocator) -> LineBreak:
        """Handle soft line break token."""
        return LineBreak(soft=True, source_location=self._locate(locator, locator.find_break()))

    def _handle_inline_html_token(self, token: Token, locator: SourceLocator) -> HTMLInline:
        """Handle inline_html token."""
        content = token.get("raw", "")
        return HTMLInline(content=content, source_location=self._locate(locator, locator.find_text(content)))

    def _handle_inline_math_token(self, token: Token, locator: SourceLocator) -> MathInline:
        """Handle ``$...$`` token."""
        raw = token.get("raw", "")
        return MathInline(content=raw, source_location=self._locate(locator, locator.find_inline_math(raw)))

    def _handle_display_math_token(self, token: Token, locator: SourceLocator) -> MathInline:
        """Handle ``$$...$$`` written inside a paragraph."""
        raw = token.get("raw", "")
        return MathInline(
            content=raw,
            metadata={"display": True},
            source_location=self._locate(locator, locator.find_inline_math(raw, display=True)),
        )


def _plain_text(nodes: list[Node]) -> str:
    parts = []
    for node in nodes:
        if isinstance(node, (Text, Code, MathInline)):
            parts.append(node.content)
        elif isinstance(node, Image):
            parts.append(node.alt_text)
        elif isinstance(node, LineBreak):
            parts.append("\n" if not node.soft else " ")
        elif isinstance(node, (Emphasis, Strong, Strikethrough, Link)):
            parts.append(_plain_text(node.content))
    return "".join(parts)


def parse_markdown(source: Union[str, bytes], options: MarkdownParserOptions | None = None) -> Document:
    """Parse Markdown source into a Document.

    Parameters
    ----------
    source : str or bytes
        Markdown text
    options : MarkdownParserOptions, optional
        Parser options; defaults are used when omitted

    Returns
    -------
    Document

    """
    return MarkdownParser(options).parse(source)
