#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/renderers/markdown.py
"""Markdown rendering from a document tree.

This module provides the MarkdownRenderer class which converts tree nodes
to Markdown text (CommonMark with the GFM table, strikethrough and task list
extensions, plus ``$``/``$$`` math).

Block visitors append one rendered block, without a trailing newline, to the
output buffer. Containers (documents, block quotes, list items) render their
children into separate buffers and then join, prefix and indent the pieces,
so nesting never has to track indentation state.

"""

from __future__ import annotations

import logging
import re

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
from mdtranspile.constants import FRONTMATTER_FENCE
from mdtranspile.exceptions import RenderingError
from mdtranspile.options.markdown import MarkdownRendererOptions
from mdtranspile.renderers.base import BaseRenderer, InlineContentMixin
from mdtranspile.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

_ALWAYS_ESCAPE = "\\`*[]<&~$"
_LIST_LIKE_RE = re.compile(r"(\d{1,9})([.)])(?=\s|$)")
_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*$")


def _longest_run(text: str, char: str) -> int:
    longest = current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _is_rule_line(text: str, start: int, char: str) -> bool:
    """Return True when the line from ``start`` holds only ``char`` and blanks.

    Such a line would read back as a thematic break or a setext underline.
    """
    end = text.find("\n", start)
    line = text[start:] if end == -1 else text[start:end]
    return set(line.replace(" ", "").replace("\t", "")) == {char}


def _wrap_delimited(content: str, delimiter: str) -> str:
    """Wrap ``content`` in ``delimiter``, keeping outer whitespace outside it.

    ``* a *`` is not emphasis, so surrounding blanks move out of the
    delimiters. Whitespace-only content is returned without delimiters.
    """
    stripped = content.strip()
    if not stripped:
        return content
    leading = content[: len(content) - len(content.lstrip())]
    trailing = content[len(content.rstrip()) :]
    return f"{leading}{delimiter}{stripped}{delimiter}{trailing}"


def _indent_lines(text: str, first_prefix: str, rest_prefix: str) -> str:
    """Prefix the first line with ``first_prefix`` and the rest with ``rest_prefix``.

    Blank continuation lines get the prefix with trailing spaces removed.
    """
    lines = text.split("\n")
    out = [f"{first_prefix}{lines[0]}" if lines[0] else first_prefix.rstrip(" ")]
    for line in lines[1:]:
        out.append(f"{rest_prefix}{line}" if line else rest_prefix.rstrip(" "))
    return "\n".join(out)


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render document tree nodes to Markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
        >>> from mdtranspile.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
        >>> MarkdownRenderer().render_to_string(doc)
        '# Title\\n'

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._output: list[str] = []
        self._list_depth: int = 0
        self._single_line: bool = False
        self._in_table_cell: bool = False

    def render_to_string(self, document: Node) -> str:
        """Render a document tree to a Markdown string.

        Rendering happens on a fresh renderer instance, so a shared renderer
        carries no state from one call to the next.

        Parameters
        ----------
        document : Node
            The document (or any block node) to render

        Returns
        -------
        str
            Markdown text ending in exactly one newline, or "" when there is
            nothing to render

        Raises
        ------
        RenderingError
            If the tree contains objects that are not nodes or is nested too
            deeply to render

        """
        worker = type(self)(self.options)
        with debug_timer(logger, "Rendering (markdown)"):
            try:
                document.accept(worker)
            except RecursionError as e:
                raise RenderingError(
                    "Document is nested too deeply to render", rendering_stage="visiting", original_error=e
                ) from e
            except AttributeError as e:
                raise RenderingError(
                    f"Invalid node in document tree: {e}", rendering_stage="visiting", original_error=e
                ) from e

        result = "".join(worker._output).rstrip("\n")
        return f"{result}\n" if result else ""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _capture(self, node: Node) -> str:
        saved_output = self._output
        self._output = []
        node.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _render_blocks(self, children: list[Node], tight: bool = False) -> str:
        """Render block children and join them.

        Loose content is separated by a blank line. Tight list item content
        uses single newlines, except between consecutive paragraphs, which
        would otherwise merge into one.
        """
        pieces: list[tuple[Node, str]] = []
        for child in children:
            rendered = self._capture(child)
            if rendered:
                pieces.append((child, rendered))

        parts: list[str] = []
        for i, (child, rendered) in enumerate(pieces):
            if i:
                previous = pieces[i - 1][0]
                if tight and not (isinstance(previous, Paragraph) and isinstance(child, Paragraph)):
                    parts.append("\n")
                else:
                    parts.append("\n\n")
            parts.append(rendered)
        return "".join(parts)

    def _render_single_line(self, content: list[Node]) -> str:
        saved = self._single_line
        self._single_line = True
        try:
            return self._render_inline_content(content)
        finally:
            self._single_line = saved

    def _at_line_start(self) -> bool:
        return not self._output or self._output[-1].endswith("\n")

    def _escape_markdown(self, text: str, line_start: bool) -> str:
        """Escape special Markdown characters with context awareness.

        Backslash, backtick, asterisk, brackets, ``<``, ``&``, ``~`` and ``$``
        are always escaped, so literal text never reads back as raw HTML, an
        entity reference, strikethrough or math. ``#`` is only escaped at the
        start of a line, and ``_`` only at a word boundary, so ``snake_case``
        stays readable. At the start of a line a ``>``, a ``-``/``+`` bullet,
        an ordered-list marker, or a line made only of ``-`` or ``=`` is
        escaped too.

        Parameters
        ----------
        text : str
            Text to escape
        line_start : bool
            True when ``text`` begins a new output line

        Returns
        -------
        str
            Escaped text

        """
        if not self.options.escape_special:
            return text

        escaped_chars: list[str] = []
        at_start = line_start
        i = 0
        while i < len(text):
            char = text[i]
            if char in _ALWAYS_ESCAPE:
                escaped_chars.append("\\" + char)
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                escaped_chars.append(char if prev_alnum and next_alnum else "\\_")
            elif char == "|" and self._in_table_cell:
                escaped_chars.append("\\|")
            elif at_start and char in "-=" and _is_rule_line(text, i, char):
                escaped_chars.append("\\" + char)
            elif at_start and (char in "#>" or (char in "-+" and text[i + 1 : i + 2] in ("", " ", "\t"))):
                escaped_chars.append("\\" + char)
            elif at_start and char.isdigit() and (match := _LIST_LIKE_RE.match(text, i)):
                escaped_chars.append(f"{match.group(1)}\\{match.group(2)}")
                i = match.end()
                at_start = False
                continue
            else:
                escaped_chars.append(char)

            if char == "\n":
                at_start = True
            elif char not in " \t":
                at_start = False
            i += 1

        return "".join(escaped_chars)

    def _fence_for(self, content: str, info: str) -> str:
        fence_char = self.options.code_fence_char
        if fence_char == "`" and "`" in info:
            fence_char = "~"
        fence_length = max(self.options.code_fence_min, _longest_run(content, fence_char) + 1)
        return fence_char * fence_length

    def _get_bullet_symbol(self, depth: int) -> str:
        symbols = self.options.bullet_symbols
        return symbols[depth % len(symbols)]

    @staticmethod
    def _format_destination(url: str) -> str:
        if not url:
            return "<>"
        if any(c in url for c in " <>\n") or url.count("(") != url.count(")"):
            return "<" + url.replace("<", "%3C").replace(">", "%3E").replace("\n", "%0A") + ">"
        return url

    @staticmethod
    def _format_title(title: str | None) -> str:
        if not title:
            return ""
        return ' "' + title.replace("\\", "\\\\").replace('"', '\\"') + '"'

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        self._output.append(self._render_blocks(node.children))

    def visit_frontmatter(self, node: Frontmatter) -> None:
        """Render a Frontmatter node as a ``---`` fenced YAML block."""
        if not self.options.render_frontmatter:
            return
        content = node.content.rstrip("\r\n")
        if content:
            self._output.append(f"{FRONTMATTER_FENCE}\n{content}\n{FRONTMATTER_FENCE}")
        else:
            self._output.append(f"{FRONTMATTER_FENCE}\n{FRONTMATTER_FENCE}")

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node.

        Levels 1 and 2 use setext underlines when ``use_hash_headings`` is
        off; every other heading uses ATX ``#`` markers.
        """
        content = self._render_single_line(node.content).strip()

        if not self.options.use_hash_headings and node.level <= 2 and content:
            underline_char = "=" if node.level == 1 else "-"
            self._output.append(f"{content}\n{underline_char * max(3, len(content))}")
            return

        prefix = "#" * node.level
        self._output.append(f"{prefix} {content}" if content else prefix)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        self._output.append(self._render_inline_content(node.content))

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node by prefixing every line with ``>``."""
        content = self._render_blocks(node.children)
        self._output.append(_indent_lines(content, "> ", "> "))

    def visit_list(self, node: List) -> None:
        """Render a List node.

        Bullets cycle through ``bullet_symbols`` by nesting depth. Ordered
        lists count up from ``node.start``.
        """
        depth = self._list_depth
        self._list_depth += 1
        try:
            rendered_items = []
            for i, item in enumerate(node.items):
                if node.ordered:
                    marker = f"{node.start + i}. "
                else:
                    marker = f"{self._get_bullet_symbol(depth)} "
                rendered_items.append(self._render_list_item(item, marker, node.tight))
        finally:
            self._list_depth = depth

        self._output.append(("\n" if node.tight else "\n\n").join(rendered_items))

    def _render_list_item(self, item: ListItem, marker: str, tight: bool) -> str:
        if not isinstance(item, ListItem):
            return _indent_lines(self._capture(item), marker, " " * len(marker))

        content = self._render_blocks(item.children, tight=tight)
        first_prefix = marker
        if item.task_status is not None:
            checkbox = "[x]" if item.task_status == "checked" else "[ ]"
            first_prefix = f"{marker}{checkbox} "
        if not content:
            return first_prefix.rstrip(" ")
        return _indent_lines(content, first_prefix, " " * len(marker))

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem outside of a List with a default bullet."""
        marker = f"{self._get_bullet_symbol(self._list_depth)} "
        self._output.append(self._render_list_item(node, marker, tight=True))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node as a fenced block.

        The fence is made longer than any run of the fence character in the
        content, so the block cannot close early. Indented code blocks are
        written fenced as well.
        """
        info = node.info_string or node.language or ""
        fence = self._fence_for(node.content, info)
        content = node.content
        if content and not content.endswith("\n"):
            content += "\n"
        self._output.append(f"{fence}{info}\n{content}{fence}")

    def visit_math_block(self, node: MathBlock) -> None:
        """Render a MathBlock node between ``$$`` lines."""
        content = node.content.strip("\n")
        if content:
            self._output.append(f"$$\n{content}\n$$")
        else:
            self._output.append("$$\n$$")

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Render an HTMLBlock node unchanged."""
        self._output.append(node.content.rstrip("\n"))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self._output.append("---")

    def visit_table(self, node: Table) -> None:
        """Render a Table node as a GFM pipe table.

        A table without a header row gets an empty one, since pipe tables
        cannot be written without it.
        """
        body_rows = [self._render_row_cells(row) for row in node.rows]
        header_cells = self._render_row_cells(node.header) if node.header is not None else []
        num_cols = max([len(header_cells), len(node.alignments)] + [len(cells) for cells in body_rows])
        if num_cols == 0:
            return

        def pad(cells: list[str]) -> list[str]:
            return cells + [""] * (num_cols - len(cells))

        lines = [self._format_row(pad(header_cells))]
        delimiters = []
        for i in range(num_cols):
            alignment = node.alignments[i] if i < len(node.alignments) else None
            if alignment == "left":
                delimiters.append(":---")
            elif alignment == "center":
                delimiters.append(":---:")
            elif alignment == "right":
                delimiters.append("---:")
            else:
                delimiters.append("---")
        lines.append(self._format_row(delimiters))
        lines.extend(self._format_row(pad(cells)) for cells in body_rows)
        self._output.append("\n".join(lines))

    @staticmethod
    def _format_row(cells: list[str]) -> str:
        return "| " + " | ".join(cells) + " |"

    def _render_row_cells(self, row: TableRow) -> list[str]:
        cells = []
        for cell in row.cells:
            saved = self._in_table_cell
            self._in_table_cell = True
            try:
                cells.append(self._render_single_line(cell.content).strip())
            finally:
                self._in_table_cell = saved
        return cells

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow on its own as a single pipe-table line."""
        self._output.append(self._format_row(self._render_row_cells(node)))

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell's inline content."""
        self._output.append(self._render_single_line(node.content).strip())

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render a Text node, escaped when ``escape_special`` is on."""
        text = node.content
        if self._single_line:
            text = text.replace("\r\n", " ").replace("\n", " ")
        self._output.append(self._escape_markdown(text, self._at_line_start()))

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        content = self._render_inline_content(node.content)
        self._output.append(_wrap_delimited(content, self.options.emphasis_symbol))

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        content = self._render_inline_content(node.content)
        self._output.append(_wrap_delimited(content, self.options.strong_symbol))

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node."""
        content = self._render_inline_content(node.content)
        self._output.append(_wrap_delimited(content, "~~"))

    def visit_code(self, node: Code) -> None:
        """Render a Code node.

        The backtick fence is one longer than the longest backtick run in the
        content. Content that starts or ends with a backtick, or that is
        wrapped in spaces, is padded with a space on each side.
        """
        content = node.content
        if self._single_line:
            content = content.replace("\n", " ")
        backticks = "`" * (_longest_run(content, "`") + 1)
        if content.startswith("`") or content.endswith("`"):
            content = f" {content} "
        elif len(content) > 1 and content.startswith(" ") and content.endswith(" ") and content.strip():
            content = f" {content} "
        self._output.append(f"{backticks}{content}{backticks}")

    def visit_link(self, node: Link) -> None:
        """Render a Link node.

        A link whose text is its own absolute URL is written as an autolink.
        """
        if (
            not node.title
            and len(node.content) == 1
            and isinstance(node.content[0], Text)
            and node.content[0].content == node.url
            and _URL_SCHEME_RE.match(node.url)
        ):
            self._output.append(f"<{node.url}>")
            return

        content = self._render_inline_content(node.content)
        destination = self._format_destination(node.url)
        self._output.append(f"[{content}]({destination}{self._format_title(node.title)})")

    def visit_image(self, node: Image) -> None:
        """Render an Image node."""
        alt = node.alt_text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
        destination = self._format_destination(node.url)
        self._output.append(f"![{alt}]({destination}{self._format_title(node.title)})")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node.

        Soft breaks are newlines and hard breaks are two trailing spaces plus
        a newline. In headings and table cells every break becomes a space.
        """
        if self._single_line:
            self._output.append(" ")
        elif node.soft:
            self._output.append("\n")
        else:
            self._output.append("  \n")

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Render an HTMLInline node unchanged."""
        self._output.append(node.content)

    def visit_math_inline(self, node: MathInline) -> None:
        """Render a MathInline node.

        Display math that sat inside a paragraph keeps its ``$$`` delimiters.
        """
        delimiter = "$$" if node.metadata.get("display") else "$"
        self._output.append(f"{delimiter}{node.content}{delimiter}")


def render_markdown(document: Node, options: MarkdownRendererOptions | None = None) -> str:
    """Render a document tree to Markdown text.

    Parameters
    ----------
    document : Node
        Document to render
    options : MarkdownRendererOptions, optional
        Renderer options; defaults are used when omitted

    Returns
    -------
    str
        Markdown text

    """
    return MarkdownRenderer(options).render_to_string(document)
