#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/parsers/_source_map.py
"""Recover source offsets for mistune tokens.

mistune produces a token stream without positions. The Markdown parser
walks that stream in document order and, for every token, asks a
:class:`SourceLocator` to find the token's text or delimiters in the
original source. The locator keeps a cursor that only moves forward, so
each lookup starts where the previous one ended and sibling spans come out
non-overlapping and in source order.

Text matching is tolerant of the transformations mistune applies before
tokens are produced: backslash escapes, entity references, CRLF line
endings, and line prefixes (indentation or ``>`` markers) that are
stripped from container content.

A lookup that fails returns None and leaves the cursor where it was.

"""

from __future__ import annotations

import bisect
import html
import logging
import re
from typing import Iterable, Optional

from mdtranspile.ast.nodes import Node, SourceLocation

logger = logging.getLogger(__name__)

Span = tuple[int, int]

ENTITY_RE = re.compile(r"&(?:#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")
_ESCAPABLE = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

_SETEXT_UNDERLINE_RE = re.compile(r"[ \t]*\r?\n[ \t>]*(=+|-+)[ \t]*(?:\r?\n|\r|$)")
_THEMATIC_BREAK_RE = re.compile(r"(?m)^[ \t>]*(([-*_])(?:[ \t]*\2){2,})[ \t]*\r?$")
_LIST_MARKER_RE = re.compile(r"(?m)(?:^|(?<=[ \t>]))([-*+]|\d{1,9}[.)])(?=[ \t\r\n]|$)")
_BREAK_RE = re.compile(r"(?: {2,}|[ \t]*\\)?[ \t]*(?:\r\n|\n|\r)")


def decode_entities(text: str) -> str:
    """Replace HTML entity references in ``text`` with the characters they name."""
    if "&" not in text:
        return text
    return ENTITY_RE.sub(lambda m: html.unescape(m.group(0)), text)


class SourceLocator:
    """Forward-only cursor over a Markdown source.

    Parameters
    ----------
    source : str
        The complete source text, before any normalization by mistune
    cursor : int, default 0
        Offset where token matching starts (after a frontmatter block)

    """

    def __init__(self, source: str, cursor: int = 0):
        self.source = source
        self.cursor = cursor
        self._line_starts: Optional[list[int]] = None

    # ------------------------------------------------------------------
    # Span helpers
    # ------------------------------------------------------------------

    def location(self, start: int, end: int) -> SourceLocation:
        """Build a SourceLocation with line and column for ``[start, end)``."""
        if self._line_starts is None:
            self._line_starts = [0] + [i + 1 for i, ch in enumerate(self.source) if ch == "\n"]
        line_index = bisect.bisect_right(self._line_starts, start) - 1
        return SourceLocation(
            format="markdown",
            start=start,
            end=end,
            line=line_index + 1,
            column=start - self._line_starts[line_index] + 1,
        )

    @staticmethod
    def union(nodes: Iterable[Optional[Node]]) -> Optional[Span]:
        """Return the smallest span covering every anchored node."""
        start: Optional[int] = None
        end: Optional[int] = None
        for node in nodes:
            span = node.span if node is not None else None
            if span is None:
                continue
            start = span[0] if start is None else min(start, span[0])
            end = span[1] if end is None else max(end, span[1])
        if start is None or end is None:
            return None
        return start, end

    def line_bounds(self, span: Span) -> Span:
        """Widen ``span`` to the non-blank extent of the lines it touches."""
        src = self.source
        start = src.rfind("\n", 0, span[0]) + 1
        while start < span[0] and src[start] in " \t":
            start += 1
        end = span[1]
        while end < len(src) and src[end] not in "\r\n":
            end += 1
        while end > span[1] and src[end - 1] in " \t":
            end -= 1
        return start, end

    def advance(self, position: int) -> None:
        """Move the cursor forward to ``position`` (never backward)."""
        if position > self.cursor:
            self.cursor = min(position, len(self.source))

    def skip_blank(self) -> int:
        """Advance past spaces, tabs and line terminators; return the new cursor."""
        src = self.source
        while self.cursor < len(src) and src[self.cursor] in " \t\r\n":
            self.cursor += 1
        return self.cursor

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _match_at(self, value: str, pos: int) -> Optional[int]:
        """Match ``value`` against the source at ``pos``; return the end offset."""
        src = self.source
        n = len(src)
        i, j = pos, 0
        while j < len(value):
            if i >= n:
                return None
            ch = src[i]
            want = value[j]
            if ch == "\\" and i + 1 < n and src[i + 1] == want and want in _ESCAPABLE:
                i += 2
                j += 1
                continue
            if ch == "&":
                m = ENTITY_RE.match(src, i)
                if m:
                    decoded = html.unescape(m.group(0))
                    if decoded != m.group(0) and value.startswith(decoded, j):
                        i = m.end()
                        j += len(decoded)
                        continue
            if ch == want:
                i += 1
                j += 1
                continue
            if ch == "\r" and want == "\n":
                i += 2 if src.startswith("\r\n", i) else 1
                j += 1
                continue
            if j > 0 and value[j - 1] == "\n" and ch in " \t>":
                i += 1
                continue
            return None
        return i

    def find_text(self, value: str) -> Optional[Span]:
        """Find ``value`` at or after the cursor and advance past it.

        Parameters
        ----------
        value : str
            Decoded text as produced by the tokenizer

        Returns
        -------
        tuple of int or None
            Span of the matched source text

        """
        if not value:
            return self.cursor, self.cursor

        first = value[0]
        candidates = {first, "\\", "&"}
        if first == "\n":
            candidates.add("\r")
        pattern = re.compile("[" + re.escape("".join(sorted(candidates))) + "]")
        for m in pattern.finditer(self.source, self.cursor):
            end = self._match_at(value, m.start())
            if end is not None:
                self.cursor = end
                return m.start(), end

        logger.debug("Could not anchor text %r after offset %d", value[:40], self.cursor)
        return None

    def find_literal(self, literal: str) -> Optional[Span]:
        """Find an exact substring at or after the cursor and advance past it."""
        start = self.source.find(literal, self.cursor)
        if start < 0:
            return None
        self.cursor = start + len(literal)
        return start, self.cursor

    def take(self, literal: str) -> Optional[Span]:
        """Consume ``literal`` if the source continues with it at the cursor."""
        if self.source.startswith(literal, self.cursor):
            start = self.cursor
            self.cursor += len(literal)
            return start, self.cursor
        return None

    # ------------------------------------------------------------------
    # Block markers
    # ------------------------------------------------------------------

    def find_atx_marker(self, level: int) -> Optional[Span]:
        """Find the ``#`` run opening an ATX heading of ``level``."""
        m = re.compile(r"(?<!#)#{" + str(level) + r"}(?!#)(?=[ \t\r\n]|$)").search(self.source, self.cursor)
        if m is None:
            return None
        self.cursor = m.end()
        return m.span()

    def line_end(self) -> int:
        """Advance to the end of the current line (before its terminator)."""
        src = self.source
        end = self.cursor
        while end < len(src) and src[end] not in "\r\n":
            end += 1
        self.cursor = end
        while end > 0 and src[end - 1] in " \t":
            end -= 1
        return max(end, 0)

    def find_setext_underline(self) -> Optional[Span]:
        """Find the ``===`` or ``---`` line closing a setext heading."""
        m = _SETEXT_UNDERLINE_RE.match(self.source, self.cursor)
        if m is None:
            m = _SETEXT_UNDERLINE_RE.search(self.source, self.cursor)
        if m is None:
            return None
        self.cursor = m.end(1)
        return m.span(1)

    def find_thematic_break(self) -> Optional[Span]:
        """Find a ``---``/``***``/``___`` line."""
        m = _THEMATIC_BREAK_RE.search(self.source, self.cursor)
        if m is None:
            return None
        self.cursor = m.end(1)
        return m.span(1)

    def find_list_marker(self) -> Optional[Span]:
        """Find a bullet or ordinal list marker."""
        m = _LIST_MARKER_RE.search(self.source, self.cursor)
        if m is None:
            return None
        self.cursor = m.end(1)
        return m.span(1)

    def find_fenced_code(self, marker: str, raw: str) -> tuple[Optional[int], Optional[int], bool]:
        """Find a fenced code block opened by ``marker``.

        Parameters
        ----------
        marker : str
            The opening fence run (e.g. "```" or "~~~~")
        raw : str
            Code content as produced by the tokenizer

        Returns
        -------
        tuple
            ``(start, end, closed)``. ``start`` is None when the opening fence
            cannot be found. ``closed`` is False for an unterminated fence, in
            which case ``end`` is the best estimate of where the content stops.

        """
        src = self.source
        start = src.find(marker, self.cursor)
        if start < 0:
            return None, None, False

        line_break = src.find("\n", start)
        content_start = len(src) if line_break < 0 else line_break + 1

        closing = re.compile(r"(?m)^[ \t>]*(" + re.escape(marker[0]) + "{" + str(len(marker)) + r",})[ \t]*\r?$")
        m = closing.search(src, min(content_start + len(raw), len(src)))
        if m is None and raw:
            m = closing.search(src, content_start)
        if m is not None:
            self.cursor = m.end(1)
            return start, m.end(1), True

        end = min(len(src), content_start + len(raw))
        while end > start and src[end - 1] in "\r\n":
            end -= 1
        self.cursor = end
        return start, end, False

    def find_indented_code(self, raw: str) -> Optional[Span]:
        """Find an indented code block from its first and last content lines."""
        lines = [line for line in raw.split("\n") if line.strip()]
        if not lines:
            return None
        first = self.find_literal(lines[0].rstrip())
        if first is None:
            return None
        start = self.source.rfind("\n", 0, first[0]) + 1
        end = first[1]
        for line in lines[1:]:
            span = self.find_literal(line.rstrip())
            if span is None:
                break
            end = span[1]
        self.cursor = end
        return start, end

    def find_block_math(self, raw: str) -> tuple[Optional[int], Optional[int], bool]:
        """Find a ``$$ ... $$`` block; same return shape as :meth:`find_fenced_code`."""
        src = self.source
        start = src.find("$$", self.cursor)
        if start < 0:
            return None, None, False
        close = src.find("$$", min(start + 2 + len(raw), len(src)))
        if close < 0:
            close = src.find("$$", start + 2)
        if close < 0:
            end = min(len(src), start + 2 + len(raw))
            self.cursor = end
            return start, end, False
        self.cursor = close + 2
        return start, close + 2, True

    # ------------------------------------------------------------------
    # Inline delimiters
    # ------------------------------------------------------------------

    def find_code_span(self) -> Optional[Span]:
        """Find a backtick code span, delimiters included."""
        src = self.source
        start = src.find("`", self.cursor)
        if start < 0:
            return None
        run = start
        while run < len(src) and src[run] == "`":
            run += 1
        ticks = run - start
        m = re.compile(r"(?<!`)`{" + str(ticks) + r"}(?!`)").search(src, run)
        if m is None:
            return None
        self.cursor = m.end()
        return start, m.end()

    def find_inline_math(self, raw: str, display: bool = False) -> Optional[Span]:
        """Find ``$...$`` (or ``$$...$$`` when ``display``) around ``raw``."""
        src = self.source
        opener = "$$" if display else "$"
        start = src.find(opener, self.cursor)
        if start < 0:
            return None
        body = src.find(raw, start + len(opener)) if raw else start + len(opener)
        if body < 0:
            return None
        close = src.find(opener, body + len(raw))
        if close < 0:
            return None
        self.cursor = close + len(opener)
        return start, self.cursor

    def find_break(self) -> Optional[Span]:
        """Find the end-of-line sequence of a hard or soft line break."""
        m = _BREAK_RE.search(self.source, self.cursor)
        if m is None:
            return None
        self.cursor = m.end()
        return m.span()

    def open_link(self, is_image: bool) -> Optional[int]:
        """Consume the opening ``[``, ``![`` or ``<`` of a link or image."""
        save = self.cursor
        self.skip_blank()
        for opener in (("![",) if is_image else ("[", "<")):
            span = self.take(opener)
            if span is not None:
                return span[0]
        self.cursor = save
        return None

    def close_link(self) -> Optional[int]:
        """Consume the rest of a link after its text; return the end offset.

        Handles inline destinations (``](url "title")``), full, collapsed and
        shortcut references (``][ref]``, ``][]``, ``]``) and autolinks (``>``).
        """
        src = self.source
        pos = self.cursor
        if src.startswith(">", pos):
            self.cursor = pos + 1
            return self.cursor
        if not src.startswith("]", pos):
            return None
        pos += 1
        if src.startswith("(", pos):
            end = self._scan_destination(pos + 1)
            if end is None:
                return None
            self.cursor = end
            return end
        if src.startswith("[", pos):
            close = src.find("]", pos + 1)
            if close >= 0:
                self.cursor = close + 1
                return self.cursor
        self.cursor = pos
        return pos

    def _scan_destination(self, pos: int) -> Optional[int]:
        src = self.source
        depth = 0
        while pos < len(src):
            ch = src[pos]
            if ch == "\\":
                pos += 2
                continue
            if ch == "<":
                close = src.find(">", pos + 1)
                pos = close + 1 if close >= 0 else pos + 1
                continue
            if ch in "\"'" and src[pos - 1] in " \t\r\n":
                close = src.find(ch, pos + 1)
                pos = close + 1 if close >= 0 else pos + 1
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                if depth == 0:
                    return pos + 1
                depth -= 1
            pos += 1
        return None
