#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/options/markdown.py
"""Configuration options for Markdown parsing and rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

from mdtranspile.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_STRONG_SYMBOL,
    DEFAULT_USE_HASH_HEADINGS,
    CodeFenceChar,
    EmphasisSymbol,
    StrongSymbol,
)
from mdtranspile.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for parsing Markdown into a document tree.

    Parameters
    ----------
    normalize_frontmatter : bool, default True
        Rewrite a Pandoc-style ``...`` frontmatter closer to ``---`` first.
    parse_frontmatter_metadata : bool, default True
        Load the frontmatter YAML into ``Document.metadata``.
    parse_tables : bool, default True
        Recognize GFM pipe tables.
    parse_strikethrough : bool, default True
        Recognize ``~~strikethrough~~``.
    parse_task_lists : bool, default True
        Recognize ``[ ]``/``[x]`` task list items.
    parse_math : bool, default True
        Recognize ``$inline$`` and ``$$display$$`` math.
    strict_fences : bool, default False
        Raise ParsingError for an unterminated code or math fence instead of
        letting it run to the end of its container.
    track_positions : bool, default True
        Attach source locations to nodes.

    """

    normalize_frontmatter: bool = field(
        default=True,
        metadata={"help": "Normalize Pandoc-style '...' frontmatter closers to '---'", "importance": "core"},
    )
    parse_frontmatter_metadata: bool = field(
        default=True,
        metadata={"help": "Load frontmatter YAML into document metadata", "importance": "core"},
    )
    parse_tables: bool = field(
        default=True,
        metadata={"help": "Parse GFM pipe tables", "importance": "core"},
    )
    parse_strikethrough: bool = field(
        default=True,
        metadata={"help": "Parse ~~strikethrough~~ spans", "importance": "advanced"},
    )
    parse_task_lists: bool = field(
        default=True,
        metadata={"help": "Parse task list checkboxes", "importance": "advanced"},
    )
    parse_math: bool = field(
        default=True,
        metadata={"help": "Parse $inline$ and $$display$$ math", "importance": "core"},
    )
    strict_fences: bool = field(
        default=False,
        metadata={"help": "Raise an error for unterminated code or math fences", "importance": "advanced"},
    )
    track_positions: bool = field(
        default=True,
        metadata={"help": "Attach source character offsets to nodes", "importance": "advanced"},
    )


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for rendering a document tree to Markdown.

    Parameters
    ----------
    emphasis_symbol : {"*", "_"}, default "*"
        Delimiter used for emphasis.
    strong_symbol : {"**", "__"}, default "**"
        Delimiter used for strong emphasis.
    bullet_symbols : str, default "-*+"
        Bullet characters, cycled by list nesting depth.
    code_fence_char : {"`", "~"}, default "`"
        Character used for code and math fences.
    code_fence_min : int, default 3
        Minimum fence length.
    use_hash_headings : bool, default True
        Use ``#`` headings; when False, levels 1 and 2 use setext underlines.
    escape_special : bool, default True
        Escape Markdown metacharacters in text.
    render_frontmatter : bool, default True
        Write the frontmatter block when the document has one.

    """

    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Symbol for emphasis", "choices": ["*", "_"], "importance": "core"},
    )
    strong_symbol: StrongSymbol = field(
        default=DEFAULT_STRONG_SYMBOL,
        metadata={"help": "Symbol for strong emphasis", "choices": ["**", "__"], "importance": "core"},
    )
    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Bullet characters cycled by nesting depth", "importance": "advanced"},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Character used for code fences", "choices": ["`", "~"], "importance": "advanced"},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int, "importance": "advanced"},
    )
    use_hash_headings: bool = field(
        default=DEFAULT_USE_HASH_HEADINGS,
        metadata={"help": "Use # headings instead of setext underlines", "importance": "core"},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape Markdown special characters in text", "importance": "advanced"},
    )
    render_frontmatter: bool = field(
        default=True,
        metadata={"help": "Write the frontmatter block", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If a symbol or length is outside its valid set.

        """
        super().__post_init__()

        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}")
        if self.strong_symbol not in ("**", "__"):
            raise ValueError(f"strong_symbol must be '**' or '__', got {self.strong_symbol!r}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}")
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
        if not self.bullet_symbols or any(ch not in "-*+" for ch in self.bullet_symbols):
            raise ValueError(
                f"bullet_symbols must be a non-empty string of '-', '*' or '+', got {self.bullet_symbols!r}"
            )
