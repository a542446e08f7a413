#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the mdtranspile library.

This module centralizes the hardcoded values and default configuration
constants used across the library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Markdown Defaults - parsing and serialization settings
3. HTML Defaults - element classes and serialization settings
4. Dependency Specifications - for the ``requires_dependencies`` decorator
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

EmphasisSymbol = Literal["*", "_"]
StrongSymbol = Literal["**", "__"]
CodeFenceChar = Literal["`", "~"]
HtmlParserBackend = Literal["html.parser", "lxml", "html5lib"]
Alignment = Literal["left", "center", "right"]
TaskStatus = Literal["checked", "unchecked"]

# =============================================================================
# Markdown Defaults
# =============================================================================

FRONTMATTER_FENCE = "---"
FRONTMATTER_PANDOC_CLOSER = "..."
DEFAULT_EOL = "\n"

DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_STRONG_SYMBOL: StrongSymbol = "**"
DEFAULT_BULLET_SYMBOLS = "-*+"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3
DEFAULT_USE_HASH_HEADINGS = True
DEFAULT_ESCAPE_SPECIAL = True

# mistune plugin names, keyed by the parser option that enables them
MISTUNE_PLUGINS = {
    "parse_strikethrough": "strikethrough",
    "parse_tables": "table",
    "parse_task_lists": "task_lists",
    "parse_math": "math",
}

# =============================================================================
# HTML Defaults
# =============================================================================

DEFAULT_HTML_PARSER: HtmlParserBackend = "html.parser"

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

MATH_CLASS = "math"
MATH_DISPLAY_CLASS = "math-display"
MATH_INLINE_CLASS = "math-inline"
CODE_LANGUAGE_PREFIXES = ("language-", "lang-")
FRONTMATTER_COMMENT_PREFIX = "frontmatter\n"

# =============================================================================
# Dependency Specifications for @requires_dependencies decorator
# =============================================================================
# Each spec is a list of tuples: (pip_package, import_name, version_constraint)

DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]
DEPS_HTML = [("beautifulsoup4", "bs4", ">=4.12.0")]
DEPS_FRONTMATTER = [("PyYAML", "yaml", ">=5.1")]
DEPS_RICH = [("rich", "rich", "")]
