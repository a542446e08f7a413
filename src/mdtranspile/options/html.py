#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/options/html.py
"""Configuration options for HTML parsing and rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from mdtranspile.constants import DEFAULT_HTML_PARSER, HtmlParserBackend
from mdtranspile.options.base import BaseParserOptions, BaseRendererOptions

_KNOWN_BUILDERS = ("html.parser", "lxml", "html5lib")


@dataclass(frozen=True)
class HtmlParserOptions(BaseParserOptions):
    """Configuration options for parsing HTML into an HTML tree.

    Parameters
    ----------
    html_parser : {"html.parser", "lxml", "html5lib"}, default "html.parser"
        BeautifulSoup tree builder. ``lxml`` and ``html5lib`` must be installed
        separately.

    """

    html_parser: HtmlParserBackend = field(
        default=DEFAULT_HTML_PARSER,
        metadata={"help": "BeautifulSoup tree builder", "choices": list(_KNOWN_BUILDERS), "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the builder name.

        Raises
        ------
        ValueError
            If ``html_parser`` names an unknown builder.

        """
        super().__post_init__()
        if self.html_parser not in _KNOWN_BUILDERS:
            raise ValueError(f"html_parser must be one of {_KNOWN_BUILDERS}, got {self.html_parser!r}")


@dataclass(frozen=True)
class HtmlRendererOptions(BaseRendererOptions):
    """Configuration options for rendering an HTML tree to text.

    Parameters
    ----------
    standalone : bool, default False
        Wrap a fragment in a minimal ``<!DOCTYPE html>`` document shell.
    title : str, optional
        Title for the standalone shell. Falls back to the ``document_title``
        metadata entry on the root.
    ensure_trailing_newline : bool, default True
        End the output with a newline.

    """

    standalone: bool = field(
        default=False,
        metadata={"help": "Generate a complete HTML document", "cli_name": "standalone", "importance": "core"},
    )
    title: Optional[str] = field(
        default=None,
        metadata={"help": "Title of the standalone document", "importance": "advanced"},
    )
    ensure_trailing_newline: bool = field(
        default=True,
        metadata={"help": "End output with a newline", "importance": "advanced"},
    )
