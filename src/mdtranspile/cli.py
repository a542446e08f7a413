"""Command-line interface for the mdtranspile conversion library.

Three subcommands cover the library's entry points:

- ``md2html`` converts Markdown to HTML
- ``html2md`` converts HTML to Markdown
- ``extract`` lists the prose text fragments of a Markdown document

Input is read from a file argument, or from standard input when the argument
is omitted or ``-``. Output goes to ``-o/--out`` or standard output.

Exit codes
----------
0
    Success
1
    Conversion failure (any :class:`~mdtranspile.exceptions.TranspileError`)
2
    Usage error (reported by argparse)
3
    Input or output file could not be read or written

Examples
--------
Convert a file::

    $ mdtranspile md2html README.md -o README.html --standalone

Convert from a pipe::

    $ curl -s https://example.com | mdtranspile html2md

Show fragments as JSON::

    $ mdtranspile extract notes.md --json

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/mdtranspile/cli.py
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from mdtranspile import __version__
from mdtranspile.api import html_to_markdown, markdown_to_html
from mdtranspile.ast.extraction import TextFragment, extract_text
from mdtranspile.constants import DEPS_RICH
from mdtranspile.exceptions import TranspileError
from mdtranspile.logging_utils import configure_logging, resolve_log_level
from mdtranspile.options.convert import MarkdownToHtmlOptions
from mdtranspile.options.html import HtmlRendererOptions
from mdtranspile.options.markdown import MarkdownRendererOptions
from mdtranspile.renderers.base import BaseRenderer
from mdtranspile.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_FILE_ERROR = 3


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser; usage errors exit with status 2

    """
    parser = argparse.ArgumentParser(
        prog="mdtranspile",
        description="Convert between Markdown and HTML, or extract text with source positions.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level for diagnostics (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Debug logging with timestamps and logger names",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    md2html = subparsers.add_parser("md2html", help="Convert Markdown to HTML")
    md2html.add_argument("input", nargs="?", default=None, help="Markdown file (default: stdin)")
    md2html.add_argument("-o", "--out", help="Output file (default: stdout)")
    md2html.add_argument("--standalone", action="store_true", help="Wrap the fragment in a full HTML document")
    md2html.add_argument("--title", help="Document title for --standalone output")
    md2html.add_argument(
        "--keep-frontmatter",
        action="store_true",
        help="Keep YAML frontmatter as an HTML comment",
    )
    md2html.add_argument(
        "--no-raw-html",
        action="store_true",
        help="Escape raw HTML from the Markdown source instead of passing it through",
    )

    html2md = subparsers.add_parser("html2md", help="Convert HTML to Markdown")
    html2md.add_argument("input", nargs="?", default=None, help="HTML file (default: stdin)")
    html2md.add_argument("-o", "--out", help="Output file (default: stdout)")
    html2md.add_argument(
        "--emphasis-symbol",
        choices=["*", "_"],
        default="*",
        help="Delimiter for emphasis (default: *)",
    )
    html2md.add_argument(
        "--setext-headings",
        action="store_true",
        help="Use underlined headings for levels 1 and 2",
    )

    extract = subparsers.add_parser("extract", help="List the text fragments of a Markdown document")
    extract.add_argument("input", nargs="?", default=None, help="Markdown file (default: stdin)")
    output_group = extract.add_mutually_exclusive_group()
    output_group.add_argument("--json", action="store_true", help="Print fragments as a JSON array")
    output_group.add_argument("--rich", action="store_true", help="Print fragments as a table (requires rich)")

    return parser


def _read_input(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write_output(text: str, out: Optional[str]) -> None:
    if out:
        BaseRenderer.write_text_output(text, out)
        logger.info("Wrote %s", out)
    else:
        sys.stdout.write(text)


def _format_span(fragment: TextFragment) -> str:
    if fragment.span is None:
        return "-"
    return f"{fragment.span[0]}-{fragment.span[1]}"


def _fragments_to_json(fragments: list[TextFragment]) -> str:
    payload = [
        {"value": fragment.value, "span": list(fragment.span) if fragment.span is not None else None}
        for fragment in fragments
    ]
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


@requires_dependencies("rich-output", DEPS_RICH)
def _print_rich_fragments(fragments: list[TextFragment]) -> None:
    """Print fragments as a rich table on stdout."""
    from rich.console import Console
    from rich.table import Table

    table = Table(title=f"{len(fragments)} text fragment(s)")
    table.add_column("Span", style="cyan", no_wrap=True)
    table.add_column("Text")
    for fragment in fragments:
        table.add_row(_format_span(fragment), repr(fragment.value))
    Console(file=sys.stdout).print(table)


def _run_md2html(args: argparse.Namespace) -> int:
    source = _read_input(args.input)
    html = asyncio.run(
        markdown_to_html(
            source,
            converter_options=MarkdownToHtmlOptions(
                keep_frontmatter=args.keep_frontmatter,
                allow_raw_html=not args.no_raw_html,
            ),
            renderer_options=HtmlRendererOptions(standalone=args.standalone, title=args.title),
        )
    )
    _write_output(html, args.out)
    return EXIT_SUCCESS


def _run_html2md(args: argparse.Namespace) -> int:
    source = _read_input(args.input)
    markdown = asyncio.run(
        html_to_markdown(
            source,
            renderer_options=MarkdownRendererOptions(
                emphasis_symbol=args.emphasis_symbol,
                use_hash_headings=not args.setext_headings,
            ),
        )
    )
    _write_output(markdown, args.out)
    return EXIT_SUCCESS


def _run_extract(args: argparse.Namespace) -> int:
    fragments = extract_text(_read_input(args.input))
    if args.json:
        sys.stdout.write(_fragments_to_json(fragments))
    elif args.rich:
        _print_rich_fragments(fragments)
    else:
        for fragment in fragments:
            sys.stdout.write(f"{_format_span(fragment)}\t{fragment.value!r}\n")
    return EXIT_SUCCESS


_COMMANDS = {
    "md2html": _run_md2html,
    "html2md": _run_html2md,
    "extract": _run_extract,
}


def main(args: list[str] | None = None) -> int:
    """Execute the command-line interface.

    Parameters
    ----------
    args : list of str, optional
        Arguments to parse instead of ``sys.argv[1:]``

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    log_level = logging.DEBUG if parsed_args.trace else resolve_log_level(parsed_args.log_level)
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        return _COMMANDS[parsed_args.command](parsed_args)
    except TranspileError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR


if __name__ == "__main__":
    sys.exit(main())
