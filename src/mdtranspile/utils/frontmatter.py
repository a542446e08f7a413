#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/utils/frontmatter.py
"""Frontmatter helpers for Markdown sources.

Markdown documents may start with a YAML metadata block fenced by ``---``
lines. Pandoc additionally allows the block to be closed with ``...``,
which the Markdown parser does not recognize, so sources are rewritten to
the ``---``/``---`` form before parsing.

Functions
---------
- detect_eol: Pick the line terminator used by a source
- normalize_frontmatter: Rewrite a Pandoc-style closing fence to ``---``
- split_frontmatter: Locate the canonical frontmatter block and its offsets
- load_frontmatter_metadata: Load the YAML mapping inside a block

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from mdtranspile.constants import DEFAULT_EOL, DEPS_FRONTMATTER, FRONTMATTER_FENCE, FRONTMATTER_PANDOC_CLOSER
from mdtranspile.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrontmatterSlice:
    """Location of a frontmatter block inside a Markdown source.

    Parameters
    ----------
    raw : str
        YAML text between the two fences, without the fence lines
    start : int
        Offset of the opening fence (always 0)
    end : int
        Offset just past the closing fence marker
    body_start : int
        Offset where the Markdown body begins, after the closing line terminator

    """

    raw: str
    start: int
    end: int
    body_start: int


def detect_eol(source: str) -> str:
    r"""Return the line terminator used by ``source``.

    ``"\r\n"`` wins over ``"\n\r"`` whenever both occur; a source with
    neither is treated as ``"\n"``.
    """
    if "\r\n" in source:
        return "\r\n"
    if "\n\r" in source:
        return "\n\r"
    return DEFAULT_EOL


def normalize_frontmatter(source: str) -> str:
    r"""Rewrite a Pandoc-style frontmatter closer (``...``) to ``---``.

    Parameters
    ----------
    source : str
        Markdown source

    Returns
    -------
    str
        The source with the first ``...`` closing line replaced by ``---``.
        The input is returned unchanged when it has no frontmatter, or when a
        ``---`` line closes the block before any ``...`` line.

    Examples
    --------
        >>> normalize_frontmatter("---\r\nkey: 1\r\n...\r\nbody")
        '---\r\nkey: 1\r\n---\r\nbody'

    """
    eol = detect_eol(source)
    if not source.startswith(FRONTMATTER_FENCE + eol):
        return source

    lines = source.split(eol)
    for index in range(1, len(lines)):
        if lines[index] == FRONTMATTER_FENCE:
            return source
        if lines[index] == FRONTMATTER_PANDOC_CLOSER:
            lines[index] = FRONTMATTER_FENCE
            logger.debug("Normalized Pandoc frontmatter closer on line %d", index + 1)
            return eol.join(lines)

    return source


def split_frontmatter(source: str) -> FrontmatterSlice | None:
    """Find a ``---``/``---`` frontmatter block at the start of ``source``.

    Only the canonical form is recognized; run :func:`normalize_frontmatter`
    first to accept Pandoc-style blocks as well.

    Parameters
    ----------
    source : str
        Markdown source

    Returns
    -------
    FrontmatterSlice or None
        Offsets of the block, or None when the source has no closed block

    """
    eol = detect_eol(source)
    opener = FRONTMATTER_FENCE + eol
    if not source.startswith(opener):
        return None

    offset = len(opener)
    body_lines: list[str] = []
    while offset <= len(source):
        line_end = source.find(eol, offset)
        line = source[offset:] if line_end < 0 else source[offset:line_end]
        if line == FRONTMATTER_FENCE:
            end = offset + len(FRONTMATTER_FENCE)
            body_start = end if line_end < 0 else line_end + len(eol)
            return FrontmatterSlice(raw=eol.join(body_lines), start=0, end=end, body_start=body_start)
        if line_end < 0:
            break
        body_lines.append(line)
        offset = line_end + len(eol)

    return None


@requires_dependencies("frontmatter", DEPS_FRONTMATTER)
def load_frontmatter_metadata(raw: str) -> dict[str, Any]:
    """Load the YAML mapping held by a frontmatter block.

    Malformed YAML is not an error: a warning is logged and an empty
    mapping is returned, so a broken header never blocks a conversion.

    Parameters
    ----------
    raw : str
        YAML text between the fences

    Returns
    -------
    dict
        The loaded mapping, or ``{}`` when it is empty, malformed or not a mapping

    """
    import yaml

    if not raw.strip():
        return {}

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed YAML frontmatter: %s", e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring frontmatter that is not a mapping (got %s)", type(data).__name__)
        return {}

    return {str(key): value for key, value in data.items()}
