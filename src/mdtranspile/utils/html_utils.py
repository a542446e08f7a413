#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/utils/html_utils.py
"""HTML escaping and class-list helpers shared by the HTML tree code."""

from __future__ import annotations

from html import escape as _html_escape

from mdtranspile.constants import CODE_LANGUAGE_PREFIXES


def escape_html_text(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` for use in element content."""
    return _html_escape(text, quote=False)


def escape_html_attribute(value: str) -> str:
    """Escape an attribute value for use inside double quotes."""
    return _html_escape(value)


def split_classes(value: str | None) -> list[str]:
    """Split a ``class`` attribute value into its tokens."""
    if not value:
        return []
    return value.split()


def language_from_classes(value: str | None) -> str | None:
    """Return the code language named by a ``language-*`` or ``lang-*`` class.

    Parameters
    ----------
    value : str or None
        Raw ``class`` attribute value

    Returns
    -------
    str or None
        The language token, or None when no class names one

    """
    for token in split_classes(value):
        for prefix in CODE_LANGUAGE_PREFIXES:
            if token.startswith(prefix) and len(token) > len(prefix):
                return token[len(prefix) :]
    return None
