#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/utils/__init__.py
"""Utility helpers for mdtranspile."""

from mdtranspile.utils.decorators import debug_timer, requires_dependencies
from mdtranspile.utils.frontmatter import (
    FrontmatterSlice,
    detect_eol,
    load_frontmatter_metadata,
    normalize_frontmatter,
    split_frontmatter,
)

__all__ = [
    "FrontmatterSlice",
    "debug_timer",
    "detect_eol",
    "load_frontmatter_metadata",
    "normalize_frontmatter",
    "requires_dependencies",
    "split_frontmatter",
]
