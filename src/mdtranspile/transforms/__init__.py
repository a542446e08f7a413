#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/transforms/__init__.py
"""Conversion pipelines with asynchronous tree hooks."""

from mdtranspile.transforms.pipeline import Hook, TranspilePipeline

__all__ = ["Hook", "TranspilePipeline"]
