#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/__main__.py
"""Run the converter CLI as ``python -m mdtranspile md2html|html2md|extract``."""

import sys

from mdtranspile.cli import main

if __name__ == "__main__":
    sys.exit(main())
