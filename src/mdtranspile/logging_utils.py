#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/logging_utils.py
"""Logging setup for the mdtranspile command line.

Library modules only create ``logging.getLogger(__name__)`` loggers. Handlers
are attached here, by the CLI, and never on import.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that only add noise below WARNING
_QUIET_LOGGERS = ("asyncio", "bs4")


def resolve_log_level(log_level: int | str) -> int:
    """Turn a level name such as ``"info"`` into its numeric value.

    Unknown names fall back to ``logging.INFO``.
    """
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure root logging handlers for the command-line interface.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Also write log records to this file (appending).
    trace_mode : bool, default False
        Emit timestamps and logger names, and keep third-party debug output.

    Returns
    -------
    logging.Logger
        The configured root logger instance.

    """
    level = resolve_log_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(PLAIN_FORMAT)
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _add_handler(root_logger, logging.StreamHandler(sys.stderr), level, formatter)
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            _add_handler(root_logger, file_handler, level, formatter)
            root_logger.info("Logging to file: %s", log_file)

    return root_logger


def _add_handler(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
