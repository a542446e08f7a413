#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/utils/decorators.py
"""Decorators and context managers shared by parsers, renderers and converters.

The two helpers here cover the cross-cutting concerns of the library:
checking that optional third-party packages are importable at the right
version, and timing pipeline stages when DEBUG logging is on.

"""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from mdtranspile.exceptions import DependencyError
from mdtranspile.utils.packages import check_version_requirement


def requires_dependencies(component_name: str, packages: List[Tuple[str, str, str]]) -> Callable:
    """Verify that packages are importable before running the wrapped method.

    Parameters
    ----------
    component_name : str
        Name shown in the error message (e.g., "markdown", "html").
    packages : list of tuple
        ``(install_name, import_name, version_spec)`` triples. ``version_spec``
        may be empty to accept any installed version.

    Returns
    -------
    Callable
        Decorator that raises before the method body runs.

    Raises
    ------
    DependencyError
        If a package cannot be imported or its installed version does not
        satisfy ``version_spec``. Every problem is collected before raising.

    Examples
    --------
        >>> @requires_dependencies("markdown", [("mistune", "mistune", ">=3.0.0")])
        ... def parse(self, source):
        ...     import mistune
        ...     return mistune.create_markdown(renderer=None)(source)

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            missing: list[tuple[str, str]] = []
            mismatched: list[tuple[str, str, str]] = []
            first_error: ImportError | None = None

            for install_name, import_name, version_spec in packages:
                try:
                    # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
                    importlib.import_module(import_name)
                except ImportError as e:
                    missing.append((install_name, version_spec))
                    if first_error is None:
                        first_error = e
                    continue

                if version_spec:
                    ok, installed = check_version_requirement(install_name, version_spec)
                    if not ok:
                        mismatched.append((install_name, version_spec, installed or "unknown"))

            if missing or mismatched:
                raise DependencyError(
                    converter_name=component_name,
                    missing_packages=missing,
                    version_mismatches=mismatched,
                    original_import_error=first_error,
                ) from first_error

            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log the wall time of a block at DEBUG level.

    Nothing is measured when the logger is not enabled for DEBUG.

    Parameters
    ----------
    logger : logging.Logger
        Logger that receives the timing line
    operation : str
        Label for the timed block (e.g., "Parsing (markdown)")

    Examples
    --------
        >>> with debug_timer(logger, "Rendering (html)"):
        ...     html = renderer.render_to_string(root)

    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start_time = time.perf_counter()
    yield
    logger.debug("%s completed in %.4fs", operation, time.perf_counter() - start_time)
