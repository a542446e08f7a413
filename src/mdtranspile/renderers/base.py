#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/renderers/base.py
"""Base classes for tree renderers.

This module defines the abstract base class shared by the Markdown and HTML
renderers, and the mixin used by text renderers to capture inline output.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Union

from mdtranspile.ast.nodes import Node
from mdtranspile.exceptions import InvalidOptionsError
from mdtranspile.options.base import BaseRendererOptions


class BaseRenderer(ABC):
    """Abstract base class for renderers.

    A renderer serializes a tree to text. Subclasses implement
    :meth:`render_to_string`; writing to files and streams is shared.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    Examples
    --------
        >>> class UpperRenderer(BaseRenderer):
        ...     def render_to_string(self, tree):
        ...         return "RENDERED"

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, tree: Any) -> str:
        """Render a tree to a string.

        Parameters
        ----------
        tree : Any
            Root node of the tree to render

        Returns
        -------
        str
            Rendered text

        Raises
        ------
        RenderingError
            If rendering fails

        """
        pass

    def render(self, tree: Any, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render a tree and write it to a path or stream.

        Parameters
        ----------
        tree : Any
            Root node of the tree to render
        output : str, Path, IO[bytes] or IO[str]
            Destination file path or open file object

        """
        self.write_text_output(self.render_to_string(tree), output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write rendered text to a file path or a text or binary stream.

        Parameters
        ----------
        text : str
            Rendered text to write
        output : str, Path, IO[bytes] or IO[str]
            Destination. Binary streams receive UTF-8 bytes.

        Raises
        ------
        TypeError
            If output is not a path or a writable object

        Examples
        --------
            >>> from io import StringIO
            >>> buffer = StringIO()
            >>> BaseRenderer.write_text_output("# Hello\\n", buffer)
            >>> buffer.getvalue()
            '# Hello\\n'

        """
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
            return
        if not hasattr(output, "write"):
            raise TypeError(f"Unsupported output type: {type(output).__name__}")

        mode = getattr(output, "mode", "")
        if "b" in mode or hasattr(output, "getbuffer"):
            output.write(text.encode("utf-8"))  # type: ignore[arg-type]
        else:
            output.write(text)  # type: ignore[arg-type]


class InlineContentMixin:
    """Mixin providing inline content capture for text renderers.

    The implementing class must have an ``_output`` attribute (list[str]) and
    visitor methods that append to it.

    Examples
    --------
        >>> class MyRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
        ...     def visit_emphasis(self, node):
        ...         content = self._render_inline_content(node.content)
        ...         self._output.append(f"*{content}*")

    """

    _output: list[str]

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render a list of inline nodes to a string.

        The current output buffer is swapped out while the nodes render and
        restored afterwards.

        Parameters
        ----------
        content : list of Node
            Inline nodes to render

        Returns
        -------
        str
            Rendered inline content

        """
        saved_output = self._output
        self._output = []

        for node in content:
            node.accept(self)

        result = "".join(self._output)
        self._output = saved_output
        return result
