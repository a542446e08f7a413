#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/transforms/pipeline.py
"""Pipeline orchestration for parsing, converting and rendering.

A :class:`TranspilePipeline` chains one parser, one cross-dialect converter
and one renderer, with hook points on both trees:

- ``markdown_hooks`` run on the Markdown tree
- ``html_hooks`` run on the HTML tree

For Markdown to HTML that means parse, Markdown hooks, convert, HTML hooks,
render. For HTML to Markdown the hook lists swap places. A hook receives a
tree and returns a tree, either directly or through an awaitable, which is
where asynchronous passes such as citation resolution plug in.

Examples
--------
    >>> async def resolve_citations(document):
    ...     return document
    >>> pipeline = TranspilePipeline.markdown_to_html(markdown_hooks=[resolve_citations])
    >>> html = pipeline.run_sync("# Title\\n\\nSee [@doe2020].")

"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Literal, Optional, Sequence, Union

from mdtranspile.converters.html2markdown import HtmlToMarkdownConverter
from mdtranspile.converters.markdown2html import MarkdownToHtmlConverter
from mdtranspile.exceptions import TransformError, TranspileError
from mdtranspile.options.convert import HtmlToMarkdownOptions, MarkdownToHtmlOptions
from mdtranspile.options.html import HtmlParserOptions, HtmlRendererOptions
from mdtranspile.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from mdtranspile.parsers.html import HtmlParser
from mdtranspile.parsers.markdown import MarkdownParser
from mdtranspile.renderers.html import HtmlRenderer
from mdtranspile.renderers.markdown import MarkdownRenderer
from mdtranspile.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

Hook = Callable[[Any], Union[Any, Awaitable[Any]]]
Direction = Literal["markdown-to-html", "html-to-markdown"]


def _hook_name(hook: Hook) -> str:
    return getattr(hook, "__qualname__", None) or getattr(hook, "__name__", None) or repr(hook)


class TranspilePipeline:
    """Reusable parse, convert and render pipeline with tree hooks.

    The pipeline holds only configured components and hook tuples; each
    :meth:`run` works on its own trees, so one pipeline can serve concurrent
    calls.

    Parameters
    ----------
    direction : {"markdown-to-html", "html-to-markdown"}
        Conversion direction
    parser : MarkdownParser or HtmlParser
        Parser for the source dialect
    converter : MarkdownToHtmlConverter or HtmlToMarkdownConverter
        Converter from the source tree to the target tree
    renderer : HtmlRenderer or MarkdownRenderer
        Renderer for the target dialect
    markdown_hooks : sequence of callables, optional
        Hooks run on the Markdown tree
    html_hooks : sequence of callables, optional
        Hooks run on the HTML tree

    """

    def __init__(
        self,
        direction: Direction,
        parser: Union[MarkdownParser, HtmlParser],
        converter: Union[MarkdownToHtmlConverter, HtmlToMarkdownConverter],
        renderer: Union[HtmlRenderer, MarkdownRenderer],
        markdown_hooks: Optional[Sequence[Hook]] = None,
        html_hooks: Optional[Sequence[Hook]] = None,
    ):
        """Initialize the pipeline from its components."""
        if direction not in ("markdown-to-html", "html-to-markdown"):
            raise ValueError(f"direction must be 'markdown-to-html' or 'html-to-markdown', got {direction!r}")
        self.direction: Direction = direction
        self.parser = parser
        self.converter = converter
        self.renderer = renderer
        self.markdown_hooks: tuple[Hook, ...] = tuple(markdown_hooks or ())
        self.html_hooks: tuple[Hook, ...] = tuple(html_hooks or ())

    @classmethod
    def markdown_to_html(
        cls,
        parser_options: MarkdownParserOptions | None = None,
        converter_options: MarkdownToHtmlOptions | None = None,
        renderer_options: HtmlRendererOptions | None = None,
        markdown_hooks: Optional[Sequence[Hook]] = None,
        html_hooks: Optional[Sequence[Hook]] = None,
    ) -> TranspilePipeline:
        """Build a Markdown to HTML pipeline from options."""
        return cls(
            "markdown-to-html",
            MarkdownParser(parser_options),
            MarkdownToHtmlConverter(converter_options),
            HtmlRenderer(renderer_options),
            markdown_hooks=markdown_hooks,
            html_hooks=html_hooks,
        )

    @classmethod
    def html_to_markdown(
        cls,
        parser_options: HtmlParserOptions | None = None,
        converter_options: HtmlToMarkdownOptions | None = None,
        renderer_options: MarkdownRendererOptions | None = None,
        markdown_hooks: Optional[Sequence[Hook]] = None,
        html_hooks: Optional[Sequence[Hook]] = None,
    ) -> TranspilePipeline:
        """Build an HTML to Markdown pipeline from options."""
        return cls(
            "html-to-markdown",
            HtmlParser(parser_options),
            HtmlToMarkdownConverter(converter_options),
            MarkdownRenderer(renderer_options),
            markdown_hooks=markdown_hooks,
            html_hooks=html_hooks,
        )

    async def _run_hooks(self, hooks: Sequence[Hook], tree: Any, stage: str) -> Any:
        """Run hooks strictly in sequence, awaiting awaitable results.

        Raises
        ------
        TransformError
            If a hook raises or returns None

        """
        for hook in hooks:
            name = _hook_name(hook)
            logger.debug("Running %s hook %s", stage, name)
            try:
                result = hook(tree)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                raise TransformError(f"{stage} hook {name} failed: {e}", transform_name=name, original_error=e) from e
            if result is None:
                raise TransformError(f"{stage} hook {name} returned None instead of a tree", transform_name=name)
            tree = result
        return tree

    async def run(self, source: Union[str, bytes]) -> str:
        """Convert ``source`` through the whole pipeline.

        Parameters
        ----------
        source : str or bytes
            Document in the source dialect

        Returns
        -------
        str
            Rendered document in the target dialect

        Raises
        ------
        TranspileError
            Any failure, as the most specific subclass available

        """
        if self.direction == "markdown-to-html":
            first_hooks, first_stage = self.markdown_hooks, "markdown"
            second_hooks, second_stage = self.html_hooks, "html"
        else:
            first_hooks, first_stage = self.html_hooks, "html"
            second_hooks, second_stage = self.markdown_hooks, "markdown"

        with debug_timer(logger, f"Pipeline ({self.direction})"):
            try:
                tree = self.parser.parse(source)
                tree = await self._run_hooks(first_hooks, tree, first_stage)
                converted = self.converter.convert(tree)
                converted = await self._run_hooks(second_hooks, converted, second_stage)
                return self.renderer.render_to_string(converted)
            except TranspileError:
                raise
            except Exception as e:
                logger.error("Pipeline (%s) failed: %s", self.direction, e)
                raise TransformError(
                    f"Pipeline {self.direction} failed: {e}", transform_name=self.direction, original_error=e
                ) from e

    def run_sync(self, source: Union[str, bytes]) -> str:
        """Run the pipeline from synchronous code.

        Drives :meth:`run` with :func:`asyncio.run`, so it must not be called
        from inside a running event loop; await :meth:`run` there instead.
        """
        return asyncio.run(self.run(source))
