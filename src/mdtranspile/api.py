"""The major exported API functions for Markdown and HTML conversion."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/mdtranspile/api.py
import logging
from typing import Optional, Sequence, Union

from mdtranspile.options.convert import HtmlToMarkdownOptions, MarkdownToHtmlOptions
from mdtranspile.options.html import HtmlParserOptions, HtmlRendererOptions
from mdtranspile.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from mdtranspile.transforms.pipeline import Hook, TranspilePipeline

logger = logging.getLogger(__name__)


async def markdown_to_html(
    markdown_source: Union[str, bytes],
    *,
    parser_options: Optional[MarkdownParserOptions] = None,
    converter_options: Optional[MarkdownToHtmlOptions] = None,
    renderer_options: Optional[HtmlRendererOptions] = None,
    hooks: Optional[Sequence[Hook]] = None,
    html_hooks: Optional[Sequence[Hook]] = None,
) -> str:
    """Convert Markdown text to HTML.

    The source goes through the frontmatter normalizer, the Markdown parser,
    the Markdown-to-HTML converter and the HTML renderer, in that order.

    Parameters
    ----------
    markdown_source : str or bytes
        Markdown text; bytes are decoded as UTF-8
    parser_options : MarkdownParserOptions, optional
        Markdown parsing options
    converter_options : MarkdownToHtmlOptions, optional
        Tree conversion options
    renderer_options : HtmlRendererOptions, optional
        HTML serialization options
    hooks : sequence of callables, optional
        Hooks run, in order, on the Markdown tree before conversion. A hook
        may be a coroutine function.
    html_hooks : sequence of callables, optional
        Hooks run, in order, on the HTML tree before rendering

    Returns
    -------
    str
        Rendered HTML

    Raises
    ------
    ValidationError
        If the input is not text
    ParsingError
        If the Markdown cannot be tokenized
    TransformError
        If a hook fails

    Examples
    --------
        >>> import asyncio
        >>> asyncio.run(markdown_to_html("Hello *world*"))
        '<p>Hello <em>world</em></p>\\n'

    """
    logger.debug("markdown_to_html: %d hook(s), %d html hook(s)", len(hooks or ()), len(html_hooks or ()))
    pipeline = TranspilePipeline.markdown_to_html(
        parser_options=parser_options,
        converter_options=converter_options,
        renderer_options=renderer_options,
        markdown_hooks=hooks,
        html_hooks=html_hooks,
    )
    return await pipeline.run(markdown_source)


async def html_to_markdown(
    html_source: Union[str, bytes],
    *,
    parser_options: Optional[HtmlParserOptions] = None,
    converter_options: Optional[HtmlToMarkdownOptions] = None,
    renderer_options: Optional[MarkdownRendererOptions] = None,
    hooks: Optional[Sequence[Hook]] = None,
) -> str:
    """Convert HTML text to Markdown.

    Parameters
    ----------
    html_source : str or bytes
        HTML fragment or document; bytes are decoded as UTF-8
    parser_options : HtmlParserOptions, optional
        HTML parsing options
    converter_options : HtmlToMarkdownOptions, optional
        Tree conversion options
    renderer_options : MarkdownRendererOptions, optional
        Markdown serialization options
    hooks : sequence of callables, optional
        Hooks run, in order, on the Markdown tree before rendering

    Returns
    -------
    str
        Rendered Markdown

    Raises
    ------
    ValidationError
        If the input is not text
    DependencyError
        If the configured HTML tree builder is not installed
    TransformError
        If a hook fails

    Examples
    --------
        >>> import asyncio
        >>> asyncio.run(html_to_markdown("<h1>Title</h1><p>Body</p>"))
        '# Title\\n\\nBody\\n'

    """
    pipeline = TranspilePipeline.html_to_markdown(
        parser_options=parser_options,
        converter_options=converter_options,
        renderer_options=renderer_options,
        markdown_hooks=hooks,
    )
    return await pipeline.run(html_source)
