#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdtranspile/parsers/base.py
"""Base class for the Markdown and HTML parsers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Union

from mdtranspile.exceptions import InvalidOptionsError, ValidationError
from mdtranspile.options.base import BaseParserOptions

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Abstract base class for parsers.

    A parser turns source text into a tree. Instances hold only their frozen
    options, so one parser can be shared across threads and coroutines.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def _coerce_text(input_data: Union[str, bytes], parser_name: str) -> str:
        """Return ``input_data`` as text, decoding bytes as UTF-8.

        Raises
        ------
        ValidationError
            If the input is neither str nor bytes, or the bytes are not UTF-8

        """
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, (bytes, bytearray)):
            try:
                return bytes(input_data).decode("utf-8")
            except UnicodeDecodeError as e:
                raise ValidationError(
                    f"{parser_name} input is not valid UTF-8: {e}",
                    parameter_name="input_data",
                    original_error=e,
                ) from e
        raise ValidationError(
            f"{parser_name} expects str or bytes input, got {type(input_data).__name__}",
            parameter_name="input_data",
            parameter_value=input_data,
        )

    @abstractmethod
    def parse(self, input_data: Union[str, bytes]) -> Any:
        """Parse the input text into a tree.

        Parameters
        ----------
        input_data : str or bytes
            Source text; bytes are decoded as UTF-8

        Returns
        -------
        Any
            Root node of the parsed tree

        """
        pass
