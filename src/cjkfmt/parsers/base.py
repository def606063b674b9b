#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/parsers/base.py
"""Base classes for document parsers.

A parser turns source text into the cjkfmt AST that the spacing transform
operates on.

"""

from __future__ import annotations

import builtins
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from cjkfmt.ast import Document
from cjkfmt.exceptions import FileAccessError, FileNotFoundError, InvalidOptionsError, ParsingError, ValidationError
from cjkfmt.options.base import BaseParserOptions
from cjkfmt.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection


ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]


class BaseParser(ABC):
    """Abstract base class for all document parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    Notes
    -----
    The parse() method handles all supported input types:
    - str: Document source text
    - Path: File path to read
    - IO[bytes] or IO[str]: File-like object
    - bytes: Raw document bytes

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
                component_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Document:
        """Parse the input document into an AST.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            The input document to parse

        Returns
        -------
        Document
            AST Document node representing the parsed document structure

        Raises
        ------
        ParsingError
            If parsing fails
        DependencyError
            If required dependencies are not installed
        ValidationError
            If input data has an unsupported type

        """
        raise NotImplementedError

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load text from the supported input types.

        Strings are always treated as document source, never as paths.

        """
        if isinstance(input_data, str):
            return input_data

        try:
            if isinstance(input_data, bytes):
                return read_text_with_encoding_detection(input_data)
            if isinstance(input_data, Path):
                try:
                    data = input_data.read_bytes()
                except builtins.FileNotFoundError as e:
                    raise FileNotFoundError(str(input_data), original_error=e) from e
                except OSError as e:
                    raise FileAccessError(str(input_data), original_error=e) from e
                return read_text_with_encoding_detection(data)
            if hasattr(input_data, "read"):
                return normalize_stream_to_text(input_data)
        except (ValueError, TypeError) as e:
            raise ParsingError(f"Could not read input as text: {e}", parsing_stage="decoding", original_error=e) from e

        raise ValidationError(
            f"Unsupported input type: {type(input_data).__name__}",
            parameter_name="input_data",
            parameter_value=input_data,
        )


