#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/renderers/base.py
"""Base classes for AST renderers.

This module defines the abstract base class that renderers inherit from, and
the inline-capture mixin shared by text renderers.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from cjkfmt.ast import Document
from cjkfmt.ast.nodes import Node
from cjkfmt.exceptions import InvalidOptionsError, OutputWriteError
from cjkfmt.options.base import BaseRendererOptions
from cjkfmt.utils.io_utils import write_content


class BaseRenderer(ABC):
    """Abstract base class for all AST renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]], encoding: str = "utf-8") -> None:
        """Render the AST and write it to ``output``.

        Parameters
        ----------
        doc : Document
            AST Document node to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination
        encoding : str, default "utf-8"
            Encoding used for paths and binary streams

        Raises
        ------
        RenderingError
            If rendering fails
        OutputWriteError
            If output cannot be written

        """
        pass

    def render_to_string(self, doc: Document) -> str:
        """Render the AST to a string.

        Raises
        ------
        NotImplementedError
            If the renderer does not support string output

        """
        raise NotImplementedError(f"{self.__class__.__name__} does not support rendering to a string.")

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
                component_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(
        text: str, output: Union[str, Path, IO[bytes], IO[str]], encoding: str = "utf-8"
    ) -> None:
        """Write text output to a file or IO stream.

        Raises
        ------
        OutputWriteError
            If the destination cannot be written or encoded to

        """
        output_path = str(output) if isinstance(output, (str, Path)) else None
        try:
            write_content(text, output, encoding=encoding)
        except (OSError, UnicodeEncodeError, LookupError, TypeError) as e:
            raise OutputWriteError(f"Failed to write output: {e}", output_path=output_path, original_error=e) from e


class InlineContentMixin:
    """Mixin providing inline content capture for text-based renderers.

    The implementing class must have an ``_output`` list that visitor methods
    append to.

    """

    _output: list[str]

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render a list of inline nodes to text.

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
