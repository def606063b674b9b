#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/api.py
"""Public formatting API.

``format_markdown`` formats a markdown string; ``format_file`` formats a file
on disk and can rewrite it in place. Both run the same pipeline: parse with
mistune, normalize spacing on the AST, render back to markdown.

"""

from __future__ import annotations

import builtins
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from cjkfmt.ast import Document
from cjkfmt.exceptions import FileAccessError, FileNotFoundError, InvalidOptionsError, ParsingError
from cjkfmt.options.format import FormatOptions
from cjkfmt.parsers.markdown import MarkdownParser
from cjkfmt.renderers.markdown import MarkdownRenderer
from cjkfmt.transforms.spacing import SpacingTransform
from cjkfmt.utils.decorators import debug_timer
from cjkfmt.utils.encoding import decode_bytes

logger = logging.getLogger(__name__)


@dataclass
class FormatResult:
    """Outcome of formatting one file.

    Parameters
    ----------
    original : str
        Decoded file content before formatting
    formatted : str
        Content after formatting
    inserted_spaces : int
        Number of standalone space nodes spliced in at markup boundaries
    encoding : str, default "utf-8"
        Encoding the file was read with (and written back with)
    path : Path or None, default None
        File the result belongs to

    """

    original: str
    formatted: str
    inserted_spaces: int
    encoding: str = "utf-8"
    path: Optional[Path] = None

    @property
    def changed(self) -> bool:
        """Whether formatting changed the content."""
        return self.original != self.formatted


def _resolve_options(options: FormatOptions | None) -> FormatOptions:
    if options is None:
        return FormatOptions()
    if not isinstance(options, FormatOptions):
        raise InvalidOptionsError("format", FormatOptions, type(options))
    return options


def _format_text(text: str, options: FormatOptions) -> tuple[str, int]:
    with debug_timer(logger, "Parsing (markdown)"):
        doc = MarkdownParser(options.parser).parse(text)

    transform = SpacingTransform(options.spacing)
    with debug_timer(logger, "Spacing transform"):
        transform.transform(doc)
    logger.debug(f"Inserted {transform.inserted_spaces} boundary space(s)")

    with debug_timer(logger, "Rendering (markdown)"):
        formatted = MarkdownRenderer(options.renderer).render_to_string(doc)
    return formatted, transform.inserted_spaces


def format_ast(document: Document, options: FormatOptions | None = None) -> Document:
    """Normalize spacing of an already parsed document in place.

    Parameters
    ----------
    document : Document
        Parsed document
    options : FormatOptions or None, default None
        Only the ``spacing`` options are used

    Returns
    -------
    Document
        The same document, mutated

    """
    options = _resolve_options(options)
    SpacingTransform(options.spacing).transform(document)
    return document


def format_markdown(text: str, options: FormatOptions | None = None) -> str:
    """Format a markdown string.

    Parameters
    ----------
    text : str
        Markdown source
    options : FormatOptions or None, default None
        Parser, spacing and renderer options

    Returns
    -------
    str
        Formatted markdown, ending in a newline unless empty

    Raises
    ------
    ParsingError
        If the markdown cannot be parsed
    TransformError
        If the document tree is malformed or the spacing rules misbehave
    RenderingError
        If the document cannot be rendered

    Examples
    --------
    >>> format_markdown("在LaTeX中使用**粗体**文字")
    '在 LaTeX 中使用**粗体**文字\\n'

    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, got {type(text).__name__}")
    formatted, _ = _format_text(text, _resolve_options(options))
    return formatted


def format_file(
    path: Union[str, Path], options: FormatOptions | None = None, in_place: bool = False
) -> FormatResult:
    """Format a markdown file.

    The file is decoded as UTF-8 when possible, otherwise with the encoding
    chardet detects. Line endings follow the file: CRLF files stay CRLF.

    Parameters
    ----------
    path : str or Path
        File to format
    options : FormatOptions or None, default None
        Parser, spacing and renderer options
    in_place : bool, default False
        Rewrite the file (in its original encoding) when the content changes

    Returns
    -------
    FormatResult
        Original and formatted content

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    FileAccessError
        If the file cannot be read
    ParsingError
        If the file cannot be decoded or parsed
    OutputWriteError
        If the file cannot be written back

    """
    options = _resolve_options(options)
    file_path = Path(path)

    try:
        data = file_path.read_bytes()
    except builtins.FileNotFoundError as e:
        raise FileNotFoundError(str(file_path), original_error=e) from e
    except OSError as e:
        raise FileAccessError(str(file_path), original_error=e) from e

    try:
        original, encoding = decode_bytes(data)
    except ValueError as e:
        raise ParsingError(f"Cannot decode {file_path}: {e}", parsing_stage="decoding", original_error=e) from e
    logger.debug(f"Read {file_path} as {encoding}")

    formatted, inserted = _format_text(original, options)
    if "\r\n" in original:
        formatted = formatted.replace("\n", "\r\n")

    result = FormatResult(
        original=original, formatted=formatted, inserted_spaces=inserted, encoding=encoding, path=file_path
    )

    if in_place and result.changed:
        MarkdownRenderer.write_text_output(formatted, file_path, encoding=encoding)
        logger.info(f"Reformatted {file_path}")

    return result
