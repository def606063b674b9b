"""cjkfmt - spacing formatter for Markdown that mixes CJK and Latin text.

cjkfmt parses a Markdown document into an AST, normalizes the whitespace
between CJK characters and Latin letters, digits, inline code and math, and
writes the document back as Markdown. Spacing is decided across markup
boundaries: a bold English word next to Chinese text gets its space outside
the ``**`` markers, never inside them.

Examples
--------
Format a string:

    >>> from cjkfmt import format_markdown
    >>> format_markdown("使用`pip`安装")
    '使用 `pip` 安装\\n'

Format a file in place:

    >>> from cjkfmt import format_file
    >>> result = format_file("README.md", in_place=True)  # doctest: +SKIP
    >>> result.changed  # doctest: +SKIP
    True

Work on the AST directly:

    >>> from cjkfmt.parsers import markdown_to_ast
    >>> from cjkfmt.transforms import format_document
    >>> doc = format_document(markdown_to_ast("中文English"))

See Also
--------
cjkfmt.spacing : character-level spacing rules
cjkfmt.transforms : the spacing transform
cjkfmt.ast : AST node definitions and utilities

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "cjkfmt requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from cjkfmt.api import FormatResult, format_ast, format_file, format_markdown  # noqa: E402
from cjkfmt.exceptions import CjkFmtError  # noqa: E402
from cjkfmt.options import (  # noqa: E402
    FormatOptions,
    MarkdownParserOptions,
    MarkdownRendererOptions,
    SpacingOptions,
)
from cjkfmt.transforms import SpacingTransform, format_document  # noqa: E402

__all__ = [
    "__version__",
    "format_markdown",
    "format_file",
    "format_ast",
    "format_document",
    "FormatResult",
    "FormatOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "SpacingOptions",
    "SpacingTransform",
    "CjkFmtError",
]
