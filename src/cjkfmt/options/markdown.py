#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing and rendering."""
# src/cjkfmt/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field

from cjkfmt.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_LIST_INDENT_WIDTH,
    DEFAULT_PARSE_FOOTNOTES,
    DEFAULT_PARSE_FRONTMATTER,
    DEFAULT_PARSE_MATH,
    DEFAULT_PARSE_STRIKETHROUGH,
    DEFAULT_PARSE_TABLES,
    DEFAULT_PARSE_TASK_LISTS,
    CodeFenceChar,
    EmphasisSymbol,
)
from cjkfmt.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-AST parsing.

    Parameters
    ----------
    parse_tables : bool, default True
        Whether to parse table syntax (GFM pipe tables).
    parse_footnotes : bool, default True
        Whether to parse footnote references and definitions.
    parse_math : bool, default True
        Whether to parse inline ($...$) and block ($$...$$) math.
    parse_task_lists : bool, default True
        Whether to parse task list checkboxes (- [ ] and - [x]).
    parse_strikethrough : bool, default True
        Whether to parse strikethrough syntax (~~text~~).
    parse_frontmatter : bool, default True
        Whether to split off YAML frontmatter at the document start.

    """

    parse_tables: bool = field(
        default=DEFAULT_PARSE_TABLES,
        metadata={"help": "Parse table syntax (GFM pipe tables)", "cli_name": "no-parse-tables"},
    )
    parse_footnotes: bool = field(
        default=DEFAULT_PARSE_FOOTNOTES,
        metadata={"help": "Parse footnote references and definitions", "cli_name": "no-parse-footnotes"},
    )
    parse_math: bool = field(
        default=DEFAULT_PARSE_MATH,
        metadata={"help": "Parse inline and block math ($...$ and $$...$$)", "cli_name": "no-parse-math"},
    )
    parse_task_lists: bool = field(
        default=DEFAULT_PARSE_TASK_LISTS,
        metadata={"help": "Parse task list checkboxes (- [ ] and - [x])", "cli_name": "no-parse-task-lists"},
    )
    parse_strikethrough: bool = field(
        default=DEFAULT_PARSE_STRIKETHROUGH,
        metadata={"help": "Parse strikethrough syntax (~~text~~)", "cli_name": "no-parse-strikethrough"},
    )
    parse_frontmatter: bool = field(
        default=DEFAULT_PARSE_FRONTMATTER,
        metadata={"help": "Parse YAML frontmatter at document start", "cli_name": "no-parse-frontmatter"},
    )


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for AST-to-Markdown rendering.

    Parameters
    ----------
    escape_special : bool, default True
        Escape characters that would otherwise be read as markup.
    emphasis_symbol : {"*", "_"}, default "*"
        Symbol tried first for emphasis delimiters; the other one is used where
        it cannot open or close.
    bullet_symbols : str, default "-"
        Characters cycled through for nested bullet lists.
    list_indent_width : int, default 2
        Minimum indentation of list item continuation lines.
    code_fence_char : {"`", "~"}, default "`"
        Character used for code fences.
    code_fence_min : int, default 3
        Minimum code fence length; longer fences are used when the code itself
        contains a run of fence characters.
    metadata_frontmatter : bool, default True
        Write the document frontmatter back at the top of the output.

    """

    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={
            "help": "Escape special Markdown characters (e.g. asterisks) in text content",
            "cli_name": "no-escape-special",
        },
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,  # type: ignore[arg-type]
        metadata={"help": "Symbol to use for emphasis/italic formatting", "choices": ["*", "_"]},
    )
    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Characters to cycle through for nested bullet lists"},
    )
    list_indent_width: int = field(
        default=DEFAULT_LIST_INDENT_WIDTH,
        metadata={"help": "Number of spaces to use for each level of list indentation", "type": int},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,  # type: ignore[arg-type]
        metadata={"help": "Character to use for code fences (backtick or tilde)", "choices": ["`", "~"]},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum length for code fences (typically 3)", "type": int},
    )
    metadata_frontmatter: bool = field(
        default=True,
        metadata={"help": "Write document frontmatter back to the output", "cli_name": "no-metadata-frontmatter"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and symbol choices.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}")
        if not self.bullet_symbols or any(symbol not in "-*+" for symbol in self.bullet_symbols):
            raise ValueError(f"bullet_symbols must be made of '-', '*' or '+', got {self.bullet_symbols!r}")
        if self.list_indent_width < 1:
            raise ValueError(f"list_indent_width must be positive, got {self.list_indent_width}")
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
