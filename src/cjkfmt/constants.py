#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/constants.py
"""Constants shared across cjkfmt.

Character tables used by the spacing rules, the token sentinel, default option
values and third-party dependency declarations live here so that every module
agrees on them.

"""

from __future__ import annotations

import re
from typing import Final, Literal

# =============================================================================
# Spacing rule tables
# =============================================================================

TOKEN_SENTINEL: Final[str] = "A"
"""Stand-in character for a math or code token whose content is not inspected."""

INLINE_WHITESPACE: Final[str] = " \t"
"""Whitespace that boundary resolution is allowed to trim or insert."""

CJK_RANGES: Final[tuple[tuple[int, int], ...]] = (
    (0x2E80, 0x2EFF),  # CJK Radicals Supplement
    (0x2F00, 0x2FDF),  # Kangxi Radicals
    (0x3040, 0x309F),  # Hiragana
    (0x30A0, 0x30FF),  # Katakana
    (0x3100, 0x312F),  # Bopomofo
    (0x3130, 0x318F),  # Hangul Compatibility Jamo
    (0x31A0, 0x31BF),  # Bopomofo Extended
    (0x31C0, 0x31EF),  # CJK Strokes
    (0x31F0, 0x31FF),  # Katakana Phonetic Extensions
    (0x3200, 0x32FF),  # Enclosed CJK Letters and Months
    (0x3300, 0x33FF),  # CJK Compatibility
    (0x3400, 0x4DBF),  # CJK Unified Ideographs Extension A
    (0x4E00, 0x9FFF),  # CJK Unified Ideographs
    (0xAC00, 0xD7AF),  # Hangul Syllables
    (0xF900, 0xFAFF),  # CJK Compatibility Ideographs
    (0x20000, 0x2FA1F),  # Extensions B-F and Compatibility Supplement
)

WIDE_PUNCTUATION_RANGES: Final[tuple[tuple[int, int], ...]] = (
    (0x3000, 0x303F),  # CJK Symbols and Punctuation
    (0xFE30, 0xFE4F),  # CJK Compatibility Forms
    (0xFF00, 0xFFEF),  # Halfwidth and Fullwidth Forms
)

LATIN_LETTER_RANGES: Final[tuple[tuple[int, int], ...]] = (
    (0x00C0, 0x00D6),
    (0x00D8, 0x00F6),
    (0x00F8, 0x024F),  # Latin-1 letters, Latin Extended-A and B
)

LATIN_SYMBOLS: Final[frozenset[str]] = frozenset("@#$%^&*-+=|/\\~_")
OPEN_BRACKETS: Final[frozenset[str]] = frozenset("([{")
CLOSE_BRACKETS: Final[frozenset[str]] = frozenset(")]}")
SENTENCE_PUNCTUATION: Final[frozenset[str]] = frozenset(".,;:!?")

CharClass = Literal["cjk", "wide", "latin", "open", "close", "punct", "space", "other"]

# A visible character, an optional run of inline whitespace, and a lookahead
# for the next visible character. Newlines end a run.
CHARACTER_PAIR_PATTERN: Final[re.Pattern[str]] = re.compile(r"([^ \t\r\n])([ \t]*)(?=([^ \t\r\n]))")
MATH_WHITESPACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"[ \t]+")

# =============================================================================
# Markdown parsing and rendering defaults
# =============================================================================

DEFAULT_PARSE_TABLES: Final[bool] = True
DEFAULT_PARSE_STRIKETHROUGH: Final[bool] = True
DEFAULT_PARSE_FOOTNOTES: Final[bool] = True
DEFAULT_PARSE_TASK_LISTS: Final[bool] = True
DEFAULT_PARSE_MATH: Final[bool] = True
DEFAULT_PARSE_FRONTMATTER: Final[bool] = True

EmphasisSymbol = Literal["*", "_"]
CodeFenceChar = Literal["`", "~"]

DEFAULT_EMPHASIS_SYMBOL: Final[EmphasisSymbol] = "*"
DEFAULT_BULLET_SYMBOLS: Final[str] = "-"
DEFAULT_CODE_FENCE_CHAR: Final[CodeFenceChar] = "`"
DEFAULT_CODE_FENCE_MIN: Final[int] = 3
DEFAULT_LIST_INDENT_WIDTH: Final[int] = 2
DEFAULT_ESCAPE_SPECIAL: Final[bool] = True

FRONTMATTER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\A---[ \t]*\r?\n(.*?\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

# =============================================================================
# Spacing defaults
# =============================================================================

DEFAULT_NORMALIZE_TEXT: Final[bool] = True
DEFAULT_NORMALIZE_MATH: Final[bool] = True

# =============================================================================
# Configuration discovery
# =============================================================================

CONFIG_FILENAMES: Final[tuple[str, ...]] = (".cjkfmt.toml", ".cjkfmt.yaml", ".cjkfmt.yml", ".cjkfmt.json")
PYPROJECT_TOOL_SECTION: Final[str] = "cjkfmt"
CONFIG_ENV_VAR: Final[str] = "CJKFMT_CONFIG"

# =============================================================================
# Third-party dependencies, as (install_name, import_name, version_spec)
# =============================================================================

DEPS_MARKDOWN: Final[list[tuple[str, str, str]]] = [("mistune", "mistune", ">=3.0.0")]
DEPS_FRONTMATTER: Final[list[tuple[str, str, str]]] = [("pyyaml", "yaml", ">=6.0")]

MARKDOWN_EXTENSIONS: Final[tuple[str, ...]] = (".md", ".markdown", ".mdown", ".mkd", ".mkdn")
