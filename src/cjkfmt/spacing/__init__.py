#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/spacing/__init__.py
"""Character-level spacing rules for mixed CJK and Latin text."""

from cjkfmt.spacing.chars import classify_char, has_cjk, is_cjk
from cjkfmt.spacing.rules import (
    DEFAULT_RULES,
    SpacingRules,
    TextBoundary,
    normalize_math,
    normalize_text,
    resolve_text_boundary,
    should_add_space,
)

__all__ = [
    "DEFAULT_RULES",
    "SpacingRules",
    "TextBoundary",
    "classify_char",
    "has_cjk",
    "is_cjk",
    "normalize_math",
    "normalize_text",
    "resolve_text_boundary",
    "should_add_space",
]
