#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/options/__init__.py
"""Option dataclasses for cjkfmt components."""

from cjkfmt.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from cjkfmt.options.format import FormatOptions
from cjkfmt.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from cjkfmt.options.spacing import SpacingOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "FormatOptions",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "SpacingOptions",
]
