#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/renderers/__init__.py
"""Renderers that serialize the cjkfmt AST."""

from cjkfmt.renderers.base import BaseRenderer, InlineContentMixin
from cjkfmt.renderers.markdown import MarkdownRenderer

__all__ = ["BaseRenderer", "InlineContentMixin", "MarkdownRenderer"]
