#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/parsers/__init__.py
"""Parsers that build the cjkfmt AST."""

from cjkfmt.parsers.base import BaseParser, ParserInput
from cjkfmt.parsers.markdown import MarkdownParser, markdown_to_ast

__all__ = ["BaseParser", "ParserInput", "MarkdownParser", "markdown_to_ast"]
