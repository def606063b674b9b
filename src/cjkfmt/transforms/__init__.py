#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/transforms/__init__.py
"""AST transforms."""

from cjkfmt.transforms.spacing import SpacingTransform, format_document

__all__ = ["SpacingTransform", "format_document"]
