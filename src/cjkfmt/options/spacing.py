#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/options/spacing.py
"""Options for the spacing transform."""

from __future__ import annotations

from dataclasses import dataclass, field

from cjkfmt.constants import DEFAULT_NORMALIZE_MATH, DEFAULT_NORMALIZE_TEXT
from cjkfmt.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class SpacingOptions(CloneFrozenMixin):
    """Configuration options for the spacing transform.

    Boundary spacing between sibling nodes is always applied; these switches
    only control whether whole text and math runs are rewritten as well.

    Parameters
    ----------
    normalize_text : bool, default True
        Rewrite the spacing inside every text run.
    normalize_math : bool, default True
        Tidy the whitespace of inline and block math source.

    """

    normalize_text: bool = field(
        default=DEFAULT_NORMALIZE_TEXT,
        metadata={"help": "Rewrite spacing inside text runs", "cli_name": "no-text-normalization"},
    )
    normalize_math: bool = field(
        default=DEFAULT_NORMALIZE_MATH,
        metadata={"help": "Tidy whitespace in math source", "cli_name": "no-math-normalization"},
    )
