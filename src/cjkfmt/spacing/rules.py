#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/spacing/rules.py
"""Spacing rules applied by the spacing transform.

The transform delegates every character-level decision to a ``SpacingRules``
instance. The default rules implement the usual CJK typesetting convention: a
single space between CJK and Latin text, no space between CJK characters or
around full-width punctuation, and whatever the author wrote everywhere else.

Subclass ``SpacingRules`` and pass an instance to ``SpacingTransform`` (or
``format_document``) to use a different table.

"""

from __future__ import annotations

from dataclasses import dataclass

from cjkfmt.constants import CHARACTER_PAIR_PATTERN, INLINE_WHITESPACE, MATH_WHITESPACE_PATTERN, CharClass
from cjkfmt.exceptions import CollaboratorError
from cjkfmt.spacing.chars import classify_char


_SPACED_CLASSES = frozenset({"cjk", "wide"})


@dataclass(frozen=True)
class TextBoundary:
    """Outcome of resolving the gap between two adjacent text runs.

    Parameters
    ----------
    left : str
        New value for the text run left of the boundary
    right : str
        New value for the text run right of the boundary
    insert_space : bool
        Whether a standalone space belongs between the two runs
    pending : bool
        Whether explicitly written whitespace is still owed to the next
        boundary in the same container

    """

    left: str
    right: str
    insert_space: bool
    pending: bool


class SpacingRules:
    """Default CJK spacing rules.

    All methods are pure functions of their arguments.

    """

    def classify_char(self, char: str) -> CharClass:
        """Return the spacing class of ``char``."""
        return classify_char(char)

    def should_add_space(self, left: str, right: str, had_space: bool) -> bool:
        """Decide whether a single space belongs between ``left`` and ``right``.

        Only the last character of ``left`` and the first character of
        ``right`` are inspected.

        Parameters
        ----------
        left : str
            Text before the gap (or the token sentinel)
        right : str
            Text after the gap (or the token sentinel)
        had_space : bool
            Whether the source had whitespace in the gap

        Returns
        -------
        bool
            True if the gap should hold exactly one space, False if it should
            be empty

        Raises
        ------
        CollaboratorError
            If both operands are empty

        """
        if not left and not right:
            raise CollaboratorError("should_add_space requires at least one non-empty operand", "should_add_space")
        if not left or not right:
            return had_space

        left_class = self.classify_char(left[-1])
        right_class = self.classify_char(right[0])

        if "space" in (left_class, right_class) or "wide" in (left_class, right_class):
            return False
        if left_class == "cjk" and right_class == "cjk":
            return False
        if left_class == "cjk":
            if right_class in ("latin", "open"):
                return True
            return had_space if right_class == "other" else False
        if right_class == "cjk":
            if left_class in ("latin", "close"):
                return True
            return had_space if left_class in ("punct", "other") else False
        return had_space

    def normalize_text(self, value: str) -> str:
        """Rewrite the gaps inside a single text run.

        Each gap between two visible characters on the same line becomes a
        single space or nothing. Gaps between two characters that are neither
        CJK nor full-width punctuation are kept exactly as written, as are
        leading and trailing whitespace and newlines.

        Examples
        --------
        >>> SpacingRules().normalize_text("使用Python编程")
        '使用 Python 编程'
        >>> SpacingRules().normalize_text("你好 ， 世界")
        '你好，世界'

        """

        def _replace(match) -> str:
            first, run, following = match.group(1), match.group(2), match.group(3)
            if not {self.classify_char(first), self.classify_char(following)} & _SPACED_CLASSES:
                return match.group(0)
            return first + (" " if self.should_add_space(first, following, bool(run)) else "")

        return CHARACTER_PAIR_PATTERN.sub(_replace, value)

    def normalize_math(self, value: str) -> str:
        """Tidy the whitespace of a math source string.

        Surrounding whitespace is removed, runs of spaces and tabs collapse to
        one space and each line loses its trailing whitespace.

        """
        lines = value.strip().splitlines()
        return "\n".join(MATH_WHITESPACE_PATTERN.sub(" ", line).rstrip() for line in lines)

    def resolve_text_boundary(self, left: str, right: str, pending: bool) -> TextBoundary:
        """Resolve the gap between two adjacent text runs.

        Whitespace touching the boundary is trimmed from both runs. When both
        runs still hold visible text, the character table decides whether a
        standalone space goes between them. A run that is nothing but
        whitespace hands its space on through ``pending`` so it is written
        exactly once further along the container.

        Parameters
        ----------
        left : str
            Value of the text run ending at the boundary
        right : str
            Value of the text run starting at the boundary
        pending : bool
            Carried state from the previous boundary in the same container

        Returns
        -------
        TextBoundary
            New run values, whether to insert a space and the next carried state

        """
        trimmed_left = left.rstrip(INLINE_WHITESPACE)
        trimmed_right = right.lstrip(INLINE_WHITESPACE)
        had_space = trimmed_left != left or trimmed_right != right

        if trimmed_left and trimmed_right:
            insert = self.should_add_space(trimmed_left, trimmed_right, had_space)
            return TextBoundary(trimmed_left, trimmed_right, insert, False)
        if trimmed_left:
            return TextBoundary(trimmed_left, "", False, had_space)
        if trimmed_right:
            return TextBoundary(" " if had_space or pending else "", trimmed_right, False, False)
        return TextBoundary("", "", False, had_space or pending)


DEFAULT_RULES = SpacingRules()


def should_add_space(left: str, right: str, had_space: bool = False) -> bool:
    """Decide whether a space belongs between ``left`` and ``right`` using the default rules."""
    return DEFAULT_RULES.should_add_space(left, right, had_space)


def normalize_text(value: str) -> str:
    """Normalize the gaps inside one text run using the default rules."""
    return DEFAULT_RULES.normalize_text(value)


def normalize_math(value: str) -> str:
    """Normalize math source whitespace using the default rules."""
    return DEFAULT_RULES.normalize_math(value)


def resolve_text_boundary(left: str, right: str, pending: bool = False) -> TextBoundary:
    """Resolve a text/text boundary using the default rules."""
    return DEFAULT_RULES.resolve_text_boundary(left, right, pending)
