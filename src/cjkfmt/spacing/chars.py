#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/spacing/chars.py
"""Character classification for spacing decisions.

Every character is sorted into one of a small number of classes. The spacing
rules only ever look at the class of the two characters on either side of a
gap, never at the characters themselves.

Classes
-------
cjk
    Han ideographs, kana, Hangul, Bopomofo, radicals and enclosed forms
wide
    Full-width and CJK punctuation; never spaced on either side
latin
    ASCII letters and digits, accented Latin letters and token-like symbols
open, close
    ASCII opening and closing brackets
punct
    ASCII sentence punctuation
space
    Any whitespace
other
    Everything else (quotes, emoji, other scripts)

"""

from __future__ import annotations

from functools import lru_cache

from cjkfmt.constants import (
    CJK_RANGES,
    CLOSE_BRACKETS,
    LATIN_LETTER_RANGES,
    LATIN_SYMBOLS,
    OPEN_BRACKETS,
    SENTENCE_PUNCTUATION,
    WIDE_PUNCTUATION_RANGES,
    CharClass,
)


def _in_ranges(code_point: int, ranges: tuple[tuple[int, int], ...]) -> bool:
    return any(start <= code_point <= end for start, end in ranges)


@lru_cache(maxsize=4096)
def classify_char(char: str) -> CharClass:
    """Return the spacing class of a single character.

    Parameters
    ----------
    char : str
        A string of length one

    Returns
    -------
    CharClass
        One of "cjk", "wide", "latin", "open", "close", "punct", "space", "other"

    Raises
    ------
    ValueError
        If ``char`` is not exactly one character long

    Examples
    --------
    >>> classify_char("中")
    'cjk'
    >>> classify_char("，")
    'wide'
    >>> classify_char("x")
    'latin'

    """
    if len(char) != 1:
        raise ValueError(f"classify_char expects a single character, got {char!r}")

    if char.isspace():
        return "space"

    code_point = ord(char)
    if _in_ranges(code_point, WIDE_PUNCTUATION_RANGES):
        return "wide"
    if _in_ranges(code_point, CJK_RANGES):
        return "cjk"
    if (char.isascii() and char.isalnum()) or char in LATIN_SYMBOLS:
        return "latin"
    if _in_ranges(code_point, LATIN_LETTER_RANGES):
        return "latin"
    if char in OPEN_BRACKETS:
        return "open"
    if char in CLOSE_BRACKETS:
        return "close"
    if char in SENTENCE_PUNCTUATION:
        return "punct"
    return "other"


def is_cjk(char: str) -> bool:
    """Return True if ``char`` is a CJK character (not CJK punctuation)."""
    return classify_char(char) == "cjk"


def has_cjk(text: str) -> bool:
    """Return True if any character of ``text`` is CJK."""
    return any(is_cjk(char) for char in text)


__all__ = ["classify_char", "has_cjk", "is_cjk"]
