#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/utils/encoding.py
"""Character encoding detection for markdown input.

CJK documents are still commonly stored in legacy encodings (GB18030, Big5,
Shift_JIS, EUC-KR). Input is decoded as UTF-8 when possible, otherwise with the
encoding chardet reports, so that a file can later be written back in the
encoding it was read in.
"""

from __future__ import annotations

import codecs
import logging
from typing import IO

import chardet

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.5
DEFAULT_SAMPLE_SIZE = 64 * 1024

# Tried in order when chardet has no confident guess
FALLBACK_ENCODINGS = ["gb18030", "big5", "shift_jis", "euc-kr"]


def detect_encoding(
    data: bytes,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> str | None:
    """Detect character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int
        Number of bytes to sample for detection (uses first N bytes)
    confidence_threshold : float
        Minimum confidence level (0.0-1.0) required to trust detection

    Returns
    -------
    str | None
        Detected encoding name, or None if detection fails or confidence is
        below the threshold

    """
    sample = data[:sample_size]
    result = chardet.detect(sample)

    encoding = result.get("encoding") if result else None
    if not encoding:
        logger.debug("chardet: No encoding detected")
        return None

    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")
    if confidence < confidence_threshold:
        logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
        return None
    return encoding


def decode_bytes(data: bytes) -> tuple[str, str]:
    """Decode binary data, returning the text and the encoding used.

    UTF-8 (with or without BOM) is tried first, then the chardet guess, then
    each of ``FALLBACK_ENCODINGS`` in order.

    Parameters
    ----------
    data : bytes
        Binary data to decode

    Returns
    -------
    tuple[str, str]
        (text, encoding name)

    Raises
    ------
    ValueError
        If the data cannot be decoded

    """
    if data.startswith(codecs.BOM_UTF8):
        return data[len(codecs.BOM_UTF8) :].decode("utf-8"), "utf-8-sig"

    try:
        return data.decode("utf-8"), "utf-8"
    except UnicodeDecodeError as e:
        logger.debug(f"Input is not valid UTF-8: {e}")
        utf8_error = e

    detected = detect_encoding(data)
    if detected:
        try:
            return data.decode(detected), detected
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Failed to decode with chardet-detected encoding {detected}: {e}")

    for encoding in FALLBACK_ENCODINGS:
        try:
            text = data.decode(encoding)
            logger.debug(f"Successfully decoded with fallback encoding: {encoding}")
            return text, encoding
        except UnicodeDecodeError as e:
            logger.debug(f"Failed to decode with {encoding}: {e}")

    raise ValueError(f"Unable to determine text encoding: {utf8_error}")


def read_text_with_encoding_detection(data: bytes) -> str:
    """Decode binary data as text with automatic encoding detection."""
    text, _encoding = decode_bytes(data)
    return text


def normalize_stream_to_text(stream: IO[bytes] | IO[str]) -> str:
    """Read content from a binary or text mode file-like object as text.

    Raises
    ------
    TypeError
        If stream.read() returns something other than bytes or str

    """
    content = stream.read()

    if isinstance(content, bytes):
        return read_text_with_encoding_detection(content)
    elif isinstance(content, str):
        return content
    else:
        raise TypeError(f"Stream read() returned unexpected type {type(content).__name__}. Expected bytes or str.")
