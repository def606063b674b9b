#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/utils/io_utils.py
"""I/O helpers for writing formatted output."""

from __future__ import annotations

import io
from io import BytesIO, StringIO
from pathlib import Path
from typing import IO, Union, cast


def _is_binary_stream(output: IO) -> bool:
    """Guess whether a file-like object expects bytes."""
    if isinstance(output, BytesIO):
        return True
    if isinstance(output, (StringIO, io.TextIOBase)):
        return False
    if isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
        return True
    mode = getattr(output, "mode", "")
    return isinstance(mode, str) and "b" in mode


def write_content(text: str, output: Union[str, Path, IO[bytes], IO[str]], encoding: str = "utf-8") -> None:
    """Write text to a file path or a file-like object.

    Parameters
    ----------
    text : str
        Content to write
    output : str, Path, IO[bytes] or IO[str]
        Destination. Paths are written with ``encoding``; binary streams receive
        ``text`` encoded with ``encoding``; text streams receive it unchanged.
    encoding : str, default "utf-8"
        Encoding for paths and binary streams

    Raises
    ------
    OSError
        If the destination cannot be written
    TypeError
        If the output type is not supported

    Examples
    --------
    >>> buffer = BytesIO()
    >>> write_content("中文", buffer)
    >>> buffer.getvalue().decode("utf-8")
    '中文'

    """
    if isinstance(output, (str, Path)):
        # newline="" keeps "\n" as written on every platform
        Path(output).write_text(text, encoding=encoding, newline="")
        return

    if hasattr(output, "write"):
        if _is_binary_stream(output):
            cast(IO[bytes], output).write(text.encode(encoding))
        else:
            cast(IO[str], output).write(text)
        return

    raise TypeError(f"Unsupported output type: {type(output)}")


__all__ = ["write_content"]
