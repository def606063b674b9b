#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/logging_utils.py
"""Logging setup for the cjkfmt command line.

Only the ``cjkfmt`` package logger is configured, so an application that
imports cjkfmt keeps control of the root logger. Console messages go to
stderr, leaving stdout to the formatted markdown.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "cjkfmt"

CONSOLE_FORMAT = "cjkfmt: %(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str) -> int:
    """Return the numeric level for a level number or name.

    Raises
    ------
    ValueError
        If ``log_level`` names no logging level

    """
    if isinstance(log_level, int):
        return log_level
    resolved = logging.getLevelName(str(log_level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return resolved


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure the cjkfmt package logger for a CLI run.

    Calling it again replaces the handlers installed by the previous call.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "INFO").
    log_file : str, optional
        Path of a file that receives a copy of every record, always in the
        trace format.
    trace_mode : bool, default False
        When true, console records carry timestamps, logger names and line
        numbers.

    Returns
    -------
    logging.Logger
        The configured package logger.

    """
    level = resolve_log_level(log_level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    trace_formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(trace_formatter if trace_mode else logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not open log file {log_file}: {e}")
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(trace_formatter)
            logger.addHandler(file_handler)
            logger.debug(f"Logging to file: {log_file}")

    return logger
