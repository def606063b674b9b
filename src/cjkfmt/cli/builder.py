#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/cli/builder.py
"""Argument parser construction and exit codes for the cjkfmt CLI.

Option flags are generated from the option dataclasses: boolean fields that
default to True get a ``--no-...`` switch (their ``cli_name``), other fields a
``--field-name VALUE`` argument. Every generated argument defaults to None so
that only values given on the command line override the configuration file.
"""

import argparse
from dataclasses import MISSING, fields
from typing import Any, Dict

from cjkfmt.exceptions import (
    DependencyError,
    FileError,
    ParsingError,
    RenderingError,
    TransformError,
    ValidationError,
)
from cjkfmt.options.base import CloneFrozenMixin
from cjkfmt.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from cjkfmt.options.spacing import SpacingOptions

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CHECK_FAILED = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7
EXIT_TRANSFORM_ERROR = 8

_OPTION_SECTIONS: Dict[str, type[CloneFrozenMixin]] = {
    "spacing": SpacingOptions,
    "parser": MarkdownParserOptions,
    "renderer": MarkdownRendererOptions,
}

_SECTION_TITLES = {
    "spacing": "spacing options",
    "parser": "markdown parsing options",
    "renderer": "markdown output options",
}


def _dest_for(section: str, name: str) -> str:
    return f"opt__{section}__{name}"


def _add_options_arguments(parser: argparse.ArgumentParser, section: str, options_cls: type) -> None:
    """Add one argument per field of ``options_cls`` to a new argument group."""
    group = parser.add_argument_group(_SECTION_TITLES[section])
    for f in fields(options_cls):
        if not f.init:
            continue
        help_text = f.metadata.get("help", "")
        dest = _dest_for(section, f.name)

        if f.default is True:
            flag = "--" + f.metadata.get("cli_name", f"no-{f.name.replace('_', '-')}")
            group.add_argument(
                flag, dest=dest, action="store_const", const=False, default=None, help=f"Disable: {help_text}"
            )
            continue
        if f.default is False:
            flag = "--" + f.metadata.get("cli_name", f.name.replace("_", "-"))
            group.add_argument(flag, dest=dest, action="store_const", const=True, default=None, help=help_text)
            continue

        default = f.default if f.default is not MISSING else None
        kwargs: Dict[str, Any] = {
            "dest": dest,
            "default": None,
            "type": f.metadata.get("type", str),
            "help": f"{help_text} (default: {default})",
        }
        if "choices" in f.metadata:
            kwargs["choices"] = f.metadata["choices"]
        group.add_argument("--" + f.metadata.get("cli_name", f.name.replace("_", "-")), **kwargs)


def collect_option_overrides(parsed_args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    """Return the options given on the command line as a nested config mapping.

    Examples
    --------
    >>> args = create_parser().parse_args(["--no-math-normalization"])
    >>> collect_option_overrides(args)
    {'spacing': {'normalize_math': False}}

    """
    overrides: Dict[str, Dict[str, Any]] = {}
    for section, options_cls in _OPTION_SECTIONS.items():
        for f in fields(options_cls):
            value = getattr(parsed_args, _dest_for(section, f.name), None)
            if value is not None:
                overrides.setdefault(section, {})[f.name] = value
    return overrides


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    from cjkfmt import __version__

    parser = argparse.ArgumentParser(
        prog="cjkfmt",
        description="Normalize the spacing between CJK and Latin text in Markdown documents.",
        epilog="Reads standard input when no path (or '-') is given and writes the result to standard output.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Markdown files or directories to format ('-' for standard input)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--write", "-w", action="store_true", help="Rewrite files in place")
    mode.add_argument(
        "--check", action="store_true", help="Do not write anything; exit with status 1 if any file would change"
    )
    mode.add_argument("--diff", action="store_true", help="Print a unified diff instead of the formatted text")

    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to configuration file (TOML, YAML or JSON). If not specified, searches for .cjkfmt.toml, "
        ".cjkfmt.yaml, .cjkfmt.json or pyproject.toml [tool.cjkfmt] from the current directory upwards, "
        "then in the home directory.",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        help="Disable loading of configuration files. Ignores auto-discovered configs, "
        "the CJKFMT_CONFIG environment variable, and any --config flag.",
    )

    for section, options_cls in _OPTION_SECTIONS.items():
        _add_options_arguments(parser, section, options_cls)

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    logging_group.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Write log messages to specified file in addition to console output",
    )
    logging_group.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace mode with very verbose logging and per-stage timing information",
    )

    parser.add_argument("--version", "-V", action="version", version=f"cjkfmt {__version__}")
    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR

    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR

    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR

    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR

    if isinstance(exception, TransformError):
        return EXIT_TRANSFORM_ERROR

    return EXIT_ERROR
