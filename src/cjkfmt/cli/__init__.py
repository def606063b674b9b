"""Command-line interface for cjkfmt.

Examples
--------
Format a file and print the result::

    $ cjkfmt README.md

Rewrite every markdown file below a directory::

    $ cjkfmt --write docs/

Check formatting in CI::

    $ cjkfmt --check docs/

Format standard input::

    $ echo "在LaTeX中" | cjkfmt

"""

import argparse
import difflib
import logging
import os
import sys
from pathlib import Path

from cjkfmt.api import format_file, format_markdown
from cjkfmt.cli.builder import (
    EXIT_CHECK_FAILED,
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    collect_option_overrides,
    create_parser,
    get_exit_code_for_exception,
)
from cjkfmt.cli.config import load_config_with_priority, merge_configs
from cjkfmt.constants import CONFIG_ENV_VAR, MARKDOWN_EXTENSIONS
from cjkfmt.exceptions import CjkFmtError, FileNotFoundError, ParsingError
from cjkfmt.logging_utils import configure_logging
from cjkfmt.options.format import FormatOptions
from cjkfmt.utils.encoding import decode_bytes

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser", "collect_input_files"]

STDIN_NAME = "-"


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments."""
    if parsed_args.trace:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def collect_input_files(paths: list[str]) -> list[str]:
    """Expand directories into the markdown files below them.

    Files named explicitly are kept whatever their extension; ``-`` stands for
    standard input.

    Raises
    ------
    FileNotFoundError
        If a path does not exist

    """
    items: list[str] = []
    for raw in paths:
        if raw == STDIN_NAME:
            items.append(raw)
            continue
        path = Path(raw)
        if path.is_dir():
            found = sorted(
                p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in MARKDOWN_EXTENSIONS
            )
            logger.debug(f"Found {len(found)} markdown file(s) in {path}")
            items.extend(str(p) for p in found)
        elif path.exists():
            items.append(raw)
        else:
            raise FileNotFoundError(raw)
    return items


def _load_options(parsed_args: argparse.Namespace) -> FormatOptions:
    config = {}
    if not parsed_args.no_config:
        config = load_config_with_priority(parsed_args.config, os.environ.get(CONFIG_ENV_VAR))
    return FormatOptions.from_mapping(merge_configs(config, collect_option_overrides(parsed_args)))


def _read_stdin() -> str:
    try:
        text, _encoding = decode_bytes(sys.stdin.buffer.read())
    except ValueError as e:
        raise ParsingError(f"Cannot decode standard input: {e}", parsing_stage="decoding", original_error=e) from e
    return text


def _print_diff(original: str, formatted: str, name: str) -> None:
    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        formatted.splitlines(keepends=True),
        fromfile=f"{name}\t(original)",
        tofile=f"{name}\t(formatted)",
    )
    sys.stdout.writelines(diff)


def _process_item(item: str, parsed_args: argparse.Namespace, options: FormatOptions) -> bool:
    """Format one input and report it; returns whether the content changed."""
    if item == STDIN_NAME:
        original = _read_stdin()
        formatted = format_markdown(original, options)
    else:
        result = format_file(item, options, in_place=parsed_args.write)
        original, formatted = result.original, result.formatted

    changed = original != formatted
    if parsed_args.check:
        if changed:
            print(f"would reformat {item}", file=sys.stderr)
    elif parsed_args.diff:
        if changed:
            _print_diff(original, formatted, item)
    elif parsed_args.write:
        if item == STDIN_NAME:
            sys.stdout.write(formatted)
    else:
        sys.stdout.write(formatted)
    return changed


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        options = _load_options(parsed_args)
        items = collect_input_files(parsed_args.paths or [STDIN_NAME])
    except CjkFmtError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    if not items:
        print("Error: No markdown files found", file=sys.stderr)
        return EXIT_FILE_ERROR

    exit_code = EXIT_SUCCESS
    any_changed = False
    for item in items:
        try:
            any_changed = _process_item(item, parsed_args, options) or any_changed
        except CjkFmtError as e:
            print(f"Error: {item}: {e}", file=sys.stderr)
            logger.debug("Formatting failed", exc_info=True)
            if exit_code == EXIT_SUCCESS:
                exit_code = get_exit_code_for_exception(e)

    if exit_code == EXIT_SUCCESS and parsed_args.check and any_changed:
        return EXIT_CHECK_FAILED
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
