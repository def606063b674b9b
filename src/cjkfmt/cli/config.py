#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/cli/config.py
"""Configuration file discovery and loading for the cjkfmt CLI.

Configuration can come from ``.cjkfmt.toml``, ``.cjkfmt.yaml``/``.yml``,
``.cjkfmt.json`` or the ``[tool.cjkfmt]`` table of ``pyproject.toml``. Files
are searched from the working directory up to the filesystem root, then in the
home directory.
"""

import json
import logging
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from cjkfmt.constants import CONFIG_FILENAMES, PYPROJECT_TOOL_SECTION
from cjkfmt.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.cjkfmt]`` section from a pyproject.toml file.

    Returns
    -------
    dict
        The section, or an empty dict if the file has none

    Raises
    ------
    ValidationError
        If pyproject.toml cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ValidationError(f"Error reading pyproject.toml {pyproject_path}: {e}", original_error=e) from e

    config = data.get("tool", {}).get(PYPROJECT_TOOL_SECTION)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValidationError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] section in {pyproject_path} must be a table, "
            f"got {type(config).__name__}"
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Each directory is checked for the dedicated config files first, then for a
    ``pyproject.toml`` that has a ``[tool.cjkfmt]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ValidationError as e:
                logger.debug(f"Skipping unreadable {pyproject_path}: {e}")

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in standard locations.

    Searches from ``start_dir`` (default: cwd) up to the filesystem root, then
    the user home directory.

    Returns
    -------
    Path or None
        Path to discovered config file, or None if not found

    """
    config_in_parents = find_config_in_parents(start_dir)
    if config_in_parents:
        return config_in_parents

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML, or pyproject.toml file.

    The format is chosen from the file name and extension.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    ValidationError
        If the file cannot be read, parsed, or has invalid format

    Examples
    --------
    >>> config = load_config_file(".cjkfmt.toml")  # doctest: +SKIP
    >>> config.get("normalize_math")  # doctest: +SKIP
    False

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ValidationError(f"Configuration file does not exist: {config_path}")

    if not config_path.is_file():
        raise ValidationError(f"Configuration path is not a file: {config_path}")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        return _load_pyproject_section(config_path)
    elif ext == ".toml":
        return _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        return _load_yaml_config(config_path)
    elif ext == ".json":
        return _load_json_config(config_path)
    raise ValidationError(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml")


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Invalid TOML in config file {config_path}: {e}", original_error=e) from e
    except OSError as e:
        raise ValidationError(f"Error reading TOML config {config_path}: {e}", original_error=e) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in config file {config_path}: {e}", original_error=e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Error reading JSON config {config_path}: {e}", original_error=e) from e

    if not isinstance(config, dict):
        raise ValidationError(f"JSON config file must contain an object, got {type(config).__name__}")
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in config file {config_path}: {e}", original_error=e) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ValidationError(f"Error reading YAML config {config_path}: {e}", original_error=e) from e

    # An empty file is an empty configuration
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValidationError(f"YAML config file must contain a mapping, got {type(config).__name__}")
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries with deep merging.

    The override dictionary takes precedence over base for conflicting keys.
    Nested dictionaries are merged recursively, not replaced entirely.

    Examples
    --------
    >>> base = {"spacing": {"normalize_math": False}, "bullet_symbols": "-"}
    >>> override = {"spacing": {"normalize_text": False}, "bullet_symbols": "*"}
    >>> merge_configs(base, override)
    {'spacing': {'normalize_math': False, 'normalize_text': False}, 'bullet_symbols': '*'}

    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_config_with_priority(
    explicit_path: Optional[str] = None, env_var_path: Optional[str] = None, start_dir: Optional[Path] = None
) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    Priority order (highest to lowest):
    1. Explicit config file path (``--config``)
    2. Environment variable config path (``CJKFMT_CONFIG``)
    3. Auto-discovered config file

    Returns
    -------
    dict
        Loaded configuration dictionary (empty dict if no config found)

    Raises
    ------
    ValidationError
        If a config file is specified but cannot be loaded

    """
    if explicit_path:
        return load_config_file(explicit_path)

    if env_var_path:
        return load_config_file(env_var_path)

    discovered_path = discover_config_file(start_dir)
    if discovered_path:
        logger.debug(f"Using configuration from {discovered_path}")
        return load_config_file(discovered_path)

    return {}
