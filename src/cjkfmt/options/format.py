#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/options/format.py
"""Aggregate options for the whole parse, space and render pipeline."""

from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Mapping

from cjkfmt.exceptions import ValidationError
from cjkfmt.options.base import CloneFrozenMixin
from cjkfmt.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from cjkfmt.options.spacing import SpacingOptions

_SECTIONS: dict[str, type[CloneFrozenMixin]] = {
    "parser": MarkdownParserOptions,
    "renderer": MarkdownRendererOptions,
    "spacing": SpacingOptions,
}


@dataclass(frozen=True)
class FormatOptions(CloneFrozenMixin):
    """Options for ``format_markdown`` and ``format_file``.

    Parameters
    ----------
    parser : MarkdownParserOptions
        Options forwarded to the markdown parser
    renderer : MarkdownRendererOptions
        Options forwarded to the markdown renderer
    spacing : SpacingOptions
        Options forwarded to the spacing transform

    """

    parser: MarkdownParserOptions = field(default_factory=MarkdownParserOptions)
    renderer: MarkdownRendererOptions = field(default_factory=MarkdownRendererOptions)
    spacing: SpacingOptions = field(default_factory=SpacingOptions)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> FormatOptions:
        """Build options from a configuration mapping.

        Keys are option field names. They may sit at the top level or be nested
        under a ``parser``, ``renderer`` or ``spacing`` table.

        Parameters
        ----------
        config : Mapping[str, Any]
            Configuration loaded from a file or assembled by the CLI

        Returns
        -------
        FormatOptions
            Options with every configured field applied

        Raises
        ------
        ValidationError
            If a key is unknown, a value has the wrong type, or an options
            class rejects a value

        Examples
        --------
        >>> opts = FormatOptions.from_mapping({"spacing": {"normalize_math": False}, "bullet_symbols": "*"})
        >>> opts.spacing.normalize_math, opts.renderer.bullet_symbols
        (False, '*')

        """
        updates: dict[str, dict[str, Any]] = {section: {} for section in _SECTIONS}

        for key, value in config.items():
            if key in _SECTIONS:
                if not isinstance(value, Mapping):
                    raise ValidationError(
                        f"Configuration section '{key}' must be a table, got {type(value).__name__}",
                        parameter_name=key,
                        parameter_value=value,
                    )
                for sub_key, sub_value in value.items():
                    if sub_key not in _SECTIONS[key].field_names():
                        raise ValidationError(
                            f"Unknown option '{key}.{sub_key}'",
                            parameter_name=f"{key}.{sub_key}",
                            parameter_value=sub_value,
                        )
                    updates[key][sub_key] = sub_value
                continue

            section = _section_for_field(key)
            if section is None:
                raise ValidationError(f"Unknown option '{key}'", parameter_name=key, parameter_value=value)
            updates[section][key] = value

        base = cls()
        built: dict[str, Any] = {}
        for section, values in updates.items():
            options_cls = _SECTIONS[section]
            for name, value in values.items():
                _check_value_type(options_cls, section, name, value)
            try:
                built[section] = getattr(base, section).create_updated(**values)
            except (TypeError, ValueError) as e:
                raise ValidationError(
                    f"Invalid {section} options: {e}", parameter_name=section, parameter_value=values, original_error=e
                ) from e
        return cls(**built)


def _section_for_field(name: str) -> str | None:
    for section, options_cls in _SECTIONS.items():
        if name in options_cls.field_names():
            return section
    return None


def _check_value_type(options_cls: type, section: str, name: str, value: Any) -> None:
    for f in fields(options_cls):
        if f.name != name or f.default is MISSING:
            continue
        expected = type(f.default)
        if expected is bool and not isinstance(value, bool):
            raise ValidationError(
                f"Option '{section}.{name}' must be a boolean, got {type(value).__name__}",
                parameter_name=name,
                parameter_value=value,
            )
        if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValidationError(
                f"Option '{section}.{name}' must be an integer, got {type(value).__name__}",
                parameter_name=name,
                parameter_value=value,
            )
        if expected is str and not isinstance(value, str):
            raise ValidationError(
                f"Option '{section}.{name}' must be a string, got {type(value).__name__}",
                parameter_name=name,
                parameter_value=value,
            )
