#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cli_config.py
"""Tests for configuration file discovery and loading."""

from pathlib import Path

import pytest

from cjkfmt.cli.config import (
    discover_config_file,
    find_config_in_parents,
    load_config_file,
    load_config_with_priority,
    merge_configs,
)
from cjkfmt.exceptions import ValidationError


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point the home directory at an empty temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    return home


@pytest.mark.unit
@pytest.mark.cli
class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_toml(self, tmp_path):
        """Test loading a TOML config."""
        path = tmp_path / ".cjkfmt.toml"
        path.write_text('[spacing]\nnormalize_math = false\n\n[renderer]\nbullet_symbols = "*"\n', encoding="utf-8")

        assert load_config_file(path) == {"spacing": {"normalize_math": False}, "renderer": {"bullet_symbols": "*"}}

    def test_yaml(self, tmp_path):
        """Test loading a YAML config."""
        path = tmp_path / ".cjkfmt.yaml"
        path.write_text("spacing:\n  normalize_text: false\n", encoding="utf-8")

        assert load_config_file(path) == {"spacing": {"normalize_text": False}}

    def test_empty_yaml_is_empty_config(self, tmp_path):
        """Test that an empty YAML file means no configuration."""
        path = tmp_path / ".cjkfmt.yml"
        path.write_text("", encoding="utf-8")

        assert load_config_file(path) == {}

    def test_json(self, tmp_path):
        """Test loading a JSON config."""
        path = tmp_path / ".cjkfmt.json"
        path.write_text('{"emphasis_symbol": "_"}', encoding="utf-8")

        assert load_config_file(str(path)) == {"emphasis_symbol": "_"}

    def test_pyproject_section(self, tmp_path):
        """Test that only the tool.cjkfmt table of pyproject.toml is read."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "demo"\n\n[tool.cjkfmt]\nnormalize_math = false\n', encoding="utf-8")

        assert load_config_file(path) == {"normalize_math": False}

    def test_pyproject_without_section(self, tmp_path):
        """Test that a pyproject.toml without the table gives an empty config."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "demo"\n', encoding="utf-8")

        assert load_config_file(path) == {}

    @pytest.mark.parametrize(
        "name,content",
        [
            (".cjkfmt.toml", "[spacing\n"),
            (".cjkfmt.json", "{not json"),
            (".cjkfmt.json", "[1, 2]"),
            (".cjkfmt.yaml", "key: [unclosed\n"),
            (".cjkfmt.yaml", "- just\n- a list\n"),
            ("config.ini", "[section]\n"),
        ],
    )
    def test_invalid_files(self, tmp_path, name, content):
        """Test that malformed or unsupported files raise ValidationError."""
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ValidationError):
            load_config_file(path)

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises ValidationError."""
        with pytest.raises(ValidationError, match="does not exist"):
            load_config_file(tmp_path / "missing.toml")

    def test_directory_is_rejected(self, tmp_path):
        """Test that a directory path raises ValidationError."""
        with pytest.raises(ValidationError, match="not a file"):
            load_config_file(tmp_path)


@pytest.mark.unit
@pytest.mark.cli
class TestDiscovery:
    """Tests for config discovery."""

    def test_finds_config_in_parent(self, tmp_path):
        """Test that a config in a parent directory is found."""
        config = tmp_path / ".cjkfmt.toml"
        config.write_text("", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_in_parents(nested) == config.resolve()

    def test_dedicated_file_wins_over_pyproject(self, tmp_path):
        """Test that .cjkfmt files are preferred in the same directory."""
        (tmp_path / "pyproject.toml").write_text("[tool.cjkfmt]\nnormalize_math = false\n", encoding="utf-8")
        config = tmp_path / ".cjkfmt.json"
        config.write_text("{}", encoding="utf-8")

        assert find_config_in_parents(tmp_path) == config.resolve()

    def test_pyproject_without_section_is_skipped(self, tmp_path, isolated_home):
        """Test that a pyproject.toml without a cjkfmt table is not a config."""
        project = tmp_path / "project"
        project.mkdir()
        (project / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")

        found = find_config_in_parents(project)
        assert found is None or found.parent != project.resolve()

    def test_home_directory_fallback(self, tmp_path, isolated_home, monkeypatch):
        """Test that the home directory is searched last."""
        config = isolated_home / ".cjkfmt.yaml"
        config.write_text("normalize_math: false\n", encoding="utf-8")
        monkeypatch.setattr("cjkfmt.cli.config.find_config_in_parents", lambda start_dir=None: None)

        assert discover_config_file(tmp_path) == config


@pytest.mark.unit
@pytest.mark.cli
class TestLoadWithPriority:
    """Tests for load_config_with_priority."""

    def test_explicit_path_wins(self, tmp_path):
        """Test that --config beats the environment variable."""
        explicit = tmp_path / "explicit.json"
        explicit.write_text('{"normalize_math": false}', encoding="utf-8")
        env = tmp_path / "env.json"
        env.write_text('{"normalize_text": false}', encoding="utf-8")

        assert load_config_with_priority(str(explicit), str(env)) == {"normalize_math": False}

    def test_env_path_used_without_explicit(self, tmp_path):
        """Test that the environment variable path is used next."""
        env = tmp_path / "env.json"
        env.write_text('{"normalize_text": false}', encoding="utf-8")

        assert load_config_with_priority(None, str(env)) == {"normalize_text": False}

    def test_discovered_config(self, tmp_path):
        """Test that discovery is used when nothing is given."""
        (tmp_path / ".cjkfmt.toml").write_text("normalize_math = false\n", encoding="utf-8")

        assert load_config_with_priority(start_dir=tmp_path) == {"normalize_math": False}

    def test_nothing_found(self, tmp_path, monkeypatch):
        """Test that no configuration gives an empty mapping."""
        monkeypatch.setattr("cjkfmt.cli.config.discover_config_file", lambda start_dir=None: None)

        assert load_config_with_priority(start_dir=tmp_path) == {}


@pytest.mark.unit
@pytest.mark.cli
class TestMergeConfigs:
    """Tests for merge_configs."""

    def test_nested_tables_are_merged(self):
        """Test deep merging of section tables."""
        base = {"spacing": {"normalize_math": False}, "bullet_symbols": "-"}
        override = {"spacing": {"normalize_text": False}, "bullet_symbols": "*"}

        assert merge_configs(base, override) == {
            "spacing": {"normalize_math": False, "normalize_text": False},
            "bullet_symbols": "*",
        }

    def test_inputs_are_not_mutated(self):
        """Test that the base mapping is left untouched."""
        base = {"spacing": {"normalize_math": False}}
        merge_configs(base, {"spacing": {"normalize_math": True}})

        assert base == {"spacing": {"normalize_math": False}}
