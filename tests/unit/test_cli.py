#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_cli.py
"""Tests for the cjkfmt command-line interface."""

import io
import sys

import pytest

from cjkfmt.cli import collect_input_files, main
from cjkfmt.cli.builder import (
    EXIT_CHECK_FAILED,
    EXIT_DEPENDENCY_ERROR,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_SUCCESS,
    EXIT_TRANSFORM_ERROR,
    EXIT_VALIDATION_ERROR,
    collect_option_overrides,
    create_parser,
    get_exit_code_for_exception,
)
from cjkfmt.exceptions import (
    CollaboratorError,
    DependencyError,
    FileNotFoundError,
    OutputWriteError,
    ParsingError,
    ValidationError,
)

FORMATTED = "# 使用 Python\n\n中文 English 混排\n"


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI from replacing the root logging handlers during tests."""
    calls = []
    monkeypatch.setattr("cjkfmt.cli.configure_logging", lambda *args, **kwargs: calls.append((args, kwargs)))
    return calls


@pytest.fixture
def stdin_text(monkeypatch):
    """Return a helper that feeds UTF-8 text to standard input."""

    def _feed(text):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(text.encode("utf-8")), encoding="utf-8"))

    return _feed


@pytest.mark.unit
@pytest.mark.cli
class TestFormattingModes:
    """Tests for stdout, write, check and diff modes."""

    def test_stdin_to_stdout(self, stdin_text, capsys):
        """Test that standard input is formatted to standard output."""
        stdin_text("中文English\n")

        assert main(["--no-config"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "中文 English\n"

    def test_dash_reads_stdin(self, stdin_text, capsys):
        """Test that '-' stands for standard input."""
        stdin_text("使用`pip`安装")

        assert main(["--no-config", "-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "使用 `pip` 安装\n"

    def test_file_to_stdout_leaves_file_alone(self, markdown_file, capsys):
        """Test that without --write the file is not modified."""
        before = markdown_file.read_text(encoding="utf-8")

        assert main(["--no-config", str(markdown_file)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == FORMATTED
        assert markdown_file.read_text(encoding="utf-8") == before

    def test_write_in_place(self, markdown_file, capsys):
        """Test that --write rewrites the file and prints nothing."""
        assert main(["--no-config", "--write", str(markdown_file)]) == EXIT_SUCCESS

        assert markdown_file.read_text(encoding="utf-8") == FORMATTED
        assert capsys.readouterr().out == ""

    def test_write_with_stdin_prints_result(self, stdin_text, capsys):
        """Test that --write on standard input falls back to standard output."""
        stdin_text("中文English")

        assert main(["--no-config", "-w"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "中文 English\n"

    def test_check_reports_changes(self, markdown_file, capsys):
        """Test that --check fails when a file would change."""
        assert main(["--no-config", "--check", str(markdown_file)]) == EXIT_CHECK_FAILED

        captured = capsys.readouterr()
        assert f"would reformat {markdown_file}" in captured.err
        assert captured.out == ""

    def test_check_passes_for_formatted_file(self, tmp_path, capsys):
        """Test that --check succeeds on a formatted file."""
        path = tmp_path / "ok.md"
        path.write_text(FORMATTED, encoding="utf-8")

        assert main(["--no-config", "--check", str(path)]) == EXIT_SUCCESS
        assert capsys.readouterr().err == ""

    def test_diff(self, markdown_file, capsys):
        """Test that --diff prints a unified diff."""
        assert main(["--no-config", "--diff", str(markdown_file)]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert "-中文English混排" in out
        assert "+中文 English 混排" in out
        assert "(formatted)" in out

    def test_modes_are_exclusive(self, markdown_file):
        """Test that --check and --write cannot be combined."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--check", "--write", str(markdown_file)])
        assert exc_info.value.code == 2

    def test_directory_is_expanded(self, tmp_path, capsys):
        """Test that directories are searched for markdown files."""
        (tmp_path / "a.md").write_text("中文English", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("中文English", encoding="utf-8")

        assert main(["--no-config", "--write", str(tmp_path)]) == EXIT_SUCCESS
        assert (tmp_path / "a.md").read_text(encoding="utf-8") == "中文 English\n"
        assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == "中文English"

    def test_logging_is_configured(self, stdin_text, quiet_logging, capsys):
        """Test that --trace turns on debug logging with trace formatting."""
        stdin_text("中文")
        main(["--no-config", "--trace"])

        (args, kwargs), = quiet_logging
        assert args[0] == 10
        assert kwargs["trace_mode"] is True


@pytest.mark.unit
@pytest.mark.cli
class TestOptionsAndConfig:
    """Tests for option flags and configuration files."""

    def test_option_flag(self, stdin_text, capsys):
        """Test that generated option flags reach the renderer."""
        stdin_text("中文*English*")

        assert main(["--no-config", "--emphasis-symbol", "_"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "中文 _English_\n"

    def test_disable_flag(self, stdin_text, capsys):
        """Test that --no-parse-math leaves dollar signs as text."""
        stdin_text("价格$5")

        assert main(["--no-config", "--no-parse-math", "--no-escape-special"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "价格 $5\n"

    def test_config_file(self, stdin_text, tmp_path, capsys):
        """Test that --config options are applied."""
        config = tmp_path / "cjkfmt.json"
        config.write_text('{"renderer": {"emphasis_symbol": "_"}}', encoding="utf-8")
        stdin_text("*斜体*")

        assert main(["--config", str(config)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "_斜体_\n"

    def test_flag_overrides_config(self, stdin_text, tmp_path, capsys):
        """Test that command line flags win over configuration files."""
        config = tmp_path / "cjkfmt.json"
        config.write_text('{"emphasis_symbol": "_"}', encoding="utf-8")
        stdin_text("*斜体*")

        assert main(["--config", str(config), "--emphasis-symbol", "*"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "*斜体*\n"

    def test_environment_config(self, stdin_text, tmp_path, monkeypatch, capsys):
        """Test that CJKFMT_CONFIG points at a configuration file."""
        config = tmp_path / "env.yaml"
        config.write_text("renderer:\n  emphasis_symbol: _\n", encoding="utf-8")
        monkeypatch.setenv("CJKFMT_CONFIG", str(config))
        stdin_text("*斜体*")

        assert main([]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "_斜体_\n"

    def test_no_config_ignores_environment(self, stdin_text, tmp_path, monkeypatch, capsys):
        """Test that --no-config skips CJKFMT_CONFIG."""
        config = tmp_path / "env.yaml"
        config.write_text("emphasis_symbol: _\n", encoding="utf-8")
        monkeypatch.setenv("CJKFMT_CONFIG", str(config))
        stdin_text("*斜体*")

        assert main(["--no-config"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "*斜体*\n"

    def test_invalid_config(self, tmp_path, capsys):
        """Test that an invalid configuration file is a validation error."""
        config = tmp_path / "bad.json"
        config.write_text('{"no_such_option": 1}', encoding="utf-8")

        assert main(["--config", str(config), str(tmp_path)]) == EXIT_VALIDATION_ERROR
        assert "Error" in capsys.readouterr().err

    def test_collect_option_overrides(self):
        """Test that only given flags become overrides."""
        args = create_parser().parse_args(["--no-math-normalization", "--list-indent-width", "4"])

        assert collect_option_overrides(args) == {
            "spacing": {"normalize_math": False},
            "renderer": {"list_indent_width": 4},
        }

    def test_no_overrides(self):
        """Test that no flags give no overrides."""
        assert collect_option_overrides(create_parser().parse_args([])) == {}

    def test_version(self, capsys):
        """Test --version."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("cjkfmt ")


@pytest.mark.unit
@pytest.mark.cli
class TestErrors:
    """Tests for error reporting and exit codes."""

    def test_missing_file(self, tmp_path, capsys):
        """Test that a missing path is a file error."""
        assert main(["--no-config", str(tmp_path / "missing.md")]) == EXIT_FILE_ERROR
        assert "Error" in capsys.readouterr().err

    def test_directory_without_markdown(self, tmp_path, capsys):
        """Test that a directory without markdown files is a file error."""
        (tmp_path / "notes.txt").write_text("中文", encoding="utf-8")

        assert main(["--no-config", str(tmp_path)]) == EXIT_FILE_ERROR
        assert "No markdown files found" in capsys.readouterr().err

    def test_error_in_one_file_does_not_stop_the_rest(self, tmp_path, monkeypatch, capsys):
        """Test that later files are still processed after a failure."""
        bad = tmp_path / "a.md"
        good = tmp_path / "b.md"
        bad.write_text("坏文件", encoding="utf-8")
        good.write_text("中文English", encoding="utf-8")

        from cjkfmt import cli

        real_format_file = cli.format_file

        def flaky_format_file(path, *args, **kwargs):
            if str(path) == str(bad):
                raise ParsingError("broken", parsing_stage="decoding")
            return real_format_file(path, *args, **kwargs)

        monkeypatch.setattr(cli, "format_file", flaky_format_file)

        assert main(["--no-config", "--write", str(bad), str(good)]) == EXIT_PARSING_ERROR
        assert good.read_text(encoding="utf-8") == "中文 English\n"
        assert f"Error: {bad}" in capsys.readouterr().err

    def test_collect_input_files_raises_for_missing_path(self, tmp_path):
        """Test that collect_input_files reports missing paths."""
        with pytest.raises(FileNotFoundError):
            collect_input_files([str(tmp_path / "missing.md")])

    def test_collect_input_files_keeps_explicit_files(self, tmp_path):
        """Test that explicitly named files are kept whatever their suffix."""
        path = tmp_path / "README.txt"
        path.write_text("", encoding="utf-8")
        nested = tmp_path / "sub"
        nested.mkdir()
        (nested / "b.markdown").write_text("", encoding="utf-8")

        assert collect_input_files([str(path), str(nested), "-"]) == [
            str(path),
            str(nested / "b.markdown"),
            "-",
        ]

    @pytest.mark.parametrize(
        "exception,code",
        [
            (DependencyError("markdown", [("mistune", ">=3.0.0")]), EXIT_DEPENDENCY_ERROR),
            (ValidationError("bad"), EXIT_VALIDATION_ERROR),
            (FileNotFoundError("x.md"), EXIT_FILE_ERROR),
            (ParsingError("bad"), EXIT_PARSING_ERROR),
            (OutputWriteError("bad"), EXIT_RENDERING_ERROR),
            (CollaboratorError("bad"), EXIT_TRANSFORM_ERROR),
            (RuntimeError("bad"), EXIT_ERROR),
        ],
    )
    def test_exit_code_mapping(self, exception, code):
        """Test the exception to exit code mapping."""
        assert get_exit_code_for_exception(exception) == code
