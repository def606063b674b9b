"""Pytest configuration and shared fixtures for the cjkfmt test suite.

This module registers markers, configures Hypothesis profiles and provides
the small document fixtures shared by unit and integration tests.
"""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from cjkfmt.ast import Code, Document, MathInline, Paragraph, Strong, Text

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def mixed_document() -> Document:
    """Provide a small document mixing CJK text, markup and tokens.

    Returns
    -------
    Document
        ``使用**Python**和`pip`安装$x$`` as a single paragraph.

    """
    return Document(
        children=[
            Paragraph(
                content=[
                    Text(content="使用"),
                    Strong(content=[Text(content="Python")]),
                    Text(content="和"),
                    Code(content="pip"),
                    Text(content="安装"),
                    MathInline(content="x"),
                ]
            )
        ]
    )


@pytest.fixture
def markdown_file(tmp_path: Path) -> Path:
    """Provide a UTF-8 markdown file that needs formatting.

    Returns
    -------
    Path
        Path to ``doc.md`` inside the test's temporary directory.

    """
    path = tmp_path / "doc.md"
    path.write_text("# 使用Python\n\n中文English混排\n", encoding="utf-8")
    return path
