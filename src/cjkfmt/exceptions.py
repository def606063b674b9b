#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/exceptions.py
"""Custom exceptions for the cjkfmt library.

This module defines specialized exception classes for the error conditions
that can occur while parsing, spacing and rendering documents. These
exceptions provide more specific error information than generic built-ins.

Exception Hierarchy
-------------------
- CjkFmtError (base exception)

  - ValidationError (parameter/option/config validation)
    - InvalidOptionsError (wrong options class for a component)

  - FileError (file access and I/O)
    - FileNotFoundError (file doesn't exist)
    - FileAccessError (permissions, decoding failures)

  - ParsingError (markdown source could not be turned into a tree)

  - RenderingError (output generation failures)
    - OutputWriteError (file write failures)

  - TransformError (AST transformation failures)
    - MalformedTreeError (tree violates structural assumptions)
      - EmptyContainerError (container without children on a leaf descent)
    - CollaboratorError (spacing rule broke its contract)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class CjkFmtError(Exception):
    """Base exception class for all cjkfmt-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(CjkFmtError):
    """Exception raised for invalid input parameters, options or config values.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an options object of the wrong class is supplied.

    Parameters
    ----------
    component_name : str
        Name of the parser, renderer or transform that received the options
    expected_type : type
        The expected options class
    received_type : type
        The options class that was actually received

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class FileError(CjkFmtError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """Exception raised when an input file cannot be found."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file not found error."""
        if message is None:
            message = f"File not found: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class FileAccessError(FileError):
    """Exception raised when a file exists but cannot be read or decoded."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file access error."""
        if message is None:
            message = f"Cannot access file: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class ParsingError(CjkFmtError):
    """Exception raised when markdown source cannot be parsed into a tree.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        Stage at which parsing failed (e.g. "frontmatter", "tokens")
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class RenderingError(CjkFmtError):
    """Exception raised when a tree cannot be serialized."""

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error=original_error)
        self.rendering_stage = rendering_stage


class OutputWriteError(RenderingError):
    """Exception raised when rendered output cannot be written."""

    def __init__(self, message: str, output_path: str | None = None, original_error: Exception | None = None):
        """Initialize the output write error."""
        super().__init__(message, rendering_stage="write", original_error=original_error)
        self.output_path = output_path


class TransformError(CjkFmtError):
    """Exception raised when AST transformation fails.

    Parameters
    ----------
    message : str
        Description of the transform failure
    transform_name : str, optional
        Name of the transform that failed
    original_error : Exception, optional
        The underlying exception that caused the transform failure

    """

    def __init__(self, message: str, transform_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error."""
        super().__init__(message, original_error)
        self.transform_name = transform_name


class MalformedTreeError(TransformError):
    """Exception raised when a document tree violates its structural invariants."""


class EmptyContainerError(MalformedTreeError):
    """Exception raised when a leaf descent reaches a container with no children.

    Parameters
    ----------
    node_type : str
        Class name of the empty container
    direction : str, default "first"
        Which descent hit the container ("first" or "last")

    """

    def __init__(self, node_type: str, direction: str = "first"):
        """Initialize the empty container error."""
        super().__init__(f"Cannot locate {direction} leaf: {node_type} container has no children")
        self.node_type = node_type
        self.direction = direction


class CollaboratorError(TransformError):
    """Exception raised when a spacing rule violates its contract.

    Raised for a normalizer that returns a non-string, or a classification
    asked to decide between two empty operands.

    Parameters
    ----------
    message : str
        Description of the violation
    collaborator : str, optional
        Name of the offending rule (e.g. "normalize_text")

    """

    def __init__(self, message: str, collaborator: str | None = None, original_error: Exception | None = None):
        """Initialize the collaborator error."""
        super().__init__(message, transform_name="spacing", original_error=original_error)
        self.collaborator = collaborator


class DependencyError(CjkFmtError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    component_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        component_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{component_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{component_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
            if all_packages:
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.component_name = component_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
