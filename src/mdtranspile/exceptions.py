#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mdtranspile library.

This module defines specialized exception classes for the error conditions
that can occur while parsing, converting and rendering documents. These
exceptions carry more specific information than generic built-ins.

Exception Hierarchy
-------------------
- TranspileError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser/renderer)

  - ParsingError (input document parsing failures)

  - RenderingError (output generation failures)

  - TransformError (tree conversion and pipeline hook failures)

  - DependencyError (missing/incompatible packages)

Malformed frontmatter and unrepresentable nodes are not errors; see
:mod:`mdtranspile.utils.frontmatter` and :mod:`mdtranspile.converters`.

"""

from typing import Any


class TranspileError(Exception):
    """Base exception class for all mdtranspile-specific errors.

    Catching this will catch every library-specific error.

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


class ValidationError(TranspileError):
    """Exception raised for invalid input parameters or options.

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
    """Exception raised when an incorrect options class is provided.

    For example, passing ``HtmlParserOptions`` to the Markdown parser.

    Parameters
    ----------
    converter_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(TranspileError):
    """Exception raised when a document cannot be tokenized into a tree.

    Both parsers recover locally wherever they can, so this is only raised
    for input the grammar cannot handle at all (or, in strict mode, for an
    unterminated fence).

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    offset : int, optional
        Approximate character offset of the failure in the source text
    expected : str, optional
        What the parser expected to find at ``offset``
    found : str, optional
        What the parser actually found at ``offset``
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(
        self,
        message: str,
        parsing_stage: str | None = None,
        offset: int | None = None,
        expected: str | None = None,
        found: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parsing error."""
        if offset is not None:
            message = f"{message} (at offset {offset})"
        if expected is not None:
            message = f"{message}: expected {expected!r}, found {found!r}"
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage
        self.offset = offset
        self.expected = expected
        self.found = found


class RenderingError(TranspileError):
    """Exception raised when serializing a tree to text fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class TransformError(TranspileError):
    """Exception raised when a tree conversion or pipeline hook fails.

    Parameters
    ----------
    message : str
        Description of the failure
    transform_name : str, optional
        Name of the converter or hook that failed
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(self, message: str, transform_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error."""
        super().__init__(message, original_error)
        self.transform_name = transform_name


class DependencyError(TranspileError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    install_command : str, optional
        Suggested pip install command to resolve the issue
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        install_command: str = "",
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
                message_parts.append(f"{converter_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{converter_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            if install_command:
                message += f"\nInstall with: {install_command}"
            else:
                all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
                if all_packages:
                    packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                    message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command
