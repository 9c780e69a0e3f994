"""Custom exception hierarchy for airmerge.

This module defines a structured exception hierarchy for consistent error
handling throughout the package. All exceptions inherit from AirMergeError.

Exception Hierarchy:
    AirMergeError (base)
    ├── ConfigurationError
    │   ├── ConfigValidationError
    │   └── AliasFileError
    ├── DataNotFoundError
    ├── StructuralError
    ├── UnitsError
    │   └── UnrecognizedUnitError
    └── UnsupportedCaseError
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class AirMergeError(Exception):
    """Base exception for all airmerge errors.

    Parameters
    ----------
    message
        Human-readable error description.
    details
        Optional additional context or data about the error.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AirMergeError):
    """Base exception for configuration-related errors."""


class ConfigValidationError(ConfigurationError):
    """Raised when reader options fail validation.

    Parameters
    ----------
    message
        Description of the validation failure.
    field
        The option that failed validation.
    value
        The invalid value.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        details: dict[str, Any] = {}
        if field is not None:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class AliasFileError(ConfigurationError):
    """Raised when a unit alias file contains a malformed line.

    Parameters
    ----------
    message
        Description of the problem.
    path
        Path to the alias file.
    line
        1-based line number of the offending line.
    """

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        line: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if path is not None:
            details["path"] = str(path)
        if line is not None:
            details["line"] = line
        super().__init__(message, details)
        self.path = Path(path) if path else None
        self.line = line


# =============================================================================
# Data Errors
# =============================================================================


class DataNotFoundError(AirMergeError):
    """Raised when an input file cannot be found.

    Parameters
    ----------
    message
        Description of the missing data.
    path
        Path where the file was expected.
    """

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        details: dict[str, Any] = {}
        if path is not None:
            details["path"] = str(path)
        super().__init__(message, details)
        self.path = Path(path) if path else None


class StructuralError(AirMergeError):
    """Raised when an ICARTT file violates the expected layout.

    Covers bad counts, truncated headers, comment lines outside any
    category, row/column arity mismatches and variable lists that disagree
    with the table header.

    Parameters
    ----------
    message
        Description of the layout violation.
    line
        1-based line number in the file, if known.
    row
        0-based data row index, if the error is in the data table.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        row: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if line is not None:
            details["line"] = line
        if row is not None:
            details["row"] = row
        super().__init__(message, details)
        self.line = line
        self.row = row


class UnitsError(AirMergeError):
    """Raised when a unit string cannot be resolved.

    Parameters
    ----------
    message
        Description of the failure.
    unit_string
        The unit string as it was handed to the resolver.
    rewritten
        The rewritten string tried after the micro-prefix substitution, if
        a retry happened.
    line
        Line of the ICARTT file the unit was read from, if known.
    cause
        The underlying failure.
    """

    def __init__(
        self,
        message: str,
        unit_string: str | None = None,
        rewritten: str | None = None,
        line: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if unit_string is not None:
            details["unit_string"] = unit_string
        if rewritten is not None:
            details["rewritten"] = rewritten
        if line is not None:
            details["line"] = line
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(message, details)
        self.unit_string = unit_string
        self.rewritten = rewritten
        self.line = line
        self.cause = cause


class UnrecognizedUnitError(UnitsError):
    """Raised by a unit engine when a symbol in an expression is unknown.

    Parameters
    ----------
    message
        Description of the failure.
    symbol
        The symbol the engine did not recognize.
    unit_string
        The full expression being resolved.
    cause
        The engine's own exception.
    """

    def __init__(
        self,
        message: str,
        symbol: str,
        unit_string: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, unit_string=unit_string, cause=cause)
        self.details["symbol"] = symbol
        self.symbol = symbol


class UnsupportedCaseError(AirMergeError):
    """Raised when a recognized but unimplemented case is encountered.

    Parameters
    ----------
    message
        Description of the unsupported case.
    feature
        Name of the unsupported feature (e.g. a file format index).
    """

    def __init__(self, message: str, feature: str | None = None) -> None:
        details: dict[str, Any] = {}
        if feature is not None:
            details["feature"] = feature
        super().__init__(message, details)
        self.feature = feature
