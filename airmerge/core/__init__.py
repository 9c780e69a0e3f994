"""Core module containing exceptions and type aliases.

This module provides the foundational components for airmerge:
- Custom exceptions
- Type aliases
"""

from airmerge.core.exceptions import (
    AirMergeError,
    AliasFileError,
    ConfigurationError,
    ConfigValidationError,
    DataNotFoundError,
    StructuralError,
    UnitsError,
    UnrecognizedUnitError,
    UnsupportedCaseError,
)
from airmerge.core.types import (
    AliasMapping,
    MetadataValue,
    PathLike,
    TextSource,
)

__all__ = [
    # Exceptions
    "AirMergeError",
    "ConfigurationError",
    "ConfigValidationError",
    "AliasFileError",
    "DataNotFoundError",
    "StructuralError",
    "UnitsError",
    "UnrecognizedUnitError",
    "UnsupportedCaseError",
    # Type aliases
    "AliasMapping",
    "MetadataValue",
    "PathLike",
    "TextSource",
]
