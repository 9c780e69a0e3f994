"""Type aliases for airmerge.

Usage:
    from airmerge.core.types import PathLike, AliasMapping
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from os import PathLike as OSPathLike
from pathlib import Path
from typing import TextIO, TypeAlias, Union

# =============================================================================
# Path Types
# =============================================================================

PathLike: TypeAlias = Union[str, Path, OSPathLike[str]]
"""Type for file system paths - accepts str, Path, or os.PathLike."""

PathSequence: TypeAlias = Sequence[PathLike]
"""Sequence of file paths."""

TextSource: TypeAlias = Union[PathLike, TextIO]
"""A path to an ICARTT file or an already-open text stream."""

# =============================================================================
# Unit Types
# =============================================================================

AliasValues: TypeAlias = Union[str, Sequence[str]]
"""One alias or a sequence of aliases for a canon unit token."""

AliasMapping: TypeAlias = Mapping[str, AliasValues]
"""Mapping from canon unit token to its alias spelling(s)."""

# =============================================================================
# Data Types
# =============================================================================

MetadataValue: TypeAlias = Union[str, int, date]
"""Value stored in an ICARTT metadata record."""
