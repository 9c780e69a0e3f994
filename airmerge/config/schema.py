"""Pydantic models for ICARTT reader options.

The options mirror the keyword arguments of ``read_icartt_file`` so the same
settings can come from code or from a YAML file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StrictModel(BaseModel):
    """Base model with strict validation settings."""

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        frozen=True,
    )


class ReaderOptions(StrictModel):
    """Options controlling how ICARTT files are read.

    Parameters
    ----------
    extra_aliases
        Mapping of canon unit token to the alias(es) that should be
        rewritten to it. Applied after the defaults and alias files.
    extra_alias_files
        Alias files applied in order after the defaults. A single path is
        accepted.
    alias_dict_overwrite
        If True, ``extra_aliases`` replaces the aliases accumulated for a
        canon token instead of adding to them.
    no_default_aliases
        Start from an empty alias table.
    encoding
        Text encoding of the ICARTT files.
    """

    extra_aliases: dict[str, list[str]] = Field(default_factory=dict)
    extra_alias_files: list[Path] = Field(default_factory=list)
    alias_dict_overwrite: bool = False
    no_default_aliases: bool = False
    encoding: str = "utf-8"

    @field_validator("extra_aliases", mode="before")
    @classmethod
    def parse_aliases(cls, v: Any) -> Any:
        """Accept a single alias string per canon token."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {
                # A YAML key written as "" or left empty means "remove the alias"
                ("" if key is None else str(key)): [value] if isinstance(value, str) else value
                for key, value in v.items()
            }
        return v

    @field_validator("extra_alias_files", mode="before")
    @classmethod
    def parse_alias_files(cls, v: Any) -> Any:
        """Accept a single path as well as a list."""
        if v is None:
            return []
        if isinstance(v, (str, Path)):
            return [v]
        return v
