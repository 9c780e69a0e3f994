"""Tests for reader option models (Pydantic)."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from airmerge.config.schema import ReaderOptions


class TestReaderOptions:
    """Tests for ReaderOptions."""

    def test_default_values(self) -> None:
        """Test default values are set correctly."""
        options = ReaderOptions()
        assert options.extra_aliases == {}
        assert options.extra_alias_files == []
        assert options.alias_dict_overwrite is False
        assert options.no_default_aliases is False
        assert options.encoding == "utf-8"

    def test_single_alias_string(self) -> None:
        """A single alias string becomes a one-element list."""
        options = ReaderOptions(extra_aliases={"hr": "hours", "nm": ["nanometres"]})
        assert options.extra_aliases == {"hr": ["hours"], "nm": ["nanometres"]}

    def test_empty_canon_key(self) -> None:
        """A null YAML key is read as the empty canon token."""
        options = ReaderOptions.model_validate({"extra_aliases": {None: "#"}})
        assert options.extra_aliases == {"": ["#"]}

    def test_single_alias_file(self) -> None:
        """A single alias file path becomes a list of paths."""
        options = ReaderOptions(extra_alias_files="campaign_aliases.txt")
        assert options.extra_alias_files == [Path("campaign_aliases.txt")]

    def test_null_values(self) -> None:
        """Null collections fall back to empty ones."""
        options = ReaderOptions.model_validate({"extra_aliases": None, "extra_alias_files": None})
        assert options.extra_aliases == {}
        assert options.extra_alias_files == []

    def test_strips_whitespace(self) -> None:
        """String values are stripped."""
        assert ReaderOptions(encoding=" latin-1 ").encoding == "latin-1"

    def test_unknown_field_rejected(self) -> None:
        """Unknown options are rejected."""
        with pytest.raises(ValidationError):
            ReaderOptions.model_validate({"verbose": True})

    def test_frozen(self) -> None:
        """Options cannot be changed after creation."""
        options = ReaderOptions()
        with pytest.raises(ValidationError):
            options.no_default_aliases = True  # type: ignore[misc]

    def test_invalid_alias_type(self) -> None:
        """Alias values must be strings."""
        with pytest.raises(ValidationError):
            ReaderOptions.model_validate({"extra_aliases": {"hr": [1, 2]}})
