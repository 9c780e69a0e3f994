"""YAML loading for ICARTT reader options.

Options can live at the top level of a YAML document or under a
``reader:`` key, so they can share a file with other settings::

    reader:
      extra_alias_files: [campaign_aliases.txt]
      extra_aliases:
        hPa: [mbar, millibar]
      alias_dict_overwrite: false
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TextIO

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from airmerge.config.schema import ReaderOptions
from airmerge.core.exceptions import ConfigurationError, ConfigValidationError

READER_SECTION = "reader"


def _is_file(source: str | Path) -> bool:
    try:
        return Path(source).is_file()
    except OSError:
        # YAML text too long to be a file name
        return False


def load_yaml(source: str | Path | TextIO) -> dict[str, Any]:
    """Load raw YAML from a file path, file object, or YAML string.

    Raises
    ------
    ConfigurationError
        If the YAML cannot be parsed or its root is not a mapping.

    Examples
    --------
    >>> load_yaml("reader:\\n  no_default_aliases: true")
    {'reader': {'no_default_aliases': True}}
    """
    if isinstance(source, Path) and not source.is_file():
        raise ConfigurationError(f"Configuration file not found: {source}")
    try:
        if isinstance(source, (str, Path)) and _is_file(source):
            with open(source, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            # YAML text or an open stream
            data = yaml.safe_load(source)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"YAML root must be a mapping, got {type(data).__name__}")
    return data


def validate_options(data: dict[str, Any]) -> ReaderOptions:
    """Validate a dictionary as ``ReaderOptions``.

    Raises
    ------
    ConfigValidationError
        If validation fails; ``field`` names the first offending option.
    """
    try:
        return ReaderOptions.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigValidationError(
            f"Invalid reader options: {first['msg']}",
            field=field,
            value=first.get("input"),
        ) from e


def load_options(source: str | Path | TextIO) -> ReaderOptions:
    """Load and validate reader options from YAML.

    Relative alias file paths are resolved against the YAML file's
    directory when ``source`` is a file.

    Examples
    --------
    >>> load_options("extra_aliases: {hr: hours}").extra_aliases
    {'hr': ['hours']}
    """
    data = load_yaml(source)
    if READER_SECTION in data:
        data = data[READER_SECTION] or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"'{READER_SECTION}' section must be a mapping")

    options = validate_options(data)

    if isinstance(source, (str, Path)) and _is_file(source):
        base = Path(source).parent
        resolved = [
            path if path.is_absolute() else base / path for path in options.extra_alias_files
        ]
        options = options.model_copy(update={"extra_alias_files": resolved})
    return options


def options_to_yaml(options: ReaderOptions) -> str:
    """Convert reader options to a YAML string under the ``reader`` key."""
    data = options.model_dump(mode="json", exclude_defaults=True)
    result: str = yaml.safe_dump({READER_SECTION: data}, default_flow_style=False, sort_keys=False)
    return result
