"""Unit handling for ICARTT files.

- ``aliases``: alias tables mapping canon unit tokens to alternate spellings
- ``normalize``: rewrite raw unit strings into canonical expressions
- ``resolver``: resolve canonical expressions through a unit engine
- ``definitions``: ICARTT units registered with astropy
"""

from airmerge.units.aliases import (
    DEFAULT_ALIASES,
    AliasEntry,
    AliasMode,
    AliasTable,
    build_alias_table,
    parse_alias_line,
    read_alias_file,
)
from airmerge.units.normalize import normalize_unit_string
from airmerge.units.resolver import (
    AstropyUnitEngine,
    UnitEngine,
    get_default_engine,
    parse_unit_string,
    resolve_unit_string,
)

__all__ = [
    # Aliases
    "DEFAULT_ALIASES",
    "AliasEntry",
    "AliasMode",
    "AliasTable",
    "build_alias_table",
    "parse_alias_line",
    "read_alias_file",
    # Normalization
    "normalize_unit_string",
    # Resolution
    "AstropyUnitEngine",
    "UnitEngine",
    "get_default_engine",
    "parse_unit_string",
    "resolve_unit_string",
]
