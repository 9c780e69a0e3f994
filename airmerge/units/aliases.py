"""Unit alias tables.

ICARTT files are written by many instrument teams and spell the same unit
many ways ("hour", "deg", "Degs", "%"). An alias table maps each canon token,
the spelling the unit engine understands, to the alternate spellings that
should be rewritten to it.

Tables are immutable. Every merge step returns a new table, so the order in
which defaults, alias files and a caller dictionary are combined is explicit:

>>> table = DEFAULT_ALIASES.with_aliases("hr", ["hours"])
>>> table["hr"]
('hour', 'hours')
>>> DEFAULT_ALIASES["hr"]
('hour',)

Alias files hold one canon token per line::

    °: degree, degrees : replace
    hr: hours
    : #

The optional trailing mode is ``append`` (default) or ``replace``;
``replace`` drops whatever aliases were accumulated for that token before the
line is applied.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from airmerge.core.exceptions import AliasFileError, DataNotFoundError
from airmerge.core.types import AliasMapping, AliasValues, PathLike, PathSequence
from airmerge.logging import get_logger

logger = get_logger(__name__)


class AliasMode(Enum):
    """How an alias file line combines with aliases already accumulated."""

    APPEND = "append"
    REPLACE = "replace"


@dataclass(frozen=True)
class AliasEntry:
    """One parsed line of an alias file."""

    canon: str
    aliases: tuple[str, ...]
    mode: AliasMode = AliasMode.APPEND


def _as_alias_tuple(values: AliasValues) -> tuple[str, ...]:
    if isinstance(values, str):
        values = (values,)
    seen: dict[str, None] = {}
    for value in values:
        alias = value.strip()
        if alias:
            seen.setdefault(alias, None)
    return tuple(seen)


class AliasTable(Mapping[str, tuple[str, ...]]):
    """Read-only mapping from canon unit token to its aliases.

    Canon tokens and aliases are whitespace-stripped; duplicate aliases are
    dropped keeping first-seen order. The empty string is a valid canon
    token and means "remove the alias from the unit string".

    Parameters
    ----------
    entries
        Initial mapping of canon token to one alias or a sequence of them.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: AliasMapping | None = None) -> None:
        table: dict[str, tuple[str, ...]] = {}
        for canon, values in (entries or {}).items():
            key = canon.strip()
            table[key] = _as_alias_tuple((*table.get(key, ()), *_as_alias_tuple(values)))
        self._entries = table

    def __getitem__(self, canon: str) -> tuple[str, ...]:
        return self._entries[canon]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AliasTable({self._entries!r})"

    def with_aliases(
        self, canon: str, aliases: AliasValues, *, replace: bool = False
    ) -> AliasTable:
        """Return a new table with ``aliases`` added for ``canon``.

        Parameters
        ----------
        canon
            Canon token the aliases rewrite to.
        aliases
            One alias or a sequence of aliases.
        replace
            Discard the aliases ``canon`` already has before adding.
        """
        canon = canon.strip()
        entries = dict(self._entries)
        existing = () if replace else entries.get(canon, ())
        entries[canon] = _as_alias_tuple((*existing, *_as_alias_tuple(aliases)))
        return AliasTable(entries)

    def apply(self, entries: Iterable[AliasEntry]) -> AliasTable:
        """Return a new table with alias-file entries applied in order."""
        table = self
        for entry in entries:
            table = table.with_aliases(
                entry.canon, entry.aliases, replace=entry.mode is AliasMode.REPLACE
            )
        return table

    def merged(self, extra: AliasMapping, *, overwrite: bool = False) -> AliasTable:
        """Return a new table combined with a caller-supplied mapping.

        Parameters
        ----------
        extra
            Mapping of canon token to alias(es).
        overwrite
            If True, an entry in ``extra`` replaces the aliases of a matching
            canon token; otherwise the aliases are unioned.
        """
        table = self
        for canon, aliases in extra.items():
            table = table.with_aliases(canon, aliases, replace=overwrite)
        return table

    def to_text(self) -> str:
        """Render the table in alias-file syntax (one ``replace`` line per token)."""
        lines = [
            f"{canon}: {', '.join(aliases)} : {AliasMode.REPLACE.value}"
            for canon, aliases in self._entries.items()
        ]
        return "\n".join(lines) + "\n" if lines else ""


# Aliases are tried longest first, whatever order they are listed in here.
DEFAULT_ALIASES = AliasTable(
    {
        "°": ("degs", "deg", "Degs"),
        "hr": ("hour",),
        "percent": ("%",),
        "std_m": ("std m",),
        "nm": ("nanometers",),
        "": ("#",),
        "s": ("seconds", "secs", "sec"),
        "m": ("meters", "metres"),
    }
)


def parse_alias_line(line: str, path: PathLike | None = None, line_number: int | None = None) -> AliasEntry:
    """Parse one ``CANON: alias1, alias2[: MODE]`` line.

    Raises
    ------
    AliasFileError
        If the line has no colon, too many colons, or an unknown mode.
    """
    parts = line.split(":")
    if len(parts) < 2:
        raise AliasFileError(
            f"Alias line {line.strip()!r} has no ':' separating the unit from its aliases",
            path=path,
            line=line_number,
        )
    if len(parts) > 3:
        raise AliasFileError(
            f"Alias line {line.strip()!r} has more than two ':' separators",
            path=path,
            line=line_number,
        )

    mode = AliasMode.APPEND
    if len(parts) == 3:
        mode_str = parts[2].strip().lower()
        try:
            mode = AliasMode(mode_str)
        except ValueError:
            valid = ", ".join(m.value for m in AliasMode)
            raise AliasFileError(
                f"Unknown alias mode {mode_str!r}. Valid modes: {valid}",
                path=path,
                line=line_number,
            ) from None

    return AliasEntry(
        canon=parts[0].strip(),
        aliases=_as_alias_tuple(parts[1].split(",")),
        mode=mode,
    )


def read_alias_file(path: PathLike) -> list[AliasEntry]:
    """Read an alias file into a list of entries, in file order.

    Blank lines and lines starting with ``#`` are skipped.

    Raises
    ------
    DataNotFoundError
        If the file does not exist.
    AliasFileError
        If a line is malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise DataNotFoundError(f"Alias file not found: {path}", path=path)

    entries = []
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip() or line.startswith("#"):
                continue
            entries.append(parse_alias_line(line, path=path, line_number=line_number))
    logger.debug("Read alias file", extra={"path": str(path), "entries": len(entries)})
    return entries


def build_alias_table(
    extra_aliases: AliasMapping | None = None,
    extra_alias_files: PathLike | PathSequence | None = None,
    overwrite: bool = False,
    no_default_aliases: bool = False,
) -> AliasTable:
    """Combine default aliases, alias files and a caller mapping.

    Parameters
    ----------
    extra_aliases
        Mapping of canon token to alias(es), applied last.
    extra_alias_files
        One alias file or a sequence of them, applied in order.
    overwrite
        Whether ``extra_aliases`` replaces (True) or extends (False) the
        aliases accumulated for matching tokens.
    no_default_aliases
        Start from an empty table instead of ``DEFAULT_ALIASES``.

    Examples
    --------
    >>> table = build_alias_table({"nm": "nanometres"}, overwrite=True)
    >>> table["nm"]
    ('nanometres',)
    """
    table = AliasTable() if no_default_aliases else DEFAULT_ALIASES

    if extra_alias_files is not None:
        if isinstance(extra_alias_files, (str, os.PathLike)):
            extra_alias_files = [extra_alias_files]
        for alias_file in extra_alias_files:
            table = table.apply(read_alias_file(alias_file))

    if extra_aliases:
        table = table.merged(extra_aliases, overwrite=overwrite)
    return table
