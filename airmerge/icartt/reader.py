"""ICARTT (International Consortium for Atmospheric Research on Transport
and Transformation) file reader.

This module provides ``read_icartt_file`` and the ``ICARTTReader`` class for
reading FFI 1001 ICARTT files into a ``ParsedFile`` whose columns carry
their physical units.
"""

from __future__ import annotations

from contextlib import nullcontext
from pathlib import Path
from typing import IO, Any, ContextManager

from airmerge.config.parser import load_options
from airmerge.config.schema import ReaderOptions
from airmerge.core.exceptions import DataNotFoundError
from airmerge.core.types import AliasMapping, PathLike, PathSequence, TextSource
from airmerge.icartt.header import check_header_length, parse_header
from airmerge.icartt.record import ParsedFile, assemble_record
from airmerge.icartt.table import decode_table
from airmerge.io.lines import LineReader
from airmerge.logging import get_logger
from airmerge.units.aliases import AliasTable, build_alias_table
from airmerge.units.resolver import UnitEngine, get_default_engine

logger = get_logger(__name__)


def _open_source(source: TextSource, encoding: str) -> ContextManager[IO[str]]:
    """Open a path for reading, or wrap an open stream without closing it."""
    if hasattr(source, "readline"):
        return nullcontext(source)  # type: ignore[arg-type]
    path = Path(source)  # type: ignore[arg-type]
    if not path.is_file():
        raise DataNotFoundError(f"ICARTT file not found: {path}", path=path)
    return open(path, encoding=encoding, errors="replace")


def read_stream(
    stream: IO[str],
    aliases: AliasTable,
    engine: UnitEngine,
) -> ParsedFile:
    """Parse an open ICARTT text stream: header, then data table.

    The data table runs to the end of the input, which must reach the
    declared last header line.
    """
    reader = LineReader(stream)
    header = parse_header(reader, aliases=aliases, engine=engine)
    columns = decode_table(reader, header.variables, engine=engine)
    check_header_length(header, reader.line_number)
    return assemble_record(header.metadata, columns)


def _read_source(
    source: TextSource, encoding: str, aliases: AliasTable, engine: UnitEngine
) -> ParsedFile:
    with _open_source(source, encoding) as stream:
        parsed = read_stream(stream, aliases, engine)
    logger.info(
        "Read ICARTT file",
        extra={
            "source": str(getattr(source, "name", source)),
            "variables": len(parsed),
            "rows": parsed.n_rows,
        },
    )
    return parsed


def read_icartt_file(
    source: TextSource,
    *,
    extra_aliases: AliasMapping | None = None,
    extra_alias_files: PathLike | PathSequence | None = None,
    alias_dict_overwrite: bool = False,
    no_default_aliases: bool = False,
    engine: UnitEngine | None = None,
    encoding: str = "utf-8",
) -> ParsedFile:
    """Read an ICARTT file into a ``ParsedFile``.

    Parameters
    ----------
    source
        Path to the file, or an already-open text stream. Streams are read
        but not closed.
    extra_aliases
        Extra unit aliases, applied after the defaults and alias files.
    extra_alias_files
        Alias file(s) applied in order after the defaults.
    alias_dict_overwrite
        Whether ``extra_aliases`` replaces the aliases already collected
        for a canon token instead of adding to them.
    no_default_aliases
        Start from an empty alias table.
    engine
        Unit engine; defaults to the astropy engine.
    encoding
        Text encoding used when ``source`` is a path. Undecodable bytes
        are replaced rather than raising.

    Returns
    -------
    ParsedFile
        Header metadata and one unit-tagged column per variable, the
        independent variable first.

    Raises
    ------
    DataNotFoundError
        If ``source`` is a path that does not exist.
    StructuralError
        If the file does not follow the ICARTT layout.
    UnitsError
        If a variable's unit cannot be resolved.
    UnsupportedCaseError
        If the file uses an unsupported ICARTT format index.

    Examples
    --------
    >>> parsed = read_icartt_file("flight.ict")  # doctest: +SKIP
    >>> parsed["Altitude"].values  # doctest: +SKIP
    <Quantity [1000., 1100.] m>
    """
    aliases = build_alias_table(
        extra_aliases,
        extra_alias_files,
        overwrite=alias_dict_overwrite,
        no_default_aliases=no_default_aliases,
    )
    return _read_source(source, encoding, aliases, engine or get_default_engine())


class ICARTTReader:
    """Reader for ICARTT files with a fixed set of options.

    The alias table is built once and reused for every file.

    Parameters
    ----------
    options
        Reader options; defaults to ``ReaderOptions()``.
    engine
        Unit engine; defaults to the astropy engine.

    Examples
    --------
    >>> reader = ICARTTReader.from_config("reader.yaml")  # doctest: +SKIP
    >>> parsed = reader.read("flight.ict")  # doctest: +SKIP
    """

    def __init__(
        self,
        options: ReaderOptions | None = None,
        engine: UnitEngine | None = None,
    ) -> None:
        self.options = options or ReaderOptions()
        self.engine = engine or get_default_engine()
        self.aliases = build_alias_table(
            self.options.extra_aliases,
            self.options.extra_alias_files,
            overwrite=self.options.alias_dict_overwrite,
            no_default_aliases=self.options.no_default_aliases,
        )

    @property
    def name(self) -> str:
        """Return reader name."""
        return "icartt"

    @classmethod
    def from_config(cls, source: Any, engine: UnitEngine | None = None) -> ICARTTReader:
        """Create a reader from a YAML file, stream, or string."""
        return cls(load_options(source), engine=engine)

    def read(self, source: TextSource) -> ParsedFile:
        """Read one ICARTT file; see ``read_icartt_file``."""
        return _read_source(source, self.options.encoding, self.aliases, self.engine)

    def read_many(self, sources: PathSequence) -> list[ParsedFile]:
        """Read several ICARTT files in order.

        Raises
        ------
        DataNotFoundError
            If no sources are given or any path does not exist.
        """
        if not sources:
            raise DataNotFoundError("No ICARTT files provided")
        missing = [s for s in sources if not Path(s).is_file()]
        if missing:
            raise DataNotFoundError(f"ICARTT files not found: {missing}")
        return [self.read(source) for source in sources]
