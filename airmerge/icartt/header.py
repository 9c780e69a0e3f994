"""ICARTT header parser.

The ICARTT header is not self-describing. Its first twelve lines hold one
item each at fixed positions; after that come three variable-length
sections, each announced by its own length:

    1        number of header lines, file format index
    2-12     PI, affiliation, data source, mission, volume numbers, dates,
             data interval, independent variable, number of variables,
             scale factors, fill values
    13-...   one "name, unit" line per variable
    ...      special comments: count line, then that many free-text lines
    ...      normal comments: count line, then "LABEL: value" lines; the
             last line is the comma-separated table header

``HeaderParser`` walks these sections in order through a closed set of
states and never goes back. See
https://www-air.larc.nasa.gov/missions/etc/IcarttDataFormat.htm and
https://cdn.earthdata.nasa.gov/conduit/upload/6158/ESDS-RFC-029v2.pdf
"""

from __future__ import annotations

import dataclasses
import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from airmerge.core.exceptions import StructuralError, UnitsError, UnsupportedCaseError
from airmerge.core.types import MetadataValue
from airmerge.icartt.record import VariableDescriptor
from airmerge.io.lines import LineReader, split_array, split_line
from airmerge.logging import get_logger
from airmerge.units.aliases import DEFAULT_ALIASES
from airmerge.units.resolver import UnitEngine, get_default_engine, parse_unit_string

logger = get_logger(__name__)


# =============================================================================
# Fixed header fields
# =============================================================================


@dataclass(frozen=True)
class HeaderField:
    """How to read one single-line item of the fixed header.

    ``decode`` receives the line and must return one value per name in
    ``fields``; several values on one line (e.g. the two dates) are stored
    under several keys.
    """

    fields: tuple[str, ...]
    decode: Callable[[str], tuple[Any, ...]]


def _read_verbatim(line: str) -> tuple[str]:
    return (line.strip(),)


def _read_data_dates(line: str) -> tuple[date, date]:
    acq_yr, acq_mn, acq_dy, proc_yr, proc_mn, proc_dy = (int(v) for v in split_line(line))
    return date(acq_yr, acq_mn, acq_dy), date(proc_yr, proc_mn, proc_dy)


HDR_PI = 2
HDR_PI_AFFIL = HDR_PI + 1
HDR_DESCRIPTION = HDR_PI_AFFIL + 1
HDR_MISSION = HDR_DESCRIPTION + 1
HDR_FILE_VOL_NUM = HDR_MISSION + 1
HDR_DATA_UTC_DATES = HDR_FILE_VOL_NUM + 1
HDR_DATA_INTERVAL_SEC = HDR_DATA_UTC_DATES + 1
HDR_INDEPENDENT_VAR = HDR_DATA_INTERVAL_SEC + 1
HDR_N_VAR = HDR_INDEPENDENT_VAR + 1
HDR_SCALE_FACTORS = HDR_N_VAR + 1
HDR_FILL_VALS = HDR_SCALE_FACTORS + 1
HDR_START_BULK = HDR_FILL_VALS + 1

INDEPENDENT_VARIABLE_KEY = "Independent_variable"
SPECIAL_COMMENTS_KEY = "Special_comments"

HEADER_FIELDS: Mapping[int, HeaderField] = {
    HDR_PI: HeaderField(("PI",), _read_verbatim),
    HDR_PI_AFFIL: HeaderField(("PI_affiliation",), _read_verbatim),
    HDR_DESCRIPTION: HeaderField(("Data_description",), _read_verbatim),
    HDR_MISSION: HeaderField(("Mission",), _read_verbatim),
    HDR_DATA_UTC_DATES: HeaderField(("Acquisition_date", "Processing_date"), _read_data_dates),
    HDR_DATA_INTERVAL_SEC: HeaderField(("Data_interval",), _read_verbatim),
    HDR_INDEPENDENT_VAR: HeaderField((INDEPENDENT_VARIABLE_KEY,), _read_verbatim),
}

SUPPORTED_FORMAT_INDEX = "1001"
# Valid ICARTT format indices whose header layout this parser does not read
UNSUPPORTED_FORMAT_INDICES = frozenset({"2110", "2310"})


# =============================================================================
# Normal comment categories
# =============================================================================


class CommentCategory(Enum):
    """Keywords that start a value in the normal comments section.

    Values are regular expressions; every member but ``REVISION_NOTE`` is a
    literal label. ``REVISION_NOTE`` matches the numbered revision entries
    (``R0``, ``R1``, ...), which are stored under the label actually found.
    """

    PI_CONTACT_INFO = "PI_CONTACT_INFO"
    PLATFORM = "PLATFORM"
    LOCATION = "LOCATION"
    ASSOCIATED_DATA = "ASSOCIATED_DATA"
    INSTRUMENT_INFO = "INSTRUMENT_INFO"
    DATA_INFO = "DATA_INFO"
    UNCERTAINTY = "UNCERTAINTY"
    ULOD_FLAG = "ULOD_FLAG"
    ULOD_VALUE = "ULOD_VALUE"
    LLOD_FLAG = "LLOD_FLAG"
    LLOD_VALUE = "LLOD_VALUE"
    DM_CONTACT_INFO = "DM_CONTACT_INFO"
    PROJECT_INFO = "PROJECT_INFO"
    STIPULATIONS_ON_USE = "STIPULATIONS_ON_USE"
    OTHER_COMMENTS = "OTHER_COMMENTS"
    REVISION = "REVISION"
    REVISION_NOTE = r"R\d+"

    @classmethod
    def match_label(cls, line: str) -> str | None:
        """Return the label that starts ``line``, or None.

        A label only counts when it is followed directly by a colon.

        Examples
        --------
        >>> CommentCategory.match_label("ULOD_FLAG: -7777")
        'ULOD_FLAG'
        >>> CommentCategory.match_label("R1: second release")
        'R1'
        >>> CommentCategory.match_label("PLATFORMS: NASA DC-8") is None
        True
        """
        m = _CATEGORY_PATTERN.match(line)
        return m.group(1) if m else None


_CATEGORY_PATTERN = re.compile(
    r"^(" + "|".join(category.value for category in CommentCategory) + r")(?=:)"
)


# =============================================================================
# State machine
# =============================================================================


class HeaderSection(Enum):
    """Sections of the header, in the order they are read."""

    PREAMBLE = "preamble"
    FIXED_FIELDS = "fixed header fields"
    VARIABLE_NAMES = "variable names"
    SPECIAL_COMMENTS = "special comments"
    NORMAL_COMMENTS = "normal comments"
    COMPLETE = "complete"


NEXT_SECTION: Mapping[HeaderSection, HeaderSection] = {
    HeaderSection.PREAMBLE: HeaderSection.FIXED_FIELDS,
    HeaderSection.FIXED_FIELDS: HeaderSection.VARIABLE_NAMES,
    HeaderSection.VARIABLE_NAMES: HeaderSection.SPECIAL_COMMENTS,
    HeaderSection.SPECIAL_COMMENTS: HeaderSection.NORMAL_COMMENTS,
    HeaderSection.NORMAL_COMMENTS: HeaderSection.COMPLETE,
}


@dataclass(frozen=True)
class Header:
    """Result of parsing an ICARTT header.

    Attributes
    ----------
    metadata
        Header metadata in the order it was read.
    variables
        One descriptor per data column, independent variable first.
    """

    metadata: dict[str, MetadataValue]
    variables: list[VariableDescriptor]


class HeaderParser:
    """Parse the header of an ICARTT file from a ``LineReader``.

    Parameters
    ----------
    reader
        Line reader positioned at the first line of the file.
    aliases
        Unit alias table; defaults to ``DEFAULT_ALIASES``.
    engine
        Unit engine; defaults to the astropy engine.

    Examples
    --------
    >>> with open("flight.ict") as f:  # doctest: +SKIP
    ...     header = HeaderParser(LineReader(f)).parse()
    """

    def __init__(
        self,
        reader: LineReader,
        aliases: Mapping[str, Sequence[str]] | None = None,
        engine: UnitEngine | None = None,
    ) -> None:
        self.reader = reader
        self.aliases = DEFAULT_ALIASES if aliases is None else aliases
        self.engine = engine or get_default_engine()

        self.metadata: dict[str, MetadataValue] = {}
        self.n_header_lines = 0
        self.n_var = 0
        self.scale_factors: list[float] = []
        self.fill_values: list[float] = []
        self.variables: list[VariableDescriptor] = []
        self.table_header: list[str] = []

        self._handlers: dict[HeaderSection, Callable[[], None]] = {
            HeaderSection.PREAMBLE: self._read_preamble,
            HeaderSection.FIXED_FIELDS: self._read_fixed_fields,
            HeaderSection.VARIABLE_NAMES: self._read_variable_names,
            HeaderSection.SPECIAL_COMMENTS: self._read_special_comments,
            HeaderSection.NORMAL_COMMENTS: self._read_normal_comments,
        }

    def parse(self) -> Header:
        """Read all header sections and return metadata and variables.

        Raises
        ------
        StructuralError
            If the header does not follow the ICARTT layout.
        UnitsError
            If a variable's unit cannot be resolved.
        UnsupportedCaseError
            If the file uses an ICARTT format index this parser cannot read.
        """
        section = HeaderSection.PREAMBLE
        while section is not HeaderSection.COMPLETE:
            logger.debug(f"Reading {section.value}", extra={"line": self.reader.line_number + 1})
            self._handlers[section]()
            section = NEXT_SECTION[section]

        variables = self._finalize_variables()

        if self.reader.line_number != self.n_header_lines:
            logger.warning(
                "Header declares a different number of lines than were read",
                extra={"declared": self.n_header_lines, "read": self.reader.line_number},
            )
        return Header(metadata=self.metadata, variables=variables)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _read_preamble(self) -> None:
        tokens = split_line(self.reader.readline(HeaderSection.PREAMBLE.value))
        if len(tokens) < 2:
            raise StructuralError(
                "First line must hold the number of header lines and the file format index",
                line=1,
            )
        try:
            self.n_header_lines = int(tokens[0])
        except ValueError as e:
            raise StructuralError(
                f"Number of header lines is not an integer: {tokens[0]!r}", line=1
            ) from e

        ffi = tokens[1]
        if ffi in UNSUPPORTED_FORMAT_INDICES:
            raise UnsupportedCaseError(
                f"ICARTT file format index {ffi} is not supported; only "
                f"{SUPPORTED_FORMAT_INDEX} can be read",
                feature=f"FFI {ffi}",
            )
        if ffi != SUPPORTED_FORMAT_INDEX:
            raise StructuralError(f"Unknown ICARTT file format index {ffi!r}", line=1)

        self.metadata["n_header_lines"] = self.n_header_lines
        self.metadata["file_format_index"] = ffi
        if len(tokens) > 2:
            self.metadata["file_format_version"] = tokens[2]

    def _read_fixed_fields(self) -> None:
        for n_line in range(HDR_PI, HDR_START_BULK):
            line = self.reader.readline(HeaderSection.FIXED_FIELDS.value)
            if n_line in HEADER_FIELDS:
                header_field = HEADER_FIELDS[n_line]
                try:
                    values = header_field.decode(line)
                except ValueError as e:
                    raise StructuralError(
                        f"Cannot read {', '.join(header_field.fields)} from {line.strip()!r}: {e}",
                        line=n_line,
                    ) from e
                self.metadata.update(zip(header_field.fields, values))
            elif n_line == HDR_N_VAR:
                self.n_var = self._read_count(line, "number of variables", n_line)
            elif n_line == HDR_SCALE_FACTORS:
                self.scale_factors = split_array(line, float, n_line)
            elif n_line == HDR_FILL_VALS:
                self.fill_values = split_array(line, float, n_line)
            else:
                logger.debug("Ignoring header line", extra={"line": n_line, "text": line})

        for name, values, n_line in (
            ("scale factors", self.scale_factors, HDR_SCALE_FACTORS),
            ("fill values", self.fill_values, HDR_FILL_VALS),
        ):
            if len(values) != self.n_var:
                raise StructuralError(
                    f"Header declares {self.n_var} variables but lists {len(values)} {name}",
                    line=n_line,
                )

    def _read_variable_names(self) -> None:
        for _ in range(self.n_var):
            line = self.reader.readline(HeaderSection.VARIABLE_NAMES.value)
            self.variables.append(self.parse_variable(line, self.reader.line_number))
            logger.debug(
                "Read variable",
                extra={"variable": self.variables[-1].name, "line": self.reader.line_number},
            )

    def _read_special_comments(self) -> None:
        context = HeaderSection.SPECIAL_COMMENTS.value
        n_lines = self._read_count(self.reader.readline(context), context, self.reader.line_number)
        self.metadata[SPECIAL_COMMENTS_KEY] = "".join(
            self.reader.readline(context, keep_ends=True) for _ in range(n_lines)
        )

    def _read_normal_comments(self) -> None:
        """Read the labelled comments and the table header line.

        A ``LABEL:`` line starts a category. Any other line is stripped and
        appended, space-joined, to the current category; blank lines inside
        a category add nothing. Before the first label every line, blank or
        not, is a ``StructuralError``.
        """
        context = HeaderSection.NORMAL_COMMENTS.value
        n_lines = self._read_count(self.reader.readline(context), context, self.reader.line_number)
        if n_lines < 1:
            raise StructuralError(
                "Normal comments must include at least the table header line",
                line=self.reader.line_number,
            )

        current: str | None = None
        for _ in range(n_lines - 1):
            line = self.reader.readline(context)
            label = CommentCategory.match_label(line)
            if label is not None:
                current = label
                self.metadata[label] = line.partition(":")[2].strip()
            elif current is None:
                raise StructuralError(
                    "Normal comment line does not start with a known keyword and no "
                    "keyword has been found yet",
                    line=self.reader.line_number,
                )
            elif line.strip():
                self.metadata[current] = f"{self.metadata[current]} {line.strip()}".strip()

        # The last normal comment line is the table header
        self.table_header = split_line(self.reader.readline(context))

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _read_count(self, line: str, context: str, n_line: int) -> int:
        try:
            count = int(line.strip())
        except ValueError as e:
            raise StructuralError(
                f"Expected an integer {context} count, got {line.strip()!r}", line=n_line
            ) from e
        if count < 0:
            raise StructuralError(f"Negative {context} count {count}", line=n_line)
        return count

    def parse_variable(self, line: str, n_line: int | None = None) -> VariableDescriptor:
        """Parse a ``name, unit[, long name]`` line into a descriptor.

        The unit is normalized and resolved right away so that a bad unit
        fails with the line it came from.
        """
        tokens = split_line(line)
        if len(tokens) < 2 or not tokens[0]:
            raise StructuralError(
                f"Variable line {line.strip()!r} must be 'name, unit'", line=n_line
            )
        name, raw_unit = tokens[0], tokens[1]
        try:
            unit = parse_unit_string(raw_unit, self.aliases, self.engine)
        except UnitsError as e:
            raise UnitsError(
                f"Problem while converting unit {raw_unit!r} on line {n_line}: {e.message}",
                unit_string=raw_unit,
                rewritten=e.rewritten,
                line=n_line,
                cause=e.cause or e,
            ) from e
        return VariableDescriptor(
            name=name,
            unit=unit,
            raw_unit=raw_unit,
            long_name=", ".join(tokens[2:]),
        )

    def _finalize_variables(self) -> list[VariableDescriptor]:
        variables = [
            dataclasses.replace(variable, fill=fill, scale=scale)
            for variable, fill, scale in zip(self.variables, self.fill_values, self.scale_factors)
        ]
        independent = self.parse_variable(
            str(self.metadata[INDEPENDENT_VARIABLE_KEY]), HDR_INDEPENDENT_VAR
        )
        variables.insert(0, dataclasses.replace(independent, fill=math.nan, scale=1.0))
        check_variables_against_table_header(variables, self.table_header)
        return variables


def check_variables_against_table_header(
    variables: Sequence[VariableDescriptor], table_header: Sequence[str]
) -> None:
    """Check that variable names match the table header, in order.

    Raises
    ------
    StructuralError
        If the lengths differ or a name differs at some index.
    """
    if len(variables) != len(table_header):
        raise StructuralError(
            f"The number of variables defined ({len(variables)}) is different from "
            f"the number in the table header ({len(table_header)})"
        )
    for i, (variable, column) in enumerate(zip(variables, table_header)):
        if variable.name != column:
            raise StructuralError(
                f"Variable number {i} has a different name ({variable.name}) than in "
                f"the table header ({column})"
            )


def check_header_length(header: Header, lines_read: int) -> None:
    """Check that the input reached the declared last header line.

    ``lines_read`` is the number of lines consumed once the whole input has
    been read. A declared count below the real header length only triggers
    the warning logged by ``HeaderParser.parse``.

    Raises
    ------
    StructuralError
        If the input ends before line ``n_header_lines``.
    """
    declared = int(header.metadata["n_header_lines"])
    if lines_read < declared:
        raise StructuralError(
            f"Input ends at line {lines_read} but the header declares {declared} lines",
            line=lines_read,
        )


def parse_header(
    reader: LineReader,
    aliases: Mapping[str, Sequence[str]] | None = None,
    engine: UnitEngine | None = None,
) -> Header:
    """Parse an ICARTT header; see ``HeaderParser``."""
    return HeaderParser(reader, aliases=aliases, engine=engine).parse()
