"""Synthetic ICARTT files for tests.

``SyntheticICARTT`` describes a small but complete FFI 1001 file. Every
field has a sensible default, so a test only overrides what it exercises;
the header line count is computed unless given explicitly.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import numpy as np

from airmerge.core.exceptions import UnrecognizedUnitError
from airmerge.io.lines import LineReader


def _name(variable_line: str) -> str:
    return variable_line.split(",")[0].strip()


@dataclass
class SyntheticICARTT:
    """Description of a synthetic ICARTT file.

    Parameters
    ----------
    variables
        Dependent variable lines (``"name, unit"``), in column order.
    rows
        Data lines, independent variable first.
    scale_factors, fill_values
        Header lines 11 and 12; one ``1`` / ``-9999`` per variable if None.
    table_header
        Last normal comment line; derived from the variable names if None.
    n_header_lines
        Declared header line count; computed from the layout if None.

    Examples
    --------
    >>> text = SyntheticICARTT(rows=["0, 1.5, 100"]).text()
    >>> text.splitlines()[0]
    '34, 1001'
    """

    pi: str = "Doe, Jane"
    affiliation: str = "NASA Langley Research Center"
    description: str = "Synthetic in-situ measurements"
    mission: str = "TESTCAMPAIGN"
    volume: str = "1, 1"
    dates: str = "2024, 01, 15, 2024, 02, 01"
    interval: str = "1.0"
    independent: str = "Time_Start, seconds, elapsed time from 0000 UTC"
    variables: list[str] = field(default_factory=lambda: ["O3, ppbv", "Altitude, m"])
    scale_factors: str | None = None
    fill_values: str | None = None
    special_comments: list[str] = field(default_factory=list)
    normal_comments: list[str] = field(
        default_factory=lambda: [
            "PI_CONTACT_INFO: jane.doe@example.org",
            "PLATFORM: NASA DC-8",
            "LOCATION: aircraft position in the merge files",
            "ASSOCIATED_DATA: N/A",
            "INSTRUMENT_INFO: UV photometer",
            "DATA_INFO: 1 second averages",
            "UNCERTAINTY: 5%",
            "ULOD_FLAG: -7777",
            "ULOD_VALUE: N/A",
            "LLOD_FLAG: -8888",
            "LLOD_VALUE: N/A",
            "DM_CONTACT_INFO: N/A",
            "PROJECT_INFO: synthetic test campaign",
            "STIPULATIONS_ON_USE: none",
            "OTHER_COMMENTS: N/A",
            "REVISION: R0",
            "R0: first release",
        ]
    )
    table_header: str | None = None
    rows: list[str] = field(default_factory=lambda: ["0, 30.5, 1000", "1, 31.0, 1100"])
    format_index: str = "1001"
    n_header_lines: int | None = None

    @property
    def names(self) -> list[str]:
        """Column names, independent variable first."""
        return [_name(self.independent)] + [_name(v) for v in self.variables]

    def header_lines(self) -> list[str]:
        """All header lines after the first one."""
        n_var = len(self.variables)
        lines = [
            self.pi,
            self.affiliation,
            self.description,
            self.mission,
            self.volume,
            self.dates,
            self.interval,
            self.independent,
            str(n_var),
            self.scale_factors if self.scale_factors is not None else ", ".join(["1"] * n_var),
            self.fill_values if self.fill_values is not None else ", ".join(["-9999"] * n_var),
            *self.variables,
            str(len(self.special_comments)),
            *self.special_comments,
            str(len(self.normal_comments) + 1),
            *self.normal_comments,
            self.table_header if self.table_header is not None else ", ".join(self.names),
        ]
        return lines

    def text(self) -> str:
        """Render the whole file."""
        body = self.header_lines()
        n_header = self.n_header_lines if self.n_header_lines is not None else len(body) + 1
        lines = [f"{n_header}, {self.format_index}", *body, *self.rows]
        return "\n".join(lines) + "\n"

    def stream(self) -> io.StringIO:
        """Return the file as an open text stream."""
        return io.StringIO(self.text())

    def write(self, path: Path) -> Path:
        """Write the file to ``path`` and return the path."""
        path.write_text(self.text(), encoding="utf-8")
        return path

    def with_(self, **changes: Any) -> SyntheticICARTT:
        """Return a copy with some fields changed."""
        return replace(self, **changes)


def altitude_example() -> SyntheticICARTT:
    """One dependent variable ``Altitude`` in meters, two rows."""
    return SyntheticICARTT(
        independent="Time, seconds",
        variables=["Altitude, meters"],
        scale_factors="1.0",
        fill_values="-999999.0",
        normal_comments=[],
        rows=["0, 1000", "1, 1100"],
    )


class FakeUnitEngine:
    """Unit engine that only knows a fixed set of expressions.

    Every resolved expression is recorded in ``calls``; units are returned
    as the expression string itself.
    """

    def __init__(self, known: Sequence[str] = ()) -> None:
        self.known = set(known)
        self.calls: list[str] = []

    def resolve(self, expression: str) -> str:
        self.calls.append(expression)
        if expression in self.known:
            return expression
        symbol = expression.split()[0] if expression.split() else expression
        raise UnrecognizedUnitError(
            f"Unknown unit {symbol!r}", symbol=symbol, unit_string=expression
        )

    def attach(self, values: np.ndarray, unit: Any) -> np.ndarray:
        return np.asarray(values, dtype=float)


def line_reader(text: str) -> LineReader:
    """Line reader over literal text."""
    return LineReader(io.StringIO(text))
