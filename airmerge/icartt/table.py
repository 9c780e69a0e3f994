"""Decode the data table that follows an ICARTT header."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from airmerge.core.exceptions import StructuralError
from airmerge.icartt.record import VariableDescriptor
from airmerge.io.lines import LineReader, split_line
from airmerge.logging import get_logger
from airmerge.units.resolver import UnitEngine, get_default_engine

logger = get_logger(__name__)


def _parse_row(tokens: Sequence[str], row: int, line_number: int) -> list[float]:
    try:
        return [float(token) for token in tokens]
    except ValueError as e:
        raise StructuralError(
            f"Data row {row} contains a value that is not a number: {e}",
            line=line_number,
            row=row,
        ) from e


def read_table(reader: LineReader, n_columns: int) -> np.ndarray:
    """Read every remaining line as a data row.

    Whitespace-only lines are skipped.

    Returns
    -------
    np.ndarray
        Float array of shape ``(n_rows, n_columns)``.

    Raises
    ------
    StructuralError
        If a row has the wrong number of values or a non-numeric value.
    """
    rows: list[list[float]] = []
    for line_number, line in reader.remaining():
        if not line.strip():
            continue
        tokens = split_line(line)
        row = len(rows)
        if len(tokens) != n_columns:
            raise StructuralError(
                f"Data row {row} has {len(tokens)} values but {n_columns} variables are declared",
                line=line_number,
                row=row,
            )
        rows.append(_parse_row(tokens, row, line_number))

    table = np.empty((len(rows), n_columns), dtype=float)
    if rows:
        table[:] = rows
    return table


def decode_table(
    reader: LineReader,
    descriptors: Sequence[VariableDescriptor],
    engine: UnitEngine | None = None,
) -> list[tuple[VariableDescriptor, Any]]:
    """Decode the data table into one unit-tagged column per descriptor.

    Parameters
    ----------
    reader
        Line reader positioned just after the header.
    descriptors
        Variable descriptors in column order, independent variable first.
    engine
        Unit engine used to tag values with their unit.

    Returns
    -------
    list
        ``(descriptor, values)`` pairs in column order.
    """
    engine = engine or get_default_engine()
    table = read_table(reader, len(descriptors))
    logger.debug(
        "Read data table",
        extra={"rows": table.shape[0], "columns": table.shape[1]},
    )
    return [
        (descriptor, engine.attach(table[:, i].copy(), descriptor.unit))
        for i, descriptor in enumerate(descriptors)
    ]
