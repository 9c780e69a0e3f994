"""Data model for parsed ICARTT files.

A parse produces exactly one ``ParsedFile``: an ordered, read-only metadata
mapping plus one ``DataColumn`` per variable. Columns keep their values as a
unit-tagged array (an ``astropy.units.Quantity`` with the default engine),
so every number travels with its unit.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any

import numpy as np
import xarray as xr

from airmerge.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VariableDescriptor:
    """Name, unit, fill value and scale factor of one ICARTT variable.

    Attributes
    ----------
    name
        Variable name as written in the header.
    unit
        Resolved unit value.
    fill
        Fill value marking missing data (NaN for the independent variable).
    scale
        Scale factor.
    raw_unit
        Unit text exactly as written in the header.
    long_name
        Any text after the unit on the variable line.
    """

    name: str
    unit: Any
    fill: float = math.nan
    scale: float = 1.0
    raw_unit: str = ""
    long_name: str = ""


@dataclass(frozen=True, eq=False)
class DataColumn:
    """One column of the data table, tagged with its unit.

    Attributes
    ----------
    name
        Variable name.
    unit
        Resolved unit value.
    fill
        Fill value for this variable.
    scale
        Scale factor for this variable.
    values
        Read-only unit-tagged array, one element per data row.
    raw_unit
        Unit text exactly as written in the header.
    long_name
        Optional long name from the header.
    """

    name: str
    unit: Any
    fill: float
    scale: float
    values: Any
    raw_unit: str = ""
    long_name: str = ""

    def __len__(self) -> int:
        return len(self.values)

    @property
    def magnitudes(self) -> np.ndarray:
        """The values without their unit, as a float array."""
        return np.asarray(getattr(self.values, "value", self.values), dtype=float)

    @classmethod
    def from_descriptor(cls, descriptor: VariableDescriptor, values: Any) -> DataColumn:
        """Build a column from a descriptor and its decoded values."""
        return cls(
            name=descriptor.name,
            unit=descriptor.unit,
            fill=descriptor.fill,
            scale=descriptor.scale,
            values=values,
            raw_unit=descriptor.raw_unit,
            long_name=descriptor.long_name,
        )


@dataclass(frozen=True, eq=False)
class ParsedFile:
    """A whole ICARTT file: header metadata plus unit-tagged columns.

    Columns are ordered as in the file, the independent variable first.

    Examples
    --------
    >>> parsed = read_icartt_file("flight.ict")  # doctest: +SKIP
    >>> parsed.variables  # doctest: +SKIP
    ('Time_Start', 'O3')
    >>> parsed["O3"].unit  # doctest: +SKIP
    Unit("ppbv")
    """

    metadata: Mapping[str, Any]
    columns: Mapping[str, DataColumn] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if not isinstance(self.columns, MappingProxyType):
            object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def __getitem__(self, name: str) -> DataColumn:
        return self.columns[name]

    def __contains__(self, name: object) -> bool:
        return name in self.columns

    def __iter__(self) -> Iterator[str]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def variables(self) -> tuple[str, ...]:
        """Column names in file order."""
        return tuple(self.columns)

    @property
    def n_rows(self) -> int:
        """Number of data rows."""
        return len(next(iter(self.columns.values()), ()))

    def to_dataset(self) -> xr.Dataset:
        """Convert to an xarray Dataset indexed by the independent variable.

        Each column becomes a variable with ``units``, ``fill_value`` and
        ``scale_factor`` attributes; metadata become dataset attributes.
        Values are left as in the file (fill values are not masked).
        """
        if not self.columns:
            return xr.Dataset(attrs=_metadata_attrs(self.metadata))

        columns = list(self.columns.values())
        index = columns[0]
        coords = {index.name: (index.name, index.magnitudes, _column_attrs(index))}
        data_vars = {
            column.name: (index.name, column.magnitudes, _column_attrs(column))
            for column in columns[1:]
        }
        return xr.Dataset(data_vars, coords=coords, attrs=_metadata_attrs(self.metadata))


def _column_attrs(column: DataColumn) -> dict[str, Any]:
    attrs: dict[str, Any] = {
        "units": str(column.unit),
        "raw_units": column.raw_unit,
        "fill_value": column.fill,
        "scale_factor": column.scale,
    }
    if column.long_name:
        attrs["long_name"] = column.long_name
    return attrs


def _metadata_attrs(metadata: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: value.isoformat() if isinstance(value, date) else value
        for key, value in metadata.items()
    }


def _freeze(values: Any) -> Any:
    flags = getattr(values, "flags", None)
    if flags is not None:
        flags.writeable = False
    return values


def assemble_record(
    metadata: Mapping[str, Any],
    columns: Iterable[tuple[VariableDescriptor, Any]],
) -> ParsedFile:
    """Build the final ``ParsedFile`` from metadata and decoded columns.

    Columns are keyed by variable name. If two variables share a name the
    later one replaces the earlier one; this is logged, not an error.

    Parameters
    ----------
    metadata
        Header metadata, in header order.
    columns
        ``(descriptor, values)`` pairs in file order.
    """
    data: dict[str, DataColumn] = {}
    for descriptor, values in columns:
        if descriptor.name in data:
            logger.warning(
                "Duplicate variable name; keeping the later column",
                extra={"variable": descriptor.name},
            )
        data[descriptor.name] = DataColumn.from_descriptor(descriptor, _freeze(values))
    return ParsedFile(metadata=metadata, columns=data)
