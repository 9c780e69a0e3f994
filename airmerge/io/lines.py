"""Line-oriented access to ICARTT text.

ICARTT files are read strictly in order: the header is consumed one line at
a time and everything left over is the data table. ``LineReader`` keeps the
current 1-based line number so every error can point at the offending line.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TextIO, TypeVar

from airmerge.core.exceptions import StructuralError

T = TypeVar("T")


def split_line(line: str) -> list[str]:
    """Split a comma-delimited ICARTT line into stripped tokens.

    Examples
    --------
    >>> split_line(" Time_Start , seconds \\n")
    ['Time_Start', 'seconds']
    """
    return [token.strip() for token in line.split(",")]


def split_array(line: str, convert: Callable[[str], T], line_number: int | None = None) -> list[T]:
    """Split a line and convert every token with ``convert``.

    Raises
    ------
    StructuralError
        If any token cannot be converted.
    """
    try:
        return [convert(token) for token in split_line(line)]
    except ValueError as e:
        raise StructuralError(
            f"Cannot read {line.strip()!r} as a list of numbers: {e}", line=line_number
        ) from e


class LineReader:
    """Sequential reader over an open text stream.

    Parameters
    ----------
    stream
        An open text stream positioned at the start of the file.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._line_number = 0

    @property
    def line_number(self) -> int:
        """Number of the last line read (0 before the first read)."""
        return self._line_number

    def readline(self, context: str = "header", keep_ends: bool = False) -> str:
        """Read the next line.

        Parameters
        ----------
        context
            What is being read; used in the error message on end of input.
        keep_ends
            Keep the line terminator (used for verbatim comment blocks).

        Raises
        ------
        StructuralError
            If the input ends before a line could be read.
        """
        line = self._stream.readline()
        if line == "":
            raise StructuralError(
                f"Unexpected end of input while reading {context}",
                line=self._line_number + 1,
            )
        self._line_number += 1
        if keep_ends:
            return line
        return line.rstrip("\r\n")

    def remaining(self) -> Iterator[tuple[int, str]]:
        """Yield ``(line_number, line)`` for every line not yet read."""
        for line in self._stream:
            self._line_number += 1
            yield self._line_number, line.rstrip("\r\n")
