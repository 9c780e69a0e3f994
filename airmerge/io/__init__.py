"""I/O helpers for reading ICARTT text line by line."""

from airmerge.io.lines import LineReader, split_array, split_line

__all__ = [
    "LineReader",
    "split_array",
    "split_line",
]
