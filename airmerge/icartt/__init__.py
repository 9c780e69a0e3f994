"""ICARTT file parsing.

- ``header``: header state machine producing metadata and variable descriptors
- ``table``: data table decoding into unit-tagged columns
- ``record``: the ``ParsedFile`` result and its xarray export
- ``reader``: ``read_icartt_file`` and ``ICARTTReader`` entry points
"""

from airmerge.icartt.header import (
    CommentCategory,
    Header,
    HeaderParser,
    HeaderSection,
    check_header_length,
    check_variables_against_table_header,
    parse_header,
)
from airmerge.icartt.reader import ICARTTReader, read_icartt_file, read_stream
from airmerge.icartt.record import DataColumn, ParsedFile, VariableDescriptor, assemble_record
from airmerge.icartt.table import decode_table, read_table

__all__ = [
    # Header
    "CommentCategory",
    "Header",
    "HeaderParser",
    "HeaderSection",
    "check_header_length",
    "check_variables_against_table_header",
    "parse_header",
    # Table
    "decode_table",
    "read_table",
    # Record
    "DataColumn",
    "ParsedFile",
    "VariableDescriptor",
    "assemble_record",
    # Reader
    "ICARTTReader",
    "read_icartt_file",
    "read_stream",
]
