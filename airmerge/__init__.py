"""airmerge: unit-aware reader for ICARTT airborne measurement files.

Reads FFI 1001 ICARTT files into a ``ParsedFile`` whose columns carry
their physical units, with a configurable table of unit spelling aliases.
"""

from __future__ import annotations

from airmerge.icartt import ICARTTReader, ParsedFile, read_icartt_file

__version__ = "0.1.0"
__all__ = ["__version__", "ICARTTReader", "ParsedFile", "read_icartt_file"]
