"""Synthetic ICARTT data for testing.

Usage:
    from airmerge.tests.synthetic import SyntheticICARTT

    text = SyntheticICARTT(variables=["NO2, pptv"], rows=["0, 12.5"]).text()
"""

from airmerge.tests.synthetic.icartt import (
    FakeUnitEngine,
    SyntheticICARTT,
    altitude_example,
    line_reader,
)

__all__ = [
    "FakeUnitEngine",
    "SyntheticICARTT",
    "altitude_example",
    "line_reader",
]
