"""Pytest fixtures built on synthetic ICARTT files.

All fixtures generate their input in memory or under ``tmp_path`` so the
tests need no external data.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from airmerge.io.lines import LineReader
from airmerge.logging.config import LOGGER_PREFIX
from airmerge.tests.synthetic import FakeUnitEngine, SyntheticICARTT, altitude_example


# =============================================================================
# ICARTT Fixtures
# =============================================================================


@pytest.fixture
def synthetic_file() -> SyntheticICARTT:
    """Default synthetic file: Time_Start, O3 (ppbv), Altitude (m), two rows."""
    return SyntheticICARTT()


@pytest.fixture
def altitude_file() -> SyntheticICARTT:
    """Single-variable file with Altitude in meters."""
    return altitude_example()


@pytest.fixture
def icartt_path(tmp_path: Path, synthetic_file: SyntheticICARTT) -> Path:
    """Default synthetic file written to disk."""
    return synthetic_file.write(tmp_path / "TEST-O3_DC8_20240115_R0.ict")


@pytest.fixture
def header_reader(synthetic_file: SyntheticICARTT) -> LineReader:
    """Line reader over the default synthetic file."""
    return LineReader(synthetic_file.stream())


# =============================================================================
# Unit Fixtures
# =============================================================================


@pytest.fixture
def fake_engine() -> FakeUnitEngine:
    """Fake unit engine that knows nothing until told otherwise."""
    return FakeUnitEngine()


@pytest.fixture
def alias_file(tmp_path: Path) -> Path:
    """Alias file that replaces the degree aliases and adds hour spellings."""
    path = tmp_path / "aliases.txt"
    path.write_text(
        "# campaign aliases\n"
        "\n"
        "\N{DEGREE SIGN}: degree, degrees : replace\n"
        "hr: hours, hrs\n",
        encoding="utf-8",
    )
    return path


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Keep the package logger propagating so ``caplog`` sees its records."""
    yield
    root = logging.getLogger(LOGGER_PREFIX)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    root.propagate = True
