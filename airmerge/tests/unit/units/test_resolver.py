"""Tests for unit resolution and the micro-prefix retry."""

from __future__ import annotations

import astropy.units as u
import numpy as np
import pytest
from astropy import constants as const

from airmerge.core.exceptions import UnitsError, UnrecognizedUnitError
from airmerge.tests.synthetic import FakeUnitEngine
from airmerge.units.definitions import ICARTT_UNITS, enable_icartt_units
from airmerge.units.resolver import (
    MICRO_SIGN,
    AstropyUnitEngine,
    UnitEngine,
    get_default_engine,
    parse_unit_string,
    replace_micro_prefix,
    resolve_unit_string,
)


class TestAstropyUnitEngine:
    """Tests for the astropy-backed engine."""

    def test_is_a_unit_engine(self) -> None:
        """The default engine satisfies the UnitEngine protocol."""
        assert isinstance(get_default_engine(), UnitEngine)
        assert isinstance(get_default_engine(), AstropyUnitEngine)

    def test_resolve_product(self) -> None:
        """Canonical products and exponents resolve."""
        engine = AstropyUnitEngine()
        assert engine.resolve("m * s^-1") == u.m / u.s

    def test_degree_glyph(self) -> None:
        """The degree sign resolves to degrees."""
        assert AstropyUnitEngine().resolve("\N{DEGREE SIGN}") == u.deg

    def test_unknown_symbol(self) -> None:
        """An unknown symbol is reported by name."""
        with pytest.raises(UnrecognizedUnitError) as exc_info:
            AstropyUnitEngine().resolve("bananas * m")
        assert exc_info.value.symbol == "bananas"
        assert isinstance(exc_info.value.cause, ValueError)

    def test_malformed_expression(self) -> None:
        """Syntax errors are UnitsError but not UnrecognizedUnitError."""
        with pytest.raises(UnitsError) as exc_info:
            AstropyUnitEngine().resolve("(m")
        assert not isinstance(exc_info.value, UnrecognizedUnitError)

    def test_attach(self) -> None:
        """Values are tagged with their unit."""
        quantity = AstropyUnitEngine().attach(np.array([1000.0, 1100.0]), u.m)
        assert isinstance(quantity, u.Quantity)
        assert quantity.unit == u.m
        np.testing.assert_array_equal(quantity.value, [1000.0, 1100.0])


class TestIcarttUnits:
    """Tests for units registered for ICARTT files."""

    def test_enabling_twice_adds_nothing(self) -> None:
        """Units are enabled on import, so enabling again is a no-op."""
        assert enable_icartt_units() == []

    def test_all_registered(self) -> None:
        """Every ICARTT unit parses by name."""
        for unit in ICARTT_UNITS:
            assert u.Unit(unit.name).physical_type == unit.physical_type

    @pytest.mark.parametrize(
        ("name", "factor"),
        [("ppmv", 1e-6), ("ppbv", 1e-9), ("pptv", 1e-12), ("ppb", 1e-9), ("unitless", 1.0)],
    )
    def test_dimensionless_scales(self, name: str, factor: float) -> None:
        """Mixing ratios are dimensionless with the right scale."""
        value = (1 * u.Unit(name)).to_value(u.dimensionless_unscaled)
        assert value == pytest.approx(factor)

    def test_molecules(self) -> None:
        """Avogadro's number of molecules is one mole."""
        value = (const.N_A.value * u.Unit("molec")).to_value(u.mol)
        assert value == pytest.approx(1.0)

    def test_days(self) -> None:
        """A day is 24 hours."""
        assert (1 * u.Unit("days")).to_value(u.hour) == pytest.approx(24.0)


class TestResolveUnitString:
    """Tests for resolve_unit_string and the micro-prefix retry."""

    def test_retry_succeeds(self) -> None:
        """An unknown u-prefixed symbol is retried once with the micro sign."""
        engine = FakeUnitEngine(known=[f"{MICRO_SIGN}g * m^-3"])
        assert resolve_unit_string("ug * m^-3", engine) == f"{MICRO_SIGN}g * m^-3"
        assert engine.calls == ["ug * m^-3", f"{MICRO_SIGN}g * m^-3"]

    def test_retry_fails(self) -> None:
        """A failed retry reports both the original and rewritten strings."""
        engine = FakeUnitEngine()
        with pytest.raises(UnitsError) as exc_info:
            resolve_unit_string("ug * m^-3", engine)
        error = exc_info.value
        assert error.unit_string == "ug * m^-3"
        assert error.rewritten == f"{MICRO_SIGN}g * m^-3"
        assert "ug * m^-3 ->" in error.message
        assert len(engine.calls) == 2

    def test_no_retry_without_u(self) -> None:
        """Symbols not starting with 'u' are not retried."""
        engine = FakeUnitEngine()
        with pytest.raises(UnitsError) as exc_info:
            resolve_unit_string("kg * m^-3", engine)
        assert exc_info.value.rewritten is None
        assert engine.calls == ["kg * m^-3"]

    def test_unitless_is_not_rewritten(self) -> None:
        """Registered units starting with 'u' resolve directly."""
        unit = resolve_unit_string("unitless")
        assert unit.to(u.dimensionless_unscaled) == 1.0

    def test_astropy_unknown_u_symbol(self) -> None:
        """With astropy, a u-prefixed unknown symbol fails after one retry."""
        with pytest.raises(UnitsError) as exc_info:
            resolve_unit_string("uwidgets")
        assert exc_info.value.rewritten == f"{MICRO_SIGN}widgets"


class TestReplaceMicroPrefix:
    """Tests for replace_micro_prefix."""

    def test_first_occurrence_only(self) -> None:
        """Only the first whole occurrence is rewritten."""
        assert replace_micro_prefix("ug * ug", "ug") == f"{MICRO_SIGN}g * ug"

    def test_whole_symbol_only(self) -> None:
        """The symbol must not be part of a longer word."""
        assert replace_micro_prefix("pug * ug", "ug") == f"pug * {MICRO_SIGN}g"


class TestParseUnitString:
    """Tests for parse_unit_string with the default engine."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("m s-1", u.m / u.s),
            ("meters", u.m),
            ("deg", u.deg),
            ("%", u.percent),
            ("#", u.dimensionless_unscaled),
            ("hour", u.hour),
            ("molec cm-3", u.Unit("molec") / u.cm**3),
        ],
    )
    def test_parse(self, raw: str, expected: u.UnitBase) -> None:
        """Raw ICARTT units resolve to the expected astropy unit."""
        assert parse_unit_string(raw) == expected

    def test_ascii_and_micro_sign_agree(self) -> None:
        """'ug/m3' and the micro-sign spelling give the same unit."""
        ascii_unit = parse_unit_string("ug/m3")
        micro_unit = parse_unit_string(f"{MICRO_SIGN}g/m3")
        assert ascii_unit == micro_unit
        assert (1 * ascii_unit).to_value(u.kg / u.m**3) == pytest.approx(1e-9)

    def test_unknown_unit(self) -> None:
        """Unknown units raise UnitsError."""
        with pytest.raises(UnitsError):
            parse_unit_string("bananas")
