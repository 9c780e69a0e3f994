"""Resolve canonical unit strings into unit objects.

The parser never touches a unit library directly. It talks to a
``UnitEngine``: something that turns a canonical expression such as
``"ug * m^-3"`` into a unit value and can tag an array of numbers with that
unit. ``AstropyUnitEngine`` is the default implementation.

ICARTT files are ASCII, so the micro prefix is conventionally written as a
leading "u". Blindly rewriting "u" would break units such as "unitless", so
``resolve_unit_string`` only rewrites when the engine reports an
unrecognized symbol that starts with "u", and then retries exactly once.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import astropy.units as u
import numpy as np

from airmerge.core.exceptions import UnitsError, UnrecognizedUnitError
from airmerge.logging import get_logger
from airmerge.units import definitions  # noqa: F401  (enables ICARTT units)
from airmerge.units.normalize import normalize_unit_string

logger = get_logger(__name__)

MICRO_SIGN = "\N{MICRO SIGN}"

# Candidate unit symbols in a canonical expression
_SYMBOL = re.compile(r"[^\W\d]\w*")


@runtime_checkable
class UnitEngine(Protocol):
    """Interface to a unit algebra library."""

    def resolve(self, expression: str) -> Any:
        """Return the unit described by ``expression``.

        Raises
        ------
        UnrecognizedUnitError
            If a symbol in the expression is unknown; ``symbol`` names it.
        UnitsError
            For any other failure (e.g. malformed syntax).
        """
        ...

    def attach(self, values: np.ndarray, unit: Any) -> Any:
        """Return ``values`` tagged with ``unit``."""
        ...


class AstropyUnitEngine:
    """Unit engine backed by ``astropy.units`` (generic string format).

    The glyphs ICARTT canon tokens may contain are translated to astropy
    names before parsing.
    """

    GLYPHS: Mapping[str, str] = {
        "\N{DEGREE SIGN}": "deg",
        "%": "percent",
    }

    def __init__(self, format: str = "generic") -> None:
        self.format = format

    def __repr__(self) -> str:
        return f"AstropyUnitEngine(format={self.format!r})"

    def _translate(self, expression: str) -> str:
        for glyph, name in self.GLYPHS.items():
            expression = expression.replace(glyph, name)
        return expression

    def _parse(self, expression: str) -> u.UnitBase:
        return u.Unit(expression, format=self.format)

    def resolve(self, expression: str) -> u.UnitBase:
        translated = self._translate(expression)
        try:
            return self._parse(translated)
        except ValueError as e:
            symbol = self._first_unknown_symbol(translated)
            if symbol is not None:
                raise UnrecognizedUnitError(
                    f"Unrecognized unit symbol {symbol!r} in {expression!r}",
                    symbol=symbol,
                    unit_string=expression,
                    cause=e,
                ) from e
            raise UnitsError(
                f"Cannot parse unit expression {expression!r}",
                unit_string=expression,
                cause=e,
            ) from e

    def _first_unknown_symbol(self, expression: str) -> str | None:
        for symbol in _SYMBOL.findall(expression):
            try:
                self._parse(symbol)
            except ValueError:
                return symbol
        return None

    def attach(self, values: np.ndarray, unit: u.UnitBase) -> u.Quantity:
        return u.Quantity(values, unit, dtype=float)


_default_engine = AstropyUnitEngine()


def get_default_engine() -> AstropyUnitEngine:
    """Return the shared astropy-backed engine."""
    return _default_engine


def replace_micro_prefix(expression: str, symbol: str) -> str:
    """Replace the leading "u" of the first whole occurrence of ``symbol``.

    Examples
    --------
    >>> replace_micro_prefix("ug * m^-3", "ug")
    'µg * m^-3'
    """
    pattern = re.compile(rf"(?<!\w){re.escape(symbol)}(?!\w)")
    return pattern.sub(MICRO_SIGN + symbol[1:], expression, count=1)


def resolve_unit_string(expression: str, engine: UnitEngine | None = None) -> Any:
    """Resolve a canonical unit expression, retrying once for ASCII micro.

    Parameters
    ----------
    expression
        Canonical unit expression (output of ``normalize_unit_string``).
    engine
        Unit engine; defaults to the astropy engine.

    Raises
    ------
    UnitsError
        If the expression cannot be resolved. After a failed retry the error
        carries both the original and the rewritten expression.
    """
    engine = engine or _default_engine
    try:
        return engine.resolve(expression)
    except UnrecognizedUnitError as e:
        if not e.symbol.startswith("u"):
            raise UnitsError(
                f"Cannot resolve unit {expression!r}: {e.message}",
                unit_string=expression,
                cause=e,
            ) from e
        rewritten = replace_micro_prefix(expression, e.symbol)
        logger.debug(
            "Retrying unit with micro prefix",
            extra={"unit_string": expression, "rewritten": rewritten},
        )
        try:
            return engine.resolve(rewritten)
        except UnitsError as retry_error:
            raise UnitsError(
                f"Tried replacing 'u' prefix with '{MICRO_SIGN}' "
                f"({expression} -> {rewritten}) but this failed: {retry_error.message}",
                unit_string=expression,
                rewritten=rewritten,
                cause=retry_error,
            ) from retry_error
    except UnitsError as e:
        raise UnitsError(
            f"Cannot resolve unit {expression!r}: {e.message}",
            unit_string=expression,
            cause=e,
        ) from e


def parse_unit_string(
    unit_string: str,
    aliases: Mapping[str, Sequence[str]] | None = None,
    engine: UnitEngine | None = None,
) -> Any:
    """Normalize a raw ICARTT unit string and resolve it.

    Examples
    --------
    >>> parse_unit_string("m s-1")
    Unit("m / s")
    """
    return resolve_unit_string(normalize_unit_string(unit_string, aliases), engine)
