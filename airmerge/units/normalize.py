"""Rewrite raw ICARTT unit strings into canonical unit expressions.

Three passes, in order:

1. Alias substitution. Every alias is replaced by its canon token when it
   stands as a whole word, optionally behind an SI prefix ("mdegs" becomes
   "m°"). A whole word starts at the start of the string or after
   whitespace and ends before a non-letter or at the end of the string, so
   an alias "m" never fires inside "mol".
2. Juxtaposed units become explicit products ("m s-1" becomes "m * s-1",
   "° C" becomes "° * C").
3. Exponents get an explicit operator ("s-1" becomes "s^-1"). Unit names
   are assumed never to contain digits.

Running the normalizer on its own output changes nothing.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from functools import lru_cache

from airmerge.units.aliases import DEFAULT_ALIASES

# SI prefixes, longest first so "da" is tried before "d". Both the micro
# sign and the Greek mu are accepted as "micro".
SI_PREFIXES: tuple[str, ...] = (
    "da",
    "Y", "Z", "E", "P", "T", "G", "M", "k", "h",
    "d", "c", "m", "\N{MICRO SIGN}", "\N{GREEK SMALL LETTER MU}", "n", "p", "f", "a", "z", "y",
)

_PREFIX_GROUP = "|".join(re.escape(p) for p in SI_PREFIXES)

# Non-alphanumeric glyphs that stand for a whole unit
_UNIT_GLYPHS = "\N{DEGREE SIGN}%"
# whitespace between a unit (or exponent) and the start of the next unit
_JUXTAPOSED = re.compile(rf"(?<=[^\W_]|[{_UNIT_GLYPHS}])\s+(?=[^\W\d_]|[{_UNIT_GLYPHS}])")
# letter immediately followed by an optionally signed integer
_EXPONENT = re.compile(r"([^\W\d_])([+\-]?\d+)")


@lru_cache(maxsize=256)
def _alias_pattern(aliases: tuple[str, ...]) -> re.Pattern[str]:
    longest_first = sorted(aliases, key=len, reverse=True)
    alternatives = "|".join(re.escape(alias) for alias in longest_first)
    return re.compile(
        rf"(?:\A|(?<=\s))(?P<prefix>{_PREFIX_GROUP})?(?:{alternatives})(?=[^a-zA-Z]|\Z)"
    )


def substitute_aliases(unit_string: str, aliases: Mapping[str, Sequence[str]]) -> str:
    """Replace every whole-word alias in ``unit_string`` with its canon token.

    Examples
    --------
    >>> substitute_aliases("degrees", {"°": ("deg", "degrees")})
    '°'
    >>> substitute_aliases("mol m-1", {"m": ("meters",), "mol": ("moles",)})
    'mol m-1'
    """
    for canon, canon_aliases in aliases.items():
        if not canon_aliases:
            continue
        pattern = _alias_pattern(tuple(canon_aliases))
        unit_string = pattern.sub(
            lambda m, canon=canon: (m.group("prefix") or "") + canon, unit_string
        )
    return unit_string


def insert_operators(unit_string: str) -> str:
    """Make products and exponents explicit.

    Examples
    --------
    >>> insert_operators("m2 s-1")
    'm^2 * s^-1'
    """
    unit_string = _JUXTAPOSED.sub(" * ", unit_string)
    return _EXPONENT.sub(r"\1^\2", unit_string)


def normalize_unit_string(
    unit_string: str, aliases: Mapping[str, Sequence[str]] | None = None
) -> str:
    """Rewrite a raw unit string into canonical syntax.

    Parameters
    ----------
    unit_string
        Unit text as written in the ICARTT header.
    aliases
        Alias table to apply; defaults to ``DEFAULT_ALIASES``.

    Examples
    --------
    >>> normalize_unit_string("molec cm-3")
    'molec * cm^-3'
    >>> normalize_unit_string("deg")
    '°'
    """
    if aliases is None:
        aliases = DEFAULT_ALIASES
    unit_string = substitute_aliases(unit_string.strip(), aliases)
    return insert_operators(unit_string).strip()
