"""Units that appear in ICARTT files but are not part of astropy.

The units are enabled in astropy's registry when this module is imported,
so ``astropy.units.Unit("ppbv")`` works everywhere afterwards. A unit whose
name astropy already knows is left alone.
"""

from __future__ import annotations

import astropy.units as u
from astropy import constants as const

from airmerge.logging import get_logger

logger = get_logger(__name__)

# "unitless" is a physical quantity without dimension; "none" is not a
# physical quantity at all (an index or a flag).
unitless = u.def_unit("unitless", u.dimensionless_unscaled, doc="dimensionless quantity")
none = u.def_unit("none", u.dimensionless_unscaled, doc="not a physical quantity")

# Mach numbers are relative to the speed of sound in the medium, so they do
# not map onto an absolute speed.
mach = u.def_unit("mach", u.dimensionless_unscaled, doc="Mach number")

# Amount of matter
molec = u.def_unit("molec", (1 / const.N_A.value) * u.mol, doc="molecules")
DU = u.def_unit("DU", 0.4462 * u.mmol / u.m**2, doc="Dobson unit")

# Mixing ratios
ppm = u.def_unit("ppm", 1e-6 * u.mol / u.mol, doc="parts per million (molar)")
ppmv = u.def_unit("ppmv", 1e-6 * u.L / u.L, doc="parts per million (volume)")
ppb = u.def_unit("ppb", 1e-9 * u.mol / u.mol, doc="parts per billion (molar)")
ppbv = u.def_unit("ppbv", 1e-9 * u.L / u.L, doc="parts per billion (volume)")
ppt = u.def_unit("ppt", 1e-12 * u.mol / u.mol, doc="parts per trillion (molar)")
pptv = u.def_unit("pptv", 1e-12 * u.L / u.L, doc="parts per trillion (volume)")

# Time
days = u.def_unit("days", 24 * u.hour, doc="days")

# Volumes at standard temperature and pressure are kept as plain metres until
# the STP convention is modelled.
std_m = u.def_unit("std_m", u.m, doc="metre at standard temperature and pressure")

ICARTT_UNITS: tuple[u.UnitBase, ...] = (
    unitless, none, mach, molec, DU, ppm, ppmv, ppb, ppbv, ppt, pptv, days, std_m,
)


def enable_icartt_units() -> list[u.UnitBase]:
    """Enable the ICARTT units in astropy's current unit registry.

    Returns
    -------
    list
        The units that were newly enabled.
    """
    registry = u.get_current_unit_registry().registry
    new_units = [unit for unit in ICARTT_UNITS if unit.name not in registry]
    if new_units:
        u.add_enabled_units(new_units)
        logger.debug(
            "Enabled ICARTT units", extra={"units": [unit.name for unit in new_units]}
        )
    return new_units


enable_icartt_units()
