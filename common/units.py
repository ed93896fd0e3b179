"""
Unit Registry and Conversions for Wind Profile Export and Drift.

This module provides a centralized unit system using the `pint` library.
Forecast data arrives in meters and knots, the drift model works in feet and
feet per second, and the export format lets the user pick from several
units per column. All export conversions go through the registry so that
every supported unit is defined in exactly one place.

The handful of conversions on the drift hot path (feet/meters,
degrees/radians) are plain functions over the constants in
`common.constants` so they stay exact and cheap.

Example Usage
-------------
>>> from common.units import convert
>>> round(convert(1000.0, 'ft', 'm'), 1)
304.8
>>> round(convert(10.0, 'kt', 'mph'), 3)
11.508
"""

from typing import Dict

import numpy as np
import pint
from pint import UnitRegistry as PintUnitRegistry

from common.constants import DriftConstants

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity


# Short symbols accepted by `convert`, mapped onto pint unit expressions
UNIT_ALIASES: Dict[str, str] = {
    # Length
    "m": "meter",
    "km": "kilometer",
    "ft": "foot",
    "yd": "yard",
    "mi": "mile",
    "nmi": "nautical_mile",

    # Speed
    "m/s": "meter / second",
    "km/h": "kilometer / hour",
    "ft/s": "foot / second",
    "mph": "mile / hour",
    "kt": "knot",

    # Angle
    "deg": "degree",
    "rad": "radian",
    "arcmin": "arcminute",
}


def _resolve(unit: str) -> str:
    """Map a short symbol onto its pint expression."""
    return UNIT_ALIASES.get(unit, unit)


def convert(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a bare magnitude between two units.

    Parameters
    ----------
    value : float
        The magnitude in `from_unit`.
    from_unit : str
        Source unit, either a key of `UNIT_ALIASES` or a pint expression.
    to_unit : str
        Target unit, either a key of `UNIT_ALIASES` or a pint expression.

    Returns
    -------
    float
        The magnitude expressed in `to_unit`.

    Raises
    ------
    ValueError
        If the units have incompatible dimensionality.
    """
    if from_unit == to_unit:
        return float(value)

    try:
        return float(Q_(value, _resolve(from_unit)).to(_resolve(to_unit)).magnitude)
    except pint.DimensionalityError as e:
        raise ValueError(
            f"Cannot convert from {from_unit} to {to_unit}: incompatible units"
        ) from e


def feet_to_meters(distance_ft: float) -> float:
    """Convert a distance from feet into meters."""
    return distance_ft * DriftConstants.METERS_PER_FOOT.value


def meters_to_feet(distance_m: float) -> float:
    """Convert a distance from meters into feet."""
    return distance_m / DriftConstants.METERS_PER_FOOT.value


def knots_to_feet_per_second(speed_kt: float) -> float:
    """Convert a wind speed from knots into feet per second."""
    return speed_kt * DriftConstants.FEET_PER_SECOND_PER_KNOT.value


def degrees_to_radians(degrees: float) -> float:
    return float(np.radians(degrees))


def radians_to_degrees(radians: float) -> float:
    return float(np.degrees(radians))
