"""
Physical and Provider Constants for Wind Profile and Drift Calculations.

This module provides every numeric constant used by the fusion, drift and
export code together with its unit and source. Constants that describe a
physical quantity carry provenance through the `Constant` record; tables
describing the forecast provider are plain tuples.

References
----------
- Earth mean radius: IUGG, rounded to 6,371 km as used by the haversine
  and forward-geodesic formulas.
- International foot: 0.3048 m exactly (International Yard and Pound
  Agreement, 1959).
- Open-Meteo forecast API documentation (heights and pressure levels).
"""

from dataclasses import dataclass
from typing import Dict, Final, Tuple


@dataclass(frozen=True)
class Constant:
    """A physical constant with provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    unit : str
        The unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    unit: str
    source: str
    description: str


class DriftConstants:
    """Registry of constants used by geodesy, drift and unit conversion.

    The spherical Earth radius is shared by the bearing projection and the
    haversine distance so that both agree at consistent units.
    """

    # =========================================================================
    # Earth Geometry (spherical model)
    # =========================================================================

    EARTH_MEAN_RADIUS: Final[Constant] = Constant(
        value=6_371_000.0,
        unit="m",
        source="IUGG mean radius, rounded",
        description="Mean radius of the spherical Earth used for all projections"
    )

    EARTH_MEAN_RADIUS_KM: Final[Constant] = Constant(
        value=6_371.0,
        unit="km",
        source="IUGG mean radius, rounded",
        description="EARTH_MEAN_RADIUS expressed in kilometers"
    )

    # =========================================================================
    # Unit Conversion Factors
    # =========================================================================

    METERS_PER_FOOT: Final[Constant] = Constant(
        value=0.3048,
        unit="m/ft",
        source="International Yard and Pound Agreement (1959)",
        description="Exact length of the international foot in meters"
    )

    FEET_PER_SECOND_PER_KNOT: Final[Constant] = Constant(
        value=1.68781,
        unit="(ft/s)/kt",
        source="1 kt = 1852 m/h, rounded",
        description="Conversion from knots to feet per second used for drift"
    )


# Near-surface heights (meters above ground) reported by Open-Meteo
OPEN_METEO_WIND_ALTITUDES_M: Final[Tuple[int, ...]] = (10, 80, 120, 180)

# Pressure levels (hPa) reported by Open-Meteo, lowest altitude first
OPEN_METEO_PRESSURE_LEVELS_HPA: Final[Tuple[int, ...]] = (
    1000, 975, 950, 925, 900, 850, 800, 750, 700, 650, 600, 550, 500,
    450, 400, 350, 300, 250, 200, 150, 100, 70, 50, 30, 20, 15, 10,
)

# Forecast request bounds relative to now (hours)
OLDEST_FORECAST_HOUR_OFFSET: Final[int] = -216  # 9 days of history
NEWEST_FORECAST_HOUR_OFFSET: Final[int] = 360   # 15 days ahead

# Upper clamp for the exported wind standard deviation, keyed by unit symbol
MAX_WIND_STANDARD_DEVIATION: Final[Dict[str, float]] = {
    "m/s": 2.0,
    "km/h": 7.2,
    "ft/s": 6.56,
    "mph": 4.47,
    "kt": 3.89,
}

# Model names recorded on wind profiles
OPEN_METEO_MODEL_NAME: Final[str] = "Open-Meteo"
RAP_MODEL_NAME: Final[str] = "RAP"
