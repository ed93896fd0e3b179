"""
Wind Profile Fusion Engine.

This module merges the two vertical wind sources of a forecast into one
ground-anchored profile:

1. Near-surface samples at fixed heights above ground (10, 80, 120 and
   180 m for Open-Meteo).
2. Upper-air samples on pressure levels, placed vertically by their
   geopotential height minus the ground elevation.

The pressure levels define the body of the profile. Near-surface samples
only fill the gap between the ground and the lowest pressure level. When
the lowest pressure level lies at or below the ground (high terrain, or a
1000 hPa surface under a high-pressure system) the ground wind is
interpolated from the pressure levels bracketing altitude 0 instead.

All altitudes are in feet above ground, speeds in knots, directions in
degrees.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from common.constants import OPEN_METEO_MODEL_NAME
from common.logging_config import get_logger
from common.types import WindProfile, WindSample
from profile_fusion.interpolation import (
    altitude_ratio,
    interpolate_ground_direction,
    interpolate_ground_speed,
)

logger = get_logger(__name__)


class ProfileFusionEngine:
    """Fuses near-surface and pressure-level samples into wind profiles.

    The engine holds no state between calls; each call to `fuse` returns a
    new, fully populated profile.

    Examples
    --------
    >>> engine = ProfileFusionEngine()
    >>> profile = engine.fuse(
    ...     altitude_samples=[WindSample(100.0, 8.0, 80.0)],
    ...     pressure_samples=[WindSample(500.0, 10.0, 90.0),
    ...                       WindSample(1500.0, 15.0, 100.0)],
    ... )
    >>> [s.altitude for s in profile.samples]
    [0.0, 100.0, 500.0, 1500.0]
    """

    def __init__(self, source_model: str = OPEN_METEO_MODEL_NAME):
        """Initialize the engine.

        Parameters
        ----------
        source_model : str
            Model name recorded on every profile.
        """
        self.source_model = source_model
        self._logger = get_logger("ProfileFusionEngine")

    def fuse(
        self,
        altitude_samples: Sequence[WindSample],
        pressure_samples: Sequence[WindSample],
        ground_elevation: float = 0.0,
        valid_time: Optional[datetime] = None
    ) -> WindProfile:
        """Build one ascending, ground-anchored profile.

        Parameters
        ----------
        altitude_samples : sequence of WindSample
            Near-surface samples, altitudes in feet above ground.
        pressure_samples : sequence of WindSample
            Pressure-level samples, altitudes in feet above ground (may be
            zero or negative for levels under the terrain).
        ground_elevation : float
            Elevation of the forecast location in feet above sea level.
        valid_time : datetime, optional
            Forecast hour the samples describe.

        Returns
        -------
        WindProfile
            The fused profile. Empty when there are no pressure samples, or
            when no pressure sample lies above the ground.
        """
        profile = WindProfile(
            source_model=self.source_model,
            ground_elevation=ground_elevation,
            valid_time=valid_time
        )

        altitude_winds = sorted(altitude_samples, key=lambda s: s.altitude)
        pressure_winds = sorted(pressure_samples, key=lambda s: s.altitude)

        if not pressure_winds:
            self._logger.info("No pressure level winds available; profile is empty")
            return profile

        if pressure_winds[0].altitude > 0:
            samples = self._fuse_above_ground(altitude_winds, pressure_winds)
        else:
            samples = self._fuse_below_ground(pressure_winds)

        if not samples:
            self._logger.warning("No pressure level lies above the ground; profile is empty")
            return profile

        ground = samples[0]
        profile.samples = samples
        profile.ground_wind_speed = ground.speed
        profile.ground_wind_direction = ground.direction
        return profile

    def _fuse_above_ground(
        self,
        altitude_winds: List[WindSample],
        pressure_winds: List[WindSample]
    ) -> List[WindSample]:
        """Fill the gap below the lowest pressure level with surface winds.

        The ground sample copies the lowest usable sample verbatim; no
        extrapolation is attempted below it.
        """
        lowest_pressure_altitude = pressure_winds[0].altitude
        samples: List[WindSample] = []

        for wind in altitude_winds:
            if wind.altitude >= lowest_pressure_altitude:
                break
            if not samples:
                samples.append(WindSample(0.0, wind.speed, wind.direction))
            samples.append(wind)

        if not samples:
            first = pressure_winds[0]
            samples.append(WindSample(0.0, first.speed, first.direction))

        samples.extend(pressure_winds)
        return samples

    def _fuse_below_ground(self, pressure_winds: List[WindSample]) -> List[WindSample]:
        """Interpolate the ground wind between levels bracketing altitude 0.

        Levels at or below the ground are dropped once the ground sample has
        been derived from them.
        """
        for index in range(1, len(pressure_winds)):
            upper = pressure_winds[index]
            if upper.altitude <= 0:
                continue

            lower = pressure_winds[index - 1]
            speed, direction = self._ground_wind(lower, upper)

            samples = [WindSample(0.0, speed, direction)]
            samples.extend(pressure_winds[index:])
            return samples

        return []

    def _ground_wind(self, lower: WindSample, upper: WindSample) -> Tuple[float, float]:
        """Wind at altitude 0 between a level below and a level above ground."""
        ratio = altitude_ratio(0.0, lower.altitude, upper.altitude)
        if ratio is None:
            return upper.speed, upper.direction

        speed = interpolate_ground_speed(lower.speed, upper.speed, ratio)
        direction = interpolate_ground_direction(lower.direction, upper.direction, ratio)
        self._logger.debug(
            f"Interpolated ground wind {speed:.2f} kt from {direction:.1f} deg "
            f"between {lower.altitude:.1f} ft and {upper.altitude:.1f} ft"
        )
        return speed, direction


def fuse_wind_profile(
    altitude_samples: Sequence[WindSample],
    pressure_samples: Sequence[WindSample],
    ground_elevation: float = 0.0,
    source_model: str = OPEN_METEO_MODEL_NAME,
    valid_time: Optional[datetime] = None
) -> WindProfile:
    """Convenience wrapper around `ProfileFusionEngine.fuse`."""
    engine = ProfileFusionEngine(source_model=source_model)
    return engine.fuse(
        altitude_samples,
        pressure_samples,
        ground_elevation=ground_elevation,
        valid_time=valid_time
    )
