"""
Wind Band Lookup and Averaging.

A wind band is the altitude interval between two consecutive profile
samples. While the rocket falls through a band, drift is driven by the mean
wind between the band's floor and the rocket, with the wind assumed to vary
linearly across the band.

The band average deliberately averages the floor sample with the wind
interpolated at the rocket's altitude, rather than returning the
interpolated wind itself. Reference drift results depend on this
definition.

Degenerate inputs (altitude outside the profile, zero-height band, fraction
outside [0, 1]) return None instead of raising.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from common.logging_config import get_logger
from common.types import WindProfile, WindSample
from profile_fusion.interpolation import altitude_ratio, interpolate_direction_along_arc

logger = get_logger(__name__)

SampleSource = Union[WindProfile, Sequence[WindSample]]


@dataclass(frozen=True)
class BandLocation:
    """Position of an altitude within a wind band.

    Attributes
    ----------
    floor_index : int
        Index of the band's lower sample; the ceiling is the next sample.
    fraction : float
        Position above the floor as a fraction of the band height, in [0, 1].
    """
    floor_index: int
    fraction: float


def _samples(source: SampleSource) -> Sequence[WindSample]:
    if isinstance(source, WindProfile):
        return source.samples
    return source


def locate_band(rocket_altitude: float, source: SampleSource) -> Optional[BandLocation]:
    """Find the band containing an altitude.

    Parameters
    ----------
    rocket_altitude : float
        Altitude in feet, in the same reference as the samples.
    source : WindProfile or sequence of WindSample
        Samples at ascending altitudes.

    Returns
    -------
    BandLocation or None
        The lowest band with non-zero height that contains the altitude,
        or None if the altitude is below the first sample, above the last,
        or only inside zero-height bands.
    """
    samples = _samples(source)

    if np.isfinite(rocket_altitude):
        for index in range(len(samples) - 1):
            floor = samples[index].altitude
            ceiling = samples[index + 1].altitude
            if not floor <= rocket_altitude <= ceiling:
                continue
            fraction = altitude_ratio(rocket_altitude, floor, ceiling)
            if fraction is not None:
                return BandLocation(floor_index=index, fraction=fraction)

    logger.debug(f"Rocket altitude {rocket_altitude} is outside the wind profile")
    return None


def _valid_fraction(fraction: float) -> bool:
    if not 0.0 <= fraction <= 1.0:
        logger.debug(f"Wind band fraction {fraction} is outside [0, 1]")
        return False
    return True


def average_wind_speed(
    fraction: float,
    floor: WindSample,
    ceiling: WindSample
) -> Optional[float]:
    """Mean wind speed between a band's floor and a point inside it.

    Returns
    -------
    float or None
        ``(floor + interpolated) / 2`` in the samples' speed unit, or None
        if `fraction` is outside [0, 1].
    """
    if not _valid_fraction(fraction):
        return None
    speed_at_altitude = floor.speed + fraction * (ceiling.speed - floor.speed)
    return (floor.speed + speed_at_altitude) / 2.0


def average_wind_direction(
    fraction: float,
    floor: WindSample,
    ceiling: WindSample
) -> Optional[float]:
    """Mean wind direction between a band's floor and a point inside it.

    Both the interpolation to the rocket's altitude and the averaging with
    the floor follow the shorter arc, so bands spanning north stay
    northerly.

    Returns
    -------
    float or None
        Direction in degrees in [0, 360), or None if `fraction` is outside
        [0, 1].
    """
    if not _valid_fraction(fraction):
        return None
    direction_at_altitude = interpolate_direction_along_arc(
        floor.direction, ceiling.direction, fraction
    )
    return interpolate_direction_along_arc(floor.direction, direction_at_altitude, 0.5)


def band_wind(rocket_altitude: float, source: SampleSource) -> Optional[Tuple[float, float]]:
    """Band-averaged (speed, direction) below a rocket altitude.

    Returns
    -------
    tuple or None
        (speed, direction), or None when the altitude cannot be located.
    """
    samples = _samples(source)
    band = locate_band(rocket_altitude, samples)
    if band is None:
        return None

    floor = samples[band.floor_index]
    ceiling = samples[band.floor_index + 1]
    speed = average_wind_speed(band.fraction, floor, ceiling)
    direction = average_wind_direction(band.fraction, floor, ceiling)
    if speed is None or direction is None:
        return None
    return speed, direction


def span_wind(
    bottom_altitude: float,
    top_altitude: float,
    source: SampleSource
) -> Optional[Tuple[float, float]]:
    """Band-averaged (speed, direction) over a span inside one band.

    Same as `band_wind` at `top_altitude`, except that when the span starts
    above the band's floor the average runs from the wind interpolated at
    `bottom_altitude` instead of from the floor sample.

    Returns
    -------
    tuple or None
        (speed, direction), or None when the top altitude cannot be located.
    """
    samples = _samples(source)
    band = locate_band(top_altitude, samples)
    if band is None:
        return None

    floor = samples[band.floor_index]
    ceiling = samples[band.floor_index + 1]
    fraction = band.fraction
    if floor.altitude < bottom_altitude < top_altitude:
        bottom_fraction = altitude_ratio(bottom_altitude, floor.altitude, ceiling.altitude)
        floor = WindSample(
            bottom_altitude,
            floor.speed + bottom_fraction * (ceiling.speed - floor.speed),
            interpolate_direction_along_arc(floor.direction, ceiling.direction, bottom_fraction)
        )
        fraction = altitude_ratio(top_altitude, floor.altitude, ceiling.altitude)

    speed = average_wind_speed(fraction, floor, ceiling)
    direction = average_wind_direction(fraction, floor, ceiling)
    if speed is None or direction is None:
        return None
    return speed, direction
