"""
Interpolation Helpers for Wind Samples.

Wind speed interpolates linearly. Wind direction is a bearing, so a naive
linear interpolation between 350 and 10 degrees would pass through south.
Every direction helper here is wrap-aware.

Zero-Height Bands
-----------------
Two samples at the same altitude do not define a band. `altitude_ratio`
returns None for such a pair and never divides by zero; each caller decides
what a missing ratio means (fusion and export reuse the upper sample's
values, band lookup reports the altitude as out of range).
"""

from typing import Optional

from common.logging_config import get_logger

logger = get_logger(__name__)


def normalize_direction(direction_deg: float) -> float:
    """Wrap a direction into [0, 360)."""
    return float(direction_deg % 360.0)


def altitude_ratio(
    altitude: float,
    lower_altitude: float,
    upper_altitude: float
) -> Optional[float]:
    """Fractional position of an altitude between two sample altitudes.

    Parameters
    ----------
    altitude : float
        Altitude to locate.
    lower_altitude, upper_altitude : float
        Altitudes of the bracketing samples.

    Returns
    -------
    float or None
        0 at the lower sample, 1 at the upper sample, or None when both
        samples share an altitude.
    """
    band_height = upper_altitude - lower_altitude
    if band_height == 0:
        logger.debug(
            f"Zero height band at {lower_altitude}; interpolation skipped"
        )
        return None
    return (altitude - lower_altitude) / band_height


def linear_interpolate(
    source_value: float,
    source_lower: float,
    source_upper: float,
    target_lower: float,
    target_upper: float
) -> float:
    """Map a value's position within a source range onto a target range.

    A zero-width source range maps every value onto `target_lower`.
    """
    ratio = altitude_ratio(source_value, source_lower, source_upper)
    if ratio is None:
        return target_lower
    return target_lower + ratio * (target_upper - target_lower)


def interpolate_ground_speed(
    lower_speed: float,
    upper_speed: float,
    ratio: float
) -> float:
    """Interpolate a speed between two samples.

    The result is measured up from the slower of the two samples:
    ``min(lower, upper) + ratio * |upper - lower|``.
    """
    speed_delta = abs(upper_speed - lower_speed)
    if speed_delta == 0:
        return upper_speed
    return min(lower_speed, upper_speed) + ratio * speed_delta


def interpolate_ground_direction(
    lower_direction: float,
    upper_direction: float,
    ratio: float
) -> float:
    """Interpolate a direction between two samples along the shorter arc.

    Directions less than 180 degrees apart are interpolated directly, up
    from the smaller of the two. Directions 180 degrees or more apart span
    north; both are rotated by -180 degrees into [0, 360), interpolated the
    same way, and rotated back.

    Returns
    -------
    float
        Direction in degrees, in [0, 360).
    """
    direction_delta = abs(upper_direction - lower_direction)
    if direction_delta == 0:
        return normalize_direction(upper_direction)

    if direction_delta < 180.0:
        direction = min(lower_direction, upper_direction) + ratio * direction_delta
        return normalize_direction(direction)

    first = normalize_direction(lower_direction - 180.0)
    second = normalize_direction(upper_direction - 180.0)
    direction = min(first, second) + ratio * abs(second - first)
    return normalize_direction(direction + 180.0)


def shortest_arc_delta(from_direction: float, to_direction: float) -> float:
    """Signed turn from one direction to another, in [-180, 180)."""
    return float(((to_direction - from_direction + 180.0) % 360.0) - 180.0)


def interpolate_direction_along_arc(
    from_direction: float,
    to_direction: float,
    fraction: float
) -> float:
    """Direction a fraction of the way from one bearing to another.

    Unlike `interpolate_ground_direction` this is directional: a fraction of
    0 returns `from_direction` and 1 returns `to_direction`.
    """
    delta = shortest_arc_delta(from_direction, to_direction)
    return normalize_direction(from_direction + fraction * delta)
