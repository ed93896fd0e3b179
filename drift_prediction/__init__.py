"""
Drift Prediction Module for the Wind Drift System.

This module locates a rocket within the wind profile, averages the wind
across each band, and projects the descent drift to a landing point.
"""

from drift_prediction.band_interpolation import (
    BandLocation,
    locate_band,
    average_wind_speed,
    average_wind_direction,
    band_wind,
    span_wind,
)

from drift_prediction.descent import (
    DescentConfig,
    DescentSimulator,
    DriftSummary,
    drift_step,
    summarize_simulation,
)

__all__ = [
    "BandLocation",
    "locate_band",
    "average_wind_speed",
    "average_wind_direction",
    "band_wind",
    "span_wind",
    "DescentConfig",
    "DescentSimulator",
    "DriftSummary",
    "drift_step",
    "summarize_simulation",
]
