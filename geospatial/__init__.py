"""
Geospatial Module for the Wind Drift System.

All Earth-surface calculations system-wide originate from this module:
- Great-circle projection of a location along a bearing
- Haversine distance between locations
- Initial bearing and drift vectors
"""

from geospatial.distance_calculations import (
    DriftVector,
    move_along_bearing,
    move_along_bearing_kilometers,
    great_circle_distance,
    compute_bearing,
    compute_drift_vector,
    normalize_bearing,
    normalize_longitude,
)

__all__ = [
    "DriftVector",
    "move_along_bearing",
    "move_along_bearing_kilometers",
    "great_circle_distance",
    "compute_bearing",
    "compute_drift_vector",
    "normalize_bearing",
    "normalize_longitude",
]
