"""
Profile Fusion Module for the Wind Drift System.

This module merges near-surface and pressure-level winds into a single
ground-anchored profile, and provides the wrap-aware interpolation helpers
shared with drift projection and export.
"""

from profile_fusion.fusion_engine import (
    ProfileFusionEngine,
    fuse_wind_profile,
)

from profile_fusion.interpolation import (
    altitude_ratio,
    linear_interpolate,
    interpolate_ground_speed,
    interpolate_ground_direction,
    interpolate_direction_along_arc,
    shortest_arc_delta,
    normalize_direction,
)

__all__ = [
    "ProfileFusionEngine",
    "fuse_wind_profile",
    "altitude_ratio",
    "linear_interpolate",
    "interpolate_ground_speed",
    "interpolate_ground_direction",
    "interpolate_direction_along_arc",
    "shortest_arc_delta",
    "normalize_direction",
]
