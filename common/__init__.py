"""
Common utilities and infrastructure for the wind drift system.

This package provides foundational components used across all modules:
- Constants with units and provenance
- Unit registry and conversions
- Value types for locations, wind samples, profiles and simulations
- Logging and data quality records
"""

from common.constants import DriftConstants
from common.units import ureg, Q_, convert
from common.types import (
    GeoLocation,
    WindSample,
    WindProfile,
    DescentData,
    LaunchPathPoint,
    LaunchSimulationData,
    WeathercockWindData,
)
from common.logging_config import get_logger, DataQualityLog

__all__ = [
    "DriftConstants",
    "ureg",
    "Q_",
    "convert",
    "GeoLocation",
    "WindSample",
    "WindProfile",
    "DescentData",
    "LaunchPathPoint",
    "LaunchSimulationData",
    "WeathercockWindData",
    "get_logger",
    "DataQualityLog",
]
