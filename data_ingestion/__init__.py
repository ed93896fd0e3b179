"""
Data Ingestion Module for the Wind Drift System.

This module parses launch time windows and turns forecast payloads into
wind profiles.
"""

from data_ingestion.launch_window import (
    LaunchTimeWindow,
    check_forecast_range,
)

from data_ingestion.loaders import (
    IngestionConfig,
    ForecastResult,
    OpenMeteoForecastLoader,
    WindsAloftLoader,
    build_open_meteo_params,
    load_winds_aloft,
)

__all__ = [
    "LaunchTimeWindow",
    "check_forecast_range",
    "IngestionConfig",
    "ForecastResult",
    "OpenMeteoForecastLoader",
    "WindsAloftLoader",
    "build_open_meteo_params",
    "load_winds_aloft",
]
