"""
CSV Export Module for the Wind Drift System.

This module renders fused wind profiles as delimited text in user-selected
units, separators and altitude reference frames.
"""

from csv_export.csv_formatter import (
    Separator,
    AltitudeUnit,
    SpeedUnit,
    DirectionUnit,
    ReferenceFrame,
    CsvExportConfig,
    export_samples,
    format_profile_csv,
    default_csv_filename,
)

__all__ = [
    "Separator",
    "AltitudeUnit",
    "SpeedUnit",
    "DirectionUnit",
    "ReferenceFrame",
    "CsvExportConfig",
    "export_samples",
    "format_profile_csv",
    "default_csv_filename",
]
