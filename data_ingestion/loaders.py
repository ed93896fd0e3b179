"""
Forecast Loaders for the Wind Drift System.

This module turns already-fetched forecast payloads into wind profiles.
Network access is left to the caller; every loader here consumes a parsed
JSON mapping and performs no I/O.

Supported Data Sources
----------------------
1. Open-Meteo hourly forecast (near-surface heights plus pressure levels
   with geopotential heights), fused into one profile per hour.
2. WindsAloft (RAP and Open-Meteo backed) single-hour profiles keyed by
   altitude in feet.

Design Principles
-----------------
- Missing fields, short arrays and null values skip a single sample, never
  the whole forecast
- Every skipped sample is recorded in a `DataQualityLog`
- Hourly arrays are aligned on a common hour index via xarray
- Results are returned explicitly; loaders keep no forecast between calls
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np
import xarray as xr

from common.constants import (
    OPEN_METEO_MODEL_NAME,
    OPEN_METEO_PRESSURE_LEVELS_HPA,
    OPEN_METEO_WIND_ALTITUDES_M,
    RAP_MODEL_NAME,
)
from common.logging_config import DataQualityLog, get_logger
from common.types import ALTITUDE_REFERENCE_MSL, GeoLocation, WindProfile, WindSample
from common.units import meters_to_feet
from data_ingestion.launch_window import LaunchTimeWindow
from profile_fusion.fusion_engine import ProfileFusionEngine

logger = get_logger(__name__)

HOUR_DIM = "hour"


@dataclass
class IngestionConfig:
    """Configuration for Open-Meteo ingestion.

    Attributes
    ----------
    wind_altitudes_m : tuple of int
        Near-surface heights (meters above ground) to read.
    pressure_levels_hpa : tuple of int
        Pressure levels (hPa) to read.
    wind_speed_unit : str
        Speed unit requested from the provider. Profiles assume knots.
    expected_hours : int, optional
        Number of hours requested; a different count in the payload is
        logged.
    """
    wind_altitudes_m: Tuple[int, ...] = OPEN_METEO_WIND_ALTITUDES_M
    pressure_levels_hpa: Tuple[int, ...] = OPEN_METEO_PRESSURE_LEVELS_HPA
    wind_speed_unit: str = "kn"
    expected_hours: Optional[int] = None


@dataclass
class ForecastResult:
    """Profiles fused from one forecast payload.

    Attributes
    ----------
    profiles : List[WindProfile]
        One profile per forecast hour, in hour order. A profile may be
        empty when the hour had no usable pressure levels.
    valid_times : List[datetime or None]
        Forecast time of each hour, if the payload provided one.
    ground_elevation_ft : float
        Elevation of the forecast location in feet.
    quality : DataQualityLog
        Samples skipped during ingestion.
    dataset : xr.Dataset, optional
        The hourly arrays aligned on the hour index.
    """
    profiles: List[WindProfile] = field(default_factory=list)
    valid_times: List[Optional[datetime]] = field(default_factory=list)
    ground_elevation_ft: float = 0.0
    quality: DataQualityLog = field(default_factory=DataQualityLog)
    dataset: Optional[xr.Dataset] = None

    @property
    def hour_count(self) -> int:
        return len(self.profiles)

    def profile_for_hour(self, hour_index: int) -> Optional[WindProfile]:
        """Get the profile at an hour index, or None if out of range."""
        if 0 <= hour_index < len(self.profiles):
            return self.profiles[hour_index]
        return None


def altitude_field_names(altitude_m: int) -> Tuple[str, str]:
    """Speed and direction field names for a near-surface height."""
    return f"wind_speed_{altitude_m}m", f"wind_direction_{altitude_m}m"


def pressure_field_names(pressure_hpa: int) -> Tuple[str, str, str]:
    """Speed, direction and geopotential height field names for a level."""
    return (
        f"wind_speed_{pressure_hpa}hPa",
        f"wind_direction_{pressure_hpa}hPa",
        f"geopotential_height_{pressure_hpa}hPa",
    )


def build_open_meteo_params(
    location: GeoLocation,
    window: LaunchTimeWindow,
    config: Optional[IngestionConfig] = None
) -> Dict[str, str]:
    """Build the query parameters for an Open-Meteo hourly forecast.

    Parameters
    ----------
    location : GeoLocation
        Launch site.
    window : LaunchTimeWindow
        Hours to request.
    config : IngestionConfig, optional
        Heights and pressure levels to request.

    Returns
    -------
    dict
        Query parameters, ready to be URL-encoded by the caller.
    """
    config = config or IngestionConfig()

    speed_names = [altitude_field_names(a)[0] for a in config.wind_altitudes_m]
    direction_names = [altitude_field_names(a)[1] for a in config.wind_altitudes_m]
    levels = [pressure_field_names(p) for p in config.pressure_levels_hpa]

    hourly = (
        speed_names
        + direction_names
        + [names[0] for names in levels]
        + [names[1] for names in levels]
        + [names[2] for names in levels]
    )

    return {
        "latitude": str(location.latitude),
        "longitude": str(location.longitude),
        "start_hour": window.start_iso(),
        "end_hour": window.end_iso(),
        "wind_speed_unit": config.wind_speed_unit,
        "hourly": ",".join(hourly),
    }


def _parse_valid_time(value: Any) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _scalar_or_default(
    value: Any,
    field_name: str,
    quality: DataQualityLog,
    default: float = 0.0
) -> float:
    """Read a payload scalar, falling back to `default` when unusable.

    A null value takes the default silently. A non-numeric or non-finite
    value takes the default and is recorded in `quality`.
    """
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = float("nan")
    if np.isfinite(number):
        return number
    quality.record_skip(field_name, None, "value not numeric", {"value": repr(value)})
    return default


def _to_float_array(values: List[Any], hour_count: int) -> np.ndarray:
    """Copy a JSON array into a NaN-padded float array of `hour_count`."""
    array = np.full(hour_count, np.nan, dtype=np.float64)
    for index, value in enumerate(values[:hour_count]):
        if value is None:
            continue
        try:
            array[index] = float(value)
        except (TypeError, ValueError):
            continue
    return array


class OpenMeteoForecastLoader:
    """Loader for Open-Meteo hourly wind forecasts.

    Examples
    --------
    >>> loader = OpenMeteoForecastLoader()
    >>> result = loader.load(forecast_json)  # doctest: +SKIP
    >>> result.profiles[0].samples[0].altitude  # doctest: +SKIP
    0.0
    """

    def __init__(self, config: Optional[IngestionConfig] = None):
        """Initialize the loader.

        Parameters
        ----------
        config : IngestionConfig, optional
            Heights and pressure levels to read.
        """
        self.config = config or IngestionConfig()
        self._engine = ProfileFusionEngine(source_model=OPEN_METEO_MODEL_NAME)
        self._logger = get_logger(self.__class__.__name__)

    def _requested_fields(self) -> List[str]:
        names: List[str] = []
        for altitude in self.config.wind_altitudes_m:
            names.extend(altitude_field_names(altitude))
        for pressure in self.config.pressure_levels_hpa:
            names.extend(pressure_field_names(pressure))
        return names

    def to_dataset(self, hourly: Mapping[str, Any], quality: DataQualityLog) -> xr.Dataset:
        """Align the hourly arrays on a common hour index.

        Arrays shorter than the hour count are padded with NaN and null
        values become NaN. The unpadded array lengths are kept in the
        dataset attributes so that a short array can be told apart from a
        null value.

        Parameters
        ----------
        hourly : mapping
            The 'hourly' block of the payload.
        quality : DataQualityLog
            Receives one record per missing field.

        Returns
        -------
        xr.Dataset
            One variable per requested field present in the payload, along
            the 'hour' dimension.
        """
        times = hourly.get("time") or []
        array_lengths = [
            len(v) for k, v in hourly.items() if k != "time" and isinstance(v, list)
        ]
        hour_count = len(times) if times else max(array_lengths, default=0)

        data_vars = {}
        lengths = {}
        for name in self._requested_fields():
            values = hourly.get(name)
            if not isinstance(values, list):
                quality.record_skip(name, None, "field missing from forecast")
                continue
            data_vars[name] = (HOUR_DIM, _to_float_array(values, hour_count))
            lengths[name] = len(values)

        coords = {HOUR_DIM: np.arange(hour_count)}
        ds = xr.Dataset(data_vars, coords=coords)
        ds.attrs["array_lengths"] = lengths
        return ds

    def load(self, forecast_json: Mapping[str, Any]) -> ForecastResult:
        """Fuse a forecast payload into one profile per hour.

        Parameters
        ----------
        forecast_json : mapping
            Parsed Open-Meteo response.

        Returns
        -------
        ForecastResult
            Profiles, valid times, ground elevation and skipped samples.
            No profiles when the payload has no 'hourly' block.
        """
        quality = DataQualityLog(self._logger)

        elevation_m = _scalar_or_default(forecast_json.get("elevation"), "elevation", quality)
        ground_elevation_ft = meters_to_feet(elevation_m)

        hourly = forecast_json.get("hourly")
        if not isinstance(hourly, Mapping):
            self._logger.warning("Forecast does not contain an [hourly] member")
            quality.record_skip("hourly", None, "field missing from forecast")
            return ForecastResult(ground_elevation_ft=ground_elevation_ft, quality=quality)

        ds = self.to_dataset(hourly, quality)
        hour_count = ds.sizes[HOUR_DIM]

        if self.config.expected_hours is not None and self.config.expected_hours != hour_count:
            self._logger.info(
                f"Hour count {self.config.expected_hours} is different from "
                f"forecast hour count {hour_count}"
            )

        times = hourly.get("time") or []
        valid_times = [
            _parse_valid_time(times[i]) if i < len(times) else None
            for i in range(hour_count)
        ]

        profiles = []
        for hour_index in range(hour_count):
            hour = ds.isel({HOUR_DIM: hour_index})
            altitude_winds = self._altitude_samples(ds, hour, hour_index, quality)
            pressure_winds = self._pressure_samples(ds, hour, hour_index, elevation_m, quality)

            profiles.append(
                self._engine.fuse(
                    altitude_winds,
                    pressure_winds,
                    ground_elevation=ground_elevation_ft,
                    valid_time=valid_times[hour_index]
                )
            )

        self._logger.info(
            f"Fused {hour_count} hourly profiles; skipped {quality.skip_count} samples"
        )

        return ForecastResult(
            profiles=profiles,
            valid_times=valid_times,
            ground_elevation_ft=ground_elevation_ft,
            quality=quality,
            dataset=ds
        )

    def _value(
        self,
        ds: xr.Dataset,
        hour: xr.Dataset,
        name: str,
        hour_index: int,
        quality: DataQualityLog
    ) -> Optional[float]:
        """Read one field at one hour, recording why it is unusable."""
        if name not in hour:
            return None

        value = float(hour[name].values)
        if np.isfinite(value):
            return value

        if hour_index >= ds.attrs["array_lengths"].get(name, 0):
            quality.record_skip(name, hour_index, "array too short for hour index")
        else:
            quality.record_skip(name, hour_index, "value is null")
        return None

    def _altitude_samples(
        self,
        ds: xr.Dataset,
        hour: xr.Dataset,
        hour_index: int,
        quality: DataQualityLog
    ) -> List[WindSample]:
        """Near-surface samples in feet above ground, ascending."""
        samples = []
        for altitude_m in self.config.wind_altitudes_m:
            speed_name, direction_name = altitude_field_names(altitude_m)
            speed = self._value(ds, hour, speed_name, hour_index, quality)
            direction = self._value(ds, hour, direction_name, hour_index, quality)
            if speed is None or direction is None:
                continue
            samples.append(WindSample(meters_to_feet(altitude_m), speed, direction))

        return sorted(samples, key=lambda s: s.altitude)

    def _pressure_samples(
        self,
        ds: xr.Dataset,
        hour: xr.Dataset,
        hour_index: int,
        elevation_m: float,
        quality: DataQualityLog
    ) -> List[WindSample]:
        """Pressure-level samples in feet above ground, ascending."""
        samples = []
        for pressure in self.config.pressure_levels_hpa:
            speed_name, direction_name, height_name = pressure_field_names(pressure)
            speed = self._value(ds, hour, speed_name, hour_index, quality)
            direction = self._value(ds, hour, direction_name, hour_index, quality)
            height = self._value(ds, hour, height_name, hour_index, quality)
            if speed is None or direction is None or height is None:
                continue
            samples.append(WindSample(meters_to_feet(height - elevation_m), speed, direction))

        return sorted(samples, key=lambda s: s.altitude)


class WindsAloftLoader:
    """Loader for single-hour WindsAloft forecasts.

    The payload lists altitudes in feet and maps each altitude (as a
    string) onto a speed and a direction. RAP-backed payloads keep their
    data in the '...Raw' fields. Altitudes are sea-level referenced, so the
    profile is returned unfused with an MSL altitude reference.
    """

    def __init__(self):
        self._logger = get_logger(self.__class__.__name__)

    @staticmethod
    def _lookup(mapping: Any, raw_altitude: Any, altitude: float) -> Optional[Any]:
        """Find the value stored for an altitude under its string key."""
        if not isinstance(mapping, Mapping):
            return None
        keys = [str(raw_altitude), str(altitude)]
        if altitude.is_integer():
            keys.append(str(int(altitude)))
        for key in keys:
            if key in mapping:
                return mapping[key]
        return None

    def _altitudes(self, raw_altitudes: Any, quality: DataQualityLog) -> List[Tuple[float, Any]]:
        """Finite altitudes in ascending order, each paired with its raw key.

        Altitudes listed twice, even once as a string and once as a number,
        are read once.
        """
        if not isinstance(raw_altitudes, list):
            quality.record_skip("altitudes", None, "altitude list not an array")
            return []

        altitudes: Dict[float, Any] = {}
        for raw in raw_altitudes:
            try:
                altitude = float(raw)
            except (TypeError, ValueError):
                altitude = float("nan")
            if not np.isfinite(altitude) or isinstance(raw, bool):
                quality.record_skip(f"altitude_{raw}ft", None, "altitude not numeric")
                continue
            altitudes.setdefault(altitude, raw)

        return sorted(altitudes.items())

    def load(
        self,
        wind_json: Mapping[str, Any],
        quality: Optional[DataQualityLog] = None
    ) -> WindProfile:
        """Build a profile from a WindsAloft payload.

        Duplicate altitudes are read once. Speeds and directions are
        truncated to whole numbers, as the service reports them. Altitudes
        and winds that are null, non-numeric or infinite skip their sample;
        unusable ground values are read as 0.

        Parameters
        ----------
        wind_json : mapping
            Parsed WindsAloft response.
        quality : DataQualityLog, optional
            Receives one record per value without usable data.

        Returns
        -------
        WindProfile
            Profile with samples at ascending altitudes in feet MSL.
        """
        quality = quality or DataQualityLog(self._logger)
        model = str(wind_json.get("model", ""))

        if model == RAP_MODEL_NAME:
            raw_altitudes = wind_json.get("altFtRaw") or []
            speeds = wind_json.get("speedRaw") or {}
            directions = wind_json.get("directionRaw") or {}
        else:
            raw_altitudes = wind_json.get("altFt") or []
            speeds = wind_json.get("speed") or {}
            directions = wind_json.get("direction") or {}

        samples = []
        for altitude, raw in self._altitudes(raw_altitudes, quality):
            field_name = f"altitude_{raw}ft"
            speed = self._lookup(speeds, raw, altitude)
            direction = self._lookup(directions, raw, altitude)
            if speed is None or direction is None:
                quality.record_skip(field_name, None, "wind data missing")
                continue
            try:
                samples.append(
                    WindSample(altitude, int(float(speed)), int(float(direction)))
                )
            except (TypeError, ValueError, OverflowError):
                quality.record_skip(field_name, None, "wind data not numeric")

        return WindProfile(
            source_model=model,
            samples=samples,
            ground_elevation=_scalar_or_default(wind_json.get("groundElev"), "groundElev", quality),
            ground_wind_speed=_scalar_or_default(wind_json.get("groundSpd"), "groundSpd", quality),
            ground_wind_direction=_scalar_or_default(
                wind_json.get("groundDir"), "groundDir", quality
            ),
            altitude_reference=ALTITUDE_REFERENCE_MSL
        )


def load_winds_aloft(
    wind_json: Mapping[str, Any],
    quality: Optional[DataQualityLog] = None
) -> WindProfile:
    """Build an MSL-referenced profile from a WindsAloft payload."""
    return WindsAloftLoader().load(wind_json, quality)
