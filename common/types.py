"""
Type Definitions for Wind Profiles and Launch Simulations.

This module defines the dataclasses exchanged between ingestion, fusion,
drift projection and export. Units are fixed per field and documented in
each docstring:

- altitudes and elevations are in FEET
- wind speeds are in KNOTS
- directions and bearings are in DEGREES clockwise from north, and wind
  directions follow the meteorological "from" convention
- coordinates are in DEGREES

Every numeric field is validated on construction; a non-finite or
non-numeric value raises `ValueError` and no partially built object escapes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

import numpy as np
from numpy.typing import NDArray

ALTITUDE_REFERENCE_AGL = "AGL"
ALTITUDE_REFERENCE_MSL = "MSL"


def _finite(value: Any, label: str) -> float:
    """Return `value` as a float, raising ValueError unless it is finite."""
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid {label}: {value!r}") from e
    if not np.isfinite(number):
        raise ValueError(f"Invalid {label}: {value!r}")
    return number


@dataclass
class GeoLocation:
    """A geographic coordinate on Earth's surface.

    Unlike an immutable value, a location is used as an accumulator while a
    descent is projected: each drift step overwrites the latitude and
    longitude in place. Callers that need to keep an intermediate position
    take a `copy()`.

    Attributes
    ----------
    latitude : float
        Latitude in DEGREES. Range: [-90, 90].
    longitude : float
        Longitude in DEGREES. Range: [-180, 180].

    Examples
    --------
    >>> site = GeoLocation(latitude=30.6168, longitude=-97.506)
    >>> apogee = site.copy()
    >>> apogee.move_to(30.62, -97.5)
    >>> site.latitude
    30.6168
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate coordinate ranges."""
        self.latitude, self.longitude = self._validated(self.latitude, self.longitude)

    @staticmethod
    def _validated(latitude: Any, longitude: Any):
        lat = _finite(latitude, "latitude")
        lon = _finite(longitude, "longitude")
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"Latitude {lat} out of range [-90, 90]")
        if not -180.0 <= lon <= 180.0:
            raise ValueError(f"Longitude {lon} out of range [-180, 180]")
        return lat, lon

    def move_to(self, latitude: float, longitude: float) -> None:
        """Overwrite both coordinates in place after validating them."""
        self.latitude, self.longitude = self._validated(latitude, longitude)

    def copy(self) -> 'GeoLocation':
        """Obtain a new object with the same coordinates."""
        return GeoLocation(self.latitude, self.longitude)

    def to_radians(self):
        """Convert to radians for trigonometry.

        Returns
        -------
        Tuple[float, float]
            (latitude_radians, longitude_radians)
        """
        return float(np.radians(self.latitude)), float(np.radians(self.longitude))


@dataclass(frozen=True)
class WindSample:
    """Wind speed and direction at a single altitude.

    Attributes
    ----------
    altitude : float
        Altitude in FEET. Ground-referenced for fused profiles and
        sea-level-referenced for raw WindsAloft data.
    speed : float
        Wind speed in KNOTS.
    direction : float
        Direction the wind blows from, DEGREES clockwise from north.
    """
    altitude: float
    speed: float
    direction: float

    def __post_init__(self):
        object.__setattr__(self, "altitude", _finite(self.altitude, "wind altitude"))
        object.__setattr__(self, "speed", _finite(self.speed, "wind speed"))
        object.__setattr__(self, "direction", _finite(self.direction, "wind direction"))


@dataclass
class WindProfile:
    """Wind samples at ascending altitudes from one forecast model and hour.

    A fused profile is built empty, populated once by the fusion engine and
    read-only afterwards. Once populated its samples are non-decreasing in
    altitude and the first sample sits at altitude 0.

    Attributes
    ----------
    source_model : str
        Name of the forecast model ('Open-Meteo', 'RAP', ...).
    samples : List[WindSample]
        Samples ordered by ascending altitude.
    ground_elevation : float
        Elevation of the forecast location in FEET above mean sea level.
    ground_wind_speed : float
        Wind speed at ground level in KNOTS.
    ground_wind_direction : float
        Wind direction at ground level in DEGREES.
    altitude_reference : str
        'AGL' when sample altitudes are above ground, 'MSL' when above
        mean sea level.
    valid_time : datetime, optional
        Forecast hour the profile describes.
    """
    source_model: str = ""
    samples: List[WindSample] = field(default_factory=list)
    ground_elevation: float = 0.0
    ground_wind_speed: float = 0.0
    ground_wind_direction: float = 0.0
    altitude_reference: str = ALTITUDE_REFERENCE_AGL
    valid_time: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def altitudes(self) -> NDArray[np.float64]:
        """Sample altitudes in FEET as an array."""
        return np.array([s.altitude for s in self.samples], dtype=np.float64)

    @property
    def max_altitude(self) -> Optional[float]:
        """Highest sample altitude, or None for an empty profile."""
        if not self.samples:
            return None
        return self.samples[-1].altitude

    @property
    def is_ground_anchored(self) -> bool:
        """True when the profile starts at altitude 0 and never descends."""
        if not self.samples or self.samples[0].altitude != 0.0:
            return False
        return bool(np.all(np.diff(self.altitudes) >= 0.0))


@dataclass(frozen=True)
class WeathercockWindData:
    """Expected weathercocking result at a particular ground wind speed.

    Attributes
    ----------
    wind_speed : float
        Ground level wind speed in MPH.
    upwind_distance : float
        Distance in FEET the rocket travels into the wind.
    apogee : float
        Altitude in FEET the rocket is expected to reach.
    """
    wind_speed: float
    upwind_distance: float
    apogee: float

    def __post_init__(self):
        object.__setattr__(self, "wind_speed", _finite(self.wind_speed, "weathercock wind speed"))
        object.__setattr__(self, "upwind_distance", _finite(self.upwind_distance, "weathercock distance"))
        object.__setattr__(self, "apogee", _finite(self.apogee, "weathercock altitude"))


@dataclass(frozen=True)
class DescentData:
    """Descent conditions within one altitude band.

    Attributes
    ----------
    altitude : float
        Top of the band in FEET.
    descent_rate : float
        Speed at which the rocket falls through the band in FT/S.
    wind_speed : float
        Representative wind speed for the band in KNOTS.
    wind_direction : float
        Representative wind direction (from) in DEGREES.
    """
    altitude: float
    descent_rate: float
    wind_speed: float
    wind_direction: float

    def __post_init__(self):
        object.__setattr__(self, "altitude", _finite(self.altitude, "descent altitude"))
        object.__setattr__(self, "descent_rate", _finite(self.descent_rate, "descent rate"))
        object.__setattr__(self, "wind_speed", _finite(self.wind_speed, "wind speed"))
        object.__setattr__(self, "wind_direction", _finite(self.wind_direction, "wind direction"))


@dataclass(frozen=True)
class LaunchPathPoint:
    """Altitude and coordinates of one point along the rocket's path.

    The location is copied on construction so later mutation of the
    caller's accumulator does not move recorded points.
    """
    altitude: float
    location: GeoLocation

    def __post_init__(self):
        if self.location is None:
            raise ValueError("Invalid launch path coordinates: None")
        object.__setattr__(self, "altitude", _finite(self.altitude, "launch path altitude"))
        object.__setattr__(self, "location", self.location.copy())


class LaunchSimulationData:
    """Results from simulating one launch at one forecast hour.

    The launch path is appended in chronological order: ascent points with
    non-decreasing altitude, then descent points. Apogee is the last point
    before the altitude first decreases.

    Attributes
    ----------
    hour : int
        Hour of day (0-23) the launch occurs.
    elevation : float
        Launch site elevation in FEET; negative values are stored as 0.
    ground_wind_speed : float
        Ground level wind speed in KNOTS.
    ground_wind_direction : float
        Ground level wind direction in DEGREES.
    model_name : str
        Forecast model that produced the wind data.
    """

    def __init__(
        self,
        elevation: float,
        hour: int,
        ground_wind_speed: float,
        ground_wind_direction: float,
        model_name: str = ""
    ):
        elevation = _finite(elevation, "elevation")
        self.hour = int(_finite(hour, "hour"))
        self.ground_wind_speed = _finite(ground_wind_speed, "ground wind speed")
        self.ground_wind_direction = _finite(ground_wind_direction, "ground wind direction")
        self.model_name = model_name
        self.elevation = elevation if elevation >= 0 else 0.0
        self._launch_path: List[LaunchPathPoint] = []

    @property
    def launch_path(self) -> List[LaunchPathPoint]:
        return list(self._launch_path)

    def add_launch_path_point(self, altitude: float, location: Optional[GeoLocation]) -> bool:
        """Append a point to the launch path.

        Points with a missing location or a non-numeric altitude are ignored.

        Returns
        -------
        bool
            True if the point was appended.
        """
        if location is None:
            return False
        try:
            self._launch_path.append(LaunchPathPoint(altitude, location))
        except ValueError:
            return False
        return True

    def get_launch_location(self) -> Optional[GeoLocation]:
        if not self._launch_path:
            return None
        return self._launch_path[0].location

    def get_apogee_location(self) -> Optional[GeoLocation]:
        """Coordinates where the rocket first starts moving downward."""
        for previous, current in zip(self._launch_path, self._launch_path[1:]):
            if current.altitude < previous.altitude:
                return previous.location
        return None

    def get_landing_location(self) -> Optional[GeoLocation]:
        if not self._launch_path:
            return None
        return self._launch_path[-1].location

    def get_apogee(self) -> int:
        """Highest altitude on the path in FEET, rounded; 0 if unavailable."""
        apogee = 0.0
        for point in self._launch_path:
            if point.altitude > apogee:
                apogee = point.altitude
        return int(round(apogee))

    def get_launch_time(self) -> str:
        """Launch hour as a 12-hour clock label such as '12AM' or '3PM'."""
        if self.hour == 0:
            return "12AM"
        if self.hour == 12:
            return "12PM"
        if self.hour > 12:
            return f"{self.hour - 12}PM"
        return f"{self.hour}AM"

    def get_wind_model_name(self) -> str:
        return self.model_name
