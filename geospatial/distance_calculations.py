"""
Great-Circle Calculations on a Spherical Earth.

This module moves locations along a bearing and measures the distance and
azimuth between two locations. All calculations use a sphere with the mean
Earth radius from `common.constants`, so that the forward projection used by
the drift model and the haversine distance used to report it agree.

Scientific Context
------------------
Domain: Spherical trigonometry
Model: Great circle on a sphere of radius 6,371 km

Why a Sphere Is Sufficient
--------------------------
Recovery drift is measured in hundreds of meters to a few kilometers. Over
such distances the spherical approximation differs from the WGS84 geodesic
by well under a meter, which is far below the uncertainty of the wind
forecast that drives the drift.

Implementation
--------------
The forward projection and the haversine distance are written out with
numpy. Azimuths are solved with `pyproj.Geod` configured as a sphere of the
same radius, which handles the antipodal and polar cases.

References
----------
- Sinnott, R.W. (1984). Virtues of the Haversine. Sky and Telescope, 68(2), 159.
- Veness, C. Calculate distance, bearing and more between Latitude/Longitude
  points. https://www.movable-type.co.uk/scripts/latlong.html
"""

from dataclasses import dataclass

import numpy as np
from pyproj import Geod

from common.constants import DriftConstants
from common.types import GeoLocation


# Geodesic calculator on the same sphere as the closed-form formulas
_sphere_geod = Geod(
    a=DriftConstants.EARTH_MEAN_RADIUS.value,
    b=DriftConstants.EARTH_MEAN_RADIUS.value
)


@dataclass
class DriftVector:
    """Horizontal displacement between two locations.

    Attributes
    ----------
    distance_m : float
        Great-circle distance in meters.
    bearing_deg : float
        Initial bearing from the first to the second location in degrees,
        clockwise from north, in [0, 360).
    """
    distance_m: float
    bearing_deg: float


def normalize_longitude(longitude_deg: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    return float(((longitude_deg + 180.0) % 360.0) - 180.0)


def normalize_bearing(bearing_deg: float) -> float:
    """Wrap a bearing into [0, 360)."""
    return float(bearing_deg % 360.0)


def _project(
    position: GeoLocation,
    angular_distance: float,
    bearing_deg: float
) -> None:
    """Apply the spherical forward-geodesic formula in place."""
    bearing_rad = np.radians(bearing_deg)
    lat1, lon1 = position.to_radians()

    sin_lat2 = (
        np.sin(lat1) * np.cos(angular_distance)
        + np.cos(lat1) * np.sin(angular_distance) * np.cos(bearing_rad)
    )
    sin_lat2 = np.clip(sin_lat2, -1.0, 1.0)

    y = np.sin(bearing_rad) * np.sin(angular_distance) * np.cos(lat1)
    x = np.cos(angular_distance) - np.sin(lat1) * sin_lat2

    latitude = float(np.degrees(np.arcsin(sin_lat2)))
    longitude = normalize_longitude(float(np.degrees(lon1 + np.arctan2(y, x))))

    position.move_to(latitude, longitude)


def move_along_bearing(
    position: GeoLocation,
    distance_m: float,
    bearing_deg: float
) -> None:
    """Move a location along a great circle.

    Parameters
    ----------
    position : GeoLocation
        Starting location; overwritten with the destination.
    distance_m : float
        Distance to travel in meters.
    bearing_deg : float
        Initial bearing in degrees clockwise from north.

    Examples
    --------
    >>> site = GeoLocation(0.0, 0.0)
    >>> move_along_bearing(site, 111_195.0, 90.0)
    >>> round(site.longitude, 3)
    1.0
    """
    angular_distance = distance_m / DriftConstants.EARTH_MEAN_RADIUS.value
    _project(position, angular_distance, bearing_deg)


def move_along_bearing_kilometers(
    position: GeoLocation,
    distance_m: float,
    bearing_deg: float
) -> None:
    """Move a location along a great circle, working in kilometers.

    Same contract as `move_along_bearing`; the distance is still given in
    meters and divided by the Earth radius in kilometers after conversion.
    """
    distance_km = distance_m / 1000.0
    angular_distance = distance_km / DriftConstants.EARTH_MEAN_RADIUS_KM.value
    _project(position, angular_distance, bearing_deg)


def great_circle_distance(location_a: GeoLocation, location_b: GeoLocation) -> float:
    """Compute the haversine distance between two locations.

    Parameters
    ----------
    location_a, location_b : GeoLocation
        The two locations.

    Returns
    -------
    float
        Distance in meters. Symmetric, and zero for identical locations.
    """
    lat_a, lon_a = location_a.to_radians()
    lat_b, lon_b = location_b.to_radians()

    dlat = lat_b - lat_a
    dlon = lon_b - lon_a

    # Square of half the chord length between the points
    a = np.sin(dlat / 2)**2 + np.cos(lat_a) * np.cos(lat_b) * np.sin(dlon / 2)**2
    a = np.clip(a, 0.0, 1.0)

    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return float(c * DriftConstants.EARTH_MEAN_RADIUS.value)


def compute_bearing(location_a: GeoLocation, location_b: GeoLocation) -> float:
    """Compute the initial bearing from one location to another.

    Returns
    -------
    float
        Bearing in degrees clockwise from north, in [0, 360). Zero when the
        locations coincide.
    """
    azimuth_deg, _, _ = _sphere_geod.inv(
        location_a.longitude, location_a.latitude,
        location_b.longitude, location_b.latitude
    )
    return normalize_bearing(float(azimuth_deg))


def compute_drift_vector(launch: GeoLocation, landing: GeoLocation) -> DriftVector:
    """Compute how far and in which direction a landing point drifted.

    Parameters
    ----------
    launch : GeoLocation
        Launch (or apogee) location.
    landing : GeoLocation
        Landing location.

    Returns
    -------
    DriftVector
        Haversine distance in meters and initial bearing in degrees.
    """
    return DriftVector(
        distance_m=great_circle_distance(launch, landing),
        bearing_deg=compute_bearing(launch, landing)
    )
