"""
Descent Drift Projection.

This module estimates where a rocket lands after apogee. The descent is cut
into altitude bands at every profile sample below apogee and at the main
parachute deployment altitude. Within each band the rocket falls at a
constant rate while the band-averaged wind carries it downwind:

    time in band   = band height / descent rate
    drift distance = time in band * wind speed
    drift bearing  = wind direction + 180 deg   (wind blows *from* its bearing)

The landing point is the apogee location moved band by band, from apogee to
the ground. This is not a flight simulation: ascent, aerodynamics and
weathercocking are not modelled, and the apogee position defaults to the
launch site.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np

from common.logging_config import get_logger
from common.types import DescentData, GeoLocation, LaunchSimulationData, WindProfile
from common.units import feet_to_meters, knots_to_feet_per_second
from data_ingestion.launch_window import LaunchTimeWindow
from drift_prediction.band_interpolation import span_wind
from geospatial.distance_calculations import (
    compute_drift_vector,
    move_along_bearing_kilometers,
    normalize_bearing,
)

logger = get_logger(__name__)


def drift_step(
    location: GeoLocation,
    wind_speed_kt: float,
    wind_direction_deg: float,
    descent_rate_fps: float,
    band_height_ft: float
) -> Optional[float]:
    """Drift a falling rocket through one wind band.

    Parameters
    ----------
    location : GeoLocation
        Rocket position at the top of the band; overwritten with the
        position at the bottom.
    wind_speed_kt : float
        Band wind speed in knots.
    wind_direction_deg : float
        Band wind direction (from) in degrees.
    descent_rate_fps : float
        Descent rate in ft/s; the sign is ignored.
    band_height_ft : float
        Height of the band in feet.

    Returns
    -------
    float or None
        Drift distance in feet, or None (location untouched) when the
        descent rate is zero or not a number.
    """
    if not np.isfinite(descent_rate_fps) or descent_rate_fps == 0:
        logger.debug(f"Cannot use the current descent rate: {descent_rate_fps}")
        return None

    descent_duration_s = abs(band_height_ft) / abs(descent_rate_fps)
    drift_distance_ft = descent_duration_s * knots_to_feet_per_second(wind_speed_kt)

    downwind_bearing = normalize_bearing(wind_direction_deg + 180.0)
    move_along_bearing_kilometers(location, feet_to_meters(drift_distance_ft), downwind_bearing)

    return drift_distance_ft


@dataclass
class DescentConfig:
    """Configuration for a dual-deployment descent.

    Attributes
    ----------
    drogue_descent_rate_fps : float
        Descent rate under drogue, from apogee to main deployment.
    main_descent_rate_fps : float
        Descent rate under the main parachute.
    main_deploy_altitude_ft : float
        Altitude above ground at which the main parachute opens. Use 0 for
        a single-deployment descent under drogue only.
    """
    drogue_descent_rate_fps: float = 75.0
    main_descent_rate_fps: float = 18.0
    main_deploy_altitude_ft: float = 500.0


@dataclass
class DriftSummary:
    """Headline results of one launch simulation.

    Attributes
    ----------
    apogee_ft : int
        Apogee in feet above ground.
    launch_location : GeoLocation
        Launch site.
    landing_location : GeoLocation
        Predicted landing point.
    drift_distance_m : float
        Distance from launch site to landing point in meters.
    drift_bearing_deg : float
        Bearing from launch site to landing point in degrees.
    """
    apogee_ft: int
    launch_location: GeoLocation
    landing_location: GeoLocation
    drift_distance_m: float
    drift_bearing_deg: float


class DescentSimulator:
    """Projects descents through fused wind profiles.

    Examples
    --------
    >>> simulator = DescentSimulator(DescentConfig(main_deploy_altitude_ft=700))
    >>> simulation = simulator.simulate(profile, site, apogee_ft=5000)  # doctest: +SKIP
    >>> simulation.get_landing_location()  # doctest: +SKIP
    GeoLocation(latitude=30.61..., longitude=-97.49...)
    """

    def __init__(self, config: Optional[DescentConfig] = None):
        """Initialize the simulator.

        Parameters
        ----------
        config : DescentConfig, optional
            Descent rates and main deployment altitude.
        """
        self.config = config or DescentConfig()
        self._logger = get_logger("DescentSimulator")

    def _descent_rate(self, band_top_ft: float) -> float:
        if band_top_ft > self.config.main_deploy_altitude_ft:
            return self.config.drogue_descent_rate_fps
        return self.config.main_descent_rate_fps

    def build_descent_plan(
        self,
        profile: WindProfile,
        apogee_ft: float
    ) -> List[DescentData]:
        """Cut the descent into bands and attach wind and descent rate.

        Band tops are the apogee, every profile sample between apogee and
        the ground, and the main deployment altitude. A band split by the
        main deployment altitude averages the wind over its own span only.
        Above the highest sample the highest sample's wind is used
        unchanged.

        Parameters
        ----------
        profile : WindProfile
            Fused, ground-referenced profile.
        apogee_ft : float
            Apogee in feet above ground.

        Returns
        -------
        List[DescentData]
            Bands from apogee downward; each band ends at the next entry's
            altitude, the last one at the ground. Empty for an empty profile.
        """
        if profile.is_empty:
            self._logger.warning("Cannot plan a descent through an empty wind profile")
            return []

        tops = {float(apogee_ft)}
        tops.update(s.altitude for s in profile.samples if 0.0 < s.altitude < apogee_ft)
        if 0.0 < self.config.main_deploy_altitude_ft < apogee_ft:
            tops.add(float(self.config.main_deploy_altitude_ft))

        highest = profile.samples[-1]
        ordered = sorted(tops, reverse=True)
        plan = []
        for index, top in enumerate(ordered):
            bottom = ordered[index + 1] if index + 1 < len(ordered) else 0.0
            wind = span_wind(bottom, top, profile)
            if wind is None:
                speed, direction = highest.speed, highest.direction
            else:
                speed, direction = wind
            plan.append(
                DescentData(
                    altitude=top,
                    descent_rate=self._descent_rate(top),
                    wind_speed=speed,
                    wind_direction=direction
                )
            )
        return plan

    def project_descent(
        self,
        location: GeoLocation,
        plan: Sequence[DescentData],
        simulation: Optional[LaunchSimulationData] = None
    ) -> float:
        """Drift a location through every band of a descent plan.

        Parameters
        ----------
        location : GeoLocation
            Apogee location; overwritten with the landing location.
        plan : sequence of DescentData
            Bands from `build_descent_plan`.
        simulation : LaunchSimulationData, optional
            Receives one path point at the bottom of each band.

        Returns
        -------
        float
            Total drift distance in feet.
        """
        total_drift_ft = 0.0
        for index, band in enumerate(plan):
            bottom = plan[index + 1].altitude if index + 1 < len(plan) else 0.0
            drift_ft = drift_step(
                location,
                band.wind_speed,
                band.wind_direction,
                band.descent_rate,
                band.altitude - bottom
            )
            if drift_ft is not None:
                total_drift_ft += drift_ft
            if simulation is not None:
                simulation.add_launch_path_point(bottom, location)
        return total_drift_ft

    def simulate(
        self,
        profile: WindProfile,
        launch_location: GeoLocation,
        apogee_ft: float,
        hour: Optional[int] = None,
        apogee_location: Optional[GeoLocation] = None
    ) -> LaunchSimulationData:
        """Simulate one launch through one hourly profile.

        Parameters
        ----------
        profile : WindProfile
            Fused, ground-referenced profile.
        launch_location : GeoLocation
            Launch site. Never mutated.
        apogee_ft : float
            Apogee in feet above ground; must be positive.
        hour : int, optional
            Hour of day of the launch; defaults to the profile's valid time.
        apogee_location : GeoLocation, optional
            Where apogee occurs; defaults to the launch site.

        Returns
        -------
        LaunchSimulationData
            Path from launch site through apogee to the landing point.

        Raises
        ------
        ValueError
            If the apogee is not a positive number.
        """
        if not np.isfinite(apogee_ft) or apogee_ft <= 0:
            raise ValueError(f"Invalid apogee: {apogee_ft}")

        if hour is None:
            hour = profile.valid_time.hour if profile.valid_time is not None else 0

        simulation = LaunchSimulationData(
            elevation=profile.ground_elevation,
            hour=hour,
            ground_wind_speed=profile.ground_wind_speed,
            ground_wind_direction=profile.ground_wind_direction,
            model_name=profile.source_model
        )

        rocket = (apogee_location or launch_location).copy()
        simulation.add_launch_path_point(0.0, launch_location)
        simulation.add_launch_path_point(apogee_ft, rocket)

        plan = self.build_descent_plan(profile, apogee_ft)
        if not plan:
            simulation.add_launch_path_point(0.0, rocket)
            return simulation

        drift_ft = self.project_descent(rocket, plan, simulation)
        self._logger.info(
            f"Hour {simulation.get_launch_time()}: drifted {drift_ft:.0f} ft "
            f"through {len(plan)} bands"
        )
        return simulation

    def simulate_forecast(
        self,
        profiles: Sequence[WindProfile],
        launch_location: GeoLocation,
        apogee_ft: float,
        window: Optional[LaunchTimeWindow] = None
    ) -> List[LaunchSimulationData]:
        """Simulate one launch per forecast hour.

        Hours with an empty profile are skipped.

        Parameters
        ----------
        profiles : sequence of WindProfile
            One profile per forecast hour.
        launch_location : GeoLocation
            Launch site.
        apogee_ft : float
            Apogee in feet above ground.
        window : LaunchTimeWindow, optional
            Supplies the hour of day when profiles carry no valid time.

        Returns
        -------
        List[LaunchSimulationData]
            One simulation per usable hour.
        """
        simulations = []
        for index, profile in enumerate(profiles):
            if profile.is_empty:
                self._logger.info(f"Skipping forecast hour {index} with an empty profile")
                continue

            hour = _hour_of_day(profile.valid_time, window, index)
            simulations.append(
                self.simulate(profile, launch_location, apogee_ft, hour=hour)
            )
        return simulations


def _hour_of_day(
    valid_time: Optional[datetime],
    window: Optional[LaunchTimeWindow],
    index: int
) -> int:
    if valid_time is not None:
        return valid_time.hour
    if window is not None:
        return (window.start_hour + index) % 24
    return index % 24


def summarize_simulation(simulation: LaunchSimulationData) -> Optional[DriftSummary]:
    """Summarize apogee and landing drift of a simulation.

    Returns
    -------
    DriftSummary or None
        None when the simulation has no launch path.
    """
    launch = simulation.get_launch_location()
    landing = simulation.get_landing_location()
    if launch is None or landing is None:
        return None

    vector = compute_drift_vector(launch, landing)
    return DriftSummary(
        apogee_ft=simulation.get_apogee(),
        launch_location=launch,
        landing_location=landing,
        drift_distance_m=vector.distance_m,
        drift_bearing_deg=vector.bearing_deg
    )
