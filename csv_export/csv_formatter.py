"""
Wind Profile CSV Export.

This module renders a wind profile as delimited text for rocket flight
simulators that accept a wind table:

    alt,speed,dir,stddev
    0.00,4.12,80.00,0.00
    30.48,4.12,80.00,0.00
    ...

Profiles are stored with altitudes in feet, speeds in knots and directions
in degrees. Every column is converted to the unit chosen in the export
configuration through the shared pint registry.

Configuration usually comes from a form, so `CsvExportConfig.from_mapping`
substitutes each field's default for any value it cannot parse and logs
the substitution at DEBUG level.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Optional, Type, TypeVar

import numpy as np

from common.constants import MAX_WIND_STANDARD_DEVIATION
from common.logging_config import get_logger
from common.types import ALTITUDE_REFERENCE_AGL, WindProfile, WindSample
from common.units import convert
from profile_fusion.interpolation import (
    altitude_ratio,
    interpolate_ground_direction,
    interpolate_ground_speed,
    normalize_direction,
)

logger = get_logger(__name__)

# Units the profile is stored in
PROFILE_ALTITUDE_UNIT = "ft"
PROFILE_SPEED_UNIT = "kt"
PROFILE_DIRECTION_UNIT = "deg"

MAX_DECIMAL_PLACES = 10


class Separator(Enum):
    """Field separators, in form order."""

    COMMA = ","
    SEMICOLON = ";"
    SPACE = " "
    TAB = "\t"


class AltitudeUnit(Enum):
    METERS = "m"
    KILOMETERS = "km"
    FEET = "ft"
    YARDS = "yd"
    MILES = "mi"
    NAUTICAL_MILES = "nmi"


class SpeedUnit(Enum):
    METERS_PER_SECOND = "m/s"
    KILOMETERS_PER_HOUR = "km/h"
    FEET_PER_SECOND = "ft/s"
    MILES_PER_HOUR = "mph"
    KNOTS = "kt"


class DirectionUnit(Enum):
    DEGREES = "deg"
    RADIANS = "rad"
    ARCMINUTES = "arcmin"


class ReferenceFrame(Enum):
    """Altitude reference of the exported rows."""

    MSL = "MSL"
    """Altitude above mean sea level."""

    AGL = "AGL"
    """Altitude above the ground at the launch site."""


E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: Type[E], raw: Any, default: E, field_name: str) -> E:
    """Match a form value against an enum by index, value or name."""
    if raw is None:
        return default
    if isinstance(raw, enum_cls):
        return raw

    members = list(enum_cls)
    if isinstance(raw, (int, np.integer)) and not isinstance(raw, bool):
        if 0 <= raw < len(members):
            return members[raw]
    elif isinstance(raw, str):
        if raw in (member.value for member in members):
            return enum_cls(raw)
        text = raw.strip()
        if text.isdigit() and int(text) < len(members):
            return members[int(text)]
        for member in members:
            if text.lower() in (str(member.value).lower(), member.name.lower()):
                return member

    logger.debug(f"Invalid {field_name} {raw!r}, using {default.name}")
    return default


def _parse_name(raw: Any, default: str, field_name: str) -> str:
    if raw is None:
        return default
    if isinstance(raw, str) and raw.strip() and "\n" not in raw:
        return raw.strip()
    logger.debug(f"Invalid {field_name} {raw!r}, using {default!r}")
    return default


def _parse_float(raw: Any, default: float, field_name: str) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        value = float("nan")
    if np.isfinite(value) and value >= 0:
        return value
    logger.debug(f"Invalid {field_name} {raw!r}, using {default}")
    return default


def _parse_decimals(raw: Any, default: int, field_name: str) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = -1
    if 0 <= value <= MAX_DECIMAL_PLACES and not isinstance(raw, bool):
        return value
    logger.debug(f"Invalid {field_name} {raw!r}, using {default}")
    return default


@dataclass
class CsvExportConfig:
    """Configuration for CSV export.

    Attributes
    ----------
    separator : Separator
        Field separator.
    altitude_name, speed_name, direction_name, stddev_name : str
        Header names of the four columns.
    altitude_unit : AltitudeUnit
        Unit of the altitude column.
    speed_unit : SpeedUnit
        Unit of the speed and standard deviation columns.
    direction_unit : DirectionUnit
        Unit of the direction column.
    reference_frame : ReferenceFrame
        Altitude reference of the rows.
    stddev : float
        Constant wind speed standard deviation written on every row.
    stddev_unit : SpeedUnit
        Unit `stddev` is given in.
    decimals : int
        Decimal places of every numeric field.
    """
    separator: Separator = Separator.COMMA
    altitude_name: str = "alt"
    speed_name: str = "speed"
    direction_name: str = "dir"
    stddev_name: str = "stddev"
    altitude_unit: AltitudeUnit = AltitudeUnit.METERS
    speed_unit: SpeedUnit = SpeedUnit.METERS_PER_SECOND
    direction_unit: DirectionUnit = DirectionUnit.DEGREES
    reference_frame: ReferenceFrame = ReferenceFrame.MSL
    stddev: float = 0.0
    stddev_unit: SpeedUnit = SpeedUnit.METERS_PER_SECOND
    decimals: int = 2

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> 'CsvExportConfig':
        """Build a configuration from user-supplied settings.

        Enum fields accept a member, its value ('kt', ';'), its name
        ('knots', 'semicolon') or its form index. Missing keys take the
        default silently; unusable values take the default with a DEBUG
        log naming the field.
        """
        defaults = cls()
        return cls(
            separator=_parse_enum(
                Separator, settings.get("separator"), defaults.separator, "separator"
            ),
            altitude_name=_parse_name(
                settings.get("altitude_name"), defaults.altitude_name, "altitude_name"
            ),
            speed_name=_parse_name(
                settings.get("speed_name"), defaults.speed_name, "speed_name"
            ),
            direction_name=_parse_name(
                settings.get("direction_name"), defaults.direction_name, "direction_name"
            ),
            stddev_name=_parse_name(
                settings.get("stddev_name"), defaults.stddev_name, "stddev_name"
            ),
            altitude_unit=_parse_enum(
                AltitudeUnit, settings.get("altitude_unit"),
                defaults.altitude_unit, "altitude_unit"
            ),
            speed_unit=_parse_enum(
                SpeedUnit, settings.get("speed_unit"), defaults.speed_unit, "speed_unit"
            ),
            direction_unit=_parse_enum(
                DirectionUnit, settings.get("direction_unit"),
                defaults.direction_unit, "direction_unit"
            ),
            reference_frame=_parse_enum(
                ReferenceFrame, settings.get("reference_frame"),
                defaults.reference_frame, "reference_frame"
            ),
            stddev=_parse_float(settings.get("stddev"), defaults.stddev, "stddev"),
            stddev_unit=_parse_enum(
                SpeedUnit, settings.get("stddev_unit"), defaults.stddev_unit, "stddev_unit"
            ),
            decimals=_parse_decimals(settings.get("decimals"), defaults.decimals, "decimals"),
        )

    def header(self) -> str:
        return self.separator.value.join(
            [self.altitude_name, self.speed_name, self.direction_name, self.stddev_name]
        )

    def clamped_stddev(self) -> float:
        """Standard deviation in `speed_unit`, capped at the unit's maximum."""
        maximum = MAX_WIND_STANDARD_DEVIATION[self.stddev_unit.value]
        stddev = min(max(self.stddev, 0.0), maximum)
        return convert(stddev, self.stddev_unit.value, self.speed_unit.value)


def _ground_level_sample(below: WindSample, above: WindSample) -> WindSample:
    """Wind at altitude 0 between a sample below ground and one above.

    Interpolated the same way the fusion engine derives its ground wind.
    """
    ratio = altitude_ratio(0.0, below.altitude, above.altitude)
    speed = interpolate_ground_speed(below.speed, above.speed, ratio)
    direction = interpolate_ground_direction(below.direction, above.direction, ratio)
    return WindSample(0.0, speed, direction)


def export_samples(profile: WindProfile, frame: ReferenceFrame) -> List[WindSample]:
    """Samples of a profile with altitudes in the requested frame.

    In the AGL frame a sample below ground is replaced by a sample
    interpolated to ground level when the next sample is above ground;
    otherwise it is dropped.

    Parameters
    ----------
    profile : WindProfile
        Profile with altitudes in feet, AGL or MSL referenced.
    frame : ReferenceFrame
        Altitude reference of the returned samples.

    Returns
    -------
    List[WindSample]
        Samples with altitudes in feet.
    """
    if profile.altitude_reference == ALTITUDE_REFERENCE_AGL:
        agl_offset = 0.0
    else:
        agl_offset = -profile.ground_elevation

    above_ground = [
        WindSample(s.altitude + agl_offset, s.speed, s.direction) for s in profile.samples
    ]

    if frame is ReferenceFrame.MSL:
        return [
            WindSample(s.altitude + profile.ground_elevation, s.speed, s.direction)
            for s in above_ground
        ]

    exported = []
    for index, sample in enumerate(above_ground):
        if sample.altitude >= 0:
            exported.append(sample)
            continue

        upper = above_ground[index + 1] if index + 1 < len(above_ground) else None
        if upper is None or upper.altitude <= 0:
            logger.debug(f"Dropping sample {sample.altitude:.1f} ft below ground level")
            continue
        exported.append(_ground_level_sample(sample, upper))
    return exported


def _format_number(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}"
    if float(text) == 0:
        # Avoid '-0.00'
        text = f"{0.0:.{decimals}f}"
    return text


def format_profile_csv(profile: WindProfile, config: Optional[CsvExportConfig] = None) -> str:
    """Render a wind profile as CSV text.

    Parameters
    ----------
    profile : WindProfile
        Profile to export.
    config : CsvExportConfig, optional
        Export settings; defaults to `CsvExportConfig()`.

    Returns
    -------
    str
        A header line followed by one line per exported sample, each
        terminated by a newline.
    """
    config = config or CsvExportConfig()
    separator = config.separator.value
    stddev = _format_number(config.clamped_stddev(), config.decimals)

    lines = [config.header()]
    for sample in export_samples(profile, config.reference_frame):
        altitude = convert(sample.altitude, PROFILE_ALTITUDE_UNIT, config.altitude_unit.value)
        speed = convert(sample.speed, PROFILE_SPEED_UNIT, config.speed_unit.value)
        direction = convert(
            normalize_direction(sample.direction),
            PROFILE_DIRECTION_UNIT,
            config.direction_unit.value
        )
        lines.append(separator.join([
            _format_number(altitude, config.decimals),
            _format_number(speed, config.decimals),
            _format_number(direction, config.decimals),
            stddev,
        ]))

    return "\n".join(lines) + "\n"


def default_csv_filename(valid_time: datetime) -> str:
    """File name for a profile valid at the given hour.

    >>> default_csv_filename(datetime(2024, 6, 1, 9))
    'wind_2024-06-01T09.csv'
    """
    return f"wind_{valid_time:%Y-%m-%dT%H}.csv"
