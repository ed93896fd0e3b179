"""
Launch Time Window.

A launch is scheduled on one calendar day between a start hour and an end
hour. Forecasts are requested per whole hour, so minutes in the supplied
times are ignored. The window also records how many hours from now its
start and end lie, which is how forecast providers bound a request.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union

from common.constants import NEWEST_FORECAST_HOUR_OFFSET, OLDEST_FORECAST_HOUR_OFFSET
from common.logging_config import get_logger

logger = get_logger(__name__)

HourValue = Union[int, str]


def _parse_hour(value: HourValue, label: str) -> int:
    """Parse 'HH', 'HH:MM' or an integer into an hour of day."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid launch {label} time: {value!r}")

    if isinstance(value, int):
        hour = value
    else:
        text = str(value).strip()
        if len(text) < 2:
            raise ValueError(f"Invalid launch {label} time string: {value!r}")
        try:
            hour = int(text[:2])
        except ValueError as e:
            raise ValueError(f"Invalid launch {label} time: {value!r}") from e

    if not 0 <= hour <= 23:
        raise ValueError(f"Launch {label} hour {hour} out of range [0, 23]")
    return hour


def _parse_date(value: str):
    """Parse 'YYYY-MM-DD' into (year, month, day)."""
    text = str(value).strip()
    if len(text) < 10:
        raise ValueError(f"Invalid launch date string: {value!r}")
    try:
        return int(text[0:4]), int(text[5:7]), int(text[8:10])
    except ValueError as e:
        raise ValueError(f"Invalid launch date string: {value!r}") from e


def _hour_offset(instant: datetime, now: datetime) -> int:
    """Whole hours from now until an instant, rounded up."""
    return math.ceil((instant - now).total_seconds() / 3600.0)


@dataclass(frozen=True)
class LaunchTimeWindow:
    """Hours of a single day during which a launch may happen.

    Attributes
    ----------
    start : datetime
        Timezone-aware start of the launch window (whole hour).
    end : datetime
        Timezone-aware end of the launch window (whole hour, same day).
    start_hour_offset : int
        Hours from the reference "now" until `start`, rounded up.
    end_hour_offset : int
        Hours from the reference "now" until `end`, rounded up.
    """
    start: datetime
    end: datetime
    start_hour_offset: int
    end_hour_offset: int

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError("Launch ends before it starts")
        if self.end.date() != self.start.date():
            raise ValueError("Launch window must start and end on the same day")

    @classmethod
    def from_strings(
        cls,
        launch_date: str,
        start_time: HourValue,
        end_time: HourValue,
        now: Optional[datetime] = None,
        tz: Optional[tzinfo] = None
    ) -> 'LaunchTimeWindow':
        """Build a window from form-style inputs.

        Parameters
        ----------
        launch_date : str
            Calendar date as 'YYYY-MM-DD'.
        start_time, end_time : str or int
            Hour as 'HH', 'HH:MM' or an integer; minutes are truncated.
        now : datetime, optional
            Reference instant for the hour offsets. Defaults to the current
            time. A naive value is interpreted in `tz`.
        tz : tzinfo, optional
            Timezone of the date and hours. Defaults to the local timezone.

        Returns
        -------
        LaunchTimeWindow
            The parsed window.

        Raises
        ------
        ValueError
            If the date or either hour is malformed, or the window ends
            before it starts.
        """
        year, month, day = _parse_date(launch_date)
        start_hour = _parse_hour(start_time, "start")
        end_hour = _parse_hour(end_time, "end")

        if end_hour < start_hour:
            raise ValueError("Launch ends before it starts")

        if tz is None:
            tz = datetime.now().astimezone().tzinfo

        try:
            start = datetime(year, month, day, start_hour, tzinfo=tz)
            end = datetime(year, month, day, end_hour, tzinfo=tz)
        except ValueError as e:
            raise ValueError(f"Invalid launch date string: {launch_date!r}") from e

        if now is None:
            now = datetime.now(tz)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=tz)

        return cls(
            start=start,
            end=end,
            start_hour_offset=_hour_offset(start, now),
            end_hour_offset=_hour_offset(end, now)
        )

    @property
    def start_hour(self) -> int:
        return self.start.hour

    @property
    def end_hour(self) -> int:
        return self.end.hour

    @property
    def hour_count(self) -> int:
        """Number of forecast hours in the window, inclusive of both ends."""
        return self.end.hour - self.start.hour + 1

    def start_iso(self) -> str:
        """Start of the window in UTC as 'YYYY-MM-DDTHH:00'."""
        return self.start.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:00")

    def end_iso(self) -> str:
        """End of the window in UTC as 'YYYY-MM-DDTHH:00'."""
        return self.end.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:00")


def check_forecast_range(window: LaunchTimeWindow) -> Optional[str]:
    """Check whether a forecast can be requested for a window.

    Forecast providers keep about 9 days of history and predict about
    15 days ahead. This check is offered to request builders; the fusion
    and drift code never applies it.

    Returns
    -------
    str or None
        A message describing why the window is out of range, or None.
    """
    if window.start_hour_offset < OLDEST_FORECAST_HOUR_OFFSET:
        message = "Wind speeds older than 9 days are not available."
    elif window.start_hour_offset > NEWEST_FORECAST_HOUR_OFFSET:
        message = "Cannot forecast more than 15 days into the future."
    else:
        return None

    logger.info(f"{message} (start hour offset {window.start_hour_offset})")
    return message
