"""
Logging Configuration and Data Quality Records.

This module provides the logger factory used by every module and an
explicit record of forecast samples that were dropped during ingestion.

Forecast payloads are frequently incomplete: a pressure level may be
missing, an hourly array may be shorter than requested, or a value may be
null. The ingestion code never aborts on such gaps. Instead, each skipped
sample is recorded here so that a caller can tell a complete profile from a
partial one.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Configure root logger for the package
def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the wind drift system.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


@dataclass
class SkippedSample:
    """Record of a forecast sample that could not be used.

    Attributes
    ----------
    field_name : str
        Name of the forecast field (e.g. 'wind_speed_850hPa').
    hour_index : int, optional
        Index of the forecast hour, or None for hour-independent fields.
    reason : str
        Why the sample was skipped.
    context : dict
        Additional context (pressure level, altitude, etc.).
    """
    field_name: str
    hour_index: Optional[int]
    reason: str
    context: Dict[str, Any] = field(default_factory=dict)


class DataQualityLog:
    """Collects the samples skipped while ingesting one forecast.

    One instance is created per ingestion call and returned with its
    result. Nothing is shared between calls.

    Examples
    --------
    >>> quality = DataQualityLog()
    >>> quality.record_skip("wind_speed_30hPa", 4, "value is null")
    >>> quality.skip_count
    1
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize an empty record.

        Parameters
        ----------
        logger : logging.Logger, optional
            Logger receiving one DEBUG line per skipped sample.
        """
        self._skipped: List[SkippedSample] = []
        self._logger = logger or get_logger("data_quality")

    def record_skip(
        self,
        field_name: str,
        hour_index: Optional[int],
        reason: str,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a skipped sample.

        Parameters
        ----------
        field_name : str
            Name of the forecast field.
        hour_index : int, optional
            Forecast hour index the sample belongs to.
        reason : str
            Why the sample was skipped.
        context : dict, optional
            Additional context.
        """
        self._skipped.append(
            SkippedSample(
                field_name=field_name,
                hour_index=hour_index,
                reason=reason,
                context=context or {}
            )
        )
        self._logger.debug(
            f"SKIPPED SAMPLE | {field_name} | hour={hour_index} | {reason}"
        )

    @property
    def skipped(self) -> List[SkippedSample]:
        """All skipped samples in the order they were recorded."""
        return list(self._skipped)

    @property
    def skip_count(self) -> int:
        return len(self._skipped)

    @property
    def is_complete(self) -> bool:
        """True when no sample was skipped."""
        return not self._skipped

    def skips_for_hour(self, hour_index: int) -> List[SkippedSample]:
        """Get the skipped samples belonging to a single forecast hour."""
        return [s for s in self._skipped if s.hour_index == hour_index]

    def summary(self) -> Dict[str, Any]:
        """Summarize skipped samples by field name.

        Returns
        -------
        dict
            Total count and per-field counts.
        """
        counts: Dict[str, int] = {}
        for s in self._skipped:
            counts[s.field_name] = counts.get(s.field_name, 0) + 1

        return {
            "total_skipped": len(self._skipped),
            "skipped_by_field": counts,
        }
