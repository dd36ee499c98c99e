"""Observer, sun position and cloud cover data models."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..errors import WeatherDataError
from ..patiosun_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Observer:
    """
    The fixed city the engine models.

    Attributes:
        latitude: Latitude in degrees (north positive).
        longitude: Longitude in degrees (east positive).
        timezone: IANA timezone name used for all wall-clock conversions,
            independent of the host's local timezone.
        name: Display name.
    """

    latitude: float
    longitude: float
    timezone: str = "UTC"
    name: str = ""

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be in [-90, 90], got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be in [-180, 180], got {self.longitude}")
        if not self.timezone:
            raise ValueError("Observer timezone must be a non-empty IANA name")

    @classmethod
    def from_params(cls, params: Any) -> Observer:
        """Build an observer from the ``Observer`` block of loaded params."""
        block = params.Observer
        return cls(
            latitude=float(block.latitude),
            longitude=float(block.longitude),
            timezone=str(block.timezone),
            name=str(getattr(block, "name", "")),
        )

    @classmethod
    def default(cls, params_json_path: str | Path | None = None) -> Observer:
        """
        Observer from the bundled parameters (Chicago, America/Chicago).

        Example:
            >>> Observer.default().timezone
            'America/Chicago'
        """
        from ..config import load_params

        return cls.from_params(load_params(params_json_path))


@dataclass(frozen=True)
class SunPosition:
    """
    Sun position for one instant at the observer.

    Attributes:
        azimuth_deg: Compass bearing toward the sun, 0-360, 0 = north, clockwise.
        altitude_deg: Degrees above the horizon; negative means below.
    """

    azimuth_deg: float
    altitude_deg: float

    @property
    def is_up(self) -> bool:
        return self.altitude_deg > 0


@dataclass(frozen=True)
class HourlyCloudCover:
    """
    Hourly layered cloud cover, one value per hour, in percent (0-100).

    Attributes:
        low: Low-level cloud cover per hour.
        mid: Mid-level cloud cover per hour.
        high: High-level cloud cover per hour.
        start: Observer-local date of the first hour, if known. When set,
            hour indices count from local midnight of that date, so
            multi-day forecasts resolve to the right day.

    Entries may be None for missing hours; they count as clear.
    """

    low: tuple[float | None, ...] = field(default_factory=tuple)
    mid: tuple[float | None, ...] = field(default_factory=tuple)
    high: tuple[float | None, ...] = field(default_factory=tuple)
    start: date | None = None

    def __len__(self) -> int:
        return len(self.low)

    @classmethod
    def from_open_meteo(cls, payload: Mapping[str, Any]) -> HourlyCloudCover:
        """
        Parse the ``hourly`` block of an Open-Meteo forecast response.

        Accepts either the full response or just its ``hourly`` mapping.
        Missing layers become empty sequences; non-numeric entries become None.

        Raises:
            WeatherDataError: If a layer is present but is not a list.

        Example:
            >>> cover = HourlyCloudCover.from_open_meteo(response_json)
            >>> len(cover)  # 144 for a 6-day forecast
        """
        hourly = payload.get("hourly", payload)
        if not isinstance(hourly, Mapping):
            raise WeatherDataError("hourly", type(hourly).__name__, "expected a mapping")

        layers = {}
        for key in ("cloud_cover_low", "cloud_cover_mid", "cloud_cover_high"):
            raw = hourly.get(key, [])
            if raw is None:
                raw = []
            if not isinstance(raw, Sequence) or isinstance(raw, str):
                raise WeatherDataError(key, raw, "expected a list of percentages")
            layers[key] = tuple(_as_percent(v) for v in raw)

        start = None
        times = hourly.get("time")
        if isinstance(times, Sequence) and times and isinstance(times[0], str):
            try:
                start = datetime.fromisoformat(times[0]).date()
            except ValueError:
                logger.warning(f"Unparsable first hourly timestamp {times[0]!r}; using hour of day")

        return cls(
            low=layers["cloud_cover_low"],
            mid=layers["cloud_cover_mid"],
            high=layers["cloud_cover_high"],
            start=start,
        )


def _as_percent(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(result) else result
