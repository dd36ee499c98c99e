"""
Atmospheric attenuation of direct sunlight by layered cloud cover.

Independent-layer transmittance model: low clouds block up to 85% of direct
light, mid clouds 50%, high cirrus 15%. Layers attenuate multiplicatively.
Missing data always resolves to a clear sky (factor 1.0).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from .constants import HIGH_CLOUD_BLOCKAGE, LOW_CLOUD_BLOCKAGE, MID_CLOUD_BLOCKAGE
from .sun_position import to_local

if TYPE_CHECKING:
    import pandas as pd

    from .models import HourlyCloudCover, Observer


def _clamp_percent(value: float | None) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return min(max(float(value), 0.0), 100.0)


def get_cloud_sun_factor(low: float | None, mid: float | None, high: float | None) -> float:
    """
    Sun transmittance (0 = fully blocked, 1 = clear) from layered cloud cover.

    Each percentage is clamped to [0, 100]; None or NaN counts as 0.

    Example:
        >>> get_cloud_sun_factor(0, 0, 0)
        1.0
        >>> round(get_cloud_sun_factor(100, 100, 100), 5)
        0.06375
    """
    transmittance = (
        (1 - _clamp_percent(low) / 100 * LOW_CLOUD_BLOCKAGE)
        * (1 - _clamp_percent(mid) / 100 * MID_CLOUD_BLOCKAGE)
        * (1 - _clamp_percent(high) / 100 * HIGH_CLOUD_BLOCKAGE)
    )
    return max(0.0, min(1.0, transmittance))


def get_hourly_sun_factor(cover: HourlyCloudCover | None, hour_index: int) -> float:
    """
    Cloud sun factor for one hour of a cloud cover series.

    The index is clamped to the available hours. No data means clear sky.
    """
    if cover is None or len(cover.low) == 0:
        return 1.0
    idx = max(0, min(int(hour_index), len(cover.low) - 1))

    def _at(layer: tuple[float | None, ...]) -> float | None:
        return layer[idx] if idx < len(layer) else None

    return get_cloud_sun_factor(_at(cover.low), _at(cover.mid), _at(cover.high))


def hour_index_for(
    cover: HourlyCloudCover | None,
    instant: datetime | pd.Timestamp,
    observer: Observer,
) -> int:
    """
    Index into ``cover`` for the hour containing ``instant``.

    Counts hours from local midnight of ``cover.start`` when the series
    carries a start date, otherwise uses the local hour of day.
    """
    local = to_local(instant, observer)
    if cover is None or cover.start is None:
        return int(local.hour)
    days = (local.date() - cover.start).days
    return days * 24 + int(local.hour)


# =============================================================================
# WMO weather codes
# =============================================================================


@dataclass(frozen=True)
class WeatherCondition:
    label: str
    icon: str


_WMO_RANGES: tuple[tuple[int, int, str, str], ...] = (
    (0, 0, "Clear", "☀️"),
    (1, 1, "Mostly Clear", "🌤️"),
    (2, 2, "Partly Cloudy", "⛅"),
    (3, 3, "Overcast", "☁️"),
    (45, 48, "Foggy", "🌫️"),
    (51, 55, "Drizzle", "🌦️"),
    (56, 57, "Freezing Drizzle", "🌧️"),
    (61, 65, "Rain", "🌧️"),
    (66, 67, "Freezing Rain", "🌧️"),
    (71, 77, "Snow", "❄️"),
    (80, 82, "Showers", "🌧️"),
    (85, 86, "Snow Showers", "❄️"),
    (95, 99, "Thunderstorm", "⛈️"),
)


def decode_weather_code(code: int) -> WeatherCondition:
    """Decode a WMO weather interpretation code (as used by Open-Meteo)."""
    for lo, hi, label, icon in _WMO_RANGES:
        if lo <= code <= hi:
            return WeatherCondition(label, icon)
    return WeatherCondition("Unknown", "🌡️")
