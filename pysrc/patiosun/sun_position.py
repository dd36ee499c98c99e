"""
Sun position provider for a fixed observer.

Wraps the NREL solar position algorithm from pvlib. Every wall-clock
conversion goes through a timezone-aware pandas Timestamp in the observer's
timezone, so results never depend on the host's local timezone. Naive
datetimes are interpreted as UTC.

Nothing here reads the system clock: callers always pass the simulated
instant in.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from functools import lru_cache

import numpy as np
import pandas as pd
import pvlib

from .constants import GOLDEN_HOUR_ALTITUDE_DEG, MINUTES_PER_DAY
from .models import Observer, SunPosition
from .patiosun_logging import get_logger

logger = get_logger(__name__)


def _to_utc(instant: datetime | pd.Timestamp) -> pd.Timestamp:
    ts = pd.Timestamp(instant)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def to_local(instant: datetime | pd.Timestamp, observer: Observer) -> pd.Timestamp:
    """Convert an instant to the observer's wall-clock time."""
    return _to_utc(instant).tz_convert(observer.timezone)


def _minute_of(ts: pd.Timestamp) -> int:
    return int(ts.hour) * 60 + int(ts.minute)


# =============================================================================
# Position
# =============================================================================


def get_sun_position(instant: datetime | pd.Timestamp, observer: Observer) -> SunPosition:
    """
    Sun azimuth/altitude for one instant.

    Args:
        instant: The simulated instant. Naive values are treated as UTC.
        observer: The fixed city.

    Returns:
        SunPosition with compass azimuth (0 = north, clockwise) and true
        (unrefracted) altitude in degrees.
    """
    return get_sun_positions([instant], observer)[0]


def get_sun_positions(instants: Sequence[datetime | pd.Timestamp], observer: Observer) -> list[SunPosition]:
    """Vectorized :func:`get_sun_position` for many instants."""
    if len(instants) == 0:
        return []
    times = pd.DatetimeIndex([_to_utc(t) for t in instants])
    solpos = pvlib.solarposition.get_solarposition(times, observer.latitude, observer.longitude)
    azimuth = np.mod(solpos["azimuth"].to_numpy(dtype=float), 360.0)
    altitude = solpos["elevation"].to_numpy(dtype=float)
    return [SunPosition(azimuth_deg=float(az), altitude_deg=float(alt)) for az, alt in zip(azimuth, altitude)]


def is_sun_up(instant: datetime | pd.Timestamp, observer: Observer) -> bool:
    """True if the sun altitude is above 0 degrees."""
    return get_sun_position(instant, observer).is_up


# =============================================================================
# Wall-clock helpers
# =============================================================================


def minute_of_day(instant: datetime | pd.Timestamp, observer: Observer) -> int:
    """Minute of day (0-1439) on the observer's wall clock."""
    return _minute_of(to_local(instant, observer))


def date_from_minute(base: datetime, minute: int, observer: Observer) -> datetime:
    """
    The instant on the local date of ``base`` whose wall clock shows ``minute``.

    ``minute`` is clamped to 0-1439; seconds are kept from ``base``. On
    transition days a skipped wall time moves forward to the first valid
    instant, and a repeated one keeps the UTC offset ``base`` has. The
    result keeps the type and tzinfo of ``base``.

    Example:
        >>> noon = date_from_minute(instant, 12 * 60, observer)
        >>> minute_of_day(noon, observer)
        720
    """
    minute = min(max(int(minute), 0), MINUTES_PER_DAY - 1)
    ts = pd.Timestamp(base)
    local = to_local(ts, observer)
    wall = local.tz_localize(None).replace(hour=minute // 60, minute=minute % 60)
    target = wall.tz_localize(observer.timezone, ambiguous=bool(local.dst()), nonexistent="shift_forward")

    if ts.tzinfo is None:
        target = target.tz_convert("UTC").tz_localize(None)
    else:
        target = target.tz_convert(ts.tzinfo)
    return target if isinstance(base, pd.Timestamp) else target.to_pydatetime()


def local_midnight(local_date: date, observer: Observer) -> pd.Timestamp:
    """Start of ``local_date`` in the observer's timezone."""
    return pd.Timestamp(local_date).tz_localize(observer.timezone, nonexistent="shift_forward")


def local_day_range(local_date: date, observer: Observer, step_minutes: int = 1) -> pd.DatetimeIndex:
    """
    Instants ``step_minutes`` apart from local midnight up to the next one.

    Spacing is in elapsed time, so a day with a DST transition has 23 or 25
    hours of steps.
    """
    start = local_midnight(local_date, observer)
    end = local_midnight(local_date + timedelta(days=1), observer)
    return pd.date_range(start, end, freq=f"{step_minutes}min", inclusive="left")


def format_minute_of_day(minute: int) -> str:
    """Format a minute of day as ``"h:mm AM"``."""
    h, m = divmod(int(minute), 60)
    ampm = "PM" if h >= 12 else "AM"
    h12 = h % 12 or 12
    return f"{h12}:{m:02d} {ampm}"


# =============================================================================
# Sunrise / Sunset / Golden hour
# =============================================================================


@dataclass(frozen=True)
class GoldenHourWindow:
    """
    Golden hour windows of one observer-local day, as minutes of day.

    ``None`` marks a boundary that does not occur (polar day or night, or a
    sun that never climbs above 6 degrees).
    """

    morning_start: int | None
    morning_end: int | None
    evening_start: int | None
    evening_end: int | None


@lru_cache(maxsize=64)
def _rise_set(local_date: date, observer: Observer) -> tuple[int | None, int | None]:
    day = pd.DatetimeIndex([local_midnight(local_date, observer)])
    result = pvlib.solarposition.sun_rise_set_transit_spa(day, observer.latitude, observer.longitude)
    sunrise = result["sunrise"].iloc[0]
    sunset = result["sunset"].iloc[0]

    def _minute(ts) -> int | None:
        if pd.isna(ts):
            return None
        return _minute_of(pd.Timestamp(ts).tz_convert(observer.timezone))

    rise, set_ = _minute(sunrise), _minute(sunset)
    if rise is None or set_ is None:
        logger.debug(f"No sunrise/sunset on {local_date} at {observer.latitude:.2f}°")
    return rise, set_


def get_sunrise_minute(instant: datetime | pd.Timestamp, observer: Observer) -> int | None:
    """Sunrise on the observer-local date of ``instant``, as minute of day."""
    return _rise_set(to_local(instant, observer).date(), observer)[0]


def get_sunset_minute(instant: datetime | pd.Timestamp, observer: Observer) -> int | None:
    """Sunset on the observer-local date of ``instant``, as minute of day."""
    return _rise_set(to_local(instant, observer).date(), observer)[1]


@lru_cache(maxsize=16)
def _golden_hour(local_date: date, observer: Observer) -> GoldenHourWindow:
    times = local_day_range(local_date, observer)
    elevation = pvlib.solarposition.get_solarposition(times, observer.latitude, observer.longitude)[
        "elevation"
    ].to_numpy(dtype=float)

    rise, set_ = _rise_set(local_date, observer)
    transit = int(np.argmax(elevation))
    above = elevation >= GOLDEN_HOUR_ALTITUDE_DEG
    morning = np.flatnonzero(above[: transit + 1])
    evening = np.flatnonzero(above[transit:])

    morning_end = _minute_of(times[morning[0]]) if morning.size else None
    evening_start = _minute_of(times[transit + evening[-1]]) if evening.size else None
    return GoldenHourWindow(
        morning_start=rise,
        morning_end=morning_end,
        evening_start=evening_start,
        evening_end=set_,
    )


def get_golden_hour(instant: datetime | pd.Timestamp, observer: Observer) -> GoldenHourWindow:
    """
    Golden hour windows for the observer-local date of ``instant``.

    Morning runs from sunrise until the sun reaches 6 degrees; evening runs
    from the sun dropping to 6 degrees until sunset.
    """
    return _golden_hour(to_local(instant, observer).date(), observer)


# =============================================================================
# Lighting descriptors (cosmetic only)
# =============================================================================


def sun_color(altitude_deg: float) -> str:
    """Color temperature of direct sun as a hex string: warm when low, near-white when high."""
    if altitude_deg < 0:
        return "#1a1a3e"
    if altitude_deg < 6:
        return "#ff6b35"  # deep golden hour
    if altitude_deg < 12:
        return "#ffa040"  # golden hour
    if altitude_deg < 25:
        return "#ffc850"  # warm
    return "#ffe8b0"


def sun_intensity(altitude_deg: float) -> float:
    """Scalar light intensity for the given altitude."""
    if altitude_deg < 0:
        return 0.0
    if altitude_deg < 10:
        return 0.3
    if altitude_deg < 30:
        return 0.5
    return 0.6


def light_direction(position: SunPosition) -> tuple[float, float]:
    """Directional light as (azimuth 0-360, altitude clamped at 0) in degrees."""
    return position.azimuth_deg % 360.0, max(0.0, position.altitude_deg)


def sky_position(position: SunPosition) -> tuple[float, float]:
    """Sky sun position as (azimuth, polar angle from zenith in 0-180) in degrees."""
    polar = 90.0 - position.altitude_deg
    return position.azimuth_deg % 360.0, min(180.0, max(0.0, polar))
