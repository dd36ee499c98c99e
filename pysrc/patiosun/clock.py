"""
Simulated clock driving the time slider.

The clock never reads the system time on its own: the starting instant is
supplied by the caller. Every change is pushed to an optional listener,
typically :meth:`ReclassificationScheduler.request`.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime

from .constants import AUTOPLAY_STEP_MINUTES, MANUAL_STEP_MINUTES, MINUTES_PER_DAY
from .models import Observer
from .patiosun_logging import get_logger
from .sun_position import (
    date_from_minute,
    get_sunrise_minute,
    get_sunset_minute,
    is_sun_up,
    local_midnight,
    minute_of_day,
)

logger = get_logger(__name__)


class SimulatedClock:
    """
    Caller-controlled instant with sunrise-to-sunset playback.

    Args:
        instant: Starting instant (timezone-aware, or naive UTC).
        observer: City whose wall clock the minute of day refers to.
        on_change: Called with the new instant after every change.

    Example:
        >>> clock = SimulatedClock(start, observer, on_change=scheduler.request)
        >>> clock.set_minute_of_day(17 * 60 + 30)
        >>> clock.start_playback()
        >>> while clock.is_playing:
        ...     clock.step_forward()
    """

    def __init__(
        self,
        instant: datetime,
        observer: Observer,
        on_change: Callable[[datetime], None] | None = None,
    ):
        self.observer = observer
        self.on_change = on_change
        self.is_playing = False
        self.is_autoplay = False
        self._instant = instant

    @property
    def instant(self) -> datetime:
        return self._instant

    @property
    def minute_of_day(self) -> int:
        return minute_of_day(self._instant, self.observer)

    @property
    def is_night(self) -> bool:
        return not is_sun_up(self._instant, self.observer)

    @property
    def sunrise_minute(self) -> int:
        """Sunrise minute, or midnight when the sun never rises or sets."""
        minute = get_sunrise_minute(self._instant, self.observer)
        return 0 if minute is None else minute

    @property
    def sunset_minute(self) -> int:
        """Sunset minute, or the last minute of the day when there is none."""
        minute = get_sunset_minute(self._instant, self.observer)
        return MINUTES_PER_DAY - 1 if minute is None else minute

    def _set(self, instant: datetime) -> None:
        self._instant = instant
        if self.on_change is not None:
            self.on_change(instant)

    def set_minute_of_day(self, minute: int) -> None:
        """Jump to a wall-clock minute (clamped to 0-1439); stops playback."""
        self.stop()
        self._set(date_from_minute(self._instant, minute, self.observer))

    def set_calendar_date(self, day: date | datetime) -> None:
        """
        Move to another date, keeping the current minute of day.

        A plain date is taken as that day in the observer's timezone.
        """
        if not isinstance(day, datetime):
            day = local_midnight(day, self.observer).to_pydatetime()
        self._set(date_from_minute(day, self.minute_of_day, self.observer))

    def start_playback(self, autoplay: bool = False) -> None:
        """
        Start playback from sunrise.

        Autoplay sweeps hour by hour; manual playback steps one minute at a
        time.
        """
        self.is_playing = True
        self.is_autoplay = autoplay
        self._set(date_from_minute(self._instant, self.sunrise_minute, self.observer))

    def stop(self) -> None:
        self.is_playing = False
        self.is_autoplay = False

    def step_forward(self) -> None:
        """Advance one playback step; past sunset, rewind to sunrise and stop."""
        step = AUTOPLAY_STEP_MINUTES if self.is_autoplay else MANUAL_STEP_MINUTES
        target = self.minute_of_day + step
        if target > self.sunset_minute:
            logger.debug("Playback reached sunset, rewinding to sunrise")
            self.stop()
            target = self.sunrise_minute
        self._set(date_from_minute(self._instant, target, self.observer))
