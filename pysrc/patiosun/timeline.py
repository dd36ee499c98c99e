"""Whole-day sun timeline for a venue collection.

:func:`classify_day` sweeps one observer-local day at a fixed step and
collects per-step sun counts and per-venue sunlit minutes, answering
questions like "when does this patio get sun today" without driving the
interactive scheduler.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING

import numpy as np

from .attenuation import get_hourly_sun_factor, hour_index_for
from .classification import classify_all
from .constants import MINUTES_PER_DAY
from .patiosun_logging import get_logger
from .progress import ProgressCallback, get_progress_iterator
from .sun_position import get_sun_positions, local_day_range

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from .models import HourlyCloudCover, Observer, ShadowConfig, Venue
    from .spatial_index import BuildingIndex

logger = get_logger(__name__)


@dataclass
class DayTimeline:
    """Per-step sun statistics over one observer-local day.

    Attributes:
        day: The observer-local date swept.
        step_minutes: Spacing between steps.
        minutes: Wall-clock minute of day per step. Steps are evenly spaced in
            elapsed time, so a DST day skips or repeats an hour of labels.
        sun_altitude: Sun altitude per step (degrees).
        cloud_sun_factor: Cloud transmittance per step (1.0 without weather).
        sun_count: Sunlit venues per step.
        shade_count: Shaded venues per step.
        venue_sun_minutes: Venue id to total sunlit minutes over the day.
    """

    day: date
    step_minutes: int
    minutes: NDArray[np.int_]
    sun_altitude: NDArray[np.floating]
    cloud_sun_factor: NDArray[np.floating]
    sun_count: NDArray[np.int_]
    shade_count: NDArray[np.int_]
    venue_sun_minutes: dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.minutes)

    @property
    def sun_fraction(self) -> NDArray[np.floating]:
        """Fraction of venues in sun per step (0 when there are no venues)."""
        total = self.sun_count + self.shade_count
        return np.divide(
            self.sun_count,
            total,
            out=np.zeros(len(total), dtype=float),
            where=total > 0,
        )

    @property
    def peak_minute(self) -> int | None:
        """Minute of day with the most venues in sun, or None if none ever are."""
        if len(self.sun_count) == 0 or self.sun_count.max() == 0:
            return None
        return int(self.minutes[int(np.argmax(self.sun_count))])

    def sunniest(self, n: int = 10) -> list[tuple[str, int]]:
        """Top ``n`` venues by sunlit minutes, ties broken by venue order."""
        ranked = sorted(self.venue_sun_minutes.items(), key=lambda item: -item[1])
        return ranked[:n]


def classify_day(
    index: BuildingIndex | None,
    venues: Iterable[Venue],
    observer: Observer,
    day: date | datetime,
    *,
    step_minutes: int = 60,
    cloud_cover: HourlyCloudCover | None = None,
    config: ShadowConfig | None = None,
    progress: bool = False,
    progress_callback: ProgressCallback | None = None,
) -> DayTimeline:
    """
    Classify every venue at each step of one observer-local day.

    Args:
        index: Building index, or None to treat every venue as unobstructed.
        venues: Venues to classify.
        observer: City whose local day is swept.
        day: Local calendar date; a datetime contributes only its date.
        step_minutes: Minutes between steps (1-1440). Default 60.
        cloud_cover: Optional hourly cloud cover applied at each step.
        config: Shadow thresholds.
        progress: Show a tqdm progress bar.
        progress_callback: ``callback(current, total)`` instead of a bar.

    Returns:
        DayTimeline with one entry per step from local midnight to the next
        (23 or 25 hours of steps on DST transition days).

    Raises:
        ValueError: If ``step_minutes`` is outside 1-1440.
    """
    if not 1 <= step_minutes <= MINUTES_PER_DAY:
        raise ValueError(f"step_minutes must be in 1-{MINUTES_PER_DAY}, got {step_minutes}")

    if isinstance(day, datetime):
        day = day.date()
    venue_list = list(venues)

    instants = local_day_range(day, observer, step_minutes)
    minutes = (instants.hour * 60 + instants.minute).to_numpy(dtype=int)
    positions = get_sun_positions(instants, observer)

    logger.info(
        f"Classifying {len(venue_list)} venues over {day} ({len(instants)} steps of {step_minutes} min)"
    )

    n = len(instants)
    altitude = np.zeros(n, dtype=float)
    factors = np.ones(n, dtype=float)
    sun_count = np.zeros(n, dtype=int)
    venue_sun_minutes = {v.id: 0 for v in venue_list}

    steps = get_progress_iterator(
        range(n),
        desc=f"Timeline {day}",
        total=n,
        callback=progress_callback,
        disable=not progress and progress_callback is None,
    )
    for i in steps:
        sun = positions[i]
        factor = get_hourly_sun_factor(cloud_cover, hour_index_for(cloud_cover, instants[i], observer))
        altitude[i] = sun.altitude_deg
        factors[i] = factor

        results = classify_all(
            index,
            venue_list,
            sun.azimuth_deg,
            sun.altitude_deg,
            cloud_sun_factor=factor,
            config=config,
        )
        for venue_id, result in results.items():
            if result.in_sun:
                sun_count[i] += 1
                venue_sun_minutes[venue_id] += step_minutes

    return DayTimeline(
        day=day,
        step_minutes=step_minutes,
        minutes=minutes,
        sun_altitude=altitude,
        cloud_sun_factor=factors,
        sun_count=sun_count,
        shade_count=len(venue_sun_minutes) - sun_count,
        venue_sun_minutes=venue_sun_minutes,
    )
