"""
Reclassification scheduling for a moving simulated clock.

The UI can move the simulated clock at screen-refresh rate while a user
scrubs the time slider. Reclassifying on every raw update would stall the
UI, so requests are coalesced: at most one frame is pending at a time, and
a frame always classifies the latest requested instant (last scheduled
wins). A frame is skipped when the observer-local minute has not changed
since the last classification and no input (venues, buildings, weather)
was replaced in between.

Two driving modes:

- Frame-driven (default): the host's render/event loop calls
  :meth:`ReclassificationScheduler.run_frame` once per tick.
- Background: frames run on one worker thread as soon as they are
  scheduled; :meth:`ReclassificationScheduler.wait` blocks until idle.
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

import pandas as pd

from .attenuation import get_hourly_sun_factor, hour_index_for
from .classification import ClassificationSummary, classify_all, summarize
from .models import ClassificationResult, ShadowConfig, SunPosition
from .patiosun_logging import get_logger
from .sun_position import get_sun_position, to_local

if TYPE_CHECKING:
    from .models import HourlyCloudCover, Observer, Venue
    from .spatial_index import BuildingIndex

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReclassificationSnapshot:
    """
    One completed classification pass.

    Attributes:
        instant: The simulated instant that was classified.
        minute_of_day: Observer-local minute of day of ``instant``.
        sun: Sun position used.
        cloud_sun_factor: Cloud transmittance used (1.0 when no weather).
        results: Venue id to ClassificationResult.
        summary: Sun and shade counts.
    """

    instant: datetime
    minute_of_day: int
    sun: SunPosition
    cloud_sun_factor: float
    results: Mapping[str, ClassificationResult]
    summary: ClassificationSummary


class ReclassificationScheduler:
    """
    Coalescing scheduler around :func:`~patiosun.classification.classify_all`.

    Args:
        observer: The modeled city; all minute keys use its timezone.
        on_result: Called with each new snapshot.
        shadow_config: Thresholds passed to the classifier.
        background: Run frames on a single worker thread instead of waiting
            for :meth:`run_frame` calls. A frame that raises (including an
            ``on_result`` failure) is logged and later requests still run.

    Example:
        >>> scheduler = ReclassificationScheduler(observer, on_result=update_map)
        >>> scheduler.set_venues(venues)
        >>> scheduler.publish_index(build_index(buildings))
        >>> scheduler.request(slider_instant)   # many times per frame
        >>> scheduler.run_frame()               # once per animation frame
    """

    def __init__(
        self,
        observer: Observer,
        on_result: Callable[[ReclassificationSnapshot], None] | None = None,
        *,
        shadow_config: ShadowConfig | None = None,
        background: bool = False,
    ) -> None:
        self.observer = observer
        self.on_result = on_result
        self.shadow_config = shadow_config or ShadowConfig()
        self.background = background

        self._lock = threading.Lock()
        self._venues: tuple[Venue, ...] = ()
        self._index: BuildingIndex | None = None
        self._weather: HourlyCloudCover | None = None

        self._current_instant: datetime | None = None
        self._pending_instant: datetime | None = None
        self._frame_scheduled = False
        self._generation = 0
        self._last_key: tuple[int, pd.Timestamp] | None = None
        self._last_snapshot: ReclassificationSnapshot | None = None

        self.frames_run = 0
        self.requests_coalesced = 0

        self._executor: ThreadPoolExecutor | None = None
        self._pending: deque[Future[ReclassificationSnapshot | None]] = deque()
        if background:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="patiosun-reclassify")

    # -------------------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------------------

    def set_venues(self, venues: Iterable[Venue]) -> None:
        """Replace the venue collection and reclassify the current instant."""
        venues = tuple(venues)
        with self._lock:
            self._venues = venues
            self._invalidate_locked()

    def publish_index(self, index: BuildingIndex | None) -> None:
        """
        Publish a new building index.

        The reference is swapped atomically; a frame already running keeps
        the index it started with. ``None`` withdraws building data.
        """
        with self._lock:
            self._index = index
            self._invalidate_locked()
        if index is not None:
            logger.debug(f"Published building index with {len(index)} buildings")

    def set_weather(self, weather: HourlyCloudCover | None) -> None:
        """Replace the hourly cloud cover and reclassify the current instant."""
        with self._lock:
            self._weather = weather
            self._invalidate_locked()

    def request(self, instant: datetime) -> None:
        """
        Ask for the given simulated instant to be classified.

        Cheap; safe to call on every clock update. Requests arriving before
        the pending frame runs replace its instant.
        """
        with self._lock:
            self._current_instant = instant
            if self._frame_scheduled:
                self.requests_coalesced += 1
            self._pending_instant = instant
            self._schedule_locked()

    # -------------------------------------------------------------------------
    # Frames
    # -------------------------------------------------------------------------

    @property
    def has_pending_frame(self) -> bool:
        with self._lock:
            return self._frame_scheduled

    @property
    def last_snapshot(self) -> ReclassificationSnapshot | None:
        return self._last_snapshot

    def run_frame(self) -> ReclassificationSnapshot | None:
        """
        Run the pending frame, if any.

        Returns:
            The new snapshot, or None when nothing was pending, venues or
            building index are missing, or the minute has not changed.
        """
        with self._lock:
            if not self._frame_scheduled:
                return None
            self._frame_scheduled = False
            instant = self._pending_instant
            self._pending_instant = None
            venues = self._venues
            index = self._index
            weather = self._weather
            generation = self._generation
            last_key = self._last_key

        if instant is None:
            return None
        if not venues or index is None:
            # Keep the minute unconsumed so the next frame retries
            logger.debug("Skipping reclassification: venues or building index not available")
            return None

        local = to_local(instant, self.observer)
        # UTC offsets are whole minutes: each UTC minute is exactly one local minute
        key = (generation, local.tz_convert("UTC").floor("min"))
        if key == last_key:
            return None

        sun = get_sun_position(instant, self.observer)
        factor = get_hourly_sun_factor(weather, hour_index_for(weather, instant, self.observer))
        results = classify_all(
            index,
            venues,
            sun.azimuth_deg,
            sun.altitude_deg,
            cloud_sun_factor=factor,
            config=self.shadow_config,
        )
        snapshot = ReclassificationSnapshot(
            instant=instant,
            minute_of_day=int(local.hour) * 60 + int(local.minute),
            sun=sun,
            cloud_sun_factor=factor,
            results=results,
            summary=summarize(results),
        )

        with self._lock:
            self._last_key = key
            self._last_snapshot = snapshot
            self.frames_run += 1

        logger.debug(
            f"Reclassified {len(results)} venues at minute {snapshot.minute_of_day}: "
            f"{snapshot.summary.sun_count} sun / {snapshot.summary.shade_count} shade "
            f"({self.requests_coalesced} requests coalesced so far)"
        )
        if self.on_result is not None:
            self.on_result(snapshot)
        return snapshot

    def wait(self) -> None:
        """Block until every scheduled background frame has completed."""
        while True:
            with self._lock:
                if not self._pending:
                    return
                future = self._pending.popleft()
            _report_failure(future)

    def close(self) -> None:
        """Wait for queued frames and stop the background worker."""
        if self._executor is None:
            return
        try:
            self.wait()
        finally:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> ReclassificationScheduler:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Internals (call with self._lock held)
    # -------------------------------------------------------------------------

    def _invalidate_locked(self) -> None:
        self._generation += 1
        if self._current_instant is not None:
            self._pending_instant = self._current_instant
            self._schedule_locked()

    def _schedule_locked(self) -> None:
        if self._frame_scheduled:
            return
        if self._executor is not None:
            while self._pending and self._pending[0].done():
                _report_failure(self._pending.popleft())
            self._pending.append(self._executor.submit(self.run_frame))
        self._frame_scheduled = True


def _report_failure(future: Future) -> None:
    error = future.exception()
    if error is not None:
        logger.error(f"Background reclassification failed: {type(error).__name__}: {error}")
