"""
Time-to-live caches with an injected clock.

Building and weather data arrive from slow external sources and are
refreshed on a cadence (daily for buildings, half-hourly for weather).
A cache is an explicit object owned by whoever constructs the data
source; the clock is a parameter so tests can advance time by hand.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar

from .errors import EmptyBuildingIndex
from .models import buildings_from_records
from .spatial_index import BuildingIndex, build_index

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


class TTLCache(Generic[T]):
    """
    Single-value cache that goes stale ``ttl_seconds`` after each put.

    Args:
        ttl_seconds: Freshness window in seconds.
        clock: Monotonic seconds source. Default ``time.monotonic``.
        name: Label used in log messages.
    """

    def __init__(self, ttl_seconds: float, clock: Clock = time.monotonic, name: str = "cache"):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be > 0, got {ttl_seconds}")
        self.ttl_seconds = float(ttl_seconds)
        self.name = name
        self._clock = clock
        self._lock = threading.Lock()
        self._value: T | None = None
        self._stored_at: float | None = None

    def put(self, value: T) -> None:
        """Store a value and restart the freshness window."""
        with self._lock:
            self._value = value
            self._stored_at = self._clock()

    def is_fresh(self) -> bool:
        """True if a value is stored and younger than the TTL."""
        with self._lock:
            return self._fresh_locked()

    def get(self) -> T | None:
        """The stored value if fresh, else None."""
        with self._lock:
            return self._value if self._fresh_locked() else None

    def get_stale(self) -> T | None:
        """The stored value regardless of age."""
        with self._lock:
            return self._value

    def _fresh_locked(self) -> bool:
        return self._stored_at is not None and self._clock() - self._stored_at < self.ttl_seconds

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._stored_at = None

    def get_or_refresh(self, fetch: Callable[[], T]) -> T:
        """
        Return the fresh value, refreshing through ``fetch`` when stale.

        When ``fetch`` raises and an older value exists, the stale value is
        served and the failure logged. With nothing cached, the error
        propagates.
        """
        value = self.get()
        if value is not None:
            return value
        try:
            value = fetch()
        except Exception as e:
            stale = self.get_stale()
            if stale is None:
                raise
            logger.warning(f"Refreshing {self.name} failed ({e}); serving stale data")
            return stale
        self.put(value)
        return value


class BuildingIndexCache(TTLCache[BuildingIndex]):
    """
    TTL cache that turns raw building records into a published index.

    ``loader`` returns raw building records (see
    :func:`~patiosun.models.buildings_from_records`). Each refresh builds a
    brand-new :class:`BuildingIndex`; the previous one is never mutated, so
    readers holding it keep a consistent view.

    Example:
        >>> cache = BuildingIndexCache(loader=fetch_overpass_records)
        >>> scheduler.publish_index(cache.get_index())
    """

    def __init__(
        self,
        loader: Callable[[], Iterable[Mapping[str, Any]]],
        ttl_seconds: float = 24 * 60 * 60,
        clock: Clock = time.monotonic,
    ):
        super().__init__(ttl_seconds, clock=clock, name="building index")
        self._loader = loader

    def _load(self) -> BuildingIndex:
        buildings = buildings_from_records(self._loader())
        return build_index(buildings)

    def get_index(self) -> BuildingIndex | None:
        """
        Fresh index, rebuilding from the loader when stale.

        Returns None when the loader yields no usable buildings and nothing
        was cached before; callers then classify everything as sunlit.
        """
        try:
            return self.get_or_refresh(self._load)
        except EmptyBuildingIndex:
            logger.warning("Building loader returned no usable buildings")
            return None
