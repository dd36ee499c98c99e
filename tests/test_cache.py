"""
Tests for TTL caches with an injected clock.
"""

import threading

import pytest
from conftest import VENUE_LAT, VENUE_LNG
from patiosun.cache import BuildingIndexCache, TTLCache
from patiosun.spatial_index import BuildingIndex


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestTTLCache:
    """Freshness window and refresh behavior."""

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            TTLCache(0)

    def test_empty_cache(self):
        cache = TTLCache(60, clock=FakeClock())
        assert cache.get() is None
        assert cache.get_stale() is None
        assert not cache.is_fresh()

    def test_fresh_until_ttl(self):
        clock = FakeClock()
        cache = TTLCache(60, clock=clock)
        cache.put("weather")

        clock.advance(59)
        assert cache.get() == "weather"

        clock.advance(1)
        assert cache.get() is None
        assert cache.get_stale() == "weather"

    def test_invalidate(self):
        cache = TTLCache(60, clock=FakeClock())
        cache.put(1)
        cache.invalidate()
        assert cache.get() is None
        assert cache.get_stale() is None

    def test_get_sees_value_and_freshness_together(self):
        """An invalidate racing a get waits until the read has finished."""
        threads = []
        armed = False

        def clock():
            nonlocal armed
            if armed:
                armed = False
                invalidator = threading.Thread(target=cache.invalidate)
                invalidator.start()
                invalidator.join(timeout=0.05)
                threads.append(invalidator)
            return 0.0

        cache = TTLCache(60, clock=clock)
        cache.put("buildings")
        armed = True

        assert cache.get() == "buildings"
        threads[0].join(timeout=5)
        assert cache.get_stale() is None

    def test_get_or_refresh_fetches_once_while_fresh(self):
        clock = FakeClock()
        cache = TTLCache(60, clock=clock)
        calls = []

        def fetch():
            calls.append(clock.now)
            return len(calls)

        assert cache.get_or_refresh(fetch) == 1
        assert cache.get_or_refresh(fetch) == 1
        clock.advance(61)
        assert cache.get_or_refresh(fetch) == 2
        assert len(calls) == 2

    def test_stale_value_served_when_refresh_fails(self):
        clock = FakeClock()
        cache = TTLCache(60, clock=clock)
        cache.put("old")
        clock.advance(120)

        def failing():
            raise ConnectionError("provider down")

        assert cache.get_or_refresh(failing) == "old"

    def test_refresh_error_propagates_without_cached_value(self):
        cache = TTLCache(60, clock=FakeClock())

        def failing():
            raise ConnectionError("provider down")

        with pytest.raises(ConnectionError):
            cache.get_or_refresh(failing)


class TestBuildingIndexCache:
    """Building records loaded, indexed and refreshed daily."""

    @staticmethod
    def _records():
        return [
            {"lat": VENUE_LAT + 0.001, "lng": VENUE_LNG, "height": 30.0},
            {"lat": VENUE_LAT - 0.001, "lon": VENUE_LNG, "tags": {"building:levels": "10"}},
            {"lat": VENUE_LAT, "lng": VENUE_LNG + 0.001, "height": 3.0},
        ]

    def test_builds_index_from_records(self):
        cache = BuildingIndexCache(self._records, clock=FakeClock())
        index = cache.get_index()
        assert isinstance(index, BuildingIndex)
        # The 3 m building is below the caster threshold
        assert len(index) == 2

    def test_index_reused_within_ttl(self):
        clock = FakeClock()
        loads = []

        def loader():
            loads.append(1)
            return self._records()

        cache = BuildingIndexCache(loader, ttl_seconds=86400, clock=clock)
        first = cache.get_index()
        clock.advance(3600)
        assert cache.get_index() is first
        assert len(loads) == 1

    def test_new_index_after_ttl(self):
        clock = FakeClock()
        cache = BuildingIndexCache(self._records, ttl_seconds=86400, clock=clock)
        first = cache.get_index()
        clock.advance(86400)
        second = cache.get_index()
        assert second is not first
        assert len(first) == 2

    def test_no_usable_buildings_returns_none(self):
        cache = BuildingIndexCache(lambda: [], clock=FakeClock())
        assert cache.get_index() is None

    def test_stale_index_kept_when_loader_fails(self):
        clock = FakeClock()
        state = {"fail": False}

        def loader():
            if state["fail"]:
                raise TimeoutError("overpass timeout")
            return self._records()

        cache = BuildingIndexCache(loader, ttl_seconds=10, clock=clock)
        first = cache.get_index()
        state["fail"] = True
        clock.advance(11)
        assert cache.get_index() is first
