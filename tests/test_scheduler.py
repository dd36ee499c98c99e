"""
Tests for coalesced reclassification scheduling.
"""

import threading
import time
from datetime import timedelta

import pytest
from conftest import SUMMER_AFTERNOON, VENUE_LAT, make_venue
from patiosun.models import HourlyCloudCover, SunTag
from patiosun.scheduler import ReclassificationScheduler, ReclassificationSnapshot


@pytest.fixture
def venues():
    return [make_venue("a"), make_venue("b", lat=VENUE_LAT + 0.01)]


@pytest.fixture
def scheduler(observer, venues, far_index):
    snapshots = []
    s = ReclassificationScheduler(observer, on_result=snapshots.append)
    s.set_venues(venues)
    s.publish_index(far_index)
    s.snapshots = snapshots
    return s


class TestCoalescing:
    """At most one pending frame; the latest request wins."""

    def test_single_request(self, scheduler):
        scheduler.request(SUMMER_AFTERNOON)
        assert scheduler.has_pending_frame

        snapshot = scheduler.run_frame()

        assert isinstance(snapshot, ReclassificationSnapshot)
        assert snapshot.instant == SUMMER_AFTERNOON
        assert snapshot.minute_of_day == 13 * 60
        assert set(snapshot.results) == {"a", "b"}
        assert scheduler.snapshots == [snapshot]
        assert scheduler.last_snapshot is snapshot
        assert not scheduler.has_pending_frame

    def test_burst_coalesced_to_last(self, scheduler):
        for minutes in range(10):
            scheduler.request(SUMMER_AFTERNOON + timedelta(minutes=minutes))

        snapshot = scheduler.run_frame()

        assert snapshot.instant == SUMMER_AFTERNOON + timedelta(minutes=9)
        assert scheduler.requests_coalesced == 9
        assert scheduler.frames_run == 1
        assert scheduler.run_frame() is None

    def test_run_frame_without_request(self, observer):
        assert ReclassificationScheduler(observer).run_frame() is None


class TestMinuteKey:
    """Frames are skipped while the local minute is unchanged."""

    def test_same_minute_skipped(self, scheduler):
        scheduler.request(SUMMER_AFTERNOON)
        scheduler.run_frame()

        scheduler.request(SUMMER_AFTERNOON + timedelta(seconds=30))
        assert scheduler.run_frame() is None
        assert scheduler.frames_run == 1

    def test_next_minute_classified(self, scheduler):
        scheduler.request(SUMMER_AFTERNOON)
        scheduler.run_frame()

        scheduler.request(SUMMER_AFTERNOON + timedelta(minutes=1))
        assert scheduler.run_frame().minute_of_day == 13 * 60 + 1

    def test_same_minute_other_day_classified(self, scheduler):
        scheduler.request(SUMMER_AFTERNOON)
        scheduler.run_frame()

        scheduler.request(SUMMER_AFTERNOON + timedelta(days=1))
        snapshot = scheduler.run_frame()
        assert snapshot is not None
        assert snapshot.minute_of_day == 13 * 60


class TestMissingInputs:
    """No-op until venues and an index are available."""

    def test_no_index_is_noop(self, observer, venues):
        s = ReclassificationScheduler(observer)
        s.set_venues(venues)
        s.request(SUMMER_AFTERNOON)
        assert s.run_frame() is None
        assert s.frames_run == 0

    def test_publishing_index_reclassifies_current_instant(self, observer, venues, far_index):
        s = ReclassificationScheduler(observer)
        s.set_venues(venues)
        s.request(SUMMER_AFTERNOON)
        s.run_frame()

        s.publish_index(far_index)

        assert s.has_pending_frame
        snapshot = s.run_frame()
        assert snapshot.instant == SUMMER_AFTERNOON

    def test_no_venues_is_noop(self, observer, far_index):
        s = ReclassificationScheduler(observer)
        s.publish_index(far_index)
        s.request(SUMMER_AFTERNOON)
        assert s.run_frame() is None

    def test_withdrawn_index_is_noop(self, scheduler):
        scheduler.request(SUMMER_AFTERNOON)
        scheduler.run_frame()
        scheduler.publish_index(None)
        assert scheduler.run_frame() is None


class TestInputChanges:
    """Replacing inputs invalidates the minute key."""

    def test_weather_change_reclassifies_same_minute(self, scheduler):
        scheduler.request(SUMMER_AFTERNOON)
        clear = scheduler.run_frame()
        assert clear.cloud_sun_factor == 1.0

        scheduler.set_weather(HourlyCloudCover(low=(100.0,) * 24, mid=(100.0,) * 24, high=(100.0,) * 24))
        cloudy = scheduler.run_frame()

        assert cloudy.cloud_sun_factor == pytest.approx(0.06375)
        assert cloudy.summary.sun_count == 0
        assert cloudy.results["a"].tag == SunTag.OVERCAST

    def test_venue_change_reclassifies(self, scheduler):
        scheduler.request(SUMMER_AFTERNOON)
        scheduler.run_frame()

        scheduler.set_venues([make_venue("c")])
        assert list(scheduler.run_frame().results) == ["c"]

    def test_input_change_before_first_request_schedules_nothing(self, observer, venues):
        s = ReclassificationScheduler(observer)
        s.set_venues(venues)
        assert not s.has_pending_frame


class TestBackground:
    """Frames on a single worker thread."""

    def test_background_frames(self, observer, venues, far_index):
        snapshots = []
        threads = []

        def on_result(snapshot):
            threads.append(threading.current_thread().name)
            snapshots.append(snapshot)

        with ReclassificationScheduler(observer, on_result=on_result, background=True) as s:
            s.set_venues(venues)
            s.publish_index(far_index)
            s.request(SUMMER_AFTERNOON)
            s.wait()

            assert len(snapshots) == 1
            assert snapshots[0].instant == SUMMER_AFTERNOON
            assert threads[0].startswith("patiosun-reclassify")

            s.request(SUMMER_AFTERNOON + timedelta(minutes=5))
            s.wait()

        assert len(snapshots) == 2
        assert s.frames_run == 2

    def test_failed_callback_does_not_stall_later_frames(self, observer, venues, far_index, caplog):
        snapshots = []
        first_frame_done = threading.Event()

        def on_result(snapshot):
            snapshots.append(snapshot)
            if len(snapshots) == 1:
                first_frame_done.set()
                raise RuntimeError("map layer refresh failed")

        with ReclassificationScheduler(observer, on_result=on_result, background=True) as s:
            s.set_venues(venues)
            s.publish_index(far_index)
            s.request(SUMMER_AFTERNOON)
            assert first_frame_done.wait(timeout=5)
            while not s._pending[0].done():
                time.sleep(0.001)

            # Reaps the failed frame before scheduling the next one
            s.request(SUMMER_AFTERNOON + timedelta(minutes=5))
            s.wait()
            s.request(SUMMER_AFTERNOON + timedelta(minutes=10))
            s.wait()

        assert s.frames_run == 3
        assert len(snapshots) == 3
        assert not s.has_pending_frame
        assert "map layer refresh failed" in caplog.text

    def test_wait_logs_failed_frame(self, observer, venues, far_index, caplog):
        def on_result(snapshot):
            raise RuntimeError("popup render failed")

        with ReclassificationScheduler(observer, on_result=on_result, background=True) as s:
            s.set_venues(venues)
            s.publish_index(far_index)
            s.request(SUMMER_AFTERNOON)
            s.wait()

        assert s.frames_run == 1
        assert "popup render failed" in caplog.text

    def test_close_without_frames(self, observer):
        s = ReclassificationScheduler(observer, background=True)
        s.close()
        s.close()
