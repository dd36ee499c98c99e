"""
Tests for the simulated clock and playback.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from conftest import SUMMER_AFTERNOON
from patiosun.clock import SimulatedClock
from patiosun.sun_position import to_local


@pytest.fixture
def changes():
    return []


@pytest.fixture
def clock(observer, changes):
    return SimulatedClock(SUMMER_AFTERNOON, observer, on_change=changes.append)


class TestClockState:
    """Derived clock properties."""

    def test_initial_state(self, clock, changes):
        assert clock.instant == SUMMER_AFTERNOON
        assert clock.minute_of_day == 13 * 60
        assert not clock.is_night
        assert not clock.is_playing
        assert changes == []

    def test_sunrise_before_sunset(self, clock):
        assert 0 < clock.sunrise_minute < clock.sunset_minute < 1440

    def test_night(self, clock):
        clock.set_minute_of_day(60)
        assert clock.is_night


class TestSetters:
    """Slider and calendar changes."""

    def test_set_minute_notifies(self, clock, changes):
        clock.set_minute_of_day(17 * 60 + 30)
        assert clock.minute_of_day == 1050
        assert changes == [clock.instant]

    def test_set_minute_clamped(self, clock):
        clock.set_minute_of_day(9999)
        assert clock.minute_of_day == 1439

    def test_set_minute_stops_playback(self, clock):
        clock.start_playback(autoplay=True)
        clock.set_minute_of_day(600)
        assert not clock.is_playing
        assert not clock.is_autoplay

    def test_set_calendar_date_keeps_minute(self, clock, observer):
        clock.set_calendar_date(date(2024, 12, 21))
        local = to_local(clock.instant, observer)
        assert local.date() == date(2024, 12, 21)
        assert clock.minute_of_day == 13 * 60

    def test_set_calendar_date_onto_spring_forward_day(self, clock, observer):
        clock.set_calendar_date(date(2024, 3, 10))
        assert to_local(clock.instant, observer).date() == date(2024, 3, 10)
        assert clock.minute_of_day == 13 * 60

    def test_set_calendar_datetime(self, clock, observer):
        clock.set_calendar_date(datetime(2024, 7, 4, 9, 0, tzinfo=ZoneInfo("America/Chicago")))
        assert to_local(clock.instant, observer).date() == date(2024, 7, 4)
        assert clock.minute_of_day == 13 * 60


class TestPlayback:
    """Sunrise-to-sunset playback."""

    def test_start_jumps_to_sunrise(self, clock):
        clock.start_playback()
        assert clock.is_playing
        assert clock.minute_of_day == clock.sunrise_minute

    def test_manual_step_is_one_minute(self, clock):
        clock.start_playback()
        start = clock.minute_of_day
        clock.step_forward()
        assert clock.minute_of_day == start + 1

    def test_autoplay_step_is_one_hour(self, clock):
        clock.start_playback(autoplay=True)
        start = clock.minute_of_day
        clock.step_forward()
        assert clock.minute_of_day == start + 60

    def test_wraps_to_sunrise_after_sunset(self, clock):
        clock.start_playback(autoplay=True)
        for _ in range(30):
            if not clock.is_playing:
                break
            clock.step_forward()

        assert not clock.is_playing
        assert clock.minute_of_day == clock.sunrise_minute

    def test_stop(self, clock):
        clock.start_playback()
        clock.stop()
        assert not clock.is_playing
