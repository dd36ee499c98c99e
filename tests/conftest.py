"""Shared pytest fixtures and scene builders."""

from datetime import datetime, timezone

import pytest
from patiosun.models import Building, Observer, Venue
from patiosun.spatial_index import build_index
from patiosun.utils import destination

# River North, Chicago
VENUE_LAT = 41.8925
VENUE_LNG = -87.6340

# 2024-06-21 13:00 CDT, close to solar noon
SUMMER_AFTERNOON = datetime(2024, 6, 21, 18, 0, tzinfo=timezone.utc)


def building_from(lat: float, lng: float, azimuth_deg: float, distance_m: float, height_m: float) -> Building:
    """Building placed ``distance_m`` from (lat, lng) along a compass bearing."""
    b_lat, b_lng = destination(lat, lng, azimuth_deg, distance_m)
    return Building(latitude=b_lat, longitude=b_lng, height_m=height_m)


def make_venue(venue_id: str = "v1", lat: float = VENUE_LAT, lng: float = VENUE_LNG) -> Venue:
    return Venue(id=venue_id, latitude=lat, longitude=lng, name=f"Patio {venue_id}")


def far_building() -> Building:
    """A tall building about 5 km away, outside every probe radius."""
    return Building(latitude=VENUE_LAT + 0.045, longitude=VENUE_LNG, height_m=200.0)


@pytest.fixture
def observer() -> Observer:
    return Observer(latitude=41.91, longitude=-87.635, timezone="America/Chicago", name="Chicago")


@pytest.fixture
def venue() -> Venue:
    return make_venue()


@pytest.fixture
def far_index():
    """Index whose only building never shadows the test venues."""
    return build_index([far_building()])


@pytest.fixture
def south_tower_index():
    """A 60 m building 50 m due south of the venue."""
    return build_index([building_from(VENUE_LAT, VENUE_LNG, 180.0, 50.0, 60.0)])
