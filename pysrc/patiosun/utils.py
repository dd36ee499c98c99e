"""Local tangent-plane geometry around a venue.

Distances involved are a few hundred meters, so an equirectangular
projection around the reference latitude is accurate enough.
"""

from __future__ import annotations

import math

from .constants import METERS_PER_DEG_LAT


def meters_per_deg_lng(lat: float) -> float:
    """Meters per degree of longitude at the given latitude."""
    return METERS_PER_DEG_LAT * math.cos(math.radians(lat))


def offset_meters(origin_lat: float, origin_lng: float, lat: float, lng: float) -> tuple[float, float]:
    """
    East/north offset in meters of (lat, lng) from the origin.

    The longitude scale is taken at the origin latitude.

    Returns:
        Tuple of (east_m, north_m).
    """
    east = (lng - origin_lng) * meters_per_deg_lng(origin_lat)
    north = (lat - origin_lat) * METERS_PER_DEG_LAT
    return east, north


def destination(lat: float, lng: float, azimuth_deg: float, distance_m: float) -> tuple[float, float]:
    """
    Point reached by walking ``distance_m`` along a compass bearing.

    Returns:
        Tuple of (lat, lng).
    """
    az = math.radians(azimuth_deg)
    d_lat = math.cos(az) / METERS_PER_DEG_LAT
    d_lng = math.sin(az) / meters_per_deg_lng(lat)
    return lat + d_lat * distance_m, lng + d_lng * distance_m


def angle_difference_rad(a: float, b: float) -> float:
    """Absolute difference between two angles in radians, wrapped into [0, pi]."""
    return abs((a - b + math.pi) % (2 * math.pi) - math.pi)
