"""
Building shadow test for a single point.

Handles:
- Night-equivalent shade when the sun is at the horizon
- Ray-marching probes toward the sun against the building index
- Rejecting the point's own building and buildings off the sun's bearing
- Shadow length comparison (height / tan(altitude))

Buildings are points with a height, and probes sit at discrete real-world
distances, so the cost per point is O(probes x nearby buildings).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from ..constants import METERS_PER_DEG_LAT
from ..models import ShadowConfig
from ..spatial_index import query_near
from ..utils import angle_difference_rad, meters_per_deg_lng, offset_meters

if TYPE_CHECKING:
    from ..spatial_index import BuildingIndex

_DEFAULT_CONFIG = ShadowConfig()


class ShadowResult(NamedTuple):
    """
    Outcome of a shadow test.

    Attributes:
        in_shadow: The point receives no direct sun.
        blocked_by_building: A specific building was identified as the cause.
    """

    in_shadow: bool
    blocked_by_building: bool


NIGHT_SHADE = ShadowResult(in_shadow=True, blocked_by_building=False)
SUNLIT = ShadowResult(in_shadow=False, blocked_by_building=False)
BUILDING_SHADE = ShadowResult(in_shadow=True, blocked_by_building=True)


def is_point_in_shadow(
    index: BuildingIndex,
    lat: float,
    lng: float,
    sun_azimuth_deg: float,
    sun_altitude_deg: float,
    config: ShadowConfig | None = None,
) -> ShadowResult:
    """
    Decide whether a point is shadowed by a nearby building.

    From the point, steps toward the sun at increasing real-world distances.
    At each probe the index is queried for buildings within the match
    radius. A building counts only if it is a caster, is not the point's
    own building, lies roughly on the sun's bearing from the point, and is
    closer than its own shadow length. The first such building wins.

    Args:
        index: Building index to query.
        lat: Latitude of the point.
        lng: Longitude of the point.
        sun_azimuth_deg: Compass bearing toward the sun (0 = north).
        sun_altitude_deg: Sun altitude above the horizon.
        config: Thresholds. Defaults to :class:`ShadowConfig` defaults.

    Returns:
        ShadowResult. ``(True, False)`` when the sun is at or below the
        night altitude, ``(True, True)`` when a building blocks the sun,
        ``(False, False)`` otherwise.
    """
    cfg = config or _DEFAULT_CONFIG
    if sun_altitude_deg <= cfg.night_altitude_deg:
        return NIGHT_SHADE

    tan_alt = math.tan(math.radians(sun_altitude_deg))
    az_rad = math.radians(sun_azimuth_deg)
    m_per_deg_lng = meters_per_deg_lng(lat)

    # Unit vector toward the sun, degrees per meter
    d_lat = math.cos(az_rad) / METERS_PER_DEG_LAT
    d_lng = math.sin(az_rad) / m_per_deg_lng

    for meters in cfg.probe_distances_m:
        probe_lat = lat + d_lat * meters
        probe_lng = lng + d_lng * meters

        for b in query_near(index, probe_lat, probe_lng, cfg.match_radius_m):
            if b.height_m < cfg.min_caster_height_m:
                continue

            # True offset from the point (not the probe) to the building
            east, north = offset_meters(lat, lng, b.latitude, b.longitude)
            distance = math.hypot(east, north)
            if distance < cfg.self_building_radius_m:
                continue

            bearing = math.atan2(east, north)
            if angle_difference_rad(bearing, az_rad) > cfg.max_angle_off_sun_rad:
                continue

            if distance < b.height_m / tan_alt:
                return BUILDING_SHADE

    return SUNLIT
