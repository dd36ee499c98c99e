"""
Batch sun/shade classification of a venue collection.

``classify_all`` applies the shadow engine across every venue, with uniform
fast paths when the sun is at the horizon or nearly overhead, then applies
the cloud override and a descriptive tag. Geometry ("can the sun physically
reach this spot") and cloud intensity ("is there enough sun to matter") stay
separate: clouds never change ``blocked_by_building``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .components.shadows import is_point_in_shadow
from .constants import FILTERED_SUN_FACTOR, MOSTLY_CLOUDY_FACTOR
from .models import ClassificationResult, ShadowConfig, SunTag
from .patiosun_logging import get_logger

if TYPE_CHECKING:
    from .models import Venue
    from .spatial_index import BuildingIndex

logger = get_logger(__name__)

_DEFAULT_CONFIG = ShadowConfig()


def get_sun_tag(
    in_sun: bool,
    blocked_by_building: bool,
    altitude_deg: float,
    cloud_sun_factor: float | None = None,
    overcast_factor: float = _DEFAULT_CONFIG.overcast_factor,
) -> SunTag:
    """
    Descriptive tag explaining why a venue is in sun or shade.

    Precedence: night > heavy overcast > mostly cloudy > filtered sun >
    direct / afternoon / golden-hour sun > blocked by building > sun too low.

    Args:
        in_sun: Effective sun state (after the cloud override).
        blocked_by_building: Whether a building was found as the shadow cause.
        altitude_deg: Sun altitude in degrees.
        cloud_sun_factor: Cloud transmittance, or None to skip cloud tags.
        overcast_factor: Factor below which the sky counts as overcast.
    """
    if altitude_deg <= 0:
        return SunTag.AFTER_SUNSET

    if cloud_sun_factor is not None and cloud_sun_factor < FILTERED_SUN_FACTOR:
        if cloud_sun_factor < overcast_factor:
            return SunTag.OVERCAST_AND_SHADED if blocked_by_building else SunTag.OVERCAST
        if cloud_sun_factor < MOSTLY_CLOUDY_FACTOR:
            return SunTag.MOSTLY_CLOUDY
        return SunTag.FILTERED_SUN

    if in_sun:
        if altitude_deg > 25:
            return SunTag.DIRECT_SUNLIGHT
        if altitude_deg > 12:
            return SunTag.AFTERNOON_SUN
        if altitude_deg >= 1:
            return SunTag.GOLDEN_HOUR

    if blocked_by_building and altitude_deg > 1:
        return SunTag.BLOCKED_BY_BUILDING
    if altitude_deg <= 6:
        return SunTag.SUN_TOO_LOW
    return SunTag.BLOCKED_BY_BUILDING


def _geometric_states(
    index: BuildingIndex | None,
    venues: list[Venue],
    sun_azimuth_deg: float,
    sun_altitude_deg: float,
    cfg: ShadowConfig,
) -> list[tuple[bool, bool]]:
    """(in_sun, blocked_by_building) per venue from geometry alone."""
    if sun_altitude_deg <= cfg.night_altitude_deg:
        return [(False, False)] * len(venues)

    if sun_altitude_deg > cfg.high_sun_altitude_deg:
        return [(True, False)] * len(venues)

    if index is None:
        logger.debug(f"No building index, defaulting {len(venues)} venues to sunlit")
        return [(True, False)] * len(venues)

    states = []
    for v in venues:
        in_shadow, blocked = is_point_in_shadow(
            index, v.latitude, v.longitude, sun_azimuth_deg, sun_altitude_deg, cfg
        )
        states.append((not in_shadow, blocked))
    return states


def classify_all(
    index: BuildingIndex | None,
    venues: Iterable[Venue],
    sun_azimuth_deg: float,
    sun_altitude_deg: float,
    cloud_sun_factor: float | None = None,
    config: ShadowConfig | None = None,
) -> dict[str, ClassificationResult]:
    """
    Classify every venue as sunlit or shaded.

    Never raises for missing data: with no index every venue the sun can
    reach is reported sunlit.

    Args:
        index: Building index, or None when no building data is loaded.
        venues: Venues to classify.
        sun_azimuth_deg: Compass bearing toward the sun.
        sun_altitude_deg: Sun altitude above the horizon.
        cloud_sun_factor: Cloud transmittance (0-1). None means clear and
            suppresses cloud tags.
        config: Thresholds. Defaults to :class:`ShadowConfig` defaults.

    Returns:
        Mapping of venue id to ClassificationResult, in venue order.
    """
    cfg = config or _DEFAULT_CONFIG
    venue_list = list(venues)
    states = _geometric_states(index, venue_list, sun_azimuth_deg, sun_altitude_deg, cfg)

    overcast = cloud_sun_factor is not None and cloud_sun_factor < cfg.overcast_factor

    results: dict[str, ClassificationResult] = {}
    for venue, (in_sun, blocked) in zip(venue_list, states):
        # Heavy overcast: flip geometrically sunlit venues to shade
        if overcast and in_sun:
            in_sun = False
        tag = get_sun_tag(in_sun, blocked, sun_altitude_deg, cloud_sun_factor, cfg.overcast_factor)
        results[venue.id] = ClassificationResult(
            venue_id=venue.id,
            in_sun=in_sun,
            blocked_by_building=blocked,
            tag=tag,
        )
    return results


@dataclass(frozen=True)
class ClassificationSummary:
    """Sun and shade counts over a classification map."""

    sun_count: int
    shade_count: int

    @property
    def total(self) -> int:
        return self.sun_count + self.shade_count

    @property
    def sun_fraction(self) -> float:
        return self.sun_count / self.total if self.total else 0.0


def summarize(results: Mapping[str, ClassificationResult]) -> ClassificationSummary:
    """Count sunlit and shaded venues."""
    sun = sum(1 for r in results.values() if r.in_sun)
    return ClassificationSummary(sun_count=sun, shade_count=len(results) - sun)
