"""Venue and classification result models."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..patiosun_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Venue:
    """
    A venue (patio, terrace, rooftop) to classify.

    Only the id and position matter to the engine; ``name`` is carried for
    logging and display by the caller.
    """

    id: str
    latitude: float
    longitude: float
    name: str = ""

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be in [-90, 90], got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be in [-180, 180], got {self.longitude}")


class SunTag(str, Enum):
    """Human-readable reason a venue is in sun or shade."""

    AFTER_SUNSET = "🌙 After Sunset"
    OVERCAST = "☁️ Overcast"
    OVERCAST_AND_SHADED = "☁️ Overcast & Shaded"
    MOSTLY_CLOUDY = "🌥️ Mostly Cloudy"
    FILTERED_SUN = "⛅ Filtered Sun"
    DIRECT_SUNLIGHT = "☀️ Direct Sunlight"
    AFTERNOON_SUN = "☀️ Afternoon Sun"
    GOLDEN_HOUR = "🌅 Golden Hour"
    BLOCKED_BY_BUILDING = "🏢 Blocked by Building"
    SUN_TOO_LOW = "🌅 Sun Too Low"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ClassificationResult:
    """
    Sun/shade state of one venue at one instant.

    Attributes:
        venue_id: Id of the classified venue.
        in_sun: Whether the venue is effectively sunlit (geometry and clouds).
        blocked_by_building: True only when a specific building was found
            to shadow the venue.
        tag: Descriptive status tag.
    """

    venue_id: str
    in_sun: bool
    blocked_by_building: bool
    tag: SunTag | None = None


def venues_from_records(records: Iterable[Mapping[str, Any]]) -> list[Venue]:
    """
    Convert raw venue records (``id``, ``lat``, ``lng``, optional ``name``) into Venues.

    Records without an id or with non-finite coordinates are skipped.
    """
    venues: list[Venue] = []
    skipped = 0
    for record in records:
        venue_id = record.get("id")
        try:
            lat = float(record["lat"])
            lng = float(record["lng"])
        except (KeyError, TypeError, ValueError):
            skipped += 1
            continue
        if venue_id in (None, "") or not (math.isfinite(lat) and math.isfinite(lng)):
            skipped += 1
            continue
        try:
            venues.append(Venue(id=str(venue_id), latitude=lat, longitude=lng, name=str(record.get("name") or "")))
        except ValueError as e:
            logger.debug(f"Skipping venue {venue_id!r}: {e}")
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} venue records with missing id or coordinates")
    return venues
