"""Building data model and ingestion from raw records."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..constants import METERS_PER_LEVEL, MIN_CASTER_HEIGHT_M
from ..errors import InvalidBuildingData
from ..patiosun_logging import get_logger

logger = get_logger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class Building:
    """
    One real building, represented by its footprint centroid.

    Attributes:
        latitude: Centroid latitude in degrees.
        longitude: Centroid longitude in degrees.
        height_m: Building height in meters. Must be finite and >= 0.
    """

    latitude: float
    longitude: float
    height_m: float

    def __post_init__(self):
        if not math.isfinite(self.latitude) or not -90 <= self.latitude <= 90:
            raise InvalidBuildingData(
                f"Latitude must be finite and in [-90, 90], got {self.latitude}",
                field="latitude",
                value=self.latitude,
            )
        if not math.isfinite(self.longitude) or not -180 <= self.longitude <= 180:
            raise InvalidBuildingData(
                f"Longitude must be finite and in [-180, 180], got {self.longitude}",
                field="longitude",
                value=self.longitude,
            )
        if not math.isfinite(self.height_m) or self.height_m < 0:
            raise InvalidBuildingData(
                f"Height must be finite and >= 0, got {self.height_m}",
                field="height_m",
                value=self.height_m,
            )

    @property
    def is_caster(self) -> bool:
        """True if the building is tall enough to cast a relevant shadow."""
        return self.height_m >= MIN_CASTER_HEIGHT_M


def _parse_number(raw: Any) -> float | None:
    """Parse a float from a number or a string such as ``"24 m"``."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    match = _LEADING_NUMBER.match(str(raw))
    if match is None:
        return None
    return float(match.group(1))


def estimate_height(tags: Mapping[str, Any]) -> float:
    """
    Estimate a building height in meters from OpenStreetMap tags.

    Uses the explicit ``height`` tag when it parses, otherwise
    ``building:levels`` at 3.5 m per level, otherwise 0.

    Example:
        >>> estimate_height({"height": "24.5"})
        24.5
        >>> estimate_height({"building:levels": "4"})
        14.0
    """
    height = _parse_number(tags.get("height"))
    if height is not None and not math.isnan(height):
        return height
    levels = _parse_number(tags.get("building:levels"))
    if levels is not None and not math.isnan(levels):
        return float(int(levels)) * METERS_PER_LEVEL
    return 0.0


def sanitize_height(raw: Any) -> float:
    """
    Clamp a raw height to a usable value.

    Negative, NaN, infinite and unparsable heights become 0, which is below
    the caster threshold and therefore never produces a shadow.
    """
    height = _parse_number(raw)
    if height is None or not math.isfinite(height) or height < 0:
        logger.debug(f"Clamping malformed building height {raw!r} to 0")
        return 0.0
    return height


def buildings_from_records(
    records: Iterable[Mapping[str, Any]],
    min_height_m: float = MIN_CASTER_HEIGHT_M,
) -> list[Building]:
    """
    Convert raw building records into validated Building objects.

    Each record needs ``lat`` and ``lng`` (or ``lon``), plus either a
    ``height`` value or an OSM ``tags`` mapping. An Overpass ``center``
    block is accepted in place of top-level coordinates.

    Args:
        records: Raw records from a building data source.
        min_height_m: Records below this height are dropped. Default 6 m.

    Returns:
        List of buildings, in input order.
    """
    buildings: list[Building] = []
    skipped = 0
    for record in records:
        coords = record.get("center") or record
        lat = _parse_number(coords.get("lat"))
        lng = _parse_number(coords.get("lng", coords.get("lon")))
        if lat is None or lng is None or not (math.isfinite(lat) and math.isfinite(lng)):
            skipped += 1
            continue

        if "height" in record and not isinstance(record.get("tags"), Mapping):
            height = sanitize_height(record["height"])
        else:
            height = sanitize_height(estimate_height(record.get("tags") or {}))

        if height < min_height_m:
            continue
        try:
            buildings.append(Building(latitude=lat, longitude=lng, height_m=height))
        except InvalidBuildingData as e:
            logger.debug(f"Skipping building record: {e}")
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} building records with missing or invalid coordinates")
    return buildings
