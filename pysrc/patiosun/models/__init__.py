"""Data models for patiosun.

Modules
-------
building
    ``Building`` and ingestion helpers (OSM height estimation).
venue
    ``Venue``, ``ClassificationResult`` and ``SunTag``.
weather
    ``Observer``, ``SunPosition`` and ``HourlyCloudCover``.
config
    ``ShadowConfig`` and ``EngineConfig`` run-time settings.
"""

from .building import Building, buildings_from_records, estimate_height, sanitize_height
from .config import EngineConfig, ShadowConfig
from .venue import ClassificationResult, SunTag, Venue, venues_from_records
from .weather import HourlyCloudCover, Observer, SunPosition

__all__ = [
    # Buildings
    "Building",
    "buildings_from_records",
    "estimate_height",
    "sanitize_height",
    # Venues and results
    "Venue",
    "venues_from_records",
    "ClassificationResult",
    "SunTag",
    # Observer and weather
    "Observer",
    "SunPosition",
    "HourlyCloudCover",
    # Configuration
    "ShadowConfig",
    "EngineConfig",
]
