"""patiosun - sun/shadow classification for outdoor venues.

Decides, for a simulated instant, whether each patio in a city is in direct
sun or shade, using sparse building heights, the sun position and layered
cloud cover.

Quick start::

    import patiosun
    from datetime import datetime, timezone

    observer = patiosun.Observer.default()
    index = patiosun.build_index(patiosun.buildings_from_records(records))
    sun = patiosun.get_sun_position(datetime(2025, 7, 15, 18, tzinfo=timezone.utc), observer)
    results = patiosun.classify_all(index, venues, sun.azimuth_deg, sun.altitude_deg)

Interactive use::

    scheduler = patiosun.ReclassificationScheduler(observer, on_result=redraw)
    clock = patiosun.SimulatedClock(start, observer, on_change=scheduler.request)
"""

import logging
from importlib.metadata import PackageNotFoundError, version

logger = logging.getLogger(__name__)

# Version: single source of truth is pyproject.toml
try:
    __version__ = version("patiosun")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

from . import progress  # noqa: E402
from .attenuation import (  # noqa: E402
    WeatherCondition,
    decode_weather_code,
    get_cloud_sun_factor,
    get_hourly_sun_factor,
    hour_index_for,
)
from .cache import BuildingIndexCache, TTLCache  # noqa: E402
from .classification import ClassificationSummary, classify_all, get_sun_tag, summarize  # noqa: E402
from .clock import SimulatedClock  # noqa: E402
from .components import ShadowResult, is_point_in_shadow  # noqa: E402
from .config import load_params  # noqa: E402
from .errors import (  # noqa: E402
    ConfigurationError,
    EmptyBuildingIndex,
    InvalidBuildingData,
    PatioSunError,
    WeatherDataError,
)
from .models import (  # noqa: E402
    Building,
    ClassificationResult,
    EngineConfig,
    HourlyCloudCover,
    Observer,
    ShadowConfig,
    SunPosition,
    SunTag,
    Venue,
    buildings_from_records,
    estimate_height,
    venues_from_records,
)
from .patiosun_logging import get_logger, set_global_feedback, set_global_level  # noqa: E402
from .scheduler import ReclassificationScheduler, ReclassificationSnapshot  # noqa: E402
from .spatial_index import BuildingIndex, build_index, query_near  # noqa: E402
from .sun_position import (  # noqa: E402
    GoldenHourWindow,
    date_from_minute,
    format_minute_of_day,
    get_golden_hour,
    get_sun_position,
    get_sun_positions,
    get_sunrise_minute,
    get_sunset_minute,
    is_sun_up,
    light_direction,
    minute_of_day,
    sky_position,
    sun_color,
    sun_intensity,
)
from .timeline import DayTimeline, classify_day  # noqa: E402

__all__ = [
    "__version__",
    # Data model
    "Building",
    "Venue",
    "ClassificationResult",
    "SunTag",
    "SunPosition",
    "Observer",
    "HourlyCloudCover",
    "buildings_from_records",
    "estimate_height",
    "venues_from_records",
    # Configuration
    "ShadowConfig",
    "EngineConfig",
    "load_params",
    # Spatial index
    "BuildingIndex",
    "build_index",
    "query_near",
    # Sun position
    "get_sun_position",
    "get_sun_positions",
    "is_sun_up",
    "minute_of_day",
    "date_from_minute",
    "format_minute_of_day",
    "get_sunrise_minute",
    "get_sunset_minute",
    "get_golden_hour",
    "GoldenHourWindow",
    "sun_color",
    "sun_intensity",
    "light_direction",
    "sky_position",
    # Clouds
    "get_cloud_sun_factor",
    "get_hourly_sun_factor",
    "hour_index_for",
    "decode_weather_code",
    "WeatherCondition",
    # Shadows and classification
    "ShadowResult",
    "is_point_in_shadow",
    "classify_all",
    "get_sun_tag",
    "summarize",
    "ClassificationSummary",
    # Scheduling
    "ReclassificationScheduler",
    "ReclassificationSnapshot",
    "SimulatedClock",
    "classify_day",
    "DayTimeline",
    # Caching
    "TTLCache",
    "BuildingIndexCache",
    # Errors
    "PatioSunError",
    "InvalidBuildingData",
    "EmptyBuildingIndex",
    "WeatherDataError",
    "ConfigurationError",
    # Logging
    "get_logger",
    "set_global_level",
    "set_global_feedback",
    # Submodules
    "progress",
]
