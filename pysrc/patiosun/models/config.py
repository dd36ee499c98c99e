"""Engine configuration classes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace

from ..constants import (
    BUILDING_MATCH_RADIUS_M,
    HIGH_SUN_ALTITUDE_DEG,
    MAX_ANGLE_OFF_SUN_RAD,
    MIN_CASTER_HEIGHT_M,
    NIGHT_ALTITUDE_DEG,
    OVERCAST_FACTOR,
    PROBE_DISTANCES_M,
    SELF_BUILDING_RADIUS_M,
)
from ..errors import ConfigurationError
from .weather import Observer


@dataclass(frozen=True)
class ShadowConfig:
    """
    Shadow engine and batch classifier thresholds.

    Attributes:
        min_caster_height_m: Buildings below this height are ignored. Default 6.
        self_building_radius_m: Buildings closer than this are the venue's own. Default 8.
        match_radius_m: Search radius around each probe point. Default 40.
        max_angle_off_sun_rad: Tolerance between building bearing and sun azimuth. Default pi/7.
        probe_distances_m: Increasing probe distances toward the sun.
        night_altitude_deg: At or below this altitude every venue is shaded. Default 1.
        high_sun_altitude_deg: Above this altitude every venue is sunlit. Default 70.
        overcast_factor: Cloud sun factor below which sunlit venues flip to shade. Default 0.2.
    """

    min_caster_height_m: float = MIN_CASTER_HEIGHT_M
    self_building_radius_m: float = SELF_BUILDING_RADIUS_M
    match_radius_m: float = BUILDING_MATCH_RADIUS_M
    max_angle_off_sun_rad: float = MAX_ANGLE_OFF_SUN_RAD
    probe_distances_m: tuple[float, ...] = PROBE_DISTANCES_M
    night_altitude_deg: float = NIGHT_ALTITUDE_DEG
    high_sun_altitude_deg: float = HIGH_SUN_ALTITUDE_DEG
    overcast_factor: float = OVERCAST_FACTOR

    def __post_init__(self):
        if not self.probe_distances_m:
            raise ConfigurationError("probe_distances_m", "at least one probe distance is required")
        if any(b <= a for a, b in zip(self.probe_distances_m, self.probe_distances_m[1:])):
            raise ConfigurationError("probe_distances_m", "probe distances must be strictly increasing")
        if self.probe_distances_m[0] <= 0:
            raise ConfigurationError("probe_distances_m", "probe distances must be positive")
        if self.match_radius_m <= 0:
            raise ConfigurationError("match_radius_m", f"must be > 0, got {self.match_radius_m}")
        if not 0 < self.max_angle_off_sun_rad <= math.pi:
            raise ConfigurationError("max_angle_off_sun_rad", f"must be in (0, pi], got {self.max_angle_off_sun_rad}")
        if self.night_altitude_deg >= self.high_sun_altitude_deg:
            raise ConfigurationError("night_altitude_deg", "must be below high_sun_altitude_deg")
        if not 0 <= self.overcast_factor <= 1:
            raise ConfigurationError("overcast_factor", f"must be in [0, 1], got {self.overcast_factor}")

    @classmethod
    def defaults(cls) -> ShadowConfig:
        return cls()

    @classmethod
    def from_params(cls, params: SimpleNamespace) -> ShadowConfig:
        """Build from loaded params (``Shadow`` and ``Clouds`` blocks)."""
        shadow = getattr(params, "Shadow", SimpleNamespace())
        clouds = getattr(params, "Clouds", SimpleNamespace())
        angle_deg = getattr(shadow, "max_angle_off_sun_deg", None)
        return cls(
            min_caster_height_m=float(getattr(shadow, "min_caster_height_m", MIN_CASTER_HEIGHT_M)),
            self_building_radius_m=float(getattr(shadow, "self_building_radius_m", SELF_BUILDING_RADIUS_M)),
            match_radius_m=float(getattr(shadow, "match_radius_m", BUILDING_MATCH_RADIUS_M)),
            max_angle_off_sun_rad=math.radians(angle_deg) if angle_deg is not None else MAX_ANGLE_OFF_SUN_RAD,
            probe_distances_m=tuple(float(d) for d in getattr(shadow, "probe_distances_m", PROBE_DISTANCES_M)),
            night_altitude_deg=float(getattr(shadow, "night_altitude_deg", NIGHT_ALTITUDE_DEG)),
            high_sun_altitude_deg=float(getattr(shadow, "high_sun_altitude_deg", HIGH_SUN_ALTITUDE_DEG)),
            overcast_factor=float(getattr(clouds, "overcast_factor", OVERCAST_FACTOR)),
        )


@dataclass
class EngineConfig:
    """
    Everything the reclassification pipeline needs besides data.

    Attributes:
        observer: The modeled city.
        shadow: Shadow engine thresholds.
        buildings_ttl_s: Freshness of cached building data. Default 24 h.
        weather_ttl_s: Freshness of cached weather data. Default 30 min.

    Examples:
        >>> config = EngineConfig.defaults()  # bundled Chicago params
        >>> config = EngineConfig.from_json("lisbon.json")
    """

    observer: Observer
    shadow: ShadowConfig = field(default_factory=ShadowConfig)
    buildings_ttl_s: float = 24 * 60 * 60
    weather_ttl_s: float = 30 * 60

    def __post_init__(self):
        if self.buildings_ttl_s <= 0:
            raise ConfigurationError("buildings_ttl_s", f"must be > 0, got {self.buildings_ttl_s}")
        if self.weather_ttl_s <= 0:
            raise ConfigurationError("weather_ttl_s", f"must be > 0, got {self.weather_ttl_s}")

    @classmethod
    def from_params(cls, params: SimpleNamespace) -> EngineConfig:
        cache = getattr(params, "Cache", SimpleNamespace())
        return cls(
            observer=Observer.from_params(params),
            shadow=ShadowConfig.from_params(params),
            buildings_ttl_s=float(getattr(cache, "buildings_ttl_s", 24 * 60 * 60)),
            weather_ttl_s=float(getattr(cache, "weather_ttl_s", 30 * 60)),
        )

    @classmethod
    def from_json(cls, path: str | Path) -> EngineConfig:
        """Load configuration from a parameters JSON file."""
        from ..config import load_params

        return cls.from_params(load_params(path))

    @classmethod
    def defaults(cls) -> EngineConfig:
        """Configuration from the bundled default_params.json."""
        from ..config import load_params

        return cls.from_params(load_params())
