"""
Geometric constants and default thresholds for patiosun.

Values here are the defaults behind :class:`~patiosun.models.ShadowConfig`
and the bundled ``data/default_params.json``. Keep the two in sync.
"""

import math

# =============================================================================
# Geodesy
# =============================================================================

# Meters per degree of latitude (spherical approximation).
# One degree of longitude is METERS_PER_DEG_LAT * cos(latitude).
METERS_PER_DEG_LAT = 111_320.0


# =============================================================================
# Shadow Engine
# =============================================================================

# Buildings shorter than this never cast a relevant shadow (meters)
MIN_CASTER_HEIGHT_M = 6.0

# Buildings closer than this to a venue are treated as the venue's own building
SELF_BUILDING_RADIUS_M = 8.0

# Search radius around each probe point (meters)
BUILDING_MATCH_RADIUS_M = 40.0

# Max angle between sun azimuth and building bearing to count as blocking (~25.7°)
MAX_ANGLE_OFF_SUN_RAD = math.pi / 7

# Real-world probe distances toward the sun (meters). Non-linear on purpose:
# shadow length grows with height, so long probes are spaced further apart.
PROBE_DISTANCES_M = (15.0, 30.0, 50.0, 80.0, 120.0, 180.0, 260.0)

# At or below this altitude the sun is treated as set (degrees)
NIGHT_ALTITUDE_DEG = 1.0

# Above this altitude no realistic building shadow reaches a probe (degrees)
HIGH_SUN_ALTITUDE_DEG = 70.0

# Meters per OSM building level when only building:levels is known
METERS_PER_LEVEL = 3.5


# =============================================================================
# Atmospheric Attenuation
# =============================================================================

# Fraction of direct sun blocked by each fully covered cloud layer
LOW_CLOUD_BLOCKAGE = 0.85
MID_CLOUD_BLOCKAGE = 0.50
HIGH_CLOUD_BLOCKAGE = 0.15

# Cloud sun factor thresholds for overrides and tags
OVERCAST_FACTOR = 0.2
MOSTLY_CLOUDY_FACTOR = 0.5
FILTERED_SUN_FACTOR = 0.8


# =============================================================================
# Sun Position / Lighting
# =============================================================================

# Sun altitude bounding the golden hour (degrees)
GOLDEN_HOUR_ALTITUDE_DEG = 6.0

MINUTES_PER_DAY = 1440

# Simulated clock playback steps (minutes)
AUTOPLAY_STEP_MINUTES = 60
MANUAL_STEP_MINUTES = 1


__all__ = [
    "METERS_PER_DEG_LAT",
    "MIN_CASTER_HEIGHT_M",
    "SELF_BUILDING_RADIUS_M",
    "BUILDING_MATCH_RADIUS_M",
    "MAX_ANGLE_OFF_SUN_RAD",
    "PROBE_DISTANCES_M",
    "NIGHT_ALTITUDE_DEG",
    "HIGH_SUN_ALTITUDE_DEG",
    "METERS_PER_LEVEL",
    "LOW_CLOUD_BLOCKAGE",
    "MID_CLOUD_BLOCKAGE",
    "HIGH_CLOUD_BLOCKAGE",
    "OVERCAST_FACTOR",
    "MOSTLY_CLOUDY_FACTOR",
    "FILTERED_SUN_FACTOR",
    "GOLDEN_HOUR_ALTITUDE_DEG",
    "MINUTES_PER_DAY",
    "AUTOPLAY_STEP_MINUTES",
    "MANUAL_STEP_MINUTES",
]
