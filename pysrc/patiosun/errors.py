"""patiosun error types.

Errors are raised only where data enters the engine (building and venue
ingestion, configuration, weather parsing). Classification itself never
raises for missing or degenerate data; it resolves to a safe default.

Example:
    try:
        index = patiosun.build_index(buildings)
    except patiosun.EmptyBuildingIndex:
        index = None  # classify_all treats this as "cannot prove a shadow"
    except patiosun.InvalidBuildingData as e:
        print(f"Bad building field '{e.field}': {e.value}")
"""

from __future__ import annotations


class PatioSunError(Exception):
    """Base class for all patiosun errors."""

    pass


class InvalidBuildingData(PatioSunError):
    """Raised when a building record cannot be used as a shadow caster.

    Attributes:
        message: Human-readable error description.
        field: Name of the problematic field (e.g., "height_m", "latitude").
        value: The rejected value (optional).
    """

    def __init__(self, message: str, field: str | None = None, value: float | str | None = None):
        self.field = field
        self.value = value
        super().__init__(message)


class EmptyBuildingIndex(PatioSunError):
    """Raised when a spatial index is requested for zero buildings.

    Callers treat "no index" as "cannot classify; default to sunlit".
    """

    def __init__(self, message: str = "Cannot build a building index from an empty building list"):
        super().__init__(message)


class WeatherDataError(PatioSunError):
    """Raised when a weather payload cannot be parsed.

    Attributes:
        field: The problematic weather field (e.g., "cloud_cover_low").
        value: The invalid value.
        reason: Why the value is invalid.
    """

    def __init__(self, field: str, value: object, reason: str | None = None):
        self.field = field
        self.value = value
        self.reason = reason
        message = f"Invalid weather data for '{field}': {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ConfigurationError(PatioSunError):
    """Raised when configuration is invalid or inconsistent.

    Attributes:
        parameter: The problematic parameter name.
        reason: Why the configuration is invalid.
    """

    def __init__(self, parameter: str, reason: str):
        self.parameter = parameter
        self.reason = reason
        message = f"Invalid configuration for '{parameter}': {reason}"
        super().__init__(message)
