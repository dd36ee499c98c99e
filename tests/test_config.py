"""
Tests for parameter loading and configuration objects.
"""

import json
import math
from types import SimpleNamespace

import pytest
from patiosun.config import load_params
from patiosun.constants import PROBE_DISTANCES_M
from patiosun.errors import ConfigurationError
from patiosun.models import EngineConfig, Observer, ShadowConfig


class TestLoadParams:
    """Bundled and custom parameter files."""

    def test_bundled_defaults(self):
        params = load_params()
        assert params.Observer.timezone == "America/Chicago"
        assert params.Shadow.match_radius_m == 40.0
        assert params.Clouds.overcast_factor == 0.2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_params(tmp_path / "nope.json")

    def test_nested_objects_become_namespaces(self):
        params = load_params()
        assert isinstance(params.Shadow, SimpleNamespace)
        assert params.Shadow.probe_distances_m == list(PROBE_DISTANCES_M)

    def test_custom_file(self, tmp_path):
        path = tmp_path / "lisbon.json"
        path.write_text(json.dumps({"Observer": {"timezone": "Europe/Lisbon", "latitude": 38.72}}))
        params = load_params(path)
        assert params.Observer.timezone == "Europe/Lisbon"
        assert params.Observer.latitude == 38.72


class TestShadowConfig:
    """Defaults, params conversion and validation."""

    def test_defaults(self):
        cfg = ShadowConfig.defaults()
        assert cfg.min_caster_height_m == 6.0
        assert cfg.self_building_radius_m == 8.0
        assert cfg.match_radius_m == 40.0
        assert cfg.max_angle_off_sun_rad == pytest.approx(math.pi / 7)
        assert cfg.probe_distances_m == (15, 30, 50, 80, 120, 180, 260)
        assert cfg.night_altitude_deg == 1.0
        assert cfg.high_sun_altitude_deg == 70.0

    def test_from_params_matches_defaults(self):
        cfg = ShadowConfig.from_params(load_params())
        defaults = ShadowConfig()
        assert cfg.max_angle_off_sun_rad == pytest.approx(defaults.max_angle_off_sun_rad)
        assert cfg.probe_distances_m == defaults.probe_distances_m
        assert cfg.overcast_factor == defaults.overcast_factor

    @pytest.mark.parametrize(
        "kwargs, parameter",
        [
            ({"probe_distances_m": ()}, "probe_distances_m"),
            ({"probe_distances_m": (30.0, 15.0)}, "probe_distances_m"),
            ({"probe_distances_m": (0.0, 15.0)}, "probe_distances_m"),
            ({"match_radius_m": -1.0}, "match_radius_m"),
            ({"max_angle_off_sun_rad": 0.0}, "max_angle_off_sun_rad"),
            ({"night_altitude_deg": 80.0}, "night_altitude_deg"),
            ({"overcast_factor": 1.5}, "overcast_factor"),
        ],
    )
    def test_invalid_values(self, kwargs, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            ShadowConfig(**kwargs)
        assert exc_info.value.parameter == parameter


class TestEngineConfig:
    """Engine configuration bundles observer, thresholds and TTLs."""

    def test_defaults(self):
        config = EngineConfig.defaults()
        assert config.observer.name == "Chicago"
        assert config.observer.latitude == pytest.approx(41.91)
        assert config.buildings_ttl_s == 86400
        assert config.weather_ttl_s == 1800

    def test_from_json(self, tmp_path):
        path = tmp_path / "lisbon.json"
        path.write_text(
            json.dumps(
                {
                    "Observer": {"name": "Lisbon", "latitude": 38.72, "longitude": -9.14, "timezone": "Europe/Lisbon"},
                    "Shadow": {"match_radius_m": 25.0},
                    "Cache": {"weather_ttl_s": 600},
                }
            )
        )
        config = EngineConfig.from_json(path)
        assert config.observer.timezone == "Europe/Lisbon"
        assert config.shadow.match_radius_m == 25.0
        assert config.shadow.self_building_radius_m == 8.0
        assert config.weather_ttl_s == 600
        assert config.buildings_ttl_s == 86400

    def test_invalid_ttl(self):
        with pytest.raises(ConfigurationError):
            EngineConfig(observer=Observer(0, 0), weather_ttl_s=0)

    def test_observer_default(self):
        observer = Observer.default()
        assert observer.timezone == "America/Chicago"
        assert observer.longitude == pytest.approx(-87.635)

    def test_observer_validates_ranges(self):
        with pytest.raises(ValueError):
            Observer(latitude=95, longitude=0)
        with pytest.raises(ValueError):
            Observer(latitude=0, longitude=200)
