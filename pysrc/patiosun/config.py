"""Engine parameters loaded from JSON."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

DEFAULT_PARAMS_PATH = Path(__file__).parent / "data" / "default_params.json"


def load_params(params_json_path: str | Path | None = None) -> SimpleNamespace:
    """
    Load engine parameters with every JSON object exposed as attributes.

    The bundled file holds the Chicago observer, the shadow thresholds and
    probe distances, the overcast cut-off and the cache TTLs. A city-specific
    file with the same layout can be passed instead.

    >>> params = load_params()
    >>> params.Shadow.match_radius_m
    40.0
    """
    params_path = DEFAULT_PARAMS_PATH if params_json_path is None else Path(params_json_path)
    if not params_path.is_file():
        raise FileNotFoundError(f"Parameters file not found: {params_path}")

    with params_path.open() as f:
        return json.load(f, object_hook=lambda obj: SimpleNamespace(**obj))
