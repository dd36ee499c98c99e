"""
Static spatial index over building centroids.

Buildings are bulk-loaded once into a shapely ``STRtree`` as points
(degenerate boxes, ``minx == maxx`` and ``miny == maxy``) keyed by
``(longitude, latitude)``. The index supports a single operation, an
axis-aligned box query, and is never mutated after construction: new
building data means a new :class:`BuildingIndex`, published by swapping a
reference.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
import shapely

from .constants import METERS_PER_DEG_LAT
from .errors import EmptyBuildingIndex
from .patiosun_logging import get_logger
from .utils import meters_per_deg_lng

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from .models import Building

logger = get_logger(__name__)


class BuildingIndex:
    """
    Read-only R-tree over building centroids.

    Safe to share between threads without locking: nothing mutates the
    tree or the building tuple after ``__init__``.

    Args:
        buildings: Buildings to index. Must not be empty.

    Raises:
        EmptyBuildingIndex: If ``buildings`` is empty.
    """

    __slots__ = ("_buildings", "_tree", "_max_height_m")

    def __init__(self, buildings: Sequence[Building]):
        if len(buildings) == 0:
            raise EmptyBuildingIndex()

        self._buildings: tuple[Building, ...] = tuple(buildings)
        coords = np.array([(b.longitude, b.latitude) for b in self._buildings], dtype=np.float64)
        self._tree = shapely.STRtree(shapely.points(coords))
        self._max_height_m = max(b.height_m for b in self._buildings)

    def __len__(self) -> int:
        return len(self._buildings)

    def __repr__(self) -> str:
        return f"BuildingIndex(n={len(self)}, max_height_m={self._max_height_m:.1f})"

    @property
    def buildings(self) -> tuple[Building, ...]:
        return self._buildings

    @property
    def max_height_m(self) -> float:
        """Tallest indexed building, in meters."""
        return self._max_height_m

    def query_box(self, min_lng: float, min_lat: float, max_lng: float, max_lat: float) -> NDArray[np.intp]:
        """
        Indices of buildings whose point falls within the box (edges inclusive).

        Returns:
            Sorted array of indices into :attr:`buildings`.
        """
        hits = self._tree.query(shapely.box(min_lng, min_lat, max_lng, max_lat))
        return np.sort(np.asarray(hits, dtype=np.intp))


def build_index(buildings: Sequence[Building]) -> BuildingIndex:
    """
    Bulk-load a static index over building centroids.

    Raises:
        EmptyBuildingIndex: If ``buildings`` is empty.
    """
    index = BuildingIndex(buildings)
    logger.info(f"Building index built: {len(index)} buildings, tallest {index.max_height_m:.1f} m")
    return index


def query_near(index: BuildingIndex, lat: float, lng: float, radius_m: float) -> list[Building]:
    """
    Buildings within a meter radius box around a point.

    The radius is converted to a lat/lng box using 111 320 m per degree of
    latitude and 111 320 * cos(lat) m per degree of longitude. The result is
    the full box, not a circle; callers filter by exact distance.

    Args:
        index: Index to query.
        lat: Latitude of the box center.
        lng: Longitude of the box center.
        radius_m: Half-size of the box in meters.

    Returns:
        Buildings in ascending input order. No upper bound on count.
    """
    lat_delta = radius_m / METERS_PER_DEG_LAT
    lng_delta = radius_m / meters_per_deg_lng(lat)
    ids = index.query_box(lng - lng_delta, lat - lat_delta, lng + lng_delta, lat + lat_delta)
    buildings = index.buildings
    return [buildings[i] for i in ids]
