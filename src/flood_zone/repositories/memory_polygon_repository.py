"""In-process Shapely implementation of PolygonStore.

Useful for local development and tests when no PostGIS instance is
available (POLYGON_BACKEND=memory). Contents are lost on restart.
"""

import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry

from flood_zone.entities import RiskPolygonEntity


class MemoryPolygonRepository:
    """Shapely-backed polygon store.

    This class satisfies the PolygonStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self) -> None:
        self._rows: list[tuple[RiskPolygonEntity, BaseGeometry]] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def initialize(self) -> None:
        """Nothing to provision for the in-memory store."""

    def find_containing(
        self,
        latitude: Decimal,
        longitude: Decimal,
    ) -> RiskPolygonEntity | None:
        """Find the containing polygon with the smallest return period.

        Args:
            latitude: Point latitude
            longitude: Point longitude

        Returns:
            The matching polygon, or None
        """
        point = Point(float(longitude), float(latitude))  # x=lon, y=lat

        with self._lock:
            rows = list(self._rows)

        matches = [polygon for polygon, geometry in rows if geometry.contains(point)]
        if not matches:
            return None

        matches.sort(key=lambda p: (p.return_period is None, p.return_period or 0, p.id))
        return matches[0]

    def bulk_insert(self, polygons: Iterable[RiskPolygonEntity]) -> int:
        """Append polygons, assigning ids and import timestamps.

        Args:
            polygons: Polygons to insert

        Returns:
            Number of polygons inserted
        """
        # Build geometries first so a bad polygon leaves the store untouched
        prepared = [(polygon, shape(polygon.geometry)) for polygon in polygons]
        imported_at = datetime.now(timezone.utc)

        with self._lock:
            for polygon, geometry in prepared:
                stored = replace(polygon, id=self._next_id, imported_at=imported_at)
                self._rows.append((stored, geometry))
                self._next_id += 1

        return len(prepared)

    def count(self) -> int:
        """Count stored polygons."""
        with self._lock:
            return len(self._rows)

    def health_check(self) -> bool:
        """The in-memory store is always reachable."""
        return True
