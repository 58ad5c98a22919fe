"""Authoritative polygon storage protocol.

Defines the interface for the spatial store of administratively-sourced
flood polygons.

Implementations can include:
- PostgreSQL + PostGIS with a GiST index (default)
- In-process Shapely geometries (local development, tests)
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Protocol, runtime_checkable

from flood_zone.entities import RiskPolygonEntity


@runtime_checkable
class PolygonStore(Protocol):
    """Protocol for authoritative polygon backends.

    Failures propagate to the caller; implementations do not retry.
    """

    def initialize(self) -> None:
        """Provision the schema and spatial index if absent.

        Must be safe to call any number of times.
        """
        ...

    def find_containing(
        self,
        latitude: Decimal,
        longitude: Decimal,
    ) -> RiskPolygonEntity | None:
        """Find the polygon containing a point.

        When several polygons contain the point, the one with the smallest
        return period wins; polygons without a return period rank last.

        Args:
            latitude: Point latitude
            longitude: Point longitude

        Returns:
            The matching polygon, or None
        """
        ...

    def bulk_insert(self, polygons: Iterable[RiskPolygonEntity]) -> int:
        """Insert polygons as new rows. No deduplication is performed.

        Args:
            polygons: Polygons to insert

        Returns:
            Number of polygons inserted
        """
        ...

    def count(self) -> int:
        """Count stored polygons."""
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
