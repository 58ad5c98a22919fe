"""PostGIS implementation of PolygonStore.

Polygons live in a single table with a MULTIPOLYGON geometry column in
EPSG:4326 and a GiST index on it. Access goes through SQLAlchemy Core;
GeoAlchemy2 supplies the geometry column type and spatial index DDL.
"""

import json
import logging
from collections.abc import Iterable
from decimal import Decimal

from geoalchemy2 import Geometry
from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    bindparam,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError

from flood_zone.config import get_postgis_engine, settings
from flood_zone.entities import RiskPolygonEntity

logger = logging.getLogger(__name__)

SRID = 4326


def build_polygon_table(name: str, metadata: MetaData) -> Table:
    """Define the flood polygon table.

    GeoAlchemy2 attaches a GiST index (``idx_<table>_geometry``) to the
    geometry column, created together with the table.
    """
    return Table(
        name,
        metadata,
        Column("id", Integer, primary_key=True),
        Column("flood_category", String(100)),
        Column("return_period", Numeric(10, 2)),
        Column("geometry", Geometry(geometry_type="MULTIPOLYGON", srid=SRID, spatial_index=True)),
        Column("source", String(255)),
        Column("imported_at", DateTime, server_default=func.now()),
    )


class PostGISPolygonRepository:
    """PostGIS-backed authoritative polygon store.

    This class satisfies the PolygonStore protocol through structural
    typing - no explicit inheritance needed.

    Errors from the database are not caught here; callers decide how to
    degrade (resolution) or fail (administration).
    """

    def __init__(
        self,
        engine: Engine | None = None,
        table_name: str | None = None,
    ) -> None:
        """Initialize the PostGIS polygon repository.

        Args:
            engine: SQLAlchemy engine. If None, uses the shared engine.
            table_name: Polygon table name. If None, uses settings.
        """
        self._engine = engine or get_postgis_engine()
        self._metadata = MetaData()
        self._table = build_polygon_table(table_name or settings.polygon_table, self._metadata)

    @classmethod
    def create(cls, table_name: str | None = None) -> "PostGISPolygonRepository":
        """Factory method to create PostGISPolygonRepository with defaults.

        Args:
            table_name: Polygon table name. If None, uses settings.

        Returns:
            Configured PostGISPolygonRepository
        """
        return cls(table_name=table_name)

    def initialize(self) -> None:
        """Create the PostGIS extension, polygon table and spatial index if absent."""
        with self._engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
            self._metadata.create_all(conn, checkfirst=True)

        logger.info("PostGIS polygon table ready: %s", self._table.name)

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
        t = self._table
        point = func.ST_SetSRID(func.ST_MakePoint(float(longitude), float(latitude)), SRID)

        stmt = (
            select(
                t.c.id,
                t.c.flood_category,
                t.c.return_period,
                func.ST_AsGeoJSON(t.c.geometry).label("geometry"),
                t.c.source,
                t.c.imported_at,
            )
            .where(func.ST_Contains(t.c.geometry, point))
            .order_by(t.c.return_period.asc().nulls_last(), t.c.id.asc())
            .limit(1)
        )

        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()

        if row is None:
            return None
        return self._to_entity(row)

    def bulk_insert(self, polygons: Iterable[RiskPolygonEntity]) -> int:
        """Insert all polygons in one transaction.

        Args:
            polygons: Polygons to insert

        Returns:
            Number of polygons inserted
        """
        rows = [
            {
                "p_category": polygon.flood_category,
                "p_return_period": polygon.return_period,
                "p_geometry": json.dumps(polygon.geometry),
                "p_source": polygon.source,
            }
            for polygon in polygons
        ]
        if not rows:
            return 0

        stmt = insert(self._table).values(
            flood_category=bindparam("p_category"),
            return_period=bindparam("p_return_period"),
            geometry=func.ST_SetSRID(func.ST_GeomFromGeoJSON(bindparam("p_geometry")), SRID),
            source=bindparam("p_source"),
        )

        with self._engine.begin() as conn:
            conn.execute(stmt, rows)

        return len(rows)

    def count(self) -> int:
        """Count stored polygons."""
        with self._engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(self._table)).scalar_one()

    def health_check(self) -> bool:
        """Check if PostGIS is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    @property
    def table(self) -> Table:
        """Get the polygon table definition."""
        return self._table

    @staticmethod
    def _to_entity(row: RowMapping) -> RiskPolygonEntity:
        return_period = row["return_period"]
        return RiskPolygonEntity(
            id=row["id"],
            flood_category=row["flood_category"] or "Unknown",
            return_period=Decimal(return_period) if return_period is not None else None,
            geometry=json.loads(row["geometry"]),
            source=row["source"] or "",
            imported_at=row["imported_at"],
        )
