"""
Tests for the PostGIS polygon repository, against a mocked SQLAlchemy engine.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from conftest import square_feature
from geoalchemy2 import Geometry
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from flood_zone.entities import RiskPolygonEntity
from flood_zone.repositories import PostGISPolygonRepository


@pytest.fixture
def conn():
    return MagicMock()


@pytest.fixture
def engine(conn):
    engine = MagicMock()
    engine.begin.return_value.__enter__.return_value = conn
    engine.connect.return_value.__enter__.return_value = conn
    return engine


@pytest.fixture
def repo(engine):
    return PostGISPolygonRepository(engine=engine, table_name="flood_zones")


def _compiled(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


def test_table_definition(repo):
    """Test the geometry column is a spatially indexed EPSG:4326 MultiPolygon."""
    geometry_type = repo.table.c.geometry.type

    assert repo.table.name == "flood_zones"
    assert isinstance(geometry_type, Geometry)
    assert geometry_type.geometry_type == "MULTIPOLYGON"
    assert geometry_type.srid == 4326
    assert geometry_type.spatial_index is True
    assert set(repo.table.c.keys()) == {
        "id",
        "flood_category",
        "return_period",
        "geometry",
        "source",
        "imported_at",
    }


def test_bulk_insert_single_executemany(repo, engine, conn):
    """Test all polygons go to the database in one transaction."""
    polygons = [
        RiskPolygonEntity(
            flood_category="High Risk",
            return_period=Decimal("20"),
            geometry=square_feature(174.76, -36.84)["geometry"],
            source="council.geojson",
        ),
        RiskPolygonEntity(
            flood_category="Unknown",
            geometry=square_feature(174.54, -36.84)["geometry"],
            source="council.geojson",
        ),
    ]

    assert repo.bulk_insert(polygons) == 2

    engine.begin.assert_called_once()
    conn.execute.assert_called_once()
    statement, rows = conn.execute.call_args.args
    assert "ST_GeomFromGeoJSON" in _compiled(statement)
    assert [row["p_category"] for row in rows] == ["High Risk", "Unknown"]
    assert [row["p_return_period"] for row in rows] == [Decimal("20"), None]
    assert json.loads(rows[0]["p_geometry"]) == polygons[0].geometry


def test_bulk_insert_empty_skips_database(repo, engine):
    """Test an empty import does not open a transaction."""
    assert repo.bulk_insert([]) == 0
    engine.begin.assert_not_called()


def test_find_containing_orders_by_return_period(repo, conn):
    """Test the containment query prefers the smallest return period."""
    conn.execute.return_value.mappings.return_value.first.return_value = None

    assert repo.find_containing(Decimal("-36.845"), Decimal("174.765")) is None

    sql = _compiled(conn.execute.call_args.args[0])
    assert "ST_Contains" in sql
    assert "ST_MakePoint" in sql
    assert "NULLS LAST" in sql
    assert "LIMIT" in sql


def test_find_containing_maps_row(repo, conn):
    """Test a database row is converted into an entity."""
    geometry = square_feature(174.76, -36.84)["geometry"]
    imported_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
    conn.execute.return_value.mappings.return_value.first.return_value = {
        "id": 7,
        "flood_category": "Medium Risk",
        "return_period": Decimal("50.00"),
        "geometry": json.dumps(geometry),
        "source": "council.geojson",
        "imported_at": imported_at,
    }

    polygon = repo.find_containing(Decimal("-36.845"), Decimal("174.765"))

    assert polygon.id == 7
    assert polygon.flood_category == "Medium Risk"
    assert polygon.return_period == Decimal("50")
    assert polygon.geometry == geometry
    assert polygon.imported_at == imported_at


def test_initialize_creates_extension(repo, conn, monkeypatch):
    """Test provisioning enables PostGIS and creates the table."""
    create_all = MagicMock()
    monkeypatch.setattr(repo._metadata, "create_all", create_all)

    repo.initialize()

    assert "CREATE EXTENSION IF NOT EXISTS postgis" in str(conn.execute.call_args.args[0])
    create_all.assert_called_once_with(conn, checkfirst=True)


def test_health_check(repo, engine):
    """Test health reflects database reachability."""
    assert repo.health_check() is True

    engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    assert repo.health_check() is False
