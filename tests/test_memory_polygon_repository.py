"""
Tests for the in-memory polygon store.
"""

from decimal import Decimal

import pytest
from conftest import square_feature

from flood_zone.entities import RiskPolygonEntity
from flood_zone.repositories import MemoryPolygonRepository


def _polygon(category: str, return_period: str | None, size: float = 0.01) -> RiskPolygonEntity:
    return RiskPolygonEntity(
        flood_category=category,
        return_period=Decimal(return_period) if return_period is not None else None,
        geometry=square_feature(174.76, -36.84, size=size)["geometry"],
        source="test",
    )


@pytest.fixture
def store():
    return MemoryPolygonRepository()


def test_empty_store_finds_nothing(store):
    """Test a point with no polygons gives None."""
    assert store.find_containing(Decimal("-36.845"), Decimal("174.765")) is None


def test_bulk_insert_assigns_ids_and_timestamps(store):
    """Test inserted polygons get sequential ids and an import time."""
    assert store.bulk_insert([_polygon("High Risk", "20"), _polygon("Low Risk", "100")]) == 2
    assert store.count() == 2

    found = store.find_containing(Decimal("-36.845"), Decimal("174.765"))
    assert found.id == 1
    assert found.imported_at is not None


def test_smallest_return_period_wins(store):
    """Test overlapping polygons resolve to the most frequent flooding."""
    store.bulk_insert(
        [
            _polygon("Low Risk", "100", size=0.02),
            _polygon("Medium Risk", "50"),
            _polygon("High Risk", "20", size=0.03),
        ]
    )

    found = store.find_containing(Decimal("-36.845"), Decimal("174.765"))
    assert found.flood_category == "High Risk"
    assert found.return_period == Decimal("20")


def test_missing_return_period_ranks_last(store):
    """Test polygons without a return period lose to those with one."""
    store.bulk_insert([_polygon("Unknown", None), _polygon("Low Risk", "500")])

    found = store.find_containing(Decimal("-36.845"), Decimal("174.765"))
    assert found.flood_category == "Low Risk"


def test_ties_go_to_earliest_insert(store):
    """Test equal return periods resolve by insertion order."""
    store.bulk_insert([_polygon("First", "50"), _polygon("Second", "50")])

    assert store.find_containing(Decimal("-36.845"), Decimal("174.765")).flood_category == "First"


def test_point_outside_polygon(store):
    """Test containment is checked with x=longitude, y=latitude."""
    store.bulk_insert([_polygon("High Risk", "20")])

    assert store.find_containing(Decimal("174.765"), Decimal("-36.845")) is None
    assert store.find_containing(Decimal("-36.86"), Decimal("174.765")) is None


def test_invalid_geometry_leaves_store_untouched(store):
    """Test a failing insert stores nothing."""
    broken = RiskPolygonEntity(
        flood_category="Broken",
        geometry={"type": "MultiPolygon", "coordinates": [[[[0, 0], [1, 1]]]]},
        source="test",
    )

    with pytest.raises(Exception):
        store.bulk_insert([_polygon("High Risk", "20"), broken])

    assert store.count() == 0


def test_initialize_is_idempotent(store):
    """Test initialize can be called repeatedly without losing data."""
    store.initialize()
    store.bulk_insert([_polygon("High Risk", "20")])
    store.initialize()

    assert store.count() == 1
    assert store.health_check() is True
