"""Shared fixtures: in-memory stores satisfying the repository protocols."""

import json
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from flood_zone.entities import CachedQueryEntity, RiskTier
from flood_zone.repositories import MemoryPolygonRepository
from flood_zone.services import HeuristicResolver, IngestionService, ResolutionService

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryQueryCache:
    """List-backed QueryCacheStore with the same matching rules as Redis."""

    def __init__(self, tolerance: Decimal = Decimal("0.001")) -> None:
        self.entries: list[CachedQueryEntity] = []
        self._tolerance = tolerance

    def find_by_proximity(self, latitude, longitude, now=None):
        now = now or datetime.now(timezone.utc)
        hits = [
            e
            for e in self.entries
            if abs(e.latitude - latitude) <= self._tolerance
            and abs(e.longitude - longitude) <= self._tolerance
            and not e.is_expired(now)
        ]
        return max(hits, key=lambda e: e.queried_at, default=None)

    def find_by_parcel(self, parcel_id, now=None):
        now = now or datetime.now(timezone.utc)
        hits = [e for e in self.entries if e.parcel_id == parcel_id and not e.is_expired(now)]
        return max(hits, key=lambda e: e.queried_at, default=None)

    def save(self, entry):
        key = f"fake:{len(self.entries)}"
        self.entries.append(replace(entry, key=key))
        return key

    def recent(self, limit=100):
        return sorted(self.entries, key=lambda e: e.queried_at, reverse=True)[:limit]

    def health_check(self):
        return True

    def get_stats(self):
        return {"index_name": "fake", "total_entries": len(self.entries), "tolerance_degrees": 0.001}


def make_entry(
    latitude: str,
    longitude: str,
    flood_zone: RiskTier = RiskTier.LOW,
    queried_at: datetime = NOW - timedelta(hours=1),
    expires_in: timedelta | None = timedelta(days=7),
    **kwargs,
) -> CachedQueryEntity:
    return CachedQueryEntity(
        latitude=Decimal(latitude),
        longitude=Decimal(longitude),
        flood_zone=flood_zone,
        region=kwargs.pop("region", "Auckland"),
        queried_at=queried_at,
        expires_at=None if expires_in is None else queried_at + expires_in,
        **kwargs,
    )


def square_feature(lon: float, lat: float, size: float = 0.01, **properties) -> dict:
    """A GeoJSON MultiPolygon feature: square with its top-left corner at (lon, lat)."""
    ring = [
        [lon, lat],
        [lon + size, lat],
        [lon + size, lat - size],
        [lon, lat - size],
        [lon, lat],
    ]
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "MultiPolygon", "coordinates": [[ring]]},
    }


def feature_collection(*features: dict) -> str:
    return json.dumps({"type": "FeatureCollection", "features": list(features)})


@pytest.fixture
def query_cache():
    """Create an empty in-memory query cache."""
    return InMemoryQueryCache()


@pytest.fixture
def polygon_store():
    """Create an empty polygon store, wrapped to record calls."""
    return MagicMock(wraps=MemoryPolygonRepository())


@pytest.fixture
def heuristic():
    """Create the default heuristic resolver, wrapped to record calls."""
    return MagicMock(wraps=HeuristicResolver())


@pytest.fixture
def service(query_cache, polygon_store, heuristic):
    """Create a resolution service with a fixed clock."""
    return ResolutionService(
        query_cache=query_cache,
        polygon_store=polygon_store,
        heuristic=heuristic,
        authoritative_ttl=timedelta(days=30),
        heuristic_ttl=timedelta(days=7),
        clock=lambda: NOW,
    )


@pytest.fixture
def ingestion(polygon_store):
    """Create an ingestion service over the shared polygon store."""
    return IngestionService(polygon_store=polygon_store)
