"""Flood Zone Resolver - tiered flood risk lookup for coordinates.

This package resolves a flood risk tier for a location by consulting,
in order, a proximity-tolerant query cache, authoritative PostGIS
polygons, and a deterministic heuristic.

Layers:
    - protocols: Interface contracts (QueryCacheStore, PolygonStore)
    - repositories: Data access implementations
    - services: Business logic
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from flood_zone.repositories import PostGISPolygonRepository, RedisQueryRepository
    from flood_zone.services import ResolutionService

    service = ResolutionService.create(
        query_cache=RedisQueryRepository.create(),
        polygon_store=PostGISPolygonRepository.create(),
    )
    result = service.resolve(Decimal("-36.845"), Decimal("174.765"))
    ```

For HTTP API:
    ```python
    from flood_zone.api.app import app
    ```
"""

from flood_zone.config import get_postgis_engine, get_redis_client, settings
from flood_zone.dto import ImportFeaturesRequest, ResolveHazardRequest
from flood_zone.entities import (
    CachedQueryEntity,
    ResolutionResultEntity,
    ResolutionSource,
    RiskPolygonEntity,
    RiskTier,
)
from flood_zone.errors import FloodZoneError, MalformedFeatureError
from flood_zone.handlers import AdminHandler, HazardHandler
from flood_zone.protocols import PolygonStore, QueryCacheStore
from flood_zone.repositories import (
    MemoryPolygonRepository,
    PostGISPolygonRepository,
    RedisQueryRepository,
)
from flood_zone.services import HeuristicResolver, IngestionService, ResolutionService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    "get_postgis_engine",
    # Protocols (interfaces)
    "QueryCacheStore",
    "PolygonStore",
    # Services (business logic)
    "ResolutionService",
    "IngestionService",
    "HeuristicResolver",
    # Handlers (HTTP)
    "HazardHandler",
    "AdminHandler",
    # Repositories (data access)
    "RedisQueryRepository",
    "PostGISPolygonRepository",
    "MemoryPolygonRepository",
    # Entities (domain models)
    "CachedQueryEntity",
    "RiskPolygonEntity",
    "ResolutionResultEntity",
    "ResolutionSource",
    "RiskTier",
    # Errors
    "FloodZoneError",
    "MalformedFeatureError",
    # DTOs (API contracts)
    "ResolveHazardRequest",
    "ImportFeaturesRequest",
]
