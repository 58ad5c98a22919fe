"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from flood_zone.services import IngestionService, ResolutionService

    resolver = ResolutionService.create(query_cache=cache_repo, polygon_store=polygon_repo)
    result = resolver.resolve(Decimal("-36.845"), Decimal("174.765"))

    ingestion = IngestionService(polygon_store=polygon_repo)
    ingestion.import_features("/data/auckland_flood.geojson")
    ```
"""

from .classification import classify_category
from .heuristic import HeuristicResolver
from .ingestion_service import IngestionService
from .resolution_service import ResolutionService

__all__ = [
    "HeuristicResolver",
    "IngestionService",
    "ResolutionService",
    "classify_category",
]
