"""Repository layer for data access.

This layer abstracts external dependencies (Redis, PostGIS) behind
protocol-based interfaces. This enables:
- Easy swapping of implementations (PostGIS → in-memory, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from flood_zone.protocols import PolygonStore, QueryCacheStore

from .memory_polygon_repository import MemoryPolygonRepository
from .postgis_polygon_repository import PostGISPolygonRepository
from .redis_query_repository import RedisQueryRepository

__all__ = [
    "PolygonStore",
    "QueryCacheStore",
    "MemoryPolygonRepository",
    "PostGISPolygonRepository",
    "RedisQueryRepository",
]
