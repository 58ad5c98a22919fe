"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → MongoDB, PostGIS → in-memory, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from flood_zone.protocols import PolygonStore, QueryCacheStore

    # Type hints work with any implementation
    polygons: PolygonStore = PostGISPolygonRepository.create()  # works
    polygons: PolygonStore = MemoryPolygonRepository()          # also works
    ```
"""

from .polygon_store import PolygonStore
from .query_cache import QueryCacheStore

__all__ = [
    "PolygonStore",
    "QueryCacheStore",
]
