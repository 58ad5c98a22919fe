"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No I/O
"""

from .cached_query import CachedQueryEntity
from .resolution import ResolutionResultEntity, ResolutionSource, RiskTier
from .risk_polygon import RiskPolygonEntity

__all__ = [
    "CachedQueryEntity",
    "ResolutionResultEntity",
    "ResolutionSource",
    "RiskPolygonEntity",
    "RiskTier",
]
