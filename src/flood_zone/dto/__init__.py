"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import ImportFeaturesRequest, ResolveHazardRequest
from .responses import (
    AdminResponse,
    CachedQueryItem,
    HealthCheckResponse,
    RecentQueriesResponse,
    ResolutionResponse,
    StatsResponse,
)

__all__ = [
    "ResolveHazardRequest",
    "ImportFeaturesRequest",
    "ResolutionResponse",
    "CachedQueryItem",
    "RecentQueriesResponse",
    "AdminResponse",
    "StatsResponse",
    "HealthCheckResponse",
]
