"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class ResolutionResponse(BaseModel):
    """Response DTO for a flood zone resolution."""

    flood_zone: str = Field(..., description="Risk tier: High, Medium, Low or Unknown")
    region: str = Field(..., description="Named region, or 'Unknown'")
    flood_category: str | None = Field(None, description="Source category label (authoritative data)")
    return_period: float | None = Field(None, description="Return period in years (authoritative data)")
    from_cache: bool = Field(..., description="Whether the answer was served from the query cache")
    source: str = Field(..., description="cached, authoritative, heuristic or error")
    lookup_time_ms: float = Field(..., description="Time taken for the resolution in milliseconds")


class CachedQueryItem(BaseModel):
    """Single cache entry (in the recent queries list)."""

    key: str | None = Field(None, description="Storage key of the entry")
    latitude: float = Field(..., description="Queried latitude")
    longitude: float = Field(..., description="Queried longitude")
    parcel_id: str | None = Field(None, description="Parcel identifier, if supplied")
    flood_zone: str = Field(..., description="Resolved risk tier")
    region: str = Field(..., description="Resolved region")
    flood_category: str | None = Field(None, description="Source category label")
    return_period: float | None = Field(None, description="Return period in years")
    queried_at: datetime = Field(..., description="When the lookup was resolved")
    expires_at: datetime | None = Field(None, description="When the entry stops being served")
    is_expired: bool = Field(..., description="Whether the entry is past its expiry")


class RecentQueriesResponse(BaseModel):
    """Response DTO for the recent queries diagnostic."""

    count: int = Field(..., description="Number of entries returned", ge=0)
    queries: list[CachedQueryItem] = Field(
        default_factory=list,
        description="Cache entries, newest first (expired entries included)",
    )


class AdminResponse(BaseModel):
    """Response DTO for administrative operations."""

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable status message")
    polygon_count: int | None = Field(None, description="Polygons inserted, where applicable")


class StatsResponse(BaseModel):
    """Response DTO for resolver statistics."""

    total_cache_entries: int = Field(..., description="Cache entries, expired included", ge=0)
    index_name: str = Field(..., description="Name of the cache search index")
    tolerance_degrees: float = Field(..., description="Proximity window in degrees", gt=0)
    polygon_count: int = Field(..., description="Authoritative polygons stored", ge=0)
    authoritative_ttl_days: int = Field(..., description="Expiry of authoritative answers", gt=0)
    heuristic_ttl_days: int = Field(..., description="Expiry of heuristic answers", gt=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the query cache is reachable")
    polygons_healthy: bool = Field(..., description="Whether the polygon store is reachable")
