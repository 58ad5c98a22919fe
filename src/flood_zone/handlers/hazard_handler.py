"""HTTP handlers for flood zone resolution.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import time
from datetime import datetime, timezone

from fastapi import HTTPException, status

from flood_zone.dto import (
    CachedQueryItem,
    HealthCheckResponse,
    RecentQueriesResponse,
    ResolutionResponse,
    ResolveHazardRequest,
    StatsResponse,
)
from flood_zone.entities import CachedQueryEntity
from flood_zone.services import ResolutionService


class HazardHandler:
    """HTTP handlers for resolution and diagnostics.

    Resolution itself never fails (the service degrades to a safe
    default), so only the diagnostic endpoints map errors to 500.

    Example:
        ```python
        handler = HazardHandler(resolution_service=service)

        @app.post("/hazard/resolve", response_model=ResolutionResponse)
        def resolve(request: ResolveHazardRequest):
            return handler.resolve(request)
        ```
    """

    def __init__(self, resolution_service: ResolutionService) -> None:
        """Initialize the hazard handler.

        Args:
            resolution_service: The resolution service (required).
        """
        self._service = resolution_service

    def resolve(self, request: ResolveHazardRequest) -> ResolutionResponse:
        """Handle POST /hazard/resolve requests.

        Args:
            request: The resolve request DTO

        Returns:
            ResolutionResponse with the tier and its provenance
        """
        start_time = time.time()

        result = self._service.resolve(
            latitude=request.latitude,
            longitude=request.longitude,
            parcel_id=request.parcel_id,
        )

        lookup_time_ms = (time.time() - start_time) * 1000

        return ResolutionResponse(
            flood_zone=result.flood_zone.value,
            region=result.region,
            flood_category=result.flood_category,
            return_period=float(result.return_period) if result.return_period is not None else None,
            from_cache=result.from_cache,
            source=result.source.value,
            lookup_time_ms=lookup_time_ms,
        )

    def recent(self, limit: int = 100) -> RecentQueriesResponse:
        """Handle GET /hazard/recent requests.

        Args:
            limit: Maximum number of entries

        Returns:
            RecentQueriesResponse, newest first

        Raises:
            HTTPException: If the cache cannot be read
        """
        try:
            entries = self._service.recent(limit)
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to list recent queries: {e}",
            ) from e

        now = datetime.now(timezone.utc)
        items = [_to_item(entry, now) for entry in entries]
        return RecentQueriesResponse(count=len(items), queries=items)

    def get_stats(self) -> StatsResponse:
        """Handle GET /hazard/stats requests.

        Raises:
            HTTPException: If an error occurs while fetching stats
        """
        try:
            stats = self._service.get_stats()

            return StatsResponse(
                total_cache_entries=stats.get("total_entries", 0),
                index_name=stats.get("index_name", ""),
                tolerance_degrees=stats.get("tolerance_degrees", 0.001),
                polygon_count=stats.get("polygon_count", 0),
                authoritative_ttl_days=stats.get("authoritative_ttl_days", 30),
                heuristic_ttl_days=stats.get("heuristic_ttl_days", 7),
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        health = self._service.is_healthy()
        is_healthy = all(health.values())

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=health["cache"],
            polygons_healthy=health["polygons"],
        )


def _to_item(entry: CachedQueryEntity, now: datetime) -> CachedQueryItem:
    return CachedQueryItem(
        key=entry.key,
        latitude=float(entry.latitude),
        longitude=float(entry.longitude),
        parcel_id=entry.parcel_id,
        flood_zone=entry.flood_zone.value,
        region=entry.region,
        flood_category=entry.flood_category,
        return_period=float(entry.return_period) if entry.return_period is not None else None,
        queried_at=entry.queried_at,
        expires_at=entry.expires_at,
        is_expired=entry.is_expired(now),
    )
