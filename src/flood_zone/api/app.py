from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from flood_zone.api.dependencies import AdminHandlerDep, HazardHandlerDep, build_lifespan
from flood_zone.config import settings
from flood_zone.dto import (
    AdminResponse,
    HealthCheckResponse,
    ImportFeaturesRequest,
    RecentQueriesResponse,
    ResolutionResponse,
    ResolveHazardRequest,
    StatsResponse,
)
from flood_zone.services import IngestionService, ResolutionService


def create_app(
    resolution_service: ResolutionService | None = None,
    ingestion_service: IngestionService | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        resolution_service: Preconfigured resolution service (optional)
        ingestion_service: Preconfigured ingestion service (optional)

    Returns:
        The application

    Raises:
        ValueError: If only one of the two services is provided
    """
    app = FastAPI(
        title="Flood Zone Resolver API",
        description="Tiered flood zone lookup: query cache, PostGIS polygons, heuristic fallback",
        version="0.1.0",
        lifespan=build_lifespan(resolution_service, ingestion_service),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Flood Zone Resolver API",
            "version": "0.1.0",
            "description": "Tiered flood zone lookup: query cache, PostGIS polygons, heuristic fallback",
            "endpoints": {
                "resolve": "/hazard/resolve",
                "recent": "/hazard/recent",
                "stats": "/hazard/stats",
                "admin": "/admin",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    def health(handler: HazardHandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return handler.health_check()

    @app.post("/hazard/resolve", response_model=ResolutionResponse)
    def resolve_hazard(request: ResolveHazardRequest, handler: HazardHandlerDep) -> ResolutionResponse:
        """Resolve the flood zone for a coordinate (and optional parcel id)."""
        return handler.resolve(request)

    @app.get("/hazard/recent", response_model=RecentQueriesResponse)
    def recent_queries(
        handler: HazardHandlerDep,
        limit: int = Query(100, ge=1, le=1000),
    ) -> RecentQueriesResponse:
        """List recent cache entries, expired ones included."""
        return handler.recent(limit)

    @app.get("/hazard/stats", response_model=StatsResponse)
    def get_stats(handler: HazardHandlerDep) -> StatsResponse:
        """Get cache and polygon store statistics."""
        return handler.get_stats()

    @app.post("/admin/initialize", response_model=AdminResponse)
    def initialize_store(handler: AdminHandlerDep) -> AdminResponse:
        """Initialize the polygon store (create tables and indexes)."""
        return handler.initialize()

    @app.post("/admin/import", response_model=AdminResponse)
    def import_features(request: ImportFeaturesRequest, handler: AdminHandlerDep) -> AdminResponse:
        """Import flood polygons from a GeoJSON file on the server."""
        return handler.import_features(request)

    @app.post("/admin/sample-data", response_model=AdminResponse)
    def generate_sample_data(handler: AdminHandlerDep) -> AdminResponse:
        """Generate sample Auckland flood polygons for testing."""
        return handler.generate_sample_data()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "flood_zone.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
