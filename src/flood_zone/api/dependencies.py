"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from flood_zone.config import settings
from flood_zone.handlers import AdminHandler, HazardHandler
from flood_zone.logging_config import configure_logging
from flood_zone.protocols import PolygonStore
from flood_zone.repositories import (
    MemoryPolygonRepository,
    PostGISPolygonRepository,
    RedisQueryRepository,
)
from flood_zone.services import IngestionService, ResolutionService

logger = logging.getLogger(__name__)


def get_hazard_handler(request: Request) -> HazardHandler:
    """Dependency injection for HazardHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "hazard_handler", None)
    if handler is None:
        raise RuntimeError("HazardHandler not initialized. Check lifespan setup.")
    return handler


def get_admin_handler(request: Request) -> AdminHandler:
    """Dependency injection for AdminHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "admin_handler", None)
    if handler is None:
        raise RuntimeError("AdminHandler not initialized. Check lifespan setup.")
    return handler


def create_polygon_store() -> PolygonStore:
    """Build the polygon store selected by POLYGON_BACKEND."""
    if settings.uses_postgis:
        return PostGISPolygonRepository.create()
    return MemoryPolygonRepository()


def build_lifespan(
    resolution_service: ResolutionService | None = None,
    ingestion_service: IngestionService | None = None,
):
    """Create the lifespan context manager for the FastAPI app.

    With no arguments, the repositories are built from settings at
    startup. Passing both services skips that (tests, embedding); the
    two share a polygon store, so they are given together or not at all.

    Args:
        resolution_service: Preconfigured resolution service
        ingestion_service: Preconfigured ingestion service

    Returns:
        Lifespan context manager

    Raises:
        ValueError: If only one of the two services is provided
    """
    if (resolution_service is None) != (ingestion_service is None):
        raise ValueError("Provide both resolution_service and ingestion_service, or neither")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize all layers and store them in app.state.

        1. Repositories (data access) - created explicitly
        2. Services (business logic)
        3. Handlers (HTTP endpoints) - stored in app.state
        """
        configure_logging(settings.log_level)

        resolution, ingestion = resolution_service, ingestion_service
        if resolution is None:
            polygon_store = create_polygon_store()
            query_cache = RedisQueryRepository.create()
            resolution = ResolutionService.create(query_cache=query_cache, polygon_store=polygon_store)
            ingestion = IngestionService(polygon_store=polygon_store)

        app.state.resolution_service = resolution
        app.state.ingestion_service = ingestion
        app.state.hazard_handler = HazardHandler(resolution_service=resolution)
        app.state.admin_handler = AdminHandler(
            resolution_service=resolution,
            ingestion_service=ingestion,
        )

        logger.info("Resolution service initialized (polygon backend: %s)", settings.polygon_backend)

        yield

        # Cleanup - remove from app.state
        del app.state.admin_handler
        del app.state.hazard_handler
        del app.state.ingestion_service
        del app.state.resolution_service
        logger.info("Resolution service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HazardHandlerDep = Annotated[HazardHandler, Depends(get_hazard_handler)]
AdminHandlerDep = Annotated[AdminHandler, Depends(get_admin_handler)]
