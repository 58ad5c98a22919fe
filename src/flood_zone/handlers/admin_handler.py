"""HTTP handlers for administrative operations.

Provisioning and imports are operator actions: failures are reported
to the caller instead of being absorbed.
"""

import logging

from fastapi import HTTPException, status

from flood_zone.dto import AdminResponse, ImportFeaturesRequest
from flood_zone.errors import MalformedFeatureError
from flood_zone.services import IngestionService, ResolutionService

logger = logging.getLogger(__name__)


class AdminHandler:
    """HTTP handlers for polygon store administration."""

    def __init__(
        self,
        resolution_service: ResolutionService,
        ingestion_service: IngestionService,
    ) -> None:
        """Initialize the admin handler.

        Args:
            resolution_service: Used to provision the polygon store (required).
            ingestion_service: Used to import polygons (required).
        """
        self._resolution = resolution_service
        self._ingestion = ingestion_service

    def initialize(self) -> AdminResponse:
        """Handle POST /admin/initialize requests.

        Raises:
            HTTPException: If provisioning fails
        """
        try:
            self._resolution.provision_store()
        except Exception as e:
            logger.exception("Failed to initialize polygon store")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to initialize polygon store: {e}",
            ) from e

        return AdminResponse(success=True, message="Polygon store initialized successfully")

    def import_features(self, request: ImportFeaturesRequest) -> AdminResponse:
        """Handle POST /admin/import requests.

        Raises:
            HTTPException: 400 if the file is missing, unreadable or has a
                malformed feature; 500 if the store fails
        """
        try:
            imported = self._ingestion.import_features(request.file_path)
        except MalformedFeatureError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            logger.exception("Failed to import flood data from %s", request.file_path)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to import flood data: {e}",
            ) from e

        if not imported:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Failed to import data. Check file path and format.",
            )

        return AdminResponse(success=True, message=f"Flood data imported from {request.file_path}")

    def generate_sample_data(self) -> AdminResponse:
        """Handle POST /admin/sample-data requests.

        Raises:
            HTTPException: If provisioning or the import fails
        """
        try:
            count = self._ingestion.import_sample_data()
        except Exception as e:
            logger.exception("Failed to generate sample data")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to generate sample data: {e}",
            ) from e

        return AdminResponse(
            success=True,
            message="Sample flood data generated and imported successfully",
            polygon_count=count,
        )
