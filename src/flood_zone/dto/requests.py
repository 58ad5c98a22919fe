"""Request DTOs for API endpoints."""

from decimal import Decimal

from pydantic import BaseModel, Field


class ResolveHazardRequest(BaseModel):
    """Request DTO for resolving the flood zone of a location.

    The handler will convert this to internal calls to the service layer.
    """

    latitude: Decimal = Field(..., description="Latitude in decimal degrees", ge=-90, le=90)
    longitude: Decimal = Field(..., description="Longitude in decimal degrees", ge=-180, le=180)
    parcel_id: str | None = Field(
        None,
        description="Optional parcel identifier; an exact cached match takes precedence",
        min_length=1,
    )


class ImportFeaturesRequest(BaseModel):
    """Request DTO for importing a GeoJSON file of flood polygons."""

    file_path: str = Field(
        ...,
        description="Path to a GeoJSON FeatureCollection readable by the server",
        min_length=1,
    )
