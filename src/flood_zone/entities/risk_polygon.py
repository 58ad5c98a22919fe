"""Authoritative risk polygon domain entity."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class RiskPolygonEntity:
    """One administratively-sourced flood hazard polygon.

    Attributes:
        flood_category: Free-text category label from the source data
        geometry: GeoJSON mapping of a MultiPolygon in EPSG:4326
        source: Provenance (file path or other identifier)
        return_period: Return period in years, if the source provides one
        id: Store-assigned identifier
        imported_at: When the polygon was loaded
    """

    flood_category: str
    geometry: dict[str, Any]
    source: str
    return_period: Decimal | None = None
    id: int | None = None
    imported_at: datetime | None = None
