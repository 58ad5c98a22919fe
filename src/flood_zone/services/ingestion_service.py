"""Ingestion of authoritative flood polygons from GeoJSON.

Different councils publish the same attributes under different property
names, so category and return period are probed under several known
spellings. Every feature is validated before anything is written: one bad
feature aborts the whole import and nothing from that file is stored.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from shapely.geometry import shape

from flood_zone.entities import RiskPolygonEntity
from flood_zone.errors import FloodZoneError, MalformedFeatureError
from flood_zone.protocols import PolygonStore
from flood_zone.sample_data import SAMPLE_FEATURE_COLLECTION, SAMPLE_SOURCE

logger = logging.getLogger(__name__)

# Probed in order, case-sensitive, first present wins
CATEGORY_FIELDS = (
    "flood_category",
    "FloodCategory",
    "FLOOD_CAT",
    "Category",
    "CATEGORY",
    "Risk",
    "RISK",
)
RETURN_PERIOD_FIELDS = (
    "return_period",
    "ReturnPeriod",
    "RETURN_PER",
    "ARI",
    "Years",
)
DEFAULT_CATEGORY = "Unknown"

_POLYGON_TYPES = ("Polygon", "MultiPolygon")


class FeatureCollectionError(FloodZoneError, ValueError):
    """The input is not a GeoJSON FeatureCollection at all."""


def probe_property(properties: dict[str, Any], names: tuple[str, ...]) -> str | None:
    """Return the first present property among ``names`` as text.

    JSON nulls count as absent. Non-string values are rendered with ``str``.
    """
    for name in names:
        value = properties.get(name)
        if value is None:
            continue
        return value if isinstance(value, str) else str(value)
    return None


def parse_return_period(value: str | None) -> Decimal | None:
    """Parse a return period in years; unparsable or absent values give None."""
    if value is None:
        return None
    try:
        period = Decimal(value.strip())
    except InvalidOperation:
        return None
    return period if period.is_finite() else None


def parse_feature_collection(text: str) -> list[Any]:
    """Parse GeoJSON text and return its features.

    Raises:
        FeatureCollectionError: If the text is not a JSON FeatureCollection
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise FeatureCollectionError(f"Not valid JSON: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("features"), list):
        raise FeatureCollectionError("Expected a FeatureCollection with a 'features' array")

    return document["features"]


def feature_to_polygon(index: int, feature: Any, source: str) -> RiskPolygonEntity:
    """Convert one GeoJSON feature into a polygon entity.

    Polygon geometries are promoted to single-member MultiPolygons; the
    coordinates are otherwise kept exactly as given.

    Raises:
        MalformedFeatureError: If the feature cannot be stored
    """
    if not isinstance(feature, dict):
        raise MalformedFeatureError(index, "feature is not an object")

    properties = feature.get("properties")
    if properties is None:
        properties = {}
    if not isinstance(properties, dict):
        raise MalformedFeatureError(index, "'properties' is not an object")

    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        raise MalformedFeatureError(index, "missing 'geometry'")

    geometry_type = geometry.get("type")
    if geometry_type not in _POLYGON_TYPES:
        raise MalformedFeatureError(index, f"unsupported geometry type {geometry_type!r}")

    try:
        parsed = shape(geometry)
    except Exception as e:
        raise MalformedFeatureError(index, f"unreadable geometry: {e}") from e

    if parsed.is_empty or not parsed.is_valid:
        raise MalformedFeatureError(index, "geometry is empty or invalid")

    if geometry_type == "Polygon":
        geometry = {"type": "MultiPolygon", "coordinates": [geometry["coordinates"]]}

    return RiskPolygonEntity(
        flood_category=probe_property(properties, CATEGORY_FIELDS) or DEFAULT_CATEGORY,
        return_period=parse_return_period(probe_property(properties, RETURN_PERIOD_FIELDS)),
        geometry=geometry,
        source=source,
    )


class IngestionService:
    """Loads GeoJSON flood polygons into the authoritative store.

    Imports are not serialized here; run one import at a time against a
    given database. Re-importing a file duplicates its polygons.
    """

    def __init__(self, polygon_store: PolygonStore) -> None:
        """Initialize the ingestion service.

        Args:
            polygon_store: Destination polygon store (required).
        """
        self._polygons = polygon_store

    def import_text(self, text: str, source: str = "inline") -> int:
        """Import a FeatureCollection given as text.

        Args:
            text: GeoJSON FeatureCollection
            source: Provenance recorded on every polygon

        Returns:
            Number of polygons inserted

        Raises:
            FeatureCollectionError: If the text is not a FeatureCollection
            MalformedFeatureError: On the first feature that cannot be stored
        """
        features = parse_feature_collection(text)
        polygons = [feature_to_polygon(i, feature, source) for i, feature in enumerate(features)]

        count = self._polygons.bulk_insert(polygons)
        logger.info("Imported %d flood polygons from %s", count, source)
        return count

    def import_features(self, path_or_text: str | Path, source: str | None = None) -> bool:
        """Import from a file path or from inline GeoJSON text.

        Args:
            path_or_text: Path to a GeoJSON file, or the GeoJSON itself
            source: Provenance. Defaults to the file path, or "inline".

        Returns:
            False if the file does not exist or is not a FeatureCollection,
            True once the polygons are stored

        Raises:
            MalformedFeatureError: On the first feature that cannot be stored
        """
        if isinstance(path_or_text, str) and path_or_text.lstrip().startswith("{"):
            text = path_or_text
            source = source or "inline"
        else:
            path = Path(path_or_text)
            if not path.is_file():
                logger.warning("GeoJSON file not found: %s", path)
                return False
            try:
                text = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                logger.warning("Cannot read %s as UTF-8 GeoJSON: %s", path, e)
                return False
            source = source or str(path)

        try:
            self.import_text(text, source=source)
        except FeatureCollectionError as e:
            logger.warning("Cannot read %s as a FeatureCollection: %s", source, e)
            return False

        return True

    def import_sample_data(self) -> int:
        """Provision the store and load the bundled Auckland sample polygons.

        Returns:
            Number of polygons inserted
        """
        self._polygons.initialize()
        return self.import_text(json.dumps(SAMPLE_FEATURE_COLLECTION), source=SAMPLE_SOURCE)
