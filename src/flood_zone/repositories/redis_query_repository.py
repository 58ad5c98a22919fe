"""Redis implementation of QueryCacheStore.

Entries are Redis hashes indexed by a RediSearch index (numeric fields for
coordinates and timestamps, tag fields for parcel ids). Expiry is stored as
data and filtered at query time; Redis key TTLs are never set, so expired
entries stay visible to diagnostics.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

import redis
from redisvl.index import SearchIndex
from redisvl.query import FilterQuery
from redisvl.query.filter import FilterExpression, Num, Tag

from flood_zone.config import get_redis_client, settings
from flood_zone.entities import CachedQueryEntity, RiskTier

logger = logging.getLogger(__name__)

# Unit separator; never part of a parcel id
PARCEL_TAG_SEPARATOR = "\x1f"

_RETURN_FIELDS = [
    "latitude",
    "longitude",
    "parcel_id",
    "flood_zone",
    "region",
    "flood_category",
    "return_period",
    "queried_at",
    "expires_at",
    "never_expires",
]


class RedisQueryRepository:
    """Redis implementation of the append-only query cache.

    This class satisfies the QueryCacheStore protocol through structural
    typing - no explicit inheritance needed.

    Proximity matching is a rectangular window of ``tolerance`` degrees
    around the query point on both axes, resolved by the search index;
    ties go to the most recently queried entry.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        index_name: str | None = None,
        tolerance: float | None = None,
        index: SearchIndex | None = None,
    ) -> None:
        """Initialize the Redis query repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            index_name: Name of the Redis search index.
            tolerance: Proximity window in decimal degrees.
            index: Pre-built search index (mainly for tests).
        """
        self._client = redis_client or get_redis_client()
        self._index_name = index_name or settings.cache_index_name
        self._tolerance = Decimal(str(tolerance or settings.cache_tolerance_degrees))
        self._index: SearchIndex | None = index

        # Initialize the index
        self._ensure_index()

    @classmethod
    def create(
        cls,
        index_name: str | None = None,
        tolerance: float | None = None,
    ) -> "RedisQueryRepository":
        """Factory method to create RedisQueryRepository with defaults.

        Args:
            index_name: Redis index name. If None, uses settings.
            tolerance: Proximity window in degrees. If None, uses settings.

        Returns:
            Configured RedisQueryRepository
        """
        return cls(index_name=index_name, tolerance=tolerance)

    def _ensure_index(self) -> None:
        """Ensure the Redis search index exists."""
        if self._index is not None:
            return

        index_schema = {
            "index": {
                "name": self._index_name,
                "prefix": f"{self._index_name}:",
                "storage_type": "hash",
            },
            "fields": [
                {"name": "latitude", "type": "numeric"},
                {"name": "longitude", "type": "numeric"},
                # Exact match: one tag per id, no case folding
                {
                    "name": "parcel_id",
                    "type": "tag",
                    "attrs": {"case_sensitive": True, "separator": PARCEL_TAG_SEPARATOR},
                },
                {"name": "flood_zone", "type": "tag"},
                {"name": "region", "type": "tag"},
                {"name": "flood_category", "type": "text"},
                {"name": "return_period", "type": "tag"},
                {"name": "queried_at", "type": "numeric", "attrs": {"sortable": True}},
                {"name": "expires_at", "type": "numeric"},
                {"name": "never_expires", "type": "tag"},
            ],
        }

        self._index = SearchIndex.from_dict(index_schema, redis_client=self._client)

        # Create the index if it doesn't exist
        try:
            self._index.create(overwrite=False)
            logger.info("Using query cache index: %s", self._index_name)
        except Exception as e:
            if "already exists" in str(e) or "Index already exists" in str(e):
                logger.info("Using existing index: %s", self._index_name)
            else:
                raise

    def find_by_proximity(
        self,
        latitude: Decimal,
        longitude: Decimal,
        now: datetime | None = None,
    ) -> CachedQueryEntity | None:
        """Find the newest live entry within the tolerance window.

        Args:
            latitude: Query latitude
            longitude: Query longitude
            now: Reference time for expiry checks

        Returns:
            The matching entry, or None
        """
        latitude = Decimal(str(latitude))
        longitude = Decimal(str(longitude))
        window = (
            (Num("latitude") >= float(latitude - self._tolerance))
            & (Num("latitude") <= float(latitude + self._tolerance))
            & (Num("longitude") >= float(longitude - self._tolerance))
            & (Num("longitude") <= float(longitude + self._tolerance))
        )
        return self._find_newest(window & self._live_filter(now))

    def find_by_parcel(
        self,
        parcel_id: str,
        now: datetime | None = None,
    ) -> CachedQueryEntity | None:
        """Find the newest live entry for an exact parcel id.

        Args:
            parcel_id: Parcel identifier
            now: Reference time for expiry checks

        Returns:
            The matching entry, or None
        """
        # An empty tag value would match every document
        if not parcel_id:
            return None

        return self._find_newest((Tag("parcel_id") == parcel_id) & self._live_filter(now))

    def save(self, entry: CachedQueryEntity) -> str:
        """Append a cache entry as a new Redis hash.

        Args:
            entry: The entry to persist

        Returns:
            The storage key for the entry
        """
        key = f"{self._index_name}:{uuid.uuid4().hex}"

        self._client.hset(
            key,
            mapping={
                "latitude": str(entry.latitude),
                "longitude": str(entry.longitude),
                "parcel_id": entry.parcel_id or "",
                "flood_zone": RiskTier(entry.flood_zone).value,
                "region": entry.region,
                "flood_category": entry.flood_category or "",
                "return_period": "" if entry.return_period is None else str(entry.return_period),
                "queried_at": str(entry.queried_at.timestamp()),
                "expires_at": "0" if entry.expires_at is None else str(entry.expires_at.timestamp()),
                "never_expires": "1" if entry.expires_at is None else "0",
            },
        )

        return key

    def recent(self, limit: int = 100) -> list[CachedQueryEntity]:
        """List the most recent entries, including expired ones.

        Args:
            limit: Maximum number of entries

        Returns:
            Entries sorted newest first
        """
        if self._index is None:
            return []

        query = FilterQuery(
            filter_expression=FilterExpression("*"),
            return_fields=_RETURN_FIELDS,
            num_results=limit,
        )
        query.sort_by("queried_at", asc=False)

        return [self._to_entity(result) for result in self._index.query(query)]

    def count_all(self) -> int:
        """Count total entries in the cache.

        Returns:
            Total number of cached entries, expired ones included
        """
        count = 0
        for _ in self._client.scan_iter(match=f"{self._index_name}:*"):
            count += 1
        return count

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def get_stats(self) -> dict:
        """Get repository statistics.

        Returns:
            Dictionary with stats
        """
        return {
            "index_name": self._index_name,
            "total_entries": self.count_all(),
            "tolerance_degrees": float(self._tolerance),
        }

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client

    @staticmethod
    def _live_filter(now: datetime | None) -> FilterExpression:
        """Match entries that never expire or expire after ``now``."""
        now = now or datetime.now(timezone.utc)
        return (Tag("never_expires") == "1") | (Num("expires_at") > now.timestamp())

    def _find_newest(self, filter_expression: FilterExpression) -> CachedQueryEntity | None:
        """Run a filter query and return the most recently queried hit."""
        if self._index is None:
            return None

        query = FilterQuery(
            filter_expression=filter_expression,
            return_fields=_RETURN_FIELDS,
            num_results=1,
        )
        query.sort_by("queried_at", asc=False)

        results = self._index.query(query)
        if not results:
            return None
        return self._to_entity(results[0])

    @staticmethod
    def _to_entity(result: dict[str, Any]) -> CachedQueryEntity:
        """Convert a search result document into a domain entity."""
        expires_at = None
        if result.get("never_expires") != "1":
            expires_at = datetime.fromtimestamp(float(result.get("expires_at", 0)), tz=timezone.utc)

        return CachedQueryEntity(
            latitude=Decimal(result["latitude"]),
            longitude=Decimal(result["longitude"]),
            parcel_id=result.get("parcel_id") or None,
            flood_zone=RiskTier(result.get("flood_zone", RiskTier.UNKNOWN.value)),
            region=result.get("region", ""),
            flood_category=result.get("flood_category") or None,
            return_period=_parse_decimal(result.get("return_period")),
            queried_at=datetime.fromtimestamp(float(result.get("queried_at", 0)), tz=timezone.utc),
            expires_at=expires_at,
            key=result.get("id"),
        )


def _parse_decimal(value: str | None) -> Decimal | None:
    if not value:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        return None
