"""Flood zone resolution service.

This service answers "what is the flood risk here?" by running an ordered
chain of lookup stages (query cache, authoritative polygons, heuristic)
and recording new answers in the cache with a stage-specific expiry.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from flood_zone.config import settings
from flood_zone.entities import (
    CachedQueryEntity,
    ResolutionResultEntity,
    ResolutionSource,
    RiskTier,
)
from flood_zone.protocols import PolygonStore, QueryCacheStore

from .classification import classify_category
from .heuristic import UNKNOWN_REGION, HeuristicResolver

logger = logging.getLogger(__name__)

StageLookup = Callable[[Decimal, Decimal, str | None], ResolutionResultEntity | None]

SAFE_DEFAULT = ResolutionResultEntity(
    flood_zone=RiskTier.LOW,
    region=UNKNOWN_REGION,
    from_cache=False,
    source=ResolutionSource.ERROR,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_decimal(value: Decimal | float | str) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class ResolutionService:
    """Tiered flood zone resolution.

    Stages run in order until one answers. What happens to an answer
    depends only on which stage produced it, via two tables:

    ============== ================== ==================
    stage          source tag         cache expiry
    ============== ================== ==================
    cache          ``cached``         (not re-written)
    authoritative  ``authoritative``  30 days
    heuristic      ``heuristic``      7 days
    ============== ================== ==================

    ``resolve`` never raises: any failure from any stage is logged once
    and answered with Low / Unknown tagged ``error``.

    Example:
        ```python
        from flood_zone.repositories import PostGISPolygonRepository, RedisQueryRepository
        from flood_zone.services import ResolutionService

        service = ResolutionService.create(
            query_cache=RedisQueryRepository.create(),
            polygon_store=PostGISPolygonRepository.create(),
        )
        result = service.resolve(Decimal("-36.845"), Decimal("174.765"))
        ```
    """

    def __init__(
        self,
        query_cache: QueryCacheStore,
        polygon_store: PolygonStore,
        heuristic: HeuristicResolver | None = None,
        authoritative_ttl: timedelta | None = None,
        heuristic_ttl: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the resolution service.

        Args:
            query_cache: Store of prior lookups (required).
            polygon_store: Authoritative polygon store (required).
            heuristic: Fallback classifier. Defaults to the built-in tables.
            authoritative_ttl: Expiry for authoritative answers. Defaults to settings.
            heuristic_ttl: Expiry for heuristic answers. Defaults to settings.
            clock: Returns the current UTC time.
        """
        self._cache = query_cache
        self._polygons = polygon_store
        self._heuristic = heuristic or HeuristicResolver()
        self._clock = clock

        self._stages: tuple[tuple[ResolutionSource, StageLookup], ...] = (
            (ResolutionSource.CACHED, self._lookup_cache),
            (ResolutionSource.AUTHORITATIVE, self._lookup_authoritative),
            (ResolutionSource.HEURISTIC, self._lookup_heuristic),
        )
        # None means the answer is not written back to the cache
        self._ttls: dict[ResolutionSource, timedelta | None] = {
            ResolutionSource.CACHED: None,
            ResolutionSource.AUTHORITATIVE: authoritative_ttl
            or timedelta(days=settings.authoritative_ttl_days),
            ResolutionSource.HEURISTIC: heuristic_ttl or timedelta(days=settings.heuristic_ttl_days),
        }

    @classmethod
    def create(
        cls,
        query_cache: QueryCacheStore,
        polygon_store: PolygonStore,
        heuristic: HeuristicResolver | None = None,
    ) -> "ResolutionService":
        """Factory method to create ResolutionService with TTLs from settings.

        Args:
            query_cache: Store of prior lookups (required).
            polygon_store: Authoritative polygon store (required).
            heuristic: Fallback classifier. If None, uses the built-in tables.

        Returns:
            Configured ResolutionService instance
        """
        return cls(query_cache=query_cache, polygon_store=polygon_store, heuristic=heuristic)

    def resolve(
        self,
        latitude: Decimal,
        longitude: Decimal,
        parcel_id: str | None = None,
    ) -> ResolutionResultEntity:
        """Resolve the flood zone for a location.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            parcel_id: Optional parcel identifier, matched exactly in the cache

        Returns:
            The resolution result; never raises
        """
        try:
            latitude = _to_decimal(latitude)
            longitude = _to_decimal(longitude)

            for source, lookup in self._stages:
                answer = lookup(latitude, longitude, parcel_id)
                if answer is None:
                    continue

                result = replace(
                    answer,
                    source=source,
                    from_cache=source is ResolutionSource.CACHED,
                )
                logger.info(
                    "Flood zone for Lat=%s, Long=%s from %s: %s",
                    latitude,
                    longitude,
                    source.value,
                    result.flood_zone.value,
                )

                ttl = self._ttls[source]
                if ttl is not None:
                    self._remember(latitude, longitude, parcel_id, result, ttl)
                return result

            # The heuristic stage always answers
            raise RuntimeError("No resolution stage produced an answer")

        except Exception:
            logger.exception("Error getting flood zone for Lat=%s, Long=%s", latitude, longitude)
            return SAFE_DEFAULT

    def provision_store(self) -> None:
        """Provision the authoritative polygon store. Errors propagate."""
        self._polygons.initialize()

    def recent(self, limit: int = 100) -> list[CachedQueryEntity]:
        """List recent cache entries for diagnostics (expired ones included)."""
        return self._cache.recent(limit)

    def is_healthy(self) -> dict[str, bool]:
        """Check reachability of both stores.

        Returns:
            Dictionary with ``cache`` and ``polygons`` health flags
        """
        return {
            "cache": self._cache.health_check(),
            "polygons": self._polygons.health_check(),
        }

    def get_stats(self) -> dict:
        """Get resolution statistics.

        Returns:
            Dictionary with cache and polygon store statistics
        """
        stats = self._cache.get_stats()
        stats["polygon_count"] = self._polygons.count()
        stats["authoritative_ttl_days"] = self._ttls[ResolutionSource.AUTHORITATIVE].days
        stats["heuristic_ttl_days"] = self._ttls[ResolutionSource.HEURISTIC].days
        return stats

    def _lookup_cache(
        self,
        latitude: Decimal,
        longitude: Decimal,
        parcel_id: str | None,
    ) -> ResolutionResultEntity | None:
        now = self._clock()

        entry = None
        if parcel_id:
            entry = self._cache.find_by_parcel(parcel_id, now=now)
        if entry is None:
            entry = self._cache.find_by_proximity(latitude, longitude, now=now)
        if entry is None:
            return None

        return ResolutionResultEntity(
            flood_zone=entry.flood_zone,
            region=entry.region,
            flood_category=entry.flood_category,
            return_period=entry.return_period,
        )

    def _lookup_authoritative(
        self,
        latitude: Decimal,
        longitude: Decimal,
        parcel_id: str | None,
    ) -> ResolutionResultEntity | None:
        polygon = self._polygons.find_containing(latitude, longitude)
        if polygon is None:
            return None

        return ResolutionResultEntity(
            flood_zone=classify_category(polygon.flood_category, polygon.return_period),
            region=self._heuristic.region_of(latitude, longitude),
            flood_category=polygon.flood_category,
            return_period=polygon.return_period,
        )

    def _lookup_heuristic(
        self,
        latitude: Decimal,
        longitude: Decimal,
        parcel_id: str | None,
    ) -> ResolutionResultEntity:
        return ResolutionResultEntity(
            flood_zone=self._heuristic.classify(latitude, longitude),
            region=self._heuristic.region_of(latitude, longitude),
        )

    def _remember(
        self,
        latitude: Decimal,
        longitude: Decimal,
        parcel_id: str | None,
        result: ResolutionResultEntity,
        ttl: timedelta,
    ) -> None:
        now = self._clock()
        self._cache.save(
            CachedQueryEntity(
                latitude=latitude,
                longitude=longitude,
                parcel_id=parcel_id,
                flood_zone=result.flood_zone,
                region=result.region,
                flood_category=result.flood_category,
                return_period=result.return_period,
                queried_at=now,
                expires_at=now + ttl,
            )
        )

    @property
    def query_cache(self) -> QueryCacheStore:
        """Get the underlying query cache (for testing)."""
        return self._cache

    @property
    def polygon_store(self) -> PolygonStore:
        """Get the underlying polygon store (for testing)."""
        return self._polygons
