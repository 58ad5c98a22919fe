"""Query cache storage protocol.

Defines the interface for the append-only store of prior lookups.
Entries are matched by approximate coordinates or exact parcel id and
carry an optional expiry that is enforced at read time.

Implementations can include:
- Redis Stack with a search index (default)
- MongoDB with a compound (latitude, longitude) index
- A relational table with B-tree indexes on the coordinate columns
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol, runtime_checkable

from flood_zone.entities import CachedQueryEntity


@runtime_checkable
class QueryCacheStore(Protocol):
    """Protocol for query cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.
    """

    def find_by_proximity(
        self,
        latitude: Decimal,
        longitude: Decimal,
        now: datetime | None = None,
    ) -> CachedQueryEntity | None:
        """Find the newest live entry near a coordinate.

        Args:
            latitude: Query latitude
            longitude: Query longitude
            now: Reference time for expiry checks (defaults to current UTC time)

        Returns:
            The most recently queried non-expired entry whose latitude and
            longitude each lie within the tolerance window, or None
        """
        ...

    def find_by_parcel(
        self,
        parcel_id: str,
        now: datetime | None = None,
    ) -> CachedQueryEntity | None:
        """Find the newest live entry for a parcel.

        Args:
            parcel_id: Exact parcel identifier
            now: Reference time for expiry checks (defaults to current UTC time)

        Returns:
            The most recently queried non-expired entry, or None
        """
        ...

    def save(self, entry: CachedQueryEntity) -> str:
        """Append an entry. Existing entries are never overwritten.

        Args:
            entry: The entry to persist

        Returns:
            The storage key for the entry
        """
        ...

    def recent(self, limit: int = 100) -> list[CachedQueryEntity]:
        """List the most recent entries, expired ones included.

        Args:
            limit: Maximum number of entries to return

        Returns:
            Entries sorted by query time, newest first
        """
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...

    def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...
