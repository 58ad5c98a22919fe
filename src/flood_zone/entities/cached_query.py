"""Cached query domain entity."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .resolution import RiskTier


@dataclass(frozen=True)
class CachedQueryEntity:
    """A prior lookup persisted in the query cache.

    Entries are write-once: a newer lookup for the same place is stored
    as a new entry rather than updating this one.

    Attributes:
        latitude: Queried latitude in decimal degrees
        longitude: Queried longitude in decimal degrees
        flood_zone: Resolved risk tier
        region: Resolved region name
        queried_at: When the lookup was resolved (UTC)
        parcel_id: Optional parcel identifier supplied with the lookup
        flood_category: Source category label, if any
        return_period: Return period in years, if any
        expires_at: When the entry stops being served; None never expires
        key: Storage key, set once the entry has been saved
    """

    latitude: Decimal
    longitude: Decimal
    flood_zone: RiskTier
    region: str
    queried_at: datetime
    parcel_id: str | None = None
    flood_category: str | None = None
    return_period: Decimal | None = None
    expires_at: datetime | None = None
    key: str | None = None

    def is_expired(self, now: datetime) -> bool:
        """Check whether the entry is past its expiry at ``now``."""
        return self.expires_at is not None and self.expires_at <= now
