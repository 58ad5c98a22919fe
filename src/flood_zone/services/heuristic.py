"""Heuristic flood classification for places without authoritative data.

The tables below are fixed at import time and never mutated, so the
resolver is safe to share between threads.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from flood_zone.entities import RiskTier

logger = logging.getLogger(__name__)

UNKNOWN_REGION = "Unknown"


@dataclass(frozen=True)
class RiskCenter:
    """A known flood-prone place.

    A point matches when both |Δlat| and |Δlon| are within ``radius``
    degrees: a square window, not a great-circle distance.
    """

    name: str
    latitude: Decimal
    longitude: Decimal
    radius: Decimal
    tier: RiskTier

    def contains(self, latitude: Decimal, longitude: Decimal) -> bool:
        return (
            abs(latitude - self.latitude) <= self.radius
            and abs(longitude - self.longitude) <= self.radius
        )


@dataclass(frozen=True)
class Region:
    """A named rectangular region, bounds inclusive."""

    name: str
    min_latitude: Decimal
    max_latitude: Decimal
    min_longitude: Decimal
    max_longitude: Decimal

    def contains(self, latitude: Decimal, longitude: Decimal) -> bool:
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )


def _center(name: str, lat: str, lon: str, radius: str, tier: RiskTier) -> RiskCenter:
    return RiskCenter(name, Decimal(lat), Decimal(lon), Decimal(radius), tier)


# Evaluated in order, first match wins
RISK_CENTERS: tuple[RiskCenter, ...] = (
    _center("Auckland CBD/Waterfront", "-36.84", "174.76", "0.02", RiskTier.MEDIUM),
    _center("West Auckland (Waitakere)", "-36.85", "174.55", "0.1", RiskTier.MEDIUM),
    _center("Westport", "-41.75", "171.60", "0.1", RiskTier.HIGH),
    _center("Thames/Coromandel", "-37.14", "175.54", "0.15", RiskTier.HIGH),
    _center("Lower Hutt", "-41.21", "174.91", "0.08", RiskTier.HIGH),
    _center("Edgecumbe", "-37.98", "176.83", "0.1", RiskTier.HIGH),
    _center("Nelson/Tasman", "-41.27", "173.28", "0.15", RiskTier.MEDIUM),
    _center("Whanganui", "-39.93", "175.05", "0.1", RiskTier.MEDIUM),
    _center("Gisborne", "-38.66", "178.02", "0.12", RiskTier.MEDIUM),
)

REGIONS: tuple[Region, ...] = (
    Region("Auckland", Decimal("-37.1"), Decimal("-36.6"), Decimal("174.5"), Decimal("175.0")),
)


def _to_decimal(value: Decimal | float | str) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class HeuristicResolver:
    """Deterministic coordinate-to-tier classifier.

    Example:
        ```python
        resolver = HeuristicResolver()
        resolver.classify(Decimal("-41.75"), Decimal("171.60"))  # RiskTier.HIGH
        resolver.region_of(Decimal("-36.85"), Decimal("174.76"))  # "Auckland"
        ```
    """

    def __init__(
        self,
        centers: tuple[RiskCenter, ...] = RISK_CENTERS,
        regions: tuple[Region, ...] = REGIONS,
    ) -> None:
        self._centers = tuple(centers)
        self._regions = tuple(regions)

    def match(self, latitude: Decimal, longitude: Decimal) -> RiskCenter | None:
        """Return the first risk center whose window contains the point."""
        latitude, longitude = _to_decimal(latitude), _to_decimal(longitude)
        for center in self._centers:
            if center.contains(latitude, longitude):
                return center
        return None

    def classify(self, latitude: Decimal, longitude: Decimal) -> RiskTier:
        """Classify a point using the risk center table.

        Args:
            latitude: Point latitude
            longitude: Point longitude

        Returns:
            The tier of the first matching center, otherwise Low
        """
        center = self.match(latitude, longitude)
        if center is not None:
            logger.debug("Location near %s - %s flood risk", center.name, center.tier.value)
            return center.tier

        # Inside a known region or not, unmatched points default to Low
        return RiskTier.LOW

    def region_of(self, latitude: Decimal, longitude: Decimal) -> str:
        """Name the region containing a point, or "Unknown"."""
        latitude, longitude = _to_decimal(latitude), _to_decimal(longitude)
        for region in self._regions:
            if region.contains(latitude, longitude):
                return region.name
        return UNKNOWN_REGION
