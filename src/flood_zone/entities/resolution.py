"""Resolution result domain entity and its vocabularies."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class RiskTier(str, Enum):
    """Normalized flood hazard classification."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    UNKNOWN = "Unknown"


class ResolutionSource(str, Enum):
    """Which tier of the lookup chain produced a result."""

    CACHED = "cached"
    AUTHORITATIVE = "authoritative"
    HEURISTIC = "heuristic"
    ERROR = "error"


@dataclass(frozen=True)
class ResolutionResultEntity:
    """Normalized answer returned to callers, whatever tier produced it.

    Attributes:
        flood_zone: Risk tier for the location
        region: Named region containing the location, or "Unknown"
        flood_category: Source category label (authoritative data only)
        return_period: Recurrence interval in years (authoritative data only)
        from_cache: True when served from the query cache
        source: Tier that produced the answer
    """

    flood_zone: RiskTier
    region: str
    flood_category: str | None = None
    return_period: Decimal | None = None
    from_cache: bool = False
    source: ResolutionSource = ResolutionSource.HEURISTIC
