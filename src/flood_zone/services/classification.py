"""Mapping of authoritative flood categories to risk tiers."""

from decimal import Decimal

from flood_zone.entities import RiskTier

HIGH_RETURN_PERIOD = Decimal(20)
MEDIUM_RETURN_PERIOD = Decimal(100)


def classify_category(category: str | None, return_period: Decimal | None) -> RiskTier:
    """Map a source category label and return period to a risk tier.

    Each tier is tested textual signal first, then return period; the High
    tier is tested before Medium. A 15-year return period is therefore High
    even when the label says "Low-lying".

    Args:
        category: Free-text category label (case-insensitive)
        return_period: Return period in years, if known

    Returns:
        High, Medium or Low
    """
    label = (category or "").lower()

    if "high" in label or (return_period is not None and return_period <= HIGH_RETURN_PERIOD):
        return RiskTier.HIGH

    if (
        "medium" in label
        or "moderate" in label
        or (return_period is not None and return_period <= MEDIUM_RETURN_PERIOD)
    ):
        return RiskTier.MEDIUM

    return RiskTier.LOW
