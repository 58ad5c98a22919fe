"""
Tests for mapping authoritative categories to risk tiers.
"""

from decimal import Decimal

import pytest

from flood_zone.entities import RiskTier
from flood_zone.services import classify_category


@pytest.mark.parametrize(
    "category, return_period, expected",
    [
        ("High Risk", None, RiskTier.HIGH),
        ("HIGH", Decimal("500"), RiskTier.HIGH),
        ("Low-lying", Decimal("15"), RiskTier.HIGH),
        ("Low Risk", Decimal("20"), RiskTier.HIGH),
        ("Medium Risk", None, RiskTier.MEDIUM),
        ("Moderate", Decimal("500"), RiskTier.MEDIUM),
        ("Low Risk", Decimal("100"), RiskTier.MEDIUM),
        ("Unknown", Decimal("20.5"), RiskTier.MEDIUM),
        ("Low Risk", Decimal("100.01"), RiskTier.LOW),
        ("Unknown", None, RiskTier.LOW),
        (None, None, RiskTier.LOW),
    ],
)
def test_classify_category(category, return_period, expected):
    """Test textual and return-period signals."""
    assert classify_category(category, return_period) == expected


def test_high_text_beats_medium_return_period():
    """Test a high label wins over a return period that alone means Medium."""
    assert classify_category("High flood hazard", Decimal("50")) == RiskTier.HIGH
