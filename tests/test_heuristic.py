"""
Tests for the heuristic flood classifier.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from flood_zone.entities import RiskTier
from flood_zone.services import HeuristicResolver
from flood_zone.services.heuristic import RISK_CENTERS, RiskCenter


@pytest.fixture
def resolver():
    return HeuristicResolver()


@pytest.mark.parametrize(
    "lat, lon, expected",
    [
        ("-36.84", "174.76", RiskTier.MEDIUM),  # Auckland CBD
        ("-36.90", "174.60", RiskTier.MEDIUM),  # West Auckland window
        ("-41.75", "171.60", RiskTier.HIGH),  # Westport
        ("-37.20", "175.60", RiskTier.HIGH),  # Thames
        ("-41.25", "174.95", RiskTier.HIGH),  # Lower Hutt
        ("-39.93", "175.05", RiskTier.MEDIUM),  # Whanganui
        ("-38.70", "178.10", RiskTier.MEDIUM),  # Gisborne
    ],
)
def test_classify_known_centers(resolver, lat, lon, expected):
    """Test points near known centers take the center's tier."""
    assert resolver.classify(Decimal(lat), Decimal(lon)) == expected


def test_classify_inside_region_without_center_is_low(resolver):
    """Test Auckland points away from every center default to Low."""
    assert resolver.classify(Decimal("-37.05"), Decimal("174.95")) == RiskTier.LOW


def test_classify_far_away_is_low(resolver):
    """Test points outside every table are Low."""
    assert resolver.classify(Decimal("51.5"), Decimal("-0.12")) == RiskTier.LOW


def test_window_is_rectangular(resolver):
    """Test the corner of the window matches although it is further than the radius."""
    # Westport radius 0.1: (0.1, 0.1) offset is ~0.141 degrees away but inside the square
    assert resolver.classify(Decimal("-41.65"), Decimal("171.70")) == RiskTier.HIGH
    assert resolver.classify(Decimal("-41.64"), Decimal("171.60")) == RiskTier.LOW


def test_first_match_wins():
    """Test overlapping centers resolve in table order."""
    centers = (
        RiskCenter("a", Decimal("0"), Decimal("0"), Decimal("1"), RiskTier.MEDIUM),
        RiskCenter("b", Decimal("0"), Decimal("0"), Decimal("1"), RiskTier.HIGH),
    )
    resolver = HeuristicResolver(centers=centers)
    assert resolver.classify(Decimal("0.5"), Decimal("0.5")) == RiskTier.MEDIUM
    assert resolver.match(Decimal("0.5"), Decimal("0.5")).name == "a"


def test_region_of(resolver):
    """Test region lookup uses the Auckland bounding box, inclusive."""
    assert resolver.region_of(Decimal("-36.85"), Decimal("174.76")) == "Auckland"
    assert resolver.region_of(Decimal("-37.1"), Decimal("175.0")) == "Auckland"
    assert resolver.region_of(Decimal("-41.75"), Decimal("171.60")) == "Unknown"


def test_accepts_floats(resolver):
    """Test float inputs are handled like their decimal text."""
    assert resolver.classify(-41.75, 171.6) == RiskTier.HIGH
    assert resolver.region_of(-36.85, 174.76) == "Auckland"


def test_classify_is_deterministic_under_concurrency(resolver):
    """Test repeated and concurrent calls agree."""
    points = [(c.latitude, c.longitude) for c in RISK_CENTERS] * 20
    expected = [resolver.classify(lat, lon) for lat, lon in points]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda p: resolver.classify(*p), points))

    assert results == expected
    assert [resolver.classify(lat, lon) for lat, lon in reversed(points)] == list(reversed(expected))
