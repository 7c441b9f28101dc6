"""Tests for the risk classifier and routing policy."""

import pytest

from app.config import RiskPolicy
from app.schemas.risk import DestinationClass, RiskTier
from app.services.classification import classify_risk
from app.services.routing import route, routing_decision


@pytest.mark.unit
class TestClassifier:

    @pytest.mark.parametrize("score,tier", [
        (0, RiskTier.FRESH),
        (30, RiskTier.FRESH),
        (31, RiskTier.MODERATE),
        (70, RiskTier.MODERATE),
        (71, RiskTier.HIGH),
        (100, RiskTier.HIGH),
    ])
    def test_band_edges(self, score, tier):
        assert classify_risk(score) == tier

    def test_bands_partition_every_score(self):
        tiers = [classify_risk(score) for score in range(0, 101)]

        assert tiers.count(RiskTier.FRESH) == 31
        assert tiers.count(RiskTier.MODERATE) == 40
        assert tiers.count(RiskTier.HIGH) == 30
        # Non-decreasing: no band reappears after a higher one
        order = [RiskTier.FRESH, RiskTier.MODERATE, RiskTier.HIGH]
        assert [order.index(t) for t in tiers] == sorted(order.index(t) for t in tiers)

    def test_custom_thresholds(self):
        strict = RiskPolicy(fresh_max_score=20, moderate_max_score=50)
        assert classify_risk(25, strict) == RiskTier.MODERATE
        assert classify_risk(51, strict) == RiskTier.HIGH
        assert classify_risk(25) == RiskTier.FRESH


@pytest.mark.unit
class TestRouting:

    @pytest.mark.parametrize("tier,destination", [
        (RiskTier.FRESH, DestinationClass.RETAIL_QUICK_COMMERCE),
        (RiskTier.MODERATE, DestinationClass.HOTEL_RESTAURANT),
        (RiskTier.HIGH, DestinationClass.PROCESSING_UNIT),
    ])
    def test_route(self, tier, destination):
        assert route(tier) == destination

    def test_every_tier_routed(self):
        destinations = {route(tier) for tier in RiskTier}
        assert destinations == set(DestinationClass)

    def test_accepts_plain_tier_value(self):
        assert route("moderate") == DestinationClass.HOTEL_RESTAURANT

    def test_decision_has_label(self):
        decision = routing_decision(RiskTier.HIGH)
        assert decision.tier == RiskTier.HIGH
        assert decision.destination_class == DestinationClass.PROCESSING_UNIT
        assert decision.label == "Processing unit"
