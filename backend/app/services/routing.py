"""Routing policy — which downstream channel suits each freshness tier."""

from app.schemas.risk import DestinationClass, RiskTier, RoutingDecision

TIER_DESTINATIONS: dict[RiskTier, DestinationClass] = {
    RiskTier.FRESH: DestinationClass.RETAIL_QUICK_COMMERCE,
    RiskTier.MODERATE: DestinationClass.HOTEL_RESTAURANT,
    RiskTier.HIGH: DestinationClass.PROCESSING_UNIT,
}

DESTINATION_LABELS: dict[DestinationClass, str] = {
    DestinationClass.RETAIL_QUICK_COMMERCE: "Retail / quick commerce",
    DestinationClass.HOTEL_RESTAURANT: "Hotels / restaurants",
    DestinationClass.PROCESSING_UNIT: "Processing unit",
}


def route(tier: RiskTier) -> DestinationClass:
    return TIER_DESTINATIONS[RiskTier(tier)]


def routing_decision(tier: RiskTier) -> RoutingDecision:
    destination = route(tier)
    return RoutingDecision(
        tier=RiskTier(tier),
        destination_class=destination,
        label=DESTINATION_LABELS[destination],
    )
