"""Risk classifier — maps a 0-100 score onto a freshness tier.

Bands (defaults):
    score <= 30        fresh
    30 < score <= 70   moderate
    score > 70         high

The bands are contiguous by construction, so every score lands in exactly
one tier.
"""

from app.config import RiskPolicy
from app.schemas.risk import RiskTier

DEFAULT_POLICY = RiskPolicy()


def classify_risk(score: float, policy: RiskPolicy | None = None) -> RiskTier:
    policy = policy or DEFAULT_POLICY
    if score <= policy.fresh_max_score:
        return RiskTier.FRESH
    if score <= policy.moderate_max_score:
        return RiskTier.MODERATE
    return RiskTier.HIGH
