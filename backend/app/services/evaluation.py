"""Evaluation pipeline: snapshot → score → tier → destination.

The surrounding service decides what to persist or display; nothing here
touches storage.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime

from app.config import RiskPolicy
from app.schemas.batch import BatchSnapshot
from app.schemas.risk import BatchEvaluation, RiskTier
from app.services.risk_scoring import assess_risk
from app.services.routing import routing_decision


def evaluate_batch(
    batch: BatchSnapshot,
    now: datetime,
    policy: RiskPolicy | None = None,
) -> BatchEvaluation:
    assessment = assess_risk(batch, now, policy)
    return BatchEvaluation(
        assessment=assessment,
        routing=routing_decision(assessment.tier),
    )


def evaluate_batches(
    batches: Iterable[BatchSnapshot],
    now: datetime,
    policy: RiskPolicy | None = None,
) -> list[BatchEvaluation]:
    """Evaluate every batch against the same ``now``, preserving order.

    Stops at the first batch with an invalid shelf life.
    """
    return [evaluate_batch(batch, now, policy) for batch in batches]


def count_tiers(evaluations: Iterable[BatchEvaluation]) -> dict[RiskTier, int]:
    """Number of evaluations per tier (every tier present, possibly 0)."""
    counts = Counter(e.assessment.tier for e in evaluations)
    return {tier: counts.get(tier, 0) for tier in RiskTier}
