"""Allocation matcher — ranks active batches for an allocation request.

Composite match score (0-100, higher = better match):
  - Risk priority      (40%)  high-risk batches go out first to limit spoilage
  - Freshness match    (25%)  batch tier vs the tier the buyer can use
  - Deadline proximity (20%)  urgent requests bump every candidate
  - Utilization        (15%)  prefer batches close to the requested quantity

Batch risk is recomputed from the snapshot with the risk calculator, so the
ranking never depends on a stale stored score.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from app.config import RiskPolicy
from app.schemas.allocation import AllocationRequest, BatchMatch
from app.schemas.batch import BatchSnapshot, BatchStatus
from app.schemas.risk import RiskTier
from app.services.classification import classify_risk
from app.services.risk_scoring import calculate_risk_score, round_half_up
from app.utils.dates import as_utc

logger = logging.getLogger(__name__)

WEIGHT_RISK_PRIORITY = 0.40
WEIGHT_FRESHNESS_MATCH = 0.25
WEIGHT_DEADLINE = 0.20
WEIGHT_UTILIZATION = 0.15

# Keyword in request location/notes → tier that buyer type can absorb.
# Checked in order; first hit wins.
DEMAND_KEYWORDS: tuple[tuple[str, RiskTier], ...] = (
    ("retail", RiskTier.FRESH),
    ("supermarket", RiskTier.FRESH),
    ("hotel", RiskTier.MODERATE),
    ("restaurant", RiskTier.MODERATE),
    ("catering", RiskTier.MODERATE),
    ("processing", RiskTier.HIGH),
    ("factory", RiskTier.HIGH),
    ("industrial", RiskTier.HIGH),
    ("export", RiskTier.FRESH),
    ("wholesale", RiskTier.MODERATE),
)

NEUTRAL_SCORE = 50.0


def infer_demand_tier(request: AllocationRequest) -> RiskTier | None:
    """Tier implied by keywords in the request text, or None if unknown."""
    text = f"{request.location or ''} {request.notes or ''}".lower()
    for keyword, tier in DEMAND_KEYWORDS:
        if keyword in text:
            return tier
    return None


def risk_priority(risk_score: float) -> float:
    if risk_score > 70:
        return 100.0
    if risk_score > 50:
        return 70.0
    if risk_score > 30:
        return 40.0
    return 20.0


def freshness_match(tier: RiskTier, demand_tier: RiskTier | None) -> float:
    if demand_tier is None:
        return NEUTRAL_SCORE
    if tier == demand_tier:
        return 100.0
    if {tier, demand_tier} == {RiskTier.FRESH, RiskTier.MODERATE}:
        return 40.0
    return 10.0


def deadline_score(deadline: datetime | None, now: datetime) -> float:
    if deadline is None:
        return NEUTRAL_SCORE
    days_left = (as_utc(deadline) - as_utc(now)).total_seconds() / 86_400
    if days_left <= 1:
        return 100.0
    if days_left <= 3:
        return 85.0
    if days_left <= 7:
        return 60.0
    return 30.0


def utilization_score(requested: float | None, available: float | None) -> float:
    """100 when the batch covers the request exactly; less when it is larger."""
    requested = requested or 1.0
    available = available or 1.0
    return min(requested / available, 1.0) * 100


def match_score(
    risk_score: int,
    tier: RiskTier,
    batch_quantity: float | None,
    request: AllocationRequest,
    now: datetime,
    demand_tier: RiskTier | None = None,
) -> int:
    composite = (
        risk_priority(risk_score) * WEIGHT_RISK_PRIORITY
        + freshness_match(tier, demand_tier) * WEIGHT_FRESHNESS_MATCH
        + deadline_score(request.deadline, now) * WEIGHT_DEADLINE
        + utilization_score(request.quantity, batch_quantity) * WEIGHT_UTILIZATION
    )
    return round_half_up(max(0.0, min(100.0, composite)))


def _crop_matches(batch: BatchSnapshot, request: AllocationRequest) -> bool:
    if not request.crop or not batch.crop:
        return True
    return batch.crop.strip().lower() == request.crop.strip().lower()


def rank_batches(
    batches: Iterable[BatchSnapshot],
    request: AllocationRequest,
    now: datetime,
    policy: RiskPolicy | None = None,
) -> list[BatchMatch]:
    """Active, crop-compatible batches sorted by match score (best first).

    Ties keep their input order.
    """
    demand_tier = infer_demand_tier(request)
    matches: list[BatchMatch] = []

    for batch in batches:
        if batch.status is not BatchStatus.ACTIVE:
            continue
        if not _crop_matches(batch, request):
            continue

        score = calculate_risk_score(batch, now, policy)
        tier = classify_risk(score, policy)
        matches.append(BatchMatch(
            batch_id=batch.batch_id,
            match_score=match_score(score, tier, batch.quantity, request, now, demand_tier),
            risk_score=score,
            tier=tier,
            demand_tier=demand_tier,
        ))

    matches.sort(key=lambda m: m.match_score, reverse=True)
    logger.debug(
        "Ranked %d candidate batches for request %s", len(matches), request.request_id
    )
    return matches
