"""Risk router — stateless scoring endpoints.

Endpoints:
    GET    /api/risk/policy             Active scoring policy
    POST   /api/risk/evaluate           Score, classify and route one batch
    POST   /api/risk/evaluate/bulk      Same, for many batches at one instant
    GET    /api/risk/classify/{score}   Tier and destination for a raw score

Nothing is persisted; the caller stores whatever it needs.
"""

from fastapi import APIRouter, Depends, Path

from app.config import RiskPolicy, get_risk_policy
from app.schemas.risk import (
    BatchEvaluation,
    BulkEvaluateRequest,
    BulkEvaluateResponse,
    ClassificationOut,
    EvaluateRequest,
)
from app.services.classification import classify_risk
from app.services.evaluation import count_tiers, evaluate_batch, evaluate_batches
from app.services.routing import routing_decision
from app.utils.dates import as_utc, utcnow

router = APIRouter()


@router.get("/policy", response_model=RiskPolicy)
async def get_policy(policy: RiskPolicy = Depends(get_risk_policy)):
    return policy


@router.post("/evaluate", response_model=BatchEvaluation)
async def evaluate(
    body: EvaluateRequest,
    policy: RiskPolicy = Depends(get_risk_policy),
):
    """Evaluate a single batch snapshot.

    A non-positive shelf life yields 422 ``INVALID_CONFIGURATION``; missing
    or unreadable sensor values are scored with defaults.
    """
    now = as_utc(body.now) if body.now else utcnow()
    return evaluate_batch(body.batch, now, policy)


@router.post("/evaluate/bulk", response_model=BulkEvaluateResponse)
async def evaluate_bulk(
    body: BulkEvaluateRequest,
    policy: RiskPolicy = Depends(get_risk_policy),
):
    """Evaluate many snapshots against one shared ``now``.

    The whole request fails if any batch has an invalid shelf life.
    """
    now = as_utc(body.now) if body.now else utcnow()
    items = evaluate_batches(body.batches, now, policy)
    return BulkEvaluateResponse(
        items=items,
        total=len(items),
        evaluated_at=now,
        tier_counts=count_tiers(items),
    )


@router.get("/classify/{score}", response_model=ClassificationOut)
async def classify(
    score: int = Path(..., ge=0, le=100),
    policy: RiskPolicy = Depends(get_risk_policy),
):
    tier = classify_risk(score, policy)
    return ClassificationOut(score=score, tier=tier, routing=routing_decision(tier))
