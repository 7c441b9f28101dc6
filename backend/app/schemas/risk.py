"""Pydantic schemas for risk assessments and routing decisions."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from app.schemas.batch import BatchSnapshot


class RiskTier(str, Enum):
    FRESH = "fresh"
    MODERATE = "moderate"
    HIGH = "high"


class DestinationClass(str, Enum):
    RETAIL_QUICK_COMMERCE = "retail_quick_commerce"
    HOTEL_RESTAURANT = "hotel_restaurant"
    PROCESSING_UNIT = "processing_unit"


# ── Assessment ───────────────────────────────────────────────

class RiskFactors(BaseModel):
    """Per-factor sub-scores (each 0-100) behind an overall score."""
    elapsed_days: float
    remaining_shelf_life_days: float
    shelf_life_pct: float
    temperature_score: float
    humidity_score: float
    gas_score: float


class RiskAssessment(BaseModel):
    batch_id: str
    score: int = Field(..., ge=0, le=100)
    tier: RiskTier
    computed_at: datetime
    factors: RiskFactors


class RoutingDecision(BaseModel):
    tier: RiskTier
    destination_class: DestinationClass
    label: str


class BatchEvaluation(BaseModel):
    """Assessment plus the routing it implies."""
    assessment: RiskAssessment
    routing: RoutingDecision


# ── API payloads ─────────────────────────────────────────────

class EvaluateRequest(BaseModel):
    """Payload for POST /api/risk/evaluate.

    ``now`` defaults to the current UTC time.
    """
    batch: BatchSnapshot
    now: datetime | None = None


class BulkEvaluateRequest(BaseModel):
    """Payload for POST /api/risk/evaluate/bulk.

    Every batch is scored against the same ``now``.
    """
    batches: list[BatchSnapshot] = Field(..., max_length=1000)
    now: datetime | None = None


class BulkEvaluateResponse(BaseModel):
    items: list[BatchEvaluation]
    total: int
    evaluated_at: datetime
    tier_counts: dict[RiskTier, int]


class ClassificationOut(BaseModel):
    score: int
    tier: RiskTier
    routing: RoutingDecision
