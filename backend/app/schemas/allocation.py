"""Pydantic schemas for matching batches to allocation requests."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.batch import BatchSnapshot
from app.schemas.risk import RiskTier


class AllocationRequest(BaseModel):
    """A buyer's request for produce.

    ``location`` and ``notes`` are free text; keywords in them hint at the
    kind of buyer (retail, hotel, processing, ...).
    """
    request_id: str
    quantity: float = Field(..., gt=0)
    crop: str | None = None
    location: str | None = None
    notes: str | None = None
    deadline: datetime | None = None


class BatchMatch(BaseModel):
    batch_id: str
    match_score: int = Field(..., ge=0, le=100)
    risk_score: int
    tier: RiskTier
    demand_tier: RiskTier | None = None


class RankRequest(BaseModel):
    """Payload for POST /api/allocation/rank."""
    request: AllocationRequest
    batches: list[BatchSnapshot] = Field(..., max_length=1000)
    now: datetime | None = None


class RankResponse(BaseModel):
    request_id: str
    items: list[BatchMatch]
    total: int
