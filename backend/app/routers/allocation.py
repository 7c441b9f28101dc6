"""Allocation router.

Endpoints:
    POST   /api/allocation/rank   Rank candidate batches for a request
"""

from fastapi import APIRouter, Depends

from app.config import RiskPolicy, get_risk_policy
from app.schemas.allocation import RankRequest, RankResponse
from app.services.allocation import rank_batches
from app.utils.dates import as_utc, utcnow

router = APIRouter()


@router.post("/rank", response_model=RankResponse)
async def rank(
    body: RankRequest,
    policy: RiskPolicy = Depends(get_risk_policy),
):
    """Rank active batches for the request, best match first.

    Dispatched/expired batches and batches of another crop are left out.
    """
    now = as_utc(body.now) if body.now else utcnow()
    items = rank_batches(body.batches, body.request, now, policy)
    return RankResponse(
        request_id=body.request.request_id,
        items=items,
        total=len(items),
    )
