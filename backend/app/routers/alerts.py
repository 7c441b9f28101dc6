"""Alerts router — threshold checks on a zone's sensor reading.

Endpoints:
    POST   /api/alerts/detect   Breaches in one reading
"""

from fastapi import APIRouter

from app.schemas.alerts import AlertCheckRequest, AlertCheckResponse
from app.services.alerts import count_critical, detect_alerts

router = APIRouter()


@router.post("/detect", response_model=AlertCheckResponse)
async def detect(body: AlertCheckRequest):
    """Return every breached limit; an empty list means the zone is in range."""
    items = detect_alerts(body.reading, body.thresholds, body.now)
    return AlertCheckResponse(
        items=items,
        total=len(items),
        critical=count_critical(items),
    )
