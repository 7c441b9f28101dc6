"""Health check endpoint for load balancers and monitoring."""

from fastapi import APIRouter

from app.config import settings
from app.utils.dates import utcnow

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Lightweight liveness check.

    The engine has no database or cache to check, so this is also the
    readiness check.
    """
    return {
        "status": "ok",
        "service": "spoilage-engine",
        "timestamp": utcnow().isoformat(),
        "environment": settings.environment,
    }
