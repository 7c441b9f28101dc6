"""Lifecycle router — status transitions for a batch snapshot.

Endpoints:
    POST   /api/lifecycle/dispatch       active → dispatched
    POST   /api/lifecycle/expiry-check   active → expired once shelf life is used up

The caller sends the current snapshot and stores the returned one.
Transitions out of a terminal state answer 409 ``INVALID_TRANSITION``.
"""

from fastapi import APIRouter

from app.schemas.batch import DispatchRequest, ExpiryCheckRequest, LifecycleOut
from app.services.lifecycle import BatchLifecycle
from app.utils.dates import as_utc, utcnow

router = APIRouter()


@router.post("/dispatch", response_model=LifecycleOut)
async def dispatch_batch(body: DispatchRequest):
    lifecycle = BatchLifecycle.from_snapshot(body.batch)
    event = lifecycle.dispatch(body.command)
    return LifecycleOut(
        batch=lifecycle.apply_to(body.batch),
        event=event,
        history=lifecycle.history,
    )


@router.post("/expiry-check", response_model=LifecycleOut)
async def check_expiry(body: ExpiryCheckRequest):
    """Expire the batch if its shelf life has elapsed; otherwise echo it back."""
    now = as_utc(body.now) if body.now else utcnow()
    lifecycle = BatchLifecycle.from_snapshot(body.batch)
    event = lifecycle.check_expiry(body.batch.entry_date, body.batch.shelf_life_days, now)
    return LifecycleOut(
        batch=lifecycle.apply_to(body.batch),
        event=event,
        history=lifecycle.history,
    )
