"""Pydantic schemas for batch snapshots and lifecycle commands."""

import logging
import math
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from app.utils.numbers import to_float

logger = logging.getLogger(__name__)


class BatchStatus(str, Enum):
    """Lifecycle states: active → dispatched | expired (both terminal)."""
    ACTIVE = "active"
    DISPATCHED = "dispatched"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self is not BatchStatus.ACTIVE


class GasLevel(str, Enum):
    """Categorical gas readings reported by the simpler sensors."""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


# A gas reading is a concentration, a GasLevel label, or absent
GasReading = float | str | None


# ── Snapshot (engine input) ──────────────────────────────────

class BatchSnapshot(BaseModel):
    """A batch as measured at one polling cycle.

    Built by the ingestion layer on every create/re-measure and consumed
    once per evaluation.  ``shelf_life_days`` is deliberately not range
    checked here: a non-positive value is reported by the calculator as
    an ``InvalidConfigurationError``.
    """
    batch_id: str = Field(..., min_length=1)
    entry_date: datetime
    shelf_life_days: float

    # Environmental readings (optional)
    temperature_c: float | None = None
    humidity_pct: float | None = None

    # Gas readings (optional, numeric or low/normal/high)
    ethylene: GasReading = None
    co2: GasReading = None
    ammonia: GasReading = None

    status: BatchStatus = BatchStatus.ACTIVE

    # Inventory details used by allocation and dispatch
    crop: str | None = None
    quantity: float | None = Field(None, ge=0)
    destination: str | None = None
    dispatch_date: datetime | None = None

    model_config = {"frozen": True}

    @field_validator("temperature_c", "humidity_pct", mode="before")
    @classmethod
    def _drop_nan_climate(cls, value, info):
        """A NaN reading is treated as missing so the default deviation applies."""
        if value is None or isinstance(value, bool):
            return value
        try:
            reading = to_float(value)
        except (TypeError, ValueError):
            # Left for pydantic to reject
            return value
        if math.isnan(reading):
            logger.debug("Ignoring NaN %s reading", info.field_name)
            return None
        return reading if isinstance(value, int) else value

    @field_validator("ethylene", "co2", "ammonia", mode="before")
    @classmethod
    def _drop_malformed_gas(cls, value, info):
        """Read unusable telemetry as absent instead of rejecting the batch."""
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            logger.debug("Ignoring malformed %s reading %r", info.field_name, value)
            return None
        reading = to_float(value)
        if math.isnan(reading):
            logger.debug("Ignoring NaN %s reading", info.field_name)
            return None
        return reading


# ── Lifecycle ────────────────────────────────────────────────

class DispatchCommand(BaseModel):
    """Operator instruction to send an active batch downstream."""
    destination: str = Field(..., min_length=1, max_length=255)
    dispatch_date: datetime


class LifecycleEvent(BaseModel):
    """One recorded status transition."""
    batch_id: str
    from_status: BatchStatus
    to_status: BatchStatus
    occurred_at: datetime
    destination: str | None = None
    reason: str | None = None


class DispatchRequest(BaseModel):
    """Payload for POST /api/lifecycle/dispatch."""
    batch: BatchSnapshot
    command: DispatchCommand


class ExpiryCheckRequest(BaseModel):
    """Payload for POST /api/lifecycle/expiry-check."""
    batch: BatchSnapshot
    now: datetime | None = None


class LifecycleOut(BaseModel):
    """Snapshot after a lifecycle operation, plus the event it produced."""
    batch: BatchSnapshot
    event: LifecycleEvent | None = None
    history: list[LifecycleEvent] = []
