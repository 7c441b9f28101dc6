"""Pydantic schemas for warehouse sensor readings and threshold alerts."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class AlertType(str, Enum):
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    ETHYLENE = "ethylene"
    CO2 = "co2"
    AMMONIA = "ammonia"


class AlertSeverity(str, Enum):
    """``critical`` once a reading is more than 10% past its limit."""
    WARNING = "warning"
    CRITICAL = "critical"


class ExceededBound(str, Enum):
    MIN = "min"
    MAX = "max"


# ── Thresholds ───────────────────────────────────────────────

class SensorThresholds(BaseModel):
    """Acceptable ranges for one warehouse zone.

    Temperature and humidity have a band; the gases only an upper limit.
    A ``None`` bound is not checked.
    """
    temp_min: float | None = None
    temp_max: float | None = None
    humidity_min: float | None = Field(None, ge=0, le=100)
    humidity_max: float | None = Field(None, ge=0, le=100)
    ethylene_max: float | None = Field(None, ge=0)
    co2_max: float | None = Field(None, ge=0)
    ammonia_max: float | None = Field(None, ge=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_bands(self):
        for low, high in (
            ("temp_min", "temp_max"),
            ("humidity_min", "humidity_max"),
        ):
            lo, hi = getattr(self, low), getattr(self, high)
            if lo is not None and hi is not None and lo > hi:
                raise ValueError(f"{low} ({lo}) must not exceed {high} ({hi})")
        return self


# ── Readings / alerts ────────────────────────────────────────

class SensorReading(BaseModel):
    """One polling cycle of a zone's sensors; missing channels are skipped."""
    warehouse_id: str | None = None
    zone: str = Field(..., min_length=1)
    temperature: float | None = None
    humidity: float | None = None
    ethylene: float | None = None
    co2: float | None = None
    ammonia: float | None = None
    reading_time: datetime | None = None


class ThresholdBreach(BaseModel):
    severity: AlertSeverity
    exceeded: ExceededBound
    difference: float


class SensorAlert(BaseModel):
    warehouse_id: str | None = None
    zone: str
    alert_type: AlertType
    severity: AlertSeverity
    message: str
    current_value: float
    threshold_value: float
    triggered_at: datetime


class AlertCheckRequest(BaseModel):
    """Payload for POST /api/alerts/detect."""
    reading: SensorReading
    thresholds: SensorThresholds
    now: datetime | None = None


class AlertCheckResponse(BaseModel):
    items: list[SensorAlert]
    total: int
    critical: int
