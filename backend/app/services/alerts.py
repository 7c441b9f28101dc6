"""Sensor threshold alerts.

Compares a zone's latest reading against its configured limits:

    temperature   min / max   °C
    humidity      min / max   %
    ethylene      max         ppm
    co2           max         ppm
    ammonia       max         ppm

A breach is ``warning`` until the reading is more than ``CRITICAL_MARGIN``
(10% of the limit) beyond it, then ``critical``.  Channels without a
reading or without a limit are skipped.
"""

import logging
from datetime import datetime

from app.schemas.alerts import (
    AlertSeverity,
    AlertType,
    ExceededBound,
    SensorAlert,
    SensorReading,
    SensorThresholds,
    ThresholdBreach,
)
from app.utils.dates import as_utc, utcnow

logger = logging.getLogger(__name__)

CRITICAL_MARGIN = 0.10

# (type, reading field, min field, max field, label, unit)
_CHANNELS = (
    (AlertType.TEMPERATURE, "temperature", "temp_min", "temp_max", "Temperature", "°C"),
    (AlertType.HUMIDITY, "humidity", "humidity_min", "humidity_max", "Humidity", "%"),
    (AlertType.ETHYLENE, "ethylene", None, "ethylene_max", "Ethylene levels", " ppm"),
    (AlertType.CO2, "co2", None, "co2_max", "CO2 levels", " ppm"),
    (AlertType.AMMONIA, "ammonia", None, "ammonia_max", "Ammonia levels", " ppm"),
)


def check_threshold(
    value: float,
    minimum: float | None = None,
    maximum: float | None = None,
) -> ThresholdBreach | None:
    """Return the breach for ``value`` against the bounds, or None if within them.

    The critical margin is measured on the limit's magnitude, so a limit
    of 0 makes every breach critical.
    """
    if minimum is not None and value < minimum:
        margin = abs(minimum) * CRITICAL_MARGIN
        return ThresholdBreach(
            severity=AlertSeverity.CRITICAL if value < minimum - margin else AlertSeverity.WARNING,
            exceeded=ExceededBound.MIN,
            difference=round(minimum - value, 2),
        )

    if maximum is not None and value > maximum:
        margin = abs(maximum) * CRITICAL_MARGIN
        return ThresholdBreach(
            severity=AlertSeverity.CRITICAL if value > maximum + margin else AlertSeverity.WARNING,
            exceeded=ExceededBound.MAX,
            difference=round(value - maximum, 2),
        )

    return None


def detect_alerts(
    reading: SensorReading,
    thresholds: SensorThresholds,
    now: datetime | None = None,
) -> list[SensorAlert]:
    """All threshold breaches in ``reading``, in channel order."""
    triggered_at = as_utc(now) if now else utcnow()
    alerts: list[SensorAlert] = []

    for alert_type, field, min_field, max_field, label, unit in _CHANNELS:
        value = getattr(reading, field)
        if value is None:
            continue

        minimum = getattr(thresholds, min_field) if min_field else None
        maximum = getattr(thresholds, max_field)
        breach = check_threshold(value, minimum, maximum)
        if breach is None:
            continue

        limit = maximum if breach.exceeded is ExceededBound.MAX else minimum
        direction = "above" if breach.exceeded is ExceededBound.MAX else "below"
        alerts.append(SensorAlert(
            warehouse_id=reading.warehouse_id,
            zone=reading.zone,
            alert_type=alert_type,
            severity=breach.severity,
            message=(
                f"{label} {direction} threshold in {reading.zone}: "
                f"{value}{unit} (threshold: {limit}{unit})"
            ),
            current_value=value,
            threshold_value=limit,
            triggered_at=triggered_at,
        ))

    if alerts:
        logger.info(
            "Zone %s: %d alert(s), %d critical",
            reading.zone,
            len(alerts),
            count_critical(alerts),
        )
    return alerts


def count_critical(alerts: list[SensorAlert]) -> int:
    return sum(1 for a in alerts if a.severity is AlertSeverity.CRITICAL)
