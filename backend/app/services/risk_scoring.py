"""Risk score calculator.

Combines four factors into a single 0-100 spoilage risk score:

    storage duration vs shelf life   weight_shelf_life   (0.40)
    temperature deviation            weight_temperature  (0.25)
    humidity deviation               weight_humidity     (0.15)
    gas levels                       weight_gas          (0.20)

Every sub-score is clamped to [0, 100] before weighting, and the weighted
sum is clamped again and rounded half-up.  All constants come from the
``RiskPolicy`` handed in by the caller; the module keeps no state, so
batches can be scored concurrently.
"""

import logging
import math
from datetime import datetime

from app.config import RiskPolicy
from app.middleware.exceptions import InvalidConfigurationError
from app.schemas.batch import BatchSnapshot
from app.schemas.risk import RiskAssessment, RiskFactors
from app.services.classification import classify_risk
from app.services.gas import average_gas_score
from app.utils.dates import as_utc, elapsed_days

logger = logging.getLogger(__name__)

DEFAULT_POLICY = RiskPolicy()


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def ensure_valid_shelf_life(batch_id: str, shelf_life_days: float) -> None:
    """Raise InvalidConfigurationError unless shelf life is a positive number."""
    # `not >` also rejects NaN
    if not shelf_life_days > 0:
        logger.warning(
            "Batch %s has invalid shelf life %r", batch_id, shelf_life_days
        )
        raise InvalidConfigurationError(
            f"Batch {batch_id}: shelf_life_days must be > 0 (got {shelf_life_days})",
            field="shelf_life_days",
        )


def _deviation_score(
    reading: float | None,
    optimal: float,
    default_deviation: float,
    sensitivity: float,
) -> float:
    deviation = abs(reading - optimal) if reading is not None else default_deviation
    return _clamp(deviation * sensitivity)


def calculate_risk_factors(
    batch: BatchSnapshot,
    now: datetime,
    policy: RiskPolicy | None = None,
) -> RiskFactors:
    """Compute the four sub-scores for ``batch`` as of ``now``.

    Raises:
        InvalidConfigurationError: if ``shelf_life_days`` is not positive.
    """
    policy = policy or DEFAULT_POLICY
    ensure_valid_shelf_life(batch.batch_id, batch.shelf_life_days)

    if as_utc(batch.entry_date) > as_utc(now):
        logger.debug("Batch %s entry date is after %s; elapsed set to 0", batch.batch_id, now)

    elapsed = elapsed_days(batch.entry_date, now)
    shelf_life_pct = _clamp(elapsed / batch.shelf_life_days * 100)

    temperature_score = _deviation_score(
        batch.temperature_c,
        policy.optimal_temperature_c,
        policy.default_temperature_deviation,
        policy.temperature_sensitivity,
    )
    humidity_score = _deviation_score(
        batch.humidity_pct,
        policy.optimal_humidity_pct,
        policy.default_humidity_deviation,
        policy.humidity_sensitivity,
    )
    gas_score = _clamp(average_gas_score(batch.ethylene, batch.co2, batch.ammonia))

    return RiskFactors(
        elapsed_days=elapsed,
        remaining_shelf_life_days=max(0.0, batch.shelf_life_days - elapsed),
        shelf_life_pct=shelf_life_pct,
        temperature_score=temperature_score,
        humidity_score=humidity_score,
        gas_score=gas_score,
    )


def combine_factors(factors: RiskFactors, policy: RiskPolicy | None = None) -> int:
    """Weighted sum of the sub-scores, clamped and rounded to an int."""
    policy = policy or DEFAULT_POLICY
    overall = (
        factors.shelf_life_pct * policy.weight_shelf_life
        + factors.temperature_score * policy.weight_temperature
        + factors.humidity_score * policy.weight_humidity
        + factors.gas_score * policy.weight_gas
    )
    return round_half_up(_clamp(overall))


def calculate_risk_score(
    batch: BatchSnapshot,
    now: datetime,
    policy: RiskPolicy | None = None,
) -> int:
    """Overall risk score (0-100) for ``batch`` as of ``now``."""
    return combine_factors(calculate_risk_factors(batch, now, policy), policy)


def assess_risk(
    batch: BatchSnapshot,
    now: datetime,
    policy: RiskPolicy | None = None,
) -> RiskAssessment:
    """Score and classify ``batch``.  ``computed_at`` is ``now`` itself."""
    factors = calculate_risk_factors(batch, now, policy)
    score = combine_factors(factors, policy)
    tier = classify_risk(score, policy)

    logger.debug("Batch %s scored %d (%s)", batch.batch_id, score, tier.value)

    return RiskAssessment(
        batch_id=batch.batch_id,
        score=score,
        tier=tier,
        computed_at=as_utc(now),
        factors=factors,
    )
