"""Gas-level normalizer.

Sensors report ethylene, CO2 and ammonia either as a concentration
(expected range 0-10) or as a coarse low/normal/high label.  Both are
mapped onto a common 0-100 scale here.

Missing or unreadable readings never raise: they score ``DEFAULT_GAS_SCORE``
so a batch with partial telemetry can still be evaluated.
"""

import logging
import math
from decimal import Decimal

from app.schemas.batch import GasLevel
from app.utils.numbers import to_float

logger = logging.getLogger(__name__)

# Absent / unrecognised reading: moderate, not "all clear"
DEFAULT_GAS_SCORE = 30.0

# Concentration that saturates the score
GAS_SATURATION_CONCENTRATION = 10.0

GAS_LEVEL_SCORES: dict[GasLevel, float] = {
    GasLevel.LOW: 10.0,
    GasLevel.NORMAL: 40.0,
    GasLevel.HIGH: 85.0,
}


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def normalize_gas_level(value) -> float:
    """Map one gas reading to a score in [0, 100]."""
    if value is None:
        return DEFAULT_GAS_SCORE

    if isinstance(value, GasLevel):
        return GAS_LEVEL_SCORES[value]

    if isinstance(value, str):
        try:
            return GAS_LEVEL_SCORES[GasLevel(value.strip().lower())]
        except ValueError:
            logger.debug("Unrecognised gas label %r, using default", value)
            return DEFAULT_GAS_SCORE

    # bool is an int subclass but never a concentration
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        concentration = to_float(value)
        if math.isnan(concentration):
            logger.debug("NaN gas reading, using default")
            return DEFAULT_GAS_SCORE
        return _clamp(concentration / GAS_SATURATION_CONCENTRATION * 100)

    logger.debug("Malformed gas reading %r, using default", value)
    return DEFAULT_GAS_SCORE


def average_gas_score(ethylene, co2, ammonia) -> float:
    """Mean normalized score of the three monitored gases."""
    readings = (ethylene, co2, ammonia)
    return sum(normalize_gas_level(r) for r in readings) / len(readings)
