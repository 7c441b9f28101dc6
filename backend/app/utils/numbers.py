"""Numeric helpers for sensor telemetry."""

import math


def to_float(value) -> float:
    """Convert a numeric reading to float.

    Integers too large for a float saturate to +/-inf instead of raising
    ``OverflowError``; downstream clamping then maps them onto the scale.
    """
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf
