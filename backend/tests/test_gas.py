"""Tests for the gas-level normalizer."""

from decimal import Decimal

import pytest

from app.schemas.batch import GasLevel
from app.services.gas import (
    DEFAULT_GAS_SCORE,
    GAS_LEVEL_SCORES,
    average_gas_score,
    normalize_gas_level,
)


@pytest.mark.unit
class TestCategoricalReadings:
    """Labels map through a fixed table, case-insensitively."""

    def test_label_table(self):
        assert GAS_LEVEL_SCORES == {
            GasLevel.LOW: 10.0,
            GasLevel.NORMAL: 40.0,
            GasLevel.HIGH: 85.0,
        }

    @pytest.mark.parametrize("label,expected", [
        ("low", 10.0),
        ("LOW", 10.0),
        ("Normal", 40.0),
        (" high ", 85.0),
        (GasLevel.HIGH, 85.0),
    ])
    def test_labels(self, label, expected):
        assert normalize_gas_level(label) == expected

    @pytest.mark.parametrize("label", ["", "critical", "5", "n/a"])
    def test_unknown_label_uses_default(self, label):
        assert normalize_gas_level(label) == DEFAULT_GAS_SCORE


@pytest.mark.unit
class TestNumericReadings:
    """Concentrations scale linearly to 100 at 10 units."""

    @pytest.mark.parametrize("value,expected", [
        (0, 0.0),
        (2.5, 25.0),
        (5, 50.0),
        (10, 100.0),
        (Decimal("4"), 40.0),
    ])
    def test_linear_scale(self, value, expected):
        assert normalize_gas_level(value) == pytest.approx(expected)

    def test_saturates_at_100(self):
        assert normalize_gas_level(250) == 100.0

    def test_negative_concentration_clamped_to_zero(self):
        assert normalize_gas_level(-3) == 0.0

    def test_oversized_integer_saturates(self):
        assert normalize_gas_level(10**400) == 100.0
        assert normalize_gas_level(-(10**400)) == 0.0


@pytest.mark.unit
class TestMissingOrMalformed:
    """Absent and unusable readings fall back to the default, never raise."""

    def test_absent(self):
        assert normalize_gas_level(None) == 30.0

    @pytest.mark.parametrize("value", [True, False, [1, 2], {"ppm": 3}, object(), float("nan")])
    def test_malformed(self, value):
        assert normalize_gas_level(value) == DEFAULT_GAS_SCORE

    def test_average_of_all_missing(self):
        assert average_gas_score(None, None, None) == 30.0

    def test_average_mixes_numeric_and_labels(self):
        # (10 + 40 + 100) / 3
        assert average_gas_score("low", "normal", 12) == pytest.approx(50.0)
