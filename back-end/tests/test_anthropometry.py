"""Tests for the BMI helper."""

import pytest

from bodycomp.services.anthropometry import calculate_bmi


class TestCalculateBmi:

    def test_known_value(self):
        assert calculate_bmi(80.0, 180.0) == 24.7

    def test_rounds_to_one_decimal(self):
        """62 kg / 1.65 m² = 22.773..."""
        assert calculate_bmi(62.0, 165.0) == 22.8

    def test_missing_values_return_none(self):
        assert calculate_bmi(None, 180.0) is None
        assert calculate_bmi(80.0, None) is None

    def test_non_positive_values_raise(self):
        with pytest.raises(ValueError, match="must be positive"):
            calculate_bmi(0.0, 180.0)
        with pytest.raises(ValueError, match="must be positive"):
            calculate_bmi(80.0, -1.0)
