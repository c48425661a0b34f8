"""Tests for BMI computation and classification."""
import pytest

from healthtrack.analysis.bmi import BMICategory, classify_bmi, compute_bmi
from healthtrack.analysis.units import InvalidMeasurementError


class TestComputeBMI:
    def test_metric(self):
        assert compute_bmi(70, 175, "cm", "kg") == 22.9

    def test_imperial(self):
        assert compute_bmi(154, 69, "in", "lb") == pytest.approx(22.7, abs=0.05)

    def test_height_in_meters(self):
        assert compute_bmi(70, 1.75, "m", "kg") == 22.9

    def test_defaults_are_cm_and_kg(self):
        assert compute_bmi(70, 175) == 22.9

    def test_rounded_to_one_decimal(self):
        bmi = compute_bmi(81.3, 183.2)
        assert bmi == round(bmi, 1)

    @pytest.mark.parametrize("weight,height", [(0, 175), (-70, 175), (70, 0), (70, -1)])
    def test_non_positive_inputs_rejected(self, weight, height):
        with pytest.raises(InvalidMeasurementError):
            compute_bmi(weight, height)


class TestClassifyBMI:
    @pytest.mark.parametrize("bmi,expected", [
        (12.0, BMICategory.UNDERWEIGHT),
        (18.49, BMICategory.UNDERWEIGHT),
        (18.5, BMICategory.NORMAL),
        (24.99, BMICategory.NORMAL),
        (25.0, BMICategory.OVERWEIGHT),
        (29.9, BMICategory.OVERWEIGHT),
        (30.0, BMICategory.OBESITY),
        (45.0, BMICategory.OBESITY),
    ])
    def test_bands(self, bmi, expected):
        assert classify_bmi(bmi) is expected

    def test_category_labels(self):
        assert classify_bmi(22.9).value == "Normal weight"
        assert classify_bmi(31).value == "Obesity"
