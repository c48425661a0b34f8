"""Tests for weight/height unit conversion."""
import pytest

from healthtrack.analysis.units import (
    HeightUnit,
    InvalidMeasurementError,
    WeightUnit,
    convert_height,
    convert_weight,
    height_to_cm,
    height_to_meters,
    weight_to_kg,
)


class TestConvertWeight:
    def test_kg_to_lb(self):
        assert convert_weight(70, "kg", "lb") == 154.3

    def test_lb_to_kg(self):
        assert convert_weight(154.3, "lb", "kg") == 70.0

    def test_same_unit_is_untouched(self):
        assert convert_weight(70.123, WeightUnit.KG, WeightUnit.KG) == 70.123

    @pytest.mark.parametrize("kg", [45.0, 62.5, 70.0, 88.8, 120.4])
    def test_round_trip_within_one_decimal(self, kg):
        there = convert_weight(kg, "kg", "lb")
        back = convert_weight(there, "lb", "kg")
        assert abs(back - kg) <= 0.1

    def test_unknown_unit_rejected(self):
        with pytest.raises(InvalidMeasurementError):
            convert_weight(70, "kg", "stone")


class TestConvertHeight:
    def test_cm_to_in(self):
        assert convert_height(175, "cm", "in") == 68.9

    def test_in_to_cm(self):
        assert convert_height(69, "in", "cm") == 175.3

    def test_cm_to_m_keeps_two_decimals(self):
        assert convert_height(175, HeightUnit.CM, HeightUnit.M) == 1.75

    def test_m_to_in(self):
        assert convert_height(1.8, "m", "in") == 70.9

    def test_same_unit_is_untouched(self):
        assert convert_height(175.25, "cm", "cm") == 175.25


class TestNormalisation:
    def test_weight_to_kg_from_lb(self):
        assert weight_to_kg(2.20462, "lb") == pytest.approx(1.0)

    def test_height_to_cm(self):
        assert height_to_cm(10, "in") == pytest.approx(25.4)

    def test_height_to_meters(self):
        assert height_to_meters(180, "cm") == pytest.approx(1.8)

    def test_invalid_measurement_is_value_error(self):
        assert issubclass(InvalidMeasurementError, ValueError)
