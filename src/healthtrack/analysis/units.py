"""
Weight and height unit handling.

Weights are stored in kilograms and heights in whatever unit the user's
settings name. Conversions between display units always route through a
canonical base unit: kilograms for weight, centimeters for height.
"""
import math
from enum import Enum

# 1 kilogram in pounds
LB_PER_KG = 2.20462
CM_PER_INCH = 2.54
CM_PER_METER = 100.0


class InvalidMeasurementError(ValueError):
    """A measurement or clock value is malformed or outside its domain."""


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounding up (12.5 -> 13, unlike round())."""
    return math.floor(value + 0.5)


def require_finite(value):
    """Reject inf/nan; passes None through for optional fields."""
    if value is not None and not math.isfinite(value):
        raise InvalidMeasurementError(f"Value must be a finite number, got {value}")
    return value


class WeightUnit(str, Enum):
    KG = "kg"
    LB = "lb"


class HeightUnit(str, Enum):
    CM = "cm"
    IN = "in"
    M = "m"


def _weight_unit(unit) -> WeightUnit:
    try:
        return WeightUnit(unit)
    except ValueError:
        raise InvalidMeasurementError(f"Unknown weight unit: {unit!r}") from None


def _height_unit(unit) -> HeightUnit:
    try:
        return HeightUnit(unit)
    except ValueError:
        raise InvalidMeasurementError(f"Unknown height unit: {unit!r}") from None


def weight_to_kg(value: float, unit) -> float:
    """Normalise a weight to kilograms (unrounded)."""
    if _weight_unit(unit) is WeightUnit.LB:
        return value / LB_PER_KG
    return float(value)


def height_to_cm(value: float, unit) -> float:
    """Normalise a height to centimeters (unrounded)."""
    unit = _height_unit(unit)
    if unit is HeightUnit.IN:
        return value * CM_PER_INCH
    if unit is HeightUnit.M:
        return value * CM_PER_METER
    return float(value)


def height_to_meters(value: float, unit) -> float:
    """Normalise a height to meters (unrounded)."""
    return height_to_cm(value, unit) / CM_PER_METER


def convert_weight(value: float, from_unit, to_unit) -> float:
    """
    Convert a weight between display units.

    Args:
        value: weight expressed in from_unit
        from_unit: "kg" or "lb"
        to_unit: "kg" or "lb"

    Returns:
        The weight in to_unit, rounded to one decimal. When the units are
        the same the value is returned untouched.
    """
    src, dst = _weight_unit(from_unit), _weight_unit(to_unit)
    if src is dst:
        return value
    kg = weight_to_kg(value, src)
    if dst is WeightUnit.LB:
        return round(kg * LB_PER_KG, 1)
    return round(kg, 1)


def convert_height(value: float, from_unit, to_unit) -> float:
    """
    Convert a height between display units via centimeters.

    Centimeter and inch results are rounded to one decimal, meters to two.
    """
    src, dst = _height_unit(from_unit), _height_unit(to_unit)
    if src is dst:
        return value
    cm = height_to_cm(value, src)
    if dst is HeightUnit.CM:
        return round(cm, 1)
    if dst is HeightUnit.IN:
        return round(cm / CM_PER_INCH, 1)
    return round(cm / CM_PER_METER, 2)
