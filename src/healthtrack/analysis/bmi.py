"""
Body Mass Index: weight in kilograms divided by height in meters squared.

Inputs arrive in whatever units the user's settings name; they are
normalised here, never by the caller.
"""
from enum import Enum
from typing import List, Optional, Tuple

from healthtrack.analysis.units import (
    HeightUnit,
    InvalidMeasurementError,
    WeightUnit,
    height_to_meters,
    weight_to_kg,
)


class BMICategory(str, Enum):
    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal weight"
    OVERWEIGHT = "Overweight"
    OBESITY = "Obesity"


# (category, lower bound inclusive, upper bound exclusive)
BMI_RANGES: List[Tuple[BMICategory, float, Optional[float]]] = [
    (BMICategory.UNDERWEIGHT, 0.0, 18.5),
    (BMICategory.NORMAL, 18.5, 25.0),
    (BMICategory.OVERWEIGHT, 25.0, 30.0),
    (BMICategory.OBESITY, 30.0, None),
]


def compute_bmi(
    weight: float,
    height: float,
    height_unit=HeightUnit.CM,
    weight_unit=WeightUnit.KG,
) -> float:
    """
    Compute BMI from a unit-tagged weight and height.

    Args:
        weight: body weight in weight_unit
        height: body height in height_unit
        height_unit: "cm", "in" or "m"
        weight_unit: "kg" or "lb"

    Returns:
        BMI rounded to one decimal.

    Raises:
        InvalidMeasurementError: if weight or height is zero or negative.
    """
    if weight is None or weight <= 0:
        raise InvalidMeasurementError(f"Weight must be positive, got {weight}")
    if height is None or height <= 0:
        raise InvalidMeasurementError(f"Height must be positive, got {height}")

    weight_kg = weight_to_kg(weight, weight_unit)
    height_m = height_to_meters(height, height_unit)
    return round(weight_kg / (height_m * height_m), 1)


def classify_bmi(bmi: float) -> BMICategory:
    """Map a BMI value onto its WHO band (lower bound inclusive)."""
    for category, _, upper in BMI_RANGES:
        if upper is None or bmi < upper:
            return category
    return BMICategory.OBESITY
