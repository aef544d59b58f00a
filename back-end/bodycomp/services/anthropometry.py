"""
Anthropometry helpers that sit next to the skinfold engine on an assessment.

BMI = weight (kg) / height (m)²
"""

import logging

logger = logging.getLogger(__name__)


def calculate_bmi(weight_kg: float | None, height_cm: float | None) -> float | None:
    """
    Body mass index rounded to one decimal.

    Returns None while either value has not been informed.

    Raises:
        ValueError: If weight or height is not positive.
    """
    if weight_kg is None or height_cm is None:
        return None
    if weight_kg <= 0 or height_cm <= 0:
        raise ValueError("Weight and height must be positive values")

    height_m = height_cm / 100.0
    bmi = weight_kg / (height_m * height_m)

    logger.debug(f"BMI: weight={weight_kg}kg, height={height_cm}cm -> {bmi:.2f}")

    return round(bmi, 1)
