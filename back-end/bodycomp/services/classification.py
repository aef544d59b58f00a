"""
Body Fat Classification
========================
Maps a body fat percentage to a qualitative band, per gender.

Bands are half-open intervals [low, high) that start at 0 and end at +inf,
so every non-negative percentage falls into exactly one of them:

  Band        | Male       | Female
  ------------|------------|-----------
  Essencial   | 0  – 6     | 0  – 14
  Atleta      | 6  – 14    | 14 – 21
  Fitness     | 14 – 18    | 21 – 25
  Aceitável   | 18 – 25    | 25 – 32
  Obesidade   | 25 +       | 32 +

Thresholds follow the American Council on Exercise (ACE) body fat chart.
"""

import math
from typing import Mapping

from bodycomp.models import ClassificationBand, Gender

CLASSIFICATION_BANDS: Mapping[Gender, tuple[ClassificationBand, ...]] = {
    Gender.MALE: (
        ClassificationBand("essential", "Essencial", "text-blue-500", 0.0, 6.0),
        ClassificationBand("athletic", "Atleta", "text-emerald-500", 6.0, 14.0),
        ClassificationBand("fitness", "Fitness", "text-green-500", 14.0, 18.0),
        ClassificationBand("acceptable", "Aceitável", "text-yellow-500", 18.0, 25.0),
        ClassificationBand("obese", "Obesidade", "text-red-500", 25.0),
    ),
    Gender.FEMALE: (
        ClassificationBand("essential", "Essencial", "text-blue-500", 0.0, 14.0),
        ClassificationBand("athletic", "Atleta", "text-emerald-500", 14.0, 21.0),
        ClassificationBand("fitness", "Fitness", "text-green-500", 21.0, 25.0),
        ClassificationBand("acceptable", "Aceitável", "text-yellow-500", 25.0, 32.0),
        ClassificationBand("obese", "Obesidade", "text-red-500", 32.0),
    ),
}


def classify(body_fat_percentage: float, gender: Gender | str) -> ClassificationBand:
    """
    Return the band that contains `body_fat_percentage` for `gender`.

    Raises:
        ValueError: If the gender is unknown or the percentage is negative
            or not a finite number.
    """
    bands = CLASSIFICATION_BANDS[Gender(gender)]

    if not math.isfinite(body_fat_percentage) or body_fat_percentage < 0:
        raise ValueError(
            f"Body fat percentage must be a non-negative number, got {body_fat_percentage}"
        )

    for band in bands:
        if band.contains(body_fat_percentage):
            return band

    # Unreachable while the last band is open-ended
    raise ValueError(f"No classification band for {body_fat_percentage}%")
