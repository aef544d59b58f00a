"""
Body Fat Calculation Service
==============================
Estimates body density, body fat percentage and lean/fat mass from skinfold
(caliper) measurements, using one of the protocols in the catalog.

PIPELINE (one call to `calculate_body_fat`):
  1. Gate     — every site required by (protocol, gender) must be present,
                otherwise the result is None ("not computable yet").
  2. Sum      — S = sum of the required sites only; extra sites are ignored.
  3. Density  — regression equation for (protocol, gender), see table below.
  4. Convert  — Siri (1961): Body Fat % = (495 / Body Density) - 450
  5. Derive   — fat mass = weight × %BF / 100, lean mass = weight − fat mass
  6. Assemble — CalculationResult

DENSITY EQUATIONS (S in mm, age in years):
  Pollock 3, male:    1.10938   - 0.0008267·S  + 0.0000016·S²  - 0.0002574·age
  Pollock 3, female:  1.0994921 - 0.0009929·S  + 0.0000023·S²  - 0.0001392·age
  Pollock 7, male:    1.112     - 0.00043499·S + 0.00000055·S² - 0.00028826·age
  Pollock 7, female:  1.097     - 0.00046971·S + 0.00000056·S² - 0.00012828·age
  Guedes, male:       1.17136   - 0.06706·log10(S)
  Guedes, female:     1.16650   - 0.07063·log10(S)

References:
  Jackson, A.S. & Pollock, M.L. (1978). Generalized equations for predicting
  body density of men. British Journal of Nutrition, 40, 497-504.
  Jackson, A.S., Pollock, M.L. & Ward, A. (1980). Generalized equations for
  predicting body density of women. Medicine and Science in Sports and
  Exercise, 12, 175-182.
  Guedes, D.P. (1985). Estudo da gordura corporal através da mensuração dos
  valores de densidade corporal e da espessura de dobras cutâneas em
  universitários. Kinesis, 1(2), 183-212.

Everything here is pure arithmetic: identical inputs always give identical
outputs, so callers can safely recompute on every keystroke.
"""

import logging
import math
from dataclasses import dataclass
from typing import Mapping

from bodycomp.core.config import settings
from bodycomp.models import (
    CalculationResult,
    Gender,
    Protocol,
    SkinfoldMeasurement,
)
from bodycomp.services.protocols import (
    missing_sites,
    protocol_display_name,
    required_sites,
)

logger = logging.getLogger(__name__)

# Physically meaningful body density band (g/cm³). Siri maps it to ~0–100 %.
DENSITY_MIN = 0.90
DENSITY_MAX = 1.10

# Display precision
DENSITY_DECIMALS = 5
FAT_PERCENT_DECIMALS = 1
MASS_DECIMALS = 2

# Lean mass keeps the precision of the weight itself; this only strips float noise
LEAN_MASS_DECIMALS = 9


@dataclass(frozen=True)
class DensityEquation:
    """
    Coefficients of one body density regression:

        D = intercept - linear·S + quadratic·S² - age·years - log10·log10(S)

    Pollock equations leave `log10` at zero; Guedes equations only use it.
    """
    intercept: float
    linear: float = 0.0
    quadratic: float = 0.0
    age: float = 0.0
    log10: float = 0.0

    def evaluate(self, skinfold_sum: float, age_years: float) -> float:
        s = skinfold_sum
        density = (
            self.intercept
            - (self.linear * s)
            + (self.quadratic * s * s)
            - (self.age * age_years)
        )
        if self.log10:
            density -= self.log10 * math.log10(s)
        return density


DENSITY_EQUATIONS: Mapping[tuple[Protocol, Gender], DensityEquation] = {
    (Protocol.POLLOCK3, Gender.MALE): DensityEquation(
        intercept=1.10938, linear=0.0008267, quadratic=0.0000016, age=0.0002574,
    ),
    (Protocol.POLLOCK3, Gender.FEMALE): DensityEquation(
        intercept=1.0994921, linear=0.0009929, quadratic=0.0000023, age=0.0001392,
    ),
    (Protocol.POLLOCK7, Gender.MALE): DensityEquation(
        intercept=1.112, linear=0.00043499, quadratic=0.00000055, age=0.00028826,
    ),
    (Protocol.POLLOCK7, Gender.FEMALE): DensityEquation(
        intercept=1.097, linear=0.00046971, quadratic=0.00000056, age=0.00012828,
    ),
    (Protocol.GUEDES, Gender.MALE): DensityEquation(
        intercept=1.17136, log10=0.06706,
    ),
    (Protocol.GUEDES, Gender.FEMALE): DensityEquation(
        intercept=1.16650, log10=0.07063,
    ),
}


def body_density(
    protocol: Protocol | str,
    gender: Gender | str,
    age_years: int,
    skinfold_sum: float,
) -> float | None:
    """
    Calculate body density with the regression equation of (protocol, gender).

    `skinfold_sum` must be the sum of exactly the sites `required_sites()`
    designates for the same pair; the caller is responsible for that.

    Args:
        protocol: Protocol whose equation to use
        gender: Selects the male or female variant
        age_years: Age of the subject in years (ignored by Guedes)
        skinfold_sum: Sum of the required skinfolds in millimeters

    Returns:
        Body density in g/cm³ at full precision, or None when the sum is not a
        positive finite number (degenerate input).

    Raises:
        ValueError: If the protocol or gender is not a known value.
    """
    protocol = Protocol(protocol)
    gender = Gender(gender)
    equation = DENSITY_EQUATIONS[(protocol, gender)]

    if not math.isfinite(skinfold_sum) or skinfold_sum <= 0:
        logger.warning(
            f"Degenerate skinfold sum for {protocol.value}/"
            f"{gender.value}: {skinfold_sum}. Density not computed."
        )
        return None

    density = equation.evaluate(skinfold_sum, age_years)

    logger.debug(
        f"Density calculation: protocol={protocol.value}, "
        f"gender={gender.value}, sum_skinfolds={skinfold_sum}mm, "
        f"age={age_years}, body_density={density:.6f} g/cm³"
    )

    return density


def body_density_to_fat_percent(body_density: float) -> float:
    """
    Convert body density to body fat percentage using the Siri equation.

    Formula:
        Body Fat % = (495 / Body Density) - 450

    The value is returned at full precision; rounding for display happens when
    the result is assembled, so derived masses do not compound rounding error.

    Raises:
        ValueError: If the density is not a positive finite number.

    Reference:
        Siri, W.E. (1961). Body composition from fluid spaces and density:
        Analysis of methods. In J. Brozek & A. Henschel (Eds.), Techniques for
        Measuring Body Composition (pp. 223-224). Washington, DC: National
        Academy of Sciences.
    """
    if not math.isfinite(body_density) or body_density <= 0:
        raise ValueError(f"Invalid body density: {body_density}")

    return (495.0 / body_density) - 450.0


def derive_masses(weight_kg: float, fat_percentage: float) -> tuple[float, float]:
    """
    Split total body weight into (lean_mass, fat_mass), both in kg.

    Fat mass is computed first and rounded for display; lean mass is the
    remainder, so the two always add up to `weight_kg`. The remainder is
    rounded far below any weight precision only to drop float noise
    (61.3 - 8.35 is 52.95, not 52.949999999999996).

    Raises:
        ValueError: If the weight is not positive or the percentage is
            outside [0, 100].
    """
    if not math.isfinite(weight_kg) or weight_kg <= 0:
        raise ValueError(f"Weight must be positive, got {weight_kg}")
    if not 0.0 <= fat_percentage <= 100.0:
        raise ValueError(
            f"Body fat percentage must be between 0 and 100, got {fat_percentage}"
        )

    fat_mass = round(weight_kg * fat_percentage / 100.0, MASS_DECIMALS)
    lean_mass = round(weight_kg - fat_mass, LEAN_MASS_DECIMALS)
    return lean_mass, fat_mass


def _valid_positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def calculate_body_fat(
    protocol: Protocol | str,
    gender: Gender | str,
    age_years: int | None,
    weight_kg: float | None,
    skinfolds: SkinfoldMeasurement | Mapping,
    plausible_range: tuple[float, float] | None = None,
) -> CalculationResult | None:
    """
    Complete body fat calculation from skinfold measurements.

    This is the main entry point for the body fat calculation service. It is
    meant to be called on every input change while a form is being filled:
    returning None is the normal "not computable yet" answer, not an error.

    Args:
        protocol: pollock3, pollock7 or guedes
        gender: male or female
        age_years: Age of the subject (None while not yet informed)
        weight_kg: Body weight in kg (None while not yet informed)
        skinfolds: Readings in mm, as a SkinfoldMeasurement or a plain
            mapping of site -> value (None values count as absent)
        plausible_range: (min, max) body fat % considered physiologically
            plausible, compared against the rounded (displayed) percentage.
            Defaults to the PLAUSIBLE_FAT_* settings.

    Returns:
        CalculationResult, or None when:
          - a required site, the age or the weight is missing
          - any of them is non-positive or non-finite
          - the computed density falls outside [0.90, 1.10] g/cm³

    Raises:
        ValueError: If the protocol, gender or a site name is unknown.
    """
    protocol = Protocol(protocol)
    gender = Gender(gender)
    if not isinstance(skinfolds, SkinfoldMeasurement):
        skinfolds = SkinfoldMeasurement.from_mapping(skinfolds)

    # 1. Gate: completeness
    missing = missing_sites(protocol, gender, skinfolds)
    if missing or age_years is None or weight_kg is None:
        logger.debug(
            f"Insufficient data for {protocol.value}/{gender.value}: "
            f"missing_sites={[site.value for site in missing]}, "
            f"age={age_years}, weight={weight_kg}"
        )
        return None

    if not _valid_positive(age_years) or not _valid_positive(weight_kg):
        logger.warning(
            f"Invalid subject data: age={age_years}, weight={weight_kg}. "
            f"Body fat not computed."
        )
        return None

    sites = required_sites(protocol, gender)
    readings = [skinfolds.get(site) for site in sites]
    if not all(_valid_positive(value) for value in readings):
        logger.warning(
            f"Non-positive skinfold reading for {protocol.value}/{gender.value}: "
            f"{dict(zip([site.value for site in sites], readings))}"
        )
        return None

    # 2. Sum only the sites the protocol requires
    skinfold_sum = sum(readings)

    # 3. Density
    density = body_density(protocol, gender, age_years, skinfold_sum)
    if density is None:
        return None
    if not DENSITY_MIN <= density <= DENSITY_MAX:
        logger.warning(
            f"Body density {density:.5f} g/cm³ outside "
            f"[{DENSITY_MIN}, {DENSITY_MAX}] for {protocol.value}/{gender.value} "
            f"(sum_skinfolds={skinfold_sum}mm, age={age_years}). Result discarded."
        )
        return None

    # 4. Convert (full precision kept for the mass split)
    fat_percent = body_density_to_fat_percent(density)
    if not 0.0 <= fat_percent <= 100.0:
        logger.warning(
            f"Body fat {fat_percent:.4f}% outside [0, 100] for density "
            f"{density:.6f} g/cm³. Result discarded."
        )
        return None

    low, high = plausible_range or (
        settings.PLAUSIBLE_FAT_MIN_PERCENT,
        settings.PLAUSIBLE_FAT_MAX_PERCENT,
    )
    display_percent = round(fat_percent, FAT_PERCENT_DECIMALS)
    is_plausible = low <= display_percent <= high
    if not is_plausible:
        logger.warning(
            f"Implausible body fat {fat_percent:.1f}% for {protocol.value}/"
            f"{gender.value} (expected {low}–{high}%). Reporting it flagged."
        )

    # 5. Derive
    lean_mass, fat_mass = derive_masses(weight_kg, fat_percent)

    # 6. Assemble
    result = CalculationResult(
        protocol=protocol,
        gender=gender,
        protocol_name=protocol_display_name(protocol, gender),
        sum_of_skinfolds=round(skinfold_sum, 2),
        body_density=round(density, DENSITY_DECIMALS),
        body_fat_percentage=display_percent,
        lean_mass=lean_mass,
        fat_mass=fat_mass,
        is_plausible=is_plausible,
    )

    logger.info(
        f"Body fat calculated ({result.protocol_name}): "
        f"sum_skinfolds={result.sum_of_skinfolds}mm, "
        f"density={result.body_density}, fat={result.body_fat_percentage}%, "
        f"fat_mass={result.fat_mass}kg, lean_mass={result.lean_mass:.2f}kg"
    )

    return result
