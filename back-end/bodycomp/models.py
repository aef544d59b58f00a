"""
Body Composition Domain Models
===============================
Value objects shared by the calculation services, the schemas and the routers.

Nothing here is persisted: every object is created fresh for one calculation
and handed back to the caller, who decides where (and whether) to store it.

Entity overview:
  - Gender / Protocol / SkinfoldSite : closed enums, str-valued for easy JSON
  - SkinfoldMeasurement              : partial mapping site -> millimeters
  - CalculationResult                : output of one body fat calculation
  - ClassificationBand               : one qualitative band of a fat percentage
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Gender(str, Enum):
    """Biological sex used to select the regression equation variant."""
    MALE = "male"
    FEMALE = "female"


class Protocol(str, Enum):
    """Skinfold-based estimation methods supported by the engine."""
    POLLOCK3 = "pollock3"
    POLLOCK7 = "pollock7"
    GUEDES = "guedes"


class SkinfoldSite(str, Enum):
    """Anatomical caliper sites. All values are measured in millimeters."""
    TRICEPS = "triceps"
    CHEST = "chest"
    ABDOMINAL = "abdominal"
    SUPRAILIAC = "suprailiac"
    THIGH = "thigh"
    SUBSCAPULAR = "subscapular"
    AXILLARY = "axillary"


@dataclass(frozen=True)
class SkinfoldMeasurement:
    """
    Partial set of skinfold readings collected during an assessment.

    Sites that were not measured are simply absent from `values`; a site is
    never stored as zero to mean "missing". Use `is_set()` to ask whether a
    reading exists instead of checking for falsy values.

    The readings are copied into a read-only view on construction, so later
    edits to the source mapping do not leak in, and the object is hashable.
    """
    values: Mapping[SkinfoldSite, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __hash__(self) -> int:
        return hash(frozenset(self.values.items()))

    @classmethod
    def from_mapping(cls, raw: Mapping) -> "SkinfoldMeasurement":
        """
        Build a measurement from a loosely-typed mapping (e.g. form data).

        Keys may be `SkinfoldSite` members or their string values; entries whose
        value is None are dropped. An unknown site name raises ValueError.
        """
        values = {}
        for site, value in raw.items():
            if value is None:
                continue
            values[SkinfoldSite(site)] = float(value)
        return cls(values=values)

    def is_set(self, site: SkinfoldSite) -> bool:
        return site in self.values

    def get(self, site: SkinfoldSite) -> float | None:
        return self.values.get(site)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class CalculationResult:
    """
    Output of one body fat calculation.

    `fat_mass` is computed from the unrounded fat percentage and `lean_mass` is
    derived from it, so `lean_mass + fat_mass == weight` always holds.
    """
    protocol: Protocol
    gender: Gender
    protocol_name: str
    sum_of_skinfolds: float  # mm
    body_density: float  # g/cm³
    body_fat_percentage: float  # %
    lean_mass: float  # kg
    fat_mass: float  # kg
    is_plausible: bool = True

    def to_dict(self) -> dict:
        return {
            "protocol": self.protocol.value,
            "gender": self.gender.value,
            "protocol_name": self.protocol_name,
            "sum_of_skinfolds": self.sum_of_skinfolds,
            "body_density": self.body_density,
            "body_fat_percentage": self.body_fat_percentage,
            "lean_mass": self.lean_mass,
            "fat_mass": self.fat_mass,
            "is_plausible": self.is_plausible,
        }


@dataclass(frozen=True)
class ClassificationBand:
    """
    A half-open interval [low, high) of body fat percentage with its label.

    `style_hint` is a presentation hint for the caller (a CSS utility class on
    the original assessment screen); the engine does not interpret it.
    """
    key: str
    label: str
    style_hint: str
    low: float
    high: float = math.inf

    def contains(self, percentage: float) -> bool:
        return self.low <= percentage < self.high
