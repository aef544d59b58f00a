"""
Pydantic V2 Schemas (Request/Response Models)
================================================
These schemas define the shape of data that flows in and out of the API.

Naming Convention:
  - *Request  : Used for POST request bodies
  - *Response : Used for API responses (what the client receives back)

Protocol, gender and site names are validated against the domain enums, so an
unknown value is rejected with 422 before reaching the services.
"""

from pydantic import BaseModel, Field, field_validator

from bodycomp.models import Gender, Protocol, SkinfoldSite


# ============================================================
# CATALOG SCHEMAS
# ============================================================

class SiteResponse(BaseModel):
    """A skinfold site with its display label."""
    site: SkinfoldSite
    label: str = Field(description="Human-readable (Portuguese) site name")


class ProtocolVariantResponse(BaseModel):
    """Sites and equation name for one gender of a protocol."""
    gender: Gender
    protocol_name: str
    sites: list[SiteResponse]


class ProtocolResponse(BaseModel):
    """A protocol with its per-gender variants."""
    protocol: Protocol
    variants: list[ProtocolVariantResponse]


# ============================================================
# CALCULATION SCHEMAS
# ============================================================

class BodyFatCalculationRequest(BaseModel):
    """
    Input for a body fat calculation.

    Every field except protocol and gender may be missing: the endpoint is
    called while the assessor is still typing, and answers with
    `computable=false` until enough data is present.
    """
    protocol: Protocol = Field(..., description="pollock3, pollock7 or guedes")
    gender: Gender = Field(..., description="male or female")
    age_years: int | None = Field(default=None, gt=0, le=120, description="Age in years")
    weight_kg: float | None = Field(default=None, gt=0, description="Body weight in kilograms")
    skinfolds: dict[SkinfoldSite, float | None] = Field(
        default_factory=dict,
        description="Skinfold readings in mm keyed by site (null = not measured)",
    )

    @field_validator("skinfolds")
    @classmethod
    def readings_must_be_positive(
        cls, value: dict[SkinfoldSite, float | None]
    ) -> dict[SkinfoldSite, float | None]:
        """A reading that is present must be a positive thickness."""
        for site, reading in value.items():
            if reading is not None and reading <= 0:
                raise ValueError(f"Skinfold '{site.value}' must be greater than 0 mm")
        return value


class CalculationResultResponse(BaseModel):
    """Numbers produced by one successful calculation."""
    protocol: Protocol
    gender: Gender
    protocol_name: str
    sum_of_skinfolds: float = Field(description="Sum of the required sites (mm)")
    body_density: float = Field(description="Body density (g/cm³)")
    body_fat_percentage: float = Field(description="Body fat (%), one decimal")
    lean_mass: float = Field(description="Fat-free mass (kg)")
    fat_mass: float = Field(description="Fat mass (kg)")
    is_plausible: bool = Field(
        description="False when the percentage is outside the configured sanity band"
    )


class ClassificationResponse(BaseModel):
    """Qualitative band for a body fat percentage."""
    key: str
    label: str
    style_hint: str
    low: float
    high: float | None = Field(default=None, description="None for the open-ended top band")


class BodyFatCalculationResponse(BaseModel):
    """
    Answer of POST /body-composition/calculate.

    `computable=false` with a non-empty `missing_sites` list is the normal
    answer while the form is incomplete. `reason=invalid_measurement`
    means the readings are complete but were rejected (e.g. density out of
    range), so the assessor should re-check them.
    """
    computable: bool
    reason: str | None = Field(
        default=None,
        description=(
            "Why the result is not computable: missing_sites, "
            "missing_subject_data or invalid_measurement"
        ),
    )
    missing_sites: list[SkinfoldSite] = Field(default_factory=list)
    result: CalculationResultResponse | None = None
    classification: ClassificationResponse | None = None


# ============================================================
# BMI SCHEMAS
# ============================================================

class BmiRequest(BaseModel):
    """Weight and height for a BMI calculation."""
    weight_kg: float = Field(..., gt=0, description="Body weight in kilograms")
    height_cm: float = Field(..., gt=0, description="Height in centimeters")


class BmiResponse(BaseModel):
    bmi: float
