"""
Body Composition Router
========================
Endpoints exposing the skinfold calculation engine to the assessment screens.

Endpoints:
  GET  /body-composition/sites                       - Skinfold sites with labels
  GET  /body-composition/protocols                   - Protocols and their sites per gender
  GET  /body-composition/protocols/{protocol}/sites  - Ordered sites for one protocol/gender
  POST /body-composition/calculate                   - Body density, fat %, lean/fat mass
  GET  /body-composition/classify                    - Qualitative band for a fat %
  POST /body-composition/bmi                         - Body mass index
"""

import logging
import math

from fastapi import APIRouter, HTTPException, Query

from bodycomp.models import ClassificationBand, Gender, Protocol, SkinfoldMeasurement, SkinfoldSite
from bodycomp.schemas import (
    BmiRequest,
    BmiResponse,
    BodyFatCalculationRequest,
    BodyFatCalculationResponse,
    CalculationResultResponse,
    ClassificationResponse,
    ProtocolResponse,
    ProtocolVariantResponse,
    SiteResponse,
)
from bodycomp.services.anthropometry import calculate_bmi
from bodycomp.services.body_fat import calculate_body_fat
from bodycomp.services.classification import classify
from bodycomp.services.protocols import (
    display_label,
    missing_sites,
    protocol_display_name,
    required_sites,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/body-composition", tags=["Body Composition"])


@router.get("/sites", response_model=list[SiteResponse])
async def list_sites():
    """List every skinfold site the engine knows, with its display label."""
    return [_site_response(site) for site in SkinfoldSite]


@router.get("/protocols", response_model=list[ProtocolResponse])
async def list_protocols():
    """
    List every protocol with the sites each gender must measure.

    The assessment form uses this to highlight the required caliper fields
    as soon as the protocol and gender are picked.
    """
    return [
        ProtocolResponse(
            protocol=protocol,
            variants=[_variant_response(protocol, gender) for gender in Gender],
        )
        for protocol in Protocol
    ]


@router.get("/protocols/{protocol}/sites", response_model=ProtocolVariantResponse)
async def get_protocol_sites(
    protocol: Protocol,
    gender: Gender = Query(..., description="male or female"),
):
    """Get the ordered sites required by one protocol for one gender."""
    return _variant_response(protocol, gender)


@router.post("/calculate", response_model=BodyFatCalculationResponse)
async def calculate(request: BodyFatCalculationRequest):
    """
    Calculate body composition from skinfold measurements.

    HOW IT WORKS:
      1. Checks that every site required by (protocol, gender) was measured
      2. Sums only the required sites (extra readings are ignored)
      3. Applies the protocol's body density equation
      4. Converts density to body fat % with the Siri equation
      5. Splits weight into fat mass and lean mass
      6. Classifies the percentage into a qualitative band

    An incomplete request is not an error: the response has
    `computable=false` and lists the sites still missing.
    """
    skinfolds = SkinfoldMeasurement.from_mapping(request.skinfolds)
    missing = missing_sites(request.protocol, request.gender, skinfolds)

    try:
        result = calculate_body_fat(
            protocol=request.protocol,
            gender=request.gender,
            age_years=request.age_years,
            weight_kg=request.weight_kg,
            skinfolds=skinfolds,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if result is None:
        if missing:
            reason = "missing_sites"
        elif request.age_years is None or request.weight_kg is None:
            reason = "missing_subject_data"
        else:
            reason = "invalid_measurement"
            logger.info(
                f"Rejected complete {request.protocol.value}/{request.gender.value} "
                f"measurement: {dict(skinfolds.values)}"
            )
        return BodyFatCalculationResponse(
            computable=False, reason=reason, missing_sites=missing
        )

    band = classify(result.body_fat_percentage, result.gender)

    return BodyFatCalculationResponse(
        computable=True,
        result=CalculationResultResponse(**result.to_dict()),
        classification=_classification_response(band),
    )


@router.get("/classify", response_model=ClassificationResponse)
async def classify_body_fat(
    body_fat_percentage: float = Query(..., ge=0, description="Body fat (%)"),
    gender: Gender = Query(..., description="male or female"),
):
    """Get the qualitative band (label + style hint) for a body fat percentage."""
    try:
        band = classify(body_fat_percentage, gender)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _classification_response(band)


@router.post("/bmi", response_model=BmiResponse)
async def bmi(request: BmiRequest):
    """Calculate the body mass index: weight (kg) / height (m)²."""
    try:
        value = calculate_bmi(request.weight_kg, request.height_cm)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BmiResponse(bmi=value)


# ----- Helper Functions -----

def _site_response(site: SkinfoldSite) -> SiteResponse:
    return SiteResponse(site=site, label=display_label(site))


def _variant_response(protocol: Protocol, gender: Gender) -> ProtocolVariantResponse:
    return ProtocolVariantResponse(
        gender=gender,
        protocol_name=protocol_display_name(protocol, gender),
        sites=[_site_response(site) for site in required_sites(protocol, gender)],
    )


def _classification_response(band: ClassificationBand) -> ClassificationResponse:
    """Build the response, mapping the open-ended upper bound to None (JSON has no inf)."""
    return ClassificationResponse(
        key=band.key,
        label=band.label,
        style_hint=band.style_hint,
        low=band.low,
        high=band.high if math.isfinite(band.high) else None,
    )
