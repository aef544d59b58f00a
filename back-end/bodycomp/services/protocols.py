"""
Protocol Catalog
=================
Static registry of the supported skinfold protocols.

For each (protocol, gender) pair it answers two questions:
  1. Which skinfold sites must be measured, and in which order?
  2. What display name does the assessment screen show for it?

Site sets:
  Pollock 3 (Jackson & Pollock, 1978/1980):
    - male:   chest, abdominal, thigh
    - female: triceps, suprailiac, thigh
  Pollock 7: chest, axillary, triceps, subscapular, abdominal, suprailiac, thigh
  Guedes (1985, Brazilian population):
    - male:   triceps, suprailiac, abdominal
    - female: subscapular, suprailiac, thigh

An unknown protocol or gender is a programming error: the enum coercion
raises ValueError instead of defaulting to anything.
"""

from typing import Mapping

from bodycomp.models import Gender, Protocol, SkinfoldMeasurement, SkinfoldSite

_ALL_SEVEN_SITES = (
    SkinfoldSite.CHEST,
    SkinfoldSite.AXILLARY,
    SkinfoldSite.TRICEPS,
    SkinfoldSite.SUBSCAPULAR,
    SkinfoldSite.ABDOMINAL,
    SkinfoldSite.SUPRAILIAC,
    SkinfoldSite.THIGH,
)

PROTOCOL_SITES: Mapping[tuple[Protocol, Gender], tuple[SkinfoldSite, ...]] = {
    (Protocol.POLLOCK3, Gender.MALE): (
        SkinfoldSite.CHEST,
        SkinfoldSite.ABDOMINAL,
        SkinfoldSite.THIGH,
    ),
    (Protocol.POLLOCK3, Gender.FEMALE): (
        SkinfoldSite.TRICEPS,
        SkinfoldSite.SUPRAILIAC,
        SkinfoldSite.THIGH,
    ),
    (Protocol.POLLOCK7, Gender.MALE): _ALL_SEVEN_SITES,
    (Protocol.POLLOCK7, Gender.FEMALE): _ALL_SEVEN_SITES,
    (Protocol.GUEDES, Gender.MALE): (
        SkinfoldSite.TRICEPS,
        SkinfoldSite.SUPRAILIAC,
        SkinfoldSite.ABDOMINAL,
    ),
    (Protocol.GUEDES, Gender.FEMALE): (
        SkinfoldSite.SUBSCAPULAR,
        SkinfoldSite.SUPRAILIAC,
        SkinfoldSite.THIGH,
    ),
}

PROTOCOL_NAMES: Mapping[tuple[Protocol, Gender], str] = {
    (Protocol.POLLOCK3, Gender.MALE): "Pollock 3 Dobras (Masculino)",
    (Protocol.POLLOCK3, Gender.FEMALE): "Pollock 3 Dobras (Feminino)",
    (Protocol.POLLOCK7, Gender.MALE): "Pollock 7 Dobras (Masculino)",
    (Protocol.POLLOCK7, Gender.FEMALE): "Pollock 7 Dobras (Feminino)",
    (Protocol.GUEDES, Gender.MALE): "Guedes (Masculino)",
    (Protocol.GUEDES, Gender.FEMALE): "Guedes (Feminino)",
}

# Labels in Portuguese, as printed next to each caliper field on the form
SITE_LABELS: Mapping[SkinfoldSite, str] = {
    SkinfoldSite.TRICEPS: "Tríceps",
    SkinfoldSite.CHEST: "Peitoral",
    SkinfoldSite.ABDOMINAL: "Abdominal",
    SkinfoldSite.SUPRAILIAC: "Suprailíaca",
    SkinfoldSite.THIGH: "Coxa",
    SkinfoldSite.SUBSCAPULAR: "Subescapular",
    SkinfoldSite.AXILLARY: "Axilar Média",
}


def _resolve(protocol: Protocol | str, gender: Gender | str) -> tuple[Protocol, Gender]:
    return Protocol(protocol), Gender(gender)


def required_sites(
    protocol: Protocol | str,
    gender: Gender | str,
) -> tuple[SkinfoldSite, ...]:
    """
    Return the ordered skinfold sites a protocol needs for the given gender.

    Raises:
        ValueError: If the protocol or gender is not a known value.
    """
    return PROTOCOL_SITES[_resolve(protocol, gender)]


def protocol_display_name(protocol: Protocol | str, gender: Gender | str) -> str:
    """Human-readable name of the equation used, e.g. 'Guedes (Feminino)'."""
    return PROTOCOL_NAMES[_resolve(protocol, gender)]


def display_label(site: SkinfoldSite | str) -> str:
    """Portuguese label for a skinfold site, e.g. 'Axilar Média'."""
    return SITE_LABELS[SkinfoldSite(site)]


def missing_sites(
    protocol: Protocol | str,
    gender: Gender | str,
    skinfolds: SkinfoldMeasurement,
) -> list[SkinfoldSite]:
    """
    List the required sites not yet present in `skinfolds`, in catalog order.

    An empty list means the measurement is complete for this protocol.
    """
    return [
        site for site in required_sites(protocol, gender)
        if not skinfolds.is_set(site)
    ]
