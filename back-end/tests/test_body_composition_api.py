"""
Tests for the Body Composition API
====================================
Drives the FastAPI app in-process through httpx's ASGI transport.

Test matrix:
  1. Health endpoints
  2. Catalog endpoints (sites, protocols, per-gender sites)
  3. Calculation: complete input, incomplete input, invalid input
  4. Classification and BMI endpoints
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from bodycomp.main import app


# ── Fixtures ────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def client():
    """Provide an HTTP client bound to the ASGI app (no network)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


REFERENCE_REQUEST = {
    "protocol": "pollock3",
    "gender": "male",
    "age_years": 30,
    "weight_kg": 80,
    "skinfolds": {"chest": 10, "abdominal": 20, "thigh": 15},
}


# ── Health ──────────────────────────────────────────────────────

class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# ── Catalog ─────────────────────────────────────────────────────

class TestCatalogEndpoints:
    """Sites and protocol lookups used to build the assessment form."""

    @pytest.mark.asyncio
    async def test_list_sites(self, client: AsyncClient):
        response = await client.get("/body-composition/sites")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 7
        assert {"site": "axillary", "label": "Axilar Média"} in data

    @pytest.mark.asyncio
    async def test_list_protocols(self, client: AsyncClient):
        response = await client.get("/body-composition/protocols")
        assert response.status_code == 200
        data = {item["protocol"]: item for item in response.json()}
        assert set(data) == {"pollock3", "pollock7", "guedes"}

        guedes_female = next(
            v for v in data["guedes"]["variants"] if v["gender"] == "female"
        )
        assert [s["site"] for s in guedes_female["sites"]] == [
            "subscapular", "suprailiac", "thigh",
        ]
        assert guedes_female["protocol_name"] == "Guedes (Feminino)"

    @pytest.mark.asyncio
    async def test_protocol_sites_for_gender(self, client: AsyncClient):
        response = await client.get(
            "/body-composition/protocols/pollock3/sites", params={"gender": "female"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["gender"] == "female"
        assert [s["site"] for s in data["sites"]] == ["triceps", "suprailiac", "thigh"]

    @pytest.mark.asyncio
    async def test_unknown_protocol_is_rejected(self, client: AsyncClient):
        response = await client.get(
            "/body-composition/protocols/jackson/sites", params={"gender": "male"}
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_gender_is_rejected(self, client: AsyncClient):
        response = await client.get("/body-composition/protocols/pollock7/sites")
        assert response.status_code == 422


# ── Calculation ─────────────────────────────────────────────────

class TestCalculateEndpoint:
    """POST /body-composition/calculate"""

    @pytest.mark.asyncio
    async def test_reference_case(self, client: AsyncClient):
        response = await client.post("/body-composition/calculate", json=REFERENCE_REQUEST)
        assert response.status_code == 200
        data = response.json()

        assert data["computable"] is True
        assert data["missing_sites"] == []
        assert data["reason"] is None

        result = data["result"]
        assert result["protocol"] == "pollock3"
        assert result["protocol_name"] == "Pollock 3 Dobras (Masculino)"
        assert result["sum_of_skinfolds"] == 45.0
        assert result["body_fat_percentage"] == 13.6
        assert result["fat_mass"] == 10.89
        assert result["lean_mass"] + result["fat_mass"] == pytest.approx(80.0, abs=1e-6)
        assert result["is_plausible"] is True

        assert data["classification"]["key"] == "athletic"
        assert data["classification"]["label"] == "Atleta"

    @pytest.mark.asyncio
    async def test_incomplete_input_lists_missing_sites(self, client: AsyncClient):
        payload = {**REFERENCE_REQUEST, "skinfolds": {"chest": 10, "abdominal": 20}}
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["computable"] is False
        assert data["reason"] == "missing_sites"
        assert data["missing_sites"] == ["thigh"]
        assert data["result"] is None
        assert data["classification"] is None

    @pytest.mark.asyncio
    async def test_null_reading_counts_as_missing(self, client: AsyncClient):
        payload = {
            **REFERENCE_REQUEST,
            "skinfolds": {"chest": 10, "abdominal": None, "thigh": 15},
        }
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 200
        assert response.json()["missing_sites"] == ["abdominal"]

    @pytest.mark.asyncio
    async def test_missing_age_is_not_computable(self, client: AsyncClient):
        payload = {**REFERENCE_REQUEST, "age_years": None}
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["computable"] is False
        assert data["missing_sites"] == []
        assert data["reason"] == "missing_subject_data"

    @pytest.mark.asyncio
    async def test_missing_weight_is_not_computable(self, client: AsyncClient):
        payload = {**REFERENCE_REQUEST, "weight_kg": None}
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 200
        assert response.json()["reason"] == "missing_subject_data"

    @pytest.mark.asyncio
    async def test_rejected_measurement_is_distinguished(self, client: AsyncClient):
        """Guedes with a 3 mm sum: complete, but density falls outside the valid band."""
        payload = {
            "protocol": "guedes",
            "gender": "male",
            "age_years": 30,
            "weight_kg": 80,
            "skinfolds": {"triceps": 1, "suprailiac": 1, "abdominal": 1},
        }
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["computable"] is False
        assert data["reason"] == "invalid_measurement"
        assert data["missing_sites"] == []

    @pytest.mark.asyncio
    async def test_extra_sites_are_ignored(self, client: AsyncClient):
        payload = {
            **REFERENCE_REQUEST,
            "skinfolds": {**REFERENCE_REQUEST["skinfolds"], "triceps": 30, "axillary": 25},
        }
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 200
        assert response.json()["result"]["body_fat_percentage"] == 13.6

    @pytest.mark.asyncio
    async def test_zero_reading_is_rejected(self, client: AsyncClient):
        payload = {**REFERENCE_REQUEST, "skinfolds": {"chest": 0, "abdominal": 20, "thigh": 15}}
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_gender_is_rejected(self, client: AsyncClient):
        payload = {**REFERENCE_REQUEST, "gender": "other"}
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_site_is_rejected(self, client: AsyncClient):
        payload = {**REFERENCE_REQUEST, "skinfolds": {"biceps": 10}}
        response = await client.post("/body-composition/calculate", json=payload)
        assert response.status_code == 422


# ── Classification & BMI ────────────────────────────────────────

class TestClassifyEndpoint:

    @pytest.mark.asyncio
    async def test_female_acceptable(self, client: AsyncClient):
        response = await client.get(
            "/body-composition/classify",
            params={"body_fat_percentage": 30, "gender": "female"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["key"] == "acceptable"
        assert data["label"] == "Aceitável"
        assert data["low"] == 25.0
        assert data["high"] == 32.0

    @pytest.mark.asyncio
    async def test_open_ended_top_band(self, client: AsyncClient):
        response = await client.get(
            "/body-composition/classify",
            params={"body_fat_percentage": 40, "gender": "male"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["key"] == "obese"
        assert data["high"] is None

    @pytest.mark.asyncio
    async def test_negative_percentage_is_rejected(self, client: AsyncClient):
        response = await client.get(
            "/body-composition/classify",
            params={"body_fat_percentage": -1, "gender": "male"},
        )
        assert response.status_code == 422


class TestBmiEndpoint:

    @pytest.mark.asyncio
    async def test_bmi(self, client: AsyncClient):
        """80 kg / 1.80 m² = 24.69 → 24.7"""
        response = await client.post(
            "/body-composition/bmi", json={"weight_kg": 80, "height_cm": 180}
        )
        assert response.status_code == 200
        assert response.json() == {"bmi": 24.7}

    @pytest.mark.asyncio
    async def test_zero_height_is_rejected(self, client: AsyncClient):
        response = await client.post(
            "/body-composition/bmi", json={"weight_kg": 80, "height_cm": 0}
        )
        assert response.status_code == 422
