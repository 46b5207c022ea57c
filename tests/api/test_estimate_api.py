"""
API tests for the estimation, catalog and lifecycle endpoints.
"""
import pytest
from httpx import AsyncClient

from app.shared.core.config import get_settings


class TestEstimateAPI:
    @pytest.mark.asyncio
    async def test_estimate_matches_reference_projection(self, ac: AsyncClient):
        response = await ac.post(
            "/api/estimate",
            json={"manualHoursPerWeek": 20, "avgHourlyRate": 35, "processes": ["data-entry"]},
        )

        assert response.status_code == 200
        assert response.json() == {
            "annualManualCost": 36400,
            "estimatedSavingsPercent": 85,
            "annualSavings": 30940,
            "monthlyProductivityGain": 74,
            "paybackWeeks": 8,
            "fiveYearValue": 150059,
        }

    @pytest.mark.asyncio
    async def test_zero_savings_returns_null_payback(self, ac: AsyncClient):
        response = await ac.post("/api/estimate", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["annualSavings"] == 0
        assert data["paybackWeeks"] is None
        assert data["fiveYearValue"] == -2000

    @pytest.mark.asyncio
    async def test_odd_values_are_coerced_not_rejected(self, ac: AsyncClient):
        response = await ac.post(
            "/api/estimate",
            json={"manualHoursPerWeek": "ten", "avgHourlyRate": -40, "processes": 7},
        )

        assert response.status_code == 200
        assert response.json()["annualManualCost"] == 0

    @pytest.mark.asyncio
    async def test_oversized_numbers_still_estimate(self, ac: AsyncClient):
        response = await ac.post(
            "/api/estimate",
            json={"manualHoursPerWeek": 10**400, "avgHourlyRate": 1e300},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["annualManualCost"] == 0
        assert all(value is not None for value in data.values())

    @pytest.mark.asyncio
    async def test_unparseable_body_is_bad_request(self, ac: AsyncClient):
        response = await ac.post(
            "/api/estimate",
            content=b"not-json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALUE_ERROR"
        assert "error_id" in body

    @pytest.mark.asyncio
    async def test_catalog_lists_processes_and_industries(self, ac: AsyncClient):
        response = await ac.get("/api/catalog")

        assert response.status_code == 200
        data = response.json()
        assert len(data["processes"]) == 10
        assert data["processes"][0] == {
            "id": "data-entry",
            "label": "Data Entry & Processing",
            "savingsMultiplier": 0.85,
        }
        assert "Construction" in data["industries"]
        assert data["defaultMultiplier"] == 0.65


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_root_and_liveness(self, ac: AsyncClient):
        root = await ac.get("/")
        live = await ac.get("/health/live")

        assert root.json()["status"] == "ok"
        assert root.json()["app"] == "AutomateROI"
        assert live.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_health_reports_writable_lead_store(self, ac: AsyncClient):
        response = await ac.get("/health")

        assert response.status_code == 200
        assert response.json()["lead_store"]["status"] == "up"

    @pytest.mark.asyncio
    async def test_health_degrades_when_lead_store_blocked(
        self, ac: AsyncClient, tmp_path, monkeypatch
    ):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        monkeypatch.setenv("LEADS_FILE_PATH", str(blocker / "leads.jsonl"))
        get_settings.cache_clear()

        response = await ac.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, ac: AsyncClient):
        response = await ac.get("/health/live", headers={"X-Request-ID": "req-123"})
        assert response.headers["x-request-id"] == "req-123"

    @pytest.mark.asyncio
    async def test_security_headers_present(self, ac: AsyncClient):
        response = await ac.get("/api/catalog")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert "default-src 'none'" in response.headers["content-security-policy"]

    @pytest.mark.asyncio
    async def test_metrics_exposed(self, ac: AsyncClient):
        await ac.post("/api/estimate", json={"processes": ["reporting"]})
        response = await ac.get("/metrics")

        assert response.status_code == 200
        assert "automate_roi_estimates_computed_total" in response.text
