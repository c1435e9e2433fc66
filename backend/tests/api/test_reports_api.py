"""Tests for the PDF report endpoint."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from engine.solar import tilt_optimizer

pytestmark = pytest.mark.asyncio

URL = "/api/v1/reports/irradiance"


class TestIrradianceReport:
    async def test_pdf_download(self, client: AsyncClient):
        resp = await client.post(
            URL, json={"site": {"latitude": 10.0, "longitude": -66.0, "site_name": "Caracas roof"}}
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert 'filename="solarcalc_Caracas_roof.pdf"' in resp.headers["content-disposition"]
        assert resp.content.startswith(b"%PDF")

    async def test_with_sizing(self, client: AsyncClient):
        resp = await client.post(
            URL,
            json={
                "site": {"latitude": 10.0, "longitude": -66.0},
                "off_grid": {
                    "devices": [{"name": "Fridge", "power_w": 150, "hours_per_day": 10}],
                    "panel_wp": 300,
                    "panel_voltage": 12,
                    "battery_voltage": 24,
                },
                "grid_tied": {"annual_consumption_kwh": 3650},
            },
        )
        assert resp.status_code == 200
        assert resp.content.startswith(b"%PDF")
        assert "solarcalc_10.0000_-66.0000.pdf" in resp.headers["content-disposition"]

    async def test_unavailable_site_still_renders(self, client: AsyncClient, irradiance_source):
        irradiance_source.failing_months = set(range(12))
        resp = await client.post(
            URL,
            json={
                "site": {"latitude": 10.0, "longitude": -66.0},
                "grid_tied": {"annual_consumption_kwh": 3650},
            },
        )
        assert resp.status_code == 200
        assert resp.content.startswith(b"%PDF")

    async def test_invalid_site(self, client: AsyncClient):
        resp = await client.post(URL, json={"site": {"latitude": -91, "longitude": 0}})
        assert resp.status_code == 422

    async def test_engine_rejection_is_bad_request(self, client: AsyncClient, monkeypatch):
        def reject(*args):
            raise ValueError("latitude must be a finite number")

        monkeypatch.setattr(tilt_optimizer, "validate_site", reject)
        resp = await client.post(URL, json={"site": {"latitude": 10.0, "longitude": -66.0}})
        assert resp.status_code == 400
        assert "finite" in resp.json()["detail"]
