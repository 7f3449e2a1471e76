"""Tests for health endpoints."""

import pytest

from conftest import ADMIN_KEY, admin_headers
from verifyhub.core.config import get_settings


class TestHealth:
    """Liveness and dependency checks."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        """Test the liveness check needs no session."""
        response = await client.get("/api/system/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["service"] == "Verifyhub"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        """Test a caller supplied request id comes back unchanged."""
        response = await client.get("/api/system/health", headers={"X-Request-ID": "abc-1"})

        assert response.headers["X-Request-ID"] == "abc-1"

    @pytest.mark.asyncio
    async def test_deep_health_requires_session(self, client):
        """Test dependency checks are admin only."""
        response = await client.get("/api/system/health/deep")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_deep_health_checks(self, client):
        """Test the database and OAuth config checks pass when configured."""
        headers = await admin_headers(client, ADMIN_KEY)

        response = await client.get("/api/system/health/deep", headers=headers)

        body = response.json()
        assert body["status"] == "ok"
        assert body["checks"]["database"]["status"] == "ok"
        assert body["checks"]["discord_oauth"]["status"] == "ok"

    @pytest.mark.asyncio
    async def test_deep_health_flags_missing_oauth_config(self, client, monkeypatch):
        """Test missing Discord credentials fail the deep check."""
        headers = await admin_headers(client, ADMIN_KEY)
        monkeypatch.setenv("DISCORD_CLIENT_ID", "")
        get_settings.cache_clear()

        response = await client.get("/api/system/health/deep", headers=headers)

        body = response.json()
        assert body["status"] == "fail"
        assert body["checks"]["discord_oauth"]["status"] == "fail"

    @pytest.mark.asyncio
    async def test_unsafe_request_id_is_replaced(self, client):
        """Test request ids with unexpected characters are not echoed into logs."""
        response = await client.get(
            "/api/system/health", headers={"X-Request-ID": "bad id with spaces"}
        )

        assert response.headers["X-Request-ID"] != "bad id with spaces"
        assert len(response.headers["X-Request-ID"]) == 32
