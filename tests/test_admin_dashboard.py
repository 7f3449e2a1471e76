"""Tests for the access-key gated admin dashboard."""

import json
from datetime import timedelta

import pytest
from sqlalchemy import select

from conftest import ADMIN_KEY, OWNER_KEY, admin_headers, seed_verified_user
from verifyhub.core.clock import utc_now
from verifyhub.core.config import get_settings
from verifyhub.core.database import get_session
from verifyhub.core.security import create_signed_token, fingerprint_secret
from verifyhub.infrastructure.db.models import AdminSession


class TestAccessGate:
    """Exchanging an access key for a dashboard session."""

    @pytest.mark.asyncio
    async def test_owner_key_grants_owner_role(self, client):
        """Test the owner key opens a session that may see tokens."""
        response = await client.post("/api/admin/session", json={"key": OWNER_KEY})

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "owner"
        assert body["can_show_tokens"] is True
        assert body["token_type"] == "bearer"
        assert body["session_id"].startswith("session_")

    @pytest.mark.asyncio
    async def test_admin_key_grants_admin_role(self, client):
        """Test the admin key opens a session without token visibility."""
        response = await client.post("/api/admin/session", json={"key": ADMIN_KEY})

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert response.json()["can_show_tokens"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["wrong-key", "", OWNER_KEY + "x"])
    async def test_invalid_key_is_rejected(self, client, key):
        """Test unknown keys yield 401."""
        response = await client.post("/api/admin/session", json={"key": key})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid access key"

    @pytest.mark.asyncio
    async def test_session_log_stores_fingerprint_only(self, client):
        """Test opened sessions are logged without the raw key."""
        await client.post("/api/admin/session", json={"key": OWNER_KEY})
        await client.post("/api/admin/session", json={"key": ADMIN_KEY})

        async with get_session() as session:
            rows = (await session.execute(select(AdminSession))).scalars().all()

        assert len(rows) == 2
        assert {row.is_owner for row in rows} == {True, False}
        fingerprints = {row.key_fingerprint for row in rows}
        assert fingerprints == {fingerprint_secret(OWNER_KEY), fingerprint_secret(ADMIN_KEY)}
        assert OWNER_KEY not in fingerprints

    @pytest.mark.asyncio
    async def test_missing_bearer_is_rejected(self, client):
        """Test dashboard APIs require a session token."""
        response = await client.get("/api/admin/users")

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTH_REQUIRED"

    @pytest.mark.asyncio
    async def test_tampered_token_is_rejected(self, client):
        """Test a malformed bearer token yields 401."""
        response = await client.get(
            "/api/admin/users", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_INVALID"

    @pytest.mark.asyncio
    async def test_expired_token_is_rejected(self, client):
        """Test sessions stop working after they expire."""
        token, _ = create_signed_token(
            settings=get_settings(),
            token_type="admin_session",
            claims={"sid": "session_old", "role": "owner"},
            ttl_seconds=-600,
        )

        response = await client.get(
            "/api/admin/users", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_EXPIRED"

    @pytest.mark.asyncio
    async def test_wrong_token_type_is_rejected(self, client):
        """Test tokens minted for another purpose are not accepted."""
        token, _ = create_signed_token(
            settings=get_settings(),
            token_type="something_else",
            claims={"sid": "session_x", "role": "owner"},
            ttl_seconds=600,
        )

        response = await client.get(
            "/api/admin/users", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_TYPE_INVALID"


class TestVerifiedUserListing:
    """Listing records and token visibility."""

    @pytest.mark.asyncio
    async def test_users_are_listed_newest_first(self, client):
        """Test the listing is ordered by verification time descending."""
        now = utc_now()
        await seed_verified_user(user_id="1", verified_at=now - timedelta(days=2))
        await seed_verified_user(user_id="2", verified_at=now)
        await seed_verified_user(user_id="3", verified_at=now - timedelta(hours=1))
        headers = await admin_headers(client, ADMIN_KEY)

        response = await client.get("/api/admin/users", headers=headers)

        assert response.status_code == 200
        rows = response.json()
        assert [row["user_id"] for row in rows] == ["2", "3", "1"]
        assert all(row["access_token_preview"] is None for row in rows)

    @pytest.mark.asyncio
    async def test_owner_sees_token_previews(self, client):
        """Test owners get the first 20 characters of each token."""
        await seed_verified_user(user_id="1", access_token="abcdefghijklmnopqrstuvwxyz")
        headers = await admin_headers(client, OWNER_KEY)

        response = await client.get(
            "/api/admin/users", params={"show_tokens": "true"}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()[0]["access_token_preview"] == "abcdefghijklmnopqrst..."

    @pytest.mark.asyncio
    async def test_admin_cannot_show_tokens(self, client):
        """Test admins asking for tokens get 403."""
        await seed_verified_user()
        headers = await admin_headers(client, ADMIN_KEY)

        response = await client.get(
            "/api/admin/users", params={"show_tokens": "true"}, headers=headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_owner_reveals_full_token(self, client):
        """Test the owner can read a single record's full token."""
        record = await seed_verified_user(user_id="9", access_token="full-token-value")
        headers = await admin_headers(client, OWNER_KEY)

        response = await client.get(f"/api/admin/users/{record.id}/token", headers=headers)

        assert response.status_code == 200
        assert response.json() == {
            "id": record.id,
            "user_id": "9",
            "access_token": "full-token-value",
        }

    @pytest.mark.asyncio
    async def test_admin_cannot_reveal_token(self, client):
        """Test token reveal is owner only."""
        record = await seed_verified_user()
        headers = await admin_headers(client, ADMIN_KEY)

        response = await client.get(f"/api/admin/users/{record.id}/token", headers=headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_reveal_unknown_record(self, client):
        """Test revealing a missing record yields 404."""
        headers = await admin_headers(client, OWNER_KEY)

        response = await client.get("/api/admin/users/discord_0_0_000000/token", headers=headers)

        assert response.status_code == 404


class TestStatsAndExport:
    """Aggregate stats and JSON export."""

    @pytest.mark.asyncio
    async def test_stats(self, client):
        """Test totals, the 24h window and per-server counts."""
        now = utc_now()
        await seed_verified_user(user_id="1", server_id="g1", verified_at=now)
        await seed_verified_user(user_id="2", server_id="g1", verified_at=now - timedelta(hours=2))
        await seed_verified_user(user_id="3", server_id="g2", verified_at=now - timedelta(days=3))
        headers = await admin_headers(client, ADMIN_KEY)

        response = await client.get("/api/admin/stats", headers=headers)

        assert response.status_code == 200
        stats = response.json()
        assert stats["total_users"] == 3
        assert stats["recent_verifications"] == 2
        assert stats["unique_servers"] == 2
        assert {row["server_id"]: row["count"] for row in stats["server_breakdown"]} == {
            "g1": 2,
            "g2": 1,
        }

    @pytest.mark.asyncio
    async def test_owner_export_includes_tokens(self, client):
        """Test the owner's export carries real tokens and a dated filename."""
        await seed_verified_user(user_id="5", access_token="secret-token")
        headers = await admin_headers(client, OWNER_KEY)

        response = await client.get("/api/admin/export", headers=headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert (
            f'filename="verified_users_{utc_now().date().isoformat()}.json"'
            in response.headers["content-disposition"]
        )
        rows = json.loads(response.content)
        assert rows[0]["userId"] == "5"
        assert rows[0]["accessToken"] == "secret-token"
        assert set(rows[0]) == {
            "userId",
            "username",
            "avatarUrl",
            "accessToken",
            "verifiedAt",
            "serverId",
        }

    @pytest.mark.asyncio
    async def test_admin_export_is_redacted(self, client):
        """Test non-owner exports never contain tokens."""
        await seed_verified_user(user_id="5", access_token="secret-token")
        headers = await admin_headers(client, ADMIN_KEY)

        response = await client.get("/api/admin/export", headers=headers)

        assert response.status_code == 200
        assert "secret-token" not in response.text
        assert json.loads(response.content)[0]["accessToken"] == "[REDACTED]"


class TestAdminPage:
    """The /admin view."""

    @pytest.mark.asyncio
    async def test_unauthenticated_view(self, client):
        """Test the page without a session only shows the gate."""
        await seed_verified_user()

        response = await client.get("/admin")

        assert response.status_code == 200
        body = response.json()
        assert body["authenticated"] is False
        assert body["users"] == []
        assert body["stats"] is None

    @pytest.mark.asyncio
    async def test_authenticated_view(self, client):
        """Test a session unlocks the listing and stats."""
        await seed_verified_user(user_id="1")
        headers = await admin_headers(client, OWNER_KEY)

        response = await client.get("/admin", headers=headers)

        body = response.json()
        assert body["authenticated"] is True
        assert body["role"] == "owner"
        assert body["can_show_tokens"] is True
        assert [row["user_id"] for row in body["users"]] == ["1"]
        assert body["stats"]["total_users"] == 1
