from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import func, select

from verifyhub.api.routes.exchange import get_exchange_service
from verifyhub.app import create_app
from verifyhub.application.services.exchange_service import ExchangeService
from verifyhub.core.clock import utc_now
from verifyhub.core.config import get_settings
from verifyhub.core.database import DatabaseManager, get_session
from verifyhub.core.security import timestamped_id
from verifyhub.infrastructure.db.models import VerifiedUser
from verifyhub.infrastructure.repositories.verification_repository import (
    VerifiedUserRepository,
)

OWNER_KEY = "owner-test-key-0001"
ADMIN_KEY = "admin-test-key-0002"
PUBLIC_BASE_URL = "https://verify.example"


class FakeDiscordApi:
    """Stands in for the Discord token and profile endpoints."""

    def __init__(self) -> None:
        self.token_status = 200
        self.token_body: Any = {
            "access_token": "tok1",
            "refresh_token": "refresh1",
            "token_type": "Bearer",
            "scope": "identify guilds.join",
            "expires_in": 604800,
        }
        self.user_status = 200
        self.user_body: Any = {
            "id": "42",
            "username": "alice",
            "discriminator": "7",
            "avatar": None,
        }
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/oauth2/token"):
            return self._respond(self.token_status, self.token_body)
        if request.url.path.endswith("/users/@me"):
            return self._respond(self.user_status, self.user_body)
        return httpx.Response(404, json={"message": "404: Not Found"})

    @staticmethod
    def _respond(status: int, body: Any) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def token_form(self) -> dict[str, str]:
        token_request = next(
            request for request in self.requests if request.url.path.endswith("/oauth2/token")
        )
        return {key: values[0] for key, values in parse_qs(token_request.content.decode()).items()}


@pytest.fixture
def settings_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'verifyhub.db'}")
    monkeypatch.setenv("DISCORD_CLIENT_ID", "client-123")
    monkeypatch.setenv("DISCORD_CLIENT_SECRET", "secret-456")
    monkeypatch.setenv("PORTAL_OWNER_KEY", OWNER_KEY)
    monkeypatch.setenv("PORTAL_ADMIN_KEY", ADMIN_KEY)
    monkeypatch.setenv("JWT_SECRET", "jwt-test-secret-with-enough-length-000")
    monkeypatch.setenv("PUBLIC_BASE_URL", PUBLIC_BASE_URL)
    monkeypatch.setenv("ENABLE_ACCESS_LOG", "false")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def database(settings_env) -> AsyncIterator[None]:
    await DatabaseManager.initialize()
    try:
        yield
    finally:
        await DatabaseManager.close()


@pytest.fixture
def discord_api() -> FakeDiscordApi:
    return FakeDiscordApi()


@pytest_asyncio.fixture
async def client(database, discord_api) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app()
    app.dependency_overrides[get_exchange_service] = lambda: ExchangeService(
        transport=discord_api.transport
    )
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http


@pytest.fixture
def exchange_service(database, discord_api) -> ExchangeService:
    return ExchangeService(transport=discord_api.transport)


async def verified_user_count() -> int:
    async with get_session() as session:
        result = await session.execute(select(func.count()).select_from(VerifiedUser))
        return int(result.scalar_one())


async def list_verified_users():
    async with get_session() as session:
        return list(await VerifiedUserRepository(session).list())


async def admin_headers(client: httpx.AsyncClient, key: str) -> dict[str, str]:
    response = await client.post("/api/admin/session", json={"key": key})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def seed_verified_user(**overrides):
    user_id = overrides.pop("user_id", "1001")
    record = {
        "id": timestamped_id(f"discord_{user_id}"),
        "user_id": user_id,
        "username": f"user{user_id}",
        "discriminator": "0",
        "avatar_url": "https://cdn.discordapp.com/embed/avatars/0.png",
        "access_token": f"access-token-for-{user_id}-abcdefghijklmnop",
        "server_id": "guild-a",
        "verified_at": utc_now(),
    }
    record.update(overrides)
    async with get_session() as session:
        return await VerifiedUserRepository(session).create(**record)
