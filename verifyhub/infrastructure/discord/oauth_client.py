from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

import httpx


class DiscordOAuthError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DiscordOAuthClient:
    def __init__(
        self,
        *,
        api_base_url: str,
        client_id: str,
        client_secret: str,
        oauth_scopes: str,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base_url = api_base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.oauth_scopes = oauth_scopes
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport)

    def build_authorize_url(self, *, redirect_uri: str, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": self.oauth_scopes,
            "state": state,
        }
        return f"{self.api_base_url}/oauth2/authorize?{urlencode(params)}"

    async def exchange_code(self, code: str, *, redirect_uri: str) -> dict[str, Any]:
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
        }
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        async with self._http_client() as client:
            response = await client.post(
                f"{self.api_base_url}/oauth2/token",
                data=payload,
                headers=headers,
            )
        if not response.is_success:
            raise DiscordOAuthError(
                f"Discord token exchange failed ({response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )
        data = response.json()
        if not isinstance(data, dict) or not data.get("access_token"):
            raise DiscordOAuthError(
                "Discord token exchange returned no access_token",
                status_code=response.status_code,
                body=response.text,
            )
        return data

    async def fetch_user(self, access_token: str) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {access_token}"}
        async with self._http_client() as client:
            response = await client.get(
                f"{self.api_base_url}/users/@me",
                headers=headers,
            )
        if not response.is_success:
            raise DiscordOAuthError(
                f"Discord /users/@me failed ({response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )
        payload = response.json()
        if not isinstance(payload, dict) or not payload.get("id"):
            raise DiscordOAuthError(
                "Discord /users/@me response had no user id",
                status_code=response.status_code,
                body=response.text,
            )
        return payload
