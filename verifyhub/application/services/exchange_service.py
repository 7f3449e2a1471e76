from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

import httpx

from verifyhub.core.clock import utc_now
from verifyhub.core.config import get_settings
from verifyhub.core.database import get_session
from verifyhub.core.errors import ConfigurationError, UpstreamError, ValidationError
from verifyhub.core.security import timestamped_id
from verifyhub.domain.policies.avatar_policy import AvatarPolicy
from verifyhub.infrastructure.discord.oauth_client import (
    DiscordOAuthClient,
    DiscordOAuthError,
)
from verifyhub.infrastructure.repositories.verification_repository import (
    VerifiedUserRepository,
)

logger = logging.getLogger(__name__)

# Matches the width of verified_users.server_id.
MAX_SERVER_ID_LENGTH = 64


class ExchangeService:
    """Trades an authorization code for a token and records the verification."""

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = get_settings()
        self.transport = transport

    def oauth_client(self) -> DiscordOAuthClient:
        return DiscordOAuthClient(
            api_base_url=self.settings.DISCORD_API_BASE_URL,
            client_id=self.settings.DISCORD_CLIENT_ID,
            client_secret=self.settings.DISCORD_CLIENT_SECRET,
            oauth_scopes=self.settings.oauth_scopes,
            timeout_seconds=self.settings.DISCORD_HTTP_TIMEOUT_SECONDS,
            transport=self.transport,
        )

    def ensure_client_id(self) -> None:
        if not self.settings.DISCORD_CLIENT_ID:
            raise ConfigurationError(
                "Discord OAuth client id is not configured",
                error_code="OAUTH_CONFIG_MISSING",
            )

    def ensure_oauth_config(self) -> None:
        self.ensure_client_id()
        if not self.settings.DISCORD_CLIENT_SECRET:
            raise ConfigurationError(
                "Discord OAuth credentials are not configured",
                error_code="OAUTH_CONFIG_MISSING",
            )

    @staticmethod
    def validate_server_id(server_id: str | None) -> str | None:
        if server_id and len(server_id) > MAX_SERVER_ID_LENGTH:
            raise ValidationError(
                f"Server ID must be at most {MAX_SERVER_ID_LENGTH} characters",
                error_code="SERVER_ID_TOO_LONG",
            )
        return server_id

    async def exchange(
        self,
        *,
        code: str | None,
        redirect_uri: str | None,
        server_id: str | None,
    ) -> dict[str, Any]:
        if not code:
            raise ValidationError(
                "Authorization code is required",
                error_code="AUTHORIZATION_CODE_REQUIRED",
            )
        server_id = self.validate_server_id(server_id)
        self.ensure_oauth_config()

        redirect_uri = redirect_uri or self.settings.DISCORD_REDIRECT_URI
        if not redirect_uri:
            raise ValidationError(
                "Redirect URI is required",
                error_code="REDIRECT_URI_REQUIRED",
            )

        client = self.oauth_client()
        try:
            token_payload = await client.exchange_code(code, redirect_uri=redirect_uri)
        except DiscordOAuthError as exc:
            logger.error(
                "Token exchange failed status=%s body=%s", exc.status_code, exc.body
            )
            raise UpstreamError(
                "Failed to exchange code for token",
                error_code="TOKEN_EXCHANGE_FAILED",
            ) from exc

        access_token = str(token_payload["access_token"])
        try:
            user_payload = await client.fetch_user(access_token)
        except DiscordOAuthError as exc:
            logger.error(
                "Profile fetch failed status=%s body=%s", exc.status_code, exc.body
            )
            raise UpstreamError(
                "Failed to fetch user information",
                error_code="USER_FETCH_FAILED",
            ) from exc

        record = self.build_verification_record(
            token_payload=token_payload,
            user_payload=user_payload,
            server_id=server_id,
        )
        async with get_session() as session:
            row = await VerifiedUserRepository(session).create(**record)

        logger.info(
            "Verified discord user=%s server=%s record=%s",
            row.user_id,
            row.server_id,
            row.id,
        )
        user: dict[str, Any] = {
            "id": row.user_id,
            "username": row.username,
            "discriminator": row.discriminator,
            "avatar": row.avatar_url,
        }
        if row.email:
            user["email"] = row.email
        return {"success": True, "user": user, "server_id": row.server_id}

    def build_verification_record(
        self,
        *,
        token_payload: dict[str, Any],
        user_payload: dict[str, Any],
        server_id: str | None,
    ) -> dict[str, Any]:
        user_id = str(user_payload["id"])
        discriminator = str(user_payload.get("discriminator") or "0")
        verified_at = utc_now()

        expires_at = None
        expires_in = token_payload.get("expires_in")
        if isinstance(expires_in, (int, float)) and expires_in > 0:
            expires_at = verified_at + timedelta(seconds=expires_in)

        return {
            # Re-verification appends a fresh row instead of replacing the old one.
            "id": timestamped_id(f"discord_{user_id}"),
            "user_id": user_id,
            "username": str(user_payload.get("username") or "unknown"),
            "discriminator": discriminator,
            "avatar_url": AvatarPolicy.build_avatar_url(
                cdn_base_url=self.settings.DISCORD_CDN_BASE_URL,
                user_id=user_id,
                avatar_hash=user_payload.get("avatar"),
                discriminator=discriminator,
            ),
            "email": user_payload.get("email") or None,
            "access_token": str(token_payload["access_token"]),
            "refresh_token": token_payload.get("refresh_token") or None,
            "token_type": str(token_payload.get("token_type") or "Bearer"),
            "scope": token_payload.get("scope") or None,
            "server_id": server_id or self.settings.DEFAULT_SERVER_ID,
            "verified_at": verified_at,
            "expires_at": expires_at,
        }
