from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from verifyhub.application.dto.admin import AdminPrincipal, IssuedAdminSession
from verifyhub.application.services.stats_service import StatsService
from verifyhub.core.clock import ensure_utc, utc_now
from verifyhub.core.config import get_settings
from verifyhub.core.database import get_session
from verifyhub.core.errors import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
)
from verifyhub.core.security import (
    create_signed_token,
    decode_signed_token,
    fingerprint_secret,
    timestamped_id,
)
from verifyhub.domain.policies.access_key_policy import AccessKeyPolicy, AdminRole
from verifyhub.infrastructure.db.models.verification import VerifiedUser
from verifyhub.infrastructure.repositories.admin_session_repository import (
    AdminSessionRepository,
)
from verifyhub.infrastructure.repositories.verification_repository import (
    VerifiedUserRepository,
)

logger = logging.getLogger(__name__)

SESSION_TOKEN_TYPE = "admin_session"
REDACTED_TOKEN = "[REDACTED]"
TOKEN_PREVIEW_LENGTH = 20


class AdminService:
    def __init__(self):
        self.settings = get_settings()

    async def authenticate(self, access_key: str) -> IssuedAdminSession:
        role = AccessKeyPolicy.resolve_role(
            access_key,
            owner_key=self.settings.PORTAL_OWNER_KEY,
            admin_key=self.settings.PORTAL_ADMIN_KEY,
        )
        if role is None:
            logger.warning("Rejected admin access key")
            raise AuthenticationError("Invalid access key", error_code="INVALID_ACCESS_KEY")

        session_id = timestamped_id("session")
        ttl_seconds = self.settings.ADMIN_SESSION_TTL_SECONDS
        token, expires_at = create_signed_token(
            settings=self.settings,
            token_type=SESSION_TOKEN_TYPE,
            claims={"sid": session_id, "role": role.value},
            ttl_seconds=ttl_seconds,
        )
        created_at = expires_at - timedelta(seconds=ttl_seconds)
        async with get_session() as session:
            await AdminSessionRepository(session).create(
                id=session_id,
                key_fingerprint=fingerprint_secret(access_key),
                is_owner=role is AdminRole.OWNER,
                created_at=created_at,
                expires_at=expires_at,
            )

        logger.info("Admin session %s opened role=%s", session_id, role.value)
        return IssuedAdminSession(
            access_token=token,
            expires_at=expires_at,
            principal=AdminPrincipal(role=role, session_id=session_id, expires_at=expires_at),
        )

    def principal_from_token(self, token: str) -> AdminPrincipal:
        payload = decode_signed_token(
            settings=self.settings,
            token=token,
            expected_type=SESSION_TOKEN_TYPE,
        )
        try:
            role = AdminRole(payload["role"])
            session_id = str(payload["sid"])
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, ValueError, TypeError) as exc:
            raise AuthenticationError(
                "Admin session token payload is invalid",
                error_code="TOKEN_PAYLOAD_INVALID",
            ) from exc
        return AdminPrincipal(role=role, session_id=session_id, expires_at=expires_at)

    async def list_users(
        self,
        *,
        principal: AdminPrincipal,
        show_tokens: bool = False,
    ) -> list[dict[str, Any]]:
        if show_tokens and not principal.is_owner:
            raise PermissionDeniedError("Only the owner can view access tokens")
        async with get_session() as session:
            rows = await VerifiedUserRepository(session).list()
        return [self._to_dict(row, show_tokens=show_tokens) for row in rows]

    async def reveal_token(self, *, principal: AdminPrincipal, record_id: str) -> dict[str, str]:
        if not principal.is_owner:
            raise PermissionDeniedError("Only the owner can view access tokens")
        async with get_session() as session:
            row = await VerifiedUserRepository(session).get_by_id(record_id)
        if row is None:
            raise NotFoundError(f"Verification record {record_id} not found")
        return {"id": row.id, "user_id": row.user_id, "access_token": row.access_token}

    async def get_stats(self) -> dict[str, Any]:
        return await StatsService().get_verification_stats()

    async def export_users(self, *, principal: AdminPrincipal) -> list[dict[str, Any]]:
        async with get_session() as session:
            rows = await VerifiedUserRepository(session).list()
        return [
            {
                "userId": row.user_id,
                "username": row.username,
                "avatarUrl": row.avatar_url,
                "accessToken": row.access_token if principal.is_owner else REDACTED_TOKEN,
                "verifiedAt": ensure_utc(row.verified_at).isoformat(),
                "serverId": row.server_id,
            }
            for row in rows
        ]

    @staticmethod
    def export_filename(now: datetime | None = None) -> str:
        return f"verified_users_{(now or utc_now()).date().isoformat()}.json"

    @staticmethod
    def token_preview(access_token: str) -> str:
        return f"{access_token[:TOKEN_PREVIEW_LENGTH]}..."

    def _to_dict(self, row: VerifiedUser, *, show_tokens: bool) -> dict[str, Any]:
        return {
            "id": row.id,
            "user_id": row.user_id,
            "username": row.username,
            "discriminator": row.discriminator,
            "avatar_url": row.avatar_url,
            "server_id": row.server_id,
            "verified_at": ensure_utc(row.verified_at),
            "expires_at": ensure_utc(row.expires_at) if row.expires_at else None,
            "access_token_preview": (
                self.token_preview(row.access_token) if show_tokens else None
            ),
        }
