from __future__ import annotations

import hashlib
from datetime import datetime, timedelta
from secrets import compare_digest, token_hex
from typing import Any

import jwt

from verifyhub.core.clock import epoch_millis, utc_now
from verifyhub.core.config import PortalSettings
from verifyhub.core.errors import AuthenticationError, ConfigurationError


def random_suffix(length: int = 3) -> str:
    return token_hex(length)


def timestamped_id(prefix: str) -> str:
    return f"{prefix}_{epoch_millis()}_{random_suffix()}"


def secrets_match(candidate: str, expected: str) -> bool:
    if not candidate or not expected:
        return False
    return compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def fingerprint_secret(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()[:16]


def _ensure_jwt_secret(settings: PortalSettings) -> None:
    if not settings.JWT_SECRET:
        raise ConfigurationError(
            "JWT_SECRET is required for admin sessions",
            error_code="JWT_SECRET_MISSING",
        )


def create_signed_token(
    *,
    settings: PortalSettings,
    token_type: str,
    claims: dict[str, Any],
    ttl_seconds: int,
) -> tuple[str, datetime]:
    _ensure_jwt_secret(settings)
    issued_at = utc_now()
    expires_at = issued_at + timedelta(seconds=ttl_seconds)
    payload = {
        **claims,
        "type": token_type,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


def decode_signed_token(
    *,
    settings: PortalSettings,
    token: str,
    expected_type: str,
) -> dict[str, Any]:
    _ensure_jwt_secret(settings)
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            leeway=settings.JWT_LEEWAY_SECONDS,
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError(
            "Admin session expired",
            error_code="TOKEN_EXPIRED",
        ) from exc
    except jwt.PyJWTError as exc:
        raise AuthenticationError(
            "Admin session token invalid",
            error_code="TOKEN_INVALID",
        ) from exc

    if payload.get("type") != expected_type:
        raise AuthenticationError(
            "Token type is invalid",
            error_code="TOKEN_TYPE_INVALID",
        )
    return payload
