"""Tests for ids, key comparison and signed session tokens."""

import re

import pytest

from verifyhub.core.config import PortalSettings
from verifyhub.core.errors import AuthenticationError, ConfigurationError
from verifyhub.core.security import (
    create_signed_token,
    decode_signed_token,
    fingerprint_secret,
    secrets_match,
    timestamped_id,
)


def make_settings(**overrides) -> PortalSettings:
    values = {"JWT_SECRET": "unit-test-secret-with-enough-length-01"}
    values.update(overrides)
    return PortalSettings(_env_file=None, **values)


class TestIdentifiers:
    """Generated record identifiers."""

    def test_timestamped_id_format(self):
        """Test ids are prefix, epoch millis and six hex characters."""
        assert re.fullmatch(r"discord_42_\d{13}_[0-9a-f]{6}", timestamped_id("discord_42"))

    def test_ids_are_unique(self):
        """Test back-to-back ids differ."""
        assert len({timestamped_id("cmd") for _ in range(50)}) == 50


class TestSecretComparison:
    """Constant-time key checks and fingerprints."""

    def test_secrets_match(self):
        """Test equal non-empty values match."""
        assert secrets_match("abc", "abc") is True
        assert secrets_match("abc", "abd") is False

    def test_empty_values_never_match(self):
        """Test an empty side never matches."""
        assert secrets_match("", "") is False
        assert secrets_match("abc", "") is False

    def test_fingerprint_is_stable_and_short(self):
        """Test fingerprints are 16 hex characters and hide the input."""
        fingerprint = fingerprint_secret("owner-key")

        assert fingerprint == fingerprint_secret("owner-key")
        assert re.fullmatch(r"[0-9a-f]{16}", fingerprint)
        assert "owner" not in fingerprint


class TestSignedTokens:
    """JWT session tokens."""

    def test_round_trip_claims(self):
        """Test claims survive signing and the expiry is in the future."""
        settings = make_settings()
        token, expires_at = create_signed_token(
            settings=settings,
            token_type="admin_session",
            claims={"sid": "session_1", "role": "admin"},
            ttl_seconds=60,
        )

        payload = decode_signed_token(settings=settings, token=token, expected_type="admin_session")

        assert payload["sid"] == "session_1"
        assert payload["role"] == "admin"
        assert payload["exp"] == int(expires_at.timestamp())

    def test_other_secret_is_rejected(self):
        """Test tokens signed with another secret fail."""
        token, _ = create_signed_token(
            settings=make_settings(),
            token_type="admin_session",
            claims={},
            ttl_seconds=60,
        )

        with pytest.raises(AuthenticationError) as exc_info:
            decode_signed_token(
                settings=make_settings(JWT_SECRET="another-secret-with-enough-length-02"),
                token=token,
                expected_type="admin_session",
            )
        assert exc_info.value.error_code == "TOKEN_INVALID"

    def test_missing_secret_is_a_configuration_error(self):
        """Test sessions cannot be issued without JWT_SECRET."""
        with pytest.raises(ConfigurationError):
            create_signed_token(
                settings=make_settings(JWT_SECRET=""),
                token_type="admin_session",
                claims={},
                ttl_seconds=60,
            )
