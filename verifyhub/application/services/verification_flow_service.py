from __future__ import annotations

import logging
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from verifyhub.application.dto.verification import VerificationOutcome, VerificationState
from verifyhub.application.services.exchange_service import ExchangeService
from verifyhub.core.errors import ApiException, InternalError

logger = logging.getLogger(__name__)

DEFAULT_STATE = "default"
SERVER_QUERY_KEYS = ("guildid", "guild", "server")
CALLBACK_PATH = "/callback"


class VerificationFlowService:
    """Drives the verification page: idle -> verifying -> verified | failed.

    All view state is derived from the incoming request and returned to the
    caller; nothing is kept between requests.
    """

    def __init__(self, exchange_service: ExchangeService):
        self.exchange_service = exchange_service
        self.settings = exchange_service.settings

    @staticmethod
    def resolve_server_id(
        path_server_id: str | None,
        query: dict[str, str],
    ) -> str | None:
        candidates = (path_server_id, *(query.get(key) for key in SERVER_QUERY_KEYS))
        for candidate in candidates:
            cleaned = (candidate or "").strip()
            if cleaned and cleaned != DEFAULT_STATE:
                return ExchangeService.validate_server_id(cleaned)
        return None

    @staticmethod
    def server_id_from_state(state: str | None) -> str | None:
        cleaned = (state or "").strip()
        if not cleaned or cleaned == DEFAULT_STATE:
            return None
        return ExchangeService.validate_server_id(cleaned)

    @staticmethod
    def callback_uri(origin: str) -> str:
        return f"{origin.rstrip('/')}{CALLBACK_PATH}"

    @staticmethod
    def strip_oauth_params(url: str) -> str:
        parts = urlsplit(url)
        kept = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if key not in {"code", "state"}
        ]
        return urlunsplit(parts._replace(query=urlencode(kept)))

    @staticmethod
    def idle_url(server_id: str | None) -> str:
        return f"/verify/{quote(server_id, safe='')}" if server_id else "/"

    def build_authorize_url(self, *, server_id: str | None, origin: str) -> str:
        self.exchange_service.ensure_client_id()
        return self.exchange_service.oauth_client().build_authorize_url(
            redirect_uri=self.callback_uri(origin),
            state=server_id or DEFAULT_STATE,
        )

    def idle(self, *, server_id: str | None, origin: str) -> VerificationOutcome:
        return VerificationOutcome(
            state=VerificationState.IDLE,
            server_id=server_id,
            authorize_url=self.build_authorize_url(server_id=server_id, origin=origin),
        )

    async def complete(
        self,
        *,
        code: str | None,
        state: str | None,
        error: str | None,
        origin: str,
        current_url: str,
        fallback_server_id: str | None = None,
    ) -> VerificationOutcome:
        try:
            server_id = self.server_id_from_state(state) or fallback_server_id
        except ApiException as exc:
            return VerificationOutcome(
                state=VerificationState.FAILED,
                server_id=fallback_server_id,
                message=exc.message,
                retry_url=self.idle_url(fallback_server_id),
                status_code=exc.status_code,
            )
        retry_url = self.idle_url(server_id)

        if error:
            return VerificationOutcome(
                state=VerificationState.FAILED,
                server_id=server_id,
                message=f"Discord authentication failed: {error}",
                retry_url=retry_url,
                status_code=400,
            )
        if not code:
            return VerificationOutcome(
                state=VerificationState.FAILED,
                server_id=server_id,
                message="No authorization code received from Discord",
                retry_url=retry_url,
                status_code=400,
            )

        logger.info(
            "Verification %s -> %s server=%s",
            VerificationState.IDLE.value,
            VerificationState.VERIFYING.value,
            server_id or "-",
        )
        try:
            result = await self.exchange_service.exchange(
                code=code,
                redirect_uri=self.callback_uri(origin),
                server_id=server_id,
            )
        except ApiException as exc:
            logger.info("Verification failed: %s", exc.error_code)
            return VerificationOutcome(
                state=VerificationState.FAILED,
                server_id=server_id,
                message=exc.message or "Verification failed",
                retry_url=retry_url,
                status_code=exc.status_code,
            )
        except Exception:
            logger.exception("Verification failed unexpectedly server=%s", server_id or "-")
            return VerificationOutcome(
                state=VerificationState.FAILED,
                server_id=server_id,
                message=InternalError.default_message,
                retry_url=retry_url,
                status_code=InternalError.status_code,
            )

        user = result["user"]
        return_query = urlencode({"success": "true", "user": user["username"]})
        return VerificationOutcome(
            state=VerificationState.VERIFIED,
            server_id=result["server_id"],
            user=user,
            message=f"Successfully verified as {user['username']}!",
            clean_url=self.strip_oauth_params(current_url),
            return_url=f"/verify/{quote(state or DEFAULT_STATE, safe='')}?{return_query}",
        )
