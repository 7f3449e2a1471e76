from __future__ import annotations

import logging
from time import perf_counter

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from verifyhub.core.config import PortalSettings, get_settings

logger = logging.getLogger(__name__)


class AccessLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, settings: PortalSettings | None = None):
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next):
        started = perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            if self.settings.ENABLE_ACCESS_LOG:
                logger.info(
                    "http_request method=%s path=%s status=%s duration_ms=%.2f ip=%s",
                    request.method,
                    request.url.path,
                    status_code,
                    (perf_counter() - started) * 1000.0,
                    _client_identity(request),
                )


class PermissiveCorsMiddleware(BaseHTTPMiddleware):
    """Answers every preflight and stamps the allow-origin header on all responses."""

    def __init__(self, app, settings: PortalSettings | None = None):
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=self.preflight_headers())
        response = await call_next(request)
        response.headers.setdefault(
            "Access-Control-Allow-Origin", self.settings.CORS_ALLOW_ORIGIN
        )
        return response

    def preflight_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.settings.CORS_ALLOW_ORIGIN,
            "Access-Control-Allow-Methods": self.settings.cors_allow_methods,
            "Access-Control-Allow-Headers": self.settings.cors_allow_headers,
        }


def _client_identity(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
