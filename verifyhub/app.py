import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from verifyhub.api.router import api_router, root_router
from verifyhub.core.config import get_settings
from verifyhub.core.database import DatabaseManager
from verifyhub.core.errors import register_exception_handlers
from verifyhub.core.logging import configure_logging
from verifyhub.core.observability import AccessLogMiddleware, PermissiveCorsMiddleware
from verifyhub.core.request_context import RequestContextMiddleware

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """FastAPI app factory."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await DatabaseManager.initialize()
        if not settings.DISCORD_CLIENT_ID or not settings.DISCORD_CLIENT_SECRET:
            logger.warning("Discord OAuth credentials are not configured")
        if not settings.PORTAL_OWNER_KEY and not settings.PORTAL_ADMIN_KEY:
            logger.warning("No admin access keys configured; dashboard is locked")
        try:
            yield
        finally:
            await DatabaseManager.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(AccessLogMiddleware, settings=settings)
    app.add_middleware(RequestContextMiddleware)
    # Registered last so it wraps the full stack and can short-circuit preflight.
    app.add_middleware(PermissiveCorsMiddleware, settings=settings)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(root_router)
    register_exception_handlers(app)

    return app
