from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from verifyhub.api.deps.admin import get_current_admin
from verifyhub.api.schemas.common import HealthResponse
from verifyhub.core.config import get_settings
from verifyhub.core.database import DatabaseManager

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="ok",
        service=settings.APP_NAME,
        environment=settings.APP_ENV,
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/health/deep")
async def deep_health(
    _: object = Depends(get_current_admin),
):
    settings = get_settings()
    checks: dict[str, dict] = {}
    overall = "ok"

    try:
        checks["database"] = {"status": "ok", "latency_ms": await DatabaseManager.ping()}
    except Exception as exc:
        checks["database"] = {"status": "fail", "error": exc.__class__.__name__}
        overall = "fail"

    checks["discord_oauth"] = {
        "status": "ok"
        if settings.DISCORD_CLIENT_ID and settings.DISCORD_CLIENT_SECRET
        else "fail",
    }
    if checks["discord_oauth"]["status"] != "ok":
        overall = "fail"

    return {
        "status": overall,
        "service": settings.APP_NAME,
        "environment": settings.APP_ENV,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc),
        "checks": checks,
    }
