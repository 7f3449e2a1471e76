from fastapi import Request

from verifyhub.core.config import get_settings


def get_public_origin(request: Request) -> str:
    """Origin that redirect and verification links should point back at."""
    configured = get_settings().public_base_url
    if configured:
        return configured
    return str(request.base_url).rstrip("/")
