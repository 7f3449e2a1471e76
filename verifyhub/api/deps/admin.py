from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from verifyhub.application.dto.admin import AdminPrincipal
from verifyhub.application.services.admin_service import AdminService
from verifyhub.core.errors import AuthenticationError, PermissionDeniedError

bearer_scheme = HTTPBearer(auto_error=False)


def get_admin_service() -> AdminService:
    return AdminService()


async def get_optional_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    service: AdminService = Depends(get_admin_service),
) -> AdminPrincipal | None:
    if credentials is None or not credentials.credentials:
        return None
    return service.principal_from_token(credentials.credentials)


async def get_current_admin(
    principal: AdminPrincipal | None = Depends(get_optional_admin),
) -> AdminPrincipal:
    if principal is None:
        raise AuthenticationError(
            "Admin access key session is required",
            error_code="AUTH_REQUIRED",
        )
    return principal


async def require_owner(
    principal: AdminPrincipal = Depends(get_current_admin),
) -> AdminPrincipal:
    if not principal.is_owner:
        raise PermissionDeniedError("Owner access is required")
    return principal
