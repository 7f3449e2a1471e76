from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Query, Response

from verifyhub.api.deps.admin import get_admin_service, get_current_admin, require_owner
from verifyhub.api.schemas.admin import (
    AccessTokenResponse,
    AdminLoginRequest,
    AdminSessionResponse,
    VerifiedUserResponse,
)
from verifyhub.api.schemas.stats import VerificationStatsResponse
from verifyhub.application.dto.admin import AdminPrincipal
from verifyhub.application.services.admin_service import AdminService

router = APIRouter()


@router.post("/session", response_model=AdminSessionResponse)
async def open_admin_session(
    payload: AdminLoginRequest,
    service: AdminService = Depends(get_admin_service),
):
    issued = await service.authenticate(payload.key)
    return AdminSessionResponse(
        access_token=issued.access_token,
        expires_at=issued.expires_at,
        session_id=issued.principal.session_id,
        role=issued.principal.role,
        can_show_tokens=issued.principal.is_owner,
    )


@router.get("/users", response_model=list[VerifiedUserResponse])
async def list_verified_users(
    show_tokens: bool = Query(default=False),
    principal: AdminPrincipal = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    rows = await service.list_users(principal=principal, show_tokens=show_tokens)
    return [VerifiedUserResponse(**row) for row in rows]


@router.get("/users/{record_id}/token", response_model=AccessTokenResponse)
async def reveal_access_token(
    record_id: str,
    principal: AdminPrincipal = Depends(require_owner),
    service: AdminService = Depends(get_admin_service),
):
    row = await service.reveal_token(principal=principal, record_id=record_id)
    return AccessTokenResponse(**row)


@router.get("/stats", response_model=VerificationStatsResponse)
async def verification_stats(
    _: AdminPrincipal = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return VerificationStatsResponse(**(await service.get_stats()))


@router.get("/export")
async def export_verified_users(
    principal: AdminPrincipal = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    rows = await service.export_users(principal=principal)
    return Response(
        content=json.dumps(rows, indent=2),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{service.export_filename()}"',
        },
    )
