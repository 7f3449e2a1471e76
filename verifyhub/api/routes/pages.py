from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from verifyhub.api.deps.admin import get_admin_service, get_optional_admin
from verifyhub.api.deps.origin import get_public_origin
from verifyhub.api.routes.bot import get_bot_simulator_service
from verifyhub.api.routes.exchange import get_exchange_service
from verifyhub.api.schemas.admin import AdminDashboardResponse, VerifiedUserResponse
from verifyhub.api.schemas.bot import BotCommandResponse, BotSimulatorViewResponse
from verifyhub.api.schemas.stats import VerificationStatsResponse
from verifyhub.api.schemas.verification import VerificationViewResponse
from verifyhub.application.dto.admin import AdminPrincipal
from verifyhub.application.dto.verification import VerificationOutcome
from verifyhub.application.services.admin_service import AdminService
from verifyhub.application.services.bot_simulator_service import BotSimulatorService
from verifyhub.application.services.exchange_service import ExchangeService
from verifyhub.application.services.stats_service import StatsService
from verifyhub.application.services.verification_flow_service import (
    VerificationFlowService,
)

router = APIRouter()


def get_verification_flow_service(
    exchange_service: ExchangeService = Depends(get_exchange_service),
) -> VerificationFlowService:
    return VerificationFlowService(exchange_service)


def _view_response(outcome: VerificationOutcome) -> JSONResponse:
    view = VerificationViewResponse(
        state=outcome.state,
        server_id=outcome.server_id,
        authorize_url=outcome.authorize_url,
        user=outcome.user,
        message=outcome.message,
        clean_url=outcome.clean_url,
        return_url=outcome.return_url,
        retry_url=outcome.retry_url,
    )
    return JSONResponse(
        status_code=outcome.status_code,
        content=view.model_dump(mode="json", exclude_none=True),
    )


async def _render_verification_page(
    request: Request,
    *,
    path_server_id: str | None,
    origin: str,
    flow: VerificationFlowService,
) -> JSONResponse:
    query = dict(request.query_params)
    server_id = flow.resolve_server_id(path_server_id, query)
    if "code" in query or "error" in query:
        outcome = await flow.complete(
            code=query.get("code"),
            state=query.get("state"),
            error=query.get("error"),
            origin=origin,
            current_url=str(request.url),
            fallback_server_id=server_id,
        )
    else:
        outcome = flow.idle(server_id=server_id, origin=origin)
    return _view_response(outcome)


@router.get("/", response_model=VerificationViewResponse)
async def verification_page(
    request: Request,
    origin: str = Depends(get_public_origin),
    flow: VerificationFlowService = Depends(get_verification_flow_service),
):
    return await _render_verification_page(
        request, path_server_id=None, origin=origin, flow=flow
    )


@router.get("/verify/{server_id}", response_model=VerificationViewResponse)
async def server_verification_page(
    server_id: str,
    request: Request,
    origin: str = Depends(get_public_origin),
    flow: VerificationFlowService = Depends(get_verification_flow_service),
):
    return await _render_verification_page(
        request, path_server_id=server_id, origin=origin, flow=flow
    )


@router.get("/callback", response_model=VerificationViewResponse)
@router.get("/auth/discord/callback", response_model=VerificationViewResponse)
async def discord_callback(
    request: Request,
    origin: str = Depends(get_public_origin),
    flow: VerificationFlowService = Depends(get_verification_flow_service),
):
    query = request.query_params
    outcome = await flow.complete(
        code=query.get("code"),
        state=query.get("state"),
        error=query.get("error"),
        origin=origin,
        current_url=str(request.url),
    )
    return _view_response(outcome)


@router.get("/admin", response_model=AdminDashboardResponse)
async def admin_page(
    principal: AdminPrincipal | None = Depends(get_optional_admin),
    service: AdminService = Depends(get_admin_service),
):
    if principal is None:
        return AdminDashboardResponse(authenticated=False)
    users = await service.list_users(principal=principal)
    stats = await service.get_stats()
    return AdminDashboardResponse(
        authenticated=True,
        role=principal.role,
        can_show_tokens=principal.is_owner,
        users=[VerifiedUserResponse(**row) for row in users],
        stats=VerificationStatsResponse(**stats),
    )


@router.get("/bot", response_model=BotSimulatorViewResponse)
async def bot_page(
    service: BotSimulatorService = Depends(get_bot_simulator_service),
):
    commands = await service.list_recent()
    stats = await StatsService().get_verification_stats()
    return BotSimulatorViewResponse(
        commands=[BotCommandResponse(**row) for row in commands],
        stats=VerificationStatsResponse(**stats),
    )
