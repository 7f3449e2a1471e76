from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from verifyhub.api.deps.origin import get_public_origin
from verifyhub.api.schemas.bot import (
    BotCommandRequest,
    BotCommandResponse,
    PullResponse,
    SetupVerifyResponse,
    StatsCommandResponse,
)
from verifyhub.api.schemas.stats import VerificationStatsResponse
from verifyhub.application.services.bot_simulator_service import BotSimulatorService
from verifyhub.application.services.stats_service import StatsService

router = APIRouter()


def get_bot_simulator_service() -> BotSimulatorService:
    return BotSimulatorService()


@router.post("/commands/setup-verify", response_model=SetupVerifyResponse)
async def setup_verify(
    payload: BotCommandRequest,
    origin: str = Depends(get_public_origin),
    service: BotSimulatorService = Depends(get_bot_simulator_service),
):
    result = await service.setup_verify(
        server_id=payload.server_id,
        admin_user_id=payload.admin_user_id,
        origin=origin,
    )
    return SetupVerifyResponse(**result)


@router.post("/commands/pull", response_model=PullResponse)
async def pull_users(
    payload: BotCommandRequest,
    service: BotSimulatorService = Depends(get_bot_simulator_service),
):
    result = await service.pull(
        server_id=payload.server_id,
        admin_user_id=payload.admin_user_id,
    )
    return PullResponse(**result)


@router.post("/commands/stats", response_model=StatsCommandResponse)
async def stats_command(
    payload: BotCommandRequest,
    service: BotSimulatorService = Depends(get_bot_simulator_service),
):
    result = await service.stats(
        server_id=payload.server_id,
        admin_user_id=payload.admin_user_id,
    )
    return StatsCommandResponse(**result)


@router.get("/commands", response_model=list[BotCommandResponse])
async def list_commands(
    limit: int | None = Query(default=None, ge=1, le=100),
    service: BotSimulatorService = Depends(get_bot_simulator_service),
):
    rows = await service.list_recent(limit=limit)
    return [BotCommandResponse(**row) for row in rows]


@router.get("/stats", response_model=VerificationStatsResponse)
async def verification_stats():
    return VerificationStatsResponse(**(await StatsService().get_verification_stats()))
