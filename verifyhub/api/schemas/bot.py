from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from verifyhub.api.schemas.stats import VerificationStatsResponse


class BotCommandRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    server_id: str = Field(default="", alias="serverId", max_length=64)
    admin_user_id: str = Field(default="", alias="adminUserId", max_length=64)


class BotCommandResponse(BaseModel):
    id: str
    command_type: str
    server_id: str
    admin_user_id: str
    verification_url: str | None = None
    created_at: datetime


class SetupVerifyResponse(BaseModel):
    command: BotCommandResponse
    verification_url: str


class PullResponse(BaseModel):
    command: BotCommandResponse
    message: str


class StatsCommandResponse(BaseModel):
    command: BotCommandResponse
    stats: VerificationStatsResponse


class BotSimulatorViewResponse(BaseModel):
    commands: list[BotCommandResponse]
    stats: VerificationStatsResponse
