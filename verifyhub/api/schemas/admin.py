from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from verifyhub.api.schemas.stats import VerificationStatsResponse
from verifyhub.domain.policies.access_key_policy import AdminRole


class AdminLoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str = Field(default="", max_length=512)


class AdminSessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    session_id: str
    role: AdminRole
    can_show_tokens: bool


class VerifiedUserResponse(BaseModel):
    id: str
    user_id: str
    username: str
    discriminator: str
    avatar_url: str | None = None
    server_id: str
    verified_at: datetime
    expires_at: datetime | None = None
    access_token_preview: str | None = None


class AccessTokenResponse(BaseModel):
    id: str
    user_id: str
    access_token: str


class AdminDashboardResponse(BaseModel):
    authenticated: bool
    role: AdminRole | None = None
    can_show_tokens: bool = False
    users: list[VerifiedUserResponse] = Field(default_factory=list)
    stats: VerificationStatsResponse | None = None
