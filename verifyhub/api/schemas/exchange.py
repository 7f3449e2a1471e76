from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExchangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str | None = None
    redirect_uri: str | None = Field(default=None, alias="redirectUri")
    server_id: str | None = Field(default=None, alias="serverId", max_length=64)


class ExchangeUser(BaseModel):
    id: str
    username: str
    discriminator: str
    avatar: str
    email: str | None = None


class ExchangeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    user: ExchangeUser
    server_id: str = Field(alias="serverId")
