from __future__ import annotations

from pydantic import BaseModel

from verifyhub.api.schemas.exchange import ExchangeUser
from verifyhub.application.dto.verification import VerificationState


class VerificationViewResponse(BaseModel):
    state: VerificationState
    server_id: str | None = None
    authorize_url: str | None = None
    user: ExchangeUser | None = None
    message: str | None = None
    clean_url: str | None = None
    return_url: str | None = None
    retry_url: str | None = None
