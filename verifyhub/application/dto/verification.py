from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class VerificationState(str, Enum):
    IDLE = "idle"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    FAILED = "failed"


@dataclass(frozen=True)
class VerificationOutcome:
    state: VerificationState
    server_id: str | None = None
    authorize_url: str | None = None
    user: dict[str, Any] | None = None
    message: str | None = None
    clean_url: str | None = None
    return_url: str | None = None
    retry_url: str | None = None
    status_code: int = 200
