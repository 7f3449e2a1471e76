from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from verifyhub.domain.policies.access_key_policy import AdminRole


@dataclass(frozen=True)
class AdminPrincipal:
    role: AdminRole
    session_id: str
    expires_at: datetime

    @property
    def is_owner(self) -> bool:
        return self.role is AdminRole.OWNER


@dataclass(frozen=True)
class IssuedAdminSession:
    access_token: str
    expires_at: datetime
    principal: AdminPrincipal
