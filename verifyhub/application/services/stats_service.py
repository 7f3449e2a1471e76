from __future__ import annotations

from dataclasses import asdict
from typing import Any

from verifyhub.core.database import get_session
from verifyhub.domain.verification_stats import compute_verification_stats
from verifyhub.infrastructure.repositories.verification_repository import (
    VerifiedUserRepository,
)


class StatsService:
    async def get_verification_stats(self) -> dict[str, Any]:
        async with get_session() as session:
            rows = await VerifiedUserRepository(session).list()
            stats = compute_verification_stats(rows)
        payload = asdict(stats)
        payload["server_breakdown"] = list(payload["server_breakdown"])
        return payload
