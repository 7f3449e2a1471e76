from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Protocol

from verifyhub.core.clock import ensure_utc, utc_now

RECENT_WINDOW = timedelta(hours=24)


class VerificationLike(Protocol):
    verified_at: datetime
    server_id: str | None


@dataclass(frozen=True)
class ServerCount:
    server_id: str
    count: int


@dataclass(frozen=True)
class VerificationStats:
    total_users: int
    recent_verifications: int
    unique_servers: int
    server_breakdown: tuple[ServerCount, ...] = ()


def compute_verification_stats(
    records: Iterable[VerificationLike],
    *,
    now: datetime | None = None,
    window: timedelta = RECENT_WINDOW,
) -> VerificationStats:
    cutoff = ensure_utc(now or utc_now()) - window
    total = 0
    recent = 0
    per_server: dict[str, int] = {}
    for record in records:
        total += 1
        if ensure_utc(record.verified_at) > cutoff:
            recent += 1
        if record.server_id:
            per_server[record.server_id] = per_server.get(record.server_id, 0) + 1

    return VerificationStats(
        total_users=total,
        recent_verifications=recent,
        unique_servers=len(per_server),
        server_breakdown=tuple(
            ServerCount(server_id=server_id, count=count)
            for server_id, count in per_server.items()
        ),
    )
