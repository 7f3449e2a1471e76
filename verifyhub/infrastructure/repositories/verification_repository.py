from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from verifyhub.infrastructure.db.models.verification import VerifiedUser


class VerifiedUserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> VerifiedUser:
        row = VerifiedUser(**kwargs)
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def get_by_id(self, record_id: str) -> VerifiedUser | None:
        stmt = select(VerifiedUser).where(VerifiedUser.id == record_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(self, *, limit: int | None = None) -> Sequence[VerifiedUser]:
        stmt = select(VerifiedUser).order_by(
            VerifiedUser.verified_at.desc(),
            VerifiedUser.id.desc(),
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
