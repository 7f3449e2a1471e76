from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from verifyhub.infrastructure.db.models.bot import BotCommand


class BotCommandRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> BotCommand:
        row = BotCommand(**kwargs)
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def list(self, *, limit: int | None = None) -> Sequence[BotCommand]:
        stmt = select(BotCommand).order_by(BotCommand.created_at.desc(), BotCommand.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
