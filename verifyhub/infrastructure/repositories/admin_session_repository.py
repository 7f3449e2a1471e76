from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from verifyhub.infrastructure.db.models.admin import AdminSession


class AdminSessionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> AdminSession:
        row = AdminSession(**kwargs)
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return row
