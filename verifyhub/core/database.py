import logging
from contextlib import asynccontextmanager
from time import perf_counter
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from verifyhub.core.config import get_settings
from verifyhub.infrastructure.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Async SQLAlchemy engine and session factory shared by the app."""

    _engine = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    async def initialize(cls) -> None:
        if cls._engine is not None:
            return

        settings = get_settings()
        engine_kwargs = {"echo": settings.DATABASE_ECHO}
        if not settings.is_sqlite:
            engine_kwargs.update(
                pool_size=settings.DATABASE_POOL_SIZE,
                max_overflow=settings.DATABASE_MAX_OVERFLOW,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        cls._engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)
        cls._session_factory = async_sessionmaker(
            cls._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        # Ensure model modules are imported before metadata usage.
        from verifyhub.infrastructure.db import models  # noqa: F401

        if settings.AUTO_CREATE_TABLES:
            async with cls._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Record store tables ensured")

    @classmethod
    async def close(cls) -> None:
        if cls._engine is not None:
            await cls._engine.dispose()
            cls._engine = None
            cls._session_factory = None
            logger.info("Database engine closed")

    @classmethod
    def session_factory(cls) -> async_sessionmaker[AsyncSession]:
        if cls._session_factory is None:
            raise RuntimeError(
                "Database manager is not initialized. Call initialize() first."
            )
        return cls._session_factory

    @classmethod
    async def ping(cls) -> float:
        """Round-trips a trivial query and returns the latency in milliseconds."""
        started = perf_counter()
        async with cls.session_factory()() as session:
            await session.execute(text("SELECT 1"))
        return round((perf_counter() - started) * 1000.0, 3)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    session_maker = DatabaseManager.session_factory()
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
