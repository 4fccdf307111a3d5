"""
Async database engine and sessions for the task store.

The board is small and saved as a whole, so a modest pool is enough; pool
sizes come from settings.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from taskboard.config import get_settings
from taskboard.logging_config import get_logger

logger = get_logger(__name__)

settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_recycle=1800,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create the ``tasks`` and ``comments`` tables if they are missing."""
    import taskboard.models  # noqa: F401  (registers table metadata)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.debug(f"Tables ensured: {', '.join(sorted(SQLModel.metadata.tables))}")


async def close_db() -> None:
    await engine.dispose()


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    One unit of work.

    Commits when the block exits cleanly and rolls back (then re-raises)
    otherwise, so a failed save never leaves a half-replaced board.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
