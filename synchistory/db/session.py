"""Database session configuration.

The job history services only read from the job store, so sessions are
opened per repository call and never committed.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from synchistory.core.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine for the job store."""
    connect_args = {
        "server_settings": {
            # Kill idle transactions after 5 minutes
            "idle_in_transaction_session_timeout": "300000",
        },
        "command_timeout": 60,
    }
    if settings.POSTGRES_SSLMODE == "disable":
        connect_args["ssl"] = False

    return create_async_engine(
        str(settings.SQLALCHEMY_ASYNC_DATABASE_URI),
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_pool_max_overflow,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_timeout=30,
        isolation_level="READ COMMITTED",
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the given engine."""
    return async_sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


@asynccontextmanager
async def read_only_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session and roll back whatever it touched on exit.

    Yields:
        AsyncSession: An async database session
    """
    async with session_factory() as db:
        try:
            yield db
        finally:
            await db.rollback()
