"""Async engine construction — one bounded pool per process, built at startup."""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from src.config import Settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine with a fixed-size pool.

    ``max_overflow=0`` caps concurrent connections at ``db_pool_size``; callers
    queue for up to ``db_pool_timeout_seconds`` when the pool is exhausted.
    """
    url = settings.sqlalchemy_database_url
    connect_args: dict = {}
    if url.get_backend_name() == "postgresql":
        connect_args["command_timeout"] = settings.db_command_timeout_seconds

    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_pre_ping=True,
        pool_recycle=settings.db_pool_recycle_seconds,
        pool_timeout=settings.db_pool_timeout_seconds,
        connect_args=connect_args,
        echo=settings.db_echo and settings.environment == "development",
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def verify_connection(engine: AsyncEngine) -> None:
    """Run ``SELECT 1``; any failure propagates and aborts startup."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database connection established (%s)", engine.url.render_as_string(hide_password=True))
