"""Pytest fixtures for Chat History API tests."""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from src.app import create_app
from src.config import Settings
from src.database.base import Base
from src.database.session import get_session_factory
from src.models.chat import ChatRecord

ALLOWED_ORIGIN = "https://chat.example"


@pytest_asyncio.fixture
async def async_test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    # File-backed SQLite so concurrent sessions (stats fan-out) see the same data
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chats.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def seed(session_factory):
    """Insert chat rows: ``await seed([(session_id, user_message, ai_message, created_at), ...])``."""

    async def _seed(rows: list[tuple[str, str, str, datetime]]) -> list[ChatRecord]:
        records = [
            ChatRecord(
                id=uuid.uuid4(),
                session_id=session_id,
                user_message=user_message,
                ai_message=ai_message,
                workflow="support-bot",
                workflow_id="wf-1",
                created_at=created_at,
                updated_at=created_at,
            )
            for session_id, user_message, ai_message, created_at in rows
        ]
        async with session_factory() as session:
            session.add_all(records)
            await session.commit()
        return records

    return _seed


@pytest.fixture
def allowed_origin() -> str:
    return ALLOWED_ORIGIN


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, chat_url=ALLOWED_ORIGIN, database_url="sqlite+aiosqlite://")


@pytest.fixture
def app(test_settings, session_factory) -> FastAPI:
    application = create_app(test_settings)
    application.dependency_overrides[get_session_factory] = lambda: session_factory
    return application


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient wired to the app, sending the allowed Origin."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Origin": ALLOWED_ORIGIN},
    ) as client:
        yield client
