"""Tests for ChatStatsService — calendar windows and concurrent fan-out."""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.database.base import Base
from src.exceptions import BackendUnavailableException
from src.models.chat import ChatRecord
from src.modules.chats.stats_service import ChatStatsService, StatsWindow

NOW = datetime(2026, 10, 18, 14, 30, 15)


class _FakeSession:
    """Session stand-in whose ``execute`` waits on a shared barrier."""

    def __init__(self, barrier: asyncio.Barrier, value: int | Exception, finished: list) -> None:
        self.barrier = barrier
        self.value = value
        self.finished = finished

    async def __aenter__(self) -> _FakeSession:
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    async def execute(self, query):
        await self.barrier.wait()
        self.finished.append(self.value)
        if isinstance(self.value, Exception):
            raise self.value
        result = MagicMock()
        result.scalar.return_value = self.value
        return result


def _fake_factory(values: list[int | Exception], finished: list) -> MagicMock:
    barrier = asyncio.Barrier(len(values))
    sessions = iter(_FakeSession(barrier, value, finished) for value in values)
    return MagicMock(side_effect=lambda: next(sessions))


class TestStatsWindow:
    def test_boundaries_from_one_instant(self) -> None:
        window = StatsWindow.from_instant(NOW)

        assert window.start_of_day == datetime(2026, 10, 18)
        assert window.start_of_month == datetime(2026, 10, 1)
        assert window.start_of_year == datetime(2026, 1, 1)

    def test_first_of_january(self) -> None:
        window = StatsWindow.from_instant(datetime(2027, 1, 1, 0, 0, 1))

        assert window.start_of_day == window.start_of_month == window.start_of_year == datetime(2027, 1, 1)


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_four_counts_run_in_parallel(self) -> None:
        finished: list = []
        service = ChatStatsService(_fake_factory([2, 3, 4, 6], finished))

        # A sequential implementation would block on the barrier forever.
        stats = await asyncio.wait_for(service.get_stats(now=NOW), timeout=2)

        assert (stats.daily, stats.monthly, stats.yearly, stats.all_time) == (2, 3, 4, 6)

    @pytest.mark.asyncio
    async def test_failure_fails_whole_response_after_all_settle(self) -> None:
        finished: list = []
        failure = OperationalError("SELECT", {}, Exception("connection reset"))
        service = ChatStatsService(_fake_factory([2, failure, 4, 6], finished))

        with pytest.raises(BackendUnavailableException):
            await asyncio.wait_for(service.get_stats(now=NOW), timeout=2)

        assert len(finished) == 4


@pytest_asyncio.fixture
async def stats_session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stats.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                ChatRecord(
                    id=uuid.uuid4(),
                    session_id="s1",
                    user_message=f"m{i}",
                    ai_message="r",
                    workflow="support-bot",
                    workflow_id="wf-1",
                    created_at=created_at,
                    updated_at=created_at,
                )
                for i, created_at in enumerate(
                    [
                        datetime(2026, 10, 18, 0, 0),  # start of today, inclusive
                        datetime(2026, 10, 18, 9, 45),
                        datetime(2026, 10, 17, 23, 59),
                        datetime(2026, 10, 1, 0, 0),
                        datetime(2026, 3, 14, 8, 0),
                        datetime(2025, 12, 31, 23, 59),
                        datetime(2024, 6, 1, 12, 0),
                    ]
                )
            ]
        )
        await session.commit()
    yield factory
    await engine.dispose()


class TestCounts:
    @pytest.mark.asyncio
    async def test_counts_per_window(self, stats_session_factory) -> None:
        stats = await ChatStatsService(stats_session_factory).get_stats(now=NOW)

        assert stats.daily == 2
        assert stats.monthly == 4
        assert stats.yearly == 5
        assert stats.all_time == 7

    @pytest.mark.asyncio
    async def test_repeated_calls_are_identical(self, stats_session_factory) -> None:
        service = ChatStatsService(stats_session_factory)

        results = await asyncio.gather(*(service.get_stats(now=NOW) for _ in range(3)))

        assert all(result == results[0] for result in results)
