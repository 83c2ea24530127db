"""Chat stats service — four independent counts gathered concurrently."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.exceptions import BackendUnavailableException
from src.models.chat import ChatRecord
from src.modules.chats.schemas import ChatStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsWindow:
    """Calendar thresholds derived from a single instant."""

    start_of_day: datetime
    start_of_month: datetime
    start_of_year: datetime

    @classmethod
    def from_instant(cls, now: datetime) -> StatsWindow:
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return cls(
            start_of_day=midnight,
            start_of_month=midnight.replace(day=1),
            start_of_year=midnight.replace(month=1, day=1),
        )


class ChatStatsService:
    """Counts chat records per calendar window.

    Each count runs on its own session from the shared pool so the four
    queries can execute in parallel.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def _count(self, since: datetime | None = None) -> int:
        query = select(func.count()).select_from(ChatRecord)
        if since is not None:
            query = query.where(ChatRecord.created_at >= since)
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return result.scalar() or 0
        except SQLAlchemyError as exc:
            raise BackendUnavailableException(f"Chat count query failed: {exc}") from exc

    async def get_stats(self, now: datetime | None = None) -> ChatStats:
        """Return daily, monthly, yearly and all-time counts.

        *now* defaults to the current local time; all three thresholds are
        derived from it once. All four queries are awaited even if one fails,
        then the first failure is raised.
        """
        window = StatsWindow.from_instant(now or datetime.now().astimezone())

        results = await asyncio.gather(
            self._count(window.start_of_day),
            self._count(window.start_of_month),
            self._count(window.start_of_year),
            self._count(),
            return_exceptions=True,
        )
        for outcome in results:
            if isinstance(outcome, BaseException):
                raise outcome

        daily, monthly, yearly, all_time = results
        return ChatStats(daily=daily, monthly=monthly, yearly=yearly, all_time=all_time)
