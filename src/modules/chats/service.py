"""Chat query service — flat and session-grouped pagination over the chats table."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from pydantic import ValidationError
from sqlalchemy import ColumnElement, Select, distinct, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import BackendUnavailableException
from src.models.chat import ChatRecord
from src.modules.chats.constants import GroupBy, SortOrder
from src.modules.chats.schemas import (
    ChatConversationSchema,
    ChatListParams,
    ChatListResponse,
    ChatRecordSchema,
    PaginationMeta,
)

logger = logging.getLogger(__name__)


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total > 0 else 0


def search_predicate(term: str | None) -> ColumnElement[bool] | None:
    """Case-insensitive substring match on both messages and the session id.

    LIKE wildcards in *term* are escaped so ``%`` and ``_`` match literally.
    """
    if not term:
        return None
    return or_(
        ChatRecord.user_message.icontains(term, autoescape=True),
        ChatRecord.ai_message.icontains(term, autoescape=True),
        ChatRecord.session_id.icontains(term, autoescape=True),
    )


def _filtered(query: Select, predicate: ColumnElement[bool] | None) -> Select:
    return query if predicate is None else query.where(predicate)


def session_order(dialect_name: str) -> ColumnElement:
    """Ascending session id, compared byte-wise on PostgreSQL whatever its locale."""
    column = ChatRecord.session_id
    if dialect_name == "postgresql":
        column = column.collate("C")
    return column.asc()


def _to_schema(records: Sequence[ChatRecord]) -> list[ChatRecordSchema]:
    """Convert ORM rows; one unreadable row fails the whole page."""
    try:
        return [ChatRecordSchema.model_validate(record) for record in records]
    except ValidationError as exc:
        raise BackendUnavailableException(f"Malformed chat record in result set: {exc}") from exc


class ChatQueryService:
    """Read-only paginated access to chat history."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_chats(self, params: ChatListParams) -> ChatListResponse:
        try:
            if params.group_by == GroupBy.SESSION:
                return await self._list_by_session(params)
            return await self._list_simple(params)
        except SQLAlchemyError as exc:
            raise BackendUnavailableException(f"Chat query failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Simple mode — row-level pagination
    # ------------------------------------------------------------------

    async def _list_simple(self, params: ChatListParams) -> ChatListResponse:
        predicate = search_predicate(params.search)
        if params.sort_order == SortOrder.DESC:
            ordering = (ChatRecord.created_at.desc(), ChatRecord.id.desc())
        else:
            ordering = (ChatRecord.created_at.asc(), ChatRecord.id.asc())

        query = (
            _filtered(select(ChatRecord), predicate)
            .order_by(*ordering)
            .offset(params.offset)
            .limit(params.page_size)
        )
        result = await self.db.execute(query)
        records = _to_schema(result.scalars().all())

        count_query = _filtered(select(func.count()).select_from(ChatRecord), predicate)
        total = (await self.db.execute(count_query)).scalar() or 0

        return self._envelope(records, params, total)

    # ------------------------------------------------------------------
    # Session mode — pages over distinct sessions, returns full histories
    # ------------------------------------------------------------------

    async def _list_by_session(self, params: ChatListParams) -> ChatListResponse:
        predicate = search_predicate(params.search)

        # Sessions are always listed in ascending id order; sort_order only
        # orders the messages inside each session.
        session_query = (
            _filtered(select(ChatRecord.session_id).distinct(), predicate)
            .order_by(session_order(self.db.bind.dialect.name))
            .offset(params.offset)
            .limit(params.page_size)
        )
        session_ids = list((await self.db.execute(session_query)).scalars().all())

        if not session_ids:
            return self._envelope({}, params, 0)

        # Every record of a selected session, matching the search or not.
        if params.sort_order == SortOrder.DESC:
            ordering = (ChatRecord.created_at.desc(), ChatRecord.session_id, ChatRecord.id.desc())
        else:
            ordering = (ChatRecord.created_at.asc(), ChatRecord.session_id, ChatRecord.id.asc())
        records_query = (
            select(ChatRecord)
            .where(ChatRecord.session_id.in_(session_ids))
            .order_by(*ordering)
        )
        result = await self.db.execute(records_query)
        records = _to_schema(result.scalars().all())

        conversations: dict[str, ChatConversationSchema] = {
            session_id: ChatConversationSchema(session_id=session_id) for session_id in session_ids
        }
        for record in records:
            conversations[record.session_id].messages.append(record)
        # A session removed between the two reads has nothing to show.
        conversations = {sid: conv for sid, conv in conversations.items() if conv.messages}

        count_query = _filtered(
            select(func.count(distinct(ChatRecord.session_id))).select_from(ChatRecord),
            predicate,
        )
        total = (await self.db.execute(count_query)).scalar() or 0

        return self._envelope(conversations, params, total)

    @staticmethod
    def _envelope(
        data: list[ChatRecordSchema] | dict[str, ChatConversationSchema],
        params: ChatListParams,
        total: int,
    ) -> ChatListResponse:
        return ChatListResponse(
            data=data,
            pagination=PaginationMeta(
                page=params.page,
                page_size=params.page_size,
                total=total,
                total_pages=total_pages(total, params.page_size),
                group_by=params.group_by,
            ),
        )
