"""Pydantic v2 schemas for the chat history endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.modules.chats.constants import GroupBy, SortOrder


class ChatListParams(BaseModel):
    """Validated query for GET /api/chats."""

    model_config = ConfigDict(frozen=True)

    page: int
    page_size: int
    sort_order: SortOrder
    group_by: GroupBy
    search: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class ChatRecordSchema(BaseModel):
    """A single stored chat exchange."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: uuid.UUID
    session_id: str = Field(alias="sessionId")
    user_message: str = Field(alias="userMessage")
    ai_message: str = Field(alias="aiMessage")
    workflow: str
    workflow_id: str = Field(alias="workflowId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class ChatConversationSchema(BaseModel):
    """All records of one session, built at query time."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    messages: list[ChatRecordSchema] = Field(default_factory=list)


class PaginationMeta(BaseModel):
    """Pagination counters for a chat listing."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    page_size: int = Field(alias="pageSize")
    total: int
    total_pages: int = Field(alias="totalPages")
    group_by: GroupBy = Field(alias="groupBy")


class ChatListResponse(BaseModel):
    """Response body for GET /api/chats.

    ``data`` is a flat list in simple mode and a ``sessionId -> conversation``
    mapping in session mode.
    """

    model_config = ConfigDict(populate_by_name=True)

    data: list[ChatRecordSchema] | dict[str, ChatConversationSchema]
    pagination: PaginationMeta


class ChatStats(BaseModel):
    """Record counts since the start of today, month and year, plus all time."""

    model_config = ConfigDict(populate_by_name=True)

    daily: int
    monthly: int
    yearly: int
    all_time: int = Field(alias="allTime")


class ChatStatsResponse(BaseModel):
    """Response body for GET /api/stats."""

    data: ChatStats
