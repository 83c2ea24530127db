"""Chat history router — paginated listing and aggregate stats."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.database.session import get_db, get_session_factory
from src.modules.chats.schemas import ChatListParams, ChatListResponse, ChatStatsResponse
from src.modules.chats.service import ChatQueryService
from src.modules.chats.stats_service import ChatStatsService
from src.modules.chats.validators import parse_list_params
from src.schemas.responses import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chats"])

LIST_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid page or page size"},
    403: {"model": ErrorResponse, "description": "Origin not allowed"},
    500: {"model": ErrorResponse, "description": "Database unavailable"},
}
STATS_ERROR_RESPONSES = {code: LIST_ERROR_RESPONSES[code] for code in (403, 500)}


def _get_query_service(db: AsyncSession = Depends(get_db)) -> ChatQueryService:
    return ChatQueryService(db)


def _get_stats_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ChatStatsService:
    return ChatStatsService(session_factory)


def _list_params(
    page: str | None = Query(default=None),
    page_size: str | None = Query(default=None, alias="pageSize"),
    sort_order: str | None = Query(default=None, alias="sortOrder"),
    group_by: str | None = Query(default=None, alias="groupBy"),
    search: str | None = Query(default=None),
) -> ChatListParams:
    # Raw strings: unparsable numbers fall back to defaults instead of a 422.
    return parse_list_params(
        page=page,
        page_size=page_size,
        sort_order=sort_order,
        group_by=group_by,
        search=search,
    )


@router.get("/chats", response_model=ChatListResponse, responses=LIST_ERROR_RESPONSES)
async def list_chats(
    params: ChatListParams = Depends(_list_params),
    service: ChatQueryService = Depends(_get_query_service),
) -> ChatListResponse:
    """List chat records, flat or grouped by session, with optional search."""
    response = await service.list_chats(params)
    logger.debug(
        "Listed chats page=%d page_size=%d group_by=%s total=%d",
        params.page,
        params.page_size,
        params.group_by.value,
        response.pagination.total,
    )
    return response


@router.get("/stats", response_model=ChatStatsResponse, responses=STATS_ERROR_RESPONSES)
async def chat_stats(
    service: ChatStatsService = Depends(_get_stats_service),
) -> ChatStatsResponse:
    """Record counts for today, this month, this year and all time."""
    return ChatStatsResponse(data=await service.get_stats())
