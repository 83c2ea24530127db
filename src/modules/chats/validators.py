"""Chat listing validators — query-string parsing with strict range checks."""

from __future__ import annotations

from src.exceptions import ClientInputException
from src.modules.chats.constants import (
    DEFAULT_GROUP_BY,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_ORDER,
    MAX_OFFSET,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    MSG_INVALID_PAGE,
    MSG_INVALID_PAGE_SIZE,
    MSG_PAGE_OUT_OF_RANGE,
    GroupBy,
    SortOrder,
)
from src.modules.chats.schemas import ChatListParams


def _parse_int(raw: str | None, default: int) -> int:
    """Parse *raw* as an integer, falling back to *default* when missing or unparsable."""
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def parse_sort_order(raw: str | None) -> SortOrder:
    try:
        return SortOrder((raw or "").strip().lower())
    except ValueError:
        return DEFAULT_SORT_ORDER


def parse_group_by(raw: str | None) -> GroupBy:
    try:
        return GroupBy((raw or "").strip().lower())
    except ValueError:
        return DEFAULT_GROUP_BY


def parse_search(raw: str | None) -> str | None:
    term = (raw or "").strip()
    return term or None


def parse_list_params(
    page: str | None = None,
    page_size: str | None = None,
    sort_order: str | None = None,
    group_by: str | None = None,
    search: str | None = None,
) -> ChatListParams:
    """Build :class:`ChatListParams` from raw query-string values.

    Unparsable ``page``/``pageSize`` fall back to defaults first; out-of-range
    values are then rejected with :class:`ClientInputException`. ``sortOrder``
    and ``groupBy`` never fail and silently fall back to their defaults.
    """
    page_value = _parse_int(page, DEFAULT_PAGE)
    page_size_value = _parse_int(page_size, DEFAULT_PAGE_SIZE)

    if page_value < 1:
        raise ClientInputException(MSG_INVALID_PAGE)
    if not MIN_PAGE_SIZE <= page_size_value <= MAX_PAGE_SIZE:
        raise ClientInputException(MSG_INVALID_PAGE_SIZE)
    if (page_value - 1) * page_size_value > MAX_OFFSET:
        raise ClientInputException(MSG_PAGE_OUT_OF_RANGE)

    return ChatListParams(
        page=page_value,
        page_size=page_size_value,
        sort_order=parse_sort_order(sort_order),
        group_by=parse_group_by(group_by),
        search=parse_search(search),
    )
