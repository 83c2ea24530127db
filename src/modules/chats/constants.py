"""Chat history module constants — pagination defaults and limits."""

import enum

# Pagination defaults (applied when a parameter is missing or unparsable)
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# Largest OFFSET the database driver accepts (signed 64-bit)
MAX_OFFSET = 2**63 - 1

# Client-facing validation messages
MSG_INVALID_PAGE = "Page must be greater than 0"
MSG_PAGE_OUT_OF_RANGE = "Page is out of range"
MSG_INVALID_PAGE_SIZE = f"Page size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class GroupBy(str, enum.Enum):
    SIMPLE = "simple"
    SESSION = "session"


DEFAULT_SORT_ORDER = SortOrder.ASC
DEFAULT_GROUP_BY = GroupBy.SIMPLE
