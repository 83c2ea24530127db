from src.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.database.engine import build_engine, build_session_factory, verify_connection
from src.database.session import get_db, get_session_factory

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "build_engine",
    "build_session_factory",
    "verify_connection",
    "get_db",
    "get_session_factory",
]
