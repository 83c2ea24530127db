# Import all models so SQLAlchemy metadata is populated for Alembic autogenerate
from src.models.chat import ChatRecord

__all__ = [
    "ChatRecord",
]
