"""ChatRecord model — one user/AI exchange written by the workflow tool."""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ChatRecord(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Row of the append-only ``chats`` table.

    Rows are inserted directly by the external workflow tool and never
    updated or deleted by this service.
    """

    __tablename__ = "chats"

    session_id: Mapped[str] = mapped_column(Text, nullable=False)
    user_message: Mapped[str] = mapped_column(Text, nullable=False)
    ai_message: Mapped[str] = mapped_column(Text, nullable=False)
    workflow: Mapped[str] = mapped_column(String(255), nullable=False)
    workflow_id: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_chats_session_id", "session_id"),
        Index("ix_chats_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ChatRecord id={self.id} session={self.session_id} created_at={self.created_at}>"
