"""Create chats table

Revision ID: 001
Revises: None
Create Date: 2026-10-18

Rows are written by the external workflow tool; this service only reads them.
Earlier deployments stored a single JSON ``message`` column instead of the
flat user/ai message columns and need their data copied across by hand.

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto";')

    op.create_table(
        "chats",
        sa.Column("id", UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("user_message", sa.Text, nullable=False),
        sa.Column("ai_message", sa.Text, nullable=False),
        sa.Column("session_id", sa.Text, nullable=False),
        sa.Column("workflow", sa.String(255), nullable=False),
        sa.Column("workflow_id", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_chats_session_id", "chats", ["session_id"])
    op.create_index("ix_chats_created_at", "chats", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_chats_created_at", table_name="chats")
    op.drop_index("ix_chats_session_id", table_name="chats")
    op.drop_table("chats")
