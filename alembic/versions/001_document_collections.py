"""Document tables for workout sessions and templates.

Revision ID: 001_documents
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_documents"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "workout_documents",
        sa.Column("user_id", sa.String(128), primary_key=True),
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )
    op.create_index(
        "ix_workout_documents_user_active_start",
        "workout_documents",
        ["user_id", "is_active", "start_time"],
    )

    op.create_table(
        "template_documents",
        sa.Column("user_id", sa.String(128), primary_key=True),
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("data", sa.JSON(), nullable=False),
    )
    op.create_index(
        "ix_template_documents_user_created",
        "template_documents",
        ["user_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_template_documents_user_created", table_name="template_documents")
    op.drop_table("template_documents")
    op.drop_index("ix_workout_documents_user_active_start", table_name="workout_documents")
    op.drop_table("workout_documents")
