"""initial schema: engine_state key-value table

Revision ID: 0001
Revises:
Create Date: 2026-10-19

One row per state key holding the JSON-encoded engine document
(rooms, streaks, level, achievements, score history).
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "engine_state",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.String(128), nullable=False),
        sa.Column("document", sa.Text(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_engine_state_key", "engine_state", ["key"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_engine_state_key", table_name="engine_state")
    op.drop_table("engine_state")
