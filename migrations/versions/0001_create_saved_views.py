"""create saved_views table"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_create_saved_views"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "saved_views",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("query", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_saved_views_name", "saved_views", ["name"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_saved_views_name", table_name="saved_views")
    op.drop_table("saved_views")
