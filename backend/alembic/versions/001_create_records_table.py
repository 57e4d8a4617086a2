"""Create records and record_tags tables

Revision ID: 001
Revises: None
Create Date: 2025-01-15 00:00:00.000000+00:00

What:  Creates the catalog schema: one row per record, one row per tag.
How:   Portable column types (generic Uuid, timezone-aware DateTime) so the
       same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops both tables (destructive — all records lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create both tables with constraints and the sort/filter indexes."""
    op.create_table(
        "records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("external_url", sa.Text(), nullable=False),
        sa.Column(
            "category",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'other'"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Sort keys (newest/oldest, alphabetical) and the category filter
    op.create_index("idx_records_created_at", "records", ["created_at"])
    op.create_index("idx_records_title", "records", ["title"])
    op.create_index("idx_records_category", "records", ["category"])

    op.create_table(
        "record_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("record_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("value", sa.String(50), nullable=False),
        sa.ForeignKeyConstraint(["record_id"], ["records.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_record_tags_record_id", "record_tags", ["record_id"])


def downgrade() -> None:
    """Drop both tables. WARNING: destructive."""
    op.drop_index("idx_record_tags_record_id", table_name="record_tags")
    op.drop_table("record_tags")
    op.drop_index("idx_records_category", table_name="records")
    op.drop_index("idx_records_title", table_name="records")
    op.drop_index("idx_records_created_at", table_name="records")
    op.drop_table("records")
