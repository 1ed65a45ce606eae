"""Create entries table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `entries` table holding journal entries of every appId.
How:   Unbounded text columns and the shared timestamp type, so the same
       revision runs on SQLite and PostgreSQL. `uuid` is the primary key
       and the ON CONFLICT target of the upsert and sync writes.

Rollback: downgrade() drops the table (all entries are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

from entrysync.models.entry import TIMESTAMP_TYPE

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "entries",
        sa.Column(
            "uuid",
            sa.Text(),
            nullable=False,
            comment="Client-generated unique identifier",
        ),
        sa.Column(
            "app_id",
            sa.Text(),
            nullable=False,
            server_default=sa.text("'daily'"),
            comment="Application namespace",
        ),
        sa.Column("content", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("category", sa.Text(), nullable=False, server_default=sa.text("''")),
        # JSON array serialized as text
        sa.Column("tags", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column(
            "date",
            sa.Text(),
            nullable=True,
            comment="Human-readable date as displayed by the client",
        ),
        sa.Column(
            "date_iso",
            sa.Text(),
            nullable=True,
            comment="ISO-8601 date supplied by the client",
        ),
        sa.Column(
            "timestamp",
            TIMESTAMP_TYPE,
            nullable=True,
            comment="Client-supplied sort key, usually epoch milliseconds",
        ),
        sa.PrimaryKeyConstraint("uuid"),
    )

    # Serves the per-app listing (ORDER BY timestamp DESC) and the sync scan
    op.create_index(
        "idx_entries_app_id_timestamp",
        "entries",
        ["app_id", sa.text("timestamp DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_entries_app_id_timestamp", table_name="entries")
    op.drop_table("entries")
