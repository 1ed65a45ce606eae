"""
EntrySync Backend — Entry SQLAlchemy Model
============================================

What:  ORM model representing the `entries` table.
How:   Inherits from DeclarativeBase; Alembic and init_schema() read it.
Who:   Used by the persistence gateway and services through `Entry.__table__`
       (Core statements), never through ORM identity-map loading.

Table Design:
    - uuid: client-generated id, primary key and the ON CONFLICT target
    - app_id: namespace discriminator, every list/sync query filters on it
    - tags: JSON array serialized as text, decoded by the entry codec
    - date / date_iso: stored exactly as the client sent them
    - timestamp: client-supplied sort key, usually epoch milliseconds

    Text columns are unbounded: whatever length a client sends is stored.

    `timestamp` keeps the value as sent (integer, fractional or text):
        SQLite:      NUMERIC column without driver-side conversion
        PostgreSQL:  JSONB, which orders numbers numerically and places
                     every number before any string under DESC

    Index on (app_id, timestamp):
        Serves "WHERE app_id = ? ORDER BY timestamp DESC LIMIT ? OFFSET ?"
        and the full per-app scan performed by sync.
"""

from typing import Any, Optional

from sqlalchemy import Index, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import UserDefinedType

from entrysync.database import Base


class ClientSortKey(UserDefinedType):
    """NUMERIC column whose values are bound and read back untouched."""

    cache_ok = True

    def get_col_spec(self, **kw) -> str:
        return "NUMERIC"


# Shared with the Alembic revision that creates the table
TIMESTAMP_TYPE = ClientSortKey().with_variant(JSONB(none_as_null=True), "postgresql")


class Entry(Base):
    """
    A single journal record scoped to an application namespace.

    Lifecycle:
        1. Created by batch-upsert (insert-or-replace) or sync upload (insert-or-ignore)
        2. Replaced in place by later upserts carrying the same uuid
        3. Deleted by id; no soft-delete, versioning or audit trail
    """

    __tablename__ = "entries"

    uuid: Mapped[str] = mapped_column(
        Text,
        primary_key=True,
        comment="Client-generated unique identifier",
    )

    app_id: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="daily",
        server_default=text("'daily'"),
        comment="Application namespace",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    category: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    # JSON array text, e.g. '["work", "idea"]'
    tags: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="[]",
        server_default=text("'[]'"),
    )

    date: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Human-readable date as displayed by the client",
    )

    date_iso: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="ISO-8601 date supplied by the client",
    )

    timestamp: Mapped[Any] = mapped_column(
        TIMESTAMP_TYPE,
        nullable=True,
        comment="Client-supplied sort key, usually epoch milliseconds",
    )

    __table_args__ = (
        Index("idx_entries_app_id_timestamp", "app_id", timestamp.desc()),
    )

    def __repr__(self) -> str:
        return f"<Entry(uuid='{self.uuid}', app_id='{self.app_id}', timestamp={self.timestamp})>"
