"""
EntrySync Backend — Persistence Gateway
=========================================

What:  The only component that talks to the database.
How:   Wraps the request-scoped AsyncSession and exposes three operations:

           query(statement, params)        → list of row mappings   (read)
           execute(statement, params)      → affected row count     (write)
           insert_entry(row, on_conflict)  → affected row count     (write)
           commit()                        → make the writes durable

       Statements are SQLAlchemy Core constructs or text() with bind
       parameters, so values are always bound, never interpolated.

Conflict-resolution modes:
    OnConflict.REPLACE → INSERT ... ON CONFLICT (uuid) DO UPDATE SET <every column>
    OnConflict.IGNORE  → INSERT ... ON CONFLICT (uuid) DO NOTHING

    Both are built with the dialect-specific `insert()` constructs of
    SQLAlchemy (postgresql and sqlite). Each call is one statement; the
    gateway never groups writes into a transaction of its own.

Failure:
    Any SQLAlchemyError is logged and re-raised as StorageError. No retry.
    Write routes call commit() before answering, so a failed commit turns
    into a 500 instead of a success response for unsaved data.
"""

import enum
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import Executable, RowMapping
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from entrysync.exceptions import StorageError
from entrysync.models.entry import Entry

logger = logging.getLogger(__name__)

entries_table = Entry.__table__

# Dialect name → module providing an insert() with on_conflict_* support
_UPSERT_DIALECTS = {
    "postgresql": postgresql,
    "sqlite": sqlite,
}


class OnConflict(str, enum.Enum):
    """Write-time policy applied when an inserted uuid already exists."""

    REPLACE = "replace"
    IGNORE = "ignore"


class PersistenceGateway:
    """
    Parameterized query execution over one request-scoped session.

    The gateway is created per request (see routes.dependencies.get_gateway)
    and handed to the services, so tests can build one over an in-memory
    SQLite session.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @property
    def dialect_name(self) -> str:
        return self._session.get_bind().dialect.name

    async def query(
        self,
        statement: Executable,
        params: Optional[Mapping[str, Any]] = None,
    ) -> List[RowMapping]:
        """Run a read statement and return every row as a mapping."""
        try:
            result = await self._session.execute(statement, params)
            return list(result.mappings().all())
        except SQLAlchemyError as e:
            logger.error("Query failed: %s", e, exc_info=True)
            raise StorageError(context={"operation": "query", "error_type": type(e).__name__}) from e

    async def execute(
        self,
        statement: Executable,
        params: Optional[Mapping[str, Any]] = None,
    ) -> int:
        """Run a write statement and return the number of affected rows."""
        try:
            result = await self._session.execute(statement, params)
            return result.rowcount
        except SQLAlchemyError as e:
            logger.error("Write failed: %s", e, exc_info=True)
            raise StorageError(context={"operation": "execute", "error_type": type(e).__name__}) from e

    async def insert_entry(self, row: Dict[str, Any], on_conflict: OnConflict) -> int:
        """
        Insert one entry row, resolving an existing uuid per `on_conflict`.

        Args:
            row:          Column → value mapping produced by entry_codec.to_row
            on_conflict:  REPLACE overwrites every non-key column (app_id included);
                          IGNORE leaves the stored row untouched.

        Returns:
            Affected row count: 1 when a row was written, 0 when IGNORE kept
            an existing row.
        """
        dialect = _UPSERT_DIALECTS.get(self.dialect_name)
        if dialect is None:
            raise StorageError(
                message="The configured database does not support entry upserts.",
                context={"dialect": self.dialect_name},
            )

        stmt = dialect.insert(entries_table).values(**row)
        if on_conflict is OnConflict.REPLACE:
            stmt = stmt.on_conflict_do_update(
                index_elements=[entries_table.c.uuid],
                set_={
                    column: stmt.excluded[column]
                    for column in row
                    if column != "uuid"
                },
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=[entries_table.c.uuid])

        return await self.execute(stmt)

    async def commit(self) -> None:
        """Commit the request's pending writes."""
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            logger.error("Commit failed: %s", e, exc_info=True)
            raise StorageError(context={"operation": "commit", "error_type": type(e).__name__}) from e
