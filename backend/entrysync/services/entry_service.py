"""
EntrySync Backend — Entry Service (CRUD)
==========================================

What:  List, batch-upsert and delete operations on entries.
How:   Builds bound SQLAlchemy Core statements, runs them through the
       PersistenceGateway, and maps rows with the entry codec.
Who:   Called by the /api/entries route handlers.

Operations:
    list_entries()    WHERE app_id = :app_id ORDER BY timestamp DESC LIMIT/OFFSET
    upsert_entries()  one INSERT ... ON CONFLICT DO UPDATE per entry, in order
    delete_entry()    DELETE WHERE uuid = :id, across every appId

Delete is app-agnostic: entry ids are assumed globally unique, so a caller
holding an id can remove it whatever namespace it lives in.

There is no all-or-nothing guarantee across a batch: each entry is its own
statement. Inside one HTTP request they share the request's session, so a
failure rolls back the writes of that request that were not yet committed.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, func, select

from entrysync.exceptions import MissingParameterError
from entrysync.schemas.entry import EntryPage, EntryPayload
from entrysync.services import entry_codec
from entrysync.services.gateway import OnConflict, PersistenceGateway, entries_table

logger = logging.getLogger(__name__)


class EntryService:
    """
    Stateless CRUD operations; the gateway is passed on every call.
    """

    async def list_entries(
        self,
        gateway: PersistenceGateway,
        app_id: Optional[str],
        limit: int = 100,
        offset: int = 0,
    ) -> EntryPage:
        """
        Return one page of an app's entries, newest timestamp first.

        Ties on timestamp are broken by uuid so consecutive pages of a fixed
        table are disjoint and concatenate to the full ordering.

        Raises:
            MissingParameterError: app_id is missing or empty (→ 400)
            StorageError: the query failed (→ 500)
        """
        if not app_id:
            raise MissingParameterError("appId")

        page_query = (
            select(entries_table)
            .where(entries_table.c.app_id == app_id)
            .order_by(entries_table.c.timestamp.desc().nulls_last(), entries_table.c.uuid)
            .limit(limit)
            .offset(offset)
        )
        rows = await gateway.query(page_query)

        count_query = (
            select(func.count().label("total"))
            .select_from(entries_table)
            .where(entries_table.c.app_id == app_id)
        )
        count_rows = await gateway.query(count_query)
        total_count = count_rows[0]["total"] if count_rows else 0

        logger.debug(
            "Listed %d of %d entries for app %s (limit=%d, offset=%d)",
            len(rows), total_count, app_id, limit, offset,
        )
        return EntryPage(
            entries=[entry_codec.from_row(row) for row in rows],
            total_count=total_count,
        )

    async def upsert_entries(
        self,
        gateway: PersistenceGateway,
        entries: List[EntryPayload],
    ) -> int:
        """
        Insert-or-replace every entry keyed by id; returns the number processed.

        Re-submitting an id overwrites the stored row, so the operation is
        idempotent.
        """
        for entry in entries:
            await gateway.insert_entry(entry_codec.to_row(entry), OnConflict.REPLACE)

        logger.info("Upserted %d entries", len(entries))
        return len(entries)

    async def delete_entry(self, gateway: PersistenceGateway, entry_id: str) -> None:
        """Delete every row with this id; a missing id is a no-op."""
        deleted = await gateway.execute(
            delete(entries_table).where(entries_table.c.uuid == entry_id)
        )
        logger.info("Deleted entry %s (%d row(s) removed)", entry_id, deleted)


# Stateless, shared by all requests
entry_service = EntryService()
