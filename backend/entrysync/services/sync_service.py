"""
EntrySync Backend — Sync Reconciler
=====================================

What:  One-round-trip reconciliation between a client's local entry set and
       the server's entry set for one appId.
How:   Stateless: no sync cursor and no change log. Every call recomputes the
       diff from the current table contents.

Algorithm:
    1. Fetch every server row for the appId (full scan of that namespace)
    2. Collect the ids of the client's local entries
    3. downloaded = server rows whose uuid is NOT among the local ids,
       decoded to client shape
    4. Insert every local entry with ON CONFLICT DO NOTHING, filed under the
       request's appId
    5. uploaded = number of local entries submitted

    ┌────────────┐  local ids   ┌──────────────────────┐
    │  client    │─────────────▶│ server rows − local  │──▶ downloaded
    │  entries   │              └──────────────────────┘
    │            │  INSERT … ON CONFLICT DO NOTHING
    │            │─────────────────────────────────────────▶ entries table
    └────────────┘

Identity is by id only: a local entry whose id the server already holds is
"present" even if its content differs, and it is neither downloaded nor
written. The server copy of an existing id always wins here, unlike the
direct upsert endpoint which always replaces.

Re-running a sync is safe: the diff is recomputed and ignored inserts are
no-ops. A failure part-way through leaves the already-inserted entries in
place once the request's transaction commits, and nothing if it rolls back.
"""

import logging
from typing import List, Optional

from sqlalchemy import select

from entrysync.exceptions import MissingParameterError
from entrysync.schemas.entry import EntryPayload, SyncResponse
from entrysync.services import entry_codec
from entrysync.services.gateway import OnConflict, PersistenceGateway, entries_table

logger = logging.getLogger(__name__)


class SyncService:
    """Diff-and-merge of a client entry set against the server's."""

    async def sync(
        self,
        gateway: PersistenceGateway,
        app_id: Optional[str],
        local_entries: List[EntryPayload],
    ) -> SyncResponse:
        """
        Reconcile `local_entries` with the server's entries for `app_id`.

        Returns:
            SyncResponse with the server entries the client lacks and the
            number of local entries submitted (ignored duplicates included).

        Raises:
            MissingParameterError: app_id is missing or empty (→ 400)
            StorageError: a query or insert failed (→ 500)
        """
        if not app_id:
            raise MissingParameterError("appId")

        server_rows = await gateway.query(
            select(entries_table).where(entries_table.c.app_id == app_id)
        )

        local_ids = {entry.id for entry in local_entries}
        downloaded = [
            entry_codec.from_row(row)
            for row in server_rows
            if row["uuid"] not in local_ids
        ]

        inserted = 0
        for entry in local_entries:
            inserted += await gateway.insert_entry(
                entry_codec.to_row(entry, app_id=app_id),
                OnConflict.IGNORE,
            )

        logger.info(
            "Sync app=%s: server=%d downloaded=%d uploaded=%d inserted=%d",
            app_id,
            len(server_rows),
            len(downloaded),
            len(local_entries),
            inserted,
        )
        return SyncResponse(downloaded=downloaded, uploaded=len(local_entries))


sync_service = SyncService()
