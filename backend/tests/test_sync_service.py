"""
EntrySync Backend — Sync Reconciler Tests
===========================================

What:  Properties of the client/server reconciliation.
How:   SyncService over a PersistenceGateway on in-memory SQLite.

What we test:
    ✅ Server wins for ids it already holds (ignore on conflict)
    ✅ Every server entry absent locally is downloaded exactly once
    ✅ uploaded counts submissions, not inserts
    ✅ Empty local set / empty server set edge cases
    ✅ Uploads are filed under the request's appId
    ✅ Re-running a sync is idempotent
    ✅ Missing appId raises MissingParameterError
"""

from unittest.mock import AsyncMock

import pytest

from entrysync.exceptions import MissingParameterError
from entrysync.services.entry_service import EntryService
from entrysync.services.gateway import OnConflict
from entrysync.services.sync_service import SyncService


class TestSync:

    def setup_method(self):
        self.service = SyncService()
        self.entries = EntryService()

    async def _server_ids(self, gateway, app_id="daily"):
        page = await self.entries.list_entries(gateway, app_id, limit=1000)
        return sorted(e.id for e in page.entries)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("app_id", [None, ""])
    async def test_missing_app_id_raises(self, gateway, app_id):
        with pytest.raises(MissingParameterError):
            await self.service.sync(gateway, app_id, [])

    @pytest.mark.asyncio
    async def test_server_copy_wins_for_existing_id(self, gateway, make_entry):
        await self.entries.upsert_entries(gateway, [make_entry("x", content="A")])

        result = await self.service.sync(gateway, "daily", [make_entry("x", content="B")])

        page = await self.entries.list_entries(gateway, "daily")
        assert [e.content for e in page.entries] == ["A"]
        assert result.downloaded == []
        assert result.uploaded == 1

    @pytest.mark.asyncio
    async def test_downloads_each_missing_server_entry_once(self, gateway, make_entry):
        await self.entries.upsert_entries(
            gateway, [make_entry("s1"), make_entry("s2"), make_entry("shared")]
        )

        result = await self.service.sync(
            gateway, "daily", [make_entry("shared"), make_entry("l1")]
        )

        assert sorted(e.id for e in result.downloaded) == ["s1", "s2"]

    @pytest.mark.asyncio
    async def test_downloaded_entries_are_client_shaped(self, gateway, make_entry):
        await self.entries.upsert_entries(gateway, [make_entry("s1", tags=["b", "a"])])

        result = await self.service.sync(gateway, "daily", [])

        entry = result.downloaded[0]
        assert entry.tags == ["b", "a"]
        assert entry.date_iso == "2024-01-15T08:30:00.000Z"

    @pytest.mark.asyncio
    async def test_uploaded_counts_submissions_not_inserts(self, gateway, make_entry):
        await self.entries.upsert_entries(gateway, [make_entry("a"), make_entry("b")])

        result = await self.service.sync(
            gateway, "daily", [make_entry("a"), make_entry("b"), make_entry("c")]
        )

        assert result.uploaded == 3
        assert await self._server_ids(gateway) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_empty_local_set_downloads_everything(self, gateway, make_entry):
        await self.entries.upsert_entries(gateway, [make_entry("a"), make_entry("b")])

        result = await self.service.sync(gateway, "daily", [])

        assert sorted(e.id for e in result.downloaded) == ["a", "b"]
        assert result.uploaded == 0

    @pytest.mark.asyncio
    async def test_empty_server_inserts_all_local_entries(self, gateway, make_entry):
        result = await self.service.sync(gateway, "daily", [make_entry("a"), make_entry("b")])

        assert result.downloaded == []
        assert await self._server_ids(gateway) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_uploads_are_filed_under_request_app_id(self, gateway, make_entry):
        await self.service.sync(gateway, "work", [make_entry("a", appId="daily")])

        assert await self._server_ids(gateway, "work") == ["a"]
        assert await self._server_ids(gateway, "daily") == []

    @pytest.mark.asyncio
    async def test_other_apps_are_not_downloaded(self, gateway, make_entry):
        await self.entries.upsert_entries(gateway, [make_entry("w", appId="work")])

        result = await self.service.sync(gateway, "daily", [])

        assert result.downloaded == []

    @pytest.mark.asyncio
    async def test_rerunning_sync_is_idempotent(self, gateway, make_entry):
        await self.entries.upsert_entries(gateway, [make_entry("s1")])
        local = [make_entry("l1"), make_entry("l2")]

        first = await self.service.sync(gateway, "daily", local)
        second = await self.service.sync(gateway, "daily", local)

        assert [e.id for e in first.downloaded] == ["s1"]
        assert [e.id for e in second.downloaded] == ["s1"]
        assert await self._server_ids(gateway) == ["l1", "l2", "s1"]

    @pytest.mark.asyncio
    async def test_every_upload_uses_ignore_mode(self, make_entry):
        gateway = AsyncMock()
        gateway.query = AsyncMock(return_value=[])
        gateway.insert_entry = AsyncMock(return_value=1)

        await self.service.sync(gateway, "daily", [make_entry("a"), make_entry("b")])

        modes = [call.args[1] for call in gateway.insert_entry.await_args_list]
        assert modes == [OnConflict.IGNORE, OnConflict.IGNORE]
