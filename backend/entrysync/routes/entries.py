"""
EntrySync Backend — Entries Route Handlers
============================================

What:  GET /api/entries (list), POST /api/entries (batch upsert),
       DELETE /api/entries/{id} (delete).
How:   Extracts query/body/path data, delegates to EntryService, returns JSON.

Listing returns client-shaped entries (`id`, `appId`, `dateISO`, decoded
`tags`), the same shape sync downloads, and reports the app's total entry
count in the X-Total-Count header.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from entrysync.config import settings
from entrysync.routes.dependencies import get_gateway
from entrysync.schemas.entry import (
    DeleteResponse,
    EntryBatch,
    EntryPayload,
    ErrorResponse,
    UpsertResponse,
    normalize_batch,
)
from entrysync.services.entry_service import entry_service
from entrysync.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Entries"])


@router.get(
    "/entries",
    response_model=List[EntryPayload],
    responses={
        400: {"description": "appId missing", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="List an app's entries, newest first",
)
async def list_entries(
    response: Response,
    app_id: Optional[str] = Query(default=None, alias="appId", description="Application namespace"),
    limit: int = Query(default=settings.list_default_limit, ge=0),
    offset: int = Query(default=0, ge=0),
    gateway: PersistenceGateway = Depends(get_gateway),
) -> List[EntryPayload]:
    """
    Page through entries of one appId ordered by timestamp descending.

    A limit above LIST_MAX_LIMIT is clamped to it; limit=0 returns an empty
    page. X-Total-Count always reports the full count.

    Example:
        GET /api/entries?appId=daily&limit=2&offset=0
        GET /api/entries?appId=daily&limit=2&offset=2
    """
    page = await entry_service.list_entries(
        gateway, app_id=app_id, limit=min(limit, settings.list_max_limit), offset=offset
    )
    response.headers["X-Total-Count"] = str(page.total_count)
    return page.entries


@router.post(
    "/entries",
    response_model=UpsertResponse,
    summary="Insert or replace one entry or an array of entries",
)
async def upsert_entries(
    body: EntryBatch = Body(..., description="A single entry object or an array of entries"),
    gateway: PersistenceGateway = Depends(get_gateway),
) -> UpsertResponse:
    entries = normalize_batch(body)
    count = await entry_service.upsert_entries(gateway, entries)
    await gateway.commit()
    return UpsertResponse(success=True, count=count)


@router.delete(
    "/entries/{entry_path:path}",
    response_model=DeleteResponse,
    summary="Delete an entry by id",
    description="The final path segment is the entry id. Deleting an unknown id succeeds.",
)
async def delete_entry(
    entry_path: str,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> DeleteResponse:
    entry_id = entry_path.rsplit("/", 1)[-1]
    await entry_service.delete_entry(gateway, entry_id)
    await gateway.commit()
    return DeleteResponse(success=True)
