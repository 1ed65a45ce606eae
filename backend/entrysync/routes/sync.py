"""
EntrySync Backend — Sync Route Handler
========================================

What:  POST /api/sync, reconciling a client's local entries with the server.
How:   Parses {appId, localEntries}, delegates to SyncService.

Example:
    POST /api/sync
    {"appId": "daily", "localEntries": [{"id": "a1", "content": "..."}]}

    200 {"downloaded": [...server entries the client lacks...], "uploaded": 1}
"""

import logging

from fastapi import APIRouter, Depends

from entrysync.routes.dependencies import get_gateway
from entrysync.schemas.entry import ErrorResponse, SyncRequest, SyncResponse
from entrysync.services.gateway import PersistenceGateway
from entrysync.services.sync_service import sync_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Sync"])


@router.post(
    "/sync",
    response_model=SyncResponse,
    responses={
        400: {"description": "appId missing", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Download missing entries and upload new ones in one round trip",
)
async def sync_entries(
    payload: SyncRequest,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> SyncResponse:
    result = await sync_service.sync(
        gateway,
        app_id=payload.app_id,
        local_entries=payload.local_entries,
    )
    await gateway.commit()
    return result
