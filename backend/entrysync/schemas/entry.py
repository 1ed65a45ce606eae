"""
EntrySync Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the wire contract of the entries API.
How:   FastAPI validates request bodies against these models and serializes
       responses through them (by alias, so the wire keeps its camelCase keys:
       `appId`, `dateISO`, `localEntries`).
Who:   Route handlers, services and the entry codec.

Schemas are separate from the SQLAlchemy model: the wire uses `id` / `appId` /
`dateISO` and a real tag list, the table uses `uuid` / `app_id` / `date_iso`
and JSON text. The entry codec is the only place that maps between them.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


_WIRE_CONFIG = {"populate_by_name": True, "extra": "ignore"}


# ══════════════════════════════════════════════════════════════════════════
# Entry: the client-shaped record
# ══════════════════════════════════════════════════════════════════════════


class EntryPayload(BaseModel):
    """
    A journal entry as sent and received by clients.

    Only `id` is required. Missing optional fields are stored as defaults by
    the codec (`appId` → "daily", `category` → "", `tags` → []).

    `date`, `dateISO` and `timestamp` are not validated: a client may send a
    fractional epoch, a string or a number where text is expected, and the
    value is stored as sent. Nothing derives one date field from another.
    """
    id: str = Field(description="Client-generated unique identifier (e.g. UUID)")
    app_id: Optional[str] = Field(default=None, alias="appId", description="Application namespace")
    content: Optional[str] = Field(default=None, description="Free-text body")
    category: Optional[str] = Field(default=None)
    tags: Optional[List[str]] = Field(default=None, description="Ordered tag list")
    date: Any = Field(default=None, description="Human-readable date")
    date_iso: Any = Field(default=None, alias="dateISO", description="ISO-8601 date")
    timestamp: Any = Field(
        default=None,
        description="Usually epoch milliseconds; list sort key (descending)",
    )

    model_config = _WIRE_CONFIG


# A POST /api/entries body is either one entry or an array of entries.
EntryBatch = Union[List[EntryPayload], EntryPayload]


def normalize_batch(body: EntryBatch) -> List[EntryPayload]:
    """Normalize a single-or-many body to a list, preserving submission order."""
    if isinstance(body, EntryPayload):
        return [body]
    return list(body)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SyncRequest(BaseModel):
    """
    Body of POST /api/sync.

    `appId` is optional at the schema level so that its absence is reported
    as a 400 "Missing appId" by the reconciler instead of a 422 schema error.
    """
    app_id: Optional[str] = Field(default=None, alias="appId")
    local_entries: List[EntryPayload] = Field(default_factory=list, alias="localEntries")

    model_config = _WIRE_CONFIG


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class EntryPage(BaseModel):
    """One page of entries for an appId plus the appId's total entry count."""
    entries: List[EntryPayload]
    total_count: int


class UpsertResponse(BaseModel):
    success: bool = True
    count: int = Field(description="Number of entries processed")


class DeleteResponse(BaseModel):
    success: bool = True


class SyncResponse(BaseModel):
    """
    Result of a reconciliation.

    downloaded: server entries whose id was absent from the client's set
    uploaded:   number of local entries submitted (attempts, not inserts)
    """
    downloaded: List[EntryPayload] = Field(default_factory=list)
    uploaded: int = 0


class ErrorResponse(BaseModel):
    """Error body used by the JSON error handlers."""
    error: str = Field(description="Human-readable error or machine-readable code")
    message: Optional[str] = Field(default=None)
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
