"""
EntrySync Backend — Entry Codec
=================================

What:  Converts between the wire representation (EntryPayload) and the storage
       representation (a row of the `entries` table).

    wire field   column      write default
    ──────────   ─────────   ─────────────────────────────
    id           uuid        —
    appId        app_id      settings.default_app_id ("daily")
    content      content     ""
    category     category    ""
    tags         tags        [] serialized as JSON text
    date         date        passed through, non-text values as JSON text
    dateISO      date_iso    passed through, non-text values as JSON text
    timestamp    timestamp   numbers and strings passed through, anything
                             else as JSON text

Reads never fail on `tags`: NULL, invalid JSON, or a JSON value that is not
an array all decode to an empty list.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from entrysync.config import settings
from entrysync.schemas.entry import EntryPayload

logger = logging.getLogger(__name__)


def encode_tags(tags: Optional[List[str]]) -> str:
    return json.dumps(list(tags or []), ensure_ascii=False)


def decode_tags(raw: Any) -> List[str]:
    """Parse stored tag text, degrading to [] instead of raising."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Undecodable tags value %r, treating as empty", raw)
        return []
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value]


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _as_sort_key(value: Any) -> Any:
    if value is None or isinstance(value, (int, float, str)):
        return value
    return json.dumps(value, ensure_ascii=False)


def to_row(entry: EntryPayload, app_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Map a client entry to storage columns, applying write defaults.

    Args:
        entry:   The client-shaped entry.
        app_id:  Namespace override. Sync passes the request's appId so every
                 uploaded entry is filed under it, whatever the entry says.
    """
    return {
        "uuid": entry.id,
        "app_id": app_id or entry.app_id or settings.default_app_id,
        "content": entry.content or "",
        "category": entry.category or "",
        "tags": encode_tags(entry.tags),
        "date": _as_text(entry.date),
        "date_iso": _as_text(entry.date_iso),
        "timestamp": _as_sort_key(entry.timestamp),
    }


def from_row(row: Mapping[str, Any]) -> EntryPayload:
    """Map a stored row back to the client shape, decoding tags."""
    return EntryPayload(
        id=row["uuid"],
        app_id=row["app_id"],
        content=row["content"],
        category=row["category"],
        tags=decode_tags(row["tags"]),
        date=row["date"],
        date_iso=row["date_iso"],
        timestamp=row["timestamp"],
    )
