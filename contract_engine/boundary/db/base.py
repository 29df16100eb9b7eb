"""
Common record helpers for DynamoDB items.

Provides id generation and the timestamp format shared by every table
(ISO-8601 UTC with milliseconds and a trailing "Z").

Dependencies: None
System role: Foundation for all repository writes
"""

import uuid
from datetime import datetime, timezone
from typing import Any


def new_id() -> str:
    """Generate a UUID4 string id."""
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Current UTC time, e.g. "2025-01-31T12:00:00.123Z"."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def stamp_new(fields: dict[str, Any]) -> dict[str, Any]:
    """
    Fill id, createdAt and updatedAt for a new item.

    Existing values are kept, so imports can preserve their ids.
    """
    now = utc_now_iso()
    item = dict(fields)
    item.setdefault("id", new_id())
    item.setdefault("createdAt", now)
    item["updatedAt"] = now
    return item
