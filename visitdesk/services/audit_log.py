"""Append-only audit log entries. Never update or delete - immutable audit trail."""
from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from typing import Any

from visitdesk.records import AuditLogRecord

ACTION_VISITOR_SIGN_IN = "VISITOR_SIGN_IN"
ACTION_VISITOR_UPDATED = "VISITOR_UPDATED"
ACTION_VISITOR_SIGN_OUT = "VISITOR_SIGN_OUT"
ACTION_ADMIN_CREATED = "ADMIN_CREATED"
ACTION_ADMIN_LOGIN = "ADMIN_LOGIN"
ACTION_ADMIN_LOGOUT = "ADMIN_LOGOUT"

ENTITY_VISITOR = "visitor"
ENTITY_ADMIN_USER = "admin_user"

# Column limits (match model)
_ACTION_LEN = 64
_ENTITY_TYPE_LEN = 32


def _sanitize_details_value(v: Any) -> Any:
    """Convert to JSON-serializable value so details never fail to store or export."""
    if v is None:
        return None
    if isinstance(v, (str, int, float, bool)):
        return v
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    if isinstance(v, enum.Enum):
        return getattr(v, "value", str(v))
    if isinstance(v, dict):
        return {str(k): _sanitize_details_value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_sanitize_details_value(x) for x in v]
    return str(v)


def sanitize_details(details: dict[str, Any] | None) -> dict[str, Any] | None:
    if details is None:
        return None
    return {str(k): _sanitize_details_value(v) for k, v in details.items()}


def build_entry(
    action: str,
    entity_type: str,
    entity_id: str,
    timestamp: datetime,
    *,
    user_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> AuditLogRecord:
    """Build one immutable audit record with a fresh id.
    String fields are truncated to column limits; details are sanitized for JSON."""
    return AuditLogRecord(
        id=str(uuid.uuid4()),
        action=(action or "")[:_ACTION_LEN].strip(),
        entity_type=(entity_type or "")[:_ENTITY_TYPE_LEN].strip(),
        entity_id=str(entity_id),
        timestamp=timestamp,
        user_id=user_id or None,
        details=sanitize_details(details),
    )


def newest_first(entries: list[AuditLogRecord]) -> list[AuditLogRecord]:
    """Order entries newest first; equal timestamps keep the later-appended entry first.
    `entries` must be in append order."""
    return sorted(reversed(entries), key=lambda e: e.timestamp, reverse=True)
