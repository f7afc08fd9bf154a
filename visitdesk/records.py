"""Plain records returned by every storage backend, independent of persistence."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class VisitorRecord:
    id: str
    name: str
    host_name: str
    visit_reason: str
    sign_in_time: datetime
    company: str | None = None
    photo_data: str | None = None  # base64 data URL from the kiosk webcam
    sign_out_time: datetime | None = None
    is_signed_out: bool = False
    email_sent: bool = False


@dataclass(frozen=True)
class AdminUserRecord:
    id: str
    username: str
    password_hash: str = field(repr=False)
    created_at: datetime


@dataclass(frozen=True)
class AuditLogRecord:
    """Append-only: frozen so an entry cannot be altered after it is written."""
    id: str
    action: str
    entity_type: str
    entity_id: str
    timestamp: datetime
    user_id: str | None = None
    details: dict[str, Any] | None = None
