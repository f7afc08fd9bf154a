"""Admin dashboard views: statistics, audit trail and export."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from visitdesk.schemas.visitor import CamelModel, VisitorResponse


class StatsResponse(BaseModel):
    currentVisitors: int
    todaySignins: int
    avgDuration: str  # hours with one decimal, e.g. "2.5h"


class AuditLogEntryResponse(CamelModel):
    """Single append-only audit log entry."""
    id: str
    action: str
    entity_type: str
    entity_id: str
    user_id: str | None
    details: dict[str, Any] | None
    timestamp: datetime


class ExportResponse(CamelModel):
    visitors: list[VisitorResponse]
    audit_logs: list[AuditLogEntryResponse]
    exported_at: datetime
    exported_by: str
