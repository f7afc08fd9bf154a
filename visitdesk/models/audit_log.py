"""Append-only audit log for the visitor/admin audit trail.
No updates or deletes - every record is permanent."""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from visitdesk.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    # Insertion order; breaks ties between entries written in the same instant
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)

    # VISITOR_SIGN_IN | VISITOR_UPDATED | VISITOR_SIGN_OUT | ADMIN_*
    action = Column(String(64), nullable=False, index=True)
    entity_type = Column(String(32), nullable=False)
    # Back-reference only; no foreign key so the trail outlives its subject
    entity_id = Column(Text, nullable=False, index=True)

    # Admin who did it; null for anonymous kiosk actions
    user_id = Column(String(36), nullable=True)

    # Pre/post state relevant to the action (e.g. name, hostName, signOutTime)
    details = Column(JSON, nullable=True)

    timestamp = Column(DateTime, nullable=False, index=True)
