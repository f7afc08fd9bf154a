"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from visitdesk.models.visitor import Visitor
from visitdesk.models.admin_user import AdminUser
from visitdesk.models.audit_log import AuditLog

__all__ = [
    "Visitor",
    "AdminUser",
    "AuditLog",
]
