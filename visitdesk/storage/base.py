"""Storage contract shared by the in-memory and SQL backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from visitdesk.records import AdminUserRecord, AuditLogRecord, VisitorRecord
from visitdesk.services.auth import verify_password
from visitdesk.services.stats import TodayStats, compute_today_stats

Clock = Callable[[], datetime]

# Fields update_visitor may patch. Sign-out state only changes through sign_out_visitor.
UPDATABLE_VISITOR_FIELDS = frozenset({"name", "company", "host_name", "visit_reason", "photo_data", "email_sent"})
PHOTO_UPDATED = "<updated>"


def check_visitor_updates(updates: dict[str, Any]) -> dict[str, Any]:
    """Validate a visitor patch and return it normalised the way create_visitor stores fields."""
    rejected = sorted(set(updates) - UPDATABLE_VISITOR_FIELDS)
    if rejected:
        raise ValueError(f"Visitor fields cannot be updated: {', '.join(rejected)}")
    cleaned = dict(updates)
    for key in ("company", "photo_data"):
        if key in cleaned:
            cleaned[key] = blank_to_none(cleaned[key])
    return cleaned


def visitor_update_details(updates: dict[str, Any]) -> dict[str, Any]:
    """Audit details for a visitor patch. Photos are noted, never copied into the log."""
    details = dict(updates)
    if details.get("photo_data") is not None:
        details["photo_data"] = PHOTO_UPDATED
    return details


def names_match(stored: str, wanted: str) -> bool:
    return stored.strip().casefold() == wanted.strip().casefold()


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class Storage(ABC):
    """Visitor store, audit log and admin credentials behind one handle.

    Not-found is reported by returning None. Every mutation of a visitor or admin
    appends an audit entry; nothing here reads the audit log back.
    """

    def __init__(self, clock: Clock | None = None):
        self.clock: Clock = clock or datetime.now

    # Visitors

    @abstractmethod
    def create_visitor(
        self,
        name: str,
        host_name: str,
        visit_reason: str,
        company: str | None = None,
        photo_data: str | None = None,
    ) -> VisitorRecord: ...

    @abstractmethod
    def get_visitor(self, visitor_id: str) -> VisitorRecord | None: ...

    @abstractmethod
    def find_active_visitor_by_name(self, name: str) -> VisitorRecord | None:
        """Case-insensitive exact match among active visitors; earliest sign-in wins."""

    @abstractmethod
    def update_visitor(
        self, visitor_id: str, updates: dict[str, Any], actor_id: str | None = None
    ) -> VisitorRecord | None: ...

    @abstractmethod
    def sign_out_visitor(
        self, visitor_id: str, sign_out_time: datetime, actor_id: str | None = None
    ) -> VisitorRecord | None:
        """Mark signed out. An already signed-out visitor gets the new time."""

    def sign_out_visitor_by_name(self, name: str, sign_out_time: datetime) -> VisitorRecord | None:
        visitor = self.find_active_visitor_by_name(name)
        if visitor is None:
            return None
        return self.sign_out_visitor(visitor.id, sign_out_time)

    @abstractmethod
    def list_current_visitors(self) -> list[VisitorRecord]: ...

    @abstractmethod
    def list_all_visitors(self) -> list[VisitorRecord]: ...

    def list_all_visitors_redacted(self) -> list[VisitorRecord]:
        """All visitors with photo_data removed, for bulk listings and exports."""
        return [replace(v, photo_data=None) for v in self.list_all_visitors()]

    # Admin users

    @abstractmethod
    def get_admin_user(self, user_id: str) -> AdminUserRecord | None: ...

    @abstractmethod
    def get_admin_user_by_username(self, username: str) -> AdminUserRecord | None: ...

    @abstractmethod
    def create_admin_user(self, username: str, password: str) -> AdminUserRecord:
        """Raises UsernameTakenError when the username exists."""

    @abstractmethod
    def count_admin_users(self) -> int: ...

    def verify_admin_credentials(self, username: str, password: str) -> AdminUserRecord | None:
        # Same None for unknown user and wrong password
        user = self.get_admin_user_by_username(username)
        if user is None:
            return None
        return user if verify_password(password, user.password_hash) else None

    # Audit log

    @abstractmethod
    def append_audit_log(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        user_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AuditLogRecord: ...

    @abstractmethod
    def list_audit_logs(self) -> list[AuditLogRecord]:
        """Newest first."""

    # Stats

    def get_today_stats(self, now: datetime | None = None) -> TodayStats:
        return compute_today_stats(self.list_all_visitors(), now or self.clock())

    def close(self) -> None:
        pass
