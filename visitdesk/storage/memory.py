"""In-process storage. Data lives as long as the storage object."""
from __future__ import annotations

import copy
import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any

from visitdesk.exceptions import UsernameTakenError
from visitdesk.records import AdminUserRecord, AuditLogRecord, VisitorRecord
from visitdesk.services.audit_log import (
    ACTION_ADMIN_CREATED,
    ACTION_VISITOR_SIGN_IN,
    ACTION_VISITOR_SIGN_OUT,
    ACTION_VISITOR_UPDATED,
    ENTITY_ADMIN_USER,
    ENTITY_VISITOR,
    build_entry,
    newest_first,
)
from visitdesk.services.auth import get_password_hash
from visitdesk.storage.base import (
    Clock,
    Storage,
    blank_to_none,
    check_visitor_updates,
    names_match,
    visitor_update_details,
)


def _copy_entry(entry: AuditLogRecord) -> AuditLogRecord:
    # Frozen records still share their details dict
    return replace(entry, details=copy.deepcopy(entry.details))


class MemoryStorage(Storage):
    """Dict-backed storage. One re-entrant lock serialises every read and write,
    and callers only ever receive copies of the stored records."""

    def __init__(self, clock: Clock | None = None):
        super().__init__(clock)
        self._lock = threading.RLock()
        # dicts keep insertion order, which is sign-in order for visitors
        self._visitors: dict[str, VisitorRecord] = {}
        self._admin_users: dict[str, AdminUserRecord] = {}
        self._audit_logs: list[AuditLogRecord] = []

    def create_visitor(self, name, host_name, visit_reason, company=None, photo_data=None):
        visitor = VisitorRecord(
            id=str(uuid.uuid4()),
            name=name,
            company=blank_to_none(company),
            host_name=host_name,
            visit_reason=visit_reason,
            photo_data=blank_to_none(photo_data),
            sign_in_time=self.clock(),
        )
        with self._lock:
            self._visitors[visitor.id] = visitor
            self.append_audit_log(
                ACTION_VISITOR_SIGN_IN,
                ENTITY_VISITOR,
                visitor.id,
                details={"name": visitor.name, "company": visitor.company, "hostName": visitor.host_name},
            )
            return replace(visitor)

    def get_visitor(self, visitor_id):
        with self._lock:
            visitor = self._visitors.get(visitor_id)
            return replace(visitor) if visitor else None

    def _find_active(self, name: str) -> VisitorRecord | None:
        matches = [v for v in self._visitors.values() if not v.is_signed_out and names_match(v.name, name)]
        if not matches:
            return None
        # min() keeps the first of equal keys, i.e. insertion order
        return min(matches, key=lambda v: v.sign_in_time)

    def find_active_visitor_by_name(self, name):
        with self._lock:
            visitor = self._find_active(name)
            return replace(visitor) if visitor else None

    def update_visitor(self, visitor_id, updates, actor_id=None):
        updates = check_visitor_updates(updates)
        with self._lock:
            visitor = self._visitors.get(visitor_id)
            if visitor is None:
                return None
            updated = replace(visitor, **updates)
            self._visitors[visitor_id] = updated
            self.append_audit_log(
                ACTION_VISITOR_UPDATED, ENTITY_VISITOR, visitor_id, user_id=actor_id, details=visitor_update_details(updates)
            )
            return replace(updated)

    def sign_out_visitor(self, visitor_id, sign_out_time, actor_id=None):
        with self._lock:
            visitor = self._visitors.get(visitor_id)
            if visitor is None:
                return None
            updated = replace(visitor, sign_out_time=sign_out_time, is_signed_out=True)
            self._visitors[visitor_id] = updated
            self.append_audit_log(
                ACTION_VISITOR_SIGN_OUT,
                ENTITY_VISITOR,
                visitor_id,
                user_id=actor_id,
                details={"name": visitor.name, "signOutTime": sign_out_time},
            )
            return replace(updated)

    def sign_out_visitor_by_name(self, name: str, sign_out_time: datetime) -> VisitorRecord | None:
        # Lookup and transition under one lock hold so two kiosks cannot race for the same record
        with self._lock:
            return super().sign_out_visitor_by_name(name, sign_out_time)

    def list_current_visitors(self):
        with self._lock:
            return [replace(v) for v in self._visitors.values() if not v.is_signed_out]

    def list_all_visitors(self):
        with self._lock:
            return [replace(v) for v in self._visitors.values()]

    def get_admin_user(self, user_id):
        with self._lock:
            return self._admin_users.get(user_id)

    def get_admin_user_by_username(self, username):
        with self._lock:
            return next((u for u in self._admin_users.values() if u.username == username), None)

    def create_admin_user(self, username, password):
        password_hash = get_password_hash(password)
        with self._lock:
            if self.get_admin_user_by_username(username) is not None:
                raise UsernameTakenError(username)
            user = AdminUserRecord(
                id=str(uuid.uuid4()),
                username=username,
                password_hash=password_hash,
                created_at=self.clock(),
            )
            self._admin_users[user.id] = user
            self.append_audit_log(ACTION_ADMIN_CREATED, ENTITY_ADMIN_USER, user.id, details={"username": username})
            return user

    def count_admin_users(self):
        with self._lock:
            return len(self._admin_users)

    def append_audit_log(self, action, entity_type, entity_id, user_id=None, details=None):
        entry = build_entry(action, entity_type, entity_id, self.clock(), user_id=user_id, details=details)
        with self._lock:
            self._audit_logs.append(entry)
        return _copy_entry(entry)

    def list_audit_logs(self):
        with self._lock:
            return [_copy_entry(e) for e in newest_first(self._audit_logs)]
