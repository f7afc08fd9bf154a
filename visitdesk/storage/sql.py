"""SQLAlchemy storage. Same contract as MemoryStorage, persisted in a database."""
from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from visitdesk.database import Base, make_engine, make_session_factory
from visitdesk.exceptions import UsernameTakenError
from visitdesk.models import AdminUser, AuditLog, Visitor
from visitdesk.records import AdminUserRecord, AuditLogRecord, VisitorRecord
from visitdesk.services.audit_log import (
    ACTION_ADMIN_CREATED,
    ACTION_VISITOR_SIGN_IN,
    ACTION_VISITOR_SIGN_OUT,
    ACTION_VISITOR_UPDATED,
    ENTITY_ADMIN_USER,
    ENTITY_VISITOR,
    build_entry,
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


def _visitor_record(row: Visitor) -> VisitorRecord:
    return VisitorRecord(
        id=row.id,
        name=row.name,
        company=row.company,
        host_name=row.host_name,
        visit_reason=row.visit_reason,
        photo_data=row.photo_data,
        sign_in_time=row.sign_in_time,
        sign_out_time=row.sign_out_time,
        is_signed_out=bool(row.is_signed_out),
        email_sent=bool(row.email_sent),
    )


def _admin_record(row: AdminUser) -> AdminUserRecord:
    return AdminUserRecord(id=row.id, username=row.username, password_hash=row.password_hash, created_at=row.created_at)


def _audit_record(row: AuditLog) -> AuditLogRecord:
    return AuditLogRecord(
        id=row.id,
        action=row.action,
        entity_type=row.entity_type,
        entity_id=row.entity_id,
        user_id=row.user_id,
        details=row.details,
        timestamp=row.timestamp,
    )


class SqlStorage(Storage):
    """One session and one transaction per operation; the audit entry for a
    mutation is committed together with the mutation itself."""

    def __init__(self, database_url: str, clock: Clock | None = None):
        super().__init__(clock)
        self.engine = make_engine(database_url)
        Base.metadata.create_all(bind=self.engine)
        self._session_factory = make_session_factory(self.engine)

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _add_audit(self, db: Session, action, entity_type, entity_id, user_id=None, details=None) -> AuditLogRecord:
        entry = build_entry(action, entity_type, entity_id, self.clock(), user_id=user_id, details=details)
        db.add(
            AuditLog(
                id=entry.id,
                action=entry.action,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                user_id=entry.user_id,
                details=entry.details,
                timestamp=entry.timestamp,
            )
        )
        return entry

    @staticmethod
    def _visitor_row(db: Session, visitor_id: str) -> Visitor | None:
        return db.query(Visitor).filter(Visitor.id == visitor_id).first()

    def create_visitor(self, name, host_name, visit_reason, company=None, photo_data=None):
        row = Visitor(
            id=str(uuid.uuid4()),
            name=name,
            company=blank_to_none(company),
            host_name=host_name,
            visit_reason=visit_reason,
            photo_data=blank_to_none(photo_data),
            sign_in_time=self.clock(),
            sign_out_time=None,
            is_signed_out=False,
            email_sent=False,
        )
        with self._transaction() as db:
            db.add(row)
            self._add_audit(
                db,
                ACTION_VISITOR_SIGN_IN,
                ENTITY_VISITOR,
                row.id,
                details={"name": row.name, "company": row.company, "hostName": row.host_name},
            )
            db.flush()
            return _visitor_record(row)

    def get_visitor(self, visitor_id):
        with self._transaction() as db:
            row = self._visitor_row(db, visitor_id)
            return _visitor_record(row) if row else None

    def _find_active_row(self, db: Session, name: str) -> Visitor | None:
        active = (
            db.query(Visitor)
            .filter(Visitor.is_signed_out.is_(False))
            .order_by(Visitor.sign_in_time.asc(), Visitor.seq.asc())
            .all()
        )
        # Matched in Python: SQLite's lower() only folds ASCII
        return next((row for row in active if names_match(row.name, name)), None)

    def find_active_visitor_by_name(self, name):
        with self._transaction() as db:
            row = self._find_active_row(db, name)
            return _visitor_record(row) if row else None

    def update_visitor(self, visitor_id, updates, actor_id=None):
        updates = check_visitor_updates(updates)
        with self._transaction() as db:
            row = self._visitor_row(db, visitor_id)
            if row is None:
                return None
            for key, value in updates.items():
                setattr(row, key, value)
            self._add_audit(
                db, ACTION_VISITOR_UPDATED, ENTITY_VISITOR, visitor_id, user_id=actor_id, details=visitor_update_details(updates)
            )
            db.flush()
            return _visitor_record(row)

    def _sign_out_row(self, db: Session, row: Visitor, sign_out_time, actor_id=None) -> VisitorRecord:
        row.sign_out_time = sign_out_time
        row.is_signed_out = True
        self._add_audit(
            db,
            ACTION_VISITOR_SIGN_OUT,
            ENTITY_VISITOR,
            row.id,
            user_id=actor_id,
            details={"name": row.name, "signOutTime": sign_out_time},
        )
        db.flush()
        return _visitor_record(row)

    def sign_out_visitor(self, visitor_id, sign_out_time, actor_id=None):
        with self._transaction() as db:
            row = self._visitor_row(db, visitor_id)
            if row is None:
                return None
            return self._sign_out_row(db, row, sign_out_time, actor_id)

    def sign_out_visitor_by_name(self, name, sign_out_time):
        with self._transaction() as db:
            row = self._find_active_row(db, name)
            if row is None:
                return None
            return self._sign_out_row(db, row, sign_out_time)

    def list_current_visitors(self):
        with self._transaction() as db:
            rows = db.query(Visitor).filter(Visitor.is_signed_out.is_(False)).order_by(Visitor.seq.asc()).all()
            return [_visitor_record(r) for r in rows]

    def list_all_visitors(self):
        with self._transaction() as db:
            return [_visitor_record(r) for r in db.query(Visitor).order_by(Visitor.seq.asc()).all()]

    def get_admin_user(self, user_id):
        with self._transaction() as db:
            row = db.query(AdminUser).filter(AdminUser.id == user_id).first()
            return _admin_record(row) if row else None

    def get_admin_user_by_username(self, username):
        with self._transaction() as db:
            row = db.query(AdminUser).filter(AdminUser.username == username).first()
            return _admin_record(row) if row else None

    def create_admin_user(self, username, password):
        if self.get_admin_user_by_username(username) is not None:
            raise UsernameTakenError(username)
        row = AdminUser(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=get_password_hash(password),
            created_at=self.clock(),
        )
        try:
            with self._transaction() as db:
                db.add(row)
                self._add_audit(db, ACTION_ADMIN_CREATED, ENTITY_ADMIN_USER, row.id, details={"username": username})
        except IntegrityError:
            # Lost a race with another writer for the same username
            raise UsernameTakenError(username)
        return _admin_record(row)

    def count_admin_users(self):
        with self._transaction() as db:
            return db.query(AdminUser).count()

    def append_audit_log(self, action, entity_type, entity_id, user_id=None, details=None):
        with self._transaction() as db:
            return self._add_audit(db, action, entity_type, entity_id, user_id=user_id, details=details)

    def list_audit_logs(self):
        with self._transaction() as db:
            rows = db.query(AuditLog).order_by(AuditLog.timestamp.desc(), AuditLog.seq.desc()).all()
            return [_audit_record(r) for r in rows]

    def close(self):
        self.engine.dispose()
