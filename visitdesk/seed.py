"""Startup seeding: default admin account and optional demo visitors."""
import logging
from contextlib import contextmanager
from datetime import datetime, timedelta

from visitdesk.config import Settings
from visitdesk.storage import Storage

log = logging.getLogger("uvicorn.error")


def seed_default_admin(storage: Storage, settings: Settings) -> None:
    if storage.count_admin_users() > 0:
        return
    storage.create_admin_user(settings.default_admin_username, settings.default_admin_password)
    log.info("Seeded default admin user %r", settings.default_admin_username)


@contextmanager
def _clock_at(storage: Storage, when: datetime):
    saved = storage.clock
    storage.clock = lambda: when
    try:
        yield
    finally:
        storage.clock = saved


def seed_sample_visitors(storage: Storage) -> None:
    """Two visitors on site and one completed visit, for demos of the dashboard."""
    if storage.list_all_visitors():
        return
    now = storage.clock()
    one_hour_ago = now - timedelta(hours=1)
    two_hours_ago = now - timedelta(hours=2)

    with _clock_at(storage, one_hour_ago):
        john = storage.create_visitor("John Smith", "Sarah Johnson", "meeting", company="Tech Solutions Inc")
    with _clock_at(storage, now - timedelta(minutes=30)):
        emily = storage.create_visitor("Emily Chen", "Mike Williams", "interview", company="Design Studio")
    with _clock_at(storage, two_hours_ago):
        past = storage.create_visitor("Robert Brown", "Lisa Davis", "delivery", company="Consulting Group")
    with _clock_at(storage, one_hour_ago):
        storage.sign_out_visitor(past.id, one_hour_ago)
    # Demo hosts count as already notified
    for visitor in (john, emily, past):
        storage.update_visitor(visitor.id, {"email_sent": True})
    log.info("Initialized %d sample visitors", len(storage.list_all_visitors()))
