from visitdesk.config import Settings
from visitdesk.storage.base import Storage
from visitdesk.storage.memory import MemoryStorage


def build_storage(settings: Settings) -> Storage:
    """Construct the backend named by settings.storage_backend."""
    if settings.storage_backend == "database":
        from visitdesk.storage.sql import SqlStorage

        return SqlStorage(settings.database_url)
    return MemoryStorage()


__all__ = ["Storage", "MemoryStorage", "build_storage"]
