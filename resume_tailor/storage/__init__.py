"""Storage package: one interface, an in-memory and a database backend."""

import logging

from resume_tailor.config import settings
from resume_tailor.db import get_session_factory
from resume_tailor.storage.base import Storage
from resume_tailor.storage.database import DatabaseStorage
from resume_tailor.storage.memory import MemStorage

logger = logging.getLogger(__name__)

_storage: Storage | None = None


def uses_database() -> bool:
    """Whether the configured backend is the database one."""
    backend = settings.storage_backend.lower()
    if backend == "auto":
        return bool(settings.database_url)
    if backend not in ("memory", "database"):
        raise ValueError(f"Unknown STORAGE_BACKEND: {settings.storage_backend}")
    return backend == "database"


def get_storage() -> Storage:
    """Get or create the process-wide storage backend."""
    global _storage
    if _storage is None:
        if uses_database():
            _storage = DatabaseStorage(get_session_factory())
            logger.info("Using database storage")
        else:
            _storage = MemStorage()
            logger.info("Using in-memory storage")
    return _storage


__all__ = ["Storage", "MemStorage", "DatabaseStorage", "get_storage", "uses_database"]
