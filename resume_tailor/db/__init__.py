"""Database package."""

from resume_tailor.db.base import Base, get_engine, get_session_factory, init_db
from resume_tailor.db.tables import (
    FollowUp,
    JobApplication,
    JobPosting,
    ResumeSession,
    StoredResume,
    TailoredResume,
    User,
)

__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "init_db",
    "User",
    "ResumeSession",
    "JobPosting",
    "StoredResume",
    "TailoredResume",
    "JobApplication",
    "FollowUp",
]
