"""In-memory storage backend.

Keeps one dict per entity kind. Records handed out are deep copies.
"""

import uuid
from typing import TypeVar

from pydantic import BaseModel

from resume_tailor.storage.base import Storage, Updates, clean_updates, utcnow
from resume_tailor.storage.records import (
    FollowUp,
    FollowUpCreate,
    JobApplication,
    JobApplicationCreate,
    JobPosting,
    JobPostingCreate,
    Record,
    ResumeSession,
    ResumeSessionCreate,
    StoredResume,
    StoredResumeCreate,
    TailoredResume,
    TailoredResumeCreate,
    User,
    UserCreate,
)

R = TypeVar("R", bound=Record)


class MemStorage(Storage):
    def __init__(self):
        self._users: dict[str, User] = {}
        self._sessions: dict[str, ResumeSession] = {}
        self._postings: dict[str, JobPosting] = {}
        self._stored: dict[str, StoredResume] = {}
        self._tailored: dict[str, TailoredResume] = {}
        self._applications: dict[str, JobApplication] = {}
        self._follow_ups: dict[str, FollowUp] = {}

    # Helpers

    @staticmethod
    def _insert(table: dict[str, R], model: type[R], data: BaseModel, **extra) -> R:
        now = utcnow()
        record = model.model_validate(
            {**data.model_dump(), **extra, "id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
        )
        table[record.id] = record
        return record.model_copy(deep=True)

    @staticmethod
    def _get(table: dict[str, R], record_id: str) -> R | None:
        record = table.get(record_id)
        return record.model_copy(deep=True) if record else None

    @staticmethod
    def _merge(table: dict[str, R], record_id: str, updates: Updates) -> R | None:
        """Validate the merged record without storing it."""
        current = table.get(record_id)
        if current is None:
            return None
        model = type(current)
        return model.model_validate({**current.model_dump(), **clean_updates(updates), "updated_at": utcnow()})

    def _update(self, table: dict[str, R], record_id: str, updates: Updates) -> R | None:
        merged = self._merge(table, record_id, updates)
        if merged is None:
            return None
        table[record_id] = merged
        return merged.model_copy(deep=True)

    @staticmethod
    def _delete(table: dict, record_id: str) -> bool:
        return table.pop(record_id, None) is not None

    @staticmethod
    def _copies(records, key, reverse=False) -> list:
        return [r.model_copy(deep=True) for r in sorted(records, key=key, reverse=reverse)]

    # Users

    def create_user(self, data: UserCreate) -> User:
        return self._insert(self._users, User, data)

    def get_user(self, user_id: str) -> User | None:
        return self._get(self._users, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return user.model_copy(deep=True)
        return None

    def list_users(self) -> list[User]:
        return self._copies(self._users.values(), key=lambda u: u.created_at)

    def update_user(self, user_id: str, updates: Updates) -> User | None:
        return self._update(self._users, user_id, updates)

    def delete_user(self, user_id: str) -> bool:
        return self._delete(self._users, user_id)

    # Resume sessions

    def create_resume_session(self, data: ResumeSessionCreate) -> ResumeSession:
        return self._insert(self._sessions, ResumeSession, data)

    def get_resume_session(self, session_id: str) -> ResumeSession | None:
        return self._get(self._sessions, session_id)

    def update_resume_session(self, session_id: str, updates: Updates) -> ResumeSession | None:
        return self._update(self._sessions, session_id, updates)

    def delete_resume_session(self, session_id: str) -> bool:
        return self._delete(self._sessions, session_id)

    def get_resume_sessions(self, user_id: str | None = None) -> list[ResumeSession]:
        sessions = [s for s in self._sessions.values() if user_id is None or s.user_id == user_id]
        return self._copies(sessions, key=lambda s: s.created_at, reverse=True)

    # Job postings

    def create_job_posting(self, data: JobPostingCreate) -> JobPosting:
        if self.get_job_posting(data.url) is not None:
            raise ValueError(f"Job posting already exists for {data.url}")
        return self._insert(self._postings, JobPosting, data)

    def get_job_posting(self, url: str) -> JobPosting | None:
        for posting in self._postings.values():
            if posting.url == url:
                return posting.model_copy(deep=True)
        return None

    def get_job_posting_by_id(self, posting_id: str) -> JobPosting | None:
        return self._get(self._postings, posting_id)

    def update_job_posting(self, posting_id: str, updates: Updates) -> JobPosting | None:
        return self._update(self._postings, posting_id, updates)

    def delete_job_posting(self, posting_id: str) -> bool:
        return self._delete(self._postings, posting_id)

    # Stored resumes

    def _clear_defaults(self, keep_id: str | None = None) -> None:
        for resume_id, resume in self._stored.items():
            if resume.is_default and resume_id != keep_id:
                self._stored[resume_id] = resume.model_copy(update={"is_default": False, "updated_at": utcnow()})

    def create_stored_resume(self, data: StoredResumeCreate) -> StoredResume:
        if data.is_default:
            self._clear_defaults()
        return self._insert(self._stored, StoredResume, data)

    def get_stored_resumes(self, user_id: str | None = None) -> list[StoredResume]:
        resumes = [r for r in self._stored.values() if user_id is None or r.user_id == user_id]
        return self._copies(resumes, key=lambda r: r.created_at, reverse=True)

    def get_stored_resume(self, resume_id: str) -> StoredResume | None:
        return self._get(self._stored, resume_id)

    def get_default_resume(self) -> StoredResume | None:
        for resume in self._stored.values():
            if resume.is_default:
                return resume.model_copy(deep=True)
        return None

    def update_stored_resume(self, resume_id: str, updates: Updates) -> StoredResume | None:
        merged = self._merge(self._stored, resume_id, updates)
        if merged is None:
            return None
        if merged.is_default:
            self._clear_defaults(keep_id=resume_id)
        self._stored[resume_id] = merged
        return merged.model_copy(deep=True)

    def delete_stored_resume(self, resume_id: str) -> bool:
        return self._delete(self._stored, resume_id)

    def set_default_resume(self, resume_id: str) -> bool:
        return self.update_stored_resume(resume_id, {"is_default": True}) is not None

    # Tailored resumes

    def save_tailored_resume(self, data: TailoredResumeCreate) -> TailoredResume:
        return self._insert(self._tailored, TailoredResume, data)

    def get_tailored_resumes(self, user_id: str | None = None) -> list[TailoredResume]:
        resumes = [r for r in self._tailored.values() if user_id is None or r.user_id == user_id]
        return self._copies(resumes, key=lambda r: r.created_at, reverse=True)

    def get_tailored_resume(self, resume_id: str) -> TailoredResume | None:
        return self._get(self._tailored, resume_id)

    def update_tailored_resume(self, resume_id: str, updates: Updates) -> TailoredResume | None:
        return self._update(self._tailored, resume_id, updates)

    def delete_tailored_resume(self, resume_id: str) -> bool:
        return self._delete(self._tailored, resume_id)

    # Job applications

    def create_job_application(self, data: JobApplicationCreate) -> JobApplication:
        return self._insert(self._applications, JobApplication, data, applied_date=data.applied_date or utcnow())

    def get_job_applications(self, user_id: str | None = None) -> list[JobApplication]:
        apps = [a for a in self._applications.values() if user_id is None or a.user_id == user_id]
        return self._copies(apps, key=lambda a: a.applied_date, reverse=True)

    def get_job_application(self, application_id: str) -> JobApplication | None:
        return self._get(self._applications, application_id)

    def update_job_application(self, application_id: str, updates: Updates) -> JobApplication | None:
        return self._update(self._applications, application_id, updates)

    def delete_job_application(self, application_id: str) -> bool:
        if not self._delete(self._applications, application_id):
            return False
        for follow_up_id in [f.id for f in self._follow_ups.values() if f.job_application_id == application_id]:
            del self._follow_ups[follow_up_id]
        return True

    # Follow-ups

    def create_follow_up(self, data: FollowUpCreate) -> FollowUp:
        return self._insert(self._follow_ups, FollowUp, data)

    def get_follow_ups(self, job_application_id: str | None = None) -> list[FollowUp]:
        follow_ups = [
            f for f in self._follow_ups.values() if job_application_id is None or f.job_application_id == job_application_id
        ]
        return self._copies(follow_ups, key=lambda f: f.due_at)

    def get_follow_up(self, follow_up_id: str) -> FollowUp | None:
        return self._get(self._follow_ups, follow_up_id)

    def get_pending_follow_ups(self) -> list[FollowUp]:
        pending = [f for f in self._follow_ups.values() if f.status == "pending"]
        return self._copies(pending, key=lambda f: f.due_at)

    def update_follow_up(self, follow_up_id: str, updates: Updates) -> FollowUp | None:
        return self._update(self._follow_ups, follow_up_id, updates)

    def delete_follow_up(self, follow_up_id: str) -> bool:
        return self._delete(self._follow_ups, follow_up_id)
