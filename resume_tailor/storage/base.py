"""Storage interface.

Both backends implement the same contract:

- ``create`` assigns an id and timestamps and returns the new record
- ``get`` returns the record or None
- ``update`` merges partial fields, refreshes ``updated_at`` and returns the
  record, or returns None without touching anything when the id is unknown
- ``delete`` returns True when something was removed

At most one stored resume is the default at any time.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from resume_tailor.storage.records import (
    ApplicationStats,
    FollowUp,
    FollowUpCreate,
    FollowUpStats,
    JobApplication,
    JobApplicationCreate,
    JobPosting,
    JobPostingCreate,
    OverallStats,
    ResumeSession,
    ResumeSessionCreate,
    StoredResume,
    StoredResumeCreate,
    TailoredResume,
    TailoredResumeCreate,
    User,
    UserCreate,
)

Updates = Mapping[str, Any]

# Never taken from caller-supplied updates
PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})


def clean_updates(updates: Updates) -> dict[str, Any]:
    """Drop identity and timestamp fields from a partial update."""
    return {k: v for k, v in dict(updates).items() if k not in PROTECTED_FIELDS}


def utcnow() -> datetime:
    return datetime.now(UTC)


class Storage(ABC):
    """Repository for every persisted entity."""

    # Users
    @abstractmethod
    def create_user(self, data: UserCreate) -> User: ...

    @abstractmethod
    def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def list_users(self) -> list[User]: ...

    @abstractmethod
    def update_user(self, user_id: str, updates: Updates) -> User | None: ...

    @abstractmethod
    def delete_user(self, user_id: str) -> bool: ...

    # Resume sessions
    @abstractmethod
    def create_resume_session(self, data: ResumeSessionCreate) -> ResumeSession: ...

    @abstractmethod
    def get_resume_session(self, session_id: str) -> ResumeSession | None: ...

    @abstractmethod
    def update_resume_session(self, session_id: str, updates: Updates) -> ResumeSession | None: ...

    @abstractmethod
    def delete_resume_session(self, session_id: str) -> bool: ...

    @abstractmethod
    def get_resume_sessions(self, user_id: str | None = None) -> list[ResumeSession]:
        """Sessions, newest first, optionally for one user."""

    # Job postings
    @abstractmethod
    def create_job_posting(self, data: JobPostingCreate) -> JobPosting: ...

    @abstractmethod
    def get_job_posting(self, url: str) -> JobPosting | None:
        """Look up a posting by its URL."""

    @abstractmethod
    def get_job_posting_by_id(self, posting_id: str) -> JobPosting | None: ...

    @abstractmethod
    def update_job_posting(self, posting_id: str, updates: Updates) -> JobPosting | None: ...

    @abstractmethod
    def delete_job_posting(self, posting_id: str) -> bool: ...

    # Stored resumes
    @abstractmethod
    def create_stored_resume(self, data: StoredResumeCreate) -> StoredResume:
        """Create a stored resume; a new default clears any previous one."""

    @abstractmethod
    def get_stored_resumes(self, user_id: str | None = None) -> list[StoredResume]: ...

    @abstractmethod
    def get_stored_resume(self, resume_id: str) -> StoredResume | None: ...

    @abstractmethod
    def get_default_resume(self) -> StoredResume | None: ...

    @abstractmethod
    def update_stored_resume(self, resume_id: str, updates: Updates) -> StoredResume | None: ...

    @abstractmethod
    def delete_stored_resume(self, resume_id: str) -> bool: ...

    @abstractmethod
    def set_default_resume(self, resume_id: str) -> bool:
        """Make one resume the only default. False (and no change) for an unknown id."""

    # Tailored resumes
    @abstractmethod
    def save_tailored_resume(self, data: TailoredResumeCreate) -> TailoredResume: ...

    @abstractmethod
    def get_tailored_resumes(self, user_id: str | None = None) -> list[TailoredResume]: ...

    @abstractmethod
    def get_tailored_resume(self, resume_id: str) -> TailoredResume | None: ...

    @abstractmethod
    def update_tailored_resume(self, resume_id: str, updates: Updates) -> TailoredResume | None: ...

    @abstractmethod
    def delete_tailored_resume(self, resume_id: str) -> bool: ...

    def mark_as_applied(self, resume_id: str, notes: str | None = None) -> TailoredResume | None:
        return self.update_tailored_resume(
            resume_id,
            {"applied_to_job": True, "application_date": utcnow(), "notes": notes or None},
        )

    # Job applications
    @abstractmethod
    def create_job_application(self, data: JobApplicationCreate) -> JobApplication: ...

    @abstractmethod
    def get_job_applications(self, user_id: str | None = None) -> list[JobApplication]:
        """Applications, most recently applied first."""

    @abstractmethod
    def get_job_application(self, application_id: str) -> JobApplication | None: ...

    @abstractmethod
    def update_job_application(self, application_id: str, updates: Updates) -> JobApplication | None: ...

    @abstractmethod
    def delete_job_application(self, application_id: str) -> bool:
        """Remove an application together with its follow-ups."""

    def get_application_stats(self, user_id: str | None = None) -> ApplicationStats:
        applications = self.get_job_applications(user_id)
        statuses = [app.application_status for app in applications]
        return ApplicationStats(
            total=len(applications),
            applied=statuses.count("applied"),
            interviews=statuses.count("interview"),
            offers=statuses.count("offer"),
            rejected=statuses.count("rejected"),
        )

    # Follow-ups
    @abstractmethod
    def create_follow_up(self, data: FollowUpCreate) -> FollowUp: ...

    @abstractmethod
    def get_follow_ups(self, job_application_id: str | None = None) -> list[FollowUp]:
        """Follow-ups ordered by due date, earliest first."""

    @abstractmethod
    def get_follow_up(self, follow_up_id: str) -> FollowUp | None: ...

    @abstractmethod
    def get_pending_follow_ups(self) -> list[FollowUp]: ...

    @abstractmethod
    def update_follow_up(self, follow_up_id: str, updates: Updates) -> FollowUp | None: ...

    @abstractmethod
    def delete_follow_up(self, follow_up_id: str) -> bool: ...

    def get_follow_up_stats(self) -> FollowUpStats:
        statuses = [f.status for f in self.get_follow_ups()]
        return FollowUpStats(
            pending=statuses.count("pending"),
            sent=statuses.count("sent"),
            skipped=statuses.count("skipped"),
            total=len(statuses),
        )

    def get_overall_stats(self, user_id: str | None = None) -> OverallStats:
        """Homepage counters."""
        applications = self.get_job_applications(user_id)
        application_ids = {app.id for app in applications}
        follow_ups = [f for f in self.get_follow_ups() if user_id is None or f.job_application_id in application_ids]
        return OverallStats(
            jobs_analyzed=sum(1 for s in self.get_resume_sessions(user_id) if s.job_analysis is not None),
            resumes_generated=len(self.get_tailored_resumes(user_id)),
            applications_sent=len(applications),
            follow_ups_scheduled=len(follow_ups),
        )
