"""Record schemas shared by both storage backends.

Records are what the storage layer hands out. The ``*Create`` models carry the
fields a caller may supply on creation; ids and timestamps are always assigned
by the store.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so both backends compare the same way."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
OptionalUtcDatetime = Annotated[datetime | None, AfterValidator(ensure_utc)]

SessionStatus = Literal["draft", "analyzing", "tailoring", "tailored", "completed", "error"]
ApplicationStatus = Literal["applied", "interview", "rejected", "offer"]
Priority = Literal["high", "medium", "low"]
FollowUpType = Literal["1w", "2w", "thank_you"]
FollowUpStatus = Literal["pending", "sent", "skipped"]


class Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


# User
class UserCreate(BaseModel):
    username: str
    password: str
    is_admin: bool = False


class User(Record, UserCreate):
    pass


# Resume session
class ResumeSessionCreate(BaseModel):
    user_id: str | None = None
    base_resume_file: str | None = None
    base_resume_content: dict[str, Any] | None = None
    profile_json: dict[str, Any] | None = None
    job_url: str | None = None
    job_description: str | None = None
    job_analysis: dict[str, Any] | None = None
    tailored_content: dict[str, Any] | None = None
    interview_prep: dict[str, Any] | None = None
    status: SessionStatus = "draft"
    match_score: int | None = None


class ResumeSession(Record, ResumeSessionCreate):
    pass


# Job posting
class JobPostingCreate(BaseModel):
    url: str
    title: str | None = None
    company: str | None = None
    description: str | None = None
    requirements: list[str] | None = None
    keywords: list[str] | None = None
    scraped: bool = False


class JobPosting(Record, JobPostingCreate):
    pass


# Stored resume
class StoredResumeCreate(BaseModel):
    user_id: str | None = None
    name: str
    original_filename: str
    content: str
    contact_info: dict[str, Any] | None = None
    is_default: bool = False


class StoredResume(Record, StoredResumeCreate):
    pass


# Tailored resume
class TailoredResumeCreate(BaseModel):
    user_id: str | None = None
    session_id: str
    job_title: str
    company: str
    job_url: str | None = None
    original_job_description: str | None = None
    tailored_content: dict[str, Any]
    ats_score: int | None = None
    filename: str
    applied_to_job: bool = False
    application_date: OptionalUtcDatetime = None
    notes: str | None = None
    tags: list[str] | None = None
    micro_edits: list[str] | None = None
    ai_improvements: list[str] | None = None
    response_received: bool = False
    response_date: OptionalUtcDatetime = None
    source: str | None = None
    referral: str | None = None


class TailoredResume(Record, TailoredResumeCreate):
    pass


# Job application
class JobApplicationCreate(BaseModel):
    user_id: str | None = None
    tailored_resume_id: str
    job_title: str
    company: str
    job_url: str | None = None
    application_status: ApplicationStatus = "applied"
    applied_date: OptionalUtcDatetime = None  # defaults to creation time
    interview_date: OptionalUtcDatetime = None
    follow_up_date: OptionalUtcDatetime = None
    notes: str | None = None
    priority: Priority = "medium"
    source: str | None = None
    contact_person: str | None = None
    salary: str | None = None


class JobApplication(Record, JobApplicationCreate):
    applied_date: UtcDatetime


# Follow-up
class FollowUpCreate(BaseModel):
    job_application_id: str
    due_at: UtcDatetime
    type: FollowUpType
    status: FollowUpStatus = "pending"
    email_subject: str | None = None
    email_body: str | None = None
    sent_at: OptionalUtcDatetime = None


class FollowUp(Record, FollowUpCreate):
    pass


# Aggregates
class ApplicationStats(BaseModel):
    total: int = 0
    applied: int = 0
    interviews: int = 0
    offers: int = 0
    rejected: int = 0


class FollowUpStats(BaseModel):
    pending: int = 0
    sent: int = 0
    skipped: int = 0
    total: int = 0


class OverallStats(BaseModel):
    jobs_analyzed: int = 0
    resumes_generated: int = 0
    applications_sent: int = 0
    follow_ups_scheduled: int = 0
