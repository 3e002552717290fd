"""API request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from resume_tailor.storage.records import ApplicationStatus, FollowUpStatus, FollowUpType, Priority


# Auth schemas
class Credentials(BaseModel):
    username: str = ""
    password: str = ""


class UserResponse(BaseModel):
    id: str
    username: str
    is_admin: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AdminUserUpdate(BaseModel):
    is_admin: bool | None = None
    password: str | None = None


class MessageResponse(BaseModel):
    message: str


# Session schemas
class ProfileRequest(BaseModel):
    profile: dict[str, Any] | str


class AnalyzeJobRequest(BaseModel):
    job_url: str | None = None
    job_description: str | None = None


# Stored resume schemas
class StoredResumeUpdate(BaseModel):
    name: str | None = None
    is_default: bool | None = None
    contact_info: dict[str, Any] | None = None


# Tailored resume schemas
class TailoredResumeUpdate(BaseModel):
    notes: str | None = None
    tags: list[str] | None = None
    applied_to_job: bool | None = None
    response_received: bool | None = None
    response_date: datetime | None = None
    source: str | None = None
    referral: str | None = None


class MarkAppliedRequest(BaseModel):
    notes: str | None = None
    priority: Priority = "medium"
    source: str | None = None


# Job application schemas
class JobApplicationUpdate(BaseModel):
    application_status: ApplicationStatus | None = None
    interview_date: datetime | None = None
    follow_up_date: datetime | None = None
    notes: str | None = None
    priority: Priority | None = None
    source: str | None = None
    contact_person: str | None = None
    salary: str | None = None


# Follow-up schemas
class ScheduleFollowUpsRequest(BaseModel):
    job_application_id: str
    types: list[FollowUpType] = Field(default_factory=lambda: ["1w", "2w"])


class FollowUpUpdate(BaseModel):
    status: FollowUpStatus | None = None
    due_at: datetime | None = None
    email_subject: str | None = None
    email_body: str | None = None
    sent_at: datetime | None = None
