"""Database table models."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from resume_tailor.db.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """User account."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    username: Mapped[str] = mapped_column(String(255), unique=True)
    password: Mapped[str] = mapped_column(Text)  # bcrypt hash
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class ResumeSession(Base):
    """Working state of one tailoring run."""

    __tablename__ = "resume_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    base_resume_file: Mapped[str | None] = mapped_column(Text, default=None)
    base_resume_content: Mapped[dict | None] = mapped_column(JSON, default=None)  # text, file_type, file_size
    profile_json: Mapped[dict | None] = mapped_column(JSON, default=None)
    job_url: Mapped[str | None] = mapped_column(Text, default=None)
    job_description: Mapped[str | None] = mapped_column(Text, default=None)
    job_analysis: Mapped[dict | None] = mapped_column(JSON, default=None)
    tailored_content: Mapped[dict | None] = mapped_column(JSON, default=None)
    interview_prep: Mapped[dict | None] = mapped_column(JSON, default=None)
    status: Mapped[str] = mapped_column(String(20), default="draft")
    match_score: Mapped[int | None] = mapped_column(Integer, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class JobPosting(Base):
    """A job posting fetched from a URL."""

    __tablename__ = "job_postings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    url: Mapped[str] = mapped_column(String(2048), unique=True)
    title: Mapped[str | None] = mapped_column(Text, default=None)
    company: Mapped[str | None] = mapped_column(Text, default=None)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    requirements: Mapped[list | None] = mapped_column(JSON, default=None)
    keywords: Mapped[list | None] = mapped_column(JSON, default=None)
    scraped: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class StoredResume(Base):
    """A base resume kept for reuse across sessions."""

    __tablename__ = "stored_resumes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    name: Mapped[str] = mapped_column(Text)
    original_filename: Mapped[str] = mapped_column(Text)
    content: Mapped[str] = mapped_column(Text)
    contact_info: Mapped[dict | None] = mapped_column(JSON, default=None)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class TailoredResume(Base):
    """Permanently saved tailored resume."""

    __tablename__ = "tailored_resumes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    session_id: Mapped[str] = mapped_column(String(36))
    job_title: Mapped[str] = mapped_column(Text)
    company: Mapped[str] = mapped_column(Text)
    job_url: Mapped[str | None] = mapped_column(Text, default=None)
    original_job_description: Mapped[str | None] = mapped_column(Text, default=None)
    tailored_content: Mapped[dict] = mapped_column(JSON)
    ats_score: Mapped[int | None] = mapped_column(Integer, default=None)
    filename: Mapped[str] = mapped_column(Text)
    applied_to_job: Mapped[bool] = mapped_column(Boolean, default=False)
    application_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    tags: Mapped[list | None] = mapped_column(JSON, default=None)
    micro_edits: Mapped[list | None] = mapped_column(JSON, default=None)
    ai_improvements: Mapped[list | None] = mapped_column(JSON, default=None)
    response_received: Mapped[bool] = mapped_column(Boolean, default=False)
    response_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    source: Mapped[str | None] = mapped_column(Text, default=None)
    referral: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class JobApplication(Base):
    """Application tracking entry for a tailored resume."""

    __tablename__ = "job_applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    tailored_resume_id: Mapped[str] = mapped_column(String(36))
    job_title: Mapped[str] = mapped_column(Text)
    company: Mapped[str] = mapped_column(Text)
    job_url: Mapped[str | None] = mapped_column(Text, default=None)
    application_status: Mapped[str] = mapped_column(String(20), default="applied")  # applied/interview/rejected/offer
    applied_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    interview_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    follow_up_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    priority: Mapped[str] = mapped_column(String(10), default="medium")  # high/medium/low
    source: Mapped[str | None] = mapped_column(Text, default=None)
    contact_person: Mapped[str | None] = mapped_column(Text, default=None)
    salary: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class FollowUp(Base):
    """Scheduled follow-up for a job application."""

    __tablename__ = "follow_ups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    job_application_id: Mapped[str] = mapped_column(ForeignKey("job_applications.id"), index=True)
    due_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    type: Mapped[str] = mapped_column(String(20))  # 1w, 2w, thank_you
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending/sent/skipped
    email_subject: Mapped[str | None] = mapped_column(Text, default=None)
    email_body: Mapped[str | None] = mapped_column(Text, default=None)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
