"""Job application tracking and follow-up scheduling."""

import logging
from collections.abc import Iterable
from datetime import timedelta

from langchain_core.language_models import BaseChatModel

from resume_tailor.agents import generate_follow_up_email
from resume_tailor.agents.results import ContactInformation, FollowUpEmail, TailoredContent
from resume_tailor.services.common import NotFoundError, owned, require
from resume_tailor.storage import Storage
from resume_tailor.storage.base import Updates, utcnow
from resume_tailor.storage.records import (
    FollowUp,
    FollowUpCreate,
    FollowUpStats,
    JobApplication,
    JobApplicationCreate,
    TailoredResume,
)

logger = logging.getLogger(__name__)

DEFAULT_FOLLOW_UP_TYPES = ("1w", "2w")


def mark_applied(
    storage: Storage,
    tailored_id: str,
    user_id: str | None = None,
    notes: str | None = None,
    priority: str = "medium",
    source: str | None = None,
) -> tuple[TailoredResume, JobApplication]:
    """Mark a tailored resume as sent and start tracking the application."""
    resume = require(storage.get_tailored_resume(tailored_id), "Tailored resume not found", user_id)
    updated = storage.mark_as_applied(tailored_id, notes)
    application = storage.create_job_application(
        JobApplicationCreate(
            user_id=user_id if user_id is not None else resume.user_id,
            tailored_resume_id=tailored_id,
            job_title=resume.job_title,
            company=resume.company,
            job_url=resume.job_url,
            application_status="applied",
            applied_date=utcnow(),
            notes=notes,
            priority=priority,
            source=source,
        )
    )
    logger.info("Marked %s as applied to %s (application %s)", tailored_id, resume.company, application.id)
    return updated, application


def _application(storage: Storage, application_id: str, user_id: str | None) -> JobApplication:
    return require(storage.get_job_application(application_id), "Job application not found", user_id)


def schedule_follow_ups(
    storage: Storage,
    application_id: str,
    types: Iterable[str] | None = None,
    user_id: str | None = None,
) -> list[FollowUp]:
    """
    Create pending follow-ups for an application.

    ``1w`` and ``2w`` are due 7 and 14 days after the application date,
    ``thank_you`` one day after the interview. A thank-you without an
    interview date and unknown types are skipped.
    """
    application = _application(storage, application_id, user_id)
    created = []

    for follow_up_type in DEFAULT_FOLLOW_UP_TYPES if types is None else types:
        if follow_up_type == "1w":
            due_at = application.applied_date + timedelta(days=7)
        elif follow_up_type == "2w":
            due_at = application.applied_date + timedelta(days=14)
        elif follow_up_type == "thank_you" and application.interview_date:
            due_at = application.interview_date + timedelta(days=1)
        else:
            continue

        created.append(
            storage.create_follow_up(
                FollowUpCreate(job_application_id=application_id, due_at=due_at, type=follow_up_type)
            )
        )

    logger.info("Scheduled %d follow-ups for application %s", len(created), application_id)
    return created


def get_follow_up(storage: Storage, follow_up_id: str, user_id: str | None = None) -> FollowUp:
    """A follow-up whose application is visible to ``user_id``."""
    follow_up = require(storage.get_follow_up(follow_up_id), "Follow-up not found")
    # Follow-ups are owned through their application
    application = storage.get_job_application(follow_up.job_application_id)
    if owned(application, user_id) is None:
        raise NotFoundError("Follow-up not found")
    return follow_up


def update_follow_up(storage: Storage, follow_up_id: str, updates: Updates, user_id: str | None = None) -> FollowUp:
    """Apply follow-up changes; marking one sent stamps ``sent_at`` when missing."""
    get_follow_up(storage, follow_up_id, user_id)
    updates = dict(updates)
    if updates.get("status") == "sent" and not updates.get("sent_at"):
        updates["sent_at"] = utcnow()
    return storage.update_follow_up(follow_up_id, updates)


def draft_follow_up_email(
    storage: Storage, follow_up_id: str, user_id: str | None = None, llm: BaseChatModel | None = None
) -> tuple[FollowUp, FollowUpEmail]:
    """Generate the email for a follow-up and keep it on the record."""
    follow_up = get_follow_up(storage, follow_up_id, user_id)
    application = _application(storage, follow_up.job_application_id, user_id)

    resume = storage.get_tailored_resume(application.tailored_resume_id)
    tailored = TailoredContent.model_validate(resume.tailored_content) if resume else None
    contact: ContactInformation | None = tailored.contact if tailored else None

    email = generate_follow_up_email(
        follow_up.type,
        application.job_title,
        application.company,
        contact=contact,
        job_description=resume.original_job_description if resume else None,
        tailored=tailored,
        llm=llm,
    )
    updated = storage.update_follow_up(follow_up_id, {"email_subject": email.subject, "email_body": email.body})
    logger.info("Drafted %s follow-up email for application %s", follow_up.type, application.id)
    return updated, email


def list_follow_ups(
    storage: Storage, user_id: str | None = None, job_application_id: str | None = None, pending_only: bool = False
) -> list[FollowUp]:
    """Follow-ups of the applications visible to ``user_id``."""
    if job_application_id:
        _application(storage, job_application_id, user_id)
    visible = {a.id for a in storage.get_job_applications(user_id)}
    follow_ups = storage.get_pending_follow_ups() if pending_only else storage.get_follow_ups(job_application_id)
    return [f for f in follow_ups if f.job_application_id in visible]


def follow_up_stats(storage: Storage, user_id: str | None = None) -> FollowUpStats:
    if user_id is None:
        return storage.get_follow_up_stats()
    statuses = [f.status for f in list_follow_ups(storage, user_id)]
    return FollowUpStats(
        pending=statuses.count("pending"),
        sent=statuses.count("sent"),
        skipped=statuses.count("skipped"),
        total=len(statuses),
    )


def delete_follow_up(storage: Storage, follow_up_id: str, user_id: str | None = None) -> None:
    get_follow_up(storage, follow_up_id, user_id)
    storage.delete_follow_up(follow_up_id)
