"""Follow-up scheduling and email drafting endpoints."""

from fastapi import APIRouter, Depends, Request
from langchain_core.language_models import BaseChatModel

from resume_tailor.api.deps import get_llm, require_auth
from resume_tailor.api.limiter import limiter
from resume_tailor.api.schemas import FollowUpUpdate, ScheduleFollowUpsRequest
from resume_tailor.config import settings
from resume_tailor.services import applications
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import FollowUp, FollowUpStats, User

router = APIRouter()


@router.post("/schedule")
def schedule(data: ScheduleFollowUpsRequest, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    """Schedule follow-ups for an application (1 and 2 weeks by default)."""
    follow_ups = applications.schedule_follow_ups(storage, data.job_application_id, data.types, user.id)
    return {"message": "Follow-ups scheduled successfully", "follow_ups": follow_ups}


@router.get("", response_model=list[FollowUp])
def list_follow_ups(
    job_application_id: str | None = None,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    return applications.list_follow_ups(storage, user.id, job_application_id)


@router.get("/pending", response_model=list[FollowUp])
def pending_follow_ups(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return applications.list_follow_ups(storage, user.id, pending_only=True)


@router.get("/stats", response_model=FollowUpStats)
def stats(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return applications.follow_up_stats(storage, user.id)


@router.patch("/{follow_up_id}", response_model=FollowUp)
def update_follow_up(
    follow_up_id: str,
    data: FollowUpUpdate,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    """Mark a follow-up sent or skipped, or edit its email."""
    return applications.update_follow_up(storage, follow_up_id, data.model_dump(exclude_unset=True), user.id)


@router.delete("/{follow_up_id}")
def delete_follow_up(follow_up_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    applications.delete_follow_up(storage, follow_up_id, user.id)
    return {"message": "Follow-up deleted successfully"}


@router.post("/{follow_up_id}/generate-email")
@limiter.limit(settings.llm_rate_limit)
def generate_email(
    request: Request,
    follow_up_id: str,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
    llm: BaseChatModel | None = Depends(get_llm),
):
    """Draft the follow-up email with the model."""
    follow_up, email = applications.draft_follow_up_email(storage, follow_up_id, user.id, llm=llm)
    return {"follow_up": follow_up, "email": email}
