"""Job application tracking endpoints."""

from fastapi import APIRouter, Depends

from resume_tailor.api.deps import require_auth
from resume_tailor.api.schemas import JobApplicationUpdate
from resume_tailor.services.common import require
from resume_tailor.services.insights import invalidate_insights
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import ApplicationStats, JobApplication, User

router = APIRouter()


def _application(storage: Storage, application_id: str, user: User) -> JobApplication:
    return require(storage.get_job_application(application_id), "Job application not found", user.id)


@router.get("", response_model=list[JobApplication])
def list_applications(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return storage.get_job_applications(user.id)


@router.get("/stats", response_model=ApplicationStats)
def application_stats(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return storage.get_application_stats(user.id)


@router.get("/{application_id}", response_model=JobApplication)
def get_application(application_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return _application(storage, application_id, user)


@router.put("/{application_id}", response_model=JobApplication)
def update_application(
    application_id: str,
    data: JobApplicationUpdate,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    """Update status, interview date or notes."""
    _application(storage, application_id, user)
    updated = storage.update_job_application(application_id, data.model_dump(exclude_unset=True))
    invalidate_insights(user.id)
    return updated


@router.delete("/{application_id}")
def delete_application(application_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    """Delete an application and its follow-ups."""
    _application(storage, application_id, user)
    storage.delete_job_application(application_id)
    invalidate_insights(user.id)
    return {"message": "Job application deleted successfully"}
