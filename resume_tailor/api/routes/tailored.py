"""Saved tailored resume endpoints."""

from fastapi import APIRouter, Depends

from resume_tailor.api.deps import require_auth
from resume_tailor.api.routes.sessions import check_format, document_response
from resume_tailor.api.schemas import MarkAppliedRequest, TailoredResumeUpdate
from resume_tailor.services import applications, tailoring
from resume_tailor.services.common import require
from resume_tailor.services.insights import ResumeAnalytics, get_tailored_resume_analytics, invalidate_insights
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import TailoredResume, User

router = APIRouter()


def _resume(storage: Storage, resume_id: str, user: User) -> TailoredResume:
    return require(storage.get_tailored_resume(resume_id), "Tailored resume not found", user.id)


@router.get("", response_model=list[TailoredResume])
def list_tailored_resumes(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return storage.get_tailored_resumes(user.id)


@router.get("/analytics", response_model=ResumeAnalytics)
def analytics(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    """Response rates and ATS scores across saved versions."""
    return get_tailored_resume_analytics(storage, user.id)


@router.get("/{resume_id}", response_model=TailoredResume)
def get_tailored_resume(resume_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return _resume(storage, resume_id, user)


@router.post("/{resume_id}/mark-applied")
def mark_applied(
    resume_id: str,
    data: MarkAppliedRequest,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    """Mark a resume as sent and create the matching job application."""
    resume, application = applications.mark_applied(
        storage, resume_id, user.id, notes=data.notes, priority=data.priority, source=data.source
    )
    invalidate_insights(user.id)
    return {"resume": resume, "application": application}


@router.put("/{resume_id}", response_model=TailoredResume)
def update_tailored_resume(
    resume_id: str,
    data: TailoredResumeUpdate,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    _resume(storage, resume_id, user)
    updated = storage.update_tailored_resume(resume_id, data.model_dump(exclude_unset=True))
    invalidate_insights(user.id)
    return updated


@router.delete("/{resume_id}")
def delete_tailored_resume(resume_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    _resume(storage, resume_id, user)
    storage.delete_tailored_resume(resume_id)
    invalidate_insights(user.id)
    return {"message": "Tailored resume deleted"}


@router.get("/{resume_id}/download/{fmt}")
def download(resume_id: str, fmt: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    data, filename = tailoring.render_tailored_document(storage, resume_id, check_format(fmt), user.id)
    return document_response(data, filename, fmt)
