"""Stored resume library endpoints."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from langchain_core.language_models import BaseChatModel

from resume_tailor.api.deps import get_llm, require_auth
from resume_tailor.api.limiter import limiter
from resume_tailor.api.schemas import StoredResumeUpdate
from resume_tailor.config import settings
from resume_tailor.services import tailoring
from resume_tailor.services.common import require
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import StoredResume, User
from resume_tailor.tools.file_parser import process_resume_file

router = APIRouter()


def _resume(storage: Storage, resume_id: str, user: User) -> StoredResume:
    return require(storage.get_stored_resume(resume_id), "Resume not found", user.id)


@router.get("", response_model=list[StoredResume])
def list_resumes(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return storage.get_stored_resumes(user.id)


@router.post("", response_model=StoredResume)
@limiter.limit(settings.llm_rate_limit)
async def upload_resume(
    request: Request,
    file: UploadFile = File(...),
    name: str = Form(...),
    set_as_default: bool = Form(False),
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
    llm: BaseChatModel | None = Depends(get_llm),
):
    """Upload a resume into the library and extract its contact info."""
    content = await file.read()
    processed = process_resume_file(file.filename or "", content, settings.max_upload_size)
    return tailoring.store_resume(storage, processed, name, user.id, set_default=set_as_default, llm=llm)


@router.get("/{resume_id}", response_model=StoredResume)
def get_resume(resume_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return _resume(storage, resume_id, user)


@router.patch("/{resume_id}", response_model=StoredResume)
def update_resume(
    resume_id: str,
    data: StoredResumeUpdate,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    _resume(storage, resume_id, user)
    return storage.update_stored_resume(resume_id, data.model_dump(exclude_unset=True))


@router.delete("/{resume_id}")
def delete_resume(resume_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    _resume(storage, resume_id, user)
    storage.delete_stored_resume(resume_id)
    return {"message": "Resume deleted"}


@router.post("/{resume_id}/set-default", response_model=StoredResume)
def set_default(resume_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    """Make this the default resume."""
    _resume(storage, resume_id, user)
    storage.set_default_resume(resume_id)
    return storage.get_stored_resume(resume_id)
