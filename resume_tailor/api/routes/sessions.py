"""Tailoring session endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import Response
from langchain_core.language_models import BaseChatModel

from resume_tailor.api.deps import get_llm, require_auth
from resume_tailor.api.limiter import limiter
from resume_tailor.api.schemas import AnalyzeJobRequest, ProfileRequest
from resume_tailor.config import settings
from resume_tailor.services import tailoring
from resume_tailor.services.common import require
from resume_tailor.services.insights import invalidate_insights
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import ResumeSession, TailoredResume, User
from resume_tailor.tools.documents import FORMATS, MEDIA_TYPES
from resume_tailor.tools.file_parser import process_resume_file

router = APIRouter()


def check_format(fmt: str) -> str:
    if fmt not in FORMATS:
        raise HTTPException(status_code=400, detail="Format must be pdf or docx")
    return fmt


def document_response(data: bytes, filename: str, fmt: str) -> Response:
    """Attachment response for a rendered resume."""
    return Response(
        content=data,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("", response_model=ResumeSession)
def create_session(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    """Start a new tailoring session."""
    return tailoring.create_tailoring_session(storage, user.id)


@router.get("", response_model=list[ResumeSession])
def list_sessions(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return storage.get_resume_sessions(user.id)


@router.get("/{session_id}", response_model=ResumeSession)
def get_session(session_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return require(storage.get_resume_session(session_id), "Session not found", user.id)


@router.delete("/{session_id}")
def delete_session(session_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    require(storage.get_resume_session(session_id), "Session not found", user.id)
    storage.delete_resume_session(session_id)
    return {"message": "Session deleted"}


@router.post("/{session_id}/resume", response_model=ResumeSession)
async def upload_resume(
    session_id: str,
    file: UploadFile = File(...),
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    """Upload a PDF or DOCX resume into the session."""
    content = await file.read()
    processed = process_resume_file(file.filename or "", content, settings.max_upload_size)
    return tailoring.upload_resume_to_session(storage, session_id, processed, user.id)


@router.post("/{session_id}/profile", response_model=ResumeSession)
def upload_profile(
    session_id: str,
    data: ProfileRequest,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    """Use a structured JSON profile instead of a resume file."""
    return tailoring.upload_profile_to_session(storage, session_id, data.profile, user.id)


@router.post("/{session_id}/use-resume/{resume_id}", response_model=ResumeSession)
def use_resume(
    session_id: str,
    resume_id: str,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    return tailoring.use_stored_resume(storage, session_id, resume_id, user.id)


@router.post("/{session_id}/analyze-job", response_model=ResumeSession)
@limiter.limit(settings.llm_rate_limit)
def analyze_job(
    request: Request,
    session_id: str,
    data: AnalyzeJobRequest,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
    llm: BaseChatModel | None = Depends(get_llm),
):
    """Analyze a job posting by URL or pasted description."""
    return tailoring.analyze_job_for_session(
        storage, session_id, job_url=data.job_url, job_description=data.job_description, user_id=user.id, llm=llm
    )


@router.post("/{session_id}/tailor", response_model=tailoring.TailoringResult)
@limiter.limit(settings.llm_rate_limit)
def tailor(
    request: Request,
    session_id: str,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
    llm: BaseChatModel | None = Depends(get_llm),
):
    """Tailor the session's resume to its analyzed job."""
    return tailoring.tailor_resume_for_session(storage, session_id, user.id, llm=llm)


@router.post("/{session_id}/save")
def save(session_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    """Save the tailored resume permanently."""
    saved: TailoredResume = tailoring.save_tailored_resume(storage, session_id, user.id)
    invalidate_insights(user.id)
    return {"id": saved.id, "filename": saved.filename, "message": "Resume saved permanently!"}


@router.get("/{session_id}/download/{fmt}")
def download(
    session_id: str,
    fmt: str,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    data, filename = tailoring.render_session_document(storage, session_id, check_format(fmt), user.id)
    return document_response(data, filename, fmt)
