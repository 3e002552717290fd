"""Interview preparation endpoints."""

from fastapi import APIRouter, Depends, Request
from langchain_core.language_models import BaseChatModel

from resume_tailor.api.deps import get_llm, require_auth
from resume_tailor.api.limiter import limiter
from resume_tailor.config import settings
from resume_tailor.services.interview import InterviewRequest, prepare_interview
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import User

router = APIRouter()


@router.post("/questions")
@limiter.limit(settings.llm_rate_limit)
def questions(
    request: Request,
    data: InterviewRequest,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
    llm: BaseChatModel | None = Depends(get_llm),
):
    """Generate likely interview questions with suggested answers."""
    return {"questions": prepare_interview(storage, "questions", data, user.id, llm=llm)}


@router.post("/skills-explanations")
@limiter.limit(settings.llm_rate_limit)
def skills_explanations(
    request: Request,
    data: InterviewRequest,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
    llm: BaseChatModel | None = Depends(get_llm),
):
    """Explain skills at 30 second, 2 minute and deep dive depth."""
    return {"skills": prepare_interview(storage, "skills", data, user.id, llm=llm)}


@router.post("/star-stories")
@limiter.limit(settings.llm_rate_limit)
def star_stories(
    request: Request,
    data: InterviewRequest,
    user: User = Depends(require_auth),
    storage: Storage = Depends(get_storage),
    llm: BaseChatModel | None = Depends(get_llm),
):
    return {"stories": prepare_interview(storage, "stories", data, user.id, llm=llm)}
