"""Skills insights and homepage stats endpoints."""

from fastapi import APIRouter, Depends

from resume_tailor.api.deps import require_auth
from resume_tailor.services.insights import SkillsInsights, get_skills_insights
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import OverallStats, User

router = APIRouter()


@router.get("/insights/skills", response_model=SkillsInsights)
def skills_insights(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    """Most requested skills, coverage gaps and a learning roadmap."""
    return get_skills_insights(storage, user.id)


@router.get("/session-stats", response_model=OverallStats)
def session_stats(user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    return storage.get_overall_stats(user.id)
