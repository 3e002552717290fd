"""
Interview preparation.

Resolves what to prepare for (a saved tailored resume, one skill, or the
user's most requested skills) and runs the matching coach function.
Results can be kept on a resume session's ``interview_prep`` field.
"""

import logging
from typing import Literal

from langchain_core.language_models import BaseChatModel
from pydantic import BaseModel, Field

from resume_tailor.agents import explain_skills, generate_interview_questions, generate_star_stories
from resume_tailor.agents.results import InterviewContext, TailoredContent
from resume_tailor.services.common import TailoringError, require
from resume_tailor.services.insights import get_skills_insights
from resume_tailor.storage import Storage
from resume_tailor.storage.records import TailoredResume

logger = logging.getLogger(__name__)

PrepKind = Literal["questions", "skills", "stories"]


class InterviewRequest(BaseModel):
    mode: Literal["job", "skill", "general"] = "general"
    job_id: str | None = None  # tailored resume id
    skill: str | None = None
    skills: list[str] = Field(default_factory=list)
    session_id: str | None = None


def tailored_resume_text(content: TailoredContent) -> str:
    """Plain-text rendering of tailored content for prompts."""
    lines = [content.contact.name, content.contact.title, "", content.summary, ""]
    for entry in content.experience:
        lines.append(" | ".join(part for part in (entry.title, entry.company, entry.duration) if part))
        lines.extend(f"- {achievement}" for achievement in entry.achievements)
        lines.append("")
    if content.skills:
        lines.append("Skills: " + ", ".join(content.skills))
    if content.certifications:
        lines.append("Certifications: " + ", ".join(content.certifications))
    return "\n".join(lines).strip()


def _job_resume(storage: Storage, request: InterviewRequest, user_id: str | None) -> TailoredResume | None:
    if request.mode != "job" or not request.job_id:
        return None
    return require(storage.get_tailored_resume(request.job_id), "Tailored resume not found", user_id)


def resolve_context(storage: Storage, request: InterviewRequest, user_id: str | None = None) -> InterviewContext:
    """Build the interview context for a request."""
    resume = _job_resume(storage, request, user_id)
    if resume is not None:
        content = TailoredContent.model_validate(resume.tailored_content)
        return InterviewContext(
            mode="job",
            job_title=resume.job_title,
            company=resume.company,
            job_description=resume.original_job_description or "",
            skills=content.skills,
        )

    if request.mode == "skill" and (request.skill or request.skills):
        return InterviewContext(mode="skill", skills=[request.skill] if request.skill else request.skills[:1])

    skills = request.skills or [s.skill for s in get_skills_insights(storage, user_id).top_requested_skills[:10]]
    return InterviewContext(mode="general", skills=skills)


def resume_text_for(storage: Storage, request: InterviewRequest, user_id: str | None = None) -> str:
    """Resume text for STAR stories: the job's tailored resume, else the newest saved or stored resume."""
    resume = _job_resume(storage, request, user_id)
    if resume is None:
        tailored = storage.get_tailored_resumes(user_id)
        resume = tailored[0] if tailored else None
    if resume is not None:
        text = tailored_resume_text(TailoredContent.model_validate(resume.tailored_content))
        if text:
            return text

    stored = storage.get_stored_resumes(user_id)
    default = next((r for r in stored if r.is_default), stored[0] if stored else None)
    if default is not None and default.content.strip():
        return default.content

    raise TailoringError(
        "No resume content found. Please tailor and save at least one resume, then try again."
    )


def _remember(storage: Storage, request: InterviewRequest, kind: PrepKind, items: list, user_id: str | None):
    if not request.session_id:
        return
    session = require(storage.get_resume_session(request.session_id), "Session not found", user_id)
    prep = dict(session.interview_prep or {})
    prep[kind] = [item.model_dump() for item in items]
    prep["mode"] = request.mode
    storage.update_resume_session(session.id, {"interview_prep": prep})


def prepare_interview(
    storage: Storage,
    kind: PrepKind,
    request: InterviewRequest,
    user_id: str | None = None,
    llm: BaseChatModel | None = None,
) -> list:
    """Generate questions, skill explanations or STAR stories for a request."""
    context = resolve_context(storage, request, user_id)
    logger.info("Preparing interview %s (%s mode)", kind, context.mode)

    if kind == "questions":
        items = generate_interview_questions(context, llm=llm)
    elif kind == "skills":
        skills = request.skills or ([request.skill] if request.skill else context.skills)
        items = explain_skills(skills, context, llm=llm)
    elif kind == "stories":
        items = generate_star_stories(resume_text_for(storage, request, user_id), context, llm=llm)
    else:
        raise ValueError(f"Unknown interview preparation: {kind}")

    _remember(storage, request, kind, items, user_id)
    return items
