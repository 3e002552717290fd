"""
Resume tailoring workflow.

A session moves draft -> analyzing -> tailoring -> tailored -> completed, or
to error when a model or scrape step fails.
"""

import json
import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from pydantic import BaseModel

from resume_tailor.agents import analyze_job_posting, analyze_resume_match, extract_contact_information, tailor_resume_content
from resume_tailor.agents.results import JobAnalysis, ResumeAnalysis, TailoredContent
from resume_tailor.services.common import NotFoundError, TailoringError, require
from resume_tailor.storage import Storage
from resume_tailor.storage.records import (
    JobPosting,
    JobPostingCreate,
    ResumeSession,
    ResumeSessionCreate,
    StoredResume,
    StoredResumeCreate,
    TailoredResume,
    TailoredResumeCreate,
)
from resume_tailor.tools.documents import clean_company, render_document, resume_basename
from resume_tailor.tools.file_parser import ProcessedResume, validate_profile_json
from resume_tailor.tools.job_scraper import extract_job_keywords, merge_keywords, scrape_job_posting

logger = logging.getLogger(__name__)

DEFAULT_ATS_SCORE = 85


class TailoringResult(BaseModel):
    session_id: str
    job_analysis: dict[str, Any]
    resume_analysis: ResumeAnalysis
    tailored_content: TailoredContent
    match_score: int


def _session(storage: Storage, session_id: str, user_id: str | None = None) -> ResumeSession:
    return require(storage.get_resume_session(session_id), "Session not found", user_id)


def create_tailoring_session(storage: Storage, user_id: str | None = None) -> ResumeSession:
    session = storage.create_resume_session(ResumeSessionCreate(user_id=user_id, status="draft"))
    logger.info("[%s] Created tailoring session", session.id)
    return session


def upload_resume_to_session(
    storage: Storage, session_id: str, processed: ProcessedResume, user_id: str | None = None
) -> ResumeSession:
    _session(storage, session_id, user_id)
    session = storage.update_resume_session(
        session_id,
        {
            "base_resume_file": processed.filename,
            "base_resume_content": {
                "text": processed.text,
                "file_type": processed.file_type,
                "file_size": processed.file_size,
            },
        },
    )
    logger.info("[%s] Stored resume %s (%d chars)", session_id, processed.filename, len(processed.text))
    return session


def upload_profile_to_session(
    storage: Storage, session_id: str, profile: str | dict, user_id: str | None = None
) -> ResumeSession:
    _session(storage, session_id, user_id)
    return storage.update_resume_session(session_id, {"profile_json": validate_profile_json(profile)})


def store_resume(
    storage: Storage,
    processed: ProcessedResume,
    name: str,
    user_id: str | None = None,
    set_default: bool = False,
    llm: BaseChatModel | None = None,
) -> StoredResume:
    """Keep an uploaded resume in the library, with its contact info extracted."""
    if not name.strip():
        raise TailoringError("Resume name is required")
    contact = extract_contact_information(processed.text, llm=llm)
    resume = storage.create_stored_resume(
        StoredResumeCreate(
            user_id=user_id,
            name=name.strip(),
            original_filename=processed.filename,
            content=processed.text,
            contact_info=contact.model_dump(),
            is_default=set_default,
        )
    )
    logger.info("Stored resume %s as %s", resume.id, resume.name)
    return resume


def use_stored_resume(storage: Storage, session_id: str, resume_id: str, user_id: str | None = None) -> ResumeSession:
    """Copy a stored resume's text and contact info into a session."""
    resume = require(storage.get_stored_resume(resume_id), "Resume not found", user_id)
    _session(storage, session_id, user_id)
    file_type = resume.original_filename.rsplit(".", 1)[-1].lower() if "." in resume.original_filename else ""
    return storage.update_resume_session(
        session_id,
        {
            "base_resume_file": resume.original_filename,
            "base_resume_content": {
                "text": resume.content,
                "file_type": file_type,
                "file_size": len(resume.content.encode()),
                "contact_info": resume.contact_info,
            },
        },
    )


def _posting_analysis(posting: JobPosting) -> dict[str, Any]:
    """Analysis for a previously scraped posting, rebuilt from its stored fields."""
    description = posting.description or ""
    analysis = JobAnalysis(
        title=posting.title or "",
        company=posting.company or "",
        requirements=posting.requirements or [],
        keywords=posting.keywords or [],
        char_count=len(description),
        word_count=len(description.split()),
        first_chars=description[:500],
    )
    analysis.quality_gates.sufficient_length = len(description) >= 3000
    return {**analysis.model_dump(), "description": description}


def _analyze_text(description: str, llm: BaseChatModel | None) -> tuple[JobAnalysis, list[str]]:
    analysis = analyze_job_posting(description, llm=llm)
    return analysis, merge_keywords(extract_job_keywords(description), analysis.keywords)


def _analyze_url(storage: Storage, job_url: str, llm: BaseChatModel | None) -> dict[str, Any]:
    posting = storage.get_job_posting(job_url)
    if posting is not None and posting.scraped:
        logger.info("Reusing scraped posting %s", posting.id)
        return _posting_analysis(posting)

    scraped = scrape_job_posting(job_url)
    analysis, keywords = _analyze_text(scraped.description, llm)
    fields = {
        "title": analysis.title or scraped.title,
        "company": analysis.company,
        "description": scraped.description,
        "requirements": analysis.requirements,
        "keywords": keywords,
        "scraped": True,
    }
    if posting is not None:
        storage.update_job_posting(posting.id, fields)
    else:
        storage.create_job_posting(JobPostingCreate(url=job_url, **fields))

    return {**analysis.model_dump(), "title": fields["title"], "keywords": keywords, "description": scraped.description}


def analyze_job_for_session(
    storage: Storage,
    session_id: str,
    job_url: str | None = None,
    job_description: str | None = None,
    user_id: str | None = None,
    llm: BaseChatModel | None = None,
) -> ResumeSession:
    """Analyze a posting by URL or pasted description and attach it to the session."""
    _session(storage, session_id, user_id)
    if not job_url and not job_description:
        raise TailoringError("Either job URL or job description is required")

    storage.update_resume_session(session_id, {"status": "analyzing"})
    logger.info("[%s] Analyzing job %s", session_id, job_url or "description")

    try:
        if job_url:
            job_analysis = _analyze_url(storage, job_url, llm)
        else:
            analysis, keywords = _analyze_text(job_description, llm)
            job_analysis = {**analysis.model_dump(), "keywords": keywords, "description": job_description}
    except Exception as e:
        logger.error("[%s] Job analysis failed: %s", session_id, e)
        storage.update_resume_session(session_id, {"status": "error"})
        raise

    return storage.update_resume_session(
        session_id,
        {
            "job_url": job_url or None,
            "job_description": job_description or job_analysis.get("description"),
            "job_analysis": job_analysis,
        },
    )


def session_resume_text(session: ResumeSession) -> str:
    """Resume text of a session: uploaded file text, else the structured profile."""
    content = session.base_resume_content or {}
    if content.get("text"):
        return content["text"]
    if session.profile_json:
        return json.dumps(session.profile_json, indent=2)
    return ""


def tailor_resume_for_session(
    storage: Storage, session_id: str, user_id: str | None = None, llm: BaseChatModel | None = None
) -> TailoringResult:
    """Extract contact, score the match and rewrite the resume for the session's job."""
    session = _session(storage, session_id, user_id)
    resume_text = session_resume_text(session)
    if not resume_text or not session.job_analysis:
        raise TailoringError("Missing resume content or job analysis")

    storage.update_resume_session(session_id, {"status": "tailoring"})
    logger.info("[%s] Tailoring resume", session_id)

    try:
        contact = extract_contact_information(resume_text, llm=llm)
        resume_analysis = analyze_resume_match(resume_text, session.job_analysis, llm=llm)
        tailored = tailor_resume_content(resume_text, session.job_analysis, resume_analysis, contact, llm=llm)
    except Exception as e:
        logger.error("[%s] Tailoring failed: %s", session_id, e)
        storage.update_resume_session(session_id, {"status": "error"})
        raise

    job_analysis = {
        **session.job_analysis,
        "matched_keywords": resume_analysis.matched_keywords,
        "missing_keywords": resume_analysis.missing_keywords,
    }
    storage.update_resume_session(
        session_id,
        {
            "tailored_content": tailored.model_dump(),
            "match_score": resume_analysis.match_score,
            "job_analysis": job_analysis,
            "status": "tailored",
        },
    )
    logger.info("[%s] Tailored (match %d, ATS %d)", session_id, resume_analysis.match_score, tailored.ats_score)

    return TailoringResult(
        session_id=session_id,
        job_analysis=job_analysis,
        resume_analysis=resume_analysis,
        tailored_content=tailored,
        match_score=resume_analysis.match_score,
    )


def save_tailored_resume(storage: Storage, session_id: str, user_id: str | None = None) -> TailoredResume:
    """Keep a permanent copy of a session's tailored resume."""
    session = _session(storage, session_id, user_id)
    if not session.tailored_content or not session.job_analysis:
        raise TailoringError("Tailored content not available for this session")

    job_analysis = session.job_analysis
    tailored = TailoredContent.model_validate(session.tailored_content)
    company = job_analysis.get("company") or ""

    saved = storage.save_tailored_resume(
        TailoredResumeCreate(
            user_id=user_id if user_id is not None else session.user_id,
            session_id=session_id,
            job_title=job_analysis.get("title") or "Unknown Position",
            company=company or "Unknown Company",
            job_url=session.job_url,
            original_job_description=session.job_description or job_analysis.get("description"),
            tailored_content=session.tailored_content,
            ats_score=tailored.ats_score or tailored.core_score or DEFAULT_ATS_SCORE,
            filename=resume_basename(tailored.contact.name, company),
            tags=[tag for tag in (job_analysis.get("role_archetype"), clean_company(company), "Generated") if tag],
            micro_edits=tailored.applied_micro_edits,
            ai_improvements=tailored.improvements,
        )
    )
    logger.info("[%s] Saved tailored resume %s as %s", session_id, saved.id, saved.filename)
    return saved


def render_session_document(
    storage: Storage, session_id: str, fmt: str, user_id: str | None = None
) -> tuple[bytes, str]:
    """Render a session's tailored resume and mark the session completed."""
    session = _session(storage, session_id, user_id)
    if not session.tailored_content:
        raise TailoringError("No tailored content available")

    content = TailoredContent.model_validate(session.tailored_content)
    data = render_document(content, fmt)
    storage.update_resume_session(session_id, {"status": "completed"})

    company = (session.job_analysis or {}).get("company") or ""
    return data, f"{resume_basename(content.contact.name, company)}.{fmt}"


def render_tailored_document(
    storage: Storage, tailored_id: str, fmt: str, user_id: str | None = None
) -> tuple[bytes, str]:
    resume = require(storage.get_tailored_resume(tailored_id), "Tailored resume not found", user_id)
    content = TailoredContent.model_validate(resume.tailored_content)
    return render_document(content, fmt), f"{resume_basename(content.contact.name, resume.company)}.{fmt}"


__all__ = [
    "NotFoundError",
    "TailoringError",
    "TailoringResult",
    "create_tailoring_session",
    "upload_resume_to_session",
    "upload_profile_to_session",
    "store_resume",
    "use_stored_resume",
    "analyze_job_for_session",
    "tailor_resume_for_session",
    "save_tailored_resume",
    "render_session_document",
    "render_tailored_document",
]
