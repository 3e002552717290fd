"""Tailoring session workflow."""

import pytest
from conftest import CONTACT, JOB_ANALYSIS, JOB_DESCRIPTION, RESUME_ANALYSIS, RESUME_TEXT, TAILORED, BrokenChatModel, fake_llm

from resume_tailor.agents import AnalysisError
from resume_tailor.services import tailoring
from resume_tailor.services.common import NotFoundError, TailoringError
from resume_tailor.storage.records import JobPostingCreate, StoredResumeCreate
from resume_tailor.tools import job_scraper
from resume_tailor.tools.file_parser import FileProcessingError, ProcessedResume
from resume_tailor.tools.job_scraper import ScrapedJob

PROCESSED = ProcessedResume(text=RESUME_TEXT, filename="jane.pdf", file_type="pdf", file_size=2048)


def _tailoring_llm():
    return fake_llm(CONTACT, RESUME_ANALYSIS, TAILORED)


@pytest.fixture
def session(storage):
    session = tailoring.create_tailoring_session(storage, "u1")
    tailoring.upload_resume_to_session(storage, session.id, PROCESSED, "u1")
    return session


@pytest.fixture
def analyzed(storage, session):
    tailoring.analyze_job_for_session(
        storage, session.id, job_description=JOB_DESCRIPTION, user_id="u1", llm=fake_llm(JOB_ANALYSIS)
    )
    return session


def test_new_session_is_draft(storage):
    session = tailoring.create_tailoring_session(storage, "u1")

    assert session.status == "draft"
    assert session.user_id == "u1"


def test_upload_resume_stores_text(storage, session):
    stored = storage.get_resume_session(session.id)

    assert stored.base_resume_file == "jane.pdf"
    assert stored.base_resume_content == {"text": RESUME_TEXT, "file_type": "pdf", "file_size": 2048}


def test_sessions_of_other_users_are_not_found(storage, session):
    with pytest.raises(NotFoundError, match="Session not found"):
        tailoring.upload_resume_to_session(storage, session.id, PROCESSED, "u2")


def test_upload_profile_requires_sections(storage, session):
    with pytest.raises(FileProcessingError, match="Missing required field: experience"):
        tailoring.upload_profile_to_session(storage, session.id, {"personalInfo": {"name": "Jane"}, "skills": ["SQL"]}, "u1")


def test_use_stored_resume_copies_text_and_contact(storage, session):
    resume = storage.create_stored_resume(
        StoredResumeCreate(
            user_id="u1", name="Base", original_filename="base.docx", content="Base resume", contact_info=CONTACT
        )
    )

    updated = tailoring.use_stored_resume(storage, session.id, resume.id, "u1")

    assert updated.base_resume_file == "base.docx"
    assert updated.base_resume_content["text"] == "Base resume"
    assert updated.base_resume_content["file_type"] == "docx"
    assert updated.base_resume_content["contact_info"] == CONTACT


def test_analyze_description(storage, analyzed):
    session = storage.get_resume_session(analyzed.id)

    assert session.status == "analyzing"
    assert session.job_description == JOB_DESCRIPTION
    assert session.job_analysis["title"] == "Senior Database Engineer"
    # Local vocabulary hits first, then model keywords not already present
    assert session.job_analysis["keywords"][:3] == ["SQL", "SQL Server", "PostgreSQL"]
    assert session.job_analysis["keywords"].count("PostgreSQL") == 1
    assert "Terraform" in session.job_analysis["keywords"]


def test_analyze_requires_url_or_description(storage, session):
    with pytest.raises(TailoringError, match="Either job URL or job description is required"):
        tailoring.analyze_job_for_session(storage, session.id, user_id="u1")


def test_analyze_failure_marks_session_error(storage, session):
    with pytest.raises(AnalysisError, match="Failed to analyze job posting"):
        tailoring.analyze_job_for_session(
            storage, session.id, job_description=JOB_DESCRIPTION, user_id="u1", llm=BrokenChatModel()
        )

    assert storage.get_resume_session(session.id).status == "error"


def test_analyze_url_scrapes_and_stores_posting(storage, session, monkeypatch):
    url = "https://jobs.test/dba"
    monkeypatch.setattr(
        tailoring, "scrape_job_posting", lambda u: ScrapedJob(url=u, title="DBA | Globex", description=JOB_DESCRIPTION)
    )

    updated = tailoring.analyze_job_for_session(storage, session.id, job_url=url, user_id="u1", llm=fake_llm(JOB_ANALYSIS))

    posting = storage.get_job_posting(url)
    assert posting.scraped is True
    assert posting.title == "Senior Database Engineer"
    assert updated.job_url == url
    assert updated.job_description == JOB_DESCRIPTION


def test_analyze_url_reuses_scraped_posting(storage, session, monkeypatch):
    url = "https://jobs.test/dba"
    storage.create_job_posting(
        JobPostingCreate(
            url=url, title="DBA", company="Globex", description=JOB_DESCRIPTION, keywords=["PostgreSQL"], scraped=True
        )
    )

    def no_scrape(u):
        raise AssertionError("should not scrape")

    monkeypatch.setattr(tailoring, "scrape_job_posting", no_scrape)

    updated = tailoring.analyze_job_for_session(storage, session.id, job_url=url, user_id="u1", llm=BrokenChatModel())

    assert updated.job_analysis["company"] == "Globex"
    assert updated.job_analysis["keywords"] == ["PostgreSQL"]
    assert updated.job_analysis["char_count"] == len(JOB_DESCRIPTION)


def test_analyze_url_scrape_failure_marks_error(storage, session, monkeypatch):
    def broken(u):
        raise job_scraper.ScrapeError("Failed to scrape job posting: HTTP error 403")

    monkeypatch.setattr(tailoring, "scrape_job_posting", broken)

    with pytest.raises(job_scraper.ScrapeError):
        tailoring.analyze_job_for_session(storage, session.id, job_url="https://jobs.test/x", user_id="u1")

    assert storage.get_resume_session(session.id).status == "error"


def test_tailor_requires_job_analysis(storage, session):
    with pytest.raises(TailoringError, match="Missing resume content or job analysis"):
        tailoring.tailor_resume_for_session(storage, session.id, "u1", llm=_tailoring_llm())


def test_tailor_stores_results(storage, analyzed):
    result = tailoring.tailor_resume_for_session(storage, analyzed.id, "u1", llm=_tailoring_llm())

    assert result.match_score == 78
    assert result.tailored_content.ats_score == 88
    session = storage.get_resume_session(analyzed.id)
    assert session.status == "tailored"
    assert session.match_score == 78
    assert session.tailored_content["contact"]["name"] == "Jane Doe"
    assert session.job_analysis["missing_keywords"] == ["Kubernetes", "Terraform"]


def test_tailor_from_profile(storage):
    session = tailoring.create_tailoring_session(storage, "u1")
    profile = {"personalInfo": {"name": "Jane Doe"}, "experience": [{"title": "DBA"}], "skills": ["SQL"]}
    tailoring.upload_profile_to_session(storage, session.id, profile, "u1")
    storage.update_resume_session(session.id, {"job_analysis": JOB_ANALYSIS})

    result = tailoring.tailor_resume_for_session(storage, session.id, "u1", llm=_tailoring_llm())

    assert result.tailored_content.contact.name == "Jane Doe"


def test_tailor_failure_marks_error(storage, analyzed):
    with pytest.raises(AnalysisError, match="Failed to extract contact information"):
        tailoring.tailor_resume_for_session(storage, analyzed.id, "u1", llm=BrokenChatModel())

    assert storage.get_resume_session(analyzed.id).status == "error"


def test_save_tailored_resume(storage, analyzed):
    tailoring.tailor_resume_for_session(storage, analyzed.id, "u1", llm=_tailoring_llm())

    saved = tailoring.save_tailored_resume(storage, analyzed.id, "u1")

    assert saved.filename == "Jane_Resume_GlobexCorp"
    assert saved.company == "Globex Corp."
    assert saved.job_title == "Senior Database Engineer"
    assert saved.ats_score == 88
    assert saved.tags == ["Database Engineer", "GlobexCorp", "Generated"]
    assert saved.micro_edits == ["Reworded summary"]
    assert saved.ai_improvements == ["Led with PostgreSQL experience"]
    assert saved.original_job_description == JOB_DESCRIPTION
    assert saved.user_id == "u1"


def test_save_requires_tailored_content(storage, analyzed):
    with pytest.raises(TailoringError):
        tailoring.save_tailored_resume(storage, analyzed.id, "u1")


def test_render_session_document_completes_session(storage, analyzed):
    tailoring.tailor_resume_for_session(storage, analyzed.id, "u1", llm=_tailoring_llm())

    data, filename = tailoring.render_session_document(storage, analyzed.id, "docx", "u1")

    assert data.startswith(b"PK")
    assert filename == "Jane_Resume_GlobexCorp.docx"
    assert storage.get_resume_session(analyzed.id).status == "completed"


def test_store_resume_extracts_contact(storage):
    resume = tailoring.store_resume(storage, PROCESSED, "Main resume", "u1", set_default=True, llm=fake_llm(CONTACT))

    assert resume.contact_info["email"] == "jane.doe@example.com"
    assert resume.is_default is True
    assert resume.original_filename == "jane.pdf"
