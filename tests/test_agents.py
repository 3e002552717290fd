"""Analysis functions against a scripted chat model."""

import pytest
from conftest import (
    CONTACT,
    JOB_ANALYSIS,
    JOB_DESCRIPTION,
    RESUME_ANALYSIS,
    RESUME_TEXT,
    TAILORED,
    BrokenChatModel,
    fake_llm,
)

from resume_tailor.agents import (
    AnalysisError,
    analyze_job_posting,
    analyze_resume_match,
    explain_skills,
    extract_contact_information,
    generate_follow_up_email,
    generate_interview_questions,
    generate_star_stories,
    tailor_resume_content,
)
from resume_tailor.agents.results import ContactInformation, InterviewContext


def test_extract_contact_information():
    contact = extract_contact_information(RESUME_TEXT, llm=fake_llm(CONTACT))

    assert contact.name == "Jane Doe"
    assert contact.email == "jane.doe@example.com"


def test_contact_missing_fields_are_empty_strings():
    contact = extract_contact_information(RESUME_TEXT, llm=fake_llm({"name": "Jane Doe", "phone": None}))

    assert contact.phone == ""
    assert contact.linkedin == ""


def test_analyze_job_posting_reads_camel_case_and_counts_text():
    analysis = analyze_job_posting(JOB_DESCRIPTION, llm=fake_llm(JOB_ANALYSIS))

    assert analysis.title == "Senior Database Engineer"
    assert analysis.role_archetype == "Database Engineer"
    assert analysis.keyword_buckets.core_tech == ["PostgreSQL", "SQL Server"]
    assert analysis.keyword_buckets.compliance == []
    assert analysis.char_count == len(JOB_DESCRIPTION)
    assert analysis.word_count == len(JOB_DESCRIPTION.split())
    assert analysis.quality_gates.sufficient_length is False


def test_analyze_job_posting_missing_arrays_become_empty_lists():
    analysis = analyze_job_posting("Short posting", llm=fake_llm({"title": "DBA", "keywords": "SQL"}))

    assert analysis.keywords == []
    assert analysis.requirements == []
    assert analysis.certifications == []


def test_analyze_job_posting_accepts_fenced_reply():
    reply = "```json\n" + '{"title": "DBA", "company": "Initech"}' + "\n```"

    analysis = analyze_job_posting("Short posting", llm=fake_llm(reply))

    assert analysis.company == "Initech"


def test_analyze_resume_match_clamps_score():
    analysis = analyze_resume_match(RESUME_TEXT, JOB_ANALYSIS, llm=fake_llm({**RESUME_ANALYSIS, "matchScore": 130}))

    assert analysis.match_score == 100
    assert analysis.missing_keywords == ["Kubernetes", "Terraform"]


def test_tailor_resume_content_normalizes_reply():
    contact = ContactInformation(**CONTACT)

    tailored = tailor_resume_content(RESUME_TEXT, JOB_ANALYSIS, RESUME_ANALYSIS, contact, llm=fake_llm(TAILORED))

    assert tailored.ats_score == 88
    assert tailored.core_score == 88
    assert tailored.applied_micro_edits == ["Reworded summary"]
    assert tailored.coverage_report.truthfulness_level == {"PostgreSQL": "hands-on", "Kubernetes": "omitted"}
    assert tailored.experience[0].company == "Acme Health"


def test_tailor_resume_content_falls_back_to_extracted_contact():
    contact = ContactInformation(**CONTACT)
    reply = {"contact": {"name": "J. Doe", "email": ""}, "coverageReport": {"truthfulnessLevel": {"AWS": "expert"}}}

    tailored = tailor_resume_content(RESUME_TEXT, JOB_ANALYSIS, RESUME_ANALYSIS, contact, llm=fake_llm(reply))

    assert tailored.contact.name == "J. Doe"
    assert tailored.contact.email == "jane.doe@example.com"
    assert tailored.coverage_report.truthfulness_level == {"AWS": "familiar"}
    assert tailored.core_score == 85
    assert tailored.skills == []


def test_follow_up_email_default_subject():
    email = generate_follow_up_email("1w", "DBA", "Globex", llm=fake_llm({"body": "Hello"}))

    assert email.subject == "Following up on DBA position"
    assert email.body == "Hello"


def test_follow_up_email_unknown_type():
    with pytest.raises(AnalysisError, match="Failed to generate follow-up email: Unknown follow-up type"):
        generate_follow_up_email("3w", "DBA", "Globex", llm=fake_llm({}))


def test_interview_questions_defaults_and_limit():
    questions = [{"question": f"Question {i}?", "type": "trivia", "difficulty": "principal"} for i in range(15)]
    questions.insert(0, {"type": "technical"})

    result = generate_interview_questions(InterviewContext(), llm=fake_llm({"questions": questions}))

    assert len(result) == 12
    assert result[0].id == "q2"
    assert result[0].type == "technical"
    assert result[0].difficulty == "mid"
    assert result[0].star is None


def test_explain_skills_unknown_level_label():
    reply = {"skills": [{"skill": "PostgreSQL", "levels": [{"label": "5min", "text": "..."}, "bad"]}]}

    result = explain_skills(["PostgreSQL"], InterviewContext(mode="skill", skills=["PostgreSQL"]), llm=fake_llm(reply))

    assert [level.label for level in result[0].levels] == ["2min"]


def test_star_stories_read_camel_case_key():
    reply = {"starStories": [{"title": "Cut report time", "conciseVersion": "Short"}]}

    stories = generate_star_stories(RESUME_TEXT, InterviewContext(), llm=fake_llm(reply))

    assert stories[0].id == "story1"
    assert stories[0].concise_version == "Short"


@pytest.mark.parametrize(
    "call, operation",
    [
        (lambda llm: extract_contact_information(RESUME_TEXT, llm=llm), "extract contact information"),
        (lambda llm: analyze_job_posting(JOB_DESCRIPTION, llm=llm), "analyze job posting"),
        (lambda llm: analyze_resume_match(RESUME_TEXT, JOB_ANALYSIS, llm=llm), "analyze resume match"),
        (lambda llm: generate_interview_questions(InterviewContext(), llm=llm), "generate interview questions"),
    ],
)
def test_model_failures_are_wrapped(call, operation):
    with pytest.raises(AnalysisError, match=f"^Failed to {operation}: model unavailable"):
        call(BrokenChatModel())


def test_reply_without_json_object_fails():
    with pytest.raises(AnalysisError, match="Failed to analyze job posting: Model response did not contain a JSON object"):
        analyze_job_posting(JOB_DESCRIPTION, llm=fake_llm("I cannot help with that."))


def test_missing_api_key_is_an_analysis_error():
    with pytest.raises(AnalysisError, match="DEEPSEEK_API_KEY not set"):
        analyze_job_posting(JOB_DESCRIPTION)


def test_non_finite_match_score_falls_back_to_zero():
    analysis = analyze_resume_match(RESUME_TEXT, JOB_ANALYSIS, llm=fake_llm('{"matchScore": NaN, "gaps": ["AWS"]}'))

    assert analysis.match_score == 0
    assert analysis.gaps == ["AWS"]
