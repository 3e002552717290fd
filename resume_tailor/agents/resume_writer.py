"""
Resume Writer.

Rewrites resume content for one analyzed job posting, keeping the
candidate's real experience and reporting an ATS score breakdown.
"""

from langchain_core.language_models import BaseChatModel

from resume_tailor.agents.contact_extractor import normalize_contact
from resume_tailor.agents.llm import analysis_step, invoke_json, to_json
from resume_tailor.agents.results import (
    ContactInformation,
    CoverageReport,
    ExperienceEntry,
    JobAnalysis,
    ResumeAnalysis,
    ScoreCategory,
    TailoredContent,
)
from resume_tailor.utils.parser import (
    as_dict,
    as_dict_list,
    as_int,
    as_str,
    as_str_list,
    choice,
    pick,
    to_snake,
)

DEFAULT_CORE_SCORE = 85
TRUTHFULNESS_LEVELS = ("hands-on", "familiar", "omitted")

TAILOR_SYSTEM_PROMPT = (
    "You are an expert resume writer. Create ATS-optimized, compelling resume content "
    "that stays truthful to the candidate's real experience."
)

TAILOR_PROMPT = """Tailor this resume for the job below. PRESERVE AND ENHANCE the existing experience bullets.

## Original Resume
{resume_text}

## Contact Information
{contact}

## Job Analysis
{job_analysis}

## Resume Analysis
{resume_analysis}

## Truthfulness Ladder
- Hands-on experience: include in experience bullets with metrics
- Familiar with: include in skills with varied phrasing ("Working knowledge of", "Exposure to")
- Not true: do not include

## Scoring Rubric (100 points, show evidence)
- core_tech (35), responsibilities (25), tools (15), adjacent_data_stores (10), compliance (10), logistics (5)

## Output Format (JSON object only)
- contact: the real contact information above; title set to the exact job title from the posting
- summary: professional summary matching the level and focus of the posting
- experience: array of objects with title, company, duration and achievements (array of bullets);
  keep every existing bullet from the original resume
- skills: skills using the exact terms from the posting where truthful
- keywords: operational keywords from the posting
- certifications: only certifications present in the original resume
- professional_development: only training present in the original resume
- education: education entries from the original resume
- improvements: every tailoring change applied
- ats_score: integer 0-100
- core_score: integer 0-100 for role-specific duties
- score_breakdown: object keyed by rubric category, each with earned, possible and evidence (array)
- coverage_report: object with matched_keywords, missing_keywords and truthfulness_level
  (keyword to "hands-on", "familiar" or "omitted")
- applied_micro_edits: job-specific bullet edits that were applied to the content
- suggested_micro_edits: further edits the candidate could make
"""


def _contact(value, fallback: ContactInformation) -> ContactInformation:
    generated = normalize_contact(as_dict(value))
    return ContactInformation(
        **{field: getattr(generated, field) or getattr(fallback, field) for field in ContactInformation.model_fields}
    )


def _experience(value) -> list[ExperienceEntry]:
    return [
        ExperienceEntry(
            title=as_str(entry.get("title")),
            company=as_str(entry.get("company")),
            duration=as_str(entry.get("duration")),
            achievements=as_str_list(entry.get("achievements")),
        )
        for entry in as_dict_list(value)
    ]


def _score_breakdown(value) -> dict[str, ScoreCategory]:
    breakdown = {}
    for category, score in as_dict(value).items():
        if not isinstance(score, dict):
            continue
        breakdown[to_snake(category)] = ScoreCategory(
            earned=as_int(score.get("earned"), default=0, low=0),
            possible=as_int(score.get("possible"), default=0, low=0),
            evidence=as_str_list(score.get("evidence")),
        )
    return breakdown


def _coverage(value) -> CoverageReport:
    report = as_dict(value)
    levels = as_dict(pick(report, "truthfulness_level", "truthfulnessLevel"))
    return CoverageReport(
        matched_keywords=as_str_list(pick(report, "matched_keywords", "matchedKeywords")),
        missing_keywords=as_str_list(pick(report, "missing_keywords", "missingKeywords")),
        truthfulness_level={k: choice(v, TRUTHFULNESS_LEVELS, "familiar") for k, v in levels.items()},
    )


def normalize_tailored_content(data: dict, contact: ContactInformation) -> TailoredContent:
    ats_score = as_int(pick(data, "ats_score", "atsScore"), default=0, low=0, high=100)
    core_score = as_int(pick(data, "core_score", "coreScore"), default=None, low=0, high=100)

    return TailoredContent(
        contact=_contact(data.get("contact"), contact),
        summary=as_str(data.get("summary")),
        experience=_experience(data.get("experience")),
        skills=as_str_list(data.get("skills")),
        keywords=as_str_list(data.get("keywords")),
        certifications=as_str_list(data.get("certifications")),
        professional_development=as_str_list(pick(data, "professional_development", "professionalDevelopment")),
        education=as_str_list(data.get("education")),
        improvements=as_str_list(data.get("improvements")),
        applied_micro_edits=as_str_list(pick(data, "applied_micro_edits", "appliedMicroEdits")),
        suggested_micro_edits=as_str_list(pick(data, "suggested_micro_edits", "suggestedMicroEdits")),
        ats_score=ats_score,
        core_score=core_score or ats_score or DEFAULT_CORE_SCORE,
        score_breakdown=_score_breakdown(pick(data, "score_breakdown", "scoreBreakdown")),
        coverage_report=_coverage(pick(data, "coverage_report", "coverageReport")),
    )


def tailor_resume_content(
    resume_text: str,
    job_analysis: JobAnalysis | dict,
    resume_analysis: ResumeAnalysis | dict,
    contact: ContactInformation,
    llm: BaseChatModel | None = None,
) -> TailoredContent:
    with analysis_step("tailor resume content"):
        prompt = TAILOR_PROMPT.format(
            resume_text=resume_text,
            contact=to_json(contact),
            job_analysis=to_json(job_analysis),
            resume_analysis=to_json(resume_analysis),
        )
        data = invoke_json(TAILOR_SYSTEM_PROMPT, prompt, llm)
        return normalize_tailored_content(data, contact)
