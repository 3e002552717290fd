"""
Match Scorer.

Scores how well a resume fits an analyzed job posting.
"""

from langchain_core.language_models import BaseChatModel

from resume_tailor.agents.llm import analysis_step, invoke_json, to_json
from resume_tailor.agents.results import JobAnalysis, ResumeAnalysis
from resume_tailor.utils.parser import as_int, as_str_list, pick

MATCH_SYSTEM_PROMPT = "You are an expert technical recruiter analyzing resume compatibility with job requirements."

MATCH_PROMPT = """Analyze this resume against the job requirements.

## Resume
{resume_text}

## Job Requirements
{job_analysis}

## Output Format (JSON object only)
- strengths: resume strengths that match the job
- gaps: skills or experience the resume is missing
- match_score: percentage match, integer 0-100
- suggestions: specific changes that would improve the resume for this role
- matched_keywords: job keywords present in the resume
- missing_keywords: important job keywords missing from the resume
"""


def normalize_resume_analysis(data: dict) -> ResumeAnalysis:
    return ResumeAnalysis(
        strengths=as_str_list(data.get("strengths")),
        gaps=as_str_list(data.get("gaps")),
        suggestions=as_str_list(data.get("suggestions")),
        matched_keywords=as_str_list(pick(data, "matched_keywords", "matchedKeywords")),
        missing_keywords=as_str_list(pick(data, "missing_keywords", "missingKeywords")),
        match_score=as_int(pick(data, "match_score", "matchScore"), default=0, low=0, high=100),
    )


def analyze_resume_match(
    resume_text: str, job_analysis: JobAnalysis | dict, llm: BaseChatModel | None = None
) -> ResumeAnalysis:
    with analysis_step("analyze resume match"):
        prompt = MATCH_PROMPT.format(resume_text=resume_text, job_analysis=to_json(job_analysis))
        data = invoke_json(MATCH_SYSTEM_PROMPT, prompt, llm)
        return normalize_resume_analysis(data)
