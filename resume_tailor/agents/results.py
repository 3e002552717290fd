"""Normalized analysis results."""

from typing import Literal

from pydantic import BaseModel, Field

KEYWORD_BUCKETS = ("core_tech", "responsibilities", "tools", "adjacent_data_stores", "compliance", "logistics")


class ContactInformation(BaseModel):
    name: str = ""
    title: str = ""
    phone: str = ""
    email: str = ""
    city: str = ""
    state: str = ""
    linkedin: str = ""


class KeywordBuckets(BaseModel):
    core_tech: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    adjacent_data_stores: list[str] = Field(default_factory=list)
    compliance: list[str] = Field(default_factory=list)
    logistics: list[str] = Field(default_factory=list)


class QualityGates(BaseModel):
    sufficient_length: bool = False
    role_specific: bool = True
    not_generic: bool = True


class JobAnalysis(BaseModel):
    title: str = ""
    company: str = ""
    requirements: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    experience: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    role_archetype: str = ""
    keyword_buckets: KeywordBuckets = Field(default_factory=KeywordBuckets)
    synonym_map: dict[str, list[str]] = Field(default_factory=dict)
    quality_gates: QualityGates = Field(default_factory=QualityGates)
    # Computed locally from the posting text
    char_count: int = 0
    word_count: int = 0
    first_chars: str = ""


class ResumeAnalysis(BaseModel):
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    match_score: int = 0


class ExperienceEntry(BaseModel):
    title: str = ""
    company: str = ""
    duration: str = ""
    achievements: list[str] = Field(default_factory=list)


class ScoreCategory(BaseModel):
    earned: int = 0
    possible: int = 0
    evidence: list[str] = Field(default_factory=list)


TruthfulnessLevel = Literal["hands-on", "familiar", "omitted"]


class CoverageReport(BaseModel):
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    truthfulness_level: dict[str, TruthfulnessLevel] = Field(default_factory=dict)


class TailoredContent(BaseModel):
    contact: ContactInformation = Field(default_factory=ContactInformation)
    summary: str = ""
    experience: list[ExperienceEntry] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    professional_development: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    applied_micro_edits: list[str] = Field(default_factory=list)
    suggested_micro_edits: list[str] = Field(default_factory=list)
    ats_score: int = 0
    core_score: int = 85
    score_breakdown: dict[str, ScoreCategory] = Field(default_factory=dict)
    coverage_report: CoverageReport = Field(default_factory=CoverageReport)


class FollowUpEmail(BaseModel):
    subject: str
    body: str = ""


# Interview preparation


class InterviewContext(BaseModel):
    """What an interview prep request is about."""

    mode: Literal["job", "skill", "general"] = "general"
    job_title: str = ""
    company: str = ""
    job_description: str = ""
    skills: list[str] = Field(default_factory=list)


class StarOutline(BaseModel):
    situation: str = ""
    task: str = ""
    action: str = ""
    result: str = ""


class InterviewQuestion(BaseModel):
    id: str
    question: str
    type: Literal["technical", "behavioral"] = "technical"
    topic: str = ""
    difficulty: Literal["junior", "mid", "senior"] = "mid"
    suggested_answer: str = ""
    star: StarOutline | None = None


class SkillLevel(BaseModel):
    label: Literal["30s", "2min", "deepDive"]
    text: str = ""


class SkillExplanation(BaseModel):
    skill: str
    levels: list[SkillLevel] = Field(default_factory=list)
    pitfalls: list[str] = Field(default_factory=list)
    examples_from_resume: list[str] = Field(default_factory=list)


class StarStory(BaseModel):
    id: str
    title: str = ""
    skill: str = ""
    situation: str = ""
    task: str = ""
    action: str = ""
    result: str = ""
    concise_version: str = ""
    extended_version: str = ""
