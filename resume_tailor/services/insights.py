"""
Skills gap insights and tailored resume analytics.

Both are computed from a user's saved tailored resumes and cached per user
for ``INSIGHTS_CACHE_TTL`` seconds.
"""

import logging
from typing import Literal
from urllib.parse import quote_plus

from cachetools import TTLCache
from pydantic import BaseModel, Field

from resume_tailor.agents.results import TailoredContent
from resume_tailor.config import settings
from resume_tailor.storage import Storage

logger = logging.getLogger(__name__)

TOP_SKILLS = 30
MAX_GAPS = 15
MAX_ROADMAP = 10
GAP_COVERAGE_THRESHOLD = 80
GAP_MIN_JOBS = 2

SkillCategory = Literal["core-tech", "tools", "responsibilities", "compliance", "adjacent"]

# Keyed by (report, user_id)
_insights_cache: TTLCache = TTLCache(maxsize=500, ttl=settings.insights_cache_ttl)


class SkillCoverage(BaseModel):
    skill: str
    jobs_mentioned: int
    resumes_covering: int
    coverage_percent: int
    category: SkillCategory


class LearningLink(BaseModel):
    title: str
    url: str
    type: Literal["course", "documentation", "certification", "tutorial"]


class LearningResource(BaseModel):
    skill: str
    resources: list[LearningLink]


class InsightStats(BaseModel):
    total_jobs_analyzed: int = 0
    total_resumes_generated: int = 0
    average_coverage: int = 0


class SkillsInsights(BaseModel):
    top_requested_skills: list[SkillCoverage] = Field(default_factory=list)
    missing_skills: list[SkillCoverage] = Field(default_factory=list)
    learning_roadmap: list[LearningResource] = Field(default_factory=list)
    stats: InsightStats = Field(default_factory=InsightStats)


class RespondedVersion(BaseModel):
    id: str
    job_title: str
    company: str
    ats_score: int | None = None
    response_date: str | None = None


class ConversionFunnel(BaseModel):
    saved: int = 0
    applied: int = 0
    interviews: int = 0
    offers: int = 0


class ResumeAnalytics(BaseModel):
    total_versions: int = 0
    applied_count: int = 0
    responses_received: int = 0
    response_rate: int = 0
    average_ats_score: int = 0
    avg_ats_score_with_responses: int = 0
    versions_with_responses: list[RespondedVersion] = Field(default_factory=list)
    conversion_funnel: ConversionFunnel = Field(default_factory=ConversionFunnel)


CATEGORY_TERMS: list[tuple[SkillCategory, tuple[str, ...]]] = [
    ("core-tech", ("sql", "postgres", "mysql", "oracle", "snowflake", "python", "java", "aws", "azure", "gcp", "cloud")),
    ("tools", ("powershell", "git", "terraform", "kubernetes", "docker", "ansible", "grafana", "jenkins", "ci/cd")),
    ("compliance", ("hipaa", "gdpr", "sox", "compliance", "audit", "security")),
    ("adjacent", ("mongodb", "cassandra", "redis", "dynamodb", "elasticsearch", "kafka")),
]

LEARNING_RESOURCES: dict[str, LearningResource] = {
    "kubernetes": LearningResource(
        skill="Kubernetes",
        resources=[
            LearningLink(title="Kubernetes Documentation", url="https://kubernetes.io/docs/home/", type="documentation"),
            LearningLink(
                title="Certified Kubernetes Administrator",
                url="https://training.linuxfoundation.org/certification/certified-kubernetes-administrator-cka/",
                type="certification",
            ),
        ],
    ),
    "terraform": LearningResource(
        skill="Terraform",
        resources=[
            LearningLink(
                title="Terraform Tutorials", url="https://developer.hashicorp.com/terraform/tutorials", type="tutorial"
            ),
        ],
    ),
    "aws": LearningResource(
        skill="Amazon Web Services",
        resources=[
            LearningLink(
                title="AWS Skill Builder", url="https://skillbuilder.aws/", type="course"
            ),
            LearningLink(
                title="AWS Certified Solutions Architect",
                url="https://aws.amazon.com/certification/certified-solutions-architect-associate/",
                type="certification",
            ),
        ],
    ),
    "azure": LearningResource(
        skill="Microsoft Azure",
        resources=[
            LearningLink(title="Microsoft Learn: Azure", url="https://learn.microsoft.com/en-us/training/azure/", type="course"),
        ],
    ),
    "postgres": LearningResource(
        skill="PostgreSQL",
        resources=[
            LearningLink(title="PostgreSQL Documentation", url="https://www.postgresql.org/docs/", type="documentation"),
        ],
    ),
    "python": LearningResource(
        skill="Python",
        resources=[
            LearningLink(title="The Python Tutorial", url="https://docs.python.org/3/tutorial/", type="tutorial"),
        ],
    ),
    "docker": LearningResource(
        skill="Docker",
        resources=[
            LearningLink(title="Docker Getting Started", url="https://docs.docker.com/get-started/", type="tutorial"),
        ],
    ),
    "powershell": LearningResource(
        skill="PowerShell",
        resources=[
            LearningLink(
                title="PowerShell Documentation", url="https://learn.microsoft.com/en-us/powershell/", type="documentation"
            ),
        ],
    ),
}


def clear_insights_cache() -> None:
    _insights_cache.clear()


def invalidate_insights(user_id: str | None) -> None:
    """Drop cached reports for one user after their resumes or applications change."""
    for report in ("skills", "analytics"):
        _insights_cache.pop((report, user_id), None)


def categorize_skill(skill: str) -> SkillCategory:
    lowered = skill.lower()
    for category, terms in CATEGORY_TERMS:
        if any(term in lowered for term in terms):
            return category
    return "responsibilities"


def learning_roadmap(gaps: list[SkillCoverage]) -> list[LearningResource]:
    roadmap = []
    for gap in gaps:
        lowered = gap.skill.lower()
        resource = next((res for key, res in LEARNING_RESOURCES.items() if key in lowered), None)
        if resource is None:
            resource = LearningResource(
                skill=gap.skill,
                resources=[
                    LearningLink(
                        title=f"Learn {gap.skill}",
                        url=f"https://www.google.com/search?q=learn+{quote_plus(gap.skill)}",
                        type="tutorial",
                    )
                ],
            )
        roadmap.append(resource)
    return roadmap[:MAX_ROADMAP]


def _compute_skills_insights(storage: Storage, user_id: str | None) -> SkillsInsights:
    resumes = storage.get_tailored_resumes(user_id)
    if not resumes:
        return SkillsInsights()

    jobs: dict[str, set[str]] = {}
    covering: dict[str, set[str]] = {}

    for resume in resumes:
        content = TailoredContent.model_validate(resume.tailored_content)
        matched = content.coverage_report.matched_keywords
        covered = set(matched) | set(content.skills)
        job_key = f"{resume.job_title}|{resume.company}"

        for skill in [*matched, *content.coverage_report.missing_keywords, *content.skills]:
            skill = skill.strip()
            if not skill:
                continue
            jobs.setdefault(skill, set()).add(job_key)
            covering.setdefault(skill, set())
            if skill in covered:
                covering[skill].add(resume.id)

    coverages = sorted(
        (
            SkillCoverage(
                skill=skill,
                jobs_mentioned=len(job_keys),
                resumes_covering=len(covering[skill]),
                coverage_percent=round(len(covering[skill]) / len(job_keys) * 100),
                category=categorize_skill(skill),
            )
            for skill, job_keys in jobs.items()
        ),
        key=lambda c: c.jobs_mentioned,
        reverse=True,
    )
    gaps = [
        c for c in coverages if c.coverage_percent < GAP_COVERAGE_THRESHOLD and c.jobs_mentioned >= GAP_MIN_JOBS
    ][:MAX_GAPS]
    average = round(sum(c.coverage_percent for c in coverages) / len(coverages)) if coverages else 0

    return SkillsInsights(
        top_requested_skills=coverages[:TOP_SKILLS],
        missing_skills=gaps,
        learning_roadmap=learning_roadmap(gaps),
        stats=InsightStats(
            total_jobs_analyzed=len({f"{r.job_title}|{r.company}" for r in resumes}),
            total_resumes_generated=len(resumes),
            average_coverage=average,
        ),
    )


def get_skills_insights(storage: Storage, user_id: str | None = None) -> SkillsInsights:
    key = ("skills", user_id)
    if key not in _insights_cache:
        _insights_cache[key] = _compute_skills_insights(storage, user_id)
        logger.info("Computed skills insights for %s", user_id or "all users")
    return _insights_cache[key].model_copy(deep=True)


def _average(scores: list[int | None]) -> int:
    return round(sum(score or 0 for score in scores) / len(scores)) if scores else 0


def _compute_analytics(storage: Storage, user_id: str | None) -> ResumeAnalytics:
    resumes = storage.get_tailored_resumes(user_id)
    applied = [r for r in resumes if r.applied_to_job]
    responded = [r for r in resumes if r.response_received]
    stats = storage.get_application_stats(user_id)

    return ResumeAnalytics(
        total_versions=len(resumes),
        applied_count=len(applied),
        responses_received=len(responded),
        response_rate=round(len(responded) / len(applied) * 100) if applied else 0,
        average_ats_score=_average([r.ats_score for r in resumes]),
        avg_ats_score_with_responses=_average([r.ats_score for r in responded]),
        versions_with_responses=[
            RespondedVersion(
                id=r.id,
                job_title=r.job_title,
                company=r.company,
                ats_score=r.ats_score,
                response_date=r.response_date.isoformat() if r.response_date else None,
            )
            for r in responded
        ],
        conversion_funnel=ConversionFunnel(
            saved=len(resumes), applied=len(applied), interviews=stats.interviews, offers=stats.offers
        ),
    )


def get_tailored_resume_analytics(storage: Storage, user_id: str | None = None) -> ResumeAnalytics:
    key = ("analytics", user_id)
    if key not in _insights_cache:
        _insights_cache[key] = _compute_analytics(storage, user_id)
    return _insights_cache[key].model_copy(deep=True)
