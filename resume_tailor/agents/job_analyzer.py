"""
Job Analyzer.

Breaks a job description into requirements, ATS keywords, keyword buckets
and quality gates. Length statistics are computed locally.
"""

from langchain_core.language_models import BaseChatModel

from resume_tailor.agents.llm import analysis_step, invoke_json
from resume_tailor.agents.results import KEYWORD_BUCKETS, JobAnalysis, KeywordBuckets, QualityGates
from resume_tailor.utils.parser import as_bool, as_dict, as_str, as_str_list, pick

# Postings shorter than this are flagged as too thin to tailor against
SUFFICIENT_LENGTH = 3000
FIRST_CHARS = 500

JOB_SYSTEM_PROMPT = (
    "You are an expert recruiter performing evidence-based job description analysis. "
    "Classify the role archetype, apply strict quality gates and never pad weak or generic postings."
)

JOB_PROMPT = """Analyze this job description.

## Job Description ({char_count} characters)
{job_description}

## Output Format (JSON object only)
- title: job title
- company: company name, if mentioned
- requirements: key requirements
- keywords: 20-30 important ATS keywords
- skills: technical skills mentioned
- experience: experience requirements
- certifications: certifications mentioned
- technologies: specific technologies and tools mentioned
- role_archetype: short role classification, e.g. "Data Engineer"
- quality_gates: object with
    - sufficient_length: true if the posting has at least 3000 characters
    - role_specific: true if it describes substantial role duties
    - not_generic: true if it is not a generic template posting
- keyword_buckets: object with arrays
    - core_tech: primary platforms and technologies
    - responsibilities: operational duties
    - tools: automation, monitoring and delivery tools
    - adjacent_data_stores: secondary systems and data stores
    - compliance: security and regulatory terms
    - logistics: location, schedule and travel requirements
- synonym_map: object mapping key terms to arrays of synonyms
"""


def _synonyms(value) -> dict[str, list[str]]:
    synonyms = {}
    for term, alternatives in as_dict(value).items():
        if isinstance(alternatives, str):
            synonyms[term] = [alternatives]
        elif isinstance(alternatives, list):
            synonyms[term] = as_str_list(alternatives)
    return synonyms


def normalize_job_analysis(data: dict, job_description: str) -> JobAnalysis:
    char_count = len(job_description)

    buckets = as_dict(pick(data, "keyword_buckets", "keywordBuckets"))
    camel = {"core_tech": "coreTech", "adjacent_data_stores": "adjacentDataStores"}
    gates = as_dict(pick(data, "quality_gates", "qualityGates"))

    return JobAnalysis(
        title=as_str(data.get("title")),
        company=as_str(data.get("company")),
        requirements=as_str_list(data.get("requirements")),
        keywords=as_str_list(data.get("keywords")),
        skills=as_str_list(data.get("skills")),
        experience=as_str_list(data.get("experience")),
        certifications=as_str_list(data.get("certifications")),
        technologies=as_str_list(data.get("technologies")),
        role_archetype=as_str(pick(data, "role_archetype", "roleArchetype")),
        keyword_buckets=KeywordBuckets(
            **{name: as_str_list(pick(buckets, name, camel.get(name))) for name in KEYWORD_BUCKETS}
        ),
        synonym_map=_synonyms(pick(data, "synonym_map", "synonymMap")),
        quality_gates=QualityGates(
            sufficient_length=as_bool(
                pick(gates, "sufficient_length", "sufficientLength"), char_count >= SUFFICIENT_LENGTH
            ),
            role_specific=as_bool(pick(gates, "role_specific", "roleSpecific"), True),
            not_generic=as_bool(pick(gates, "not_generic", "notGeneric"), True),
        ),
        char_count=char_count,
        word_count=len(job_description.split()),
        first_chars=job_description[:FIRST_CHARS],
    )


def analyze_job_posting(job_description: str, llm: BaseChatModel | None = None) -> JobAnalysis:
    with analysis_step("analyze job posting"):
        prompt = JOB_PROMPT.format(char_count=len(job_description), job_description=job_description)
        data = invoke_json(JOB_SYSTEM_PROMPT, prompt, llm)
        return normalize_job_analysis(data, job_description)
