"""
Contact Extractor.

Pulls the candidate's own contact details out of resume text.
"""

from langchain_core.language_models import BaseChatModel

from resume_tailor.agents.llm import analysis_step, invoke_json
from resume_tailor.agents.results import ContactInformation
from resume_tailor.utils.parser import as_str

CONTACT_SYSTEM_PROMPT = (
    "You are an expert at extracting contact information from resumes. "
    "Only return information that is explicitly stated in the document."
)

CONTACT_PROMPT = """Extract ONLY the actual contact information from this resume.

## Resume
{resume_text}

## Output Format (JSON object only)
- name: the person's real full name, never a placeholder
- title: their professional title as written in the resume
- phone: phone number
- email: email address
- city: city
- state: state or province
- linkedin: LinkedIn profile URL or username

## Rules
- Do not invent or assume anything
- Use an empty string for any field not present in the resume
"""


def normalize_contact(data: dict) -> ContactInformation:
    return ContactInformation(**{field: as_str(data.get(field)) for field in ContactInformation.model_fields})


def extract_contact_information(resume_text: str, llm: BaseChatModel | None = None) -> ContactInformation:
    with analysis_step("extract contact information"):
        data = invoke_json(CONTACT_SYSTEM_PROMPT, CONTACT_PROMPT.format(resume_text=resume_text), llm)
        return normalize_contact(data)
