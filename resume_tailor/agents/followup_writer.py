"""
Follow-up Writer.

Drafts follow-up emails for a job application. Emails are returned for the
user to send; nothing is delivered from here.
"""

from langchain_core.language_models import BaseChatModel

from resume_tailor.agents.llm import analysis_step, invoke_json
from resume_tailor.agents.results import ContactInformation, FollowUpEmail, TailoredContent
from resume_tailor.utils.parser import as_str

FOLLOW_UP_SYSTEM_PROMPT = (
    "You are an expert career coach specializing in professional follow-up communication. "
    "Write personalized, effective emails that stand out without being pushy."
)

ONE_WEEK_PROMPT = """Write a professional 1-week follow-up email for a job application.

## Job
- Position: {job_title}
- Company: {company}
{applicant}
It has been about one week since the application was sent.

## Output Format (JSON object only)
- subject: concise, professional subject line
- body: 3-4 short paragraphs, under 150 words

## Rules
- Reference the position and company, reiterate genuine interest
- Offer additional information and end with a clear next step
- Warm and professional; never desperate or pushy, no timeline demands
"""

TWO_WEEK_PROMPT = """Write a 2-week follow-up email that leads with something valuable.

## Job
- Position: {job_title}
- Company: {company}
{applicant}{requirements}
It has been two weeks since the application was sent.

## Output Format (JSON object only)
- subject: value-focused subject line, not "checking in"
- body: 4-5 paragraphs, under 200 words

## Rules
- Open with an industry insight, tool recommendation or process idea relevant to the role
- Tie it back to the application and show how the applicant would contribute
- Consultative tone, soft call to action
"""

THANK_YOU_PROMPT = """Write a thank-you email after an interview.

## Job
- Position: {job_title}
- Company: {company}
{applicant}{qualifications}
## Output Format (JSON object only)
- subject: subject line thanking them for the interview
- body: 4-5 paragraphs

## Rules
- Thank them for their time and a specific part of the conversation
- Reinforce one or two points with short STAR examples (situation, task, action, result)
- Connect the applicant's background to their needs and express enthusiasm
"""

PROMPTS = {"1w": ONE_WEEK_PROMPT, "2w": TWO_WEEK_PROMPT, "thank_you": THANK_YOU_PROMPT}


def _build_prompt(
    follow_up_type: str,
    job_title: str,
    company: str,
    contact: ContactInformation | None,
    job_description: str | None,
    tailored: TailoredContent | None,
) -> str:
    if follow_up_type not in PROMPTS:
        raise ValueError(f"Unknown follow-up type: {follow_up_type}")

    applicant = f"- Applicant: {contact.name}\n" if contact and contact.name else ""
    requirements = f"\nJob requirements: {job_description[:500]}...\n" if job_description else ""
    qualifications = f"\nKey qualifications: {', '.join(tailored.keywords[:8])}\n" if tailored else ""
    return PROMPTS[follow_up_type].format(
        job_title=job_title,
        company=company,
        applicant=applicant,
        requirements=requirements,
        qualifications=qualifications,
    )


def generate_follow_up_email(
    follow_up_type: str,
    job_title: str,
    company: str,
    contact: ContactInformation | None = None,
    job_description: str | None = None,
    tailored: TailoredContent | None = None,
    llm: BaseChatModel | None = None,
) -> FollowUpEmail:
    with analysis_step("generate follow-up email"):
        prompt = _build_prompt(follow_up_type, job_title, company, contact, job_description, tailored)
        data = invoke_json(FOLLOW_UP_SYSTEM_PROMPT, prompt, llm)
        return FollowUpEmail(
            subject=as_str(data.get("subject")) or f"Following up on {job_title} position",
            body=as_str(data.get("body")),
        )
