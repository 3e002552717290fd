"""Model-backed analysis functions."""

from resume_tailor.agents.contact_extractor import extract_contact_information
from resume_tailor.agents.followup_writer import generate_follow_up_email
from resume_tailor.agents.interview_coach import explain_skills, generate_interview_questions, generate_star_stories
from resume_tailor.agents.job_analyzer import analyze_job_posting
from resume_tailor.agents.llm import AnalysisError, get_chat_model
from resume_tailor.agents.match_scorer import analyze_resume_match
from resume_tailor.agents.resume_writer import tailor_resume_content

__all__ = [
    "AnalysisError",
    "get_chat_model",
    "extract_contact_information",
    "analyze_job_posting",
    "analyze_resume_match",
    "tailor_resume_content",
    "generate_follow_up_email",
    "generate_interview_questions",
    "explain_skills",
    "generate_star_stories",
]
