"""File parsing, job scraping and document rendering."""

from resume_tailor.tools.documents import render_document, resume_basename
from resume_tailor.tools.file_parser import FileProcessingError, process_resume_file, validate_profile_json
from resume_tailor.tools.job_scraper import ScrapeError, extract_job_keywords, scrape_job_posting

__all__ = [
    "FileProcessingError",
    "process_resume_file",
    "validate_profile_json",
    "ScrapeError",
    "scrape_job_posting",
    "extract_job_keywords",
    "render_document",
    "resume_basename",
]
