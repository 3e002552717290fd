"""
Job posting scraper.

Fetches a posting page with httpx and converts the HTML to markdown.
"""

import logging
import re
from urllib.parse import urlparse

import httpx
from markdownify import markdownify
from pydantic import BaseModel

from resume_tailor.config import settings

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 20000

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Local vocabulary scanned in every posting, merged with the model keywords
JOB_KEYWORDS = [
    "Python", "Java", "JavaScript", "TypeScript", "Golang", "C#", "SQL", "T-SQL",
    "SQL Server", "PostgreSQL", "MySQL", "Oracle", "MongoDB", "Redis", "Snowflake",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Terraform", "Ansible",
    "CI/CD", "Git", "Linux", "PowerShell", "REST API", "GraphQL", "Microservices",
    "Machine Learning", "Data Engineering", "ETL", "Airflow", "Spark",
    "Performance Tuning", "Query Optimization", "High Availability", "Disaster Recovery",
    "Backup", "Replication", "Monitoring", "Security", "Compliance", "HIPAA", "SOX",
    "Agile", "Scrum", "Leadership", "Troubleshooting",
]


class ScrapeError(Exception):
    """A job posting URL could not be fetched."""


class ScrapedJob(BaseModel):
    url: str
    title: str = ""
    description: str


def _page_title(html: str) -> str:
    match = re.search(r"<title[^>]*>(.*?)</title>", html, re.IGNORECASE | re.DOTALL)
    return re.sub(r"\s+", " ", match.group(1)).strip() if match else ""


def scrape_job_posting(url: str, timeout: float | None = None) -> ScrapedJob:
    """
    Fetch a job posting and return its content as markdown.

    Raises:
        ScrapeError: invalid URL, HTTP failure or an empty page
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ScrapeError(f"Invalid job URL: {url}")

    try:
        with httpx.Client(timeout=timeout or settings.scrape_timeout, follow_redirects=True) as client:
            response = client.get(url, headers={"User-Agent": USER_AGENT})
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ScrapeError(f"Failed to scrape job posting: HTTP error {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise ScrapeError(f"Failed to scrape job posting: {e}") from e

    html = re.sub(r"<(script|style)\b[^>]*>.*?</\1>", "", response.text, flags=re.IGNORECASE | re.DOTALL)
    markdown = markdownify(html).strip()
    markdown = re.sub(r"\n{3,}", "\n\n", markdown)
    if not markdown:
        raise ScrapeError(f"No content extracted from: {url}")

    # Truncate if too long
    if len(markdown) > MAX_CONTENT_LENGTH:
        markdown = markdown[:MAX_CONTENT_LENGTH]

    logger.info("Scraped %d characters from %s", len(markdown), url)
    return ScrapedJob(url=url, title=_page_title(response.text), description=markdown)


def extract_job_keywords(description: str) -> list[str]:
    """Vocabulary terms that appear in the description, in vocabulary order."""
    text = description.lower()
    found = []
    for keyword in JOB_KEYWORDS:
        pattern = r"(?<![\w])" + re.escape(keyword.lower()) + r"(?![\w])"
        if re.search(pattern, text) and keyword not in found:
            found.append(keyword)
    return found


def merge_keywords(*groups: list[str]) -> list[str]:
    """Order-preserving union, de-duplicated case-insensitively."""
    seen = set()
    merged = []
    for group in groups:
        for keyword in group:
            key = keyword.strip().lower()
            if key and key not in seen:
                seen.add(key)
                merged.append(keyword.strip())
    return merged
