"""
Resume file parsing.

Extracts plain text from uploaded PDF (pypdf) and DOCX (python-docx) files.
"""

import json
from io import BytesIO
from pathlib import Path
from typing import Any

from docx import Document
from pydantic import BaseModel
from pypdf import PdfReader

from resume_tailor.config import settings

ALLOWED_EXTENSIONS = (".pdf", ".docx")
PROFILE_REQUIRED_FIELDS = ("personalInfo", "experience", "skills")


class FileProcessingError(Exception):
    """An uploaded file could not be turned into resume text."""


class ProcessedResume(BaseModel):
    text: str
    filename: str
    file_type: str
    file_size: int


def parse_pdf(content: bytes) -> str:
    """Extract text from all pages of a PDF."""
    reader = PdfReader(BytesIO(content))
    text_parts = []

    for page in reader.pages:
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)

    return "\n\n".join(text_parts)


def parse_docx(content: bytes) -> str:
    """Extract non-empty paragraph text from a DOCX document."""
    doc = Document(BytesIO(content))
    parts = [p.text.strip() for p in doc.paragraphs if p.text and p.text.strip()]
    return "\n".join(parts)


def process_resume_file(filename: str, content: bytes, max_size: int | None = None) -> ProcessedResume:
    """
    Validate an uploaded resume and extract its text.

    Raises:
        FileProcessingError: unsupported extension, oversize or unreadable file
    """
    max_size = max_size if max_size is not None else settings.max_upload_size
    extension = Path(filename or "").suffix.lower()

    if extension not in ALLOWED_EXTENSIONS:
        raise FileProcessingError("Only PDF and DOCX files are allowed")
    if len(content) > max_size:
        raise FileProcessingError(f"File exceeds the {max_size // (1024 * 1024)}MB limit")

    try:
        text = parse_pdf(content) if extension == ".pdf" else parse_docx(content)
    except Exception as e:
        raise FileProcessingError(f"Failed to process resume file: {e}") from e

    return ProcessedResume(text=text, filename=filename, file_type=extension[1:], file_size=len(content))


def validate_profile_json(profile: str | dict[str, Any]) -> dict[str, Any]:
    """
    Check a structured profile has the required top-level sections.

    Raises:
        FileProcessingError: invalid JSON or a missing section
    """
    if isinstance(profile, str):
        try:
            profile = json.loads(profile)
        except json.JSONDecodeError as e:
            raise FileProcessingError(f"Invalid profile JSON: {e}") from e

    if not isinstance(profile, dict):
        raise FileProcessingError("Invalid profile JSON: expected an object")

    for field in PROFILE_REQUIRED_FIELDS:
        if not profile.get(field):
            raise FileProcessingError(f"Invalid profile JSON: Missing required field: {field}")

    return profile
