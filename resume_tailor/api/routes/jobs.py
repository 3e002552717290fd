"""Job posting endpoints."""

from fastapi import APIRouter, Depends

from resume_tailor.api.deps import require_auth
from resume_tailor.services.common import require
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import JobPosting, User

router = APIRouter()


@router.get("/{posting_id}", response_model=JobPosting)
def get_job_posting(posting_id: str, user: User = Depends(require_auth), storage: Storage = Depends(get_storage)):
    """Get a scraped job posting."""
    return require(storage.get_job_posting_by_id(posting_id), "Job posting not found")
