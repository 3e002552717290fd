"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from resume_tailor.agents import AnalysisError
from resume_tailor.api.limiter import limiter
from resume_tailor.config import settings
from resume_tailor.db import init_db
from resume_tailor.logging_config import configure_logging
from resume_tailor.services.accounts import AccountError
from resume_tailor.services.common import NotFoundError, TailoringError
from resume_tailor.storage import uses_database
from resume_tailor.tools.file_parser import FileProcessingError
from resume_tailor.tools.job_scraper import ScrapeError

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and create tables when a database is configured."""
    configure_logging()
    if uses_database():
        init_db()
        logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Resume Tailor API",
    description="Tailor resumes to job postings and track applications",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 with a clear message when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(TailoringError)
@app.exception_handler(AccountError)
@app.exception_handler(FileProcessingError)
@app.exception_handler(ScrapeError)
async def bad_request_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def invalid_update_handler(request: Request, exc: ValidationError):
    """Updates that would leave a record invalid, such as null for a required field."""
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    return JSONResponse(status_code=400, content={"detail": errors})


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    """Model failures are upstream errors."""
    return JSONResponse(status_code=502, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, same_site="lax")


# Import and include routers
from resume_tailor.api.routes import (  # noqa: E402
    admin,
    applications,
    auth,
    followups,
    insights,
    interview,
    jobs,
    resumes,
    sessions,
    tailored,
)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(sessions.router, prefix="/api/sessions", tags=["Sessions"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["Jobs"])
app.include_router(resumes.router, prefix="/api/resumes", tags=["Resumes"])
app.include_router(tailored.router, prefix="/api/tailored-resumes", tags=["Tailored Resumes"])
app.include_router(applications.router, prefix="/api/job-applications", tags=["Job Applications"])
app.include_router(followups.router, prefix="/api/followups", tags=["Follow-ups"])
app.include_router(interview.router, prefix="/api/interview-prep", tags=["Interview Prep"])
app.include_router(insights.router, prefix="/api", tags=["Insights"])


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
