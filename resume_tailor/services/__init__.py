"""Workflow services: request-level glue over storage, analysis and tools."""

from resume_tailor.services.common import NotFoundError, TailoringError

__all__ = ["NotFoundError", "TailoringError"]
