"""Rate limiter shared by the model-backed routes."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from resume_tailor.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
