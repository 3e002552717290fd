"""Logging setup shared by the API and the CLI."""

import logging

from resume_tailor.config import settings


def configure_logging(level: str | None = None) -> None:
    """
    Configure the root logger once.

    Console only, level from LOG_LEVEL unless given explicitly.
    Calling it again is a no-op.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
