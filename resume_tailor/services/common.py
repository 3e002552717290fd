"""Errors and ownership checks shared by the workflow services."""

from typing import TypeVar

R = TypeVar("R")


class NotFoundError(Exception):
    """A record does not exist or belongs to another user."""


class TailoringError(Exception):
    """A workflow step was requested before its inputs exist."""


def owned(record: R | None, user_id: str | None) -> R | None:
    """Hide records that belong to a different user."""
    if record is None:
        return None
    if user_id is not None and getattr(record, "user_id", None) not in (None, user_id):
        return None
    return record


def require(record: R | None, message: str, user_id: str | None = None) -> R:
    """Return the record when visible to ``user_id`` or raise ``NotFoundError``."""
    record = owned(record, user_id)
    if record is None:
        raise NotFoundError(message)
    return record
