"""Shared route dependencies: storage, chat model and the auth guards."""

from fastapi import Depends, HTTPException, Request
from langchain_core.language_models import BaseChatModel

from resume_tailor.agents import get_chat_model
from resume_tailor.config import settings
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import User

SESSION_USER_KEY = "user_id"

_llm: BaseChatModel | None = None


def get_llm() -> BaseChatModel | None:
    """Process-wide chat model, or None so analysis reports the missing key."""
    global _llm
    if _llm is None and settings.deepseek_api_key:
        _llm = get_chat_model()
    return _llm


def require_auth(request: Request, storage: Storage = Depends(get_storage)) -> User:
    """The logged-in user, or 401."""
    user_id = request.session.get(SESSION_USER_KEY)
    user = storage.get_user(user_id) if user_id else None
    if user is None:
        request.session.pop(SESSION_USER_KEY, None)
        raise HTTPException(status_code=401, detail="Unauthorized. Please log in.")
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """The logged-in admin, 401 when logged out and 403 for other users."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
