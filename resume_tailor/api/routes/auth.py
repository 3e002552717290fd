"""Login, logout and registration endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request

from resume_tailor.api.deps import SESSION_USER_KEY, require_auth
from resume_tailor.api.schemas import Credentials, MessageResponse, UserResponse
from resume_tailor.services.accounts import authenticate, register_user
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import User

router = APIRouter()


@router.post("/register", response_model=UserResponse)
def register(request: Request, data: Credentials, storage: Storage = Depends(get_storage)):
    """Create an account and log in as it."""
    user = register_user(storage, data.username, data.password)
    request.session[SESSION_USER_KEY] = user.id
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
def login(request: Request, data: Credentials, storage: Storage = Depends(get_storage)):
    user = authenticate(storage, data.username, data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    request.session[SESSION_USER_KEY] = user.id
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request):
    request.session.clear()
    return MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=UserResponse)
def current_user(user: User = Depends(require_auth)):
    """Get the logged-in user."""
    return UserResponse.model_validate(user)
