"""User management endpoints for admins."""

from fastapi import APIRouter, Depends

from resume_tailor.api.deps import require_admin
from resume_tailor.api.schemas import AdminUserUpdate, MessageResponse, UserResponse
from resume_tailor.services import accounts
from resume_tailor.storage import Storage, get_storage
from resume_tailor.storage.records import User

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
def list_users(admin: User = Depends(require_admin), storage: Storage = Depends(get_storage)):
    return [UserResponse.model_validate(u) for u in storage.list_users()]


@router.patch("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    data: AdminUserUpdate,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """Grant or revoke admin access, or reset a password."""
    user = accounts.update_user(storage, user_id, admin.id, is_admin=data.is_admin, password=data.password)
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: str, admin: User = Depends(require_admin), storage: Storage = Depends(get_storage)):
    accounts.delete_user(storage, user_id, admin.id)
    return MessageResponse(message="User deleted")
