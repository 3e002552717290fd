"""User accounts: registration, password checks and admin management."""

import logging

import bcrypt

from resume_tailor.services.common import require
from resume_tailor.storage import Storage
from resume_tailor.storage.records import User, UserCreate

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
MIN_PASSWORD_LENGTH = 8
# bcrypt ignores everything after 72 bytes
MAX_PASSWORD_LENGTH = 72


class AccountError(Exception):
    """Registration or account update rejected."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False


def check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AccountError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password.encode("utf-8")) > MAX_PASSWORD_LENGTH:
        raise AccountError(f"Password must be at most {MAX_PASSWORD_LENGTH} bytes long")


def register_user(storage: Storage, username: str, password: str) -> User:
    """Create an account. The first account registered becomes an admin."""
    username = username.strip()
    if not username or not password:
        raise AccountError("Username and password are required")
    check_password(password)
    if storage.get_user_by_username(username):
        raise AccountError("Username already exists")

    is_admin = not storage.list_users()
    user = storage.create_user(UserCreate(username=username, password=hash_password(password), is_admin=is_admin))
    logger.info("Registered user %s%s", user.username, " (admin)" if is_admin else "")
    return user


def authenticate(storage: Storage, username: str, password: str) -> User | None:
    """The matching user, or None for an unknown name or wrong password."""
    user = storage.get_user_by_username(username.strip())
    if user is None or not verify_password(password, user.password):
        return None
    return user


def update_user(
    storage: Storage, user_id: str, acting_user_id: str, is_admin: bool | None = None, password: str | None = None
) -> User:
    """Admin update of another account's role or password."""
    require(storage.get_user(user_id), "User not found")
    updates = {}
    if is_admin is not None:
        if user_id == acting_user_id and not is_admin:
            raise AccountError("You cannot remove your own admin access")
        updates["is_admin"] = is_admin
    if password is not None:
        check_password(password)
        updates["password"] = hash_password(password)
    return storage.update_user(user_id, updates)


def delete_user(storage: Storage, user_id: str, acting_user_id: str) -> None:
    if user_id == acting_user_id:
        raise AccountError("You cannot delete your own account")
    require(storage.get_user(user_id), "User not found")
    storage.delete_user(user_id)
    logger.info("Deleted user %s", user_id)
