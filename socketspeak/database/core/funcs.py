"""
Identity store operations: signup, login, profile lookup and update, and
email search.

Functions return detached `User` entities (sessions use
`expire_on_commit=False`) and raise `errors.ChatServiceError` subclasses that
the API layer turns into structured responses.
"""

import logging
import re
import uuid

import bcrypt

from socketspeak.database.core import errors
from socketspeak.database.core.db import get_session
from socketspeak.database.daos import UserDao
from socketspeak.database.entities import User

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_user(full_name: str, email: str, password: str) -> User:
    """
    Register a new account.

    The new user receives a random private key with `private_key_set=False`,
    so anyone may open a conversation with them until they choose a key.

    Raises
    ------
    errors.ValidationError
        Missing fields, malformed email, short password or duplicate email.
    """
    full_name = (full_name or "").strip()
    email = (email or "").strip().lower()
    if not full_name or not email or not password:
        raise errors.ValidationError("All fields are required")
    if not EMAIL_PATTERN.match(email):
        raise errors.ValidationError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise errors.ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    with get_session() as session:
        if UserDao.get_by_email(session, email) is not None:
            raise errors.ValidationError("Email already exists")
        user = UserDao.create(session, full_name=full_name, email=email, password_hash=hash_password(password))
    log.info("Created user %s", user.id)
    return user


def authenticate_user(email: str, password: str) -> User:
    """Return the user matching the credentials or raise `AuthenticationError`."""
    with get_session() as session:
        user = UserDao.get_by_email(session, (email or "").strip())
    if user is None or not check_password(password or "", user.password):
        raise errors.AuthenticationError("Invalid credentials")
    return user


def get_user(user_id: uuid.UUID) -> User:
    with get_session() as session:
        user = UserDao.get_by_id(session, user_id)
    if user is None:
        raise errors.NotFound("User not found")
    return user


def update_profile(user_id: uuid.UUID, full_name: str | None = None, profile_pic_url: str | None = None) -> User:
    """Update display data. `profile_pic_url` must already be hosted."""
    if full_name is not None:
        full_name = full_name.strip()
        if not full_name:
            raise errors.ValidationError("Full name cannot be empty")
    if full_name is None and profile_pic_url is None:
        raise errors.ValidationError("Nothing to update")

    with get_session() as session:
        user = UserDao.get_by_id(session, user_id)
        if user is None:
            raise errors.NotFound("User not found")
        return UserDao.update_profile(session, user, full_name=full_name, profile_pic=profile_pic_url)


def search_users_by_email(term: str | None, exclude_id: uuid.UUID) -> list[User]:
    """Users whose email contains `term` (case-insensitive), without the caller."""
    term = (term or "").strip()
    if not term:
        raise errors.ValidationError("Email query parameter is required")
    with get_session() as session:
        return UserDao.search_by_email(session, term, exclude_id=exclude_id)
