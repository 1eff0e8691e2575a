"""Private key rotation: set a chosen key or generate a random one."""

import logging
import uuid

from socketspeak.database.core import errors
from socketspeak.database.core.db import get_session
from socketspeak.database.daos import UserDao
from socketspeak.database.entities import User, generate_private_key

log = logging.getLogger(__name__)

MIN_PRIVATE_KEY_LENGTH = 4


def set_private_key(user_id: uuid.UUID, private_key: str | None) -> User:
    """
    Store a key chosen by its owner and mark it as explicitly set.

    Surrounding whitespace is dropped before the length check and before storing,
    matching how keys are compared. Previous keys are not kept, so a copy of the old
    key shared out of band stops working for future first contacts.
    """
    private_key = (private_key or "").strip()
    if len(private_key) < MIN_PRIVATE_KEY_LENGTH:
        raise errors.ValidationError(f"Private key must be at least {MIN_PRIVATE_KEY_LENGTH} characters")

    with get_session() as session:
        user = UserDao.get_by_id(session, user_id)
        if user is None:
            raise errors.NotFound("User not found")
        user = UserDao.update_private_key(session, user, private_key)
    log.info("Private key set for user %s", user_id)
    return user


def rotate_private_key(user_id: uuid.UUID) -> User:
    """Replace the key with a fresh random one and mark it as explicitly set."""
    with get_session() as session:
        user = UserDao.get_by_id(session, user_id)
        if user is None:
            raise errors.NotFound("User not found")
        user = UserDao.update_private_key(session, user, generate_private_key())
    log.info("Private key rotated for user %s", user_id)
    return user
