"""
Access-Gate: who may open a conversation.

The first message from a sender to a receiver needs the receiver's private
key when the receiver has chosen one (`private_key_set`). Once a pair has
exchanged any message, the gate no longer applies to either direction.

Keys are compared in plain text after trimming surrounding whitespace on both
sides; the comparison is case-sensitive. The checks are pure: nothing is
mutated and attempts are not counted.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.orm import Session

from socketspeak.database.core import errors
from socketspeak.database.core.db import get_session
from socketspeak.database.daos import MessageDao, UserDao
from socketspeak.database.entities import User

log = logging.getLogger(__name__)

INVALID_KEY_MESSAGE = (
    "Invalid private key. You need the correct private key to start a conversation with this user."
)


@dataclass(frozen=True)
class UserWithVerifiedKey:
    """A user together with the canonical key a client just proved it knows."""

    user: User
    key: str


def keys_match(candidate: str | None, stored: str | None) -> bool:
    if candidate is None or stored is None:
        return False
    return str(candidate).strip() == str(stored).strip()


def check_first_contact(session: Session, sender_id: uuid.UUID, receiver: User, candidate: str | None) -> None:
    """
    Raise `Unauthorized` (with `requiresKey=True`) when `sender_id` may not
    open a conversation with `receiver` using `candidate`.
    """
    if MessageDao.exists_between(session, sender_id, receiver.id):
        return
    if not receiver.private_key_set:
        return
    if not keys_match(candidate, receiver.private_key):
        log.info("First contact %s -> %s rejected: key mismatch", sender_id, receiver.id)
        raise errors.Unauthorized(INVALID_KEY_MESSAGE, requiresKey=True)
    log.debug("First contact %s -> %s accepted", sender_id, receiver.id)


def verify_private_key(user_id: uuid.UUID, candidate: str | None) -> UserWithVerifiedKey:
    """
    Check `candidate` against the current key of `user_id`, independently of
    sending, so a client can validate a key before composing a message.

    Returns
    -------
    UserWithVerifiedKey
        The user and the stored key (trimmed), for the client to cache.

    Raises
    ------
    errors.ValidationError
        No candidate key supplied.
    errors.NotFound
        Unknown user.
    errors.Unauthorized
        The key does not match.
    """
    if candidate is None or not str(candidate).strip():
        raise errors.ValidationError("Private key is required", isValid=False)

    with get_session() as session:
        user = UserDao.get_by_id(session, user_id)
    if user is None:
        raise errors.NotFound("User not found", isValid=False)
    if not keys_match(candidate, user.private_key):
        log.info("Private key verification failed for user %s", user_id)
        raise errors.Unauthorized(INVALID_KEY_MESSAGE, isValid=False)
    return UserWithVerifiedKey(user=user, key=user.private_key.strip())
